"""Chain constants for the Osmosis deployment.

Centralizes well-known denoms and contract addresses.
"""

from flashroute.models.types import (
    FEE_ERROR,
    FEE_INVALID_POOL,
    FEE_NOT_AVAILABLE,
    POOL_ID_UNKNOWN,
    is_valid_denom,
)


def _validate_denom(name: str, denom: str) -> str:
    """Validate and return a denom or contract address.

    Args:
        name: Name of the token (for error messages)
        denom: The denom to validate

    Returns:
        The validated denom

    Raises:
        ValueError: If the denom is malformed
    """
    if not is_valid_denom(denom):
        raise ValueError(f"Invalid {name} denom: {denom}")
    return denom


# Reference asset: the flash loan is always denominated in it
REFERENCE_DENOM = _validate_denom("OSMO", "uosmo")
REFERENCE_SYMBOL = "OSMO"
REFERENCE_DECIMALS = 6

# White Whale flash-loan contract on Osmosis
FLASH_LOAN_CONTRACT = "osmo1javcdeqdnlujsrl4kduwfcs2cw5hd4jz9vh2wdpqyz6kp2tn8e9qt0rz8g"

# Well-known IBC denoms (all validated at import time)
WBTC = _validate_denom("WBTC", "ibc/D1542AA8762DB13087D8364F3EA6509FD6F009A34F00426AF9E4F9FA85CBBF1F")
ATOM = _validate_denom("ATOM", "ibc/46B44899322F3CD854D2D46DEEF881958467CDD4B3B10086DA49296BBED94BED")
IST = _validate_denom("IST", "ibc/1480B8FD20AD5FCAE81EA87584D269547DD4D436843C1D20F15E00EB64743EF4")
DAI = _validate_denom("DAI", "ibc/903A61A498756EA560B85A85132D3AEE21B5DEDD41213725D22ABF276EA6945E")
USDC = _validate_denom("USDC", "ibc/64BA6E31FE887D66C6F8F31C7B1A80C7CA179239677B4088BB55F5EA07DBE273")
STATOM = _validate_denom(
    "stATOM", "ibc/C140AFD542AE77BD7DCC83F13FDD8C5E5BB8C4929785E6EC2F4C636F98F17901"
)
USDC_AXL = _validate_denom(
    "USDC.axl", "ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2"
)
OM = _validate_denom("OM", "ibc/164807F6226F91990F358C6467EEE8B162E437BDCD3DADEC3F0CE20693720795")
LAB = _validate_denom("LAB", "factory/osmo17fel472lgzs87ekt9dvk0zqyh5gl80sqp4sk4n/LAB")

# Tokens scanned when the user has not edited the watchlist
DEFAULT_WATCHLIST: tuple[str, ...] = (
    WBTC,
    LAB,
    "ibc/D79E7D83AB399BFFF93433E54FAA480C191248FC556924A2A8351AE2638B3877",
    "ibc/EC3A4ACBA1CFBEE698472D3563B70985AEA5A7144C319B61B3EBDFB57B5E1535",
    ATOM,
    IST,
    DAI,
    USDC,
    STATOM,
    USDC_AXL,
)

# Assets whose precision differs from the chain default; neither source reports decimals
KNOWN_DECIMALS: dict[str, int] = {
    WBTC: 8,
    DAI: 18,
}


def token_decimals(address: str, default: int = REFERENCE_DECIMALS) -> int:
    """Decimal precision of a token, falling back to the chain default."""
    return KNOWN_DECIMALS.get(address, default)


__all__ = [
    "ATOM",
    "DAI",
    "DEFAULT_WATCHLIST",
    "FEE_ERROR",
    "FEE_INVALID_POOL",
    "FEE_NOT_AVAILABLE",
    "FLASH_LOAN_CONTRACT",
    "IST",
    "KNOWN_DECIMALS",
    "LAB",
    "OM",
    "POOL_ID_UNKNOWN",
    "REFERENCE_DECIMALS",
    "REFERENCE_DENOM",
    "REFERENCE_SYMBOL",
    "STATOM",
    "USDC",
    "USDC_AXL",
    "WBTC",
    "token_decimals",
]
