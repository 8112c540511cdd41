"""Pydantic models for the flash-loan execution message.

Field names follow the CosmWasm JSON the flash-loan and pair contracts
accept (`offer_asset`, `ask_asset_info`, `belief_price`, `max_spread`).
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from flashroute.models.types import Amount, DecimalString, PoolId


class NativeToken(BaseModel):
    denom: str


class ContractToken(BaseModel):
    contract_addr: str


class AssetInfo(BaseModel):
    """Either a native denom or a contract token; exactly one side is set."""

    native_token: NativeToken | None = None
    token: ContractToken | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> AssetInfo:
        if (self.native_token is None) == (self.token is None):
            raise ValueError("AssetInfo needs exactly one of native_token or token")
        return self

    @classmethod
    def native(cls, denom: str) -> AssetInfo:
        return cls(native_token=NativeToken(denom=denom))

    @classmethod
    def contract(cls, address: str) -> AssetInfo:
        return cls(token=ContractToken(contract_addr=address))

    @property
    def identifier(self) -> str:
        """The denom or contract address this info refers to."""
        if self.native_token is not None:
            return self.native_token.denom
        assert self.token is not None
        return self.token.contract_addr

    @property
    def is_native(self) -> bool:
        return self.native_token is not None


class Asset(BaseModel):
    info: AssetInfo
    amount: Amount


class Swap(BaseModel):
    """Swap instruction sent to a pair contract."""

    offer_asset: Asset
    ask_asset_info: AssetInfo
    belief_price: DecimalString
    max_spread: DecimalString


class SwapMsg(BaseModel):
    swap: Swap


class Coin(BaseModel):
    denom: str
    amount: Amount


class WasmExecute(BaseModel):
    contract_addr: str
    msg: str = Field(description="Base64-encoded JSON of the contract message")
    funds: list[Coin] = Field(default_factory=list)


class ExecuteWrapper(BaseModel):
    execute: WasmExecute


class WasmMsg(BaseModel):
    wasm: ExecuteWrapper

    @property
    def contract_addr(self) -> str:
        return self.wasm.execute.contract_addr


class FlashLoan(BaseModel):
    assets: list[Asset]
    msgs: list[WasmMsg]


class FlashLoanMessage(BaseModel):
    """Top-level message for the flash-loan contract."""

    flash_loan: FlashLoan

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(exclude_none=True, indent=indent)


class HopQuote(BaseModel):
    """Computed figures for one executed hop."""

    pool_id: PoolId
    contract_address: str
    offer_denom: str
    offer_amount: Amount
    ask_denom: str
    expected_amount: Amount
    fee: DecimalString
    fee_fallback: bool = Field(
        default=False, description="True when the oracle failed and the fallback fee was applied."
    )
    belief_price: DecimalString


class ExecutionPlan(BaseModel):
    """A complete, profitable flash-loan plan."""

    contract_address: str = Field(
        description="Flash-loan contract the message is executed against"
    )
    loan_denom: str
    loan_amount: Amount
    message: FlashLoanMessage
    hops: list[HopQuote]
    expected_return: Amount
    profit: int = Field(description="Expected return minus loan, in reference base units")
    viable: bool

    @property
    def used_fallback_fee(self) -> bool:
        return any(hop.fee_fallback for hop in self.hops)
