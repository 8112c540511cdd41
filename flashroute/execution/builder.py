"""Execution plan construction.

Turns a fully resolved route into a flash-loan message: the loan of the
reference asset plus one base64 swap instruction per hop, each targeted at
the hop's pool contract. Amounts flow hop to hop in integer base units.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.execution.encoding import encode_swap_msg
from flashroute.execution.errors import (
    MissingContractError,
    NotProfitableError,
    PoolIdentifierError,
    PriceInvalidError,
    TokenMismatchError,
    UnresolvedHopError,
    ZeroAmountError,
)
from flashroute.execution.pricing import belief_price, format_price, swap_output
from flashroute.fees.oracle import FeeSource
from flashroute.fees.result import FeeLookup
from flashroute.models.execution import (
    Asset,
    AssetInfo,
    Coin,
    ExecuteWrapper,
    ExecutionPlan,
    FlashLoan,
    FlashLoanMessage,
    HopQuote,
    Swap,
    SwapMsg,
    WasmExecute,
    WasmMsg,
)
from flashroute.models.pool import Pool, Token
from flashroute.models.types import format_decimal, is_numeric_pool_id, parse_decimal
from flashroute.routing.types import HopPlan, PlannedRoute
from flashroute.sources.catalog import CatalogCache

logger = structlog.get_logger()


class ExecutionPlanBuilder:
    """Builds flash-loan execution plans for planned routes.

    Args:
        fee_oracle: Source of per-pool swap fees
        catalog: Catalog used to resolve pool contracts the unified pool lacks
        config: Loan amount, slippage tolerance and fallback fee
    """

    def __init__(
        self,
        fee_oracle: FeeSource,
        catalog: CatalogCache | None = None,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    ) -> None:
        self._fees = fee_oracle
        self._catalog = catalog
        self._config = config

    def asset_info(self, token: Token) -> AssetInfo:
        """Contract tokens are cw20 `token` assets, everything else is native."""
        if self._config.is_contract_address(token.address):
            return AssetInfo.contract(token.address)
        return AssetInfo.native(token.address)

    async def build(self, route: PlannedRoute) -> ExecutionPlan:
        """Build and check the execution plan of a route.

        Args:
            route: Planned route; every hop must be resolved

        Returns:
            ExecutionPlan whose expected return strictly exceeds the loan

        Raises:
            UnresolvedHopError: If any hop lacks a pool or token
            PoolIdentifierError: If a pool id is not numeric
            PriceInvalidError: If a pool price is missing or not positive
            TokenMismatchError: If a pool does not trade the hop's tokens
            MissingContractError: If a pool contract cannot be resolved
            ZeroAmountError: If an intermediate amount floors to zero
            NotProfitableError: If the return does not exceed the loan
        """
        if not route.is_complete:
            raise UnresolvedHopError(route.unresolved_hops or list(range(1, route.hop_count + 1)))

        prices = [self._price(i, hop) for i, hop in enumerate(route.hops, start=1)]
        pools = [hop.pool for hop in route.hops]
        assert all(p is not None for p in pools)

        contracts, raw_fees = await asyncio.gather(
            asyncio.gather(*(self._contract_for(p) for p in pools if p is not None)),
            self._fees.get_fees(p.pool_id for p in pools if p is not None),
        )

        slippage = self._config.slippage_tolerance
        loan = self._config.loan_amount
        amount = loan
        msgs: list[WasmMsg] = []
        quotes: list[HopQuote] = []

        for i, (hop, price, contract) in enumerate(
            zip(route.hops, prices, contracts, strict=True), start=1
        ):
            assert hop.pool is not None and hop.offer is not None and hop.ask is not None
            pool = hop.pool
            offering_base = self._offering_base(i, pool, hop.offer, hop.ask)

            lookup = FeeLookup(raw_fees.get(pool.pool_id, ""))
            fee = lookup.applied(self._config.fallback_fee)
            if lookup.is_fallback:
                logger.warning(
                    "fee_fallback_used",
                    step=i,
                    pool_id=pool.pool_id,
                    raw=lookup.raw,
                    fallback=str(fee),
                )

            out = swap_output(
                amount,
                hop.offer.decimals,
                hop.ask.decimals,
                price,
                offering_base,
                fee,
                slippage,
            )
            if out == 0:
                raise ZeroAmountError(f"Step {i} calc resulted in zero amount.")

            belief = format_price(belief_price(price, offering_base, slippage))
            msgs.append(self._swap_instruction(contract, hop.offer, hop.ask, amount, belief))
            quotes.append(
                HopQuote(
                    pool_id=pool.pool_id,
                    contract_address=contract,
                    offer_denom=hop.offer.address,
                    offer_amount=str(amount),
                    ask_denom=hop.ask.address,
                    expected_amount=str(out),
                    fee=format_decimal(fee),
                    fee_fallback=lookup.is_fallback,
                    belief_price=belief,
                )
            )
            amount = out

        profit = amount - loan
        logger.info(
            "profit_check",
            topology=route.topology,
            expected_return=amount,
            loan=loan,
            profit=profit,
        )
        if amount <= loan:
            raise NotProfitableError(amount, loan)

        message = FlashLoanMessage(
            flash_loan=FlashLoan(
                assets=[
                    Asset(
                        info=AssetInfo.native(self._config.reference_denom),
                        amount=str(loan),
                    )
                ],
                msgs=msgs,
            )
        )
        return ExecutionPlan(
            contract_address=self._config.flash_loan_contract,
            loan_denom=self._config.reference_denom,
            loan_amount=str(loan),
            message=message,
            hops=quotes,
            expected_return=str(amount),
            profit=profit,
            viable=True,
        )

    def _price(self, step: int, hop: HopPlan) -> Decimal:
        assert hop.pool is not None
        if not is_numeric_pool_id(hop.pool.pool_id):
            raise PoolIdentifierError(f"Step {step} pool id '{hop.pool.pool_id}' is not numeric.")
        price = parse_decimal(hop.pool.price_native)
        if price is None or price <= 0:
            raise PriceInvalidError(
                f"Step {step} pool {hop.pool.pool_id} price invalid for execution."
            )
        return price

    def _offering_base(self, step: int, pool: Pool, offer: Token, ask: Token) -> bool:
        if pool.base.address == offer.address and pool.quote.address == ask.address:
            return True
        if pool.quote.address == offer.address and pool.base.address == ask.address:
            return False
        raise TokenMismatchError(
            f"Step {step} pool {pool.pool_id} ({pool.name}) does not trade "
            f"{offer.symbol or offer.address} for {ask.symbol or ask.address}."
        )

    async def _contract_for(self, pool: Pool) -> str:
        if pool.contract_address:
            return pool.contract_address
        address = None
        if self._catalog is not None:
            address = await self._catalog.contract_address(pool.pool_id)
        if not address:
            raise MissingContractError(f"Pool {pool.pool_id} has no known contract address.")
        return address

    def _swap_instruction(
        self, contract: str, offer: Token, ask: Token, amount: int, belief: str
    ) -> WasmMsg:
        offer_info = self.asset_info(offer)
        swap = SwapMsg(
            swap=Swap(
                offer_asset=Asset(info=offer_info, amount=str(amount)),
                ask_asset_info=self.asset_info(ask),
                belief_price=belief,
                max_spread=format_decimal(self._config.slippage_tolerance),
            )
        )
        # Native offers travel as funds; cw20 offers are pulled from the allowance
        funds = [Coin(denom=offer.address, amount=str(amount))] if offer_info.is_native else []
        return WasmMsg(
            wasm=ExecuteWrapper(
                execute=WasmExecute(
                    contract_addr=contract, msg=encode_swap_msg(swap), funds=funds
                )
            )
        )


__all__ = ["ExecutionPlanBuilder"]
