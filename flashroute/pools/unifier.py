"""Merge both sources' records for one token into canonical pools.

Secondary (catalog) records seed the map because they carry the executable
contract address; primary (search) records then enrich matching pools with
fresher prices and liquidity, or add pools the catalog does not list.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from pydantic import ValidationError

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.constants import token_decimals
from flashroute.models.pool import Pool, Provenance, Token
from flashroute.models.types import derive_pool_id, parse_decimal, parse_float

logger = structlog.get_logger()


def _token(symbol: Any, address: Any, default_decimals: int) -> Token | None:
    if not isinstance(address, str) or not address:
        return None
    return Token(
        symbol=str(symbol) if symbol else "",
        address=address,
        decimals=token_decimals(address, default_decimals),
    )


def _native_price(value: Any) -> str | None:
    if value in (None, ""):
        return None
    return str(value) if parse_decimal(value) is not None else None


def _primary_label(record: dict[str, Any]) -> str | None:
    parts = [str(record["dexId"])] if record.get("dexId") else []
    labels = record.get("labels")
    if isinstance(labels, list):
        parts.extend(str(label) for label in labels)
    return " ".join(parts) or None


def pool_from_secondary(record: dict[str, Any], config: ScannerConfig) -> Pool | None:
    """Standardize one catalog record into a Pool.

    Returns:
        The pool, or None if the record cannot form a valid pool (logged)
    """
    pool_id = derive_pool_id(record)
    if pool_id is None:
        logger.warning("pool_identifier_invalid", source="secondary", record_id=record.get("pool_id"))
        return None
    address = record.get("pool_address")
    if not isinstance(address, str) or not address:
        logger.warning("pool_address_missing", source="secondary", pool_id=pool_id)
        return None

    base = _token(record.get("base_symbol"), record.get("base_address"), config.default_decimals)
    quote = _token(record.get("quote_symbol"), record.get("quote_address"), config.default_decimals)
    if base is None or quote is None:
        logger.warning("pool_tokens_missing", source="secondary", pool_id=pool_id)
        return None

    try:
        return Pool(
            pool_id=pool_id,
            pair_address=address,
            contract_address=address,
            base=base,
            quote=quote,
            liquidity_usd=max(parse_float(record.get("liquidity_usd")), 0.0),
            price_usd=parse_float(record.get("price")),
            price_native=_native_price(record.get("price")),
            provenance=Provenance.SECONDARY,
        )
    except ValidationError as e:
        logger.warning("pool_record_invalid", source="secondary", pool_id=pool_id, error=str(e))
        return None


def _primary_fields(record: dict[str, Any], config: ScannerConfig) -> dict[str, Any] | None:
    base_raw = record.get("baseToken") or {}
    quote_raw = record.get("quoteToken") or {}
    base = _token(base_raw.get("symbol"), base_raw.get("address"), config.default_decimals)
    quote = _token(quote_raw.get("symbol"), quote_raw.get("address"), config.default_decimals)
    if base is None or quote is None:
        return None

    fields: dict[str, Any] = {"base": base, "quote": quote}
    liquidity = record.get("liquidity")
    if isinstance(liquidity, dict) and liquidity.get("usd") is not None:
        fields["liquidity_usd"] = max(parse_float(liquidity["usd"]), 0.0)
    price_usd = parse_float(record.get("priceUsd"))
    if price_usd:
        fields["price_usd"] = price_usd
    native = _native_price(record.get("priceNative"))
    if native is not None:
        fields["price_native"] = native
    label = _primary_label(record)
    if label:
        fields["label"] = label
    return fields


def pool_from_primary(
    record: dict[str, Any],
    config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    contract_address: str | None = None,
) -> Pool | None:
    """Build a primary-only Pool from one search record.

    Args:
        record: Pair record from the primary search
        contract_address: Executable contract, when verified elsewhere

    Returns:
        The pool, or None if the record cannot form a valid pool (logged)
    """
    pool_id = derive_pool_id(record)
    if pool_id is None:
        logger.warning(
            "pool_identifier_invalid", source="primary", pair_address=record.get("pairAddress")
        )
        return None
    fields = _primary_fields(record, config)
    if fields is None:
        logger.warning("pool_tokens_missing", source="primary", pool_id=pool_id)
        return None
    try:
        return Pool(
            pool_id=pool_id,
            pair_address=str(record.get("pairAddress") or pool_id),
            contract_address=contract_address,
            provenance=Provenance.PRIMARY,
            **fields,
        )
    except ValidationError as e:
        logger.warning("pool_record_invalid", source="primary", pool_id=pool_id, error=str(e))
        return None


def merge_primary(
    pools: dict[str, Pool], record: dict[str, Any], config: ScannerConfig
) -> None:
    """Apply one primary record to the pool map in place.

    Existing pools are enriched (prices, liquidity, token details) and marked
    as seen by both sources; unknown pools are inserted as primary-only.
    """
    chain = record.get("chainId")
    if chain and chain != config.chain_id:
        logger.debug("pool_other_chain", chain=chain, pair=record.get("pairAddress"))
        return

    pool_id = derive_pool_id(record)
    existing = pools.get(pool_id) if pool_id is not None else None
    if existing is None:
        pool = pool_from_primary(record, config)
        if pool is not None:
            pools[pool.pool_id] = pool
        return

    fields = _primary_fields(record, config)
    if fields is None:
        logger.warning("pool_tokens_missing", source="primary", pool_id=pool_id)
        return

    # A repeated primary record must not promote a primary-only pool
    provenance = (
        Provenance.PRIMARY if existing.provenance is Provenance.PRIMARY else Provenance.BOTH
    )
    try:
        merged = existing.model_dump() | fields | {"provenance": provenance}
        pools[existing.pool_id] = Pool.model_validate(merged)
    except ValidationError as e:
        logger.warning("pool_record_invalid", source="primary", pool_id=pool_id, error=str(e))


def unify_pools(
    primary: Iterable[dict[str, Any]],
    secondary: Iterable[dict[str, Any]],
    config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
) -> dict[str, Pool]:
    """Build the canonical pool map for one token query.

    Args:
        primary: Pair records from the primary search
        secondary: Records from the secondary catalog

    Returns:
        Mapping from pool identifier to canonical Pool. Records without a
        derivable numeric identifier never appear.
    """
    pools: dict[str, Pool] = {}
    for record in secondary:
        pool = pool_from_secondary(record, config)
        if pool is not None:
            pools[pool.pool_id] = pool

    for record in primary:
        merge_primary(pools, record, config)

    counts = {p.value: 0 for p in Provenance}
    for pool in pools.values():
        counts[pool.provenance.value] += 1
    logger.debug("pools_unified", total=len(pools), **counts)
    return pools
