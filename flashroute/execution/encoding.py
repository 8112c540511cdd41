"""Base64 wire encoding of contract messages.

Pair contracts receive their message as base64 of compact UTF-8 JSON inside
the `msg` field of a wasm execute instruction.
"""

from __future__ import annotations

import base64

from pydantic import BaseModel

from flashroute.models.execution import SwapMsg


def encode_msg(message: BaseModel) -> str:
    """Encode any contract message model as base64 JSON (None fields omitted)."""
    payload = message.model_dump_json(exclude_none=True)
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def encode_swap_msg(message: SwapMsg) -> str:
    return encode_msg(message)


def decode_swap_msg(encoded: str) -> SwapMsg:
    """Decode a base64 swap instruction back into its model.

    Raises:
        ValueError: If the payload is not valid base64 or not a swap message
    """
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid base64 swap message: {e}") from e
    return SwapMsg.model_validate_json(raw)


__all__ = ["decode_swap_msg", "encode_msg", "encode_swap_msg"]
