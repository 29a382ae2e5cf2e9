"""Shared validation helpers for Secret Network MCP tools."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Optional

from secret_mcp.errors import ValidationError

# Bech32 account and contract addresses: "secret" + 39 lowercase alphanumerics.
ADDRESS_REGEX = re.compile(r"^secret[a-z0-9]{39}$")
TX_HASH_REGEX = re.compile(r"^[A-Fa-f0-9]{64}$")

VIEWING_KEY_MIN_LENGTH = 10
MAX_DISPLAY_DECIMALS = 6


def is_valid_address(address: Optional[str]) -> bool:
    """Basic format validation for Secret Network addresses."""
    if not isinstance(address, str):
        return False
    return bool(ADDRESS_REGEX.fullmatch(address))


def is_valid_transaction_hash(value: Optional[str]) -> bool:
    if not isinstance(value, str):
        return False
    return bool(TX_HASH_REGEX.fullmatch(value))


def is_valid_viewing_key(key: Optional[str]) -> bool:
    return isinstance(key, str) and len(key) >= VIEWING_KEY_MIN_LENGTH


def is_positive_int(value: Any) -> bool:
    """True for ints >= 1; bools and floats are rejected."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def is_int_in_range(value: Any, *, minimum: int, maximum: int) -> bool:
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return minimum <= value <= maximum


def query_shape_error(query: Any) -> Optional[str]:
    """Return a message if ``query`` is not a single-method contract query."""
    if not isinstance(query, dict):
        return "Query must be a valid object"
    methods = list(query.keys())
    if len(methods) != 1:
        return "Query should contain exactly one method"
    if not methods[0]:
        return "Query method not specified"
    return None


def format_token_amount(amount: str, decimals: int = 6) -> str:
    """
    Render a smallest-unit amount in display units.

    Uses en-US grouping and at most six fraction digits with trailing zeros
    trimmed, e.g. ``("1500000", 6) -> "1.5"`` and ``("1234567000000", 6) ->
    "1,234,567"``.
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid token amount: {amount}") from exc
    if not value.is_finite():
        raise ValidationError(f"Invalid token amount: {amount}")
    shift = int(decimals)
    _sign, digits, exponent = value.as_tuple()
    # Room for every integer digit plus the display fraction.
    precision = len(digits) + max(exponent - shift, 0) + MAX_DISPLAY_DECIMALS + 1
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, precision)
        try:
            scaled = value.scaleb(-shift).quantize(
                Decimal(1).scaleb(-MAX_DISPLAY_DECIMALS), rounding=ROUND_HALF_UP
            )
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid token amount: {amount}") from exc
    text = f"{scaled:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text
