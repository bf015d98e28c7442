"""
Ticker and share-count normalization shared by every inbound operation.
"""

import re

from divtrack.domain.errors import InvalidInput

# Letters, digits, '.', '-' (BRK.B, RDS-A). Index symbols like ^GSPC are not holdable.
_TICKER_RE = re.compile(r"^[A-Z0-9][A-Z0-9.\-]{0,14}$")


def normalize_ticker(ticker: object) -> str:
    """Case-fold *ticker* to uppercase and validate its shape.

    Raises:
        InvalidInput: if *ticker* is not a string, is blank, or is malformed.
    """
    if not isinstance(ticker, str) or not ticker.strip():
        raise InvalidInput("ticker is required and must be a non-empty string")
    symbol = ticker.strip().upper()
    if not _TICKER_RE.match(symbol):
        raise InvalidInput(f"ticker {ticker!r} is not a valid symbol")
    return symbol


def validate_share_count(share_count: object) -> int:
    """Return *share_count* if it is a positive integer.

    Raises:
        InvalidInput: for bools, non-integers, zero and negatives.
    """
    if isinstance(share_count, bool) or not isinstance(share_count, int) or share_count <= 0:
        raise InvalidInput("shares is required and must be a positive integer")
    return share_count
