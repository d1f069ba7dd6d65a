# ABOUTME: ISBN normalization and validation for scanned or typed identifiers.
# ABOUTME: Produces the canonical 10/13 character form used as cache key and query parameter.

import logging
import re

logger = logging.getLogger(__name__)

# Everything that is not a digit or an X (either case) is noise from scanners or typing.
_NON_ISBN_CHARS_RE = re.compile(r"[^0-9X]", re.IGNORECASE)
_ISBN10_RE = re.compile(r"^[0-9]{9}[0-9X]$")
_ISBN13_RE = re.compile(r"^[0-9]{13}$")

_VALID_LENGTHS = (10, 13)


class InvalidIsbnError(ValueError):
    """Raised when a string does not normalize to a canonical ISBN."""


def normalize_isbn(raw: str | int | None) -> str:
    """Canonicalize raw identifier text.

    Trims whitespace, drops every character that is not a digit or X, and
    upper-cases the result. Length is not enforced here, so the result may
    still be invalid; malformed input is only reported in the log. Non-string
    input (an int from a scanner wrapper, say) is converted with str() first.

    Examples:
        "978-0-13-468599-1" -> "9780134685991"
        "0-306-40615-x" -> "030640615X"
    """
    if raw is None or raw == "":
        return ""

    normalized = _NON_ISBN_CHARS_RE.sub("", str(raw).strip()).upper()

    if len(normalized) not in _VALID_LENGTHS:
        logger.warning(
            "ISBN %r normalized to %r with invalid length %d", raw, normalized, len(normalized)
        )
    if "X" in normalized and not normalized.endswith("X"):
        logger.warning("ISBN %r has an X before the final position", raw)

    logger.debug("Normalized ISBN %r -> %r", raw, normalized)
    return normalized


def is_valid_isbn(candidate: str | int | None) -> bool:
    """Check whether a string normalizes to a well-formed ISBN-10 or ISBN-13.

    Only the shape is checked (9 digits plus a digit or X, or 13 digits);
    check digits are not verified.
    """
    normalized = normalize_isbn(candidate)
    return bool(_ISBN13_RE.match(normalized) or _ISBN10_RE.match(normalized))


def require_isbn(raw: str | int | None) -> str:
    """Normalize raw text and return it, or raise if it is not a valid ISBN.

    Raises:
        InvalidIsbnError: If the normalized form is not a valid ISBN-10/13.
    """
    normalized = normalize_isbn(raw)
    if not (_ISBN13_RE.match(normalized) or _ISBN10_RE.match(normalized)):
        raise InvalidIsbnError(f"Not a valid ISBN: {raw!r}")
    return normalized
