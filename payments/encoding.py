"""
Best-effort charset normalisation for PayPal notification text.

PayPal sends IPN bodies in the merchant account's configured charset and the
`charset` field that should describe it is not always reliable. Everything
here degrades to a lossy decode instead of raising.
"""

import codecs

import structlog
from charset_normalizer import from_bytes

log = structlog.get_logger(__name__)

CANONICAL = "utf-8"

# PayPal account default when nothing else is known
FALLBACK = "cp1252"

# Non-UTF-8 charsets PayPal accounts are configured with
_LIKELY_CHARSETS = [
    "cp1252",
    "iso8859_15",
    "cp1251",
    "cp1250",
    "shift_jis",
    "gbk",
    "big5",
]

# Below this many bytes detection has too little signal to beat the fallback
_MIN_DETECT_LENGTH = 64


def _codec_name(charset: str) -> str | None:
    try:
        return codecs.lookup(charset.upper().replace("_", "-")).name
    except LookupError:
        return None


def detect_charset(raw: bytes) -> str:
    """Guess the charset of `raw` among the ones PayPal uses."""
    try:
        raw.decode(CANONICAL)
    except UnicodeDecodeError:
        pass
    else:
        return CANONICAL

    if len(raw) < _MIN_DETECT_LENGTH:
        return FALLBACK
    match = from_bytes(raw, cp_isolation=_LIKELY_CHARSETS).best()
    if match is None:
        return FALLBACK
    return _codec_name(match.encoding) or FALLBACK


def normalize_to_utf8(raw: bytes, declared_charset: str | None = None) -> str:
    """
    Decode `raw` into text, honouring `declared_charset` when it is usable.

    Args:
        raw: Field bytes exactly as received
        declared_charset: Value of the notification's `charset` field, if any

    Returns:
        Decoded text. Undecodable sequences are dropped for non-UTF-8 input
        and replaced for UTF-8 input.
    """
    if raw.isascii():
        return raw.decode("ascii")

    charset = _codec_name(declared_charset) if declared_charset else None
    if declared_charset and charset is None:
        log.warning("ipn.unknown_charset", charset=declared_charset)
    if charset is None:
        charset = detect_charset(raw)

    if charset == CANONICAL:
        return raw.decode(CANONICAL, errors="replace")
    return raw.decode(charset, errors="ignore")
