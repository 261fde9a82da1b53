"""
PayPal IPN payload helpers.

Parsing of the raw form body, the verification result that gets injected into
a payload, and the small field lookups shared by the completion flow.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Mapping
from urllib.parse import parse_qsl

from payments.encoding import normalize_to_utf8
from payments.exceptions import MalformedPayloadError

# Key under which the echo-back verification result is stored in a payload
RESULT_KEY = "_result"

NotificationPayload = dict[str, str]


class VerificationResult(str, Enum):
    VERIFIED = "VERIFIED"
    UNVERIFIED = "UNVERIFIED"
    INVALID = "INVALID"


def parse_notification(body: bytes) -> NotificationPayload:
    """
    Parse a raw IPN form body into a payload of decoded text.

    Values are decoded in the charset the notification declares in its own
    `charset` field, or a detected one when it declares none. A
    provider-supplied `_result` field is dropped.
    """
    # latin-1 keeps every byte so values can be decoded once the charset is known
    pairs = parse_qsl(
        body.decode("latin-1"), keep_blank_values=True, encoding="latin-1"
    )
    raw = {key: value.encode("latin-1") for key, value in pairs}
    raw.pop(RESULT_KEY, None)

    declared = raw.get("charset", b"").decode("ascii", errors="ignore") or None
    return {key: normalize_to_utf8(value, declared) for key, value in raw.items()}


def require(payload: Mapping[str, str], field: str) -> str:
    try:
        return payload[field]
    except KeyError:
        raise MalformedPayloadError(field) from None


def first_non_empty(payload: Mapping[str, str], *fields: str) -> str:
    """Return the first of `fields` present with a non-empty value."""
    for field in fields:
        value = payload.get(field)
        if value is not None and value != "":
            return value
    raise MalformedPayloadError(" or ".join(fields))


def is_flag_set(value: str | None) -> bool:
    """PayPal flags are "1" when set; absent, empty and "0" mean false."""
    return value not in (None, "", "0")


# PayPal stamps payment dates in Pacific time
_TZ_OFFSETS = {
    "PST": timedelta(hours=-8),
    "PDT": timedelta(hours=-7),
    "UTC": timedelta(0),
    "GMT": timedelta(0),
}

_DATE_FORMATS = [
    "%H:%M:%S %b %d, %Y",
    "%H:%M:%S %b. %d, %Y",
    "%H:%M:%S %d %b %Y",
]


def parse_payment_date(value: str) -> datetime:
    """Parse e.g. "01:02:03 Jan 04, 2016 PST" into an aware datetime."""
    text, _, zone = value.strip().rpartition(" ")
    offset = _TZ_OFFSETS.get(zone.upper())
    if offset is None:
        raise ValueError(f"unknown timezone in payment date: {value!r}")

    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone(offset))
    raise ValueError(f"unrecognised payment date: {value!r}")
