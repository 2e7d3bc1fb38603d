"""
Ticket Credential Codec

A credential is a pure function of (event_id, booking_id, ticket_id); nothing
about it is stored. Encoding always produces the compact `TK1.` token.
Decoding accepts every format that has been rendered into QR codes or links
over time and reports anything else as Unrecognized. It never raises and
never checks whether the ids exist.
"""

import base64
import binascii
import re
from typing import Any, Callable, Optional, Union
from urllib.parse import parse_qs, urlsplit

import attrs
import orjson

from src.platform.logging.loguru_io import Logger


TOKEN_PREFIX = 'TK1.'
DELIMITERS = (':', '|')
_DELIMITED_PIECE = re.compile(r'[A-Za-z0-9_-]+')

_Triple = tuple[str, str, str]

_EVENT_KEYS = ('eventId', 'event_id')
_BOOKING_KEYS = ('bookingId', 'booking_id')
_TICKET_KEYS = ('ticketId', 'ticket_id')


@attrs.frozen
class Parsed:
    event_id: str
    booking_id: str
    ticket_id: str


@attrs.frozen
class Unrecognized:
    raw: Any


DecodeResult = Union[Parsed, Unrecognized]


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    # Ids are taken verbatim; only the whole payload is trimmed
    return value


def _triple(event_id: Any, booking_id: Any, ticket_id: Any) -> Optional[_Triple]:
    parts = (_clean(event_id), _clean(booking_id), _clean(ticket_id))
    if any(part is None for part in parts):
        return None
    return parts  # type: ignore[return-value]


def _first_key(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


# =============================================================================
# Parse strategies, tried in order; each returns a triple or None
# =============================================================================


def _parse_compact_token(raw: str) -> Optional[_Triple]:
    if not raw.startswith(TOKEN_PREFIX):
        return None
    body = raw[len(TOKEN_PREFIX) :]
    padded = body + '=' * (-len(body) % 4)
    try:
        payload = orjson.loads(base64.urlsafe_b64decode(padded.encode('ascii')))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return None
    if not isinstance(payload, list) or len(payload) != 3:
        return None
    return _triple(*payload)


def _parse_json_object(raw: str) -> Optional[_Triple]:
    if not raw.startswith('{'):
        return None
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return _triple(
        _first_key(payload, _EVENT_KEYS),
        _first_key(payload, _BOOKING_KEYS),
        _first_key(payload, _TICKET_KEYS),
    )


def _parse_url(raw: str) -> Optional[_Triple]:
    try:
        parts = urlsplit(raw)
    except ValueError:
        return None
    if not parts.query:
        return None
    query = {key: values[0] for key, values in parse_qs(parts.query).items() if values}
    return _triple(
        _first_key(query, _EVENT_KEYS),
        _first_key(query, _BOOKING_KEYS),
        _first_key(query, _TICKET_KEYS),
    )


def _parse_delimited(raw: str) -> Optional[_Triple]:
    for delimiter in DELIMITERS:
        pieces = raw.split(delimiter)
        if len(pieces) == 3 and all(_DELIMITED_PIECE.fullmatch(p) for p in pieces):
            return _triple(*pieces)
    return None


PARSE_STRATEGIES: tuple[Callable[[str], Optional[_Triple]], ...] = (
    _parse_compact_token,
    _parse_json_object,
    _parse_url,
    _parse_delimited,
)


class TicketCredentialCodec:
    def encode(self, *, event_id: Any, booking_id: Any, ticket_id: str) -> str:
        payload = orjson.dumps([str(event_id), str(booking_id), ticket_id])
        token = base64.urlsafe_b64encode(payload).rstrip(b'=').decode('ascii')
        return f'{TOKEN_PREFIX}{token}'

    def decode(self, raw: Any) -> DecodeResult:
        if not isinstance(raw, str):
            return Unrecognized(raw=raw)
        candidate = raw.strip()
        if not candidate:
            return Unrecognized(raw=raw)

        for strategy in PARSE_STRATEGIES:
            triple = strategy(candidate)
            if triple is not None:
                event_id, booking_id, ticket_id = triple
                return Parsed(event_id=event_id, booking_id=booking_id, ticket_id=ticket_id)

        Logger.base.debug(f'🔍 [CODEC] Unrecognized credential ({len(candidate)} chars)')
        return Unrecognized(raw=raw)
