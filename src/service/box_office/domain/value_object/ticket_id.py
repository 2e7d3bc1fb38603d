from datetime import datetime, timezone
import secrets
import string
from typing import Optional


_BASE36_ALPHABET = string.digits + string.ascii_uppercase
TICKET_ID_PREFIX = 'TK'
RANDOM_SUFFIX_LENGTH = 6


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError('base36 encoding needs a non-negative integer')
    if value == 0:
        return '0'
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def mint_ticket_id(*, now: Optional[datetime] = None) -> str:
    """
    Mint an opaque ticket id: `TK-<base36 epoch millis>-<6 random base36>`.

    The id is stored on the booking and embedded in its credential.
    """
    moment = now or datetime.now(timezone.utc)
    millis = int(moment.timestamp() * 1000)
    suffix = ''.join(secrets.choice(_BASE36_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f'{TICKET_ID_PREFIX}-{to_base36(millis)}-{suffix}'.upper()
