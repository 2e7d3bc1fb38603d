"""
Platform error base

Raising a CustomBaseError means "expected failure": @Logger.io logs it
without a traceback and the HTTP layer renders it with its own status.
"""

from enum import StrEnum
from typing import Any, ClassVar, Optional


class CustomBaseError(Exception):
    default_status_code: ClassVar[int] = 500
    code: ClassVar[Optional[StrEnum]] = None

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code or self.default_status_code
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {'detail': self.message}
        if self.code is not None:
            payload['code'] = self.code.value
        return payload


class DomainError(CustomBaseError):
    default_status_code = 400


class NotFoundError(CustomBaseError):
    default_status_code = 404


class ConflictError(CustomBaseError):
    default_status_code = 409
