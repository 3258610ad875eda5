# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by the Cosmos DB inventory library.

All errors derive from :class:`InventoryError`, which carries a stable
``code``/``subcode`` pair plus free-form details and can be serialized with
:meth:`InventoryError.to_dict`.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Callable, Dict, Iterable, Optional


class InventoryError(Exception):
    """Base structured error for the inventory library."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(InventoryError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class SessionError(InventoryError):
    """Raised when an authenticated management session cannot be established."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="session_error", subcode=subcode, details=details, source="client")


class TransformError(InventoryError):
    """Raised when a column transform fails for a record."""

    def __init__(self, message: str, *, column: str, subcode: Optional[str] = None):
        super().__init__(message, code="transform_error", subcode=subcode, details={"column": column}, source="client")
        self.column = column


class TransportError(InventoryError):
    """Raised when a request could not be sent or its response could not be read."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message, code="transport_error", subcode=subcode, details=details, source="client", is_transient=True
        )


class HttpError(InventoryError):
    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        correlation_id: Optional[str] = None,
        request_id: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        if correlation_id is not None:
            d["correlation_id"] = correlation_id
        if request_id is not None:
            d["request_id"] = request_id
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if retry_after is not None:
            d["retry_after"] = retry_after
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
        )

    @property
    def service_error_code(self) -> Optional[str]:
        return self.details.get("service_error_code")


def is_not_found_error(codes: Iterable[str]) -> Callable[[BaseException], bool]:
    """
    Build a predicate telling whether an error is one of the given service error codes.

    Only :class:`HttpError` instances are matched. The comparison is made
    against the ARM ``error.code`` returned by the service.

    :param codes: Service error codes that denote absence, e.g. ``("ResourceNotFound", "NotFound")``.
    :type codes: Iterable[str]
    :return: Predicate usable to decide whether an error may be ignored.
    :rtype: Callable[[BaseException], bool]
    """
    wanted = frozenset(codes)

    def _matches(err: BaseException) -> bool:
        if not isinstance(err, HttpError):
            return False
        return err.service_error_code in wanted

    return _matches


__all__ = [
    "InventoryError",
    "HttpError",
    "ValidationError",
    "SessionError",
    "TransformError",
    "TransportError",
    "is_not_found_error",
]
