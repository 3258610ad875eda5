# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the inventory library.

This module contains the foundational components including authentication,
configuration, management sessions, row streaming, and error handling.
"""

from .config import InventoryConfig
from .errors import (
    InventoryError,
    HttpError,
    ValidationError,
    SessionError,
    TransformError,
    TransportError,
)
from .query import QueryContext

__all__ = [
    "InventoryConfig",
    "InventoryError",
    "HttpError",
    "ValidationError",
    "SessionError",
    "TransformError",
    "TransportError",
    "QueryContext",
]
