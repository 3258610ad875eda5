# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Row limit and cancellation state shared between a listing and its consumer."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from ._error_codes import VALIDATION_LIMIT_NEGATIVE
from .errors import ValidationError

Row = Dict[str, Any]


class QueryContext:
    """
    Streaming sink with a row limit and a cooperative cancellation flag.

    A listing streams every row through :meth:`stream_row` and polls
    :meth:`rows_remaining` after each one; when it reaches ``0`` the listing
    stops without error.

    :param limit: Maximum number of rows wanted, or ``None`` for no limit.
    :type limit: int or None
    :param sink: Callable receiving each streamed row. Defaults to collecting
        rows into :attr:`rows`.
    :type sink: Callable[[dict], None] or None

    Example::

        query = QueryContext(limit=10)
        client.mongo_collections.stream(account, "db1", query)
        print(query.rows)
    """

    def __init__(self, limit: Optional[int] = None, sink: Optional[Callable[[Row], None]] = None) -> None:
        if limit is not None and limit < 0:
            raise ValidationError("limit must be >= 0", subcode=VALIDATION_LIMIT_NEGATIVE)
        self.limit = limit
        self.rows = []
        self._sink = sink if sink is not None else self.rows.append
        self._streamed = 0
        self._lock = threading.RLock()
        self._cancelled = threading.Event()

    @property
    def streamed(self) -> int:
        return self._streamed

    def cancel(self) -> None:
        """Ask every listing using this context to stop after its current row."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def stream_row(self, row: Row) -> bool:
        """
        Hand ``row`` to the sink unless the context is cancelled or full.

        Counting and delivery happen under one lock, so listings running on
        several threads never deliver more than ``limit`` rows in total.

        :return: Whether the row was delivered.
        """
        with self._lock:
            if self._cancelled.is_set():
                return False
            if self.limit is not None and self._streamed >= self.limit:
                return False
            self._streamed += 1
            self._sink(row)
        return True

    def rows_remaining(self) -> int:
        """
        Number of rows still wanted.

        Returns ``0`` once the context is cancelled or the limit is reached, and
        ``-1`` when there is no limit.
        """
        if self._cancelled.is_set():
            return 0
        if self.limit is None:
            return -1
        with self._lock:
            return max(0, self.limit - self._streamed)

    def should_stop(self) -> bool:
        return self.rows_remaining() == 0
