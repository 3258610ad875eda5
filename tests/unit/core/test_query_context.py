# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for QueryContext row limits and cancellation."""

import unittest

from AzureInventory.CosmosDB.core.errors import ValidationError
from AzureInventory.CosmosDB.core.query import QueryContext


class TestQueryContext(unittest.TestCase):
    def test_unlimited(self):
        query = QueryContext()
        for i in range(5):
            query.stream_row({"i": i})
        self.assertEqual(query.rows_remaining(), -1)
        self.assertFalse(query.should_stop())
        self.assertEqual(len(query.rows), 5)
        self.assertEqual(query.streamed, 5)

    def test_limit_counts_down(self):
        query = QueryContext(limit=2)
        self.assertEqual(query.rows_remaining(), 2)
        query.stream_row({})
        self.assertEqual(query.rows_remaining(), 1)
        query.stream_row({})
        self.assertEqual(query.rows_remaining(), 0)
        self.assertTrue(query.should_stop())

    def test_zero_limit_stops_immediately(self):
        self.assertTrue(QueryContext(limit=0).should_stop())

    def test_cancel(self):
        query = QueryContext()
        query.cancel()
        self.assertTrue(query.cancelled)
        self.assertEqual(query.rows_remaining(), 0)

    def test_custom_sink(self):
        received = []
        query = QueryContext(sink=received.append)
        query.stream_row({"a": 1})
        self.assertEqual(received, [{"a": 1}])
        self.assertEqual(query.rows, [])

    def test_stream_row_rejects_rows_past_limit(self):
        query = QueryContext(limit=1)
        self.assertTrue(query.stream_row({"a": 1}))
        self.assertFalse(query.stream_row({"a": 2}))
        self.assertEqual(query.rows, [{"a": 1}])
        self.assertEqual(query.streamed, 1)

    def test_stream_row_rejects_rows_after_cancel(self):
        query = QueryContext()
        query.cancel()
        self.assertFalse(query.stream_row({"a": 1}))
        self.assertEqual(query.rows, [])

    def test_negative_limit(self):
        with self.assertRaises(ValidationError):
            QueryContext(limit=-1)


if __name__ == "__main__":
    unittest.main()
