# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for listing and fetching Mongo collections."""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from azure.core.exceptions import ResourceNotFoundError, ServiceRequestError

from AzureInventory.CosmosDB.core.errors import (
    HttpError,
    InventoryError,
    SessionError,
    TransportError,
)
from AzureInventory.CosmosDB.core.query import QueryContext
from AzureInventory.CosmosDB.models.mongo_collection import (
    DatabaseAccountInfo,
    MongoCollectionInfo,
)
from tests.unit.test_helpers import (
    SUBSCRIPTION_ID,
    TestableClient,
    account,
    collection,
    http_error,
    pages,
)

LIST_OP = "mongo_db_resources.list_mongo_db_collections"
GET_OP = "mongo_db_resources.get_mongo_db_collection"


# --- list ---


def test_list_empty_database_name_yields_nothing_without_session(sample_account):
    c = TestableClient([])
    rows = list(c.mongo_collections.iter_rows(sample_account, ""))
    assert rows == []
    assert c.sessions_opened == 0
    assert c.calls == []


def test_list_across_accounts_with_empty_database_name_makes_no_calls():
    c = TestableClient([])
    assert c.mongo_collections.list("") == []
    assert c.sessions_opened == 0


def test_list_streams_every_item(sample_account):
    c = TestableClient([pages([collection("c1"), collection("c2"), collection("c3")])])
    rows = list(c.mongo_collections.iter_rows(sample_account, "db1"))
    assert [r["name"] for r in rows] == ["c1", "c2", "c3"]
    operation, kwargs = c.calls[0]
    assert operation == LIST_OP
    assert kwargs["resource_group_name"] == "rg1"
    assert kwargs["account_name"] == "acct1"
    assert kwargs["database_name"] == "db1"
    assert kwargs["request_id"]
    assert c.closed == 1


def test_list_is_lazy(sample_account):
    c = TestableClient([pages([collection("c1")])])
    it = c.mongo_collections.iter_rows(sample_account, "db1")
    assert c.sessions_opened == 0
    assert next(it)["name"] == "c1"
    assert c.sessions_opened == 1
    it.close()
    assert c.closed == 1


def test_list_row_columns(sample_account):
    item = collection("carts", options={"autoscaleSettings": {"maxThroughput": 4000}})
    c = TestableClient([pages([item])])
    (row,) = c.mongo_collections.iter_rows(sample_account, "db1")
    assert row["account_name"] == "acct1"
    assert row["database_name"] == "db1"
    assert row["title"] == "carts"
    assert row["type"] == "Microsoft.DocumentDB/databaseAccounts/mongodbDatabases/collections"
    assert row["collection_id"] == "carts"
    assert row["collection_rid"] == "rid-carts"
    assert row["collection_etag"] == '"etag-carts"'
    assert row["collection_ts"] == 1700000000
    assert isinstance(row["collection_ts"], int)
    assert row["autoscale_settings_max_throughput"] == 4000
    assert row["throughput"] is None
    assert row["analytical_storage_ttl"] is None
    assert row["shard_key"] == {"user_id": "Hash"}
    assert row["indexes"] == [{"key": {"keys": ["_id"]}}]
    assert row["tags"] == {"env": "test"}
    assert row["akas"] == [f"azure://{item.id}", f"azure://{item.id}".lower()]
    assert row["subscription_id"] == SUBSCRIPTION_ID
    assert row["cloud_environment"] == "AZUREPUBLICCLOUD"


def test_list_throughput_column(sample_account):
    c = TestableClient([pages([collection("c1")])])
    (row,) = c.mongo_collections.iter_rows(sample_account, "db1")
    assert row["throughput"] == 400
    assert row["autoscale_settings_max_throughput"] is None


def test_list_resource_group_comes_from_item_id(sample_account):
    c = TestableClient([pages([collection("c1", resource_group="Other-RG")])])
    (row,) = c.mongo_collections.iter_rows(sample_account, "db1")
    assert sample_account.resource_group == "rg1"
    assert row["resource_group"] == "other-rg"


def test_list_region_lower_cased(sample_account):
    c = TestableClient([pages([collection("c1", location="West Europe")])])
    (row,) = c.mongo_collections.iter_rows(sample_account, "db1")
    assert row["region"] == "west europe"


def test_list_stops_after_limit_without_processing_rest(sample_account):
    c = TestableClient([pages([collection("c1"), collection("c2"), collection("c3")])])
    query = QueryContext(limit=2)
    with patch.object(MongoCollectionInfo, "from_list_item", wraps=MongoCollectionInfo.from_list_item) as spy:
        streamed = c.mongo_collections.stream(sample_account, "db1", query)
    assert streamed == 2
    assert [r["name"] for r in query.rows] == ["c1", "c2"]
    assert spy.call_count == 2
    assert c.closed == 1


def test_list_stop_signal_checked_after_each_row(sample_account):
    c = TestableClient([pages([collection("c1"), collection("c2"), collection("c3")])])
    seen = []

    def should_stop():
        return len(seen) >= 1

    for row in c.mongo_collections.iter_rows(sample_account, "db1", should_stop=should_stop):
        seen.append(row["name"])
    assert seen == ["c1"]


def test_list_cancel_stops_stream(sample_account):
    c = TestableClient([pages([collection("c1"), collection("c2")])])
    rows = []

    def sink(row):
        rows.append(row)
        query.cancel()

    query = QueryContext(sink=sink)
    c.mongo_collections.stream(sample_account, "db1", query)
    assert len(rows) == 1


def test_list_follows_pages(sample_account):
    c = TestableClient([pages([collection("c1")], [collection("c2")])])
    rows = list(c.mongo_collections.iter_rows(sample_account, "db1"))
    assert [r["name"] for r in rows] == ["c1", "c2"]
    assert len(c.requests) == 2


def test_list_limit_does_not_fetch_next_page(sample_account):
    c = TestableClient([pages([collection("c1")], [collection("c2")])])
    rows = c.mongo_collections.list("db1", accounts=[sample_account], limit=1)
    assert len(rows) == 1
    assert len(c.requests) == 1


def test_list_error_propagates(sample_account):
    c = TestableClient([http_error(403, "AuthorizationFailed", "denied")])
    with pytest.raises(HttpError) as ei:
        list(c.mongo_collections.iter_rows(sample_account, "db1"))
    assert ei.value.status_code == 403
    assert ei.value.service_error_code == "AuthorizationFailed"
    assert c.closed == 1


def test_list_transport_failure_is_inventory_error(sample_account):
    c = TestableClient([ServiceRequestError("down")])
    with pytest.raises(TransportError) as ei:
        list(c.mongo_collections.iter_rows(sample_account, "db1"))
    assert isinstance(ei.value, InventoryError)
    assert isinstance(ei.value.__cause__, ServiceRequestError)
    assert ei.value.is_transient is True


def test_list_session_error_propagates(sample_account):
    c = TestableClient([])

    def fail():
        raise SessionError("no token")

    c._new_session = fail
    with pytest.raises(SessionError):
        list(c.mongo_collections.iter_rows(sample_account, "db1"))


def test_list_visits_every_account():
    accounts = [
        DatabaseAccountInfo(name="acct1", resource_group="rg1"),
        DatabaseAccountInfo(name="acct2", resource_group="rg2"),
    ]
    c = TestableClient(
        [
            pages([collection("c1", account="acct1")]),
            pages([collection("c2", resource_group="rg2", account="acct2")]),
        ]
    )
    rows = c.mongo_collections.list("db1", accounts=accounts)
    assert [(r["account_name"], r["name"]) for r in rows] == [("acct1", "c1"), ("acct2", "c2")]
    assert c.sessions_opened == 2


def test_list_discovers_accounts_when_not_given():
    c = TestableClient([pages([account("acct1")]), pages([collection("c1")])])
    rows = c.mongo_collections.list("db1")
    assert [r["name"] for r in rows] == ["c1"]
    assert c.calls[0][0] == "database_accounts.list"
    assert c.calls[1][1]["resource_group_name"] == "rg1"


def test_list_limit_reached_skips_remaining_accounts():
    accounts = [
        DatabaseAccountInfo(name="acct1", resource_group="rg1"),
        DatabaseAccountInfo(name="acct2", resource_group="rg2"),
    ]
    c = TestableClient([pages([collection("c1")])])
    rows = c.mongo_collections.list("db1", accounts=accounts, limit=1)
    assert len(rows) == 1
    assert c.sessions_opened == 1


def test_list_with_custom_sink_returns_empty_rows(sample_account):
    got = []
    c = TestableClient([pages([collection("c1")])])
    rows = c.mongo_collections.list("db1", accounts=[sample_account], query=QueryContext(sink=got.append))
    assert rows == []
    assert [r["name"] for r in got] == ["c1"]


# --- concurrency ---


def _two_accounts():
    return [
        DatabaseAccountInfo(name="acct1", resource_group="rg1"),
        DatabaseAccountInfo(name="acct2", resource_group="rg2"),
    ]


def test_concurrent_listings_use_separate_sessions():
    c = TestableClient(
        {
            "acct1": pages([collection("a1", account="acct1"), collection("a2", account="acct1")]),
            "acct2": pages([collection("b1", resource_group="rg2", account="acct2")]),
        }
    )
    barrier = threading.Barrier(2)

    def run(parent):
        it = c.mongo_collections.iter_rows(parent, "db1")
        row = next(it)
        # both sessions are open at this point
        barrier.wait(timeout=5)
        it.close()
        return row

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(run, _two_accounts()))

    assert [r["account_name"] for r in results] == ["acct1", "acct2"]
    assert results[1]["resource_group"] == "rg2"
    assert c.sessions_opened == 2
    assert len({id(cosmos) for cosmos in c.cosmos_clients}) == 2
    assert all(cosmos.closed == 1 for cosmos in c.cosmos_clients)


def test_concurrent_listings_share_one_limited_query():
    c = TestableClient(
        {
            "acct1": pages([collection(f"a{i}", account="acct1") for i in range(5)]),
            "acct2": pages([collection(f"b{i}", resource_group="rg2", account="acct2") for i in range(5)]),
        }
    )
    query = QueryContext(limit=3)

    with ThreadPoolExecutor(max_workers=2) as pool:
        counts = list(pool.map(lambda parent: c.mongo_collections.stream(parent, "db1", query), _two_accounts()))

    assert sum(counts) == 3
    assert len(query.rows) == 3
    assert query.should_stop()
    assert c.closed == c.sessions_opened


# --- get ---


@pytest.mark.parametrize(
    "account_name, name, resource_group, database_name",
    [
        ("ab", "c1", "rg1", "db1"),
        ("", "c1", "rg1", "db1"),
        ("acct1", "c1", "", "db1"),
        ("a", "c1", "", "db1"),
        ("acct1", "", "rg1", "db1"),
        ("acct1", "c1", "rg1", ""),
        ("acct1", None, "rg1", None),
    ],
)
def test_get_invalid_key_short_circuits(account_name, name, resource_group, database_name):
    c = TestableClient([])
    assert c.mongo_collections.get(account_name, name, resource_group, database_name) is None
    assert c.sessions_opened == 0
    assert c.calls == []


def test_get_returns_row():
    c = TestableClient([collection("c1", resource_group="RG1", location="EastUS")])
    row = c.mongo_collections.get("acct1", "c1", "RG1", "db1")
    assert row["name"] == "c1"
    assert row["account_name"] == "acct1"
    assert row["database_name"] == "db1"
    assert row["resource_group"] == "rg1"
    assert row["region"] == "eastus"
    operation, kwargs = c.calls[0]
    assert operation == GET_OP
    assert kwargs["collection_name"] == "c1"
    assert kwargs["resource_group_name"] == "RG1"
    assert c.closed == 1


@pytest.mark.parametrize("code", ["NotFound", "ResourceNotFound"])
def test_get_not_found_is_ignored(code):
    c = TestableClient([http_error(404, code, "missing", error_type=ResourceNotFoundError)])
    assert c.mongo_collections.get("acct1", "c1", "rg1", "db1") is None


def test_get_not_found_without_error_body_is_ignored():
    c = TestableClient([http_error(404, body="gone", error_type=ResourceNotFoundError)])
    assert c.mongo_collections.get("acct1", "c1", "rg1", "db1") is None


def test_get_not_found_raises_when_not_ignored():
    c = TestableClient([http_error(404, "NotFound", "missing", error_type=ResourceNotFoundError)])
    with pytest.raises(HttpError):
        c.mongo_collections.get("acct1", "c1", "rg1", "db1", ignore_not_found=False)


def test_get_other_errors_propagate():
    c = TestableClient([http_error(500, "InternalServerError", "boom")])
    with pytest.raises(HttpError) as ei:
        c.mongo_collections.get("acct1", "c1", "rg1", "db1")
    assert ei.value.status_code == 500
    assert ei.value.is_transient is False


def test_get_transport_failure_is_inventory_error():
    c = TestableClient([ServiceRequestError("connection refused")])
    with pytest.raises(TransportError):
        c.mongo_collections.get("acct1", "c1", "rg1", "db1")


def test_get_session_error_propagates():
    c = TestableClient([])

    def fail():
        raise SessionError("no token")

    c._new_session = fail
    with pytest.raises(SessionError):
        c.mongo_collections.get("acct1", "c1", "rg1", "db1")


# --- dataframe ---


def test_list_dataframe_keeps_declared_columns(sample_account):
    c = TestableClient([pages([collection("c1"), collection("c2", options={})])])
    df = c.mongo_collections.list_dataframe("db1", accounts=[sample_account])
    assert list(df.columns) == c.mongo_collections.table.column_names()
    assert len(df) == 2
    assert str(df["throughput"].dtype) == "Int64"
    assert df["shard_key"].iloc[0] == {"user_id": "Hash"}
