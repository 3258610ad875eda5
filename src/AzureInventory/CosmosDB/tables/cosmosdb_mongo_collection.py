# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Column schema of the ``azure_cosmosdb_mongo_collection`` table."""

from __future__ import annotations

from ..models.column import (
    Column,
    ColumnType,
    TableDefinition,
    from_field,
    id_to_akas,
    to_int,
    to_json,
    to_lower,
)
from ._common import (
    COLUMN_DESCRIPTION_AKAS,
    COLUMN_DESCRIPTION_REGION,
    COLUMN_DESCRIPTION_RESOURCE_GROUP,
    COLUMN_DESCRIPTION_TAGS,
    COLUMN_DESCRIPTION_TITLE,
    azure_columns,
)

_RESOURCE = "collection.resource"
_OPTIONS = "collection.options"

AZURE_COSMOSDB_MONGO_COLLECTION = TableDefinition(
    name="azure_cosmosdb_mongo_collection",
    description="Azure Cosmos DB Mongo Collection",
    list_key_columns=("database_name",),
    get_key_columns=("account_name", "name", "resource_group", "database_name"),
    columns=azure_columns(
        [
            Column(
                name="name",
                type=ColumnType.STRING,
                description="The friendly name that identifies the Mongo DB collection.",
            ),
            Column(
                name="account_name",
                type=ColumnType.STRING,
                description="The friendly name that identifies the database account in which the collection is created.",
                transform=from_field("account"),
            ),
            Column(
                name="database_name",
                type=ColumnType.STRING,
                description="The friendly name that identifies the Mongo DB database in which the collection is created.",
                transform=from_field("database"),
            ),
            Column(
                name="id",
                type=ColumnType.STRING,
                description="Contains ID to identify a Mongo DB collection uniquely.",
                transform=from_field("collection.id"),
            ),
            Column(
                name="type",
                type=ColumnType.STRING,
                description="Type of the resource.",
                transform=from_field("collection.type"),
            ),
            Column(
                name="analytical_storage_ttl",
                type=ColumnType.INT,
                description="Analytical TTL of the collection, in seconds.",
                transform=from_field(f"{_RESOURCE}.analytical_storage_ttl"),
            ),
            Column(
                name="autoscale_settings_max_throughput",
                type=ColumnType.INT,
                description="Contains maximum throughput, the resource can scale up to.",
                transform=from_field(f"{_OPTIONS}.autoscale_settings.max_throughput"),
            ),
            Column(
                name="collection_etag",
                type=ColumnType.STRING,
                description="A system generated property representing the resource etag required for optimistic concurrency control.",
                transform=from_field(f"{_RESOURCE}.etag"),
            ),
            Column(
                name="collection_id",
                type=ColumnType.STRING,
                description="Name of the Cosmos DB MongoDB collection.",
                transform=from_field(f"{_RESOURCE}.id"),
            ),
            Column(
                name="collection_rid",
                type=ColumnType.STRING,
                description="A system generated unique identifier for the collection.",
                transform=from_field(f"{_RESOURCE}.rid"),
            ),
            Column(
                name="collection_ts",
                type=ColumnType.INT,
                description="A system generated property that denotes the last updated timestamp of the resource.",
                transform=from_field(f"{_RESOURCE}.ts").transform(to_int),
            ),
            Column(
                name="throughput",
                type=ColumnType.INT,
                description="Contains the value of the Cosmos DB resource throughput or autoscaleSettings.",
                transform=from_field(f"{_OPTIONS}.throughput"),
            ),
            Column(
                name="shard_key",
                type=ColumnType.JSON,
                description="A key-value pair of shard keys to be applied for the request.",
                transform=from_field(f"{_RESOURCE}.shard_key").transform(to_json),
            ),
            Column(
                name="indexes",
                type=ColumnType.JSON,
                description="List of index keys.",
                transform=from_field(f"{_RESOURCE}.indexes").transform(to_json),
            ),
            # Standard columns
            Column(
                name="title",
                type=ColumnType.STRING,
                description=COLUMN_DESCRIPTION_TITLE,
                transform=from_field("name"),
            ),
            Column(
                name="tags",
                type=ColumnType.JSON,
                description=COLUMN_DESCRIPTION_TAGS,
                transform=from_field("collection.tags"),
            ),
            Column(
                name="akas",
                type=ColumnType.JSON,
                description=COLUMN_DESCRIPTION_AKAS,
                transform=from_field("collection.id").transform(id_to_akas),
            ),
            # Azure standard columns
            Column(
                name="region",
                type=ColumnType.STRING,
                description=COLUMN_DESCRIPTION_REGION,
                transform=from_field("location").transform(to_lower),
            ),
            Column(
                name="resource_group",
                type=ColumnType.STRING,
                description=COLUMN_DESCRIPTION_RESOURCE_GROUP,
                transform=from_field("resource_group").transform(to_lower),
            ),
        ]
    ),
)
