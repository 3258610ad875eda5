# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import sys
from pathlib import Path

# Add src to PYTHONPATH for local runs
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from azure.identity import DefaultAzureCredential

from AzureInventory.CosmosDB.client import CosmosInventoryClient
from AzureInventory.CosmosDB.core.config import InventoryConfig
from AzureInventory.CosmosDB.core.errors import InventoryError
from AzureInventory.CosmosDB.core.telemetry import TelemetryConfig


subscription_id = input("Enter Azure subscription id: ").strip()
if not subscription_id:
    print("No subscription entered; exiting.")
    sys.exit(1)

database_name = input("Mongo database name to list collections of: ").strip()
limit = input("Maximum rows (blank for all): ").strip()

config = InventoryConfig(
    subscription_id=subscription_id,
    telemetry=TelemetryConfig(enable_logging=True, log_level="INFO"),
)
client = CosmosInventoryClient(DefaultAzureCredential(), config)

try:
    print("Mongo API accounts:")
    for account in client.accounts.list(kind="MongoDB"):
        print({"account": account.name, "resource_group": account.resource_group, "location": account.location})

    df = client.mongo_collections.list_dataframe(database_name, limit=int(limit) if limit else None)
    print(df[["account_name", "name", "resource_group", "region", "throughput"]].to_string(index=False))

    if len(df):
        first = df.iloc[0]
        row = client.mongo_collections.get(
            first["account_name"], first["name"], first["resource_group"], first["database_name"]
        )
        print({"get": row["id"] if row else None})
except InventoryError as ex:
    print("Request failed:", ex.to_dict())
    sys.exit(2)
