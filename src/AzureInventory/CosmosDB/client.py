# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Optional

from azure.core.credentials import TokenCredential
from azure.identity import DefaultAzureCredential

from .core._auth import _AuthManager
from .core.config import InventoryConfig
from .core.session import ManagementSession, new_session
from .operations.accounts import AccountOperations
from .operations.mongo_collections import MongoCollectionOperations


class CosmosInventoryClient:
    """
    High-level client exposing Cosmos DB Mongo collection metadata as table rows.

    The client holds only its configuration and credential. Every listing or
    lookup opens its own :class:`~AzureInventory.CosmosDB.core.session.ManagementSession`
    and closes it when done, so one client may serve concurrent listings for
    different accounts.

    Operations are organized under namespaces:

    - ``client.accounts``: database account listing (the parents of collections)
    - ``client.mongo_collections``: the ``azure_cosmosdb_mongo_collection`` table

    :param credential: Azure Identity credential for authentication. Defaults to
        :class:`~azure.identity.DefaultAzureCredential`, which resolves environment,
        managed identity, and Azure CLI credentials.
    :type credential: ~azure.core.credentials.TokenCredential or None
    :param config: Optional configuration for subscription, cloud, and HTTP behavior.
        If not provided, defaults are loaded from :meth:`~AzureInventory.CosmosDB.core.config.InventoryConfig.from_env`.
    :type config: ~AzureInventory.CosmosDB.core.config.InventoryConfig or None

    Example:
        List every collection of database ``orders``::

            from azure.identity import DefaultAzureCredential
            from AzureInventory.CosmosDB.client import CosmosInventoryClient
            from AzureInventory.CosmosDB.core.config import InventoryConfig

            client = CosmosInventoryClient(
                DefaultAzureCredential(),
                InventoryConfig(subscription_id="00000000-0000-0000-0000-000000000000"),
            )
            for row in client.mongo_collections.list("orders"):
                print(row["account_name"], row["name"], row["throughput"])
    """

    def __init__(
        self,
        credential: Optional[TokenCredential] = None,
        config: Optional[InventoryConfig] = None,
    ) -> None:
        self.auth = _AuthManager(credential if credential is not None else DefaultAzureCredential())
        self._config = config or InventoryConfig.from_env()

        self.accounts = AccountOperations(self)
        self.mongo_collections = MongoCollectionOperations(self)

    @property
    def config(self) -> InventoryConfig:
        return self._config

    def _new_session(self) -> ManagementSession:
        """Open a fresh authenticated session for one listing or lookup."""
        return new_session(self._config, self.auth)
