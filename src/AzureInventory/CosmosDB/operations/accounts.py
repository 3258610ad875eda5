# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Database account operations namespace."""

from __future__ import annotations

import logging
from typing import Iterator, Optional, TYPE_CHECKING

from ..models.mongo_collection import DatabaseAccountInfo

if TYPE_CHECKING:
    from ..client import CosmosInventoryClient


__all__ = ["AccountOperations"]

logger = logging.getLogger(__name__)


class AccountOperations:
    """Namespace for Cosmos DB database account listing.

    Accessed via ``client.accounts``. Accounts are the parents that Mongo
    collection listings are scoped to.

    :param client: The parent :class:`~AzureInventory.CosmosDB.client.CosmosInventoryClient` instance.
    :type client: ~AzureInventory.CosmosDB.client.CosmosInventoryClient
    """

    def __init__(self, client: CosmosInventoryClient) -> None:
        self._client = client

    def list(self, *, kind: Optional[str] = None) -> Iterator[DatabaseAccountInfo]:
        """Lazily list the database accounts of the configured subscription.

        :param kind: Only yield accounts of this kind, e.g. ``"MongoDB"``.
        :type kind: :class:`str` or None
        :return: Iterator of accounts, resource group derived from each account id.
        :rtype: Iterator[~AzureInventory.CosmosDB.models.mongo_collection.DatabaseAccountInfo]

        :raises ~AzureInventory.CosmosDB.core.errors.SessionError: If the session cannot be opened.
        :raises ~AzureInventory.CosmosDB.core.errors.InventoryError: If the listing fails.
        """
        with self._client._new_session() as session:
            for item in session.list_database_accounts():
                account = DatabaseAccountInfo.from_api_response(item)
                if kind is not None and (account.kind or "").lower() != kind.lower():
                    continue
                yield account
