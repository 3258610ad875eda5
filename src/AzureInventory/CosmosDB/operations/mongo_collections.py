# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Mongo collection operations namespace for the inventory library."""

from __future__ import annotations

import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    TYPE_CHECKING,
)

import pandas as pd

from ..core.errors import HttpError, is_not_found_error
from ..core.query import QueryContext, Row
from ..core.session import ManagementSession
from ..models.mongo_collection import (
    DatabaseAccountInfo,
    MongoCollectionInfo,
    MongoCollectionKey,
)
from ..tables.cosmosdb_mongo_collection import AZURE_COSMOSDB_MONGO_COLLECTION
from ..utils._pandas import rows_to_dataframe

if TYPE_CHECKING:
    from ..client import CosmosInventoryClient


__all__ = ["MongoCollectionOperations"]

logger = logging.getLogger(__name__)


def _row_context(session: ManagementSession) -> Dict[str, Any]:
    return {
        "subscription_id": session.subscription_id,
        "cloud_environment": session.cloud_environment,
    }


class MongoCollectionOperations:
    """Namespace for the ``azure_cosmosdb_mongo_collection`` table.

    Accessed via ``client.mongo_collections``. Rows are flat dictionaries
    keyed by the column names of
    :data:`~AzureInventory.CosmosDB.tables.AZURE_COSMOSDB_MONGO_COLLECTION`.

    :param client: The parent :class:`~AzureInventory.CosmosDB.client.CosmosInventoryClient` instance.
    :type client: ~AzureInventory.CosmosDB.client.CosmosInventoryClient

    Example::

        client = CosmosInventoryClient(credential, config=InventoryConfig.from_env())

        # Every collection named in database "orders" across the subscription
        rows = client.mongo_collections.list("orders", limit=50)

        # One collection
        row = client.mongo_collections.get("myaccount", "carts", "my-rg", "orders")
    """

    table = AZURE_COSMOSDB_MONGO_COLLECTION

    def __init__(self, client: CosmosInventoryClient) -> None:
        self._client = client

    # ------------------------------------------------------------------- list

    def iter_rows(
        self,
        account: DatabaseAccountInfo,
        database_name: str,
        *,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Iterator[Row]:
        """Lazily list the collections of one database in one account.

        Nothing is requested until the iterator is first advanced. After every
        yielded row ``should_stop`` is polled; once it returns ``True`` the
        iterator ends without processing further items.

        :param account: Parent database account.
        :type account: ~AzureInventory.CosmosDB.models.mongo_collection.DatabaseAccountInfo
        :param database_name: Mongo database to list. An empty name yields no rows.
        :type database_name: :class:`str`
        :param should_stop: Optional stop signal polled after each row.
        :type should_stop: Callable[[], bool] or None

        :return: Iterator of rows.
        :rtype: Iterator[dict]

        :raises ~AzureInventory.CosmosDB.core.errors.SessionError: If the session cannot be opened.
        :raises ~AzureInventory.CosmosDB.core.errors.HttpError: If the listing call fails.
        :raises ~AzureInventory.CosmosDB.core.errors.TransportError: If the service cannot be reached.
        """
        if not database_name:
            return

        with self._client._new_session() as session:
            context = _row_context(session)
            for item in session.list_mongo_collections(account.resource_group, account.name, database_name):
                info = MongoCollectionInfo.from_list_item(item, account.name, database_name)
                yield self.table.row_for(info, context)

                if should_stop is not None and should_stop():
                    return

    def stream(self, account: DatabaseAccountInfo, database_name: str, query: QueryContext) -> int:
        """Stream the collections of one account into ``query``.

        Safe to call from several threads with one shared ``query``: the
        limit caps the total number of rows delivered across all of them.

        :return: Number of rows delivered by this call.
        :rtype: :class:`int`
        """
        if query.should_stop():
            return 0
        count = 0
        for row in self.iter_rows(account, database_name, should_stop=query.should_stop):
            if query.stream_row(row):
                count += 1
        logger.debug("Streamed %d collections for account %s database %s", count, account.name, database_name)
        return count

    def list(
        self,
        database_name: str,
        *,
        accounts: Optional[Iterable[DatabaseAccountInfo]] = None,
        limit: Optional[int] = None,
        query: Optional[QueryContext] = None,
    ) -> List[Row]:
        """List the collections of a database across database accounts.

        :param database_name: Mongo database to list. Required; an empty name
            returns no rows without contacting the service.
        :type database_name: :class:`str`
        :param accounts: Parent accounts to visit. Defaults to every account of the subscription.
        :type accounts: Iterable[~AzureInventory.CosmosDB.models.mongo_collection.DatabaseAccountInfo] or None
        :param limit: Maximum number of rows. Ignored when ``query`` is given.
        :type limit: :class:`int` or None
        :param query: Sink and stop signal to stream into.
        :type query: ~AzureInventory.CosmosDB.core.query.QueryContext or None

        :return: Rows collected by the default sink of the query context. When
            ``query`` streams into a caller-supplied sink the rows go to that
            sink only and the returned list is empty.
        :rtype: list[dict]
        """
        query = query if query is not None else QueryContext(limit=limit)
        if not database_name:
            return query.rows

        owned = accounts is None
        parents = self._client.accounts.list() if owned else accounts
        try:
            for account in parents:
                if query.should_stop():
                    break
                self.stream(account, database_name, query)
        finally:
            if owned:
                parents.close()
        return query.rows

    def list_dataframe(self, database_name: str, **kwargs: Any) -> pd.DataFrame:
        """Same as :meth:`list`, returned as a :class:`pandas.DataFrame` with one column per table column."""
        return rows_to_dataframe(self.list(database_name, **kwargs), self.table.column_names())

    # -------------------------------------------------------------------- get

    def get(
        self,
        account_name: str,
        name: str,
        resource_group: str,
        database_name: str,
        *,
        ignore_not_found: bool = True,
    ) -> Optional[Row]:
        """Fetch a single collection by its full key.

        :param account_name: Database account name. Names shorter than 3
            characters return ``None`` without a request.
        :param name: Collection name. An empty name returns ``None`` without a request.
        :param resource_group: Resource group of the account. An empty group
            returns ``None`` without a request.
        :param database_name: Mongo database name. An empty name returns ``None`` without a request.
        :param ignore_not_found: Return ``None`` instead of raising when the
            service reports one of the configured not-found error codes.

        :return: The row, or ``None``.
        :rtype: dict or None

        :raises ~AzureInventory.CosmosDB.core.errors.SessionError: If the session cannot be opened.
        :raises ~AzureInventory.CosmosDB.core.errors.HttpError: For any other service failure.
        :raises ~AzureInventory.CosmosDB.core.errors.TransportError: If the service cannot be reached.
        """
        logger.debug("get mongo collection %s/%s/%s/%s", resource_group, account_name, database_name, name)
        key = MongoCollectionKey(
            account_name=account_name or "",
            resource_group=resource_group or "",
            database_name=database_name or "",
            name=name or "",
        )
        if not key.is_valid():
            return None

        with self._client._new_session() as session:
            try:
                item = session.get_mongo_collection(key.resource_group, key.account_name, key.database_name, key.name)
            except HttpError as exc:
                if ignore_not_found and is_not_found_error(self._client._config.ignore_error_codes)(exc):
                    logger.debug("mongo collection %s not found: %s", key.name, exc.service_error_code)
                    return None
                raise
            info = MongoCollectionInfo.from_get_response(item, key)
            return self.table.row_for(info, _row_context(session))
