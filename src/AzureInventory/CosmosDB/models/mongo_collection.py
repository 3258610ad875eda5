# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Hydrated item and key models for Cosmos DB Mongo collections and their accounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.constants import RESOURCE_GROUP_SEGMENT


def resource_group_from_id(resource_id: Optional[str]) -> Optional[str]:
    """
    Return the resource group segment of an ARM resource id.

    The group is the segment at index 4 of the slash-split id
    (``/subscriptions/<sub>/resourceGroups/<rg>/...``). Ids too short to carry
    one yield ``None``.
    """
    if not resource_id:
        return None
    parts = resource_id.split("/")
    if len(parts) <= RESOURCE_GROUP_SEGMENT:
        return None
    return parts[RESOURCE_GROUP_SEGMENT]


@dataclass(frozen=True)
class DatabaseAccountInfo:
    """
    A Cosmos DB database account, the parent of Mongo collections.

    :param name: Account name.
    :type name: str
    :param resource_group: Resource group containing the account.
    :type resource_group: str
    :param location: Azure region of the account.
    :type location: str or None
    :param kind: Account kind, e.g. ``"MongoDB"`` or ``"GlobalDocumentDB"``.
    :type kind: str or None
    :param id: Full ARM resource id.
    :type id: str or None
    """

    name: str
    resource_group: str
    location: Optional[str] = None
    kind: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_api_response(cls, account: Any) -> "DatabaseAccountInfo":
        """Build from a ``DatabaseAccountGetResults`` model."""
        resource_id = account.id
        return cls(
            name=account.name or "",
            resource_group=resource_group_from_id(resource_id) or "",
            location=account.location,
            kind=account.kind,
            id=resource_id,
        )


@dataclass(frozen=True)
class MongoCollectionKey:
    """Full key of a single Mongo collection."""

    account_name: str
    resource_group: str
    database_name: str
    name: str

    def is_valid(self) -> bool:
        """
        Whether the key can address a collection.

        Account names shorter than 3 characters are rejected by the service,
        and every other part must be non-empty.
        """
        return (
            len(self.account_name or "") >= 3
            and bool(self.resource_group)
            and bool(self.database_name)
            and bool(self.name)
        )


@dataclass
class MongoCollectionInfo:
    """
    A Mongo collection record with the context it was fetched in.

    :param collection: The ``MongoDBCollectionGetResults`` model returned by the management client.
    :type collection: ~azure.mgmt.cosmosdb.models.MongoDBCollectionGetResults or None
    :param account: Database account name.
    :param database: Mongo database name.
    :param name: Collection name.
    :param resource_group: Resource group the collection lives in.
    :param location: Azure region.
    """

    collection: Any = None
    account: Optional[str] = None
    database: Optional[str] = None
    name: Optional[str] = None
    resource_group: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_list_item(cls, item: Any, account_name: str, database_name: str) -> "MongoCollectionInfo":
        """Build the info for a listed item, deriving the group from the item's own id."""
        return cls(
            collection=item,
            account=account_name,
            database=database_name,
            name=item.name,
            resource_group=resource_group_from_id(item.id),
            location=item.location,
        )

    @classmethod
    def from_get_response(cls, item: Any, key: MongoCollectionKey) -> "MongoCollectionInfo":
        return cls(
            collection=item,
            account=key.account_name,
            database=key.database_name,
            name=item.name,
            resource_group=key.resource_group,
            location=item.location,
        )
