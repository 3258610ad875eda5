# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the inventory library.

- :mod:`~AzureInventory.CosmosDB.models.column`: column and table descriptors.
- :mod:`~AzureInventory.CosmosDB.models.mongo_collection`: hydrated items and keys.

Import directly from the specific module files.
"""

__all__ = []
