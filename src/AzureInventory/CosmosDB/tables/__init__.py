# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Table definitions exposed by the inventory library."""

from .cosmosdb_mongo_collection import AZURE_COSMOSDB_MONGO_COLLECTION

__all__ = ["AZURE_COSMOSDB_MONGO_COLLECTION"]
