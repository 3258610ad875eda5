# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Azure Cosmos DB (Mongo API) collection metadata as queryable table rows.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
