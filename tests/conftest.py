# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for inventory tests.

This module provides common test fixtures, mock objects, and configuration
that can be used across all test modules.
"""

import pytest

from AzureInventory.CosmosDB.models.mongo_collection import DatabaseAccountInfo


@pytest.fixture
def sample_account():
    """A MongoDB database account in resource group ``rg1``."""
    return DatabaseAccountInfo(name="acct1", resource_group="rg1", location="eastus", kind="MongoDB")


@pytest.fixture(autouse=True)
def _clear_azure_env(monkeypatch):
    for name in ("AZURE_SUBSCRIPTION_ID", "AZURE_ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
