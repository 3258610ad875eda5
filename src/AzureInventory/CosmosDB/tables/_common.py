# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Columns and descriptions shared by every Azure inventory table."""

from __future__ import annotations

from typing import Iterable, Tuple

from ..models.column import Column, ColumnType, from_context

COLUMN_DESCRIPTION_TITLE = "Title of the resource."
COLUMN_DESCRIPTION_TAGS = "A map of tags for the resource."
COLUMN_DESCRIPTION_AKAS = "Array of globally unique identifier strings (also known as) for the resource."
COLUMN_DESCRIPTION_REGION = "The Azure region/location in which the resource is located."
COLUMN_DESCRIPTION_RESOURCE_GROUP = "The resource group which holds this resource."
COLUMN_DESCRIPTION_SUBSCRIPTION = "The Azure Subscription ID in which the resource is located."
COLUMN_DESCRIPTION_CLOUD_ENVIRONMENT = "The Azure Cloud Environment."


def azure_columns(columns: Iterable[Column]) -> Tuple[Column, ...]:
    """Append the ``cloud_environment`` and ``subscription_id`` columns to a table's own columns."""
    return tuple(columns) + (
        Column(
            name="cloud_environment",
            type=ColumnType.STRING,
            description=COLUMN_DESCRIPTION_CLOUD_ENVIRONMENT,
            transform=from_context("cloud_environment"),
        ),
        Column(
            name="subscription_id",
            type=ColumnType.STRING,
            description=COLUMN_DESCRIPTION_SUBSCRIPTION,
            transform=from_context("subscription_id"),
        ),
    )
