# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Operation namespaces for the inventory client."""

__all__ = []
