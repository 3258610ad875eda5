# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Common constants for the inventory library.
"""

__all__ = []
