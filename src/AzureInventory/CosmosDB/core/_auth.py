# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from azure.core.credentials import TokenCredential


class _AuthManager:
    """
    Azure Identity-based authentication holder for the management API.

    Tokens are acquired by the management client's bearer token policy, scoped
    to the endpoint of the configured cloud, each time a session sends a request.
    """

    def __init__(self, credential: TokenCredential) -> None:
        if not isinstance(credential, TokenCredential):
            raise TypeError("credential must implement azure.core.credentials.TokenCredential.")
        self.credential: TokenCredential = credential
