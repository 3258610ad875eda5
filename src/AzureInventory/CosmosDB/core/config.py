# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ._error_codes import NOT_FOUND_CODES, VALIDATION_UNKNOWN_CLOUD_ENVIRONMENT
from .errors import ValidationError
from .telemetry import TelemetryConfig

AZURE_PUBLIC_CLOUD = "AZUREPUBLICCLOUD"
AZURE_CHINA_CLOUD = "AZURECHINACLOUD"
AZURE_US_GOVERNMENT_CLOUD = "AZUREUSGOVERNMENTCLOUD"

# Resource manager endpoints per cloud environment
_RESOURCE_MANAGER_ENDPOINTS: Dict[str, str] = {
    AZURE_PUBLIC_CLOUD: "https://management.azure.com",
    AZURE_CHINA_CLOUD: "https://management.chinacloudapi.cn",
    AZURE_US_GOVERNMENT_CLOUD: "https://management.usgovcloudapi.net",
}


@dataclass(frozen=True)
class InventoryConfig:
    """
    Configuration settings for Cosmos DB inventory operations.

    :param subscription_id: Azure subscription that listings and lookups are scoped to.
    :type subscription_id: str or None
    :param cloud_environment: Azure cloud name, e.g. ``"AZUREPUBLICCLOUD"`` (default),
        ``"AZURECHINACLOUD"`` or ``"AZUREUSGOVERNMENTCLOUD"``.
    :type cloud_environment: str
    :param resource_manager_endpoint: Explicit management endpoint. Overrides the
        endpoint derived from ``cloud_environment``.
    :type resource_manager_endpoint: str or None
    :param api_version: ``Microsoft.DocumentDB`` API version. Defaults to the version the
        installed ``azure-mgmt-cosmosdb`` client was generated for.
    :type api_version: str or None
    :param http_retries: Retries after a failed attempt (default: 0, no retry).
    :type http_retries: int or None
    :param http_backoff: Backoff factor for exponential delay between retries (default: 0.8).
    :type http_backoff: float or None
    :param http_timeout: Connection and read timeout in seconds (default: 10).
    :type http_timeout: float or None
    :param ignore_error_codes: Service error codes treated as "no row" by point lookups.
    :type ignore_error_codes: tuple[str, ...]
    :param telemetry: Optional telemetry settings.
    :type telemetry: ~AzureInventory.CosmosDB.core.telemetry.TelemetryConfig or None
    """

    subscription_id: Optional[str] = None
    cloud_environment: str = AZURE_PUBLIC_CLOUD
    resource_manager_endpoint: Optional[str] = None
    api_version: Optional[str] = None

    # HTTP tuning
    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_timeout: Optional[float] = None

    ignore_error_codes: Tuple[str, ...] = field(default=NOT_FOUND_CODES)
    telemetry: Optional[TelemetryConfig] = None

    @classmethod
    def from_env(cls) -> "InventoryConfig":
        """
        Create a configuration instance from ``AZURE_*`` environment variables.

        Reads ``AZURE_SUBSCRIPTION_ID`` and ``AZURE_ENVIRONMENT``; everything else
        keeps its default.

        :return: Configuration instance.
        :rtype: ~AzureInventory.CosmosDB.core.config.InventoryConfig
        """
        return cls(
            subscription_id=os.environ.get("AZURE_SUBSCRIPTION_ID") or None,
            cloud_environment=(os.environ.get("AZURE_ENVIRONMENT") or AZURE_PUBLIC_CLOUD).upper(),
        )

    def management_endpoint(self) -> str:
        """
        Resolve the resource manager endpoint for this configuration.

        :raises ~AzureInventory.CosmosDB.core.errors.ValidationError: If the cloud
            environment is unknown and no explicit endpoint is set.
        """
        if self.resource_manager_endpoint:
            return self.resource_manager_endpoint.rstrip("/")
        endpoint = _RESOURCE_MANAGER_ENDPOINTS.get((self.cloud_environment or "").upper())
        if endpoint is None:
            raise ValidationError(
                f"Unknown cloud environment: {self.cloud_environment!r}",
                subcode=VALIDATION_UNKNOWN_CLOUD_ENVIRONMENT,
                details={"supported": sorted(_RESOURCE_MANAGER_ENDPOINTS)},
            )
        return endpoint
