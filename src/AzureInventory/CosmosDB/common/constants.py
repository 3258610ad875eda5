# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for Azure Resource Manager resource ids and telemetry attributes.
"""

# Position of the resource group in a slash-delimited ARM resource id:
# "", "subscriptions", <sub>, "resourceGroups", <rg>, ...
RESOURCE_GROUP_SEGMENT = 4

# OpenTelemetry attribute names
OTEL_ATTR_DB_SYSTEM = "db.system"
OTEL_ATTR_DB_OPERATION = "db.operation"
OTEL_ATTR_HTTP_METHOD = "http.method"
OTEL_ATTR_HTTP_URL = "http.url"
OTEL_ATTR_HTTP_STATUS_CODE = "http.status_code"
OTEL_ATTR_INVENTORY_REQUEST_ID = "inventory.client_request_id"
OTEL_ATTR_INVENTORY_SERVICE_REQUEST_ID = "inventory.service_request_id"
