# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

TRANSIENT_STATUS = {429, 502, 503, 504}

# Service error codes that mean the resource does not exist
NOT_FOUND_CODES = ("ResourceNotFound", "NotFound")

# Validation subcodes
VALIDATION_UNKNOWN_CLOUD_ENVIRONMENT = "validation_unknown_cloud_environment"
VALIDATION_LIMIT_NEGATIVE = "validation_limit_negative"

# Session subcodes
SESSION_SUBSCRIPTION_MISSING = "session_subscription_missing"
SESSION_TOKEN_FAILED = "session_token_failed"

# Transport subcodes
TRANSPORT_REQUEST_FAILED = "transport_request_failed"
TRANSPORT_RESPONSE_FAILED = "transport_response_failed"

# Transform subcodes
TRANSFORM_FAILED = "transform_failed"


def _http_subcode(status: int) -> str:
    return f"http_{status}"


def _is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS
