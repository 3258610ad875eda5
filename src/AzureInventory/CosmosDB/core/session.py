# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Authenticated, request-scoped sessions against the Azure Resource Manager API.

A :class:`ManagementSession` owns one
:class:`~azure.mgmt.cosmosdb.CosmosDBManagementClient`, opened for a single
listing or lookup and closed when it is done. Sessions are never shared
between invocations, so listings for different parents can run concurrently.
Failures raised by the management client are translated into the
:class:`~AzureInventory.CosmosDB.core.errors.InventoryError` tree.
"""

from __future__ import annotations

import logging
import uuid
from functools import partial
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Union

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
    ServiceRequestError,
)
from azure.core.pipeline.transport import RequestsTransport
from azure.mgmt.cosmosdb import CosmosDBManagementClient

from ._auth import _AuthManager
from ._error_codes import (
    SESSION_SUBSCRIPTION_MISSING,
    SESSION_TOKEN_FAILED,
    TRANSPORT_REQUEST_FAILED,
    TRANSPORT_RESPONSE_FAILED,
    _http_subcode,
    _is_transient_status,
)
from .config import InventoryConfig
from .errors import HttpError, InventoryError, SessionError, TransportError
from .telemetry import (
    NoOpTelemetryManager,
    RequestContext,
    TelemetryManager,
    create_telemetry_manager,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ManagementSession:
    """
    Management API session bound to a subscription and an endpoint.

    :param subscription_id: Subscription the session is scoped to.
    :type subscription_id: str
    :param resource_manager_endpoint: Management endpoint, e.g. ``"https://management.azure.com"``.
    :type resource_manager_endpoint: str
    :param cloud_environment: Name of the Azure cloud the endpoint belongs to.
    :type cloud_environment: str
    :param client: Management client owned by this session.
    :type client: ~azure.mgmt.cosmosdb.CosmosDBManagementClient
    :param telemetry: Optional telemetry manager.
    """

    def __init__(
        self,
        *,
        subscription_id: str,
        resource_manager_endpoint: str,
        cloud_environment: str,
        client: CosmosDBManagementClient,
        telemetry: Optional[Union[TelemetryManager, NoOpTelemetryManager]] = None,
    ) -> None:
        self.subscription_id = subscription_id
        self.resource_manager_endpoint = resource_manager_endpoint.rstrip("/")
        self.cloud_environment = cloud_environment
        self._client = client
        self._telemetry = telemetry or NoOpTelemetryManager()

    def __enter__(self) -> "ManagementSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def token_scope(self) -> str:
        return f"{self.resource_manager_endpoint}/.default"

    # ------------------------------------------------------------ operations

    def list_database_accounts(self) -> Iterator[Any]:
        """
        Lazily iterate the Cosmos DB database accounts of the subscription.

        :return: Iterator of ``DatabaseAccountGetResults`` models.
        :raises ~AzureInventory.CosmosDB.core.errors.InventoryError: If the listing fails.
        """
        return self._iterate("accounts.list", self._client.database_accounts.list)

    def list_mongo_collections(self, resource_group: str, account_name: str, database_name: str) -> Iterator[Any]:
        """
        Lazily iterate the collections of one Mongo database.

        Pages are requested only while the caller keeps consuming, so stopping
        early issues no further page requests.

        :return: Iterator of ``MongoDBCollectionGetResults`` models.
        :raises ~AzureInventory.CosmosDB.core.errors.InventoryError: If the listing fails.
        """
        return self._iterate(
            "mongo_collections.list",
            partial(
                self._client.mongo_db_resources.list_mongo_db_collections,
                resource_group_name=resource_group,
                account_name=account_name,
                database_name=database_name,
            ),
        )

    def get_mongo_collection(
        self, resource_group: str, account_name: str, database_name: str, collection_name: str
    ) -> Any:
        """
        Fetch one Mongo collection.

        :return: The ``MongoDBCollectionGetResults`` model.
        :raises ~AzureInventory.CosmosDB.core.errors.HttpError: On any error status.
        """
        with self._telemetry.trace_request("mongo_collections.get", str(uuid.uuid4())) as ctx:
            try:
                return self._client.mongo_db_resources.get_mongo_db_collection(
                    resource_group_name=resource_group,
                    account_name=account_name,
                    database_name=database_name,
                    collection_name=collection_name,
                    **self._call_options(ctx),
                )
            except AzureError as exc:
                raise self._to_inventory_error(exc) from exc

    # --------------------------------------------------------------- helpers

    def _iterate(self, operation: str, list_call: Callable[..., Iterable[Any]]) -> Iterator[Any]:
        with self._telemetry.trace_request(operation, str(uuid.uuid4())) as ctx:
            try:
                for item in list_call(**self._call_options(ctx)):
                    yield item
            except AzureError as exc:
                raise self._to_inventory_error(exc) from exc

    def _call_options(self, ctx: RequestContext) -> Dict[str, Any]:
        # Hooks run once per HTTP request, so every page of a listing is reported
        def on_request(request: Any) -> None:
            self._telemetry.record_request(ctx, request.http_request.method, request.http_request.url)

        def on_response(response: Any) -> None:
            http_response = response.http_response
            self._telemetry.record_response(
                ctx, http_response.status_code, http_response.headers.get("x-ms-request-id")
            )

        return {
            "request_id": ctx.client_request_id,
            "raw_request_hook": on_request,
            "raw_response_hook": on_response,
        }

    def _to_inventory_error(self, exc: AzureError) -> InventoryError:
        if isinstance(exc, HttpResponseError) and exc.response is not None:
            return _to_http_error(exc)
        if isinstance(exc, ClientAuthenticationError):
            return SessionError(
                f"Failed to acquire a token for {self.token_scope}: {exc.message}",
                subcode=SESSION_TOKEN_FAILED,
                details={"scope": self.token_scope},
            )
        subcode = TRANSPORT_REQUEST_FAILED if isinstance(exc, ServiceRequestError) else TRANSPORT_RESPONSE_FAILED
        return TransportError(
            f"Management request failed: {exc.message}",
            subcode=subcode,
            details={"endpoint": self.resource_manager_endpoint},
        )


def _to_http_error(exc: HttpResponseError) -> HttpError:
    status = exc.status_code
    response = exc.response
    headers = response.headers or {}
    code = exc.error.code if exc.error is not None else None
    message = exc.error.message if exc.error is not None else None
    if code is None and isinstance(exc, ResourceNotFoundError):
        code = "NotFound"
    body_text = response.text() or ""
    retry_after = None
    ra = headers.get("Retry-After")
    if ra:
        try:
            retry_after = int(ra)
        except (TypeError, ValueError):
            retry_after = None
    return HttpError(
        message or f"HTTP {status}",
        status_code=status,
        is_transient=_is_transient_status(status),
        subcode=_http_subcode(status),
        service_error_code=code,
        correlation_id=headers.get("x-ms-correlation-request-id"),
        request_id=headers.get("x-ms-request-id"),
        body_excerpt=body_text[:200] if body_text else None,
        retry_after=retry_after,
    )


def new_session(
    config: InventoryConfig,
    auth: _AuthManager,
    *,
    transport: Optional[Any] = None,
) -> ManagementSession:
    """
    Open an authenticated management session.

    The management client is built for the configured cloud: requests go to
    its resource manager endpoint and tokens are scoped to ``{endpoint}/.default``.

    :param config: Inventory configuration providing subscription and endpoint.
    :param auth: Authentication helper wrapping the caller's credential.
    :param transport: Optional ``azure-core`` transport; a
        :class:`~azure.core.pipeline.transport.RequestsTransport` owned by the
        session is created when omitted.
    :raises ~AzureInventory.CosmosDB.core.errors.SessionError: If no subscription
        is configured.
    :raises ~AzureInventory.CosmosDB.core.errors.ValidationError: If the cloud
        environment is unknown.
    """
    if not config.subscription_id:
        raise SessionError(
            "A subscription id is required to open a management session.",
            subcode=SESSION_SUBSCRIPTION_MISSING,
        )
    endpoint = config.management_endpoint()
    timeout = config.http_timeout if config.http_timeout is not None else DEFAULT_TIMEOUT

    options: Dict[str, Any] = {"retry_total": config.http_retries or 0}
    if config.http_backoff is not None:
        options["retry_backoff_factor"] = config.http_backoff
    if config.api_version:
        options["api_version"] = config.api_version

    client = CosmosDBManagementClient(
        auth.credential,
        config.subscription_id,
        base_url=endpoint,
        credential_scopes=[f"{endpoint}/.default"],
        transport=transport or RequestsTransport(connection_timeout=timeout, read_timeout=timeout),
        **options,
    )
    logger.debug("Opened management session for subscription %s at %s", config.subscription_id, endpoint)
    return ManagementSession(
        subscription_id=config.subscription_id,
        resource_manager_endpoint=endpoint,
        cloud_environment=config.cloud_environment,
        client=client,
        telemetry=create_telemetry_manager(config.telemetry),
    )
