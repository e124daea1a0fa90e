"""Async client for the DDM REST API.

One coroutine per backend endpoint; each call is a single HTTP round trip
through a short-lived ``httpx.AsyncClient``. Credentials, when present, are
sent as HTTP Basic on every request.

``create_ddm_client()`` builds a client from settings and is the usual way
to get one.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import get_settings
from ddm_api.errors import (
    DDMApiError,
    DDMAuthenticationError,
    DDMConnectionError,
    backend_error_from_body,
)
from schemas.api import (
    AssociateAuthTagRoleRequest,
    AssociateAuthTagRoleResponse,
    AuthTagRequest,
    AuthTagResponse,
    AuthTagRoleResponse,
    ConfigureFieldRequest,
    ConfigureFieldResponse,
    CreateUserRequest,
    DeleteGrantedRoleRequest,
    DeleteGrantedRoleResponse,
    FieldOperationResponse,
    FieldRequest,
    FieldsListResponse,
    GrantRoleRequest,
    GrantRoleResponse,
    GrantRolesRequest,
    GrantRolesResponse,
    HealthResponse,
    MaskAndAuthTagResponse,
    QueryResult,
    RoleAuthTagsListResponse,
    RoleRequest,
    RoleResponse,
    TableConfigsResponse,
    TablesListResponse,
    UpdateAuthTagRequest,
    UpdateAuthTagResponse,
    UserRequest,
    UserResponse,
    UserRoleGrantsResponse,
)
from schemas.entities import Credentials

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class DDMClient:
    """Thin typed wrapper over the DDM backend endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        credentials: Credentials | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.credentials = credentials
        self._transport = transport

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _auth(self) -> httpx.BasicAuth | None:
        if self.credentials is None:
            return None
        return httpx.BasicAuth(self.credentials.username, self.credentials.password)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: BaseModel | None = None,
    ) -> dict[str, Any]:
        payload = body.model_dump(by_alias=True, mode="json") if body is not None else None
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                auth=self._auth(),
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            ) as client:
                response = await client.request(method, path, params=params, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("DDM backend timed out on %s %s", method, path)
            raise DDMConnectionError(
                f"DDM backend did not respond within {self.timeout:g}s", status_code=504
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("DDM backend unreachable on %s %s: %s", method, path, exc)
            raise DDMConnectionError("DDM backend is unreachable") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            backend_error = backend_error_from_body(data)
            logger.warning(
                "DDM backend returned %d on %s %s: %s",
                response.status_code, method, path, backend_error or response.reason_phrase,
            )
            if response.status_code == 401:
                raise DDMAuthenticationError(backend_error=backend_error)
            raise DDMApiError(
                backend_error or f"DDM backend error ({response.status_code})",
                status_code=response.status_code,
                backend_error=backend_error,
            )

        if not isinstance(data, dict):
            raise DDMApiError("DDM backend returned an unexpected response")
        return data

    @staticmethod
    def _parse(model: type[ModelT], data: dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.warning("Unexpected DDM response shape for %s: %s", model.__name__, exc)
            raise DDMApiError("DDM backend returned an unexpected response") from exc

    async def _get(self, model: type[ModelT], path: str, **params: str | None) -> ModelT:
        query = {key: value for key, value in params.items() if value}
        return self._parse(model, await self._request("GET", path, params=query or None))

    async def _send(self, model: type[ModelT], method: str, path: str, body: BaseModel) -> ModelT:
        return self._parse(model, await self._request(method, path, body=body))

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def get_health(self) -> HealthResponse:
        return await self._get(HealthResponse, "/health")

    # ------------------------------------------------------------------
    # Field operations
    # ------------------------------------------------------------------

    async def configure_field(self, request: ConfigureFieldRequest) -> ConfigureFieldResponse:
        return await self._send(ConfigureFieldResponse, "POST", "/configure-field", request)

    async def unset_mask(self, request: FieldRequest) -> FieldOperationResponse:
        return await self._send(FieldOperationResponse, "POST", "/unset-mask", request)

    async def unset_auth_tag(self, request: FieldRequest) -> FieldOperationResponse:
        return await self._send(FieldOperationResponse, "POST", "/unset-auth-tag", request)

    # ------------------------------------------------------------------
    # Authorization tags
    # ------------------------------------------------------------------

    async def create_auth_tag(self, request: AuthTagRequest) -> AuthTagResponse:
        return await self._send(AuthTagResponse, "POST", "/create-auth-tag", request)

    async def update_auth_tag(self, request: UpdateAuthTagRequest) -> UpdateAuthTagResponse:
        return await self._send(UpdateAuthTagResponse, "POST", "/update-auth-tag", request)

    async def delete_auth_tag(self, request: AuthTagRequest) -> AuthTagResponse:
        return await self._send(AuthTagResponse, "DELETE", "/delete-auth-tag", request)

    async def associate_auth_tag_role(
        self, request: AssociateAuthTagRoleRequest
    ) -> AssociateAuthTagRoleResponse:
        return await self._send(
            AssociateAuthTagRoleResponse, "POST", "/associate-auth-tag-role", request
        )

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    async def create_role(self, request: RoleRequest) -> RoleResponse:
        return await self._send(RoleResponse, "POST", "/create-role", request)

    async def delete_role(self, request: RoleRequest) -> RoleResponse:
        return await self._send(RoleResponse, "DELETE", "/delete-role", request)

    async def grant_role(self, request: GrantRoleRequest) -> GrantRoleResponse:
        return await self._send(GrantRoleResponse, "POST", "/grant-role", request)

    async def grant_roles(self, request: GrantRolesRequest) -> GrantRolesResponse:
        return await self._send(GrantRolesResponse, "POST", "/grant-roles", request)

    async def delete_granted_role(self, request: DeleteGrantedRoleRequest) -> DeleteGrantedRoleResponse:
        return await self._send(DeleteGrantedRoleResponse, "DELETE", "/delete-granted-role", request)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, request: CreateUserRequest) -> UserResponse:
        return await self._send(UserResponse, "POST", "/create-user", request)

    async def delete_user(self, request: UserRequest) -> UserResponse:
        return await self._send(UserResponse, "DELETE", "/delete-user", request)

    async def grant_security_admin(self, request: UserRequest) -> UserResponse:
        return await self._send(UserResponse, "POST", "/grant-security-admin", request)

    # ------------------------------------------------------------------
    # Information retrieval
    # ------------------------------------------------------------------

    async def get_mask_and_auth_tag(
        self, table_name: str, field_name: str, user_name: str | None = None
    ) -> MaskAndAuthTagResponse:
        return await self._get(
            MaskAndAuthTagResponse,
            "/mask-and-auth-tag",
            tableName=table_name,
            fieldName=field_name,
            userName=user_name,
        )

    async def get_auth_tag_role(self, domain_name: str, auth_tag_name: str) -> AuthTagRoleResponse:
        return await self._get(
            AuthTagRoleResponse, "/auth-tag-role", domainName=domain_name, authTagName=auth_tag_name
        )

    async def get_user_role_grants(self, user_name: str) -> UserRoleGrantsResponse:
        return await self._get(UserRoleGrantsResponse, "/user-role-grants", userName=user_name)

    # ------------------------------------------------------------------
    # Lists (comma-separated ``result`` strings)
    # ------------------------------------------------------------------

    async def get_roles(self) -> QueryResult:
        return await self._get(QueryResult, "/roles")

    async def get_role_auth_tags(self, role_name: str) -> RoleAuthTagsListResponse:
        return await self._get(RoleAuthTagsListResponse, "/role-auth-tags", roleName=role_name)

    async def get_users(self) -> QueryResult:
        return await self._get(QueryResult, "/users")

    async def get_auth_tags(self) -> QueryResult:
        return await self._get(QueryResult, "/auth-tags")

    async def get_roles_with_counts(self) -> QueryResult:
        return await self._get(QueryResult, "/roles-with-counts")

    async def get_auth_tags_with_roles(self) -> QueryResult:
        return await self._get(QueryResult, "/auth-tags-with-roles")

    # ------------------------------------------------------------------
    # Schema: tables and fields
    # ------------------------------------------------------------------

    async def get_tables(self) -> TablesListResponse:
        return await self._get(TablesListResponse, "/tables")

    async def get_fields(self, table_name: str) -> FieldsListResponse:
        return await self._get(FieldsListResponse, "/fields", tableName=table_name)

    async def get_table_configs(self, table_name: str) -> TableConfigsResponse:
        return await self._get(TableConfigsResponse, "/table-configs", tableName=table_name)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_ddm_client(
    credentials: Credentials | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DDMClient:
    """Build a client for the configured backend."""
    settings = get_settings()
    return DDMClient(
        base_url=settings.ddm_base_url,
        timeout=settings.ddm_timeout_seconds,
        credentials=credentials,
        transport=transport,
    )
