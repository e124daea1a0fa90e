"""Tests for ddm_api.client: backend calls and error promotion."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from ddm_api.client import DDMClient
from ddm_api.errors import (
    DDMApiError,
    DDMAuthenticationError,
    DDMConnectionError,
    api_error_message,
    response_error_message,
)
from schemas.api import AuthTagRequest, GrantRolesRequest, MaskAndAuthTagResponse, RoleRequest
from schemas.entities import Credentials

BASE_URL = "http://ddm.test/web/api/masking"


@pytest.mark.asyncio
class TestRequests:

    async def test_post_sends_camel_case_body(self, backend, ddm_client: DDMClient):
        backend.reply(
            "POST",
            "/create-auth-tag",
            {"domainName": "sports", "authTagName": "#DDM_See_PII", "success": True, "message": "ok"},
        )
        response = await ddm_client.create_auth_tag(
            AuthTagRequest(domain_name="sports", auth_tag_name="#DDM_See_PII")
        )

        assert response.success is True
        assert response.auth_tag_name == "#DDM_See_PII"
        sent = json.loads(backend.last_request.content)
        assert sent == {"domainName": "sports", "authTagName": "#DDM_See_PII"}

    async def test_delete_carries_json_body(self, backend, ddm_client: DDMClient):
        backend.reply("DELETE", "/delete-auth-tag", {"success": True, "message": "deleted"})
        await ddm_client.delete_auth_tag(
            AuthTagRequest(domain_name="sports", auth_tag_name="#DDM_See_PII")
        )
        assert backend.last_request.method == "DELETE"
        assert json.loads(backend.last_request.content)["authTagName"] == "#DDM_See_PII"

    async def test_query_params_skip_missing_user(self, backend, ddm_client: DDMClient):
        backend.reply(
            "GET",
            "/mask-and-auth-tag",
            {"tableName": "Customer", "fieldName": "Phone", "result": "mask: D:", "success": True},
        )
        response = await ddm_client.get_mask_and_auth_tag("Customer", "Phone")

        assert isinstance(response, MaskAndAuthTagResponse)
        params = backend.last_request.url.params
        assert params["tableName"] == "Customer"
        assert params["fieldName"] == "Phone"
        assert "userName" not in params

    async def test_list_endpoint(self, backend, ddm_client: DDMClient):
        backend.reply("GET", "/roles", {"result": "Admin,Auditor", "success": True})
        response = await ddm_client.get_roles()
        assert response.result == "Admin,Auditor"

    async def test_grant_roles_results(self, backend, ddm_client: DDMClient):
        backend.reply(
            "POST",
            "/grant-roles",
            {
                "roleName": "Admin",
                "success": False,
                "message": "partial",
                "results": [
                    {"userName": "alice", "roleName": "Admin", "success": True},
                    {"userName": "bob", "roleName": "Admin", "success": False, "error": "no user"},
                ],
            },
        )
        response = await ddm_client.grant_roles(
            GrantRolesRequest(user_names=["alice", "bob"], role_name="Admin")
        )
        assert [r.user_name for r in response.results] == ["alice", "bob"]
        assert response.results[1].error == "no user"

    async def test_basic_auth_forwarded(self, backend):
        client = DDMClient(
            base_url=BASE_URL,
            credentials=Credentials("admin", "s3cret"),
            transport=httpx.MockTransport(backend),
        )
        backend.reply("GET", "/users", {"result": "", "success": True})
        await client.get_users()

        expected = base64.b64encode(b"admin:s3cret").decode()
        assert backend.last_request.headers["Authorization"] == f"Basic {expected}"

    async def test_no_auth_header_without_credentials(self, backend, ddm_client: DDMClient):
        backend.reply("GET", "/users", {"result": "", "success": True})
        await ddm_client.get_users()
        assert "Authorization" not in backend.last_request.headers


@pytest.mark.asyncio
class TestErrors:

    async def test_backend_error_message_promoted(self, backend, ddm_client: DDMClient):
        backend.reply("POST", "/create-role", {"error": "Role already exists"}, status_code=409)
        with pytest.raises(DDMApiError) as exc_info:
            await ddm_client.create_role(RoleRequest(role_name="Admin"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Role already exists"
        assert api_error_message(exc_info.value) == "Role already exists"

    async def test_error_without_body(self, backend, ddm_client: DDMClient):
        backend.reply("GET", "/tables", None, status_code=500)
        with pytest.raises(DDMApiError, match=r"DDM backend error \(500\)"):
            await ddm_client.get_tables()

    async def test_unauthorized(self, backend, ddm_client: DDMClient):
        backend.reply("GET", "/roles", None, status_code=401)
        with pytest.raises(DDMAuthenticationError) as exc_info:
            await ddm_client.get_roles()
        assert exc_info.value.status_code == 401

    async def test_unreachable(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = DDMClient(base_url=BASE_URL, transport=httpx.MockTransport(refuse))
        with pytest.raises(DDMConnectionError) as exc_info:
            await client.get_health()
        assert exc_info.value.status_code == 502

    async def test_timeout(self):
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = DDMClient(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(slow))
        with pytest.raises(DDMConnectionError) as exc_info:
            await client.get_health()
        assert exc_info.value.status_code == 504

    async def test_non_object_response(self, backend, ddm_client: DDMClient):
        backend.reply("GET", "/tables", ["Customer"])
        with pytest.raises(DDMApiError, match="unexpected response"):
            await ddm_client.get_tables()

    async def test_wrong_shape(self, backend, ddm_client: DDMClient):
        backend.reply("GET", "/tables", {"tables": "Customer", "success": True})
        with pytest.raises(DDMApiError, match="unexpected response"):
            await ddm_client.get_tables()


class TestMessageHelpers:

    def test_response_error_prefers_error(self):
        assert response_error_message({"error": "bad", "message": "meh"}, "fallback") == "bad"

    def test_response_error_falls_back_to_message(self):
        assert response_error_message({"error": "  ", "message": "meh"}, "fallback") == "meh"

    def test_response_error_fallback(self):
        assert response_error_message({}, "fallback") == "fallback"

    def test_api_error_message_plain_exception(self):
        assert api_error_message(RuntimeError("boom")) == "boom"
        assert api_error_message(RuntimeError(""), "Request failed") == "Request failed"
