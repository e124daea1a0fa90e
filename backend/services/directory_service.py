"""Roles, users and authorization tags as lists the console can render."""

from __future__ import annotations

import logging

from ddm.listing import parse_role_counts, parse_tag_roles, split_list
from ddm_api.client import DDMClient
from ddm_api.errors import response_error_message
from schemas.api import (
    BulkGrantSummary,
    GrantRolesRequest,
    GrantRolesResponse,
    NameListResponse,
    QueryResult,
    RoleCountItem,
    RoleCountsResponse,
    TagRoleItem,
    TagRolesResponse,
)

logger = logging.getLogger(__name__)


def _names(response: QueryResult) -> NameListResponse:
    return NameListResponse(items=split_list(response.result) if response.success else [])


async def list_roles(client: DDMClient) -> NameListResponse:
    return _names(await client.get_roles())


async def list_users(client: DDMClient) -> NameListResponse:
    return _names(await client.get_users())


async def list_auth_tags(client: DDMClient) -> NameListResponse:
    return _names(await client.get_auth_tags())


async def list_role_auth_tags(client: DDMClient, role_name: str) -> NameListResponse:
    return _names(await client.get_role_auth_tags(role_name))


async def list_roles_with_counts(client: DDMClient, sort_by_count: bool = False) -> RoleCountsResponse:
    response = await client.get_roles_with_counts()
    roles = parse_role_counts(response.result) if response.success else []
    if sort_by_count:
        roles = sorted(roles, key=lambda r: r.count, reverse=True)
    return RoleCountsResponse(roles=[RoleCountItem(name=r.name, count=r.count) for r in roles])


async def list_auth_tags_with_roles(client: DDMClient, sort_by_role: bool = False) -> TagRolesResponse:
    response = await client.get_auth_tags_with_roles()
    tags = parse_tag_roles(response.result) if response.success else []
    if sort_by_role:
        tags = sorted(tags, key=lambda t: (t.role.lower(), t.name.lower()))
    return TagRolesResponse(tags=[TagRoleItem(name=t.name, role=t.role) for t in tags])


def summarize_bulk_grant(request: GrantRolesRequest, response: GrantRolesResponse) -> BulkGrantSummary:
    """Condense per-user grant outcomes into one console message."""
    total = len(response.results)
    succeeded = sum(1 for r in response.results if r.success)
    failures = [
        f"{r.user_name}: {r.error or 'failed'}" for r in response.results if not r.success
    ]

    if response.success:
        message = f'Granted role "{request.role_name}" to {succeeded}/{total} users'
    else:
        fallback = ", ".join(failures) or "Failed to grant role to some or all users"
        message = response_error_message(response, fallback)

    return BulkGrantSummary(
        role_name=request.role_name,
        success=response.success,
        succeeded=succeeded,
        total=total,
        message=message,
        failures=failures,
    )


async def grant_roles(client: DDMClient, request: GrantRolesRequest) -> BulkGrantSummary:
    response = await client.grant_roles(request)
    summary = summarize_bulk_grant(request, response)
    logger.info(
        "Bulk grant of %s: %d/%d succeeded",
        request.role_name, summary.succeeded, summary.total,
    )
    return summary
