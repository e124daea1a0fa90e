from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_ddm_client
from ddm_api.client import DDMClient
from schemas.api import (
    BulkGrantSummary,
    DeleteGrantedRoleRequest,
    DeleteGrantedRoleResponse,
    GrantRoleRequest,
    GrantRoleResponse,
    GrantRolesRequest,
    NameListResponse,
    RoleCountsResponse,
    RoleRequest,
    RoleResponse,
)
from services import directory_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=NameListResponse)
async def list_roles(client: DDMClient = Depends(get_ddm_client)):
    """List role names."""
    return await directory_service.list_roles(client)


@router.get("/with-counts", response_model=RoleCountsResponse)
async def list_roles_with_counts(
    sort_by_count: bool = Query(False, alias="sortByCount"),
    client: DDMClient = Depends(get_ddm_client),
):
    """List roles with the number of users granted each."""
    return await directory_service.list_roles_with_counts(client, sort_by_count=sort_by_count)


@router.get("/{role_name}/auth-tags", response_model=NameListResponse)
async def list_role_auth_tags(
    role_name: str,
    client: DDMClient = Depends(get_ddm_client),
):
    """List the authorization tags carried by a role."""
    return await directory_service.list_role_auth_tags(client, role_name)


@router.post("/", response_model=RoleResponse)
async def create_role(
    body: RoleRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    response = await client.create_role(body)
    if response.success:
        logger.info("Created role %s", body.role_name)
    return response


@router.delete("/", response_model=RoleResponse)
async def delete_role(
    body: RoleRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    response = await client.delete_role(body)
    if response.success:
        logger.info("Deleted role %s", body.role_name)
    return response


@router.post("/grants", response_model=GrantRoleResponse)
async def grant_role(
    body: GrantRoleRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Grant a role to one user."""
    return await client.grant_role(body)


@router.post("/grants/bulk", response_model=BulkGrantSummary)
async def grant_roles(
    body: GrantRolesRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Grant one role to several users and summarise the outcome."""
    return await directory_service.grant_roles(client, body)


@router.delete("/grants", response_model=DeleteGrantedRoleResponse)
async def delete_granted_role(
    body: DeleteGrantedRoleRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Revoke a role grant by its grant ID."""
    return await client.delete_granted_role(body)
