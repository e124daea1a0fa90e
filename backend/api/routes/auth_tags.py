from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_ddm_client
from ddm.tag_validator import authorization_tag_validation_error
from ddm_api.client import DDMClient
from schemas.api import (
    AssociateAuthTagRoleRequest,
    AssociateAuthTagRoleResponse,
    AuthTagRequest,
    AuthTagResponse,
    AuthTagRoleResponse,
    NameListResponse,
    TagRolesResponse,
    UpdateAuthTagRequest,
    UpdateAuthTagResponse,
)
from services import directory_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=NameListResponse)
async def list_auth_tags(client: DDMClient = Depends(get_ddm_client)):
    """List authorization tag names."""
    return await directory_service.list_auth_tags(client)


@router.get("/with-roles", response_model=TagRolesResponse)
async def list_auth_tags_with_roles(
    sort_by_role: bool = Query(False, alias="sortByRole"),
    client: DDMClient = Depends(get_ddm_client),
):
    """List authorization tags paired with their associated role."""
    return await directory_service.list_auth_tags_with_roles(client, sort_by_role=sort_by_role)


@router.get("/role", response_model=AuthTagRoleResponse)
async def get_auth_tag_role(
    domain_name: str = Query(..., alias="domainName", min_length=1),
    auth_tag_name: str = Query(..., alias="authTagName"),
    client: DDMClient = Depends(get_ddm_client),
):
    """Show the role associated with an authorization tag."""
    error = authorization_tag_validation_error(auth_tag_name)
    if error:
        raise HTTPException(status_code=422, detail=error)
    return await client.get_auth_tag_role(domain_name, auth_tag_name)


@router.post("/", response_model=AuthTagResponse)
async def create_auth_tag(
    body: AuthTagRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Create an authorization tag in a domain."""
    response = await client.create_auth_tag(body)
    if response.success:
        logger.info("Created authorization tag %s in %s", body.auth_tag_name, body.domain_name)
    return response


@router.put("/", response_model=UpdateAuthTagResponse)
async def update_auth_tag(
    body: UpdateAuthTagRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Rename an authorization tag."""
    response = await client.update_auth_tag(body)
    if response.success:
        logger.info("Renamed authorization tag %s to %s", body.auth_tag_name, body.new_name)
    return response


@router.delete("/", response_model=AuthTagResponse)
async def delete_auth_tag(
    body: AuthTagRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Delete an authorization tag."""
    response = await client.delete_auth_tag(body)
    if response.success:
        logger.info("Deleted authorization tag %s from %s", body.auth_tag_name, body.domain_name)
    return response


@router.post("/associate-role", response_model=AssociateAuthTagRoleResponse)
async def associate_auth_tag_role(
    body: AssociateAuthTagRoleRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Move an authorization tag from its current role to a new one."""
    return await client.associate_auth_tag_role(body)
