from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_ddm_client
from ddm_api.client import DDMClient
from schemas.api import (
    CreateUserRequest,
    NameListResponse,
    UserRequest,
    UserResponse,
    UserRoleGrantsResponse,
)
from services import directory_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=NameListResponse)
async def list_users(client: DDMClient = Depends(get_ddm_client)):
    """List user names."""
    return await directory_service.list_users(client)


@router.get("/{user_name}/role-grants", response_model=UserRoleGrantsResponse)
async def get_user_role_grants(
    user_name: str,
    client: DDMClient = Depends(get_ddm_client),
):
    """Show the roles granted to a user."""
    return await client.get_user_role_grants(user_name)


@router.post("/", response_model=UserResponse)
async def create_user(
    body: CreateUserRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    response = await client.create_user(body)
    if response.success:
        logger.info("Created user %s", body.user_name)
    return response


@router.delete("/", response_model=UserResponse)
async def delete_user(
    body: UserRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    response = await client.delete_user(body)
    if response.success:
        logger.info("Deleted user %s", body.user_name)
    return response


@router.post("/security-admin", response_model=UserResponse)
async def grant_security_admin(
    body: UserRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Grant the DDM security-admin privilege to a user."""
    response = await client.grant_security_admin(body)
    if response.success:
        logger.info("Granted security admin to %s", body.user_name)
    return response
