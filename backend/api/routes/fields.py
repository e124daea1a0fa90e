from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_ddm_client
from ddm_api.client import DDMClient
from schemas.api import (
    ConfigureFieldResponse,
    FieldMaskingRequest,
    FieldOperationResponse,
    FieldRequest,
    FieldsListResponse,
    MaskAndAuthTagView,
    TableConfigsResponse,
    TablesListResponse,
)
from services import field_masking_service

logger = logging.getLogger(__name__)
router = APIRouter()


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@router.get("/tables", response_model=TablesListResponse)
async def list_tables(client: DDMClient = Depends(get_ddm_client)):
    return await client.get_tables()


@router.get("/tables/{table_name}/fields", response_model=FieldsListResponse)
async def list_fields(
    table_name: str,
    client: DDMClient = Depends(get_ddm_client),
):
    """List a table's fields with their declared types."""
    return await client.get_fields(table_name)


@router.get("/tables/{table_name}/configs", response_model=TableConfigsResponse)
async def list_field_configs(
    table_name: str,
    client: DDMClient = Depends(get_ddm_client),
):
    """Existing masking configuration for every field of a table."""
    return await field_masking_service.get_field_configs(client, table_name)


@router.get("/mask-and-auth-tag", response_model=MaskAndAuthTagView)
async def get_mask_and_auth_tag(
    table_name: str = Query(..., alias="tableName", min_length=1),
    field_name: str = Query(..., alias="fieldName", min_length=1),
    user_name: str | None = Query(None, alias="userName"),
    client: DDMClient = Depends(get_ddm_client),
):
    """Effective mask and authorization tag of a field, optionally for a user."""
    return await field_masking_service.get_mask_and_auth_tag(
        client, table_name, field_name, user_name
    )


# ---------------------------------------------------------------------------
# Masking
# ---------------------------------------------------------------------------

@router.post("/configure", response_model=ConfigureFieldResponse)
async def configure_field(
    body: FieldMaskingRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    """Set a field's mask and authorization tag."""
    return await field_masking_service.configure_field(client, body)


@router.post("/unset-mask", response_model=FieldOperationResponse)
async def unset_mask(
    body: FieldRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    response = await client.unset_mask(body)
    if response.success:
        logger.info("Removed mask from %s.%s", body.table_name, body.field_name)
    return response


@router.post("/unset-auth-tag", response_model=FieldOperationResponse)
async def unset_auth_tag(
    body: FieldRequest,
    client: DDMClient = Depends(get_ddm_client),
):
    response = await client.unset_auth_tag(body)
    if response.success:
        logger.info("Removed authorization tag from %s.%s", body.table_name, body.field_name)
    return response
