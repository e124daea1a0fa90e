from __future__ import annotations

import logging

from fastapi import HTTPException

from ddm.mask_spec import MaskKind, build_masking_spec
from ddm.summary_parser import parse_config_summary
from ddm_api.client import DDMClient
from schemas.api import (
    ConfigureFieldRequest,
    ConfigureFieldResponse,
    FieldMaskingRequest,
    MaskAndAuthTagResponse,
    MaskAndAuthTagView,
    TableConfigsResponse,
    TableFieldConfigItem,
)
from schemas.entities import FieldConfig

logger = logging.getLogger(__name__)


async def lookup_field_type(client: DDMClient, table_name: str, field_name: str) -> str | None:
    """Return the declared type of *field_name*, or ``None`` if unknown."""
    fields = await client.get_fields(table_name)
    return fields.field_types.get(field_name)


async def configure_field(client: DDMClient, body: FieldMaskingRequest) -> ConfigureFieldResponse:
    """Map the console form onto a configure-field call and submit it.

    Partial masks are rejected up front for fields whose declared type is
    not CHARACTER.
    """
    if body.mask_kind is MaskKind.PARTIAL:
        field_type = await lookup_field_type(client, body.table_name, body.field_name)
        type_error = body.field_type_error(field_type)
        if type_error:
            raise HTTPException(status_code=422, detail=type_error)

    spec = build_masking_spec(body.mask_kind, body.masking_value)
    request = ConfigureFieldRequest(
        table_name=body.table_name,
        field_name=body.field_name,
        masking_type=spec.masking_type,
        masking_value=spec.masking_value,
        auth_tag=body.auth_tag,
    )
    response = await client.configure_field(request)
    if response.success:
        logger.info(
            "Configured %s mask on %s.%s",
            body.mask_kind.value, body.table_name, body.field_name,
        )
    return response


def to_field_config(item: TableFieldConfigItem) -> FieldConfig:
    """Fill mask value and auth tag from the item's summary when absent."""
    parsed = parse_config_summary(item.result)
    return FieldConfig(
        field_name=item.field_name,
        result=item.result,
        mask_value=item.mask_value or parsed.mask_value,
        auth_tag=item.auth_tag or parsed.auth_tag,
    )


async def get_field_configs(client: DDMClient, table_name: str) -> TableConfigsResponse:
    """Load a table's masking configuration with summaries parsed per field."""
    response = await client.get_table_configs(table_name)
    items = []
    for item in response.items:
        config = to_field_config(item)
        items.append(
            TableFieldConfigItem(
                field_name=config.field_name,
                result=config.result,
                mask_value=config.mask_value,
                auth_tag=config.auth_tag,
            )
        )
    return response.model_copy(update={"items": items})


async def get_mask_and_auth_tag(
    client: DDMClient,
    table_name: str,
    field_name: str,
    user_name: str | None = None,
) -> MaskAndAuthTagView:
    """Look up a field's mask and auth tag, parsing the summary for display."""
    response: MaskAndAuthTagResponse = await client.get_mask_and_auth_tag(
        table_name, field_name, user_name
    )
    parsed = parse_config_summary(response.result) if response.success else None
    return MaskAndAuthTagView(
        **response.model_dump(),
        mask_value=parsed.mask_value if parsed else None,
        auth_tag=parsed.auth_tag if parsed else None,
    )
