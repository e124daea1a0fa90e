"""Live validation endpoints.

POST /api/validation/auth-tag        check a tag as the user types
POST /api/validation/config-summary  parse a backend config summary
GET  /api/validation/mask-kinds      mask kinds offered by the console

None of these call the DDM backend.
"""

from __future__ import annotations

from fastapi import APIRouter

from ddm.mask_spec import MASK_KIND_LABELS
from ddm.summary_parser import parse_config_summary
from ddm.tag_validator import coerce_form_value, validate_authorization_tag
from schemas.api import (
    ConfigSummaryRequest,
    ParsedConfigSummaryResponse,
    TagValidationRequest,
    TagValidationResponse,
)

router = APIRouter()


@router.post("/auth-tag", response_model=TagValidationResponse)
async def validate_auth_tag(body: TagValidationRequest):
    tag = coerce_form_value(body.tag)
    result = validate_authorization_tag(tag)
    return TagValidationResponse(tag=tag, valid=result.is_valid, error=result.error)


@router.post("/config-summary", response_model=ParsedConfigSummaryResponse)
async def parse_summary(body: ConfigSummaryRequest):
    parsed = parse_config_summary(coerce_form_value(body.summary))
    return ParsedConfigSummaryResponse(mask_value=parsed.mask_value, auth_tag=parsed.auth_tag)


@router.get("/mask-kinds")
async def list_mask_kinds():
    return {
        "maskKinds": [
            {"value": kind.value, "label": label}
            for kind, label in MASK_KIND_LABELS.items()
        ]
    }
