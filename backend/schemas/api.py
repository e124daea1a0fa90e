from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ddm.mask_spec import MaskKind, MaskingType, field_type_error, mask_kind_error
from ddm.tag_validator import authorization_tag_validation_error, coerce_form_value


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


def _require_text(value: Any, label: str) -> str:
    value = coerce_form_value(value)
    if not value.strip():
        raise ValueError(f"{label} is required")
    return value


def _require_auth_tag(value: Any) -> str:
    value = coerce_form_value(value)
    error = authorization_tag_validation_error(value)
    if error:
        raise ValueError(error)
    return value


class OperationResult(WireModel):
    success: bool = False
    message: str = ""
    error: str | None = None


# --- Health ---

class HealthResponse(WireModel):
    status: str = ""
    service: str = ""
    version: str = ""
    database: str = ""
    timestamp: str = ""


class ConsoleHealthResponse(WireModel):
    status: str = "ok"
    ddm_base_url: str


# --- Field Operations ---

class ConfigureFieldRequest(WireModel):
    table_name: str
    field_name: str
    masking_type: MaskingType
    masking_value: str
    auth_tag: str

    @field_validator("table_name", mode="before")
    @classmethod
    def validate_table_name(cls, v: Any) -> str:
        return _require_text(v, "Table name")

    @field_validator("field_name", mode="before")
    @classmethod
    def validate_field_name(cls, v: Any) -> str:
        return _require_text(v, "Field name")

    @field_validator("auth_tag", mode="before")
    @classmethod
    def validate_auth_tag(cls, v: Any) -> str:
        return _require_auth_tag(v)


class ConfigureFieldResponse(OperationResult):
    table_name: str = ""
    field_name: str = ""
    masking_type: str = ""
    masking_value: str = ""
    auth_tag: str = ""


class FieldMaskingRequest(WireModel):
    """Console form: a mask kind plus its value, mapped server-side."""

    table_name: str
    field_name: str
    mask_kind: MaskKind = MaskKind.DEFAULT
    masking_value: str | None = None
    auth_tag: str

    @field_validator("table_name", mode="before")
    @classmethod
    def validate_table_name(cls, v: Any) -> str:
        return _require_text(v, "Table name")

    @field_validator("field_name", mode="before")
    @classmethod
    def validate_field_name(cls, v: Any) -> str:
        return _require_text(v, "Field name")

    @field_validator("auth_tag", mode="before")
    @classmethod
    def validate_auth_tag(cls, v: Any) -> str:
        return _require_auth_tag(v)

    @model_validator(mode="after")
    def validate_masking_value(self) -> FieldMaskingRequest:
        error = mask_kind_error(self.mask_kind, self.masking_value)
        if error:
            raise ValueError(error)
        return self

    def field_type_error(self, field_type: str | None) -> str | None:
        return field_type_error(self.mask_kind, field_type)


class FieldRequest(WireModel):
    table_name: str
    field_name: str

    @field_validator("table_name", mode="before")
    @classmethod
    def validate_table_name(cls, v: Any) -> str:
        return _require_text(v, "Table name")

    @field_validator("field_name", mode="before")
    @classmethod
    def validate_field_name(cls, v: Any) -> str:
        return _require_text(v, "Field name")


class FieldOperationResponse(OperationResult):
    table_name: str | None = None
    field_name: str | None = None


# --- Authorization Tags ---

class AuthTagRequest(WireModel):
    domain_name: str
    auth_tag_name: str

    @field_validator("domain_name", mode="before")
    @classmethod
    def validate_domain_name(cls, v: Any) -> str:
        return _require_text(v, "Domain name")

    @field_validator("auth_tag_name", mode="before")
    @classmethod
    def validate_auth_tag_name(cls, v: Any) -> str:
        return _require_auth_tag(v)


class AuthTagResponse(OperationResult):
    domain_name: str = ""
    auth_tag_name: str = ""


class UpdateAuthTagRequest(AuthTagRequest):
    new_name: str

    @field_validator("new_name", mode="before")
    @classmethod
    def validate_new_name(cls, v: Any) -> str:
        return _require_auth_tag(v)


class UpdateAuthTagResponse(AuthTagResponse):
    new_name: str = ""


class AssociateAuthTagRoleRequest(WireModel):
    current_role_name: str
    auth_tag_name: str
    new_role_name: str

    @field_validator("current_role_name", mode="before")
    @classmethod
    def validate_current_role_name(cls, v: Any) -> str:
        return _require_text(v, "Current role")

    @field_validator("new_role_name", mode="before")
    @classmethod
    def validate_new_role_name(cls, v: Any) -> str:
        return _require_text(v, "New role")

    @field_validator("auth_tag_name", mode="before")
    @classmethod
    def validate_auth_tag_name(cls, v: Any) -> str:
        return _require_auth_tag(v)


class AssociateAuthTagRoleResponse(OperationResult):
    current_role_name: str = ""
    auth_tag_name: str = ""
    new_role_name: str = ""


# --- Roles ---

class RoleRequest(WireModel):
    role_name: str

    @field_validator("role_name", mode="before")
    @classmethod
    def validate_role_name(cls, v: Any) -> str:
        return _require_text(v, "Role name")


class RoleResponse(OperationResult):
    role_name: str = ""


class GrantRoleRequest(WireModel):
    user_name: str
    role_name: str

    @field_validator("user_name", mode="before")
    @classmethod
    def validate_user_name(cls, v: Any) -> str:
        return _require_text(v, "User name")

    @field_validator("role_name", mode="before")
    @classmethod
    def validate_role_name(cls, v: Any) -> str:
        return _require_text(v, "Role name")


class GrantRoleResponse(OperationResult):
    user_name: str = ""
    role_name: str = ""


class GrantRolesRequest(WireModel):
    user_names: list[str] = Field(..., min_length=1)
    role_name: str

    @field_validator("role_name", mode="before")
    @classmethod
    def validate_role_name(cls, v: Any) -> str:
        return _require_text(v, "Role name")

    @field_validator("user_names")
    @classmethod
    def validate_user_names(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v if name and name.strip()]
        if not names:
            raise ValueError("Select at least one user")
        return names


class GrantRolesResponseItem(OperationResult):
    user_name: str = ""
    role_name: str = ""


class GrantRolesResponse(OperationResult):
    role_name: str = ""
    results: list[GrantRolesResponseItem] = []


class BulkGrantSummary(WireModel):
    role_name: str
    success: bool
    succeeded: int
    total: int
    message: str
    failures: list[str] = []


class DeleteGrantedRoleRequest(WireModel):
    grant_id: str

    @field_validator("grant_id", mode="before")
    @classmethod
    def validate_grant_id(cls, v: Any) -> str:
        return _require_text(v, "Grant ID")


class DeleteGrantedRoleResponse(OperationResult):
    grant_id: str = ""


# --- Users ---

class CreateUserRequest(WireModel):
    user_name: str
    password: str = Field(..., repr=False)

    @field_validator("user_name", mode="before")
    @classmethod
    def validate_user_name(cls, v: Any) -> str:
        return _require_text(v, "User name")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        return _require_text(v, "Password")


class UserRequest(WireModel):
    user_name: str

    @field_validator("user_name", mode="before")
    @classmethod
    def validate_user_name(cls, v: Any) -> str:
        return _require_text(v, "User name")


class UserResponse(OperationResult):
    user_name: str = ""


# --- Information Retrieval ---

class QueryResult(WireModel):
    result: str = ""
    success: bool = False
    error: str | None = None


class MaskAndAuthTagResponse(QueryResult):
    table_name: str = ""
    field_name: str = ""
    user_name: str | None = None


class MaskAndAuthTagView(MaskAndAuthTagResponse):
    mask_value: str | None = None
    auth_tag: str | None = None


class AuthTagRoleResponse(QueryResult):
    domain_name: str = ""
    auth_tag_name: str = ""


class UserRoleGrantsResponse(QueryResult):
    user_name: str = ""


class RoleAuthTagsListResponse(QueryResult):
    role_name: str = ""


# --- Lists ---

class NameListResponse(WireModel):
    items: list[str] = []


class RoleCountItem(WireModel):
    name: str
    count: int = 0


class RoleCountsResponse(WireModel):
    roles: list[RoleCountItem] = []


class TagRoleItem(WireModel):
    name: str
    role: str = ""


class TagRolesResponse(WireModel):
    tags: list[TagRoleItem] = []


# --- Schema: Tables and Fields ---

class TablesListResponse(WireModel):
    tables: list[str] = []
    success: bool = False
    error: str | None = None


class FieldsListResponse(WireModel):
    table_name: str = ""
    fields: list[str] = []
    field_types: dict[str, str] = {}
    success: bool = False
    error: str | None = None


class TableFieldConfigItem(WireModel):
    field_name: str
    result: str = ""
    mask_value: str | None = None
    auth_tag: str | None = None


class TableConfigsResponse(WireModel):
    table_name: str = ""
    items: list[TableFieldConfigItem] = []
    success: bool = False
    error: str | None = None


# --- Validation ---

class TagValidationRequest(WireModel):
    tag: Any = None


class TagValidationResponse(WireModel):
    tag: str
    valid: bool
    error: str | None = None


class ConfigSummaryRequest(WireModel):
    summary: Any = None


class ParsedConfigSummaryResponse(WireModel):
    mask_value: str | None = None
    auth_tag: str | None = None
