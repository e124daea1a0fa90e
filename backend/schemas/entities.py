from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """HTTP Basic credentials forwarded to the DDM backend; never stored."""
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class FieldConfig:
    """One field's masking configuration as shown in the console table."""
    field_name: str
    result: str = ""
    mask_value: str | None = None
    auth_tag: str | None = None
