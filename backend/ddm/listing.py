from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleCount:
    """A role and the number of users holding it."""

    name: str
    count: int = 0


@dataclass(frozen=True)
class TagRole:
    """An authorization tag and the role it is associated with."""

    name: str
    role: str = ""


def split_list(result: str | None) -> list[str]:
    """Split a comma-separated backend list, dropping blank items."""
    if not result:
        return []
    return [item.strip() for item in result.split(",") if item.strip()]


def _split_pair(item: str) -> tuple[str, str]:
    name, _, value = item.partition("|")
    return name.strip(), value.strip()


def parse_role_counts(result: str | None) -> list[RoleCount]:
    """Parse ``role|count`` items; a missing or garbled count is 0."""
    roles: list[RoleCount] = []
    for item in split_list(result):
        name, count = _split_pair(item)
        roles.append(RoleCount(name=name, count=int(count) if count.isdecimal() else 0))
    return roles


def parse_tag_roles(result: str | None) -> list[TagRole]:
    """Parse ``tag|role`` items."""
    return [TagRole(*_split_pair(item)) for item in split_list(result)]
