"""
Field Selection Utility

Provides sparse fieldset support for API responses via ``?fields=id,name``.
Use as a FastAPI dependency on any list or detail endpoint.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from fastapi import Query

if TYPE_CHECKING:
    from company_employees.utils.data_shaper import DataShaper, ShapedEntity


def parse_fields(raw_fields: str | None) -> tuple[str, ...]:
    """
    Split a comma-separated field list into unique names.

    Names are trimmed and de-duplicated case-insensitively; the first
    spelling and position of each name wins. An empty result means
    "use the default fields". Never raises.
    """
    if not raw_fields:
        return ()

    seen: set[str] = set()
    fields: list[str] = []
    for raw in str(raw_fields).split(","):
        name = raw.strip()
        if not name or name.casefold() in seen:
            continue
        seen.add(name.casefold())
        fields.append(name)
    return tuple(fields)


class FieldSelector:
    """
    FastAPI dependency for field selection.

    Usage::

        @router.get("/employees")
        async def list_employees(fields: FieldSelector = Depends()):
            employees = await get_employees(db)
            return fields.apply(employees, employee_shaper)
    """

    def __init__(
        self,
        fields: str | None = Query(
            default=None,
            description="Comma-separated list of fields to include (e.g. id,name)",
        ),
    ):
        self.requested_fields: tuple[str, ...] = parse_fields(fields)

    @property
    def has_selection(self) -> bool:
        """Return True when the caller requested specific fields."""
        return bool(self.requested_fields)

    def apply(self, data: Any, shaper: DataShaper) -> ShapedEntity | list[ShapedEntity]:
        """Shape one record or a sequence of records."""
        if isinstance(data, Iterable) and not isinstance(data, (str, bytes, dict)) and not hasattr(data, "model_fields"):
            return shaper.shape_data(data, self.requested_fields)
        return shaper.shape_one(data, self.requested_fields)
