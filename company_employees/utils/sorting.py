"""
Sorting Utilities

Turns an ``orderBy`` query string such as ``"age desc, name"`` into
SQLAlchemy ordering clauses for a mapped model. Column names match
case-insensitively; anything that does not name a column is ignored.
"""

import logging

from sqlalchemy import asc, desc, inspect
from sqlalchemy.sql.elements import UnaryExpression

logger = logging.getLogger(__name__)


def _sortable_columns(model) -> dict:
    mapper = inspect(model)
    return {attr.key.lower(): getattr(model, attr.key) for attr in mapper.column_attrs}


def build_order_by(model, order_by: str | None, default: str = "name") -> list[UnaryExpression]:
    """
    Parse an order clause into ordering expressions.

    Args:
        model: SQLAlchemy model class
        order_by: Comma-separated ``column [asc|desc]`` terms
        default: Column used when nothing valid was requested

    Returns:
        List of ordering expressions ending with the primary key
    """
    columns = _sortable_columns(model)
    clauses = []
    used = set()

    for term in (order_by or "").split(","):
        parts = term.split()
        if not parts:
            continue
        name = parts[0].lower()
        column = columns.get(name)
        if column is None or name in used:
            logger.debug(f"Ignoring sort term {term.strip()!r} for {model.__name__}")
            continue
        direction = desc if len(parts) > 1 and parts[1].lower().startswith("desc") else asc
        clauses.append(direction(column))
        used.add(name)

    if not clauses:
        clauses.append(asc(columns[default.lower()]))

    # Primary key last so rows with equal sort values page deterministically.
    mapper = inspect(model)
    for key_column in mapper.primary_key:
        key = mapper.get_property_by_column(key_column).key
        if key.lower() not in used:
            clauses.append(asc(getattr(model, key)))
    return clauses
