"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, validate


class PaginationQuerySchema(Schema):
    """Validate ``page``/``size`` query parameters."""

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    size = fields.Integer(load_default=20, validate=validate.Range(min=1, max=100))


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    size = fields.Integer(required=True, attribute="limit")
    has_prev = fields.Boolean(data_key="hasPrev")
    has_next = fields.Boolean(data_key="hasNext")


def dump_page(page: Any, item_schema: Schema) -> dict[str, Any]:
    """Serialize a ``PageOut`` as ``{"items": [...], "meta": {...}}``."""
    return {
        "items": item_schema.dump(page.items, many=True),
        "meta": MetaSchema().dump(page.meta),
    }
