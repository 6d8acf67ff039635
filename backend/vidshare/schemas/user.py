"""Account Marshmallow schemas; the password hash is never exposed."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    id = fields.String(required=True)
    email = fields.Email(required=True)
    role = fields.String()
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
