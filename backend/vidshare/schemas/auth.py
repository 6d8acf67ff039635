"""Authentication-related Marshmallow schemas (camelCase on the wire)."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class SignupSchema(Schema):
    """Input payload for account creation."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    password_confirm = fields.String(required=True, data_key="passwordConfirm")

    @validates_schema
    def _passwords_match(self, data: dict[str, Any], **_: Any) -> None:
        if data.get("password") != data.get("password_confirm"):
            raise ValidationError("Passwords do not match.", field_name="passwordConfirm")


class SigninSchema(Schema):
    """Input payload for authenticating an account."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenPairSchema(Schema):
    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class SignupResponseSchema(TokenPairSchema):
    id = fields.String(required=True)
