"""Video Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class VideoUploadFormSchema(Schema):
    """Non-file fields of the multipart upload."""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=validate.Length(min=1, max=255))


class VideoCreatedSchema(Schema):
    id = fields.String(required=True)
    title = fields.String(required=True)


class OwnerSchema(Schema):
    id = fields.String(required=True)
    email = fields.String(required=True)


class VideoSchema(Schema):
    """Output representation for listings and detail."""

    id = fields.String(required=True)
    title = fields.String(required=True)
    mimetype = fields.String(data_key="mimeType")
    size_bytes = fields.Integer(data_key="sizeBytes")
    download_count = fields.Integer(data_key="downloadCount")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    owner = fields.Nested(OwnerSchema, allow_none=True)
