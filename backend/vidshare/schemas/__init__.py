"""Marshmallow schemas used by the HTTP layer."""

from .auth import SigninSchema, SignupResponseSchema, SignupSchema, TokenPairSchema
from .common import MetaSchema, PaginationQuerySchema, dump_page
from .user import UserSchema
from .video import OwnerSchema, VideoCreatedSchema, VideoSchema, VideoUploadFormSchema

__all__ = [
    "MetaSchema",
    "OwnerSchema",
    "PaginationQuerySchema",
    "SigninSchema",
    "SignupResponseSchema",
    "SignupSchema",
    "TokenPairSchema",
    "UserSchema",
    "VideoCreatedSchema",
    "VideoSchema",
    "VideoUploadFormSchema",
    "dump_page",
]
