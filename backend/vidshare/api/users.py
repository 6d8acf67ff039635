"""Account endpoints."""

from __future__ import annotations

from flask import Blueprint

from vidshare.api.deps import json_response, parse_pagination, services, timing
from vidshare.schemas import UserSchema, VideoSchema, dump_page

bp = Blueprint("users", __name__)

user_schema = UserSchema()
video_schema = VideoSchema()


@bp.get("")
@timing
def list_users():
    """Admin-only account listing."""

    page, size = parse_pagination()
    result = services().account_service().list_accounts(page=page, limit=size)
    return json_response(dump_page(result, user_schema))


@bp.get("/<string:user_id>/videos")
@timing
def list_user_videos(user_id: str):
    page, size = parse_pagination()
    result = services().video_service().list_for_owner(user_id, page=page, limit=size)
    return json_response(dump_page(result, video_schema))
