"""Video endpoints: upload, listing, detail and download."""

from __future__ import annotations

from flask import Blueprint, request, send_file

from vidshare.api.deps import (
    current_subject_id,
    json_response,
    parse_pagination,
    services,
    timing,
)
from vidshare.schemas import VideoCreatedSchema, VideoSchema, VideoUploadFormSchema, dump_page
from vidshare.services._shared.errors import ValidationFailedError
from vidshare.services.videos.dto import VideoUploadIn

bp = Blueprint("videos", __name__)

upload_form_schema = VideoUploadFormSchema()
created_schema = VideoCreatedSchema()
video_schema = VideoSchema()


@bp.post("")
@timing
def create_video():
    """Ingest a multipart upload (``video`` file part + ``title``)."""

    upload = request.files.get("video")
    if upload is None or not upload.filename:
        raise ValidationFailedError("Missing 'video' file field")
    form = upload_form_schema.load(request.form)

    out = services().video_service().ingest(
        VideoUploadIn(
            owner_id=current_subject_id(),
            title=form["title"],
            mimetype=upload.mimetype,
            filename=upload.filename,
            stream=upload.stream,
        )
    )
    return json_response(created_schema.dump(out), status=201)


@bp.get("")
@timing
def list_videos():
    page, size = parse_pagination()
    result = services().video_service().list_videos(page=page, limit=size)
    return json_response(dump_page(result, video_schema))


@bp.get("/<string:video_id>")
@timing
def get_video(video_id: str):
    return json_response(video_schema.dump(services().video_service().get_video(video_id)))


@bp.get("/<string:video_id>/download")
@timing
def download_video(video_id: str):
    """Stream the stored bytes as an attachment and count the download."""

    out = services().video_service().open_download(video_id)
    response = send_file(
        out.stream,
        mimetype=out.mimetype,
        as_attachment=True,
        download_name=out.filename,
        conditional=False,
        max_age=0,
    )
    response.content_length = out.size_bytes
    return response
