"""Video repository for metadata rows and the download counter."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from vidshare.models.video import VideoAsset
from vidshare.repositories.base import BaseRepository, Page, Pagination


class VideoRepository(BaseRepository[VideoAsset]):
    model = VideoAsset

    def _sortable_fields(self):
        return {
            "title": VideoAsset.title,
            "created_at": VideoAsset.created_at,
            "download_count": VideoAsset.download_count,
        }

    def list_page(self, pagination: Pagination) -> Page[VideoAsset]:
        return self.paginate(pagination)

    def list_for_owner(self, owner_id: str, pagination: Pagination) -> Page[VideoAsset]:
        """Videos uploaded by ``owner_id``; a query, not a back-pointer."""
        stmt = select(VideoAsset).where(VideoAsset.owner_id == owner_id)
        return self.paginate(pagination, stmt=stmt)


def increment_download_count(session: Session, video_id: str) -> bool:
    """Bump the counter with a single atomic ``UPDATE ... SET n = n + 1``.

    Runs on its own short-lived session, outside any command transaction.

    :returns: ``True`` when the video exists.
    """
    stmt = (
        update(VideoAsset)
        .where(VideoAsset.id == video_id)
        .values(download_count=VideoAsset.download_count + 1)
        .execution_options(synchronize_session=False)
    )
    return session.execute(stmt).rowcount > 0
