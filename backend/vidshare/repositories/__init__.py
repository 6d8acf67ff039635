from vidshare.repositories.account import AccountRepository
from vidshare.repositories.base import BaseRepository, Page, Pagination
from vidshare.repositories.refresh_credential import RefreshCredentialRepository
from vidshare.repositories.video import VideoRepository, increment_download_count

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "Page",
    "Pagination",
    "RefreshCredentialRepository",
    "VideoRepository",
    "increment_download_count",
]
