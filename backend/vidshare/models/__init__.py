from vidshare.models.account import Account, Role
from vidshare.models.refresh_credential import RefreshCredential
from vidshare.models.video import VideoAsset

__all__ = [
    "Account",
    "RefreshCredential",
    "Role",
    "VideoAsset",
]
