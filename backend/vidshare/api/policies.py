"""Route policy table, keyed by Flask endpoint name.

Endpoints missing from the table are protected with an access token.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from vidshare.api.gate import RoutePolicy
from vidshare.models.account import Role
from vidshare.services._shared.ports.token_codec import TokenKind

PUBLIC = RoutePolicy(public=True)
PROTECTED = RoutePolicy()
REFRESH_ONLY = RoutePolicy(token_kind=TokenKind.REFRESH)
ADMIN_ONLY = RoutePolicy(required_roles=frozenset({Role.ADMIN}))

ROUTE_POLICIES: Mapping[str, RoutePolicy] = MappingProxyType(
    {
        "auth.signup": PUBLIC,
        "auth.signin": PUBLIC,
        "auth.refresh": REFRESH_ONLY,
        "videos.create_video": PROTECTED,
        "videos.list_videos": PROTECTED,
        "videos.get_video": PROTECTED,
        "videos.download_video": PROTECTED,
        "users.list_users": ADMIN_ONLY,
        "users.list_user_videos": PROTECTED,
    }
)


def policy_for(endpoint: str) -> RoutePolicy:
    return ROUTE_POLICIES.get(endpoint, PROTECTED)
