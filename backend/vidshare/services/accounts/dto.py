from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class AccountOut:
    """
    Public view of an account; the password hash never leaves the service.

    :param id: Account id.
    :param email: Normalized email.
    :param role: ``standard`` or ``admin``.
    :param created_at: Creation timestamp.
    """

    id: str
    email: str
    role: str
    created_at: datetime | None
