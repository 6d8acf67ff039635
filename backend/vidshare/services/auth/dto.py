# vidshare/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for signup.

    :param email: Account email (normalized by the model).
    :type email: str
    :param password: Raw password, already confirmed by the API layer.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SigninIn:
    """
    Input DTO for signin.

    :param email: Account email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token rotation.

    :param refresh_token: Encoded refresh token, as presented.
    :type refresh_token: str
    :param subject_id: Account id verified from that token by the gate.
    :type subject_id: str
    """

    refresh_token: str
    subject_id: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access token.
    :type access_token: str
    :param refresh_token: Encoded refresh token.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class SignupOut:
    """
    Output DTO for a committed signup.

    :param id: New account id.
    :type id: str
    :param access_token: Encoded access token.
    :type access_token: str
    :param refresh_token: Encoded refresh token.
    :type refresh_token: str
    """

    id: str
    access_token: str
    refresh_token: str
