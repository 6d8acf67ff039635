"""Authentication endpoints: signup, signin and token refresh."""

from __future__ import annotations

from flask import Blueprint, request

from vidshare.api.deps import (
    current_bearer_token,
    current_subject_id,
    json_response,
    services,
    timing,
)
from vidshare.schemas import SigninSchema, SignupResponseSchema, SignupSchema, TokenPairSchema
from vidshare.services.auth.dto import RefreshIn, SigninIn, SignupIn

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
signin_schema = SigninSchema()
signup_response_schema = SignupResponseSchema()
token_pair_schema = TokenPairSchema()


@bp.post("/signup")
@timing
def signup():
    """Create an account; returns its id and a first token pair."""

    data = signup_schema.load(request.get_json(silent=True) or {})
    out = services().auth_service().signup(SignupIn(email=data["email"], password=data["password"]))
    return json_response(signup_response_schema.dump(out), status=201)


@bp.post("/signin")
@timing
def signin():
    data = signin_schema.load(request.get_json(silent=True) or {})
    pair = services().auth_service().signin(SigninIn(email=data["email"], password=data["password"]))
    return json_response(token_pair_schema.dump(pair))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the presented refresh token (sent as the bearer token)."""

    pair = services().auth_service().refresh(
        RefreshIn(refresh_token=current_bearer_token(), subject_id=current_subject_id())
    )
    return json_response(token_pair_schema.dump(pair))
