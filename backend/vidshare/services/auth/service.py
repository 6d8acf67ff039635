# vidshare/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from vidshare.core.extensions import new_session
from vidshare.models.account import Account
from vidshare.services._shared.base import BaseService
from vidshare.services._shared.errors import (
    DuplicateAccountError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    ValidationFailedError,
    violates,
)
from vidshare.services._shared.ports.event_sink import AccountCreated, EventSink
from vidshare.services._shared.ports.token_codec import TokenCodec, TokenKind
from vidshare.services.auth.dto import (
    RefreshIn,
    SigninIn,
    SignupIn,
    SignupOut,
    TokenPairOut,
)
from vidshare.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (signup / signin / refresh).

    Tokens come from a pluggable :class:`TokenCodec`; the single live refresh
    token of each account is kept in the ``refresh_credentials`` table and
    replaced on every signin and refresh.
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        password_method: str = "pbkdf2:sha256:600000",
        event_sink: EventSink | None = None,
        session_factory: Callable[[], Session] = new_session,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_codec: Adapter for issuing/decoding bearer tokens.
        :param password_method: Werkzeug hash spec with a fixed work factor.
        :param event_sink: Receives ``AccountCreated`` after a committed signup.
        :param session_factory: Source of dedicated sessions.
        """
        super().__init__(event_sink=event_sink, session_factory=session_factory)
        self.tokens = token_codec
        self.password_method = password_method
        self._dummy_hash: str | None = None

    # ------------------------------------------------------------------ #
    # Signup
    # ------------------------------------------------------------------ #

    def signup(self, dto: SignupIn) -> SignupOut:
        """
        Create an account and its first token pair as one transactional command.

        Tokens are returned only once the account and its refresh credential
        have been committed.

        :raises DuplicateAccountError: The email is taken, whether detected by
            the pre-check or by the unique constraint at insert time.
        """

        def steps(uow: SQLAlchemyUnitOfWork) -> SignupOut:
            if uow.accounts.exists_by_email(dto.email):
                raise DuplicateAccountError()

            try:
                account = Account(email=dto.email)
                account.set_password(dto.password, method=self.password_method)
            except ValueError as exc:
                raise ValidationFailedError(str(exc)) from exc
            uow.accounts.add(account)

            pair = self._issue_pair(account.id)
            uow.refresh_credentials.create(account.id, pair.refresh_token)
            uow.add_event(AccountCreated(account_id=account.id))
            return SignupOut(
                id=account.id,
                access_token=pair.access_token,
                refresh_token=pair.refresh_token,
            )

        try:
            return self.run_command(steps)
        except IntegrityError as exc:
            if violates(exc, "uq_accounts_email", column="accounts.email"):
                raise DuplicateAccountError() from exc
            raise

    # ------------------------------------------------------------------ #
    # Signin
    # ------------------------------------------------------------------ #

    def signin(self, dto: SigninIn) -> TokenPairOut:
        """
        Verify credentials and replace the account's refresh token.

        Unknown email and wrong password raise the same error.

        :raises InvalidCredentialsError: On any credential mismatch.
        """
        with self.ro_uow() as uow:
            account = uow.accounts.get_by_email(dto.email)
            if account is None:
                # Spend the same hashing work as a real comparison.
                check_password_hash(self._get_dummy_hash(), dto.password)
                raise InvalidCredentialsError()
            if not account.verify_password(dto.password):
                raise InvalidCredentialsError()
            account_id = account.id

        pair = self._issue_pair(account_id)
        try:
            self.run_command(
                lambda uow: uow.refresh_credentials.upsert(account_id, pair.refresh_token)
            )
        except IntegrityError as exc:
            # Concurrent first signin inserted the row; overwrite it instead.
            if not violates(
                exc,
                "uq_refresh_credentials_account_id",
                column="refresh_credentials.account_id",
            ):
                raise
            log.info("Refresh credential insert raced; retrying as update")
            self.run_command(
                lambda uow: uow.refresh_credentials.replace(account_id, pair.refresh_token)
            )
        return pair

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate the presented refresh token and emit a new pair.

        The presented value must be the one currently stored *for the token's
        own subject*; stale, never-issued and foreign tokens are rejected
        identically. Rotation is a compare-and-swap, so of two concurrent
        refreshes with the same token only one succeeds.

        :raises InvalidRefreshTokenError: If the token is not the live one.
        """

        def steps(uow: SQLAlchemyUnitOfWork) -> TokenPairOut:
            credential = uow.refresh_credentials.get_by_token(dto.refresh_token)
            if credential is None or credential.account_id != dto.subject_id:
                raise InvalidRefreshTokenError()

            pair = self._issue_pair(dto.subject_id)
            if not uow.refresh_credentials.rotate(
                dto.subject_id, dto.refresh_token, pair.refresh_token
            ):
                raise InvalidRefreshTokenError()
            return pair

        return self.run_command(steps)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, account_id: str) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.issue(account_id, TokenKind.ACCESS),
            refresh_token=self.tokens.issue(account_id, TokenKind.REFRESH),
        )

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = generate_password_hash("unused", method=self.password_method)
        return self._dummy_hash
