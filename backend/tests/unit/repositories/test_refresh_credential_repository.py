from __future__ import annotations

import pytest

from tests.factories.account import AccountFactory
from vidshare.uow import SQLAlchemyUnitOfWork


@pytest.fixture()
def account(app):
    return AccountFactory()


def test_upsert_creates_then_replaces(account):
    with SQLAlchemyUnitOfWork() as uow:
        uow.refresh_credentials.upsert(account.id, "t1")
    with SQLAlchemyUnitOfWork() as uow:
        uow.refresh_credentials.upsert(account.id, "t2")

    with SQLAlchemyUnitOfWork() as uow:
        assert uow.refresh_credentials.count_for_account(account.id) == 1
        assert uow.refresh_credentials.get_by_account_id(account.id).token == "t2"
        assert uow.refresh_credentials.get_by_token("t1") is None


def test_replace_without_row_reports_false(account):
    with SQLAlchemyUnitOfWork() as uow:
        assert uow.refresh_credentials.replace(account.id, "t1") is False


def test_rotate_is_compare_and_swap(account):
    with SQLAlchemyUnitOfWork() as uow:
        uow.refresh_credentials.create(account.id, "t1")

    with SQLAlchemyUnitOfWork() as uow:
        assert uow.refresh_credentials.rotate(account.id, "t1", "t2") is True
    with SQLAlchemyUnitOfWork() as uow:
        # Second rotation with the same old value loses.
        assert uow.refresh_credentials.rotate(account.id, "t1", "t3") is False

    with SQLAlchemyUnitOfWork() as uow:
        assert uow.refresh_credentials.get_by_account_id(account.id).token == "t2"


def test_rotate_requires_matching_account(account):
    other = AccountFactory()
    with SQLAlchemyUnitOfWork() as uow:
        uow.refresh_credentials.create(account.id, "t1")

    with SQLAlchemyUnitOfWork() as uow:
        assert uow.refresh_credentials.rotate(other.id, "t1", "t2") is False
