from __future__ import annotations

from tests.factories.account import AccountFactory
from tests.factories.video import VideoFactory
from vidshare.repositories.base import Pagination
from vidshare.repositories.video import increment_download_count
from vidshare.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def test_list_for_owner_filters_and_counts(app):
    owner = AccountFactory()
    VideoFactory.create_batch(3, owner=owner)
    VideoFactory()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        page = uow.videos.list_for_owner(owner.id, Pagination(page=1, limit=2, sort=[]))

    assert page.total == 3
    assert len(page.items) == 2
    assert {v.owner_id for v in page.items} == {owner.id}


def test_sorting_ignores_unknown_tokens_and_pages_do_not_overlap(app):
    VideoFactory.create_batch(5)

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        first = uow.videos.list_page(Pagination(page=1, limit=3, sort=["-bogus", "title"]))
        second = uow.videos.list_page(Pagination(page=2, limit=3, sort=["-bogus", "title"]))

    ids = [v.id for v in first.items] + [v.id for v in second.items]
    assert len(ids) == len(set(ids)) == 5


def test_increment_download_count(app, db):
    video = VideoFactory()
    session = db.session.session_factory()
    try:
        assert increment_download_count(session, video.id) is True
        assert increment_download_count(session, "missing") is False
        session.commit()
    finally:
        session.close()

    with SQLAlchemyUnitOfWork() as uow:
        assert uow.videos.get(video.id).download_count == 1


def test_emails_by_id_single_query_map(app):
    a, b = AccountFactory(), AccountFactory()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        emails = uow.accounts.emails_by_id([a.id, b.id, "missing"])

    assert emails == {a.id: a.email, b.id: b.email}
