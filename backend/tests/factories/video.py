"""Factory Boy definition for :class:`vidshare.models.video.VideoAsset`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tests.factories.account import AccountFactory
from vidshare.models.video import VideoAsset


class VideoFactory(BaseFactory):
    """
    Build persisted video rows (metadata only; no blob is written).

    Pass ``owner=<Account>`` to attach to an existing account.
    """

    class Meta:
        model = VideoAsset

    class Params:
        owner = factory.SubFactory(AccountFactory)

    title = factory.Faker("sentence", nb_words=3)
    mimetype = "video/mp4"
    extension = "mp4"
    size_bytes = factory.Faker("pyint", min_value=1, max_value=4096)
    download_count = 0
    owner_id = factory.SelfAttribute("owner.id")
