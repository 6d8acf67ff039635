from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base for post-commit notifications."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, slots=True)
class AccountCreated(DomainEvent):
    account_id: str


@dataclass(frozen=True, slots=True)
class VideoIngested(DomainEvent):
    video_id: str
    owner_id: str


class EventSink(Protocol):
    """
    Post-commit notification channel.

    ``publish`` is only ever called after the originating transaction has
    committed. Delivery is fire-and-forget: implementations must not raise
    into the caller.
    """

    def publish(self, event: DomainEvent) -> None: ...


class RecordingEventSink(EventSink):
    """Keeps published events in order; used by unit tests."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)
