from .blob_store import BlobStore, FailingBlobStore, InMemoryBlobStore
from .event_sink import AccountCreated, DomainEvent, EventSink, RecordingEventSink, VideoIngested
from .token_codec import StubTokenCodec, TokenClaims, TokenCodec, TokenKind

__all__ = [
    "AccountCreated",
    "BlobStore",
    "DomainEvent",
    "EventSink",
    "FailingBlobStore",
    "InMemoryBlobStore",
    "RecordingEventSink",
    "StubTokenCodec",
    "TokenClaims",
    "TokenCodec",
    "TokenKind",
    "VideoIngested",
]
