from .local_event_sink import LocalEventSink, register_default_handlers

__all__ = ["LocalEventSink", "register_default_handlers"]
