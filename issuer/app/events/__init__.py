from .models import IssuanceEvent, IssuanceEventType
from .emitter import IssuanceEventEmitter, LoggingEventEmitter, NullEventEmitter

__all__ = [
    "IssuanceEvent",
    "IssuanceEventType",
    "IssuanceEventEmitter",
    "LoggingEventEmitter",
    "NullEventEmitter",
]
