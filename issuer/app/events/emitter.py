from __future__ import annotations

import logging
from typing import Protocol

from issuer.app.events.models import IssuanceEvent

logger = logging.getLogger("issuer.events")


class IssuanceEventEmitter(Protocol):
    """
    Receives one event per issuance transition.

    The dispatcher awaits ``emit`` inline after each tracker update, so a
    slow emitter delays the issuance it reports on.
    Anything ``emit`` raises is logged and discarded; tile state is
    already recorded by then.
    """

    async def emit(self, event: IssuanceEvent) -> None:
        ...


class NullEventEmitter:
    """Dispatcher default when no event consumer is wired."""

    async def emit(self, event: IssuanceEvent) -> None:
        return


class LoggingEventEmitter:
    """Writes each event to the ``issuer.events`` logger."""

    async def emit(self, event: IssuanceEvent) -> None:
        logger.info(
            "%s kind=%s attempt=%s details=%s",
            event.event_type.value,
            event.document_kind.value,
            event.attempt_id,
            event.details or {},
        )
