"""
Uniform issuance call path.

Every document kind, whatever its schema or transport verb, is issued
through ``DocumentDispatcher.issue``. The dispatcher owns the state
tracker and keeps it in step with each attempt:

    build → begin → client call → resolve → event

The call is built before ``begin``. A payload built for the wrong kind
or a malformed descriptor fails loudly without leaving a tile stuck in
``loading``. Anything that ends an attempt after ``begin`` resolves the
kind to ``error``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from issuer.app.events import (
    IssuanceEvent,
    IssuanceEventEmitter,
    IssuanceEventType,
    NullEventEmitter,
)
from issuer.app.registry.registry import list_known_kinds, parse_payload
from issuer.app.schemas.documents import DocumentKind, DocumentPayload
from issuer.app.schemas.issuance import (
    DocumentSummary,
    IssuanceResult,
    IssuanceStatus,
)
from issuer.app.services.issuance_client import IssuanceClient, IssuanceError
from issuer.app.state.tracker import IssuanceStateTracker

logger = logging.getLogger("issuer.dispatcher")


class DocumentDispatcher:
    def __init__(
        self,
        *,
        client: IssuanceClient,
        tracker: Optional[IssuanceStateTracker] = None,
        emitter: Optional[IssuanceEventEmitter] = None,
    ) -> None:
        self.client = client
        self.tracker = tracker or IssuanceStateTracker()
        self.emitter = emitter or NullEventEmitter()

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    async def issue(
        self,
        kind: DocumentKind,
        payload: DocumentPayload,
    ) -> IssuanceResult:
        """
        Issue one document and record the outcome in the tracker.

        Raises ``IssuanceError`` after recording it; callers retry by
        calling ``issue`` again.
        """
        kind = DocumentKind(kind)
        self.client.build(kind, payload)

        attempt_id = str(uuid4())
        self.tracker.begin(kind)
        await self._emit(attempt_id, kind, IssuanceEventType.ISSUANCE_STARTED)

        try:
            result = await self.client.issue(kind, payload)
        except IssuanceError as exc:
            self.tracker.resolve(kind, exc)
            await self._emit(
                attempt_id,
                kind,
                IssuanceEventType.ISSUANCE_FAILED,
                {"error": exc.message},
            )
            raise
        except Exception as exc:
            logger.exception("issuance_crashed kind=%s", kind.value)
            error = IssuanceError(f"{type(exc).__name__}: {exc}")
            self.tracker.resolve(kind, error)
            await self._emit(
                attempt_id,
                kind,
                IssuanceEventType.ISSUANCE_FAILED,
                {"error": error.message},
            )
            raise
        except BaseException:
            # Cancelled: no awaiting here, record the outcome and unwind.
            self.tracker.resolve(kind, IssuanceError("Issuance cancelled"))
            raise

        self.tracker.resolve(kind, result)
        await self._emit(
            attempt_id,
            kind,
            IssuanceEventType.ISSUANCE_SUCCEEDED,
            {"issued_at": result.issued_at.isoformat()},
        )
        return result

    async def issue_from_data(
        self,
        kind: DocumentKind,
        data: Mapping[str, Any],
    ) -> IssuanceResult:
        """Validate untyped input for ``kind`` and issue it."""
        return await self.issue(kind, parse_payload(kind, data))

    # ------------------------------------------------------------------
    # Reads for the presentation layer
    # ------------------------------------------------------------------

    def get_status(self, kind: DocumentKind) -> IssuanceStatus:
        return self.tracker.get_status(kind)

    def get_statuses(self) -> Mapping[DocumentKind, IssuanceStatus]:
        return self.tracker.statuses()

    def get_last_result(self) -> Optional[IssuanceResult]:
        return self.tracker.last_result

    def get_last_error(self) -> Optional[str]:
        return self.tracker.last_error

    @staticmethod
    def list_known_kinds() -> List[DocumentSummary]:
        return list_known_kinds()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _emit(
        self,
        attempt_id: str,
        kind: DocumentKind,
        event_type: IssuanceEventType,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        event = IssuanceEvent(
            attempt_id=attempt_id,
            document_kind=kind,
            event_type=event_type,
            details=details,
        )
        try:
            await self.emitter.emit(event)
        except Exception:
            # Observability must never change an issuance outcome.
            logger.warning(
                "event_emission_failed kind=%s type=%s",
                kind.value,
                event_type.value,
                exc_info=True,
            )
