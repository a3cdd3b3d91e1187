from __future__ import annotations

from typing import Any, Dict, Optional
from enum import Enum
from datetime import datetime, timezone
from uuid import uuid4, UUID

from pydantic import BaseModel, Field, ConfigDict

from issuer.app.schemas.documents import DocumentKind


# ----------------------------------------------------------------------
# Event Types
# ----------------------------------------------------------------------
class IssuanceEventType(str, Enum):
    """
    Lifecycle events emitted around each issuance attempt.

    Every ISSUANCE_STARTED is followed by exactly one of
    ISSUANCE_SUCCEEDED or ISSUANCE_FAILED for the same attempt.
    """

    ISSUANCE_STARTED = "issuance_started"
    ISSUANCE_SUCCEEDED = "issuance_succeeded"
    ISSUANCE_FAILED = "issuance_failed"


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class IssuanceEvent(BaseModel):
    """
    An immutable observation of an issuance state transition.

    Events are observational only; the tracker is the source of truth
    for displayed state.
    """

    event_id: UUID = Field(default_factory=uuid4)
    attempt_id: str = Field(..., description="Identifier of the issuance attempt")
    document_kind: DocumentKind
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: IssuanceEventType

    # Optional contextual metadata (issued_at, error message, ...)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
