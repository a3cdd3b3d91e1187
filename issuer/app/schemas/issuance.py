from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from issuer.app.schemas.documents import (
    DocumentKind,
    DocumentPayload,
    HttpMethod,
    ServiceType,
)


# ----------------------------------------------------------------------
# Issuance result
# ----------------------------------------------------------------------
class IssuanceResult(BaseModel):
    """
    Normalized outcome of one successful issuance attempt.

    ``request_payload`` is the caller's payload instance itself, not a
    copy. ``raw`` is the decoded response body exactly as the remote
    service returned it; its own status semantics are not interpreted.
    """

    document_kind: DocumentKind
    issued_at: datetime
    request_payload: DocumentPayload
    raw: Any = None

    model_config = ConfigDict(frozen=True)

    @field_serializer("request_payload")
    def _serialize_payload(self, payload: DocumentPayload) -> Dict[str, Any]:
        return payload.to_wire()


# ----------------------------------------------------------------------
# Issuance status (per document kind)
# ----------------------------------------------------------------------
class IssuanceState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


# Display labels for the status tiles.
STATUS_LABELS: Dict[IssuanceState, str] = {
    IssuanceState.IDLE: "발급 대기",
    IssuanceState.LOADING: "발급 중...",
    IssuanceState.SUCCESS: "발급 완료",
    IssuanceState.ERROR: "발급 실패",
}


class IssuanceStatus(BaseModel):
    """
    Visible state of one document kind.

    ``message`` carries the ISO-8601 issuance time on success and the
    failure message on error. It is empty for idle and loading.
    """

    state: IssuanceState
    message: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def idle(cls) -> "IssuanceStatus":
        return cls(state=IssuanceState.IDLE)

    @classmethod
    def loading(cls) -> "IssuanceStatus":
        return cls(state=IssuanceState.LOADING)

    @classmethod
    def success(cls, issued_at: datetime) -> "IssuanceStatus":
        return cls(state=IssuanceState.SUCCESS, message=issued_at.isoformat())

    @classmethod
    def error(cls, message: str) -> "IssuanceStatus":
        return cls(state=IssuanceState.ERROR, message=message)

    @property
    def label(self) -> str:
        return STATUS_LABELS[self.state]


# ----------------------------------------------------------------------
# Catalog listing
# ----------------------------------------------------------------------
class DocumentSummary(BaseModel):
    """Catalog row used to build a document selection UI."""

    kind: DocumentKind
    name: str
    description: str
    service_type: ServiceType
    method: HttpMethod = Field(
        ...,
        description="Transport verb declared for this document kind.",
    )

    model_config = ConfigDict(frozen=True)
