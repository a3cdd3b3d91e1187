"""
Document catalog, issuance, and status endpoints.

Thin HTTP surface over ``DocumentDispatcher``. Catalog and schema routes
are served from the in-process registry. Status routes read the tracker
owned by the dispatcher; they never mutate it.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException, Request
from pydantic import BaseModel, ValidationError

from issuer.app.dispatcher import DocumentDispatcher
from issuer.app.registry.registry import list_known_kinds, parse_payload, payload_schema
from issuer.app.schemas.documents import DocumentKind
from issuer.app.schemas.issuance import DocumentSummary, IssuanceStatus
from issuer.app.services.issuance_client import IssuanceError

logger = logging.getLogger("issuer.api")

router = APIRouter(tags=["Document Issuance"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class StatusView(BaseModel):
    kind: DocumentKind
    state: str
    label: str
    message: Optional[str] = None


class LastOutcomeView(BaseModel):
    # Serialized IssuanceResult; the payload is rendered with wire names.
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def _status_view(kind: DocumentKind, status: IssuanceStatus) -> StatusView:
    return StatusView(
        kind=kind,
        state=status.state.value,
        label=status.label,
        message=status.message,
    )


def get_dispatcher(request: Request) -> DocumentDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("dispatcher not initialized")
    return dispatcher


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=List[DocumentSummary],
    summary="List issuable document kinds",
)
def list_documents() -> List[DocumentSummary]:
    return list_known_kinds()


@router.get(
    "/schema/{kind}",
    summary="Return the JSON schema of a document kind's payload",
)
def get_document_schema(kind: DocumentKind) -> Dict[str, Any]:
    """
    The schema uses wire (camelCase) field names and is closed:
    unknown fields are rejected at issuance.
    """
    schema = payload_schema(kind).model_json_schema(by_alias=True)
    schema.setdefault("additionalProperties", False)
    return schema


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


@router.get(
    "/status",
    response_model=List[StatusView],
    summary="Issuance status of every document kind",
)
def list_statuses(request: Request) -> List[StatusView]:
    dispatcher = get_dispatcher(request)
    return [
        _status_view(kind, status)
        for kind, status in dispatcher.get_statuses().items()
    ]


@router.get(
    "/last-result",
    response_model=LastOutcomeView,
    summary="Most recent successful result and most recent error",
)
def get_last_outcome(request: Request) -> LastOutcomeView:
    dispatcher = get_dispatcher(request)
    last_result = dispatcher.get_last_result()
    return LastOutcomeView(
        result=last_result.model_dump(mode="json") if last_result else None,
        error=dispatcher.get_last_error(),
    )


@router.get(
    "/{kind}/status",
    response_model=StatusView,
    summary="Issuance status of one document kind",
)
def get_status(kind: DocumentKind, request: Request) -> StatusView:
    dispatcher = get_dispatcher(request)
    return _status_view(kind, dispatcher.get_status(kind))


# ---------------------------------------------------------------------------
# POST /documents/{kind}/issue
# ---------------------------------------------------------------------------


@router.post(
    "/{kind}/issue",
    summary="Issue a document",
    responses={
        422: {"description": "Payload does not match the document schema"},
        502: {"description": "Issuance gateway failure"},
    },
)
async def issue_document(
    kind: DocumentKind,
    request: Request,
    payload: Dict[str, Any] = Body(...),
) -> Dict[str, Any]:
    """
    Returns the serialized IssuanceResult. The remote body is passed
    through untouched under ``raw``.
    """
    dispatcher = get_dispatcher(request)

    try:
        validated = parse_payload(kind, payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc

    try:
        result = await dispatcher.issue(kind, validated)
    except IssuanceError as exc:
        logger.warning("issue_document failed kind=%s: %s", kind.value, exc.message)
        raise HTTPException(status_code=502, detail=exc.message) from exc

    return result.model_dump(mode="json")
