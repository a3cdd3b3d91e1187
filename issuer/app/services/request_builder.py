"""
Request construction for document issuance.

Turns a (document kind, payload) pair into a transport-ready call
descriptor by consulting the registry. Construction is pure: no I/O,
no clock reads, and identical inputs always yield equal descriptors.

Parameter placement:

    GET     fixed params + payload + serviceKey in the query string.
            No body.

    POST    fixed params + payload as a JSON body. The service key is
            never placed in the body; authentication travels only in
            the x-api-key header.

Fixed parameters take precedence over payload-derived parameters.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from issuer.app.registry.registry import DOCUMENT_REGISTRY, DocumentEntry
from issuer.app.schemas.documents import DocumentKind, DocumentPayload, HttpMethod

API_KEY_HEADER = "x-api-key"
SERVICE_KEY_PARAM = "serviceKey"


class PayloadKindMismatchError(TypeError):
    """Raised when a payload was not built for the requested document kind."""


class DescriptorError(RuntimeError):
    """Raised when a transport descriptor cannot produce a valid request."""


class CallDescriptor(BaseModel):
    """
    Fully resolved, ready-to-send request.

    Exactly one of ``params`` (query string) or ``json_body`` is set.
    """

    url: str
    method: HttpMethod
    headers: Dict[str, str]
    params: Optional[Dict[str, Any]] = None
    json_body: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _exactly_one_placement(self) -> "CallDescriptor":
        if (self.params is None) == (self.json_body is None):
            raise ValueError(
                "CallDescriptor requires exactly one of params or json_body."
            )
        return self


def ensure_payload_kind(
    kind: DocumentKind,
    payload: DocumentPayload,
    registry: Mapping[DocumentKind, DocumentEntry] = DOCUMENT_REGISTRY,
) -> DocumentEntry:
    """
    Return the registry entry for ``kind`` after checking the pairing.

    The payload must be an instance of the schema registered for the kind.
    """
    entry = registry[DocumentKind(kind)]
    if not isinstance(payload, entry.payload_schema):
        raise PayloadKindMismatchError(
            f"Payload {type(payload).__name__} cannot be issued as "
            f"'{entry.kind.value}' (expected {entry.payload_schema.__name__})."
        )
    return entry


def _payload_params(entry: DocumentEntry, payload: DocumentPayload) -> Dict[str, Any]:
    transform = entry.transport.payload_transform
    if transform is None:
        return payload.to_wire()

    transformed = transform(payload)
    if not isinstance(transformed, MappingABC):
        raise DescriptorError(
            f"payload_transform for '{entry.kind.value}' returned "
            f"{type(transformed).__name__}, expected a mapping."
        )
    return dict(transformed)


def build_call(
    kind: DocumentKind,
    payload: DocumentPayload,
    *,
    base_url: str,
    api_key: str,
    registry: Mapping[DocumentKind, DocumentEntry] = DOCUMENT_REGISTRY,
) -> CallDescriptor:
    """
    Build the call descriptor for issuing ``kind`` with ``payload``.
    """
    entry = ensure_payload_kind(kind, payload, registry)
    transport = entry.transport

    effective: Dict[str, Any] = {
        **_payload_params(entry, payload),
        **transport.fixed_params,
    }

    url = f"{base_url.rstrip('/')}{transport.path}"
    headers = {API_KEY_HEADER: api_key}

    if transport.method is HttpMethod.GET:
        return CallDescriptor(
            url=url,
            method=transport.method,
            headers=headers,
            params={**effective, SERVICE_KEY_PARAM: api_key},
        )

    if transport.method is HttpMethod.POST:
        return CallDescriptor(
            url=url,
            method=transport.method,
            headers={**headers, "Content-Type": "application/json"},
            json_body=effective,
        )

    raise DescriptorError(
        f"Unsupported HTTP method {transport.method!r} for '{entry.kind.value}'."
    )
