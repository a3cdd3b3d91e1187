"""
Document issuance registry.

This module defines the set of documents that may be issued. Each entry
explicitly binds together:

- a document kind
- a payload schema
- a transport descriptor (endpoint path, HTTP method, fixed parameters,
  optional payload transform)
- a human-readable name and description

The registry is total over ``DocumentKind``. Completeness is checked when
this module is imported, so a kind added without an entry fails at import
rather than at the first issuance attempt.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, model_validator

from issuer.app.schemas.documents import (
    BuildingLedgerPayload,
    DocumentKind,
    DocumentPayload,
    FamilyRelationPayload,
    HttpMethod,
    LandLedgerPayload,
    LocalTaxPayload,
    PassportReissuePayload,
    ResidentRegistrationPayload,
    ServiceType,
    TaxPaymentPayload,
    VehicleRegisterPayload,
)
from issuer.app.schemas.issuance import DocumentSummary


class RegistryError(RuntimeError):
    """Raised when the registry does not cover the document catalog."""


PayloadTransform = Callable[[DocumentPayload], Mapping[str, Any]]


class TransportDescriptor(BaseModel):
    """
    How a document kind's request is physically sent.
    """

    path: str
    method: HttpMethod
    fixed_params: Dict[str, str] = Field(default_factory=dict)
    payload_transform: Optional[PayloadTransform] = None

    model_config = ConfigDict(frozen=True)


class DocumentEntry(BaseModel):
    """
    Declarative description of an issuable document.

    Construction fails if the payload schema is tagged with a different
    kind, or if a fixed parameter would shadow a payload field.
    """

    kind: DocumentKind
    name: str
    description: str
    service_type: ServiceType
    payload_schema: Type[DocumentPayload]
    transport: TransportDescriptor

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_binding(self) -> "DocumentEntry":
        bound_kind = getattr(self.payload_schema, "document_kind", None)
        if bound_kind is not self.kind:
            raise ValueError(
                f"Payload schema {self.payload_schema.__name__} is bound to "
                f"{bound_kind!r}, not '{self.kind.value}'."
            )

        shared = set(self.transport.fixed_params) & wire_field_names(
            self.payload_schema
        )
        if shared:
            raise ValueError(
                f"Fixed parameters for '{self.kind.value}' shadow payload "
                f"fields: {sorted(shared)}"
            )
        return self

    def summary(self) -> DocumentSummary:
        return DocumentSummary(
            kind=self.kind,
            name=self.name,
            description=self.description,
            service_type=self.service_type,
            method=self.transport.method,
        )


def wire_field_names(schema: Type[DocumentPayload]) -> set[str]:
    return {
        field.alias or name
        for name, field in schema.model_fields.items()
    }


def _entry(
    kind: DocumentKind,
    *,
    name: str,
    description: str,
    service_type: ServiceType,
    schema: Type[DocumentPayload],
    path: str,
    method: HttpMethod,
) -> DocumentEntry:
    return DocumentEntry(
        kind=kind,
        name=name,
        description=description,
        service_type=service_type,
        payload_schema=schema,
        transport=TransportDescriptor(path=path, method=method),
    )


_ENTRIES: List[DocumentEntry] = [
    _entry(
        DocumentKind.LAND_LEDGER,
        name="토지(임야)대장",
        description="지번 기반 토지현황",
        service_type=ServiceType.PDF,
        schema=LandLedgerPayload,
        path="/documents/land-ledger",
        method=HttpMethod.GET,
    ),
    _entry(
        DocumentKind.RESIDENT_REGISTRATION,
        name="주민등록등본(초본)",
        description="세대 정보/주소 포함",
        service_type=ServiceType.PDF,
        schema=ResidentRegistrationPayload,
        path="/documents/resident-registration",
        method=HttpMethod.POST,
    ),
    _entry(
        DocumentKind.VEHICLE_REGISTER,
        name="자동차등록원부",
        description="차량 소유/저당 정보",
        service_type=ServiceType.PDF,
        schema=VehicleRegisterPayload,
        path="/documents/vehicle-register",
        method=HttpMethod.GET,
    ),
    _entry(
        DocumentKind.BUILDING_LEDGER,
        name="건축물대장",
        description="건축물 개요 및 면적",
        service_type=ServiceType.PDF,
        schema=BuildingLedgerPayload,
        path="/documents/building-ledger",
        method=HttpMethod.GET,
    ),
    _entry(
        DocumentKind.FAMILY_RELATION,
        name="가족관계증명서",
        description="본인 및 직계가족",
        service_type=ServiceType.LINK,
        schema=FamilyRelationPayload,
        path="/documents/family-relation",
        method=HttpMethod.POST,
    ),
    _entry(
        DocumentKind.PASSPORT_REISSUE,
        name="여권 재발급",
        description="기존 여권 재발급",
        service_type=ServiceType.EDIT,
        schema=PassportReissuePayload,
        path="/documents/passport-reissue",
        method=HttpMethod.POST,
    ),
    _entry(
        DocumentKind.LOCAL_TAX,
        name="지방세 납세증명",
        description="지방세 완납 증명",
        service_type=ServiceType.PDF,
        schema=LocalTaxPayload,
        path="/documents/local-tax-certificate",
        method=HttpMethod.GET,
    ),
    _entry(
        DocumentKind.TAX_PAYMENT,
        name="납세증명",
        description="국세 완납 증명",
        service_type=ServiceType.PDF,
        schema=TaxPaymentPayload,
        path="/documents/tax-payment",
        method=HttpMethod.GET,
    ),
]


def build_registry(
    entries: List[DocumentEntry],
) -> Mapping[DocumentKind, DocumentEntry]:
    """
    Index entries by kind and assert the catalog is covered exactly once.
    """
    registry: Dict[DocumentKind, DocumentEntry] = {}
    for entry in entries:
        if entry.kind in registry:
            raise RegistryError(
                f"Duplicate registry entry for '{entry.kind.value}'."
            )
        registry[entry.kind] = entry

    missing = [kind.value for kind in DocumentKind if kind not in registry]
    if missing:
        raise RegistryError(f"No registry entry for document kinds: {missing}")

    # Preserve catalog order regardless of entry order.
    return MappingProxyType({kind: registry[kind] for kind in DocumentKind})


DOCUMENT_REGISTRY: Mapping[DocumentKind, DocumentEntry] = build_registry(_ENTRIES)


# ----------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------


def get_entry(kind: DocumentKind) -> DocumentEntry:
    return DOCUMENT_REGISTRY[DocumentKind(kind)]


def lookup(kind: DocumentKind) -> TransportDescriptor:
    """Return the transport descriptor for ``kind``."""
    return get_entry(kind).transport


def payload_schema(kind: DocumentKind) -> Type[DocumentPayload]:
    return get_entry(kind).payload_schema


def parse_payload(kind: DocumentKind, data: Mapping[str, Any]) -> DocumentPayload:
    """
    Validate untyped input against the payload schema of ``kind``.

    Raises ``pydantic.ValidationError`` on structural mismatch.
    """
    return payload_schema(kind).model_validate(data)


def list_known_kinds() -> List[DocumentSummary]:
    """Catalog rows in catalog order."""
    return [entry.summary() for entry in DOCUMENT_REGISTRY.values()]
