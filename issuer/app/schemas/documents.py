"""
Document kinds and their request payload schemas.

Every issuable document kind is bound to exactly one payload model. The
binding lives on the model itself (``document_kind``) so that the registry
and the request builder can reject a payload that was built for a
different kind before any request is assembled.

Payload fields are structurally typed only. Field formats (resident
registration checksums, plate number patterns, ...) are deliberately not
validated here; the remote service owns that.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


class DocumentKind(str, Enum):
    """
    Closed catalog of issuable documents.

    Declaration order is the catalog order shown to users.
    """

    LAND_LEDGER = "landLedger"
    RESIDENT_REGISTRATION = "residentRegistration"
    VEHICLE_REGISTER = "vehicleRegister"
    BUILDING_LEDGER = "buildingLedger"
    FAMILY_RELATION = "familyRelation"
    PASSPORT_REISSUE = "passportReissue"
    LOCAL_TAX = "localTax"
    TAX_PAYMENT = "taxPayment"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class ServiceType(str, Enum):
    """How the issued document is presented to the user."""

    PDF = "pdf"
    LINK = "link"
    EDIT = "edit"


# ----------------------------------------------------------------------
# Payload base
# ----------------------------------------------------------------------


class DocumentPayload(BaseModel):
    """
    Base class for all document payloads.

    Payloads are immutable once constructed and reject unknown fields.
    Attributes are snake_case; the wire format uses the camelCase aliases.
    """

    document_kind: ClassVar[DocumentKind]

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Return the payload keyed by its wire (alias) field names."""
        return self.model_dump(by_alias=True)


# ----------------------------------------------------------------------
# Per-kind payloads
# ----------------------------------------------------------------------


class LandLedgerPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.LAND_LEDGER

    parcel_number: str = Field(
        ...,
        alias="parcelNumber",
        description="Parcel (lot) number, e.g. '123-45'.",
    )
    si_gun_gu_code: str = Field(
        ...,
        alias="siGunGuCode",
        description="Administrative district code (si/gun/gu).",
    )
    eup_myeon_dong_code: str = Field(
        ...,
        alias="eupMyeonDongCode",
        description="Sub-district code (eup/myeon/dong).",
    )


class ResidentRegistrationPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.RESIDENT_REGISTRATION

    resident_registration_number: str = Field(
        ..., alias="residentRegistrationNumber"
    )
    issue_reason: str = Field(..., alias="issueReason")
    include_address_history: Literal["Y", "N"] = Field(
        ...,
        alias="includeAddressHistory",
        description="Whether the abstract includes the address history.",
    )


class VehicleRegisterPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.VEHICLE_REGISTER

    plate_number: str = Field(..., alias="plateNumber")
    owner_name: str = Field(..., alias="ownerName")


class BuildingLedgerPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.BUILDING_LEDGER

    building_id: str = Field(..., alias="buildingId")
    si_gun_gu_code: str = Field(..., alias="siGunGuCode")


class FamilyRelationPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.FAMILY_RELATION

    applicant_rrn: str = Field(..., alias="applicantRrn")
    target_relation: Literal["SELF", "SPOUSE", "PARENT", "CHILD"] = Field(
        ..., alias="targetRelation"
    )


class PassportReissuePayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.PASSPORT_REISSUE

    passport_number: str = Field(..., alias="passportNumber")
    applicant_name: str = Field(
        ...,
        alias="applicantName",
        description="Applicant name as printed in the passport.",
    )
    contact_number: str = Field(..., alias="contactNumber")


class LocalTaxPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.LOCAL_TAX

    taxpayer_id: str = Field(..., alias="taxpayerId")
    tax_type: Literal["PROPERTY", "ACQUISITION", "RESIDENT"] = Field(
        ..., alias="taxType"
    )


class TaxPaymentPayload(DocumentPayload):
    document_kind: ClassVar[DocumentKind] = DocumentKind.TAX_PAYMENT

    business_id: str = Field(..., alias="businessId")
    year: str
    half: Literal["FIRST", "SECOND"] = Field(
        ...,
        description="Half-year the certificate covers.",
    )
