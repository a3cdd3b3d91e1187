"""
Shared fixtures for issuance tests.

Everything here is deterministic and offline: HTTP is served by
httpx.MockTransport handlers, settings never read the environment.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict

import httpx

from issuer.app.config import Settings
from issuer.app.schemas.documents import (
    BuildingLedgerPayload,
    DocumentKind,
    DocumentPayload,
    FamilyRelationPayload,
    LandLedgerPayload,
    LocalTaxPayload,
    PassportReissuePayload,
    ResidentRegistrationPayload,
    TaxPaymentPayload,
    VehicleRegisterPayload,
)
from issuer.app.services.issuance_client import IssuanceClient

TEST_BASE_URL = "https://gateway.test"
TEST_API_KEY = "test-key"
FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def make_settings(**overrides) -> Settings:
    values = {
        "base_url": TEST_BASE_URL,
        "api_key": TEST_API_KEY,
        **overrides,
    }
    return Settings(_env_file=None, **values)


def sample_payloads() -> Dict[DocumentKind, DocumentPayload]:
    """One representative payload per document kind."""
    return {
        DocumentKind.LAND_LEDGER: LandLedgerPayload(
            parcel_number="123-45",
            si_gun_gu_code="41190",
            eup_myeon_dong_code="10300",
        ),
        DocumentKind.RESIDENT_REGISTRATION: ResidentRegistrationPayload(
            resident_registration_number="900101-1234567",
            issue_reason="전입신고",
            include_address_history="Y",
        ),
        DocumentKind.VEHICLE_REGISTER: VehicleRegisterPayload(
            plate_number="12가3456",
            owner_name="홍길동",
        ),
        DocumentKind.BUILDING_LEDGER: BuildingLedgerPayload(
            building_id="116801330010123",
            si_gun_gu_code="11680",
        ),
        DocumentKind.FAMILY_RELATION: FamilyRelationPayload(
            applicant_rrn="900101-1234567",
            target_relation="SELF",
        ),
        DocumentKind.PASSPORT_REISSUE: PassportReissuePayload(
            passport_number="M12345678",
            applicant_name="HONG GILDONG",
            contact_number="010-1234-5678",
        ),
        DocumentKind.LOCAL_TAX: LocalTaxPayload(
            taxpayer_id="111101-1234567",
            tax_type="PROPERTY",
        ),
        DocumentKind.TAX_PAYMENT: TaxPaymentPayload(
            business_id="123-45-67890",
            year="2024",
            half="SECOND",
        ),
    }


def ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"resultCode": "00", "path": request.url.path})


def make_client(
    http_client: httpx.AsyncClient,
    *,
    clock: Callable[[], datetime] = lambda: FIXED_NOW,
    **kwargs,
) -> IssuanceClient:
    return IssuanceClient(http_client, make_settings(), clock=clock, **kwargs)
