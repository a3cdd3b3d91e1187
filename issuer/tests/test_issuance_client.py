import anyio
import httpx
import pytest

from issuer.app.schemas.documents import DocumentKind
from issuer.app.services.issuance_client import IssuanceError
from issuer.app.services.request_builder import PayloadKindMismatchError
from issuer.tests.helpers import (
    FIXED_NOW,
    TEST_API_KEY,
    make_client,
    sample_payloads,
)


def _issue(handler, kind, payload):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await make_client(http).issue(kind, payload)

    return anyio.run(run)


# ---------------------------------------------------------------------------
# Success envelope
# ---------------------------------------------------------------------------

def test_get_issuance_wraps_response_in_result_envelope():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"documentUrl": "https://files.test/1.pdf"})

    payload = sample_payloads()[DocumentKind.LAND_LEDGER]
    result = _issue(handler, DocumentKind.LAND_LEDGER, payload)

    assert result.document_kind is DocumentKind.LAND_LEDGER
    assert result.issued_at == FIXED_NOW
    assert result.request_payload is payload
    assert result.raw == {"documentUrl": "https://files.test/1.pdf"}

    (request,) = seen
    assert request.method == "GET"
    assert request.url.path == "/documents/land-ledger"
    assert request.url.params["parcelNumber"] == "123-45"
    assert request.url.params["serviceKey"] == TEST_API_KEY
    assert request.headers["x-api-key"] == TEST_API_KEY
    assert request.content == b""


def test_post_issuance_sends_json_body_without_service_key():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"receiptNo": "R-1"})

    payload = sample_payloads()[DocumentKind.PASSPORT_REISSUE]
    _issue(handler, DocumentKind.PASSPORT_REISSUE, payload)

    (request,) = seen
    assert request.method == "POST"
    assert "serviceKey" not in request.url.params
    assert request.headers["content-type"] == "application/json"
    assert b"serviceKey" not in request.content
    assert b'"passportNumber"' in request.content


def test_remote_failure_semantics_in_body_are_not_interpreted():
    def handler(request):
        return httpx.Response(200, json={"resultCode": "99", "resultMsg": "NO DATA"})

    result = _issue(
        handler,
        DocumentKind.BUILDING_LEDGER,
        sample_payloads()[DocumentKind.BUILDING_LEDGER],
    )

    assert result.raw["resultCode"] == "99"


def test_non_json_body_is_kept_as_text():
    def handler(request):
        return httpx.Response(200, text="<xml>issued</xml>")

    result = _issue(
        handler,
        DocumentKind.LOCAL_TAX,
        sample_payloads()[DocumentKind.LOCAL_TAX],
    )

    assert result.raw == "<xml>issued</xml>"


# ---------------------------------------------------------------------------
# Transport failures
# ---------------------------------------------------------------------------

def test_network_error_becomes_issuance_error_with_verbatim_message():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(IssuanceError) as exc_info:
        _issue(
            handler,
            DocumentKind.VEHICLE_REGISTER,
            sample_payloads()[DocumentKind.VEHICLE_REGISTER],
        )

    assert exc_info.value.message == "Connection refused"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_non_2xx_becomes_issuance_error():
    def handler(request):
        return httpx.Response(503, text="maintenance")

    with pytest.raises(IssuanceError) as exc_info:
        _issue(
            handler,
            DocumentKind.TAX_PAYMENT,
            sample_payloads()[DocumentKind.TAX_PAYMENT],
        )

    assert "503" in exc_info.value.message


def test_empty_transport_message_gets_a_fallback():
    def handler(request):
        raise httpx.ReadTimeout("", request=request)

    with pytest.raises(IssuanceError) as exc_info:
        _issue(
            handler,
            DocumentKind.LOCAL_TAX,
            sample_payloads()[DocumentKind.LOCAL_TAX],
        )

    assert exc_info.value.message == "ReadTimeout while issuing 'localTax'"


def test_mismatched_payload_never_reaches_the_network():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    with pytest.raises(PayloadKindMismatchError):
        _issue(
            handler,
            DocumentKind.LAND_LEDGER,
            sample_payloads()[DocumentKind.TAX_PAYMENT],
        )

    assert calls == []
