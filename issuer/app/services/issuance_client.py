import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

import httpx

from issuer.app.config import Settings
from issuer.app.registry.registry import DOCUMENT_REGISTRY, DocumentEntry
from issuer.app.schemas.documents import DocumentKind, DocumentPayload
from issuer.app.schemas.issuance import IssuanceResult
from issuer.app.services.request_builder import CallDescriptor, build_call

logger = logging.getLogger("issuer.issuance_client")


class IssuanceError(RuntimeError):
    """
    Transport-level issuance failure.

    Carries a human-readable message only. The document kind that failed
    is known from the call site, not from the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class IssuanceClient:
    """
    Async client for the document issuance gateway.

    GUARANTEES:
    - One network call per ``issue``; no retry, no cache
    - Any 2xx response is a success, whatever the body says
    - Transport failures surface as ``IssuanceError`` only
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        *,
        clock: Callable[[], datetime] = _utc_now,
        registry: Mapping[DocumentKind, DocumentEntry] = DOCUMENT_REGISTRY,
    ):
        self.client = http_client
        self.settings = settings
        self.registry = registry
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, kind: DocumentKind, payload: DocumentPayload) -> CallDescriptor:
        return build_call(
            kind,
            payload,
            base_url=self.settings.api_base_url,
            api_key=self.settings.api_key.get_secret_value(),
            registry=self.registry,
        )

    async def issue(
        self,
        kind: DocumentKind,
        payload: DocumentPayload,
    ) -> IssuanceResult:
        """
        Issue one document.

        Raises:
            IssuanceError on network failure, timeout, or non-2xx status.
            PayloadKindMismatchError if the payload does not belong to kind.
            DescriptorError if the registry entry cannot produce a call.
        """
        kind = DocumentKind(kind)
        call = self.build(kind, payload)

        logger.info(
            "issuance_request kind=%s method=%s path=%s",
            kind.value,
            call.method.value,
            call.url,
        )

        try:
            response = await self._perform(call)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "issuance_failed kind=%s status=%s body=%s",
                kind.value,
                exc.response.status_code,
                exc.response.text[:200],
            )
            raise IssuanceError(self._message_for(kind, exc)) from exc
        except httpx.RequestError as exc:
            logger.error(
                "issuance_failed kind=%s transport_error=%s",
                kind.value,
                exc,
            )
            raise IssuanceError(self._message_for(kind, exc)) from exc

        result = IssuanceResult(
            document_kind=kind,
            issued_at=self._clock(),
            request_payload=payload,
            raw=_decode_body(response),
        )

        logger.info(
            "issuance_completed kind=%s status=%s",
            kind.value,
            response.status_code,
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _perform(self, call: CallDescriptor) -> httpx.Response:
        return await self.client.request(
            call.method.value,
            call.url,
            headers=call.headers,
            params=call.params,
            json=call.json_body,
            timeout=self.settings.request_timeout_seconds,
        )

    @staticmethod
    def _message_for(kind: DocumentKind, exc: httpx.HTTPError) -> str:
        message = str(exc)
        if message:
            return message
        return f"{type(exc).__name__} while issuing '{kind.value}'"
