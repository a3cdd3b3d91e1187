"""
Per-document issuance state machine.

    idle ──begin──▶ loading ──resolve──▶ success | error
                       ▲                        │
                       └─────────begin──────────┘

The tracker is an explicitly owned object: the dispatcher (or the
presentation layer holding it) mutates it only through ``begin`` and
``resolve``. Statuses of different kinds are fully independent.

Concurrency policy is last-write-wins. A second ``begin`` for a kind that
is still loading simply restarts its visible state, and whichever attempt
resolves last determines the final status. The shared last result follows
the same rule across kinds. The shared last error is cleared by every
``begin`` so a retry never shows the previous failure while it runs.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Union

from issuer.app.schemas.documents import DocumentKind
from issuer.app.schemas.issuance import IssuanceResult, IssuanceStatus
from issuer.app.services.issuance_client import IssuanceError

IssuanceOutcome = Union[IssuanceResult, IssuanceError]


class IssuanceStateTracker:
    def __init__(self, kinds: Iterable[DocumentKind] = DocumentKind) -> None:
        self._statuses: Dict[DocumentKind, IssuanceStatus] = {
            DocumentKind(kind): IssuanceStatus.idle() for kind in kinds
        }
        self._last_result: Optional[IssuanceResult] = None
        self._last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Mutation points
    # ------------------------------------------------------------------

    def begin(self, kind: DocumentKind) -> None:
        self._statuses[self._known(kind)] = IssuanceStatus.loading()
        self._last_error = None

    def resolve(self, kind: DocumentKind, outcome: IssuanceOutcome) -> None:
        kind = self._known(kind)

        if isinstance(outcome, IssuanceResult):
            self._statuses[kind] = IssuanceStatus.success(outcome.issued_at)
            self._last_result = outcome
        elif isinstance(outcome, IssuanceError):
            self._statuses[kind] = IssuanceStatus.error(outcome.message)
            self._last_error = outcome.message
        else:
            raise TypeError(
                f"Unsupported issuance outcome: {type(outcome).__name__}"
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_status(self, kind: DocumentKind) -> IssuanceStatus:
        return self._statuses[self._known(kind)]

    def statuses(self) -> Mapping[DocumentKind, IssuanceStatus]:
        """Read-only snapshot of every tracked status."""
        return MappingProxyType(dict(self._statuses))

    @property
    def last_result(self) -> Optional[IssuanceResult]:
        return self._last_result

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def _known(self, kind: DocumentKind) -> DocumentKind:
        kind = DocumentKind(kind)
        if kind not in self._statuses:
            raise KeyError(f"Document kind '{kind.value}' is not tracked.")
        return kind
