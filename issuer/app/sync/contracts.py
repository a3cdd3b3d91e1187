"""
Commit-to-workspace sync contract.

The sync pipeline (fetch repository commits, turn each into a page, upsert
the page into a knowledge-base workspace) is an external collaborator of
the issuance service. This module pins down only the interfaces it is
reached through:

    CommitSource        where commit records come from
    WorkspacePageSink   where pages are written
    commit_to_page      the record → page transform
    upsert_commit_page  idempotent write keyed by commit sha

No concrete source or sink ships with this service.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field

SHORT_SHA_LENGTH = 7


class CommitRecord(BaseModel):
    sha: str = Field(..., min_length=1)
    message: str
    author: str
    date: datetime
    url: str
    branch: Optional[str] = None
    files: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class CommitPage(BaseModel):
    """Destination page for one commit."""

    title: str
    message: str
    author: str
    date: datetime
    sha: str = Field(..., description="Full commit sha, the idempotency key")
    short_sha: str
    url: str
    files: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def commit_to_page(commit: CommitRecord) -> CommitPage:
    """Titles use the first line of the commit message only."""
    first_line = commit.message.split("\n", 1)[0].strip()
    return CommitPage(
        title=f"[Commit] {first_line}",
        message=commit.message,
        author=commit.author,
        date=commit.date,
        sha=commit.sha,
        short_sha=commit.sha[:SHORT_SHA_LENGTH],
        url=commit.url,
        files=list(commit.files),
    )


# ----------------------------------------------------------------------
# Workflow configuration
# ----------------------------------------------------------------------


class SyncFilters(BaseModel):
    branches: Optional[List[str]] = None
    authors: Optional[List[str]] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    def matches(self, commit: CommitRecord) -> bool:
        if self.branches is not None and commit.branch not in self.branches:
            return False
        if self.authors is not None and commit.author not in self.authors:
            return False
        if self.start is not None and commit.date < self.start:
            return False
        if self.end is not None and commit.date > self.end:
            return False
        return True


class SyncWorkflowConfig(BaseModel):
    source: str = "github"
    destination: str = "notion"
    auto_sync: bool = False
    sync_interval: timedelta = timedelta(minutes=5)
    filters: SyncFilters = Field(default_factory=SyncFilters)

    model_config = ConfigDict(frozen=True)


# ----------------------------------------------------------------------
# Collaborator interfaces
# ----------------------------------------------------------------------


class CommitSource(Protocol):
    async def list_commits(self, *, page: int = 1) -> Sequence[CommitRecord]:
        ...

    async def get_commit(self, sha: str) -> CommitRecord:
        ...


class WorkspacePageSink(Protocol):
    async def find_page_id(self, sha: str) -> Optional[str]:
        ...

    async def create_page(self, page: CommitPage) -> str:
        ...

    async def update_page(self, page_id: str, page: CommitPage) -> str:
        ...


async def upsert_commit_page(sink: WorkspacePageSink, commit: CommitRecord) -> str:
    """
    Write the page for ``commit``, updating the existing page if one is
    already recorded for its sha. Returns the page id.
    """
    page = commit_to_page(commit)
    existing = await sink.find_page_id(commit.sha)
    if existing is not None:
        return await sink.update_page(existing, page)
    return await sink.create_page(page)


async def sync_commits(
    source: CommitSource,
    sink: WorkspacePageSink,
    filters: Optional[SyncFilters] = None,
    *,
    page: int = 1,
) -> List[str]:
    """Upsert one page of matching commits, in source order."""
    filters = filters or SyncFilters()
    written: List[str] = []
    for commit in await source.list_commits(page=page):
        if filters.matches(commit):
            written.append(await upsert_commit_page(sink, commit))
    return written
