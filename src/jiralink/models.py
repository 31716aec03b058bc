from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IssueKey:
    project_key: str
    number: str

    def __str__(self) -> str:
        return f"{self.project_key}-{self.number}"


@dataclass(frozen=True)
class IssueType:
    name: str
    icon_url: str


@dataclass(frozen=True)
class IssueLabel:
    name: str
    url: str


@dataclass(frozen=True)
class IssueProject:
    name: str
    url: str
    key: str


@dataclass(frozen=True)
class IssueRecord:
    key: str
    url: str
    type: IssueType
    estimate: int | float | None
    labels: tuple[IssueLabel, ...]
    summary: str
    project: IssueProject
    status: str


@dataclass(frozen=True)
class StatusAllowList:
    enabled: bool
    statuses: frozenset[str]

    def allows(self, status: str) -> bool:
        if not self.enabled:
            return True
        return status in self.statuses


@dataclass(frozen=True)
class PullRequestContext:
    branch: str
    title: str = ""
    body: str | None = None
    additions: int = 0
