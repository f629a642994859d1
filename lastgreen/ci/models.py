from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class MatchMode(str, Enum):
    """Which job attributes are compared against the configured job keys."""

    NAME = "name"
    ID_OR_NAME = "id-or-name"


class ResolutionSource(str, Enum):
    QUALIFYING_RUN = "qualifying-run"
    EMPTY_HISTORY = "default-branch-empty-history"
    # history was present but no run met the criteria
    NO_QUALIFYING_RUN = "default-branch-no-fallback"
    FETCH_ERROR = "default-branch-fetch-error"
    BRANCH_NAME = "default-branch-name"


@dataclass(frozen=True)
class Criteria:
    repository: str
    branch: str
    workflow_id: str
    main_job_key: str
    required_job_keys: Tuple[str, ...]
    auth_token: str = field(repr=False)
    page_size: int = 50
    retry_attempts: int = 3
    default_branch_fallback: str = "main"
    match_by: MatchMode = MatchMode.NAME
    run_id_field: str = "id"
    allow_branch_name_fallback: bool = False


@dataclass(frozen=True)
class WorkflowRun:
    id: Optional[Any]
    head_sha: str
    status: Optional[str]
    conclusion: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True)
class Job:
    id: Optional[Any]
    name: str
    conclusion: Optional[str]


@dataclass(frozen=True)
class MatchResult:
    main_job_status: Optional[str]
    test_status: str  # "success" | "failure" | "missing"
    matched_test_jobs: Tuple[Job, ...] = ()

    @property
    def matched_test_job_names(self) -> Tuple[str, ...]:
        return tuple(j.name for j in self.matched_test_jobs)


@dataclass(frozen=True)
class Qualification:
    qualifies: bool
    reason: str
    match: MatchResult


@dataclass(frozen=True)
class Resolution:
    sha: str
    source: ResolutionSource
    run_id: Optional[Any] = None
