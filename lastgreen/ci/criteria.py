# lastgreen/ci/criteria.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from config import (
    DEFAULT_BRANCH_FALLBACK,
    DEFAULT_PAGE_SIZE,
    DEFAULT_RETRY_ATTEMPTS,
    GITHUB_API,
)
from lastgreen.ci.errors import ConfigError
from lastgreen.ci.models import Criteria, MatchMode

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ActionInputs:
    criteria: Criteria
    output_path: str
    api_url: str = GITHUB_API
    debug: bool = False


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


def split_job_keys(value: Union[str, Sequence[str], None]) -> Tuple[str, ...]:
    """Comma-split, trim and drop empty entries. Order is preserved."""
    if value is None:
        return ()
    parts = value.split(",") if isinstance(value, str) else list(value)
    return tuple(p.strip() for p in parts if p and p.strip())


def positive_int(value: Any, default: int) -> int:
    """
    Lenient numeric input: anything missing, unparseable, non-finite or <= 0
    becomes `default` instead of raising.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    number = int(number)
    return number if number > 0 else default


def _require(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ConfigError(message)
    return text


def build_criteria(
    *,
    repository: Optional[str],
    branch: Optional[str],
    workflow_id: Optional[str],
    main_job_key: Optional[str],
    required_job_keys: Union[str, Sequence[str], None],
    auth_token: Optional[str],
    page_size: Any = None,
    retry_attempts: Any = None,
    default_branch_fallback: Optional[str] = None,
    match_by: Optional[str] = None,
    run_id_field: Optional[str] = None,
    allow_branch_name_fallback: Any = False,
) -> Criteria:
    """
    Validate raw inputs into a Criteria.

    Raises ConfigError naming the first missing input. No network access.
    """
    main_job_key = _require(main_job_key, "Main job name is required (INPUT_MAIN_JOB_NAME)")
    if not required_job_keys:
        raise ConfigError("Required job names are required (INPUT_JOB_NAMES_THAT_MUST_SUCCEED)")
    workflow_id = _require(workflow_id, "Workflow name is required (INPUT_WORKFLOW_NAME)")
    auth_token = _require(auth_token, "GitHub token is required (INPUT_GITHUB_TOKEN)")
    repository = _require(repository, "Repository is required (INPUT_REPOSITORY or GITHUB_REPOSITORY)")
    branch = _require(branch, "Branch is required (INPUT_BRANCH)")

    keys = split_job_keys(required_job_keys)
    if not keys:
        raise ConfigError("INPUT_JOB_NAMES_THAT_MUST_SUCCEED must contain at least one job name")

    mode_text = (match_by or MatchMode.NAME.value).strip().lower()
    try:
        mode = MatchMode(mode_text)
    except ValueError:
        allowed = ", ".join(m.value for m in MatchMode)
        raise ConfigError(f"Unknown job match mode '{match_by}' (expected one of: {allowed})") from None

    return Criteria(
        repository=repository,
        branch=branch,
        workflow_id=workflow_id,
        main_job_key=main_job_key,
        required_job_keys=keys,
        auth_token=auth_token,
        page_size=positive_int(page_size, DEFAULT_PAGE_SIZE),
        retry_attempts=positive_int(retry_attempts, DEFAULT_RETRY_ATTEMPTS),
        default_branch_fallback=(default_branch_fallback or "").strip() or DEFAULT_BRANCH_FALLBACK,
        match_by=mode,
        run_id_field=(run_id_field or "").strip() or "id",
        allow_branch_name_fallback=parse_bool(allow_branch_name_fallback),
    )


def _first(environ: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value
    return None


def inputs_from_env(environ: Mapping[str, str]) -> ActionInputs:
    """
    Read the GitHub Action environment (INPUT_* plus the runner's GITHUB_*).

    Older action inputs are accepted as aliases:
      INPUT_WORKFLOW_FILE        -> workflow
      INPUT_TEST_SETUP_JOB_NAME  -> main job
      INPUT_TEST_JOB_PREFIX      -> required jobs
      INPUT_PER_PAGE             -> page size
    """
    criteria = build_criteria(
        repository=_first(environ, "INPUT_REPOSITORY", "GITHUB_REPOSITORY"),
        branch=_first(environ, "INPUT_BRANCH", "GITHUB_HEAD_REF", "GITHUB_REF_NAME"),
        workflow_id=_first(environ, "INPUT_WORKFLOW_NAME", "INPUT_WORKFLOW_FILE"),
        main_job_key=_first(environ, "INPUT_MAIN_JOB_NAME", "INPUT_TEST_SETUP_JOB_NAME"),
        required_job_keys=_first(environ, "INPUT_JOB_NAMES_THAT_MUST_SUCCEED", "INPUT_TEST_JOB_PREFIX"),
        auth_token=_first(environ, "INPUT_GITHUB_TOKEN", "GITHUB_TOKEN"),
        page_size=_first(environ, "INPUT_REQUEST_SIZE", "INPUT_PER_PAGE"),
        retry_attempts=_first(environ, "INPUT_RETRY_ATTEMPTS"),
        default_branch_fallback=_first(environ, "INPUT_DEFAULT_BRANCH"),
        match_by=_first(environ, "INPUT_MATCH_JOBS_BY"),
        run_id_field=_first(environ, "INPUT_RUN_ID_FIELD"),
        allow_branch_name_fallback=_first(environ, "INPUT_ALLOW_BRANCH_NAME_FALLBACK"),
    )

    output_path = _first(environ, "GITHUB_OUTPUT")
    if not output_path:
        raise ConfigError("GITHUB_OUTPUT environment variable is required")

    return ActionInputs(
        criteria=criteria,
        output_path=output_path,
        api_url=_first(environ, "GITHUB_API_URL") or GITHUB_API,
        debug=parse_bool(environ.get("INPUT_DEBUG_MODE")),
    )
