# lastgreen/ci/actions_client.py
from __future__ import annotations

import time
from typing import Any, Callable, List, Optional
from urllib.parse import quote

from lastgreen.ci.ci_retry import call_with_retry
from lastgreen.ci.models import Criteria, Job, WorkflowRun
from lastgreen.github.github_client import GitHubClient


def extract_field(obj: Any, path: Optional[str]) -> Optional[Any]:
    """
    Read a dotted field path ("id", "meta.run_id") from nested dicts.
    Missing keys, non-dict hops and an empty path all yield None.
    """
    if not path:
        return None
    current = obj
    for key in str(path).split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def _run_from_api(raw: dict, run_id_field: str) -> WorkflowRun:
    run_id = extract_field(raw, run_id_field)
    # only scalar ids can go into a URL
    if isinstance(run_id, bool) or not isinstance(run_id, (str, int)) or run_id == "":
        run_id = None
    head_sha = raw.get("head_sha")
    return WorkflowRun(
        id=run_id,
        head_sha=head_sha if isinstance(head_sha, str) else "",
        status=raw.get("status"),
        conclusion=raw.get("conclusion"),
        raw=raw,
    )


def _job_from_api(raw: dict) -> Job:
    return Job(
        id=raw.get("id"),
        name=str(raw.get("name") or ""),
        conclusion=raw.get("conclusion"),
    )


def workflow_runs_path(criteria: Criteria) -> str:
    workflow = quote(str(criteria.workflow_id), safe="")
    return f"/repos/{criteria.repository}/actions/workflows/{workflow}/runs"


def fetch_workflow_runs(
    client: GitHubClient,
    criteria: Criteria,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> List[WorkflowRun]:
    """
    One page of runs for criteria.branch, newest first (API order kept).

    Retries up to criteria.retry_attempts; the last error is re-raised.
    404 or a body without workflow_runs is an empty history.
    """
    path = workflow_runs_path(criteria)
    params = {"per_page": criteria.page_size, "branch": criteria.branch}

    data = call_with_retry(
        lambda: client.get_json(path, params=params),
        attempts=criteria.retry_attempts,
        description="fetching workflow runs",
        sleep=sleep,
    )

    runs = data.get("workflow_runs") if isinstance(data, dict) else None
    if not isinstance(runs, list):
        return []
    return [_run_from_api(r, criteria.run_id_field) for r in runs if isinstance(r, dict)]


def fetch_run_jobs(client: GitHubClient, repository: str, run_id: Any) -> Optional[List[Job]]:
    """
    Jobs for one run. No retry.
    Returns None when the API has no job list for the run (404 / missing key).
    """
    data = client.get_json(f"/repos/{repository}/actions/runs/{run_id}/jobs")
    jobs = data.get("jobs") if isinstance(data, dict) else None
    if not isinstance(jobs, list):
        return None
    return [_job_from_api(j) for j in jobs if isinstance(j, dict)]
