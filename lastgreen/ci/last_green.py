# lastgreen/ci/last_green.py
from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional

import requests

from lastgreen.ci.actions_client import fetch_run_jobs, fetch_workflow_runs
from lastgreen.ci.ci_retry import attempt_or_skip
from lastgreen.ci.default_branch import resolve_default_branch_sha
from lastgreen.ci.errors import DefaultBranchError
from lastgreen.ci.job_matcher import evaluate
from lastgreen.ci.models import Criteria, Resolution, ResolutionSource, WorkflowRun
from lastgreen.github.github_client import GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)


def _fall_back(client: GitHubClient, criteria: Criteria, source: ResolutionSource) -> Resolution:
    try:
        sha = resolve_default_branch_sha(client, criteria.repository)
    except (DefaultBranchError, GitHubAPIError, requests.RequestException) as e:
        if not criteria.allow_branch_name_fallback:
            raise
        logger.warning(f"⚠️  Default branch SHA lookup failed: {e}")
        logger.warning(f"   Writing branch name '{criteria.default_branch_fallback}' instead of a SHA")
        return Resolution(sha=criteria.default_branch_fallback, source=ResolutionSource.BRANCH_NAME)

    logger.info(f"   Using default branch head: {sha}")
    return Resolution(sha=sha, source=source)


def resolve_last_green(
    criteria: Criteria,
    client: GitHubClient,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Resolution:
    """
    Find the newest run on criteria.branch that passed the configured gate.

    Flow:
      1) fetch one page of runs (retried)
      2) per run, fetch jobs (skipped on failure) and evaluate
      3) first qualifying run wins
      4) otherwise fall back to the repository's default branch head
    """
    logger.info(f"Looking for last successful {criteria.workflow_id} run on branch: {criteria.branch}")
    logger.info(
        f'Criteria: "{criteria.main_job_key}" must succeed AND all of '
        f"[{', '.join(criteria.required_job_keys)}] must succeed or be skipped"
    )

    try:
        runs: List[WorkflowRun] = fetch_workflow_runs(client, criteria, sleep=sleep)
    except (GitHubAPIError, requests.RequestException) as e:
        logger.warning(f"⚠️  Could not fetch workflow runs from GitHub API: {e}")
        logger.warning("   Falling back to default branch")
        return _fall_back(client, criteria, ResolutionSource.FETCH_ERROR)

    if not runs:
        logger.warning("⚠️  No workflow runs found in the API response. Falling back to default branch")
        return _fall_back(client, criteria, ResolutionSource.EMPTY_HISTORY)

    logger.info(f"Checking workflow runs... (found {len(runs)} runs)")

    resolved_sha: Optional[str] = None
    resolved_run_id: Optional[Any] = None

    for run in runs:
        if run.id is None:
            logger.debug(f"⚠️  Skipping run without '{criteria.run_id_field}' value")
            continue
        if not run.head_sha:
            logger.warning(f"⚠️  Skipping run {run.id} without head_sha")
            continue

        logger.debug(f"  🔍 Inspecting run {run.id} ({run.head_sha})")

        jobs = attempt_or_skip(
            lambda: fetch_run_jobs(client, criteria.repository, run.id),
            description=f"Fetching jobs for run {run.id}",
        )
        if jobs is None:
            logger.warning(f"    ⚠️  No jobs available for run {run.id}; skipping")
            continue

        verdict = evaluate(run, jobs, criteria)
        match = verdict.match
        logger.debug(
            f"    run status: {run.status}, conclusion: {run.conclusion}, "
            f"{criteria.main_job_key}: {match.main_job_status}, "
            f"required jobs: {len(match.matched_test_jobs)} found "
            f"[{', '.join(match.matched_test_job_names)}], status: {match.test_status}"
        )

        if verdict.qualifies:
            resolved_sha = run.head_sha
            resolved_run_id = run.id
            break

        logger.debug(f"    ❌ Does not meet criteria: {verdict.reason}")

    if resolved_sha is not None:
        logger.info(f"✅ Found qualifying run (ID: {resolved_run_id}) with SHA: {resolved_sha}")
        return Resolution(sha=resolved_sha, source=ResolutionSource.QUALIFYING_RUN, run_id=resolved_run_id)

    logger.info(f"❌ No runs found that meet success criteria on branch {criteria.branch}")
    logger.info("   Falling back to default branch")
    return _fall_back(client, criteria, ResolutionSource.NO_QUALIFYING_RUN)
