# lastgreen/ci/job_matcher.py
"""
Pure qualification logic: no I/O, no logging.

A run qualifies when:
  - run.status == "completed"
  - run.conclusion not in {cancelled, timed_out, stale}
  - the main job concluded "success"
  - every required job concluded "success" or "skipped"
    (and at least one required job exists)

Required jobs are matched by equality OR prefix, so a key "test" admits
matrix jobs like "test (dir1)". It also admits unrelated names such as
"testimonial-checker"; callers should pick keys accordingly.
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from lastgreen.ci.models import Criteria, Job, MatchMode, MatchResult, Qualification, WorkflowRun

MISSING = "missing"
PASSING_TEST_CONCLUSIONS = {"success", "skipped"}
DISQUALIFYING_RUN_CONCLUSIONS = {"cancelled", "timed_out", "stale"}

JobKeys = Callable[[Job], Tuple[str, ...]]


def _name_keys(job: Job) -> Tuple[str, ...]:
    return (job.name.lower(),)


def _id_or_name_keys(job: Job) -> Tuple[str, ...]:
    if job.id is None or job.id == "":
        return (job.name.lower(),)
    return (str(job.id).lower(), job.name.lower())


JOB_KEY_STRATEGIES: Dict[MatchMode, JobKeys] = {
    MatchMode.NAME: _name_keys,
    MatchMode.ID_OR_NAME: _id_or_name_keys,
}


def job_keys_for(mode: MatchMode) -> JobKeys:
    return JOB_KEY_STRATEGIES[MatchMode(mode)]


def _is_main_job(keys: Iterable[str], main_key: str) -> bool:
    return any(k == main_key for k in keys)


def _is_required_job(keys: Iterable[str], required: Sequence[str]) -> bool:
    return any(k == r or k.startswith(r) for k in keys for r in required)


def match_jobs(jobs: Sequence[Job], criteria: Criteria) -> MatchResult:
    keys_of = job_keys_for(criteria.match_by)
    main_key = criteria.main_job_key.lower()
    required = [r.lower() for r in criteria.required_job_keys]

    main_job: Optional[Job] = None
    matched: List[Job] = []

    for job in jobs:
        keys = keys_of(job)
        if _is_main_job(keys, main_key):
            if main_job is None:
                main_job = job
            # never counted as a required job
            continue
        if _is_required_job(keys, required):
            matched.append(job)

    main_status = main_job.conclusion if main_job is not None else MISSING

    test_status = MISSING
    if matched:
        test_status = "success"
        for job in matched:
            if job.conclusion not in PASSING_TEST_CONCLUSIONS:
                test_status = "failure"
                break

    return MatchResult(
        main_job_status=main_status,
        test_status=test_status,
        matched_test_jobs=tuple(matched),
    )


def qualify_run(run: WorkflowRun, match: MatchResult) -> Qualification:
    """Check the run-level gate; `reason` names the first failed sub-check."""
    if run.status != "completed":
        reason = f"run status is {run.status!r}, not 'completed'"
    elif str(run.conclusion) in DISQUALIFYING_RUN_CONCLUSIONS:
        reason = f"run conclusion is {run.conclusion!r}"
    elif match.main_job_status != "success":
        reason = f"main job status is {match.main_job_status!r}"
    elif match.test_status not in PASSING_TEST_CONCLUSIONS:
        reason = f"required jobs status is {match.test_status!r}"
    else:
        return Qualification(qualifies=True, reason="meets success criteria", match=match)

    return Qualification(qualifies=False, reason=reason, match=match)


def evaluate(run: WorkflowRun, jobs: Sequence[Job], criteria: Criteria) -> Qualification:
    return qualify_run(run, match_jobs(jobs, criteria))
