# routes/resolve_routes.py
from typing import Optional

import requests
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from config import GITHUB_TOKEN, GITHUB_API
from lastgreen.ci.criteria import build_criteria
from lastgreen.ci.errors import ConfigError, DefaultBranchError
from lastgreen.ci.last_green import resolve_last_green
from lastgreen.github.github_client import GitHubAPIError, GitHubClient

router = APIRouter()


class ResolveRequest(BaseModel):
    repository: str
    branch: str
    workflow: str
    main_job: str
    required_jobs: str
    per_page: Optional[int] = None
    retry_attempts: Optional[int] = None
    default_branch: Optional[str] = None
    match_jobs_by: Optional[str] = None
    run_id_field: Optional[str] = None
    allow_branch_name_fallback: bool = False


class ResolveResponse(BaseModel):
    sha: str
    source: str
    run_id: Optional[str] = None


def get_token() -> Optional[str]:
    return GITHUB_TOKEN


def get_client(token: Optional[str] = Depends(get_token)) -> GitHubClient:
    return GitHubClient(token or "", api_url=GITHUB_API)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/last-green", response_model=ResolveResponse)
def last_green(
    request: ResolveRequest,
    token: Optional[str] = Depends(get_token),
    client: GitHubClient = Depends(get_client),
):
    try:
        criteria = build_criteria(
            repository=request.repository,
            branch=request.branch,
            workflow_id=request.workflow,
            main_job_key=request.main_job,
            required_job_keys=request.required_jobs,
            auth_token=token,
            page_size=request.per_page,
            retry_attempts=request.retry_attempts,
            default_branch_fallback=request.default_branch,
            match_by=request.match_jobs_by,
            run_id_field=request.run_id_field,
            allow_branch_name_fallback=request.allow_branch_name_fallback,
        )
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        resolution = resolve_last_green(criteria, client)
    except (DefaultBranchError, GitHubAPIError, requests.RequestException) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ResolveResponse(
        sha=resolution.sha,
        source=resolution.source.value,
        run_id=None if resolution.run_id is None else str(resolution.run_id),
    )
