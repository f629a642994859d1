# lastgreen/ci/default_branch.py
from __future__ import annotations

import logging
from urllib.parse import quote

from lastgreen.ci.errors import DefaultBranchError
from lastgreen.github.github_client import GitHubClient

logger = logging.getLogger(__name__)


def get_default_branch(client: GitHubClient, repository: str) -> str:
    data = client.get_json(f"/repos/{repository}")
    branch = data.get("default_branch") if isinstance(data, dict) else None
    if not branch:
        raise DefaultBranchError(f"Could not determine default branch for repository {repository}.")
    return branch


def resolve_default_branch_sha(client: GitHubClient, repository: str) -> str:
    """
    repository -> default branch name -> branch head commit SHA.
    Two GETs, no retry: there is nothing left to fall back to.
    """
    branch = get_default_branch(client, repository)
    logger.debug(f"🔍 Default branch for {repository}: {branch}")

    data = client.get_json(f"/repos/{repository}/branches/{quote(branch, safe='')}")
    commit = data.get("commit") if isinstance(data, dict) else None
    sha = commit.get("sha") if isinstance(commit, dict) else None
    if not sha:
        raise DefaultBranchError(f"Could not resolve default branch SHA for {branch}.")
    return sha
