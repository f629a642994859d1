# lastgreen/github/github_client.py
from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from config import GITHUB_API, HTTP_TIMEOUT, USER_AGENT


class GitHubAPIError(RuntimeError):
    """Non-2xx (other than 404) or undecodable response from the GitHub API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": USER_AGENT,
    }


class GitHubClient:
    """
    Read-only GitHub REST client.

    get_json() contract:
      - 2xx  -> decoded JSON body
      - 404  -> None (callers treat it as an empty result)
      - else -> GitHubAPIError
    Transport failures surface as requests.RequestException.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = GITHUB_API,
        session: Optional[requests.Session] = None,
        timeout: int = HTTP_TIMEOUT,
    ):
        self.headers = _headers(token)
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def get_json(self, path: str, *, params: Optional[dict] = None) -> Optional[Any]:
        url = self.url(path)
        res = self.session.get(url, headers=self.headers, params=params, timeout=self.timeout)

        if res.status_code == 404:
            return None
        if not 200 <= res.status_code < 300:
            raise GitHubAPIError(
                f"GitHub API request failed ({res.status_code}): {res.text}",
                status_code=res.status_code,
            )

        try:
            return res.json()
        except ValueError as e:
            raise GitHubAPIError(f"Failed to parse JSON from {url}: {e}", status_code=res.status_code) from e

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
