from urllib.parse import urlparse

import pytest

from lastgreen.ci.criteria import build_criteria
from lastgreen.github.github_client import GitHubClient

REPO = "acme/widgets"
RUNS_PATH = f"/repos/{REPO}/actions/workflows/ci.yml/runs"
REPO_PATH = f"/repos/{REPO}"


def jobs_path(run_id):
    return f"/repos/{REPO}/actions/runs/{run_id}/jobs"


def branch_path(name):
    return f"/repos/{REPO}/branches/{name}"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json
        self.text = text if text is not None else str(payload)

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session keyed by URL path.

    A route value is a payload (200), a FakeResponse, an exception to raise,
    or a list of those consumed in order (the last one repeats).
    Unknown paths answer 404.
    """

    def __init__(self, routes=None):
        self.routes = {}
        for path, value in (routes or {}).items():
            self.routes[path] = list(value) if isinstance(value, list) else [value]
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def get(self, url, headers=None, params=None, timeout=None):
        path = urlparse(url).path
        self.calls.append({"path": path, "params": params, "headers": headers, "timeout": timeout})

        queue = self.routes.get(path)
        if not queue:
            return FakeResponse(404, {"message": "Not Found"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(item, BaseException):
            raise item
        if isinstance(item, FakeResponse):
            return item
        return FakeResponse(200, item)

    def paths(self):
        return [c["path"] for c in self.calls]


@pytest.fixture
def fake_github():
    def _make(routes=None):
        session = FakeSession(routes)
        client = GitHubClient("t0ken", api_url="https://api.github.com", session=session)
        return client, session

    return _make


@pytest.fixture
def make_criteria():
    def _make(**overrides):
        values = dict(
            repository=REPO,
            branch="feature",
            workflow_id="ci.yml",
            main_job_key="test-setup",
            required_job_keys="node-tests",
            auth_token="t0ken",
        )
        values.update(overrides)
        return build_criteria(**values)

    return _make


@pytest.fixture
def no_sleep():
    delays = []

    def _sleep(seconds):
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep
