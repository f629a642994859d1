# lastgreen/main.py
"""
GitHub Action entry point.

Usage (inside a workflow step, inputs come from INPUT_* env vars):

  python -m lastgreen.main

Writes `last_success_sha=<sha>` to $GITHUB_OUTPUT. Exit code 0 on any
resolution (including default-branch fallbacks), 1 on a fatal error.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Callable, Mapping, Optional

import requests

from config import OUTPUT_KEY
from lastgreen.ci.criteria import inputs_from_env
from lastgreen.ci.errors import LastGreenError
from lastgreen.ci.last_green import resolve_last_green
from lastgreen.ci.models import Resolution
from lastgreen.ci.output_sink import append_output, check_output_sink
from lastgreen.github.github_client import GitHubAPIError, GitHubClient
from lastgreen.log import setup_logging

logger = logging.getLogger(__name__)


def run(
    environ: Optional[Mapping[str, str]] = None,
    *,
    client: Optional[GitHubClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Resolution:
    inputs = inputs_from_env(os.environ if environ is None else environ)
    setup_logging(inputs.debug)

    if inputs.debug:
        c = inputs.criteria
        logger.debug(f"🔧 Inputs -> workflow: {c.workflow_id}, branch: {c.branch}, repository: {c.repository}")
        logger.debug(
            f"   main job: {c.main_job_key}, required jobs: {list(c.required_job_keys)}, "
            f"match by: {c.match_by.value}, run id field: {c.run_id_field}"
        )

    check_output_sink(inputs.output_path)

    if client is None:
        with GitHubClient(inputs.criteria.auth_token, api_url=inputs.api_url) as owned:
            resolution = resolve_last_green(inputs.criteria, owned, sleep=sleep)
    else:
        resolution = resolve_last_green(inputs.criteria, client, sleep=sleep)

    append_output(inputs.output_path, OUTPUT_KEY, resolution.sha)
    logger.info(f"   Will compare changes against {resolution.sha} ({resolution.source.value})")
    return resolution


def main() -> int:
    try:
        run()
    except (LastGreenError, GitHubAPIError, requests.RequestException) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
