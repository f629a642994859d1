from __future__ import annotations

import os

from lastgreen.ci.errors import OutputSinkError


def check_output_sink(path: str) -> None:
    """Fail before any network work if `path` cannot be appended to."""
    if not path:
        raise OutputSinkError("GITHUB_OUTPUT is not set. Unable to write outputs.")

    parent = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(parent):
        raise OutputSinkError(f"Output directory does not exist: {parent}")
    if os.path.isdir(path):
        raise OutputSinkError(f"Output path is a directory: {path}")
    if os.path.exists(path):
        if not os.access(path, os.W_OK):
            raise OutputSinkError(f"Output file is not writable: {path}")
    elif not os.access(parent, os.W_OK):
        raise OutputSinkError(f"Output directory is not writable: {parent}")


def append_output(path: str, key: str, value: str) -> None:
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{key}={value}\n")
    except OSError as e:
        raise OutputSinkError(f"Failed to write output to {path}: {e}") from e
