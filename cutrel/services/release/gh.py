from __future__ import annotations

import json
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from cutrel.core.result import Err, Ok, Result
from cutrel.core.structured import as_str_dict, get_str
from cutrel.platform.process import run as run_process
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.model import ReleaseRequest

GITHUB_HOST = "github.com"


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    url: str


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="publish_failed",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def _gh_env(*, token: str, host: str) -> dict[str, str]:
    env = dict(os.environ)
    env["GH_TOKEN"] = token
    if host != GITHUB_HOST:
        env["GH_ENTERPRISE_TOKEN"] = token
    return env


def create_release(
    *,
    workspace_root: Path,
    request: ReleaseRequest,
    host: str,
    token: str,
) -> Result[PublishedRelease, ReleaseError]:
    """Create a release on the forge; returns the release's web URL.

    Not retried: a failed create may still have gone through, and the
    operator is the one to decide whether to re-run.
    """
    endpoint = f"repos/{request.owner}/{request.repo}/releases"
    cmd = ["gh", "api"]
    if host != GITHUB_HOST:
        cmd.extend(["--hostname", host])
    cmd.extend(
        [
            "--method",
            "POST",
            endpoint,
            "-f",
            f"tag_name={request.tag_name}",
            "-f",
            f"name={request.title}",
            "-f",
            f"body={request.body}",
            "-F",
            f"prerelease={'true' if request.prerelease else 'false'}",
        ]
    )

    result = run_process(cmd, cwd=workspace_root, env=_gh_env(token=token, host=host))
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="publish_failed",
                message=f"failed to create release {request.tag_name}",
                hint=e.stderr.strip() or None,
            )
        )

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="publish_failed",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )

    data = as_str_dict(obj)
    url = None if data is None else (get_str(data, "html_url") or get_str(data, "url"))
    if url is None:
        return Err(
            ReleaseError(
                kind="publish_failed",
                message=f"unexpected release payload for {request.tag_name}",
                hint=endpoint,
            )
        )
    return Ok(PublishedRelease(url=url))
