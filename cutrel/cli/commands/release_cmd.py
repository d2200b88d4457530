"""Release commands - version, commit, tag, push and publish; dev tags."""

from __future__ import annotations

from pathlib import Path

import typer

from cutrel.cli.commands._helpers import exit_on_error
from cutrel.cli.context import build_context
from cutrel.output.console import ConsoleProtocol, Style
from cutrel.services.release.dev_release import create_dev_release
from cutrel.services.release.pipeline import PipelineOutcome, ReleasePipeline

_GATE_NAMES = {
    "committing": "commit",
    "tagging": "tag",
    "pushing": "push",
    "publishing": "publish",
}


def report_outcome(outcome: PipelineOutcome, console: ConsoleProtocol) -> None:
    """Print how the run ended; "done" already printed its own summary."""
    match outcome.state:
        case "declined":
            gate = _GATE_NAMES.get(outcome.step, outcome.step)
            console.print(f"Stopped: declined to {gate}.", Style.DIM)
        case "failed":
            if outcome.error is not None:
                console.error(outcome.error.message)
                if outcome.error.hint:
                    console.print(outcome.error.hint, Style.DIM)
            if outcome.failed_package is not None:
                console.error(f"Something went wrong while releasing {outcome.failed_package}")
        case _:
            pass

    if outcome.state != "done" and outcome.records:
        console.header("Published before stopping:")
        for record in outcome.records:
            console.print(f"  {record.tag_name}: {record.url}")


def release(
    workspace: Path | None = typer.Option(
        None, "--workspace", help="Workspace root (defaults to the current directory)"
    ),
) -> None:
    """Apply pending changesets, then commit, tag, push and publish GitHub releases."""
    ctx = build_context(workspace)
    pipeline = ReleasePipeline(
        workspace_root=ctx.workspace_root,
        config=ctx.config,
        console=ctx.console,
        prompt=ctx.prompt,
        token=ctx.token,
    )
    outcome = pipeline.run()
    report_outcome(outcome, ctx.console)
    raise typer.Exit(code=int(outcome.exit_code))


def dev_release(
    package: str | None = typer.Option(
        None, "--package", "-p", help="Package to tag (optional in single-package repos)"
    ),
    workspace: Path | None = typer.Option(
        None, "--workspace", help="Workspace root (defaults to the current directory)"
    ),
) -> None:
    """Tag the current commit as <name>@<version>-dev.<sha> and push the tag."""
    ctx = build_context(workspace)
    result = create_dev_release(
        workspace_root=ctx.workspace_root,
        config=ctx.config,
        console=ctx.console,
        token=ctx.token,
        package_name=package,
    )
    exit_on_error(result, ctx)
