from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from cutrel.core.config import Config, load_workspace_config
from cutrel.core.errors import ErrorCode
from cutrel.core.result import Err
from cutrel.output.console import ConsoleProtocol, RichConsole
from cutrel.output.prompt import PromptProtocol, TyperPrompt


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace_root: Path
    config: Config
    console: ConsoleProtocol
    prompt: PromptProtocol

    @property
    def token(self) -> str | None:
        return os.environ.get(self.config.token_env) or None


def build_context(workspace: Path | None = None) -> CLIContext:
    root = (workspace or Path.cwd()).expanduser().resolve()
    if not root.is_dir():
        typer.echo(f"error: workspace '{root}' is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    config_result = load_workspace_config(root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        workspace_root=root,
        config=config_result.value,
        console=RichConsole(),
        prompt=TyperPrompt(),
    )
