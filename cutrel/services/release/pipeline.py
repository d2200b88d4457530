"""Confirmation-gated release pipeline.

    preflight -> versioning -> committing -> tagging -> pushing -> publishing -> done

Each step runs only after the previous one succeeded. Commit, tag, push and
publish are each preceded by a yes/no gate. A "no" stops the run cleanly; a
failed tool stops it with the tool's error text. Nothing is retried: re-run
the command once the cause is fixed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

from cutrel.core.config import Config
from cutrel.core.errors import ErrorCode
from cutrel.core.result import Err, Ok, Result
from cutrel.git.remote import RepositoryIdentity
from cutrel.git.repository import GitError, Repository
from cutrel.output.console import ConsoleProtocol, Style
from cutrel.output.prompt import PromptProtocol
from cutrel.services.release.changesets import (
    changeset_status,
    changeset_tag,
    changeset_version,
    count_pending_changesets,
)
from cutrel.services.release.errors import ReleaseError
from cutrel.services.release.fsm import (
    StepOutcome,
    advance,
    finish,
    run_state_machine,
)
from cutrel.services.release.gh import create_release, ensure_gh_available
from cutrel.services.release.identity import resolve_repository
from cutrel.services.release.model import ReleaseRecord, TaggedPackageRef
from cutrel.services.release.payload import (
    ChangelogReader,
    build_release_request,
    read_changelog_file,
)
from cutrel.services.release.tags import determine_packages_to_release
from cutrel.services.release.workspace import list_packages

PipelineStep = Literal[
    "preflight",
    "versioning",
    "committing",
    "tagging",
    "pushing",
    "publishing",
    "done",
]
OutcomeState = Literal["done", "aborted_dirty", "aborted_no_changes", "declined", "failed"]


@dataclass(frozen=True, slots=True)
class ReleaseSession:
    step: PipelineStep
    identity: RepositoryIdentity | None = None
    refs: tuple[TaggedPackageRef, ...] = ()
    records: tuple[ReleaseRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class PipelineOutcome:
    """How a run ended.

    Attributes:
        state: Terminal state reached
        step: Step the run stopped at ("done" on success)
        records: Releases published before the run stopped
        error: Cause, for "failed"
        failed_package: Package being published when publishing failed
    """

    state: OutcomeState
    step: PipelineStep
    records: tuple[ReleaseRecord, ...] = ()
    error: ReleaseError | None = None
    failed_package: str | None = None

    @property
    def exit_code(self) -> ErrorCode:
        if self.state == "done":
            return ErrorCode.OK
        if self.state == "declined" and self.step != "publishing":
            return ErrorCode.OK
        return ErrorCode.FAILURE


type Step = Result[StepOutcome[ReleaseSession, PipelineOutcome], ReleaseError]


def _git_failed(what: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=f"{what} failed", hint=error.message)


class ReleasePipeline:
    """One release run against a workspace.

    Collaborators that talk to the terminal (console, prompt) are injected;
    the credential is passed in already read from the environment (None when
    absent).
    """

    def __init__(
        self,
        *,
        workspace_root: Path,
        config: Config,
        console: ConsoleProtocol,
        prompt: PromptProtocol,
        token: str | None,
        repo: Repository | None = None,
        read_changelog: ChangelogReader = read_changelog_file,
    ) -> None:
        self.workspace_root = workspace_root
        self.config = config
        self.console = console
        self.prompt = prompt
        self.token = token
        self.repo = repo or Repository(workspace_root)
        self.read_changelog = read_changelog

    def run(self) -> PipelineOutcome:
        return run_state_machine(
            initial_state=ReleaseSession(step="preflight"),
            get_step=lambda s: s.step,
            handlers={
                "preflight": self._preflight,
                "versioning": self._versioning,
                "committing": self._committing,
                "tagging": self._tagging,
                "pushing": self._pushing,
                "publishing": self._publishing,
                "done": self._done,
            },
            on_error=self._failed,
        )

    # ------------------------------------------------------------------
    # steps
    # ------------------------------------------------------------------

    def _preflight(self, s: ReleaseSession) -> Step:
        if not self.token:
            return Err(
                ReleaseError(
                    kind="missing_credential",
                    message=f"Please provide the {self.config.token_env} environment variable",
                )
            )

        gh = ensure_gh_available()
        if isinstance(gh, Err):
            return gh

        dirty = self.repo.has_uncommitted_changes()
        if isinstance(dirty, Err):
            return Err(_git_failed("git diff", dirty.error))
        if dirty.value:
            self.console.error(
                "You have outstanding changes in your working directory. "
                "Please commit or stash them first before proceeding."
            )
            return Ok(finish(PipelineOutcome(state="aborted_dirty", step="preflight")))

        pending = count_pending_changesets(workspace_root=self.workspace_root)
        if isinstance(pending, Err):
            return pending
        if pending.value == 0:
            self.console.error("No changesets found...")
            return Ok(finish(PipelineOutcome(state="aborted_no_changes", step="preflight")))

        identity = resolve_repository(self.repo, default_remote=self.config.default_remote)
        if isinstance(identity, Err):
            return identity

        target = identity.value
        self.console.print(f"release target: {target.host}/{target.repository}", Style.DIM)
        return Ok(advance(replace(s, step="versioning", identity=target)))

    def _versioning(self, s: ReleaseSession) -> Step:
        self.console.header("Preparing to version packages...")
        command = self.config.changeset_command

        status = changeset_status(workspace_root=self.workspace_root, command=command)
        if isinstance(status, Err):
            return status
        self._echo(status.value)

        versioned = changeset_version(workspace_root=self.workspace_root, command=command)
        if isinstance(versioned, Err):
            return versioned
        self._echo(versioned.value)

        return Ok(advance(replace(s, step="committing")))

    def _committing(self, s: ReleaseSession) -> Step:
        if not self.prompt.confirm("Commit?", default=self.config.gates.commit):
            return Ok(finish(self._declined(s)))

        staged = self.repo.stage_all()
        if isinstance(staged, Err):
            return Err(_git_failed("git add", staged.error))

        committed = self.repo.commit(self.config.commit_message)
        if isinstance(committed, Err):
            return Err(_git_failed("git commit", committed.error))
        self.console.success(f"committed: {self.config.commit_message}")

        return Ok(advance(replace(s, step="tagging")))

    def _tagging(self, s: ReleaseSession) -> Step:
        if not self.prompt.confirm("Create tags?", default=self.config.gates.tag):
            return Ok(finish(self._declined(s)))

        tagged = changeset_tag(
            workspace_root=self.workspace_root, command=self.config.changeset_command
        )
        if isinstance(tagged, Err):
            return tagged
        self._echo(tagged.value)

        registry = list_packages(
            workspace_root=self.workspace_root, command=self.config.workspace_list_command
        )
        if isinstance(registry, Err):
            return registry

        refs = determine_packages_to_release(tagged.value, registry.value)
        if isinstance(refs, Err):
            return refs

        return Ok(advance(replace(s, step="pushing", refs=tuple(refs.value))))

    def _pushing(self, s: ReleaseSession) -> Step:
        if not self.prompt.confirm("Push to git forge?", default=self.config.gates.push):
            return Ok(finish(self._declined(s)))

        pushed = self.repo.push_follow_tags()
        if isinstance(pushed, Err):
            return Err(_git_failed("git push", pushed.error))
        self._echo(pushed.value)

        return Ok(advance(replace(s, step="publishing")))

    def _publishing(self, s: ReleaseSession) -> Step:
        # changeset tag only reports tags it created, so a re-run on an
        # already tagged commit lands here with nothing to publish.
        if not s.refs:
            self.console.info("No new tags were created: nothing to publish")
            return Ok(advance(replace(s, step="done")))

        if not self.prompt.confirm("Release to GitHub?", default=self.config.gates.publish):
            return Ok(finish(self._declined(s)))

        identity = s.identity
        if identity is None or not self.token:
            return Err(ReleaseError(kind="invalid_input", message="publishing without preflight"))

        records: list[ReleaseRecord] = []
        for ref in s.refs:
            published = self._publish_one(ref, identity=identity, token=self.token)
            if isinstance(published, Err):
                return Ok(
                    finish(
                        PipelineOutcome(
                            state="failed",
                            step="publishing",
                            records=tuple(records),
                            error=published.error,
                            failed_package=ref.package.name,
                        )
                    )
                )
            if published.value is not None:
                records.append(published.value)

        return Ok(advance(replace(s, step="done", records=tuple(records))))

    def _done(self, s: ReleaseSession) -> Step:
        if s.records:
            self.console.header("Github releases:")
            for record in s.records:
                self.console.print(f"  {record.url}")
        self.console.success("Release successful!")
        return Ok(finish(PipelineOutcome(state="done", step="done", records=s.records)))

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _publish_one(
        self, ref: TaggedPackageRef, *, identity: RepositoryIdentity, token: str
    ) -> Result[ReleaseRecord | None, ReleaseError]:
        request = build_release_request(
            package=ref.package,
            tag_name=ref.tag_name,
            identity=identity,
            read_changelog=self.read_changelog,
            changelog_filename=self.config.changelog_filename,
        )
        if isinstance(request, Err):
            return request
        if request.value is None:
            self.console.print(
                f"{ref.package.name}: no {self.config.changelog_filename}, not published",
                Style.DIM,
            )
            return Ok(None)

        published = create_release(
            workspace_root=self.workspace_root,
            request=request.value,
            host=identity.host,
            token=token,
        )
        if isinstance(published, Err):
            return published

        self.console.success(f"released {ref.tag_name}")
        record = ReleaseRecord(package=ref.package, tag_name=ref.tag_name, url=published.value.url)
        return Ok(record)

    def _echo(self, output: str) -> None:
        text = output.strip()
        if text:
            self.console.print(text, Style.DIM)

    def _declined(self, s: ReleaseSession) -> PipelineOutcome:
        return PipelineOutcome(state="declined", step=s.step, records=s.records)

    def _failed(self, s: ReleaseSession, error: ReleaseError) -> PipelineOutcome:
        return PipelineOutcome(state="failed", step=s.step, records=s.records, error=error)
