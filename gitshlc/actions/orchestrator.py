"""
Action orchestrator for pull, push and merge.

A run has two phases:

1. Preconditions (fail fast): validate the request, resolve the backend,
   detect the branch, probe HEAD, check cleanliness, then stash or
   synthesize commits. Any failure here returns at once with a specific
   error and the steps recorded so far.
2. Plan (run to the end): fetch, checkout, then the action tail. Every
   planned step runs even if an earlier one failed; success is the AND of
   the whole trace, computed once.

The same code serves both modes; only the backend differs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from gitshlc.actions import probes
from gitshlc.actions.errors import FailurePoint, classify
from gitshlc.actions.helpers import MODES, create_backend
from gitshlc.actions.types import (
    ACTION_MERGE,
    ACTION_PULL,
    ACTION_PUSH,
    RUN_ACTIONS,
    ActionOutcome,
    RunActionRequest,
)
from gitshlc.core import log
from gitshlc.core.result import ActionError, Result
from gitshlc.core.settings import Settings, get_settings
from gitshlc.git.backend import MODE_SSH, ExecutionBackend
from gitshlc.git.executor import Step

STASH_SAVED_MARKER = "Saved working directory"
HEAD_ONLY_DETAIL = "only the HEAD probe failed (repository had no commits before this run)"

BackendFactory = Callable[
    [RunActionRequest, Settings], Result[Tuple[ExecutionBackend, str]]
]


@dataclass(frozen=True)
class PlannedStep:
    """A named git invocation in the run-to-the-end phase."""

    name: str
    args: Tuple[str, ...]


@dataclass
class RunContext:
    """Per-run state. Discarded when the outcome is returned."""

    request: RunActionRequest
    backend: ExecutionBackend
    workdir: str
    steps: List[Step] = field(default_factory=list)
    current_branch: str = ""
    has_commits: bool = False
    clean: bool = True
    head_probe: Optional[Step] = None

    def git(self, *args) -> Step:
        step = self.backend.run(self.backend.git_program, list(args), self.workdir)
        self.steps.append(step)
        return step

    def fail(self, point: FailurePoint, detail: Optional[str] = None) -> ActionError:
        return classify(point, self.backend.mode, detail=detail)


def apply_stash_leniency(step: Step) -> Step:
    """
    Treat a stash as successful when it reports a saved snapshot.

    `git stash --include-untracked` can exit non-zero over permission
    warnings on some file attributes after it has already saved the working
    directory. Pulls and merges should not fail over that.

    Args:
        step: The stash step as executed

    Returns:
        Step: Same step, with ok forced True if the snapshot was saved
    """
    if not step.ok and STASH_SAVED_MARKER in step.stdout:
        return replace(step, ok=True)
    return step


def merge_ref_for(mode: str, source: str, remote: str) -> str:
    """
    Reference to merge for a source branch.

    Local mode merges the local branch name; ssh mode merges the
    remote-tracking ref. The two modes have always differed here.
    """
    # TODO: unify once product decides which ref merge should use in both modes
    if mode == MODE_SSH:
        return f"{remote}/{source}"
    return source


def build_plan(
    action: str,
    branch: str,
    mode: str,
    remote: str = "origin",
    merge_from: Optional[str] = None,
) -> List[PlannedStep]:
    """
    Ordered steps that always run to the end once preconditions pass.

    Args:
        action: pull, push or merge
        branch: Target branch
        mode: Execution mode (selects the merge reference form)
        remote: Remote name
        merge_from: Source branch (merge only)

    Returns:
        list[PlannedStep]
    """
    plan = [
        PlannedStep("fetch", ("fetch", remote)),
        PlannedStep("checkout", ("checkout", branch)),
    ]
    if action == ACTION_PULL:
        plan.append(PlannedStep("pull", ("pull", "--ff-only", remote, branch)))
    elif action == ACTION_PUSH:
        plan.append(PlannedStep("push", ("push", remote, branch)))
    elif action == ACTION_MERGE:
        plan.extend(
            [
                PlannedStep("fetch_source", ("fetch", remote, merge_from)),
                PlannedStep(
                    "merge",
                    ("merge", "--no-ff", merge_ref_for(mode, merge_from, remote)),
                ),
                PlannedStep("push", ("push", remote, branch)),
            ]
        )
    return plan


def _outcome(request, steps, error=None, ok=None) -> ActionOutcome:
    return ActionOutcome(
        ok=False if ok is None else ok,
        mode=request.mode,
        action=request.action,
        env_key=request.env_key,
        steps=list(steps),
        error=error,
    )


def _fail(request, steps, error: ActionError) -> ActionOutcome:
    log.error(f"{request.mode}/{request.action} [{request.env_key}] "
              f"{error.code}: {error.message}")
    return _outcome(request, steps, error=error)


def _commit_message(request) -> str:
    return (request.commit_message or "").strip()


def _check_request(request: RunActionRequest) -> Optional[ActionError]:
    if request.action not in RUN_ACTIONS:
        return classify(FailurePoint.UNKNOWN_ACTION, request.mode, detail=request.action)
    if request.mode not in MODES:
        return classify(FailurePoint.UNKNOWN_MODE, request.mode, detail=request.mode)
    return None


def _detect_state(ctx: RunContext) -> Optional[ActionError]:
    step, branch = probes.current_branch(ctx.backend, ctx.workdir)
    ctx.steps.append(step)
    if branch is None:
        return ctx.fail(FailurePoint.BRANCH_DETECT_FAILED, detail=step.stderr)
    ctx.current_branch = branch

    # missing HEAD just means "no commits yet"
    head = probes.head_exists(ctx.backend, ctx.workdir)
    ctx.steps.append(head)
    ctx.head_probe = head
    ctx.has_commits = head.ok

    step, clean = probes.status_clean(ctx.backend, ctx.workdir)
    ctx.steps.append(step)
    if clean is None:
        return ctx.fail(FailurePoint.STATUS_FAILED, detail=step.stderr)
    ctx.clean = clean
    return None


def _stash(ctx: RunContext) -> None:
    step = ctx.backend.run(
        ctx.backend.git_program, ["stash", "--include-untracked"], ctx.workdir
    )
    step = apply_stash_leniency(step)
    if step.ok:
        log.info(f"Stashed local changes in {ctx.workdir}")
    ctx.steps.append(step)


def _commit_dirty_tree(ctx: RunContext) -> Optional[ActionError]:
    target = ctx.request.branch
    if ctx.current_branch != target:
        return ctx.fail(
            FailurePoint.DIRTY_ON_OTHER_BRANCH,
            detail=f"current_branch={ctx.current_branch} target_branch={target}",
        )

    message = _commit_message(ctx.request)
    if not message:
        return ctx.fail(FailurePoint.COMMIT_MESSAGE_REQUIRED)

    step = ctx.git("add", "-A")
    if not step.ok:
        return ctx.fail(FailurePoint.STAGE_FAILED, detail=step.stderr)

    step = ctx.git("commit", "-m", message)
    if not step.ok:
        return ctx.fail(FailurePoint.COMMIT_FAILED, detail=step.stderr)

    ctx.has_commits = True
    return None


def _commit_empty(ctx: RunContext) -> Optional[ActionError]:
    message = _commit_message(ctx.request)
    if not message:
        return ctx.fail(FailurePoint.EMPTY_REPO_MESSAGE_REQUIRED)

    step = ctx.git("commit", "--allow-empty", "-m", message)
    if not step.ok:
        return ctx.fail(FailurePoint.EMPTY_COMMIT_FAILED, detail=step.stderr)

    ctx.has_commits = True
    return None


def _prepare(ctx: RunContext) -> Optional[ActionError]:
    error = _detect_state(ctx)
    if error:
        return error

    is_push = ctx.request.action == ACTION_PUSH

    if not is_push and not ctx.clean:
        _stash(ctx)

    if is_push and not ctx.clean:
        error = _commit_dirty_tree(ctx)
        if error:
            return error

    if is_push and not ctx.has_commits:
        error = _commit_empty(ctx)
        if error:
            return error

    return None


def run_action(
    request: RunActionRequest,
    settings: Optional[Settings] = None,
    backend_factory: Optional[BackendFactory] = None,
) -> ActionOutcome:
    """
    Run a pull, push or merge request to completion.

    Args:
        request: The request from the GUI layer
        settings: Settings (process-wide defaults if None)
        backend_factory: Builds (backend, workdir) for the request;
            defaults to resolving executables and validating paths

    Returns:
        ActionOutcome: ordered step trace plus optional error
    """
    settings = settings or get_settings()
    factory = backend_factory or create_backend
    log.info(f"run_action {request.mode}/{request.action} [{request.env_key}] "
             f"branch={request.branch}")

    error = _check_request(request)
    if error:
        return _fail(request, [], error)

    resolved = factory(request, settings)
    if not resolved.ok:
        return _fail(request, [], resolved.error)
    backend, workdir = resolved.value

    merge_from = (request.merge_from_branch or "").strip()
    if request.action == ACTION_MERGE and not merge_from:
        return _fail(
            request, [], classify(FailurePoint.MERGE_SOURCE_MISSING, backend.mode)
        )

    ctx = RunContext(
        request=request,
        backend=backend,
        workdir=workdir,
    )

    error = _prepare(ctx)
    if error:
        return _fail(request, ctx.steps, error)

    plan = build_plan(
        request.action,
        request.branch,
        backend.mode,
        remote=settings.remote_name,
        merge_from=merge_from or None,
    )
    for planned in plan:
        step = ctx.git(*planned.args)
        if not step.ok:
            log.warning(f"{planned.name} failed (exit {step.exit_code}), continuing")

    ok = all(step.ok for step in ctx.steps)
    if ok:
        log.info(f"{request.mode}/{request.action} [{request.env_key}] succeeded "
                 f"({len(ctx.steps)} steps)")
        return _outcome(request, ctx.steps, ok=True)

    failed = [step for step in ctx.steps if not step.ok]
    log.error(f"{request.mode}/{request.action} [{request.env_key}] failed at: {failed[0].cmd}")
    detail = None
    if len(failed) == 1 and failed[0] is ctx.head_probe:
        detail = HEAD_ONLY_DETAIL
    return _outcome(
        request,
        ctx.steps,
        error=classify(FailurePoint.COMMAND_FAILED, backend.mode, detail=detail),
    )
