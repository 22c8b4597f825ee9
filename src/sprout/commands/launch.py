"""Implementation for the ``sprout launch`` command."""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .. import config, hooks, log, paths, prompting, scripts, sources
from ..detection import (
    RawTextRef,
    WorkItemReference,
    classify,
    describe,
    reference_from_flags,
)
from ..errors import ConfigurationError, HookError, SproutError
from ..io import die, say
from ..models import DetectionSection, SproutConfig
from ..text import interpolate, truncate
from ..variables import build_variables
from ..worktrees import ensure_worktree


@dataclass(frozen=True)
class LaunchOptions:
    branch: str | None = None
    dry_run: bool = False


def split_batch(text: str | None) -> list[str]:
    """Split comma-separated input into trimmed, non-empty items.

    Example:
        >>> split_batch("IOS-1, #2 ,, fix the build")
        ['IOS-1', '#2', 'fix the build']
    """
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def plan_items(
    text: str | None, detection: DetectionSection
) -> list[tuple[str, WorkItemReference]]:
    """Classify the input, splitting on commas only for a list of references.

    Free-form prompts may contain commas, so the input is treated as a batch
    only when every comma-separated part is a ticket, issue, or PR.

    Example:
        >>> from sprout.models import DetectionSection
        >>> [label for label, _ in plan_items("IOS-1, #2", DetectionSection())]
        ['IOS-1', '#2']
        >>> len(plan_items("fix login, then logout", DetectionSection()))
        1
    """
    parts = split_batch(text)
    if not parts:
        return []
    planned = [(part, classify(part, detection)) for part in parts]
    if len(planned) > 1 and any(isinstance(ref, RawTextRef) for _, ref in planned):
        whole = (text or "").strip()
        return [(whole, classify(whole, detection))]
    return planned


def select_script(cfg: SproutConfig, *, is_pr: bool) -> str:
    if is_pr and cfg.launch.pr_script:
        return cfg.launch.pr_script
    return cfg.launch.script


def _log_variables(variables: Mapping[str, str]) -> None:
    if not log.is_enabled(log.LogLevel.DEBUG):
        return
    log.debug("Variables:")
    for key in sorted(variables):
        log.debug(f"  {key}: {truncate(variables[key])}")


def launch_item(
    reference: WorkItemReference,
    cfg: SproutConfig,
    *,
    cwd: Path,
    options: LaunchOptions,
    env: Mapping[str, str],
) -> None:
    """Run the full pipeline for one work item.

    Raises:
        SproutError: On any failure; ``exit_code`` says which kind.
        OSError: On other filesystem failures.
    """
    log.debug(f"Detected source: {describe(reference)}")
    context = sources.fetch_context(reference, cfg, repo_dir=cwd, env=env)
    log.debug(f"Fetched context: {context.title or 'raw prompt'}")

    variables = build_variables(context, cfg, cwd=cwd, branch_override=options.branch)
    _log_variables(variables)

    repo_root = Path(variables["repo_root"])
    result = ensure_worktree(
        repo_root,
        Path(variables["worktree"]),
        variables["branch"],
        has_source_branch=context.source_branch is not None,
        dry_run=options.dry_run,
    )
    variables["worktree_created"] = "true" if result.created else "false"

    prompt = prompting.compose_prompt(cfg.prompt, variables)
    if options.dry_run:
        prompt_file = prompting.prompt_file_path(variables["branch"])
        say(f"Would write prompt to {prompt_file}:")
        say("---")
        say(prompt)
        say("---")
    else:
        try:
            prompt_file = prompting.write_prompt_file(prompt, variables["branch"])
        except OSError as exc:
            raise SproutError(f"cannot write prompt file: {exc}") from exc
        log.debug(f"Wrote prompt to: {prompt_file}")

    template = select_script(cfg, is_pr=context.source_branch is not None)
    script = interpolate(template, {**variables, "prompt_file": str(prompt_file)})
    if options.dry_run:
        say("Would execute:")
        say("---")
        say(script)
        say("---")
        return

    scripts.run_script(script, cwd=cwd, env=env)

    main_root = hooks.find_main_repo_root(repo_root) or repo_root
    hook_env = hooks.hook_environment(
        worktree_path=result.path,
        branch=result.branch,
        repo_root=main_root,
        base=env,
    )
    try:
        hooks.run_hook(hooks.POST_LAUNCH, main_root, hook_env)
    except HookError as exc:
        log.warning(str(exc))


def _run_item(
    reference: WorkItemReference,
    cfg: SproutConfig,
    *,
    cwd: Path,
    options: LaunchOptions,
    env: Mapping[str, str],
) -> tuple[int, str | None]:
    try:
        launch_item(reference, cfg, cwd=cwd, options=options, env=env)
    except SproutError as exc:
        return exc.exit_code or 1, str(exc)
    except OSError as exc:
        return 1, f"filesystem error: {exc}"
    return 0, None


def launch_batch(
    items: list[tuple[str, WorkItemReference]],
    cfg: SproutConfig,
    *,
    cwd: Path,
    options: LaunchOptions,
    env: Mapping[str, str],
) -> int:
    """Launch each item in turn; one failure does not stop the rest.

    Returns:
        The exit code of the first failed item, or ``0``.
    """
    first_failure = 0
    for index, (label, reference) in enumerate(items):
        if index and not options.dry_run and cfg.launch.batch_delay:
            time.sleep(cfg.launch.batch_delay)
        log.info(f"[{index + 1}/{len(items)}] {label}")
        code, message = _run_item(reference, cfg, cwd=cwd, options=options, env=env)
        if code:
            log.error(f"{label}: {message}")
            first_failure = first_failure or code
    return first_failure


def launch(args: object) -> None:
    """Launch one or more work items.

    Args:
        args: CLI argument object with ``input``, ``jira``, ``github``,
            ``pr``, ``prompt``, ``branch``, ``config``, ``dry_run`` and
            ``verbose`` attributes.

    Example:
        $ sprout launch IOS-1234
        $ sprout "IOS-1, IOS-2, #42"
    """
    if getattr(args, "verbose", False):
        log.set_level("debug")

    config_path = paths.resolve_config_path(getattr(args, "config", None))
    try:
        cfg = config.load_config(config_path)
    except ConfigurationError as exc:
        die(str(exc), exc.exit_code)
    log.debug(f"Loaded config from: {config_path}")

    try:
        explicit = reference_from_flags(
            jira=getattr(args, "jira", None),
            github=getattr(args, "github", None),
            pr=getattr(args, "pr", None),
            prompt=getattr(args, "prompt", None),
        )
    except ValueError as exc:
        die(str(exc))

    options = LaunchOptions(
        branch=getattr(args, "branch", None),
        dry_run=bool(getattr(args, "dry_run", False)),
    )
    cwd = Path.cwd()
    env = dict(os.environ)

    if explicit is not None:
        items = [(describe(explicit), explicit)]
    else:
        items = plan_items(getattr(args, "input", None), cfg.detection)
    if not items:
        die("no input provided; pass a ticket, issue, URL, or prompt")

    if len(items) == 1:
        code, message = _run_item(items[0][1], cfg, cwd=cwd, options=options, env=env)
        if code:
            die(message or "launch failed", code)
        return

    if options.branch:
        die("--branch cannot be combined with batch input")
    code = launch_batch(items, cfg, cwd=cwd, options=options, env=env)
    if code:
        sys.exit(code)
