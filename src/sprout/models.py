"""Pydantic models for Sprout configuration data."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PATH_TEMPLATE = "../worktrees/{branch}"
DEFAULT_BRANCH_TEMPLATE = "{ticket_id}"
DEFAULT_PROMPT_TEMPLATE = "# {title}\n\n{description}"
DEFAULT_JIRA_PATTERN = r"[A-Z]+-[0-9]+"
DEFAULT_GITHUB_PATTERNS = (r"#[0-9]+", r"gh:[0-9]+")
DEFAULT_JIRA_FIELDS = ("summary", "description")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LaunchSection(BaseModel):
    """How to hand off to the user's tool.

    Attributes:
        script: Shell command, interpolated with the variable map.
        pr_script: Alternate command used for pull-request contexts.
        batch_delay: Seconds to pause between batch items.

    Example:
        >>> LaunchSection(script="code {worktree}").batch_delay
        1.0
    """

    model_config = ConfigDict(extra="allow")

    script: str
    pr_script: str | None = None
    batch_delay: float = Field(default=1.0, ge=0)

    @field_validator("script")
    @classmethod
    def require_script(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("launch.script must not be empty")
        return value

    @field_validator("pr_script", mode="before")
    @classmethod
    def normalize_pr_script(cls, value: object) -> object:
        return _blank_to_none(value)


class WorktreeSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    path_template: str = DEFAULT_PATH_TEMPLATE
    branch_template: str = DEFAULT_BRANCH_TEMPLATE

    @field_validator("path_template", mode="before")
    @classmethod
    def default_path_when_blank(cls, value: object) -> object:
        return _blank_to_none(value) or DEFAULT_PATH_TEMPLATE

    @field_validator("branch_template", mode="before")
    @classmethod
    def default_branch_when_blank(cls, value: object) -> object:
        return _blank_to_none(value) or DEFAULT_BRANCH_TEMPLATE


class PromptSection(BaseModel):
    """Prompt templates; ``prefix`` and ``suffix`` are optional."""

    model_config = ConfigDict(extra="allow")

    prefix: str | None = None
    template: str = DEFAULT_PROMPT_TEMPLATE
    suffix: str | None = None


class JiraSection(BaseModel):
    """Jira connection settings.

    Credentials here are fallbacks; environment variables win.
    """

    model_config = ConfigDict(extra="allow")

    base_url: str | None = None
    email: str | None = None
    token: str | None = None
    default_project: str | None = None
    fields: list[str] = Field(default_factory=lambda: list(DEFAULT_JIRA_FIELDS))

    @field_validator("base_url", "email", "token", "default_project", mode="before")
    @classmethod
    def normalize_optional(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/")


class GitHubSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    repo: str | None = None
    token: str | None = None

    @field_validator("repo", "token", mode="before")
    @classmethod
    def normalize_optional(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if value.count("/") != 1 or value.startswith("/") or value.endswith("/"):
            raise ValueError("sources.github.repo must look like 'owner/name'")
        return value


class SourcesSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    jira: JiraSection | None = None
    github: GitHubSection | None = None


class DetectionSection(BaseModel):
    """Shorthand patterns recognized by the input classifier.

    Patterns are matched against the whole trimmed input.

    Example:
        >>> DetectionSection().jira_pattern
        '[A-Z]+-[0-9]+'
    """

    model_config = ConfigDict(extra="allow")

    jira_pattern: str = DEFAULT_JIRA_PATTERN
    github_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GITHUB_PATTERNS)
    )

    @field_validator("jira_pattern")
    @classmethod
    def validate_jira_pattern(cls, value: str) -> str:
        _compile(value)
        return value

    @field_validator("github_patterns")
    @classmethod
    def validate_github_patterns(cls, value: list[str]) -> list[str]:
        for pattern in value:
            _compile(pattern)
        return value


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid pattern {pattern!r}: {exc}") from exc


class SproutConfig(BaseModel):
    """Root configuration model.

    Example:
        >>> SproutConfig(launch={"script": "echo {worktree}"}).worktree.path_template
        '../worktrees/{branch}'
    """

    model_config = ConfigDict(extra="allow")

    launch: LaunchSection
    worktree: WorktreeSection = Field(default_factory=WorktreeSection)
    prompt: PromptSection = Field(default_factory=PromptSection)
    sources: SourcesSection = Field(default_factory=SourcesSection)
    detection: DetectionSection = Field(default_factory=DetectionSection)
    variables: dict[str, str] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def stringify_variables(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): str(item) for key, item in value.items()}
        return value
