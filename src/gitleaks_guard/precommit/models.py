"""Models for the parts of .pre-commit-config.yaml the doctor inspects."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HookEntry(BaseModel):
    """A single hook declared under a pre-commit repo."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Hook identifier, e.g. 'gitleaks'.")
    stages: list[str] = Field(
        default_factory=list,
        description="Stages the hook is bound to; empty means pre-commit's defaults.",
    )

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Hook id must not be empty")
        return normalized

    @field_validator("stages", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return list(value)
        raise TypeError("Hook stages must be a string or a sequence of strings")


class RepoEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    repo: str
    rev: str | None = None
    hooks: list[HookEntry] = Field(default_factory=list)


class PreCommitConfig(BaseModel):
    """Subset of the pre-commit configuration file."""

    model_config = ConfigDict(extra="allow")

    repos: list[RepoEntry] = Field(default_factory=list)
    default_install_hook_types: list[str] = Field(default_factory=list)

    def iter_hooks(self):
        for repo in self.repos:
            yield from repo.hooks

    def has_hook(self, hook_id: str) -> bool:
        return any(hook.id == hook_id for hook in self.iter_hooks())

    def hook_stages(self, hook_id: str) -> list[str]:
        """Union of stages declared for ``hook_id`` across all repos."""

        stages: list[str] = []
        for hook in self.iter_hooks():
            if hook.id == hook_id:
                stages.extend(stage for stage in hook.stages if stage not in stages)
        return stages


__all__ = ["HookEntry", "PreCommitConfig", "RepoEntry"]
