"""Git repository access for the execution tracker."""

from .context import (
    FakeRepositoryContext,
    GitCommandResult,
    GitLookupError,
    GitRepositoryContext,
    RepositoryContext,
    resolve_or,
)

__all__ = [
    "FakeRepositoryContext",
    "GitCommandResult",
    "GitLookupError",
    "GitRepositoryContext",
    "RepositoryContext",
    "resolve_or",
]
