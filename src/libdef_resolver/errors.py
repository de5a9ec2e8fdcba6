"""Validation errors raised (or collected) while reading a definitions tree.

Every validating operation takes an optional ``errors`` accumulator. Without
one, the first problem is raised as a :class:`LibDefError`. With one, the
problem is recorded under its context key and the caller carries on with
whatever is still valid.
"""

from __future__ import annotations

from collections.abc import Iterator


class LibDefError(RuntimeError):
    """Base error for malformed libdef trees.

    ``context`` identifies the offending path or qualified package name;
    ``message`` is the human-readable problem without the context prefix.
    """

    def __init__(self, context: str, message: str) -> None:
        super().__init__(f"{context}: {message}")
        self.context = context
        self.message = message


class InvalidVersionNumberError(LibDefError):
    """Raised when a version component is not a number."""


class MalformedPackageVersionNameError(LibDefError):
    """Raised when a package directory is not named <PKGNAME>_v<MAJOR>.<MINOR>.<PATCH>."""


class InvalidRangeDirectoryNameError(LibDefError):
    """Raised when a tool version range directory name cannot be parsed."""


class UnexpectedFileError(LibDefError):
    """Raised when a file sits where only definitions, tests or directories belong."""


class UnexpectedDirectoryError(LibDefError):
    """Raised when a sub-directory sits inside a tool version range directory."""


class OverlappingRangesError(LibDefError):
    """Raised when sibling tool version ranges intersect."""


class NoLibDefsFoundError(LibDefError):
    """Raised when a package version (or range directory) holds no libdef file."""


class AmbiguousLibDefError(NoLibDefsFoundError):
    """Raised when a flat libdef file coexists with tool version range directories."""


class ErrorAccumulator:
    """Insertion-ordered mapping of context -> messages."""

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def add(self, context: str, message: str) -> None:
        self._errors.setdefault(context, []).append(message)

    def items(self) -> list[tuple[str, list[str]]]:
        return [(context, list(messages)) for context, messages in self._errors.items()]

    def to_dict(self) -> dict[str, list[str]]:
        return {context: list(messages) for context, messages in self._errors.items()}

    @property
    def message_count(self) -> int:
        return sum(len(messages) for messages in self._errors.values())

    def __getitem__(self, context: str) -> list[str]:
        return list(self._errors[context])

    def __contains__(self, context: object) -> bool:
        return context in self._errors

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"ErrorAccumulator({self._errors!r})"


def record_error(error: LibDefError, errors: ErrorAccumulator | None) -> None:
    """Raise ``error`` in fail-fast mode, otherwise append it to ``errors``."""
    if errors is None:
        raise error
    errors.add(error.context, error.message)
