"""The shell's ordered table of environment variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


def extract_key(entry: str) -> str:
    """The part of ``NAME=value`` before the first ``=``, or all of it."""
    return entry.partition("=")[0]


def extract_value(entry: str) -> str | None:
    """The part after the first ``=``, or None when there is no ``=``."""
    key, sep, value = entry.partition("=")
    return value if sep else None


class Environment:
    """Variables in insertion order; a variable may exist without a value."""

    def __init__(self) -> None:
        self._vars: dict[str, str | None] = {}

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> Environment:
        """Build from ``NAME=value`` strings."""
        env = cls()
        for entry in entries:
            env.update(extract_key(entry), extract_value(entry), True)
        return env

    def get(self, key: str) -> str | None:
        """The value of ``key``, or None if unset or valueless."""
        return self._vars.get(key)

    def exists(self, key: str) -> bool:
        """True if ``key`` is defined, with or without a value."""
        return key in self._vars

    def update(self, key: str, value: str | None, create: bool = False) -> None:
        """Set ``key`` to ``value``; a None value leaves an existing one alone.

        A missing key is added at the end only when ``create`` is true.
        """
        if key in self._vars:
            if value is not None:
                self._vars[key] = value
        elif create:
            self._vars[key] = value

    def unset(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._vars.pop(key, None)

    def items(self) -> Iterator[tuple[str, str | None]]:
        """All variables in order, valueless ones with None."""
        return iter(list(self._vars.items()))

    def to_dict(self) -> dict[str, str]:
        """Variables that have a value, as a child process environment."""
        return {k: v for k, v in self._vars.items() if v is not None}

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)