"""Policies deciding when processed replication offsets should be committed.

Example:
    >>> from datetime import timedelta
    >>> policy = periodic(CommitPolicyConfig(offset_flush_interval_ms=1000))
    >>> policy.perform_commit(10, timedelta(milliseconds=500))
    False
    >>> (policy | always()).perform_commit(10, timedelta(milliseconds=500))
    True
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from .exceptions import ConfigError

__all__ = [
    "CommitPolicyConfig",
    "OffsetCommitPolicy",
    "AlwaysCommitPolicy",
    "PeriodicCommitPolicy",
    "always",
    "periodic",
]


@dataclass(frozen=True)
class CommitPolicyConfig:
    """Configuration for offset commit policies.

    Args:
        offset_flush_interval_ms: Minimum time between two commits for
            `PeriodicCommitPolicy`. Negative values commit on every call.
            Defaults to 60000.
    """

    offset_flush_interval_ms: int = 60_000

    def __post_init__(self) -> None:
        if not isinstance(self.offset_flush_interval_ms, int) or isinstance(
            self.offset_flush_interval_ms, bool
        ):
            raise ConfigError(
                "offset_flush_interval_ms must be an integer, "
                f"not {self.offset_flush_interval_ms!r}."
            )


class OffsetCommitPolicy(ABC):
    """Decides whether offsets should be committed now."""

    @abstractmethod
    def perform_commit(
        self,
        messages_since_last_commit: int,
        time_since_last_commit: timedelta,
    ) -> bool:
        """Return True if offsets should be committed.

        Args:
            messages_since_last_commit: Messages received since the last
                commit; never negative.
            time_since_last_commit: Time elapsed since the last commit;
                never negative.
        """
        ...

    def or_(self, other: OffsetCommitPolicy | None) -> OffsetCommitPolicy:
        """Commit if this policy or `other` requests it."""
        if other is None:
            return self
        return _CombinedPolicy(
            lambda n, t: self.perform_commit(n, t) or other.perform_commit(n, t)
        )

    def and_(self, other: OffsetCommitPolicy | None) -> OffsetCommitPolicy:
        """Commit only if both this policy and `other` request it."""
        if other is None:
            return self
        return _CombinedPolicy(
            lambda n, t: self.perform_commit(n, t) and other.perform_commit(n, t)
        )

    def __or__(self, other: OffsetCommitPolicy | None) -> OffsetCommitPolicy:
        return self.or_(other)

    def __and__(self, other: OffsetCommitPolicy | None) -> OffsetCommitPolicy:
        return self.and_(other)


class _CombinedPolicy(OffsetCommitPolicy):
    def __init__(self, predicate: Callable[[int, timedelta], bool]) -> None:
        self._predicate = predicate

    def perform_commit(
        self,
        messages_since_last_commit: int,
        time_since_last_commit: timedelta,
    ) -> bool:
        return self._predicate(messages_since_last_commit, time_since_last_commit)


class AlwaysCommitPolicy(OffsetCommitPolicy):
    """Commit as often as possible."""

    def perform_commit(
        self,
        messages_since_last_commit: int,
        time_since_last_commit: timedelta,
    ) -> bool:
        return True


class PeriodicCommitPolicy(OffsetCommitPolicy):
    """Commit no more often than the configured flush interval."""

    def __init__(self, config: CommitPolicyConfig | None = None) -> None:
        self.config = config or CommitPolicyConfig()
        self.minimum_time = timedelta(milliseconds=self.config.offset_flush_interval_ms)

    def perform_commit(
        self,
        messages_since_last_commit: int,
        time_since_last_commit: timedelta,
    ) -> bool:
        return time_since_last_commit >= self.minimum_time


def always() -> OffsetCommitPolicy:
    return AlwaysCommitPolicy()


def periodic(config: CommitPolicyConfig | None = None) -> OffsetCommitPolicy:
    return PeriodicCommitPolicy(config)
