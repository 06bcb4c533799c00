from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .utils import get_logger

_log = get_logger()


@dataclass(frozen=True)
class Issue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"[{self.path}] {self.message}"


class IssueCollector:
    """Append-only, insertion-ordered record of non-fatal decode notices.

    One collector belongs to one decode call; it is not safe for concurrent
    writers.
    """

    def __init__(self) -> None:
        self._issues: List[Issue] = []

    @property
    def issues(self) -> Tuple[Issue, ...]:
        return tuple(self._issues)

    def record(self, path: str, message: str) -> None:
        _log.debug("%s: %s", path or "<root>", message)
        self._issues.append(Issue(path=path, message=message))

    def paths(self) -> List[str]:
        return [issue.path for issue in self._issues]

    def __len__(self) -> int:
        return len(self._issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(list(self._issues))
