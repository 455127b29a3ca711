"""
Problem Model
=============

Classified failures recorded while a transformation runs. A problem carries
an HTTP-style status code and a message that is safe to show to the caller.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)


class ProblemCode(IntEnum):
    """Known problem classifications."""

    BAD_CLIENT_REQUEST = 400       # Bad Request
    INVALID_UPSTREAM_RESPONSE = 502  # Bad Gateway


@dataclass(frozen=True)
class Problem:
    """
    A recorded, classified failure.

    Attributes:
        code: HTTP-style status code, preferably a ProblemCode
        message: Human-readable description
    """
    code: int
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ProblemLog:
    """
    Append-only list of problems for a single transform call.

    Every problem added is also written to the module logger so the
    diagnostic stream shows what went wrong and where.
    """

    def __init__(self):
        self._problems: List[Problem] = []

    def record(self, code: int, message: str, location: str = None) -> Problem:
        """
        Record a problem.

        Args:
            code: Problem code
            message: Problem message
            location: Optional hint naming the step that detected it

        Returns:
            The recorded Problem
        """
        problem = Problem(code=int(code), message=message)
        where = f" at {location}" if location else ""
        logger.warning(f"PROBLEM {problem.code}{where}: {problem.message}")
        self._problems.append(problem)
        return problem

    def clear(self) -> None:
        self._problems = []

    def __len__(self) -> int:
        return len(self._problems)

    def __bool__(self) -> bool:
        return bool(self._problems)

    @property
    def problems(self) -> Tuple[Problem, ...]:
        return tuple(self._problems)


def summarize(problems: Sequence[Problem]) -> str:
    """Generate a text summary of problems, one per line."""
    if not problems:
        return "No problems"
    return "\n".join(f"PROBLEM {p.code}: {p.message}" for p in problems)
