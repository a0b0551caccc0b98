"""
Run outcome model.

An ExitOutcome is computed once per invocation and is the only input to the
process exit status.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeKind(Enum):
    SUCCESS = "success"
    CONFIGURATION_FAILURE = "configuration_failure"
    BUILD_FAILURE = "build_failure"
    EXPLICIT_STATUS = "explicit_status"
    UNEXPECTED_FAILURE = "unexpected_failure"


@dataclass(frozen=True)
class ExitOutcome:
    """Tagged result of a run, with the failure that produced it."""

    kind: OutcomeKind
    status: int = 0
    error: Optional[BaseException] = None

    @classmethod
    def success(cls) -> "ExitOutcome":
        return cls(OutcomeKind.SUCCESS, 0)

    @classmethod
    def configuration_failure(cls, error: BaseException) -> "ExitOutcome":
        return cls(OutcomeKind.CONFIGURATION_FAILURE, 1, error)

    @classmethod
    def build_failure(cls, error: BaseException) -> "ExitOutcome":
        return cls(OutcomeKind.BUILD_FAILURE, 1, error)

    @classmethod
    def explicit_status(cls, status: int, error: Optional[BaseException] = None) -> "ExitOutcome":
        if status == 0:
            return cls.success()
        return cls(OutcomeKind.EXPLICIT_STATUS, status, error)

    @classmethod
    def unexpected_failure(cls, error: BaseException) -> "ExitOutcome":
        return cls(OutcomeKind.UNEXPECTED_FAILURE, 1, error)

    @property
    def exit_code(self) -> int:
        return self.status

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS
