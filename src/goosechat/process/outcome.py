"""Outcomes of a bounded process invocation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class Completed(BaseModel):
    """The process exited on its own within the timeout."""

    kind: Literal["completed"] = "completed"
    exit_code: int
    output: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class TimedOut(BaseModel):
    """The timeout elapsed first and the process was killed."""

    kind: Literal["timed_out"] = "timed_out"
    partial_output: str = ""
    timeout_seconds: float

    @property
    def success(self) -> bool:
        return False


class SpawnFailed(BaseModel):
    """The executable could not be started; no process was created."""

    kind: Literal["spawn_failed"] = "spawn_failed"
    reason: str

    @property
    def success(self) -> bool:
        return False


ProcessOutcome = Completed | TimedOut | SpawnFailed
