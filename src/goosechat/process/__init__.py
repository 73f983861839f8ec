"""Process invocation: bounded spawning of the agent executable."""

from goosechat.process.invoker import LineObserver, ProcessInvoker
from goosechat.process.outcome import Completed, ProcessOutcome, SpawnFailed, TimedOut

__all__ = [
    "Completed",
    "LineObserver",
    "ProcessInvoker",
    "ProcessOutcome",
    "SpawnFailed",
    "TimedOut",
]
