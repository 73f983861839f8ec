"""Bounded invocation of an external executable.

Stdout and stderr are merged into one stream that a reader task drains in
chunks while the caller waits on process exit with a timeout. Output is
accumulated as it arrives, so a killed process still yields what it printed.
"""

from __future__ import annotations

import asyncio
import codecs
import concurrent.futures
import contextlib
import logging
import shutil
import threading
from collections.abc import Callable, Coroutine, Mapping, Sequence
from typing import Any

from goosechat.config.defaults import DEFAULT_MAX_PROCESSES, DEFAULT_PROBE_TIMEOUT_SECONDS
from goosechat.config.environment import Environment
from goosechat.process.outcome import Completed, ProcessOutcome, SpawnFailed, TimedOut

logger = logging.getLogger(__name__)

LineObserver = Callable[[str], None]

# Time allowed for buffered output to drain once the process has exited
_DRAIN_GRACE_SECONDS = 2.0
_READ_CHUNK_BYTES = 64 * 1024


class ProcessInvoker:
    """Runs executables with merged output capture and a hard timeout.

    At most ``max_concurrent`` child processes are alive at once across all
    threads and event loops; further invocations wait for a free slot.
    Children inherit the variables of ``env`` (the live process environment
    by default) with per-call overrides layered on top.
    """

    def __init__(
        self,
        max_concurrent: int = DEFAULT_MAX_PROCESSES,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        env: Environment | None = None,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._max_concurrent = max_concurrent
        self._slots = threading.BoundedSemaphore(max_concurrent)
        self._probe_timeout = probe_timeout
        self._env = env or Environment()

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    def invoke(
        self,
        executable: str,
        args: Sequence[str] = (),
        env_overrides: Mapping[str, str] | None = None,
        timeout: float = 600.0,
        observer: LineObserver | None = None,
    ) -> ProcessOutcome:
        """Blocking invocation.

        Safe to call from inside a running event loop: the work then runs on
        a private loop in a worker thread, blocking the caller like any other
        synchronous call. Async callers should prefer ``invoke_async``.
        """
        return _run_sync(
            self.invoke_async(
                executable, args, env_overrides=env_overrides, timeout=timeout, observer=observer
            )
        )

    async def invoke_async(
        self,
        executable: str,
        args: Sequence[str] = (),
        env_overrides: Mapping[str, str] | None = None,
        timeout: float = 600.0,
        observer: LineObserver | None = None,
    ) -> ProcessOutcome:
        """Spawn ``executable`` and wait up to ``timeout`` seconds for it.

        Args:
            executable: Path or name of the program.
            args: Argument vector, without the program itself.
            env_overrides: Variables layered over the invoker's environment.
            timeout: Seconds before the process is killed.
            observer: Called with each output line (newline stripped).

        Returns Completed, TimedOut or SpawnFailed. A failure while reading
        output is logged; whatever was read so far is still returned.
        """
        await self._acquire_slot()
        try:
            return await _run_process(
                [executable, *args], self._child_env(env_overrides), timeout, observer
            )
        finally:
            self._slots.release()

    def check_version(self, executable: str | None) -> Completed | None:
        """Run ``executable --version``; the outcome if it exited 0, else None."""
        if not _resolvable(executable):
            return None
        return self._successful(
            executable, self.invoke(executable, ["--version"], timeout=self._probe_timeout)
        )

    async def check_version_async(self, executable: str | None) -> Completed | None:
        if not _resolvable(executable):
            return None
        return self._successful(
            executable,
            await self.invoke_async(executable, ["--version"], timeout=self._probe_timeout),
        )

    def probe_availability(self, executable: str | None) -> bool:
        """Whether ``executable --version`` runs and exits 0."""
        return self.check_version(executable) is not None

    def version(self, executable: str | None) -> str | None:
        """First non-empty line of ``executable --version``, or None."""
        outcome = self.check_version(executable)
        return version_line(outcome.output) if outcome is not None else None

    def _successful(self, executable: str, outcome: ProcessOutcome) -> Completed | None:
        if not isinstance(outcome, Completed) or not outcome.success:
            logger.info("%s is unavailable: %s", executable, outcome.kind)
            return None
        return outcome

    def _child_env(self, overrides: Mapping[str, str] | None) -> dict[str, str]:
        return {**dict(self._env.items()), **(overrides or {})}

    async def _acquire_slot(self) -> None:
        acquire = asyncio.ensure_future(asyncio.to_thread(self._slots.acquire))
        try:
            await asyncio.shield(acquire)
        except asyncio.CancelledError:
            # The worker thread may still get the slot; hand it straight back
            acquire.add_done_callback(lambda _: self._slots.release())
            raise


def version_line(output: str) -> str | None:
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return None


def _resolvable(executable: str | None) -> bool:
    return bool(executable) and shutil.which(executable) is not None


def _run_sync(coro: Coroutine[Any, Any, ProcessOutcome]) -> ProcessOutcome:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


async def _run_process(
    argv: list[str],
    env: dict[str, str],
    timeout: float,
    observer: LineObserver | None,
) -> ProcessOutcome:
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            env=env,
        )
    except OSError as e:
        logger.warning("Failed to start %s: %s", argv[0], e)
        return SpawnFailed(reason=f"{type(e).__name__}: {e}")

    output: list[str] = []
    reader = asyncio.create_task(_read_output(process.stdout, output, observer))
    waiter = asyncio.create_task(process.wait())
    try:
        await asyncio.wait({waiter}, timeout=timeout)
        timed_out = not waiter.done()
        if timed_out:
            logger.warning("%s timed out after %.1fs, killing it", argv[0], timeout)
            _kill(process)
            await waiter

        await asyncio.wait({reader}, timeout=_DRAIN_GRACE_SECONDS)
        _log_reader_failure(reader, argv[0])

        if timed_out:
            return TimedOut(partial_output="".join(output), timeout_seconds=timeout)
        return Completed(exit_code=process.returncode, output="".join(output))
    finally:
        if process.returncode is None:
            _kill(process)
            await process.wait()
        pending = [t for t in (reader, waiter) if not t.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)


async def _read_output(
    stream: asyncio.StreamReader | None,
    sink: list[str],
    observer: LineObserver | None,
) -> None:
    """Drain ``stream`` into ``sink`` and hand complete lines to ``observer``.

    Lines of any length are accepted; a trailing line without a newline is
    delivered at end of stream.
    """
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    while True:
        chunk = await stream.read(_READ_CHUNK_BYTES)
        text = decoder.decode(chunk, final=not chunk)
        if text:
            sink.append(text)
            if observer is not None:
                pending += text
                *lines, pending = pending.split("\n")
                for line in lines:
                    _notify(observer, line.rstrip("\r"))
        if not chunk:
            break
    if observer is not None and pending:
        _notify(observer, pending.rstrip("\r"))


def _notify(observer: LineObserver, line: str) -> None:
    try:
        observer(line)
    except Exception:
        logger.warning("Output observer raised", exc_info=True)


def _log_reader_failure(reader: asyncio.Task[None], program: str) -> None:
    if reader.done() and not reader.cancelled() and reader.exception() is not None:
        logger.warning(
            "Reading output of %s failed: %s", program, reader.exception(), exc_info=reader.exception()
        )


def _kill(process: asyncio.subprocess.Process) -> None:
    with contextlib.suppress(ProcessLookupError):
        process.kill()
