"""Terminal-attached subprocesses (pipeline viewer, job trace)."""

import asyncio
import logging
import signal
from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager, contextmanager, suppress
from dataclasses import dataclass, field
from types import FrameType

from ci_navigator.providers.base import ProviderError

log = logging.getLogger(__name__)


@contextmanager
def defer_interrupts() -> Iterator[None]:
    """Keep SIGINT from tearing down the event loop while a child owns the TTY.

    The child shares our process group and receives the interrupt itself. A
    Python-level handler (unlike SIG_IGN) is reset to the default on exec, so
    the child stays interruptible.
    """

    def _on_interrupt(signum: int, frame: FrameType | None) -> None:
        log.debug("Interrupt delivered to attached subprocess")

    previous = signal.signal(signal.SIGINT, _on_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


@dataclass(frozen=True, kw_only=True)
class AttachedProcessRunner:
    """Runs interactive subprocesses that inherit the controlling terminal.

    Only one subprocess is attached at a time: the terminal is handed to the
    child on attach and given back once it has exited.
    """

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @asynccontextmanager
    async def attached(
        self, program: str, *args: str
    ) -> AsyncGenerator[asyncio.subprocess.Process]:
        """Attach a subprocess to the terminal for the duration of the block.

        Leaving the block waits for the child to exit. If the block is left
        with an exception (cancellation included) the child is terminated
        first.

        Raises:
            ProviderError: If the program cannot be started

        """
        command = [program, *args]
        async with self._lock:
            with defer_interrupts():
                log.debug("Attaching: %s", " ".join(command))
                try:
                    process = await asyncio.create_subprocess_exec(*command)
                except (FileNotFoundError, PermissionError) as e:
                    raise ProviderError(command, f"cannot start {program}: {e}") from e

                try:
                    yield process
                except BaseException:
                    if process.returncode is None:
                        with suppress(ProcessLookupError):
                            process.terminate()
                    raise
                finally:
                    await process.wait()
                    log.debug("Detached: %s (exit=%s)", program, process.returncode)

    async def run(self, program: str, *args: str) -> int:
        """Attach, wait for exit and detach; any exit code is a normal exit."""
        async with self.attached(program, *args) as process:
            return await process.wait()

    @property
    def busy(self) -> bool:
        return self._lock.locked()
