import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List

from clawmemory.logging.diagnostic import diagnostic_logger as diag, log_lock_acquired, log_lock_waiting


@dataclass
class PathLockState:
    path: str
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class PathLockTable:
    """Per-path mutual exclusion for read-modify-write command cycles.

    Paths are acquired in sorted order so two commands touching the same
    pair of paths (e.g. crossing renames) cannot deadlock.
    """

    def __init__(self, warn_after_ms: int = 2000):
        self._states: Dict[str, PathLockState] = {}
        self._warn_after_ms = warn_after_ms

    def _state(self, path: str) -> PathLockState:
        if path not in self._states:
            self._states[path] = PathLockState(path=path)
        return self._states[path]

    @asynccontextmanager
    async def hold(self, *paths: str) -> AsyncIterator[None]:
        ordered = sorted(set(paths))
        acquired: List[PathLockState] = []
        try:
            for path in ordered:
                state = self._state(path)
                state.holders += 1
                if state.lock.locked():
                    log_lock_waiting(path, state.holders - 1)
                started = time.time()
                try:
                    await state.lock.acquire()
                except BaseException:
                    state.holders -= 1
                    raise
                acquired.append(state)
                waited_ms = (time.time() - started) * 1000
                if waited_ms >= self._warn_after_ms:
                    diag.warn(f"path lock wait exceeded: path={path} waitedMs={int(waited_ms)}")
                log_lock_acquired(path, waited_ms)
            yield
        finally:
            for state in reversed(acquired):
                state.lock.release()
                state.holders -= 1
                if state.holders == 0 and not state.lock.locked():
                    self._states.pop(state.path, None)

    def active_paths(self) -> List[str]:
        return [p for p, s in self._states.items() if s.lock.locked()]
