"""Workspace lock — serializes the load -> mutate -> save cycle across processes.

The lock is an advisory ``flock`` on a lock file next to the snapshot. The
kernel drops it when the holding process exits for any reason, so a
crashed holder never leaves the workspace blocked. The file itself is
never removed; it records the pid of the last holder for diagnostics.
"""

from __future__ import annotations

import fcntl
import os
import signal
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from loguru import logger

from repojump.errors import LockTimeoutError, ProviderUnavailableError
from repojump.registry.models import Registry
from repojump.registry.store import RegistryStore

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0
POLL_INTERVAL = 0.05

_RELEASE_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


@contextmanager
def workspace_lock(lock_path: str | Path, timeout: float = DEFAULT_TIMEOUT) -> Iterator[None]:
    """Hold the workspace lock for the duration of the ``with`` block.

    Raises:
        LockTimeoutError: If another process still holds the lock after
            ``timeout`` seconds.
    """
    path = Path(lock_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(path), os.O_CREAT | os.O_RDWR, 0o600)
    try:
        _acquire(fd, path, timeout)
        logger.debug(f"Acquired workspace lock {path}")
        try:
            with _signals_raise_exit():
                yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            logger.debug(f"Released workspace lock {path}")
    finally:
        os.close(fd)


def with_lock(
    store: RegistryStore,
    body: Callable[[Registry], T],
    timeout: float = DEFAULT_TIMEOUT,
) -> T:
    """Run one locked load -> ``body(registry)`` -> save cycle.

    If ``body`` fails with ``ProviderUnavailableError`` whatever it already
    merged is still saved before the error propagates. Any other error
    leaves the snapshot untouched.
    """
    with workspace_lock(store.lock_path, timeout=timeout):
        registry = store.load()
        try:
            result = body(registry)
        except ProviderUnavailableError:
            store.save(registry)
            raise
        store.save(registry)
        return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _acquire(fd: int, path: Path, timeout: float) -> None:
    start = time.monotonic()
    while True:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            break
        except BlockingIOError:
            waited = time.monotonic() - start
            if waited >= timeout:
                holder = _read_holder(path)
                logger.debug(f"Workspace lock {path} still held by pid {holder or '?'}")
                raise LockTimeoutError(str(path), waited)
            time.sleep(POLL_INTERVAL)

    os.ftruncate(fd, 0)
    os.pwrite(fd, f"{os.getpid()}\n".encode(), 0)


def _read_holder(path: Path) -> str:
    try:
        return path.read_text().strip()
    except (OSError, UnicodeDecodeError):
        return ""


@contextmanager
def _signals_raise_exit() -> Iterator[None]:
    """Turn termination signals into ``SystemExit`` so ``finally`` blocks run."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame):
        raise SystemExit(128 + signum)

    previous = {}
    for signum in _RELEASE_SIGNALS:
        previous[signum] = signal.signal(signum, _handler)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
