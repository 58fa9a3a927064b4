"""Stopping the toolbox container when the launcher exits."""

import logging
import signal
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from ..services.runtime import RuntimeService

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = [
    getattr(signal, sig) for sig in ('SIGTERM', 'SIGHUP') if hasattr(signal, sig)
]


def _exit_on_signal(signum, frame):
    raise SystemExit(128 + signum)


def _install_signal_handlers() -> Dict[int, object]:
    """Turn termination signals into SystemExit so cleanup still runs."""
    if threading.current_thread() is not threading.main_thread():
        return {}
    previous = {}
    for signum in TERMINATION_SIGNALS:
        previous[signum] = signal.signal(signum, _exit_on_signal)
    return previous


def _restore_signal_handlers(previous: Dict[int, object]) -> None:
    for signum, handler in previous.items():
        # None means the handler was not installed from Python
        if handler is not None:
            signal.signal(signum, handler)


@contextmanager
def stop_on_exit(runtime: RuntimeService, name: str) -> Iterator[None]:
    """Stop container ``name`` once the block exits, however it exits.

    Only the running state is torn down; the container is kept for the
    next invocation. Failures to stop are logged and never raised.
    """
    previous = _install_signal_handlers()
    try:
        yield
    finally:
        _restore_signal_handlers(previous)
        try:
            runtime.stop_container(name)
        except Exception as e:
            logger.debug(f"Ignoring failure to stop container {name}: {e}")
