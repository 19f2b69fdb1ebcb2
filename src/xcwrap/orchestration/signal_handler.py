"""
Signal handling for the orchestration module.

The SignalBridge turns SIGINT/SIGTERM delivered to the wrapper into a
cancellation request on the active supervised run. It is an explicit
subscription: installed for the duration of one run, unsubscribed as soon as
teardown begins, and uninstalled (restoring the previous handlers) before
the run returns.
"""

import asyncio
import logging
import signal
from typing import Any, Callable, Dict, List, Optional

from ..models.outcome import SignalKind

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = {
    signal.SIGINT: SignalKind.INTERRUPT,
    signal.SIGTERM: SignalKind.TERMINATE,
}


class SignalBridge:
    """
    Forwards interrupt and terminate requests to a callback.

    Uses ``loop.add_signal_handler`` where the event loop supports it and
    falls back to ``signal.signal`` plus ``call_soon_threadsafe`` elsewhere.
    """

    def __init__(self, on_signal: Callable[[SignalKind], None]):
        self.on_signal = on_signal
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_signals: List[int] = []
        self._original_handlers: Dict[int, Any] = {}
        self._subscribed = False

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Register handlers for SIGINT and SIGTERM."""
        self._loop = loop or asyncio.get_running_loop()
        for signum, kind in HANDLED_SIGNALS.items():
            try:
                self._loop.add_signal_handler(signum, self.dispatch, kind)
                self._loop_signals.append(signum)
            except (NotImplementedError, RuntimeError):
                self._install_fallback(signum, kind)
        self._subscribed = True
        logger.debug("Signal handlers installed")

    def _install_fallback(self, signum: int, kind: SignalKind) -> None:
        loop = self._loop

        def handler(received_signum: int, frame: Any) -> None:
            loop.call_soon_threadsafe(self.dispatch, kind)

        try:
            self._original_handlers[signum] = signal.signal(signum, handler)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to set up handler for signal {signum}: {e}")

    def unsubscribe(self) -> None:
        """Stop forwarding; later signals are ignored until uninstall."""
        self._subscribed = False

    def uninstall(self) -> None:
        """Remove the handlers and restore whatever was there before."""
        self._subscribed = False
        for signum in self._loop_signals:
            try:
                self._loop.remove_signal_handler(signum)
            except (RuntimeError, ValueError) as e:
                logger.debug(f"Could not remove handler for signal {signum}: {e}")
        self._loop_signals.clear()

        for signum, original in self._original_handlers.items():
            try:
                signal.signal(signum, original)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to restore handler for signal {signum}: {e}")
        self._original_handlers.clear()
        logger.debug("Signal handlers restored")

    def dispatch(self, kind: SignalKind) -> None:
        if not self._subscribed:
            logger.debug(f"Ignoring {kind.value} signal, teardown already in progress")
            return
        logger.warning(f"Received {kind.value} signal, stopping the build")
        self.on_signal(kind)
