"""
Cancelable one-shot timers run as Flask-SocketIO background tasks.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class TimerHandle:
    """Handle for one scheduled callback. Cancel before it fires and it never runs."""

    def __init__(self):
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """
    Schedules callbacks with ``socketio.sleep`` inside a background task, so
    timers cooperate with whatever async mode the server runs in.
    """

    def __init__(self, socketio):
        self._socketio = socketio

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def run():
            self._socketio.sleep(delay)
            if handle.cancelled:
                return
            handle.fired = True
            try:
                callback()
            except Exception as e:
                logger.error(f"Scheduled callback failed: {str(e)}", exc_info=True)

        self._socketio.start_background_task(run)
        return handle
