"""
Debounced translation dispatcher.

Every change to the text or to either language is submitted as a new
TranslationRequest. The dispatcher keeps a single timer slot: a new request
cancels the timer of the previous one, so only the request that was current
when input settled for the quiet interval ever reaches the gateway.
"""

import logging
import threading
from typing import Callable, Optional

from medtranslate.models import TranslationRequest, TranslationResult

logger = logging.getLogger(__name__)

QUIET_INTERVAL = 0.5


class _Slot:
    __slots__ = ('request', 'timer', 'fired')

    def __init__(self, request: TranslationRequest):
        self.request = request
        self.timer = None
        self.fired = False


class TranslationDispatcher:
    """
    Turns a stream of (text, source, target) triples into at most one gateway
    call per quiet period and applies only the most recent result.

    Args:
        translate: Gateway callable ``(text, source_lang, target_lang) -> dict``.
        scheduler: Object exposing ``call_later(delay, callback) -> handle``.
        on_pending: Called with True when a call is dispatched and False once
            nothing is in flight for the current input.
        on_complete: Called with the TranslationResult of the active call.
        on_cleared: Called when empty text clears the translation.
        quiet_interval: Seconds of quiet input before dispatching.
        lock: Lock shared with the owning session.
    """

    def __init__(self,
                 translate: Callable[[str, str, str], dict],
                 scheduler,
                 on_pending: Callable[[bool], None],
                 on_complete: Callable[[TranslationResult], None],
                 on_cleared: Callable[[], None],
                 quiet_interval: float = QUIET_INTERVAL,
                 lock: Optional[threading.RLock] = None):
        self._translate = translate
        self._scheduler = scheduler
        self._on_pending = on_pending
        self._on_complete = on_complete
        self._on_cleared = on_cleared
        self.quiet_interval = quiet_interval
        self._lock = lock or threading.RLock()
        self._slot: Optional[_Slot] = None
        self._closed = False

    @property
    def scheduled(self) -> bool:
        """True while a timer is waiting to fire."""
        with self._lock:
            return self._slot is not None and not self._slot.fired

    @property
    def in_flight(self) -> bool:
        """True while the active request awaits the gateway."""
        with self._lock:
            return self._slot is not None and self._slot.fired

    def submit(self, request: TranslationRequest) -> None:
        with self._lock:
            if self._closed:
                return

            self._cancel_timer()

            if not request.text:
                self._slot = None
                self._on_cleared()
                return

            slot = _Slot(request)
            self._slot = slot
            slot.timer = self._scheduler.call_later(self.quiet_interval, lambda: self._fire(slot))

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._cancel_timer()
            self._slot = None

    def _cancel_timer(self) -> None:
        slot = self._slot
        if slot is not None and not slot.fired and slot.timer is not None:
            slot.timer.cancel()

    def _fire(self, slot: _Slot) -> None:
        with self._lock:
            if self._closed or self._slot is not slot:
                return
            slot.fired = True
            self._on_pending(True)

        request = slot.request
        try:
            response = self._translate(request.text, request.source_language, request.target_language)
            result = TranslationResult.from_response(response)
        except Exception as e:
            logger.error(f"Translation dispatch failed: {str(e)}", exc_info=True)
            result = TranslationResult.failure(str(e))

        with self._lock:
            if self._closed:
                return

            if self._slot is not slot:
                logger.debug(f"Discarding stale translation for {request.source_language}->{request.target_language}")
                # The replacing request has not been dispatched yet, so nothing is loading
                if self._slot is None or not self._slot.fired:
                    self._on_pending(False)
                return

            self._slot = None
            self._on_complete(result)
