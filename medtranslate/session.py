"""
Live translation session owned by one connected client.
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, Optional

from medtranslate.dispatcher import QUIET_INTERVAL, TranslationDispatcher
from medtranslate.languages import require_language
from medtranslate.models import TranslationRequest, TranslationResult
from medtranslate.notices import DESTRUCTIVE, NoticeChannel
from medtranslate.state import SessionState, swapped

logger = logging.getLogger(__name__)

FAILURE_TITLE = "Translation Failed"
FAILURE_DESCRIPTION = "Unable to translate text. Please try again later."


class TranslationSession:
    """
    Holds the session state and feeds every change into the dispatcher.

    On a failed translation the previously displayed translation is kept and a
    single destructive notice is published.
    """

    def __init__(self,
                 translate: Callable[[str, str, str], dict],
                 scheduler,
                 notices: Optional[NoticeChannel] = None,
                 on_change: Optional[Callable[[dict], None]] = None,
                 quiet_interval: float = QUIET_INTERVAL,
                 source_language: Optional[str] = None,
                 target_language: Optional[str] = None):
        self._lock = threading.RLock()
        self._state = SessionState()
        if source_language:
            self._state = replace(self._state, source_language=require_language(source_language).code)
        if target_language:
            self._state = replace(self._state, target_language=require_language(target_language).code)

        self.notices = notices or NoticeChannel()
        self._on_change = on_change
        self._closed = False
        self._dispatcher = TranslationDispatcher(
            translate,
            scheduler,
            on_pending=self._set_pending,
            on_complete=self._apply_result,
            on_cleared=self._clear_translation,
            quiet_interval=quiet_interval,
            lock=self._lock
        )

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def dispatcher(self) -> TranslationDispatcher:
        return self._dispatcher

    def snapshot(self) -> dict:
        return self.state.to_dict()

    def set_text(self, text: str) -> None:
        self._update(original_text=text or '')

    def set_source_language(self, code: str) -> None:
        self._update(source_language=require_language(code).code)

    def set_target_language(self, code: str) -> None:
        self._update(target_language=require_language(code).code)

    def set_languages(self, source: Optional[str] = None, target: Optional[str] = None) -> None:
        """Change one or both languages as a single input event."""
        changes = {}
        if source is not None:
            changes['source_language'] = require_language(source).code
        if target is not None:
            changes['target_language'] = require_language(target).code
        if changes:
            self._update(**changes)

    def swap_languages(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._state = swapped(self._state)
            self._notify()
            self._submit()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._dispatcher.close()
            self.notices.close()
            self._on_change = None

    def _update(self, **changes) -> None:
        with self._lock:
            if self._closed:
                return
            updated = replace(self._state, **changes)
            if updated == self._state:
                return
            self._state = updated
            self._notify()
            self._submit()

    def _submit(self) -> None:
        state = self._state
        self._dispatcher.submit(TranslationRequest(
            text=state.original_text,
            source_language=state.source_language,
            target_language=state.target_language
        ))

    def _set_pending(self, pending: bool) -> None:
        if self._state.pending != pending:
            self._state = replace(self._state, pending=pending)
            self._notify()

    def _clear_translation(self) -> None:
        cleared = replace(self._state, translated_text='', pending=False)
        if cleared != self._state:
            self._state = cleared
            self._notify()

    def _apply_result(self, result: TranslationResult) -> None:
        if result.ok:
            self._state = replace(self._state, translated_text=result.translated_text, pending=False)
            self._notify()
            return

        logger.warning(f"Translation failed: {result.error_reason}")
        self._state = replace(self._state, pending=False)
        self._notify()
        self.notices.publish(FAILURE_TITLE, FAILURE_DESCRIPTION, DESTRUCTIVE)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._state.to_dict())
