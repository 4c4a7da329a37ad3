"""
Per-session notification channel for transient user-visible notices.
"""

import itertools
import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT = 'default'
DESTRUCTIVE = 'destructive'

NOTICE_LIMIT = 1

_ids = itertools.count(1)


@dataclass(frozen=True)
class Notice:
    id: str
    title: str
    description: str = ''
    variant: str = DEFAULT

    def to_dict(self) -> dict:
        return asdict(self)


class NoticeChannel:
    """
    Delivers notices to the listeners of a single session.

    The channel is closed together with its session; publishing afterwards is
    a no-op.
    """

    def __init__(self, limit: int = NOTICE_LIMIT):
        self._listeners: List[Callable[[Notice], None]] = []
        self._recent = deque(maxlen=limit)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def recent(self) -> List[Notice]:
        with self._lock:
            return list(self._recent)

    def subscribe(self, listener: Callable[[Notice], None]) -> Callable[[], None]:
        with self._lock:
            if self._closed:
                raise RuntimeError("Cannot subscribe to a closed notice channel")
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, title: str, description: str = '', variant: str = DEFAULT) -> Optional[Notice]:
        with self._lock:
            if self._closed:
                logger.debug(f"Dropping notice on closed channel: {title}")
                return None
            notice = Notice(id=str(next(_ids)), title=title, description=description, variant=variant)
            self._recent.append(notice)
            listeners = list(self._listeners)

        for listener in listeners:
            listener(notice)
        return notice

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._listeners.clear()
            self._recent.clear()
