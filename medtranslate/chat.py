import itertools
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from medtranslate.notices import DESTRUCTIVE, NoticeChannel
from medtranslate.prompts import CHAT_WELCOME_MESSAGE

logger = logging.getLogger(__name__)

WELCOME_ID = 'welcome'

_ids = itertools.count(1)


@dataclass(frozen=True)
class ChatMessage:
    id: str
    content: str
    is_user: bool
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'content': self.content,
            'is_user': self.is_user,
            'timestamp': self.timestamp.isoformat()
        }


def welcome_message() -> ChatMessage:
    return ChatMessage(id=WELCOME_ID, content=CHAT_WELCOME_MESSAGE, is_user=False)


class ChatSession:
    """
    Conversation with the medical assistant for one connected client.

    ``on_change`` receives the serialized history whenever it changes: once
    when the user's message is appended, again when the reply arrives, and
    on reset.
    """

    def __init__(self,
                 reply: Callable[[str], dict],
                 notices: Optional[NoticeChannel] = None,
                 on_change: Optional[Callable[[List[dict]], None]] = None):
        self._reply = reply
        self.notices = notices or NoticeChannel()
        self._on_change = on_change
        self._messages: List[ChatMessage] = [welcome_message()]
        self._loading = False
        self._lock = threading.Lock()

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def history(self) -> List[dict]:
        return [message.to_dict() for message in self.messages]

    def send(self, message: str) -> Optional[ChatMessage]:
        """
        Send a user message and return the assistant's reply.

        Blank messages, and messages sent while a reply is still pending, are
        ignored and return None. Failures publish a notice and return None.
        """
        with self._lock:
            if not message or not message.strip() or self._loading:
                return None
            self._messages.append(ChatMessage(id=str(next(_ids)), content=message, is_user=True))
            self._loading = True
        self._notify()

        try:
            response = self._reply(message)
        except Exception as e:
            logger.error(f"Chat error: {str(e)}", exc_info=True)
            response = {'error': 'chat_failed', 'message': str(e)}

        with self._lock:
            self._loading = False
            if 'error' in response:
                failed = True
            else:
                failed = False
                answer = ChatMessage(id=str(next(_ids)), content=response['text'], is_user=False)
                self._messages.append(answer)

        if failed:
            logger.warning(f"Chat reply failed: {response.get('message', response['error'])}")
            self.notices.publish("Error", "Failed to get response. Please try again.", DESTRUCTIVE)
            return None
        self._notify()
        return answer

    def reset(self) -> None:
        with self._lock:
            self._messages = [welcome_message()]
        self._notify()
        self.notices.publish("Chat Refreshed", "Chat history has been cleared.")

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.history())
