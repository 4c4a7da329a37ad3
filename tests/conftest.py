"""
Shared fixtures for the translation service tests.
"""

import os

# Must be set before the app module (and its SocketIO server) is imported
os.environ['SOCKETIO_ASYNC_MODE'] = 'threading'
os.environ.setdefault('OPENAI_API_KEY', 'test-key')

from types import SimpleNamespace

import pytest

from medtranslate import gateway
from medtranslate.scheduling import TimerHandle


class FakeTimer(TimerHandle):
    def __init__(self, due, callback):
        super().__init__()
        self.due = due
        self.callback = callback


class FakeScheduler:
    """Manual clock: timers only fire when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback):
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [t for t in self.live if t.due <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            timer.fired = True
            timer.callback()
        self.now = target


class ImmediateScheduler:
    """Fires every callback as soon as it is scheduled."""

    def call_later(self, delay, callback):
        handle = TimerHandle()
        handle.fired = True
        callback()
        return handle


class StubGateway:
    """Records translate calls and answers with a fixed or computed response."""

    def __init__(self, response=None):
        self.calls = []
        self.response = response if response is not None else {'text': 'Hola'}

    def __call__(self, text, source_lang, target_lang):
        self.calls.append((text, source_lang, target_lang))
        if callable(self.response):
            return self.response(text, source_lang, target_lang)
        return dict(self.response)


class FakeCompletions:
    def __init__(self, content='Hola', error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, content='Hola', error=None):
        self.chat = SimpleNamespace(completions=FakeCompletions(content, error))

    @property
    def completions(self):
        return self.chat.completions


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def stub_gateway():
    return StubGateway()


@pytest.fixture(autouse=True)
def reset_breaker():
    gateway.provider_breaker.reset()
    yield
    gateway.provider_breaker.reset()


@pytest.fixture
def fake_openai(monkeypatch):
    client = FakeOpenAI()
    monkeypatch.setattr(gateway, 'get_client', lambda: client)
    return client
