"""
Tests for the single-slot debounced dispatcher.
"""

from medtranslate.dispatcher import TranslationDispatcher
from medtranslate.models import TranslationRequest


class Recorder:
    def __init__(self):
        self.pending = []
        self.results = []
        self.cleared = 0

    def on_pending(self, value):
        self.pending.append(value)

    def on_complete(self, result):
        self.results.append(result)

    def on_cleared(self):
        self.cleared += 1


def make_dispatcher(stub_gateway, scheduler, recorder):
    return TranslationDispatcher(
        stub_gateway,
        scheduler,
        on_pending=recorder.on_pending,
        on_complete=recorder.on_complete,
        on_cleared=recorder.on_cleared,
        quiet_interval=0.5
    )


class TestTranslationDispatcher:

    def test_only_one_timer_is_ever_live(self, stub_gateway, scheduler):
        dispatcher = make_dispatcher(stub_gateway, scheduler, Recorder())

        for text in ['a', 'ab', 'abc']:
            dispatcher.submit(TranslationRequest(text, 'en-US', 'es-ES'))

        assert len(scheduler.live) == 1
        assert dispatcher.scheduled

    def test_uses_request_captured_at_submit(self, stub_gateway, scheduler):
        recorder = Recorder()
        dispatcher = make_dispatcher(stub_gateway, scheduler, recorder)
        request = TranslationRequest('Hello', 'en-US', 'ja-JP')

        dispatcher.submit(request)
        scheduler.advance(0.5)

        assert stub_gateway.calls == [('Hello', 'en-US', 'ja-JP')]
        assert recorder.pending == [True]
        assert recorder.results[0].translated_text == 'Hola'
        assert not dispatcher.scheduled
        assert not dispatcher.in_flight

    def test_empty_text_reports_cleared(self, stub_gateway, scheduler):
        recorder = Recorder()
        dispatcher = make_dispatcher(stub_gateway, scheduler, recorder)

        dispatcher.submit(TranslationRequest('Hello', 'en-US', 'es-ES'))
        dispatcher.submit(TranslationRequest('', 'en-US', 'es-ES'))
        scheduler.advance(1.0)

        assert recorder.cleared == 1
        assert recorder.results == []
        assert stub_gateway.calls == []

    def test_malformed_response_is_a_failure(self, stub_gateway, scheduler):
        recorder = Recorder()
        stub_gateway.response = {'unexpected': True}
        dispatcher = make_dispatcher(stub_gateway, scheduler, recorder)

        dispatcher.submit(TranslationRequest('Hello', 'en-US', 'es-ES'))
        scheduler.advance(0.5)

        assert not recorder.results[0].ok
        assert recorder.results[0].error_reason == 'invalid_response'

    def test_result_after_close_is_dropped(self, stub_gateway, scheduler):
        recorder = Recorder()

        def respond(text, source, target):
            dispatcher.close()
            return {'text': 'Hola'}

        stub_gateway.response = respond
        dispatcher = make_dispatcher(stub_gateway, scheduler, recorder)
        dispatcher.submit(TranslationRequest('Hello', 'en-US', 'es-ES'))
        scheduler.advance(0.5)

        assert recorder.results == []

    def test_submit_after_close_is_ignored(self, stub_gateway, scheduler):
        dispatcher = make_dispatcher(stub_gateway, scheduler, Recorder())
        dispatcher.close()
        dispatcher.submit(TranslationRequest('Hello', 'en-US', 'es-ES'))

        assert scheduler.timers == []
