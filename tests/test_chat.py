from medtranslate.chat import WELCOME_ID, ChatSession
from medtranslate.notices import DESTRUCTIVE


class TestChatSession:

    def test_starts_with_welcome_message(self):
        chat = ChatSession(lambda message: {'text': 'ok'})

        assert [m.id for m in chat.messages] == [WELCOME_ID]
        assert chat.history()[0]['is_user'] is False

    def test_send_appends_user_and_reply(self):
        asked = []

        def reply(message):
            asked.append(message)
            return {'text': 'Drink plenty of water.'}

        chat = ChatSession(reply)
        answer = chat.send('How do I stay hydrated?')

        assert asked == ['How do I stay hydrated?']
        assert answer.content == 'Drink plenty of water.'
        assert [m.is_user for m in chat.messages] == [False, True, False]
        assert not chat.loading

    def test_blank_message_is_ignored(self):
        chat = ChatSession(lambda message: {'text': 'ok'})

        assert chat.send('   ') is None
        assert len(chat.messages) == 1

    def test_failure_publishes_notice_once(self):
        chat = ChatSession(lambda message: {'error': 'chat_failed', 'message': 'boom'})
        received = []
        chat.notices.subscribe(received.append)

        assert chat.send('Hello') is None

        assert len(received) == 1
        assert received[0].variant == DESTRUCTIVE
        assert [m.is_user for m in chat.messages] == [False, True]

    def test_exception_from_reply_is_a_failure(self):
        def reply(message):
            raise RuntimeError('provider down')

        chat = ChatSession(reply)
        assert chat.send('Hello') is None
        assert not chat.loading

    def test_send_while_loading_is_ignored(self):
        def reply(message):
            assert chat.send('second') is None
            return {'text': 'first answer'}

        chat = ChatSession(reply)
        chat.send('first')

        assert [m.content for m in chat.messages][1:] == ['first', 'first answer']

    def test_reset_restores_welcome(self):
        chat = ChatSession(lambda message: {'text': 'ok'})
        received = []
        chat.notices.subscribe(received.append)
        chat.send('Hello')

        chat.reset()

        assert [m.id for m in chat.messages] == [WELCOME_ID]
        assert received[-1].title == "Chat Refreshed"

    def test_history_published_before_and_after_reply(self):
        published = []

        def reply(message):
            # The user's message is already visible while the reply is pending
            assert [[m['is_user'] for m in h] for h in published] == [[False, True]]
            return {'text': 'Rest and fluids.'}

        chat = ChatSession(reply, on_change=published.append)
        chat.send('I have a cold')

        assert [[m['is_user'] for m in h] for h in published] == [[False, True], [False, True, False]]
        assert published[-1][-1]['content'] == 'Rest and fluids.'

    def test_failed_reply_publishes_user_message_only(self):
        published = []
        chat = ChatSession(lambda message: {'error': 'chat_failed', 'message': 'boom'},
                           on_change=published.append)

        chat.send('Hello')

        assert [[m['is_user'] for m in h] for h in published] == [[False, True]]

    def test_reset_publishes_welcome_history(self):
        published = []
        chat = ChatSession(lambda message: {'text': 'ok'}, on_change=published.append)
        chat.send('Hello')

        chat.reset()

        assert [m['id'] for m in published[-1]] == [WELCOME_ID]
