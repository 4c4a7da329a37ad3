from medtranslate.config import config, configure_logging

if config.socketio_async_mode == 'eventlet':
    import eventlet
    eventlet.monkey_patch()

import logging
import os
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_socketio import SocketIO, emit
from werkzeug.exceptions import RequestEntityTooLarge

from medtranslate import gateway
from medtranslate.chat import ChatSession
from medtranslate.languages import UnsupportedLanguageError, language_options
from medtranslate.notices import NoticeChannel
from medtranslate.scheduling import SocketIOScheduler
from medtranslate.session import TranslationSession

configure_logging(config.log_level)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = os.urandom(24)
app.config['MAX_CONTENT_LENGTH'] = config.max_content_length

# Configure CORS for both REST and WebSocket
CORS(app, resources={
    r"/*": {
        "origins": config.cors_origins,
        "allow_headers": ["Content-Type"],
        "methods": ["GET", "POST", "OPTIONS"]
    }
})

# Initialize SocketIO with CORS support
socketio = SocketIO(app,
                    async_mode=config.socketio_async_mode,
                    cors_allowed_origins=config.cors_origins,
                    ping_timeout=60,
                    ping_interval=25)


class ClientSession:
    """Everything one connected client owns; torn down on disconnect."""

    def __init__(self, sid):
        self.sid = sid
        self.notices = NoticeChannel()
        self.notices.subscribe(self._send_notice)
        self.translation = TranslationSession(
            gateway.translate_text,
            SocketIOScheduler(socketio),
            notices=self.notices,
            on_change=self._send_state,
            quiet_interval=config.debounce_seconds
        )
        self.chat = ChatSession(gateway.chat_reply, notices=self.notices, on_change=self._send_history)

    def _send_state(self, state):
        socketio.emit('session_state', state, to=self.sid)

    def _send_history(self, messages):
        socketio.emit('chat_history', {'messages': messages}, to=self.sid)

    def _send_notice(self, notice):
        socketio.emit('notice', notice.to_dict(), to=self.sid)

    def close(self):
        self.translation.close()
        self.notices.close()


sessions = {}
sessions_lock = threading.Lock()


def current_session():
    with sessions_lock:
        return sessions.get(request.sid)


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})


@app.route('/api/languages')
def languages():
    return jsonify({'languages': language_options()})


@app.route('/api/translate', methods=['POST'])
def translate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    text = data.get('text')
    source_lang = data.get('sourceLanguage')
    target_lang = data.get('targetLanguage')

    params = (text, source_lang, target_lang)
    if not all(isinstance(value, str) and value.strip() for value in params):
        return jsonify({'error': 'Missing required parameters'}), 400

    translation = gateway.translate_text(text, source_lang, target_lang)

    if 'error' in translation:
        if translation['error'] == 'invalid_language':
            return jsonify({'error': translation['message']}), 400
        return jsonify({'error': 'Failed to translate text'}), 500

    return jsonify({'translation': translation['text']})


@app.route('/api/chat', methods=['POST'])
def chat():
    data = request.get_json(silent=True) or {}
    message = data.get('message')

    if not message or not str(message).strip():
        return jsonify({'error': 'Message is required'}), 400

    reply = gateway.chat_reply(str(message))

    if 'error' in reply:
        return jsonify({'error': 'Failed to get response'}), 500

    return jsonify({'response': reply['text']})


@app.route('/api/analyze-report', methods=['POST'])
def analyze_report():
    file = request.files.get('file')

    if file is None:
        return jsonify({'error': 'No file provided'}), 400

    analysis = gateway.analyze_report(file.read(), file.mimetype)

    if 'error' in analysis:
        if analysis['error'] in ('unsupported_file_type', 'empty_file'):
            return jsonify({'error': analysis['message']}), 400
        return jsonify({'error': 'Failed to analyze medical report'}), 500

    return jsonify({'analysis': analysis['text']})


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(e):
    return jsonify({'error': f"File exceeds the {config.max_upload_mb} MB upload limit"}), 413


@socketio.on('connect')
def handle_connect():
    client = ClientSession(request.sid)
    with sessions_lock:
        sessions[request.sid] = client
    emit('connection_response', {'data': 'Connected'})
    emit('session_state', client.translation.snapshot())
    emit('chat_history', {'messages': client.chat.history()})


@socketio.on('disconnect')
def handle_disconnect(*args):
    with sessions_lock:
        client = sessions.pop(request.sid, None)
    if client is not None:
        client.close()
    logger.info('Client disconnected')


@socketio.on('transcript_changed')
def handle_transcript(data):
    try:
        client = current_session()
        if client is None:
            return
        data = data or {}
        client.translation.set_text(str(data.get('text') or ''))
    except Exception as e:
        logger.error(f"Transcript update failed: {str(e)}", exc_info=True)
        emit('translation_error', {
            'error': 'system_error',
            'message': str(e)
        })


@socketio.on('set_languages')
def handle_set_languages(data):
    try:
        client = current_session()
        if client is None:
            return
        data = data or {}
        client.translation.set_languages(data.get('source_lang'), data.get('target_lang'))
    except UnsupportedLanguageError as e:
        emit('language_error', {
            'error': 'invalid_language',
            'message': str(e)
        })
    except Exception as e:
        logger.error(f"Language update failed: {str(e)}", exc_info=True)
        emit('translation_error', {
            'error': 'system_error',
            'message': str(e)
        })


@socketio.on('swap_languages')
def handle_swap_languages(*args):
    try:
        client = current_session()
        if client is None:
            return
        client.translation.swap_languages()
    except Exception as e:
        logger.error(f"Language swap failed: {str(e)}", exc_info=True)
        emit('translation_error', {
            'error': 'system_error',
            'message': str(e)
        })


@socketio.on('chat_message')
def handle_chat_message(data):
    try:
        client = current_session()
        if client is None:
            return
        data = data or {}
        client.chat.send(str(data.get('message') or ''))
    except Exception as e:
        logger.error(f"Chat message failed: {str(e)}", exc_info=True)
        emit('chat_error', {
            'error': 'system_error',
            'message': str(e)
        })


@socketio.on('chat_reset')
def handle_chat_reset(*args):
    try:
        client = current_session()
        if client is None:
            return
        client.chat.reset()
    except Exception as e:
        logger.error(f"Chat reset failed: {str(e)}", exc_info=True)
        emit('chat_error', {
            'error': 'system_error',
            'message': str(e)
        })


if __name__ == '__main__':
    socketio.run(app, host=config.host, port=config.port)
