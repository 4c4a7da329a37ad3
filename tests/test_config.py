import pytest

from medtranslate.config import Config


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ('OPENAI_MODEL', 'DEBOUNCE_MS', 'MAX_UPLOAD_MB', 'LOG_LEVEL'):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv('SOCKETIO_ASYNC_MODE', 'threading')

        config = Config()

        assert config.openai_model == 'gpt-4o-mini'
        assert config.debounce_seconds == 0.5
        assert config.max_content_length == 10 * 1024 * 1024
        assert config.log_level == 'INFO'

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv('DEBOUNCE_MS', '250')
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        monkeypatch.setenv('SOCKETIO_ASYNC_MODE', 'threading')

        config = Config()

        assert config.debounce_seconds == 0.25
        assert config.log_level == 'DEBUG'

    @pytest.mark.parametrize('name, value, match', [
        ('SOCKETIO_ASYNC_MODE', 'asyncio', 'Invalid SocketIO async mode'),
        ('LOG_LEVEL', 'LOUD', 'Invalid log level'),
        ('DEBOUNCE_MS', '-1', 'Debounce interval'),
        ('CIRCUIT_FAILURE_THRESHOLD', '0', 'Circuit failure threshold'),
        ('TRANSLATION_TEMPERATURE', '3', 'Translation temperature'),
        ('MAX_UPLOAD_MB', '0', 'Max upload size'),
    ])
    def test_invalid_values(self, monkeypatch, name, value, match):
        monkeypatch.setenv('SOCKETIO_ASYNC_MODE', 'threading')
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError, match=match):
            Config()
