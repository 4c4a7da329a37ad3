import base64
import logging
import threading
import time
from typing import Any, Dict, List, Optional

from openai import OpenAI

from medtranslate.config import config
from medtranslate.languages import UnsupportedLanguageError, require_language
from medtranslate.prompts import (
    CHAT_SYSTEM_PROMPT,
    REPORT_ANALYSIS_INSTRUCTION,
    REPORT_SYSTEM_PROMPT,
    TRANSLATION_SYSTEM_PROMPT,
    translation_prompt,
)

logger = logging.getLogger(__name__)

TEXT_MIME_TYPES = ('text/plain',)
PDF_MIME_TYPES = ('application/pdf',)
IMAGE_MIME_PREFIX = 'image/'
SUPPORTED_REPORT_TYPES = TEXT_MIME_TYPES + PDF_MIME_TYPES


class ProviderUnavailable(Exception):
    pass


class EmptyResponse(Exception):
    pass


# Circuit breaker configuration
class CircuitBreaker:
    def __init__(self, failure_threshold=5, reset_timeout=60, clock=time.monotonic):
        self.failure_count = 0
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.last_failure_time = None
        self.state = "closed"  # closed, open, half-open
        self._clock = clock
        self._lock = threading.Lock()

    def record_failure(self):
        with self._lock:
            self.failure_count += 1
            self.last_failure_time = self._clock()
            if self.failure_count >= self.failure_threshold and self.state != "open":
                self.state = "open"
                logger.warning(f"Circuit breaker opened due to {self.failure_count} failures")

    def record_success(self):
        with self._lock:
            if self.state != "closed":
                logger.warning("Circuit breaker closed after successful provider call")
            self.failure_count = 0
            self.state = "closed"

    def can_execute(self):
        with self._lock:
            if self.state == "closed":
                return True
            if self.state == "open":
                if self._clock() - self.last_failure_time > self.reset_timeout:
                    self.state = "half-open"
                    logger.warning("Circuit breaker half-open, allowing a trial call")
                    return True
                return False
            return self.state == "half-open"

    def reset(self):
        with self._lock:
            self.failure_count = 0
            self.last_failure_time = None
            self.state = "closed"


# Initialize circuit breaker shared by every provider call
provider_breaker = CircuitBreaker(
    failure_threshold=config.circuit_failure_threshold,
    reset_timeout=config.circuit_reset_timeout
)

_client: Optional[OpenAI] = None
_client_lock = threading.Lock()


def get_client() -> OpenAI:
    """Lazily build the OpenAI client so a missing key only fails provider calls."""
    global _client
    with _client_lock:
        if _client is None:
            _client = OpenAI(api_key=config.openai_api_key)
        return _client


def _complete(messages: List[Dict[str, Any]], **options) -> str:
    """
    Run one chat completion through the circuit breaker and return its text.

    Raises:
        ProviderUnavailable: If the breaker is open.
        EmptyResponse: If the provider answered with no content.
    """
    if not provider_breaker.can_execute():
        raise ProviderUnavailable("Translation provider is temporarily unavailable")

    try:
        response = get_client().chat.completions.create(
            model=config.openai_model,
            messages=messages,
            **options
        )
    except Exception:
        provider_breaker.record_failure()
        raise

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        provider_breaker.record_failure()
        raise EmptyResponse("Provider returned an empty response")

    provider_breaker.record_success()
    return content.strip()


def _strip_wrapping_quotes(translation: str, original: str) -> str:
    quoted = len(translation) >= 2 and translation[0] == translation[-1] == '"'
    if quoted and not original.strip().startswith('"'):
        return translation[1:-1].strip()
    return translation


def translate_text(text, source_lang, target_lang):
    """
    Translate text between two catalog languages, preserving medical meaning
    """
    try:
        source = require_language(source_lang)
        target = require_language(target_lang)

        if not text or not text.strip():
            return {
                'error': 'empty_text',
                'message': 'Nothing to translate'
            }

        translation = _complete(
            [
                {"role": "system", "content": TRANSLATION_SYSTEM_PROMPT},
                {"role": "user", "content": translation_prompt(text, source.prompt_name, target.prompt_name)}
            ],
            temperature=config.translation_temperature
        )

        return {
            'text': _strip_wrapping_quotes(translation, text),
            'source_lang': source.code,
            'target_lang': target.code
        }

    except UnsupportedLanguageError as e:
        logger.info(f"Language code error: {str(e)}")
        return {
            'error': 'invalid_language',
            'message': str(e)
        }
    except ProviderUnavailable as e:
        logger.warning(f"Translation skipped: {str(e)}")
        return {
            'error': 'provider_unavailable',
            'message': str(e)
        }
    except EmptyResponse as e:
        logger.error(f"Translation error: {str(e)}")
        return {
            'error': 'empty_response',
            'message': str(e)
        }
    except Exception as e:
        logger.error(f"Translation error: {str(e)}", exc_info=True)
        return {
            'error': 'translation_failed',
            'message': str(e)
        }


def chat_reply(message):
    """
    Answer a general health question as the medical assistant
    """
    try:
        if not message or not message.strip():
            return {
                'error': 'empty_message',
                'message': 'Message is required'
            }

        reply = _complete([
            {"role": "system", "content": CHAT_SYSTEM_PROMPT},
            {"role": "user", "content": message}
        ])
        return {'text': reply}

    except ProviderUnavailable as e:
        logger.warning(f"Chat skipped: {str(e)}")
        return {
            'error': 'provider_unavailable',
            'message': str(e)
        }
    except EmptyResponse as e:
        logger.error(f"Chat error: {str(e)}")
        return {
            'error': 'empty_response',
            'message': str(e)
        }
    except Exception as e:
        logger.error(f"Chat error: {str(e)}", exc_info=True)
        return {
            'error': 'chat_failed',
            'message': str(e)
        }


def normalize_mime_type(mime_type):
    if not mime_type:
        return ''
    return mime_type.split(';')[0].strip().lower()


def is_supported_report_type(mime_type):
    """Plain text, PDF and any image/* subtype."""
    if mime_type in SUPPORTED_REPORT_TYPES:
        return True
    return mime_type.startswith(IMAGE_MIME_PREFIX) and len(mime_type) > len(IMAGE_MIME_PREFIX)


def _report_content(file_bytes: bytes, mime_type: str) -> List[Dict[str, Any]]:
    if mime_type in TEXT_MIME_TYPES:
        report_text = file_bytes.decode('utf-8', errors='replace').strip()
        if not report_text:
            raise ValueError("Report text is empty")
        return [{"type": "text", "text": f"{REPORT_ANALYSIS_INSTRUCTION}\n\n{report_text}"}]

    encoded = base64.b64encode(file_bytes).decode('ascii')
    data_url = f"data:{mime_type};base64,{encoded}"

    if mime_type in PDF_MIME_TYPES:
        attachment = {"type": "file", "file": {"filename": "report.pdf", "file_data": data_url}}
    else:
        attachment = {"type": "image_url", "image_url": {"url": data_url}}

    return [attachment, {"type": "text", "text": REPORT_ANALYSIS_INSTRUCTION}]


def analyze_report(file_bytes, mime_type):
    """
    Analyze an uploaded medical report (plain text, image or PDF)
    """
    mime_type = normalize_mime_type(mime_type)
    try:
        if not is_supported_report_type(mime_type):
            return {
                'error': 'unsupported_file_type',
                'message': f"Unsupported report type: {mime_type or 'unknown'}"
            }

        if not file_bytes:
            return {
                'error': 'empty_file',
                'message': 'Report file is empty'
            }

        try:
            content = _report_content(file_bytes, mime_type)
        except ValueError as e:
            return {
                'error': 'empty_file',
                'message': str(e)
            }

        analysis = _complete(
            [
                {"role": "system", "content": REPORT_SYSTEM_PROMPT},
                {"role": "user", "content": content}
            ],
            temperature=config.report_temperature,
            top_p=0.95,
            max_tokens=config.report_max_tokens
        )
        return {'text': analysis}

    except ProviderUnavailable as e:
        logger.warning(f"Report analysis skipped: {str(e)}")
        return {
            'error': 'provider_unavailable',
            'message': str(e)
        }
    except EmptyResponse as e:
        logger.error(f"Report analysis error: {str(e)}")
        return {
            'error': 'empty_response',
            'message': str(e)
        }
    except Exception as e:
        logger.error(f"Error analyzing medical report: {str(e)}", exc_info=True)
        return {
            'error': 'analysis_failed',
            'message': str(e)
        }
