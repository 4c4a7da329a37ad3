from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TranslationRequest:
    text: str
    source_language: str
    target_language: str


@dataclass(frozen=True)
class TranslationResult:
    """Either translated_text or error_reason is set, never both."""
    translated_text: Optional[str] = None
    error_reason: Optional[str] = None

    def __post_init__(self):
        if (self.translated_text is None) == (self.error_reason is None):
            raise ValueError("TranslationResult needs exactly one of translated_text or error_reason")

    @property
    def ok(self) -> bool:
        return self.error_reason is None

    @classmethod
    def success(cls, text: str) -> 'TranslationResult':
        return cls(translated_text=text)

    @classmethod
    def failure(cls, reason: str) -> 'TranslationResult':
        return cls(error_reason=reason)

    @classmethod
    def from_response(cls, response: dict) -> 'TranslationResult':
        """Build a result from a gateway response dict."""
        if not isinstance(response, dict):
            return cls.failure('invalid_response')
        if 'error' in response:
            return cls.failure(response.get('message') or response['error'])
        text = response.get('text')
        if text is None:
            return cls.failure('invalid_response')
        return cls.success(text)
