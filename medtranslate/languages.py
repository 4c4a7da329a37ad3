from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Language:
    code: str
    display_name: str
    # Name used when prompting the provider
    prompt_name: str


LANGUAGES = (
    Language('en-US', 'English (US)', 'English'),
    Language('es-ES', 'Spanish', 'Spanish'),
    Language('fr-FR', 'French', 'French'),
    Language('de-DE', 'German', 'German'),
    Language('it-IT', 'Italian', 'Italian'),
    Language('pt-PT', 'Portuguese', 'Portuguese'),
    Language('nl-NL', 'Dutch', 'Dutch'),
    Language('pl-PL', 'Polish', 'Polish'),
    Language('ru-RU', 'Russian', 'Russian'),
    Language('ja-JP', 'Japanese', 'Japanese'),
    Language('ko-KR', 'Korean', 'Korean'),
    Language('zh-CN', 'Chinese (Simplified)', 'Chinese (Simplified)'),
    Language('ar-SA', 'Arabic', 'Arabic'),
    Language('hi-IN', 'Hindi', 'Hindi'),
    Language('tr-TR', 'Turkish', 'Turkish'),
)

LANGUAGES_BY_CODE = {language.code: language for language in LANGUAGES}

DEFAULT_SOURCE_LANGUAGE = 'en-US'
DEFAULT_TARGET_LANGUAGE = 'es-ES'


class UnsupportedLanguageError(ValueError):
    def __init__(self, code):
        super().__init__(f"Unsupported language code: {code}")
        self.code = code


def resolve_language(code: Optional[str]) -> Optional[Language]:
    """
    Resolve a language code to a catalog entry.

    Exact codes win; otherwise the base code is matched, so 'es' and 'es-MX'
    both resolve to Spanish. Returns None for anything unknown.
    """
    if not code:
        return None

    if code in LANGUAGES_BY_CODE:
        return LANGUAGES_BY_CODE[code]

    base_code = code.replace('_', '-').split('-')[0].lower()
    for language in LANGUAGES:
        if language.code.split('-')[0].lower() == base_code:
            return language

    return None


def require_language(code: Optional[str]) -> Language:
    language = resolve_language(code)
    if language is None:
        raise UnsupportedLanguageError(code)
    return language


def language_options() -> List[dict]:
    return [{'code': language.code, 'name': language.display_name} for language in LANGUAGES]
