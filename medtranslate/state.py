from dataclasses import asdict, dataclass, replace

from medtranslate.languages import DEFAULT_SOURCE_LANGUAGE, DEFAULT_TARGET_LANGUAGE


@dataclass(frozen=True)
class SessionState:
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    target_language: str = DEFAULT_TARGET_LANGUAGE
    original_text: str = ''
    translated_text: str = ''
    pending: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def swapped(state: SessionState) -> SessionState:
    """Exchange languages and their texts in one step; pending is untouched."""
    return replace(
        state,
        source_language=state.target_language,
        target_language=state.source_language,
        original_text=state.translated_text,
        translated_text=state.original_text,
    )
