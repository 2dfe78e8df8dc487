"""Languages offered for native and target selection."""

from typing import NamedTuple, Optional


class Language(NamedTuple):
    code: str
    english: str
    native: str


LANGUAGES = sorted([
    Language("en", "English", "English"),
    Language("es", "Spanish", "Español"),
    Language("fr", "French", "Français"),
    Language("de", "German", "Deutsch"),
    Language("it", "Italian", "Italiano"),
    Language("pt", "Portuguese", "Português"),
    Language("ru", "Russian", "Русский"),
    Language("zh", "Chinese", "中文"),
    Language("ja", "Japanese", "日本語"),
    Language("ko", "Korean", "한국어"),
    Language("ar", "Arabic", "العربية"),
    Language("hi", "Hindi", "हिन्दी"),
    Language("nl", "Dutch", "Nederlands"),
    Language("sv", "Swedish", "Svenska"),
    Language("no", "Norwegian", "Norsk"),
], key=lambda lang: lang.english)


def language_for_code(code: str) -> Optional[Language]:
    return next((lang for lang in LANGUAGES if lang.code == code), None)


def match_language(text: str) -> Optional[Language]:
    """Find a language by its English or native name, ignoring case."""
    needle = text.strip().casefold()
    return next(
        (lang for lang in LANGUAGES if lang.english.casefold() == needle or lang.native.casefold() == needle),
        None,
    )
