"""Language code to display name lookup."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

import pycountry

# Locales the tool is routinely run against.
COMMON_LANGUAGES = {
    "af": "Afrikaans",
    "am": "Amharic",
    "ar": "Arabic",
    "bg": "Bulgarian",
    "bn": "Bengali",
    "ca": "Catalan",
    "cs": "Czech",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "es": "Spanish",
    "et": "Estonian",
    "fa": "Persian",
    "fi": "Finnish",
    "fil": "Filipino",
    "fr": "French",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "hu": "Hungarian",
    "id": "Indonesian",
    "is": "Icelandic",
    "it": "Italian",
    "ja": "Japanese",
    "ka": "Georgian",
    "km": "Khmer",
    "ko": "Korean",
    "lo": "Lao",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "ms": "Malay",
    "my": "Burmese",
    "nl": "Dutch",
    "no": "Norwegian",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "si": "Sinhala",
    "sk": "Slovak",
    "sv": "Swedish",
    "ta": "Tamil",
    "te": "Telugu",
    "th": "Thai",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "zh": "Chinese",
    "zh-cn": "Chinese (Simplified)",
    "zh-tw": "Chinese (Traditional)",
}


def get_language_name(code: str) -> str:
    """
    Get the full language name from a language code.

    Looks in the common table first, then ISO 639-1 and ISO 639-3 via pycountry.

    Args:
        code: Language code (e.g., 'de', 'fil', 'zh-tw')

    Returns:
        Full language name (e.g., 'German', 'Filipino')

    Raises:
        ValueError: If the language code is not recognized
    """
    code_lower = code.lower()
    if code_lower in COMMON_LANGUAGES:
        return COMMON_LANGUAGES[code_lower]

    language = pycountry.languages.get(alpha_2=code_lower)
    if language:
        return language.name

    language = pycountry.languages.get(alpha_3=code_lower)
    if language:
        return language.name

    raise ValueError(f"Unknown language code: {code}")


class LanguageRegistry:
    """
    Read-only lookup of display names, used for reporting only.

    Unknown codes are shown as the raw code. With ``use_pycountry`` the
    registry also resolves any ISO 639 code missing from its table.
    """

    def __init__(self, names: Mapping[str, str] | None = None, use_pycountry: bool = False):
        self._names = MappingProxyType({k.lower(): v for k, v in (names or {}).items()})
        self._use_pycountry = use_pycountry

    @classmethod
    def default(cls) -> LanguageRegistry:
        return cls(COMMON_LANGUAGES, use_pycountry=True)

    def __contains__(self, code: str) -> bool:
        return self.lookup(code) is not None

    def lookup(self, code: str) -> str | None:
        name = self._names.get(code.lower())
        if name is None and self._use_pycountry:
            try:
                name = get_language_name(code)
            except ValueError:
                name = None
        return name

    def display_name(self, code: str) -> str:
        return self.lookup(code) or code

    def describe(self, code: str) -> str:
        """Format as 'Name (code)', as shown in progress lines and reports."""
        return f"{self.display_name(code)} ({code})"
