from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from modelsearch.exceptions import ConfigurationError

LOCALE_ANALYZERS = {
    "en": "full_text_en",
    "lv": "full_text_lv",
    "ru": "russian",
}


@dataclass(frozen=True)
class LocaleSet:
    """Ordered locale codes plus the fallback locale."""

    codes: Tuple[str, ...]
    fallback: str

    @classmethod
    def of(cls, codes: Iterable[str], fallback: Optional[str] = None) -> "LocaleSet":
        codes = tuple(dict.fromkeys(code.strip() for code in codes if code and code.strip()))
        if not codes:
            raise ConfigurationError("At least one locale must be configured", "translatable.locales")
        fallback = fallback or codes[0]
        if fallback not in codes:
            raise ConfigurationError(
                f"Fallback locale '{fallback}' is not one of {list(codes)}", "translatable.fallback_locale"
            )
        return cls(codes=codes, fallback=fallback)

    def __iter__(self):
        return iter(self.codes)


def analyzer_for_locale(locale: str) -> str:
    """Language analyzer used for a locale-suffixed text field."""
    return LOCALE_ANALYZERS.get(locale, "standard")
