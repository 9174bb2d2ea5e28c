"""
Localization: translation catalogs and request locale resolution
"""
from api_envelope.i18n.translator import DEFAULT_LOCALES_PATH, LocaleResolver, Translator

__all__ = [
    "DEFAULT_LOCALES_PATH",
    "LocaleResolver",
    "Translator",
]
