# core/locale_manager.py

import json
from typing import Dict, Any, List
import importlib.resources as pkg_resources
from nicegui import app
from flashwise.core.log_manager import logger

# The reference to the directory where locale files (e.g., en.json) are stored.
I18N_PACKAGE_REF = pkg_resources.files('flashwise.i18n')

FALLBACK_LOCALE = 'en'

class LocaleManager:
    """
    Loads every <locale>.json shipped in flashwise/i18n and translates keys
    for the locale stored in the NiceGUI user session ('ui_language').
    """

    def __init__(self):
        self._all_translations: Dict[str, Dict[str, str]] = {}

        # Fallback first so lookups always have something to fall back on
        self._fallback_translations = self._load_translations(FALLBACK_LOCALE)
        self._all_translations[FALLBACK_LOCALE] = self._fallback_translations

        for path in I18N_PACKAGE_REF.iterdir():
            if path.name.endswith('.json'):
                locale_code = path.name[:-len('.json')]
                if locale_code not in self._all_translations:
                    self._all_translations[locale_code] = self._load_translations(locale_code)

        logger.info(f"LocaleManager initialized. Supported: {list(self._all_translations.keys())}. Fallback: {FALLBACK_LOCALE}")

    def _load_translations(self, locale: str) -> Dict[str, str]:
        file_name = f'{locale}.json'
        try:
            with (I18N_PACKAGE_REF / file_name).open('r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Translation resource not found for locale '{locale}' ({file_name}).")
            return {}
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON format in file for locale '{locale}': {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Translation file for locale '{locale}' must contain a JSON object.")
            return {}
        return data

    @property
    def supported_locales(self) -> List[str]:
        return list(self._all_translations.keys())

    def _current_locale(self) -> str:
        try:
            return app.storage.user.get('ui_language', FALLBACK_LOCALE)
        except RuntimeError:
            # No request context (startup, background tasks, tests)
            return FALLBACK_LOCALE

    def T(self, key: str, use_fallback: bool = False, **kwargs: Any) -> str:
        """
        Translates `key` and interpolates kwargs with str.format.
        Missing keys fall back to the default locale, then to a visible "!! key !!" marker.
        """
        current_locale = FALLBACK_LOCALE if use_fallback else self._current_locale()

        translated_string = self._all_translations.get(current_locale, {}).get(key)

        if translated_string is None:
            translated_string = self._fallback_translations.get(key)
            if translated_string is None:
                logger.warning(f"Missing translation key '{key}' in both current and fallback locales.")
                return f"!! {key} !!"

        if kwargs:
            try:
                return translated_string.format(**kwargs)
            except (KeyError, IndexError, ValueError) as e:
                logger.error(f"Formatting failed for key '{key}' in locale '{current_locale}': {e}")
                return translated_string

        return translated_string

# Create a globally accessible singleton instance
global_locale_manager = LocaleManager()

# Define the short alias for translation for ease of use in UI files
T = global_locale_manager.T

SUPPORTED_LOCALES = global_locale_manager.supported_locales
