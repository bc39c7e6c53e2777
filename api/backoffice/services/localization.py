"""Message catalog lookup for flashes and UI strings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "messages"


class Translator:
    """Translate message keys using flat JSON catalogs.

    Catalogs live in ``{directory}/{domain}.{locale}.json``. A key missing
    from the active locale falls back to the fallback locale, then to the
    key itself. Variables are substituted by literal replacement of their
    placeholder name, e.g. ``{"%name%": "Leads"}``.
    """

    def __init__(self, directory: str, locale: str = "en", fallback_locale: str = "en"):
        self.directory = Path(directory)
        self.locale = locale
        self.fallback_locale = fallback_locale
        self._catalogs: Dict[tuple[str, str], Dict[str, str]] = {}

    def translate(
        self,
        key: str,
        variables: Optional[Mapping[str, str]] = None,
        domain: str = DEFAULT_DOMAIN,
        locale: Optional[str] = None,
    ) -> str:
        message = self._lookup(key, domain, locale or self.locale)
        if message is None and (locale or self.locale) != self.fallback_locale:
            message = self._lookup(key, domain, self.fallback_locale)
        if message is None:
            logger.debug(f"Missing translation for '{key}' in domain '{domain}'")
            message = key

        for placeholder, value in (variables or {}).items():
            message = message.replace(placeholder, str(value))
        return message

    def _lookup(self, key: str, domain: str, locale: str) -> Optional[str]:
        return self._catalog(domain, locale).get(key)

    def _catalog(self, domain: str, locale: str) -> Dict[str, str]:
        cache_key = (domain, locale)
        if cache_key not in self._catalogs:
            self._catalogs[cache_key] = self._load(domain, locale)
        return self._catalogs[cache_key]

    def _load(self, domain: str, locale: str) -> Dict[str, str]:
        path = self.directory / f"{domain}.{locale}.json"
        if not path.exists():
            return {}
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"Translation catalog {path} must be a JSON object")
        logger.info(f"Loaded {len(data)} messages from {path.name}")
        return {str(k): str(v) for k, v in data.items()}
