"""
JSON-backed translations and request locale resolution.

Catalogs live at <path>/<lang>/<namespace>.json and are addressed with
dotted keys: "common.ERROR.NOT_FOUND" -> locales/<lang>/common.json["ERROR"]["NOT_FOUND"].
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from starlette.requests import Request

DEFAULT_LOCALES_PATH = Path(__file__).resolve().parent / "locales"

LANG_QUERY_PARAM = "lang"
LANG_COOKIE = "lang"
LANG_HEADER = "x-lang"


class Translator:
    def __init__(self, path: Path | str = DEFAULT_LOCALES_PATH, fallback_language: str = "tr") -> None:
        self._catalogs = self._load(Path(path))
        if fallback_language not in self._catalogs:
            raise ValueError(
                f"Fallback language {fallback_language!r} has no catalog under {path}"
            )
        self._fallback = fallback_language

    @staticmethod
    def _load(path: Path) -> dict[str, dict[str, Any]]:
        catalogs: dict[str, dict[str, Any]] = {}
        for lang_dir in sorted(p for p in path.iterdir() if p.is_dir()):
            namespaces: dict[str, Any] = {}
            for file in sorted(lang_dir.glob("*.json")):
                with file.open(encoding="utf-8") as fh:
                    namespaces[file.stem] = json.load(fh)
            catalogs[lang_dir.name] = namespaces
        return catalogs

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self._catalogs)

    @property
    def fallback_language(self) -> str:
        return self._fallback

    def translate(self, key: str, lang: Optional[str] = None) -> str:
        """Look up `key` for `lang`; unknown keys come back unchanged."""
        catalog = self._catalogs.get(lang or self._fallback) or self._catalogs[self._fallback]
        node: Any = catalog
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return key
            node = node[part]
        return node if isinstance(node, str) else key


class LocaleResolver:
    """
    Picks the response language for a request.

    Checks the `lang` query parameter, the `lang` cookie, the X-Lang header
    and finally Accept-Language. Returns None when nothing matches a
    supported language, leaving the fallback to the caller.
    """

    def __init__(self, supported: Iterable[str]) -> None:
        self._supported = {lang.lower(): lang for lang in supported}

    def _match(self, tag: Optional[str]) -> Optional[str]:
        if not tag:
            return None
        tag = tag.strip().lower().replace("_", "-")
        if tag in self._supported:
            return self._supported[tag]
        return self._supported.get(tag.split("-")[0])

    @staticmethod
    def _accept_language(header: str) -> list[str]:
        weighted: list[tuple[float, str]] = []
        for item in header.split(","):
            lang, _, params = item.strip().partition(";")
            lang = lang.strip()
            if not lang or lang == "*":
                continue
            quality = 1.0
            params = params.strip()
            if params.startswith("q="):
                try:
                    quality = float(params[2:])
                except ValueError:
                    continue
            if quality > 0:
                weighted.append((quality, lang))
        weighted.sort(key=lambda pair: pair[0], reverse=True)
        return [lang for _, lang in weighted]

    def resolve(self, request: Request) -> Optional[str]:
        for hint in (
            request.query_params.get(LANG_QUERY_PARAM),
            request.cookies.get(LANG_COOKIE),
            request.headers.get(LANG_HEADER),
        ):
            lang = self._match(hint)
            if lang:
                return lang

        for tag in self._accept_language(request.headers.get("accept-language", "")):
            lang = self._match(tag)
            if lang:
                return lang
        return None
