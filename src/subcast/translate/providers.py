"""Text translation providers.

Every provider has the same contract: ``translate(text, source, target)``
returns the translated text or raises ProviderError. Source may be "auto".
"""

from __future__ import annotations

from typing import Protocol

import requests

from subcast.core.config import TranslationConfig
from subcast.core.errors import ProviderError
from subcast.core.languages import AUTO, base_language


class TranslationProvider(Protocol):
    name: str

    def translate(self, text: str, source: str, target: str) -> str: ...


class MyMemoryProvider:
    """MyMemory public API (GET, ``langpair=src|tgt``)."""

    name = "mymemory"

    def __init__(self, session: requests.Session, url: str, timeout: float = 9.0):
        self.session = session
        self.url = url
        self.timeout = timeout

    def translate(self, text: str, source: str, target: str) -> str:
        try:
            response = self.session.get(
                self.url,
                params={"q": text, "langpair": f"{source}|{target}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"{self.name}: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(f"{self.name}: unexpected response")

        # MyMemory reports errors in-band, e.g. "PLEASE SELECT TWO DISTINCT LANGUAGES"
        status = data.get("responseStatus")
        if status is not None and str(status) != "200":
            raise ProviderError(f"{self.name}: status {status}: {data.get('responseDetails')}")
        translated = (data.get("responseData") or {}).get("translatedText")
        if not translated or not str(translated).strip():
            raise ProviderError(f"{self.name}: empty translation")
        return str(translated)


class LibreTranslateProvider:
    """A LibreTranslate instance (POST JSON)."""

    def __init__(self, session: requests.Session, url: str, timeout: float = 8.0):
        self.session = session
        self.url = url
        self.timeout = timeout
        self.name = f"libretranslate({url})"

    def translate(self, text: str, source: str, target: str) -> str:
        body = {
            "q": text,
            "source": AUTO if source == AUTO else base_language(source),
            "target": base_language(target),
            "format": "text",
        }
        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"{self.name}: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(f"{self.name}: unexpected response")

        # Some mirrors answer with "translated" instead of "translatedText"
        translated = data.get("translatedText") or data.get("translated")
        if not translated or not str(translated).strip():
            raise ProviderError(f"{self.name}: empty translation")
        return str(translated)


TRANSLATION_SYSTEM = """\
You are a subtitle translator. Translate the user's subtitle line from \
{source} to {target}. Reply with the translation only: no quotes, no notes, \
no transliteration."""


class LLMProvider:
    """Translate through a LiteLLM-supported chat model."""

    def __init__(self, config: TranslationConfig):
        if not config.llm_model:
            raise ValueError("LLMProvider requires translation.llm_model")
        self.config = config
        self.name = f"llm({config.llm_model})"

    def translate(self, text: str, source: str, target: str) -> str:
        from subcast.translate.client import complete

        source_label = "the detected language" if source == AUTO else source
        messages = [
            {
                "role": "system",
                "content": TRANSLATION_SYSTEM.format(source=source_label, target=target),
            },
            {"role": "user", "content": text},
        ]
        try:
            reply = complete(
                messages,
                model=self.config.llm_model,
                api_base=self.config.llm_api_base,
                temperature=self.config.llm_temperature,
                max_tokens=self.config.llm_max_tokens,
            )
        except ImportError:
            raise
        except Exception as e:
            raise ProviderError(f"{self.name}: {e}") from e
        if not reply.strip():
            raise ProviderError(f"{self.name}: empty translation")
        return reply.strip()


def build_providers(
    config: TranslationConfig, session: requests.Session | None = None
) -> tuple[TranslationProvider, list[TranslationProvider]]:
    """Create the primary provider and the ordered mirror list from config."""
    session = session or requests.Session()
    primary = MyMemoryProvider(session, config.mymemory_url, timeout=config.request_timeout)
    urls = [config.primary_mirror, *config.mirrors]
    mirrors: list[TranslationProvider] = [
        LibreTranslateProvider(session, url, timeout=config.mirror_timeout) for url in urls if url
    ]
    if config.llm_model:
        mirrors.append(LLMProvider(config))
    return primary, mirrors
