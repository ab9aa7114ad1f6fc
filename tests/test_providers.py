"""Tests for translation providers."""

from unittest.mock import patch

import pytest
import requests
from conftest import FakeResponse, FakeSession

from subcast.core.config import TranslationConfig
from subcast.core.errors import ProviderError
from subcast.core.models import Cue
from subcast.translate.engine import TranslationEngine
from subcast.translate.providers import (
    LibreTranslateProvider,
    LLMProvider,
    MyMemoryProvider,
    build_providers,
)

MYMEMORY = "https://mymemory.test/get"
LIBRE = "https://libre.test/translate"


class TestMyMemory:
    def test_success(self):
        session = FakeSession(
            FakeResponse(json_data={"responseStatus": 200, "responseData": {"translatedText": "Hola"}})
        )
        provider = MyMemoryProvider(session, MYMEMORY)
        assert provider.translate("Hello", "en", "es") == "Hola"
        _, url, kwargs = session.calls[0]
        assert url == MYMEMORY
        assert kwargs["params"] == {"q": "Hello", "langpair": "en|es"}

    def test_in_band_error(self):
        session = FakeSession(
            FakeResponse(
                json_data={
                    "responseStatus": "403",
                    "responseDetails": "PLEASE SELECT TWO DISTINCT LANGUAGES",
                    "responseData": {"translatedText": "PLEASE SELECT TWO DISTINCT LANGUAGES"},
                }
            )
        )
        with pytest.raises(ProviderError, match="403"):
            MyMemoryProvider(session, MYMEMORY).translate("Hello", "en", "en")

    def test_empty_translation(self):
        session = FakeSession(FakeResponse(json_data={"responseData": {"translatedText": "  "}}))
        with pytest.raises(ProviderError, match="empty"):
            MyMemoryProvider(session, MYMEMORY).translate("Hello", "en", "es")

    def test_network_error(self):
        session = FakeSession(requests.ConnectionError("refused"))
        with pytest.raises(ProviderError):
            MyMemoryProvider(session, MYMEMORY).translate("Hello", "en", "es")

    def test_invalid_json(self):
        session = FakeSession(FakeResponse(json_data=ValueError("not json")))
        with pytest.raises(ProviderError):
            MyMemoryProvider(session, MYMEMORY).translate("Hello", "en", "es")

    def test_non_object_json(self):
        """A 200 reply whose JSON is not an object is a provider failure."""
        session = FakeSession(FakeResponse(json_data=["quota"]))
        with pytest.raises(ProviderError, match="unexpected response"):
            MyMemoryProvider(session, MYMEMORY).translate("Hello", "en", "es")

    def test_engine_keeps_text_on_non_object_json(self):
        session = FakeSession(FakeResponse(json_data=["quota"]), FakeResponse(json_data=None))
        provider = MyMemoryProvider(session, MYMEMORY)
        engine = TranslationEngine(provider, config=TranslationConfig(delay=0.0))
        cues = [
            Cue(index=1, start=0.0, end=1.0, text="Hello"),
            Cue(index=2, start=1.0, end=2.0, text="Bye"),
        ]
        outcome = engine.translate(cues, "en", "es")
        assert [c.text for c in outcome.cues] == ["Hello", "Bye"]


class TestLibreTranslate:
    def test_success_uses_base_codes(self):
        session = FakeSession(FakeResponse(json_data={"translatedText": "你好"}))
        provider = LibreTranslateProvider(session, LIBRE)
        assert provider.translate("Hello", "en", "zh-CN") == "你好"
        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert kwargs["json"] == {"q": "Hello", "source": "en", "target": "zh", "format": "text"}

    def test_accepts_translated_key(self):
        session = FakeSession(FakeResponse(json_data={"translated": "Bonjour"}))
        assert LibreTranslateProvider(session, LIBRE).translate("Hi", "auto", "fr") == "Bonjour"
        assert session.calls[0][2]["json"]["source"] == "auto"

    def test_http_error(self):
        session = FakeSession(FakeResponse(status_code=503, json_data={}))
        with pytest.raises(ProviderError):
            LibreTranslateProvider(session, LIBRE).translate("Hi", "en", "fr")

    def test_non_object_json(self):
        session = FakeSession(FakeResponse(json_data="Bonjour"))
        with pytest.raises(ProviderError, match="unexpected response"):
            LibreTranslateProvider(session, LIBRE).translate("Hi", "en", "fr")


class TestLLMProvider:
    def test_requires_model(self):
        with pytest.raises(ValueError):
            LLMProvider(TranslationConfig())

    @patch("subcast.translate.client.complete", return_value="  Bonjour \n")
    def test_translate(self, mock_complete):
        provider = LLMProvider(TranslationConfig(llm_model="ollama_chat/qwen3:8b"))
        assert provider.translate("Hello", "en", "fr") == "Bonjour"
        messages = mock_complete.call_args[0][0]
        assert "from en to fr" in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "Hello"}

    @patch("subcast.translate.client.complete", side_effect=RuntimeError("model offline"))
    def test_failure_becomes_provider_error(self, _):
        provider = LLMProvider(TranslationConfig(llm_model="gpt-4o-mini"))
        with pytest.raises(ProviderError, match="model offline"):
            provider.translate("Hello", "en", "fr")


class TestBuildProviders:
    def test_order(self):
        config = TranslationConfig(primary_mirror="https://mine.test/translate")
        primary, mirrors = build_providers(config, session=FakeSession())
        assert primary.name == "mymemory"
        assert [m.url for m in mirrors] == ["https://mine.test/translate", *config.mirrors]

    def test_llm_appended_last(self):
        config = TranslationConfig(mirrors=[], llm_model="gpt-4o-mini")
        _, mirrors = build_providers(config, session=FakeSession())
        assert len(mirrors) == 1
        assert mirrors[0].name == "llm(gpt-4o-mini)"
