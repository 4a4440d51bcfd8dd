"""
Tests for providers/manager.py.

Covers:
  - config._model_enabled(): reads env var, defaults to True
  - _build_provider(): auto order, forced mode, missing keys, kill switches
  - get_provider(): caches result; reset() clears it
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import config
import providers.manager as manager_mod
from config import _model_enabled
from providers.manager import get_provider


@pytest.fixture
def no_keys(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_API_KEY", None)
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)
    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)
    monkeypatch.setattr(config, "ENABLE_GOOGLE", True)
    monkeypatch.setattr(config, "ENABLE_OPENAI", True)
    monkeypatch.setattr(config, "ENABLE_ANTHROPIC", True)
    monkeypatch.setattr(config, "JUDGE_PROVIDER", "auto")


class TestModelEnabled:
    def test_default_true_when_not_set(self, monkeypatch):
        monkeypatch.delenv("ENABLE_GOOGLE", raising=False)
        assert _model_enabled("ENABLE_GOOGLE") is True

    def test_default_false_opt_in(self, monkeypatch):
        monkeypatch.delenv("ENABLE_SOMETHING", raising=False)
        assert _model_enabled("ENABLE_SOMETHING", default=False) is False

    def test_explicit_false(self, monkeypatch):
        monkeypatch.setenv("ENABLE_OPENAI", "false")
        assert _model_enabled("ENABLE_OPENAI") is False

    def test_zero_disables(self, monkeypatch):
        monkeypatch.setenv("ENABLE_OPENAI", "0")
        assert _model_enabled("ENABLE_OPENAI") is False

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("ENABLE_OPENAI", "NO")
        assert _model_enabled("ENABLE_OPENAI") is False


class TestBuildProvider:
    def test_no_keys_raises_runtime_error(self, no_keys):
        with pytest.raises(RuntimeError, match="No judgment provider"):
            manager_mod._build_provider()

    def test_auto_prefers_google(self, no_keys, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
        monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-key")
        with patch("providers.gemini_provider.GeminiProvider") as MockGemini:
            MockGemini.return_value = MagicMock(full_name="google/test")
            manager_mod._build_provider()
        MockGemini.assert_called_once_with("g-key", config.GEMINI_MODEL)

    def test_auto_skips_disabled_provider(self, no_keys, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
        monkeypatch.setattr(config, "ENABLE_GOOGLE", False)
        monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-key")
        with patch("providers.openai_provider.OpenAIProvider") as MockOpenAI:
            manager_mod._build_provider()
        MockOpenAI.assert_called_once_with("sk-key", config.OPENAI_MODEL)

    def test_auto_falls_back_to_anthropic(self, no_keys, monkeypatch):
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "ant-key")
        with patch("providers.anthropic_provider.AnthropicProvider") as MockAnthropic:
            manager_mod._build_provider()
        MockAnthropic.assert_called_once_with("ant-key", config.ANTHROPIC_MODEL)

    def test_forced_mode_requires_key(self, no_keys, monkeypatch):
        monkeypatch.setattr(config, "JUDGE_PROVIDER", "openai")
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
        with pytest.raises(RuntimeError, match="JUDGE_PROVIDER=openai"):
            manager_mod._build_provider()

    def test_forced_mode_uses_that_provider(self, no_keys, monkeypatch):
        monkeypatch.setattr(config, "JUDGE_PROVIDER", "Anthropic")
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "ant-key")
        with patch("providers.anthropic_provider.AnthropicProvider") as MockAnthropic:
            manager_mod._build_provider()
        MockAnthropic.assert_called_once()

    def test_unknown_mode_raises_value_error(self, no_keys, monkeypatch):
        monkeypatch.setattr(config, "JUDGE_PROVIDER", "llama")
        with pytest.raises(ValueError, match="Unknown judgment provider"):
            manager_mod._build_provider()


class TestGetProvider:
    def test_caches_provider(self):
        sentinel = MagicMock(full_name="fake/test")
        with patch.object(manager_mod, "_build_provider", return_value=sentinel) as build:
            assert get_provider() is sentinel
            assert get_provider() is sentinel
        build.assert_called_once()

    def test_reset_clears_cache(self):
        first, second = MagicMock(full_name="a/1"), MagicMock(full_name="b/2")
        with patch.object(manager_mod, "_build_provider", side_effect=[first, second]):
            assert get_provider() is first
            manager_mod.reset()
            assert get_provider() is second
