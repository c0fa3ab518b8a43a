"""
Tests for core.config — store settings.
"""

import pytest

from core.config.settings import (
    DEFAULT_REFUND_WINDOW_TICKS,
    SettingsError,
    StoreSettings,
)


class TestStoreSettings:
    def test_defaults(self):
        settings = StoreSettings(administrator_id="0xowner")
        assert settings.refund_window_ticks == DEFAULT_REFUND_WINDOW_TICKS == 100

    def test_rejects_empty_administrator(self):
        with pytest.raises(SettingsError, match="administrator_id"):
            StoreSettings(administrator_id="")

    def test_rejects_non_positive_window(self):
        with pytest.raises(SettingsError, match="positive"):
            StoreSettings(administrator_id="0xowner", refund_window_ticks=0)

    def test_rejects_bool_window(self):
        with pytest.raises(SettingsError):
            StoreSettings(administrator_id="0xowner", refund_window_ticks=True)

    def test_frozen_immutability(self):
        settings = StoreSettings(administrator_id="0xowner")
        with pytest.raises(AttributeError):
            settings.administrator_id = "0xthief"

    def test_with_overrides_revalidates(self):
        settings = StoreSettings(administrator_id="0xowner")
        assert settings.with_overrides(refund_window_ticks=5).refund_window_ticks == 5
        with pytest.raises(SettingsError):
            settings.with_overrides(refund_window_ticks=-1)


class TestFromEnv:
    def test_reads_administrator_and_window(self):
        settings = StoreSettings.from_env({
            "STORE_ADMINISTRATOR_ID": "0xowner",
            "STORE_REFUND_WINDOW_TICKS": "25",
        })
        assert settings == StoreSettings("0xowner", 25)

    def test_window_defaults_when_unset(self):
        settings = StoreSettings.from_env({"STORE_ADMINISTRATOR_ID": "0xowner"})
        assert settings.refund_window_ticks == 100

    def test_missing_administrator(self):
        with pytest.raises(SettingsError, match="STORE_ADMINISTRATOR_ID"):
            StoreSettings.from_env({})

    def test_non_integer_window(self):
        with pytest.raises(SettingsError, match="integer"):
            StoreSettings.from_env({
                "STORE_ADMINISTRATOR_ID": "0xowner",
                "STORE_REFUND_WINDOW_TICKS": "soon",
            })

    def test_uses_process_environment(self, monkeypatch):
        monkeypatch.setenv("STORE_ADMINISTRATOR_ID", "0xenv")
        monkeypatch.delenv("STORE_REFUND_WINDOW_TICKS", raising=False)
        assert StoreSettings.from_env().administrator_id == "0xenv"
