"""Tests for settings and client contexts."""

from pathlib import Path

import pytest

from tubeweb.config.settings import (
    ClientContext,
    ContinuationPolicy,
    SectionPolicy,
    Settings,
    _load_client_contexts,
    get_settings,
)


@pytest.mark.unit
class TestSettings:
    @staticmethod
    def test_defaults(settings: Settings) -> None:
        assert settings.youtube_domain == "www.youtube.com"
        assert settings.continuation_policy is ContinuationPolicy.LONGEST
        assert settings.section_policy is SectionPolicy.MOST_ITEMS
        assert settings.verbose is False

    @staticmethod
    def test_endpoint_urls(settings: Settings) -> None:
        assert settings.endpoint_url("search") == "https://www.youtube.com/youtubei/v1/search?prettyPrint=false"
        assert (
            settings.endpoint_url("next", music=True)
            == "https://music.youtube.com/youtubei/v1/next?prettyPrint=false"
        )

    @staticmethod
    def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TUBEWEB_CONTINUATION_POLICY", "first")
        monkeypatch.setenv("TUBEWEB_SECTION_POLICY", "first")
        monkeypatch.setenv("TUBEWEB_VERBOSE", "true")

        settings = get_settings()

        assert settings.continuation_policy is ContinuationPolicy.FIRST
        assert settings.section_policy is SectionPolicy.FIRST
        assert settings.verbose is True

    @staticmethod
    def test_verbose_is_the_only_logging_switch(monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = get_settings()

        assert "log_level" not in Settings.model_fields
        assert settings.verbose is False

    @staticmethod
    def test_get_settings_is_cached() -> None:
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestClientContexts:
    @staticmethod
    def test_packaged_clients(settings: Settings) -> None:
        clients = settings.clients

        assert clients.web.client_name == "WEB"
        assert clients.web_remix.client_name == "WEB_REMIX"
        assert clients.android.android_sdk_version == 30

    @staticmethod
    def test_payload_uses_wire_names() -> None:
        context = ClientContext(client_name="ANDROID", client_version="18.11.34", android_sdk_version=30)

        assert context.as_payload() == {
            "context": {"client": {"clientName": "ANDROID", "clientVersion": "18.11.34", "androidSdkVersion": 30}}
        }

    @staticmethod
    def test_web_payload_omits_sdk_version(settings: Settings) -> None:
        assert "androidSdkVersion" not in settings.clients.web.as_payload()["context"]["client"]

    @staticmethod
    def test_yaml_overrides_and_missing_file(tmp_path: Path) -> None:
        clients_file = tmp_path / "clients.yaml"
        clients_file.write_text("clients:\n  web:\n    clientName: WEB\n    clientVersion: '9.9'\n", encoding="utf-8")

        loaded = _load_client_contexts(clients_file)

        assert loaded.web.client_version == "9.9"
        assert loaded.android.client_name == "ANDROID"
        assert _load_client_contexts(tmp_path / "absent.yaml").web.client_version == "2.20230928.04.00"
