from __future__ import annotations

from types import SimpleNamespace

import pytest

import services.browser as browser
from tests.fakes import make_settings
from utils.exceptions import ConfigurationError


class RecordingChromium:
    def __init__(self):
        self.calls = []

    def launch_persistent_context(self, **kwargs):
        self.calls.append(("persistent", kwargs))
        return SimpleNamespace(kind="context")

    def launch(self, **kwargs):
        self.calls.append(("launch", kwargs))
        return SimpleNamespace(new_context=lambda **kw: SimpleNamespace(kind="context", options=kw))


@pytest.fixture
def pw():
    return SimpleNamespace(chromium=RecordingChromium())


def test_persistent_profile_passes_channel_and_profile_directory(pw, tmp_path):
    settings = make_settings(
        reuse_browser_profile=True,
        browser_profile_dir=str(tmp_path),
        browser_channel="chrome",
        browser_profile_directory="Profile 1",
    )
    owned, context = browser._launch(pw, settings)
    assert owned is None
    kind, kwargs = pw.chromium.calls[0]
    assert kind == "persistent"
    assert kwargs["user_data_dir"] == str(tmp_path)
    assert kwargs["channel"] == "chrome"
    assert kwargs["args"] == ["--profile-directory=Profile 1"]
    assert "executable_path" not in kwargs


def test_executable_path_takes_precedence_over_channel(pw):
    settings = make_settings(chrome_executable_path="/opt/google/chrome/chrome", browser_channel="msedge")
    owned, context = browser._launch(pw, settings)
    kind, kwargs = pw.chromium.calls[0]
    assert kind == "launch"
    assert kwargs == {"headless": True, "executable_path": "/opt/google/chrome/chrome"}
    assert context.options["user_agent"] == "test-agent"


def test_bundled_chromium_when_nothing_configured(pw):
    browser._launch(pw, make_settings())
    assert pw.chromium.calls == [("launch", {"headless": True})]


def test_system_profile_uses_installed_chrome_user_data(pw, tmp_path, monkeypatch):
    monkeypatch.setattr(browser, "chrome_user_data_dir", lambda: tmp_path)
    settings = make_settings(reuse_browser_profile=True, browser_profile_dir="system")
    browser._launch(pw, settings)
    _, kwargs = pw.chromium.calls[0]
    assert kwargs["user_data_dir"] == str(tmp_path)
    assert kwargs["channel"] == "chrome"
    assert kwargs["args"] == []


def test_system_profile_without_chrome_data_is_a_configuration_error(pw, tmp_path, monkeypatch):
    monkeypatch.setattr(browser, "chrome_user_data_dir", lambda: tmp_path / "missing")
    settings = make_settings(reuse_browser_profile=True, browser_profile_dir="system")
    with pytest.raises(ConfigurationError):
        browser._launch(pw, settings)
    assert pw.chromium.calls == []
