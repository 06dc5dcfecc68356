"""Root test configuration for http-curl.

Clears the environment overrides read by load_config() so that a developer's
shell (PORT, HIDE_CURL_OPTIONS, HTTPCURL_CONFIG) never leaks into a test.
Tests that exercise an override set it explicitly with monkeypatch.
"""

import pytest


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PORT", "HIDE_CURL_OPTIONS", "HTTPCURL_CONFIG"):
        monkeypatch.delenv(name, raising=False)
