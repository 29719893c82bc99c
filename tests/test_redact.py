from __future__ import annotations

from weatherreport._redact import REDACTED, redact_message, redact_url


def test_redact_url_replaces_secrets() -> None:
    url = "https://api.forecast.io/forecast/abc123/1.0,2.0"

    assert redact_url(url, ["abc123", None, ""]) == f"https://api.forecast.io/forecast/{REDACTED}/1.0,2.0"


def test_redact_url_without_secrets_is_unchanged() -> None:
    assert redact_url("https://example.com/x", []) == "https://example.com/x"


def test_redact_message_truncates_long_text() -> None:
    message = redact_message("k" + "x" * 600, ["k"], max_length=20)

    assert message.startswith(REDACTED)
    assert message.endswith("<truncated>")
    assert len(message) < 40
