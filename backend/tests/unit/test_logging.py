"""
Unit tests for wide-event helpers: secret redaction and tail sampling.
"""

from metadesc.core.logging import (
    REDACTED,
    enrich_event,
    finalize_request_event,
    init_request_event,
    redact_secrets,
    should_sample,
)


class TestRedactSecrets:
    def test_gemini_key_in_url(self) -> None:
        url = "https://generativelanguage.googleapis.com/v1beta/models?key=AIzaSecret&pageSize=50"

        assert redact_secrets(url) == (
            f"https://generativelanguage.googleapis.com/v1beta/models?key={REDACTED}&pageSize=50"
        )

    def test_bearer_token(self) -> None:
        assert redact_secrets("Authorization: Bearer sk-abc.def") == f"Authorization: Bearer {REDACTED}"

    def test_nested_secret_fields(self) -> None:
        data = {"provider": "anthropic", "headers": {"x-api-key": "ant-1", "accept": "json"}, "api_key": ""}

        assert redact_secrets(data) == {
            "provider": "anthropic",
            "headers": {"x-api-key": REDACTED, "accept": "json"},
            "api_key": "",
        }

    def test_non_strings_untouched(self) -> None:
        assert redact_secrets({"status": 429, "ok": False}) == {"status": 429, "ok": False}


class TestSampling:
    def _event(self, status: int = 200, method: str = "GET", path: str = "/api/v1/auth/me", **extra) -> dict:
        return {"http": {"status_code": status, "method": method, "path": path}, "duration_ms": 5, **extra}

    def test_errors_always_kept(self) -> None:
        assert should_sample(self._event(status=502))
        assert should_sample(self._event(status=400))

    def test_slow_requests_kept(self) -> None:
        assert should_sample({**self._event(), "duration_ms": 5000})

    def test_vendor_calls_kept(self) -> None:
        assert should_sample(self._event(method="POST", path="/api/v1/ai/generate-summary", ai={"provider": "cohere"}))

    def test_settings_writes_kept(self) -> None:
        assert should_sample(self._event(method="PUT", path="/api/v1/settings/general"))


class TestRequestEvent:
    def test_enrich_and_finalize(self) -> None:
        init_request_event(request_id="req-1", method="POST", path="/api/v1/ai/fetch-models")
        enrich_event(**{"ai.provider": "gemini", "ai.operation": "fetch_models"})

        event = finalize_request_event(400, ValueError("bad ?key=AIzaSecret"))

        assert event["request_id"] == "req-1"
        assert event["ai"] == {"provider": "gemini", "operation": "fetch_models"}
        assert event["outcome"] == "error"
        assert event["http"]["status_code"] == 400
        assert event["error"] == {"type": "ValueError", "message": f"bad ?key={REDACTED}"}
