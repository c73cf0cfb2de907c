"""
Unit tests for vendor error-message extraction.
"""

import json

from metadesc.services.ai.providers import ErrorEnvelope, extract_error_message


class TestErrorExtraction:
    def test_nested_falls_back_to_flat(self) -> None:
        assert extract_error_message(ErrorEnvelope.NESTED, {"message": "flat"}) == "flat"

    def test_flat_falls_back_to_nested(self) -> None:
        assert extract_error_message(ErrorEnvelope.FLAT, {"error": {"message": "nested"}}) == "nested"

    def test_string_error_field(self) -> None:
        assert extract_error_message(ErrorEnvelope.NESTED, {"error": "bad things"}) == "bad things"

    def test_structured_message_is_serialized(self) -> None:
        message = extract_error_message(ErrorEnvelope.FLAT, {"message": {"detail": "x"}})
        assert json.loads(message) == {"detail": "x"}

    def test_raw_body_fallback(self) -> None:
        assert extract_error_message(ErrorEnvelope.FLAT, None, "  upstream exploded ") == "upstream exploded"

    def test_raw_body_truncated(self) -> None:
        assert len(extract_error_message(ErrorEnvelope.NESTED, {}, "x" * 2000)) == 500

    def test_nothing_to_report(self) -> None:
        assert extract_error_message(ErrorEnvelope.NESTED, {}, "") == "Unknown API error occurred."
