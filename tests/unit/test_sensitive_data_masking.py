import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_bearer_authorization_header_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "Authorization: Bearer eyJhbGciOi.abc.def"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "eyJhbGciOi" not in result["header"]
        assert result["header"] == "Authorization: ***MASKED***"

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.created", "order_id": "ORD-20260101-ABC123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_id"] == "ORD-20260101-ABC123"
        assert result["event"] == "order.created"

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "fields": ["password"], "count": 3}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["fields"] == ["password"]
        assert result["count"] == 3
