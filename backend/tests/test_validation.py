"""
Tests for input validation
"""
import pytest
from cvstudio.utils.validation import (
    PaginationRequest,
    RenderRequest,
    validate_request
)
from cvstudio.utils.exceptions import ValidationError


class TestRenderRequestValidation:
    """Test render request validation"""

    def test_valid_request(self):
        data = {
            "templateKey": "classic",
            "data": {"personal": {"firstName": "Ann"}},
            "settings": {"themeColor": "#dc2626"},
        }
        result = validate_request(RenderRequest, data)
        assert result["templateKey"] == "classic"
        assert result["data"]["personal"]["firstName"] == "Ann"

    def test_empty_body_is_valid(self):
        result = validate_request(RenderRequest, {})
        assert result == {"data": {}}

    def test_blank_template_key_dropped(self):
        result = validate_request(RenderRequest, {"templateKey": "   "})
        assert "templateKey" not in result

    def test_data_must_be_object(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_request(RenderRequest, {"data": "not a dict"})
        assert exc_info.value.details["validation_errors"]

    def test_body_must_be_object(self):
        with pytest.raises(ValidationError):
            validate_request(RenderRequest, None)


class TestPaginationRequestValidation:
    """Test pagination request validation"""

    def test_scroll_offset(self):
        result = validate_request(PaginationRequest, {"scrollOffset": 250})
        assert result["scrollOffset"] == 250

    def test_negative_scroll_offset(self):
        with pytest.raises(ValidationError):
            validate_request(PaginationRequest, {"scrollOffset": -1})


class TestValidateRequestFunction:
    """Test validate_request helper function"""

    def test_raise_on_error_false(self):
        is_valid, validated_data, errors = validate_request(
            PaginationRequest,
            {"scrollOffset": -5},
            raise_on_error=False
        )
        assert is_valid is False
        assert validated_data == {}
        assert len(errors) > 0

    def test_raise_on_error_false_valid(self):
        is_valid, validated_data, errors = validate_request(
            RenderRequest,
            {"templateKey": "modern"},
            raise_on_error=False
        )
        assert is_valid is True
        assert validated_data["templateKey"] == "modern"
        assert errors == []
