"""
Unit tests for DesignRequestService.
"""
import json
from unittest.mock import Mock, patch
import pytest
import requests
from design_intake.core import config
from design_intake.core.exceptions import WebhookException
from design_intake.models.dto.design_request_dto import DesignRequest
from design_intake.services.design_request_service import DesignRequestService


@pytest.fixture
def design_request():
    return DesignRequest(
        name="Jane Q Doe",
        email="jane@example.com",
        phone_number="555-0100",
        city="Toronto",
        province="ON",
        product_title="Business Cards",
        variant_title="Matte / 500",
        design_description="  A minimal logo card  ",
        contact_mode="Phone",
        colors=["navy", "gold"],
        inspiration_links=["https://example.com/a", ""],
        uploaded_files=[
            {"name": "sketch.png", "url": "https://files.example.com/uploads/1_sketch.png",
             "type": "image/png", "original_size": 1200},
            {"name": "voice.webm", "url": "https://files.example.com/uploads/2_voice.webm",
             "type": "audio/webm", "original_size": 3400},
        ]
    )


class TestDesignRequestService:
    """Test suite for DesignRequestService."""

    @pytest.fixture
    def service(self):
        return DesignRequestService()

    def test_submit_without_webhook(self, service, design_request, monkeypatch, reset_settings):
        """Test submissions succeed without forwarding when no webhook is configured."""
        monkeypatch.setenv("DESIGN_REQUEST_WEBHOOK_URL", "")
        config.settings = config.Settings()

        with patch('design_intake.services.design_request_service.requests.post') as mock_post:
            response = service.submit(design_request)

        mock_post.assert_not_called()
        assert response.files_uploaded == 2
        assert response.file_urls == [
            "https://files.example.com/uploads/1_sketch.png",
            "https://files.example.com/uploads/2_voice.webm",
        ]
        assert response.submission_id.isdigit()

    def test_submit_forwards_to_webhook(self, service, design_request, monkeypatch, reset_settings):
        """Test the payload is posted to the configured webhook."""
        monkeypatch.setenv("DESIGN_REQUEST_WEBHOOK_URL", "https://hooks.example.com/catch")
        config.settings = config.Settings()

        with patch('design_intake.services.design_request_service.requests.post') as mock_post:
            mock_post.return_value = Mock(raise_for_status=Mock())
            service.submit(design_request)

        mock_post.assert_called_once()
        assert mock_post.call_args[0][0] == "https://hooks.example.com/catch"
        payload = mock_post.call_args[1]['json']
        assert payload['customer']['first_name'] == "Jane"
        assert payload['customer']['last_name'] == "Q Doe"
        assert payload['shipping_address']['country'] == "Canada"
        assert payload['line_items'][0]['variant_name'] == "Matte / 500"
        assert json.loads(payload['metafields']['uploaded_files']) == design_request_urls(design_request)

    def test_submit_webhook_failure(self, service, design_request, monkeypatch, reset_settings):
        """Test webhook errors raise WebhookException."""
        monkeypatch.setenv("DESIGN_REQUEST_WEBHOOK_URL", "https://hooks.example.com/catch")
        config.settings = config.Settings()

        with patch('design_intake.services.design_request_service.requests.post') as mock_post:
            mock_post.side_effect = requests.ConnectionError("connection refused")
            with pytest.raises(WebhookException) as exc_info:
                service.submit(design_request)

        assert "Failed to send data to webhook" in str(exc_info.value)

    def test_build_order_note(self, service, design_request):
        """Test the order note summarises the request."""
        note = service.build_order_note(design_request)

        assert note.startswith("Design Request:\n\nA minimal logo card")
        assert "Contact Method: Phone" in note
        assert "Style: Not specified" in note
        assert "Files: 2 uploaded" in note
        assert "Inspiration Links: 1" in note


def design_request_urls(request):
    return [f.url for f in request.uploaded_files]
