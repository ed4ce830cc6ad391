"""
Design Request Service.
Accepts hire-a-designer submissions and forwards them to the order webhook.
"""
import json
import logging
import time
import requests
from design_intake.core import config
from design_intake.core.exceptions import WebhookException
from design_intake.models.dto.design_request_dto import DesignRequest, DesignRequestResponse

logger = logging.getLogger(__name__)


class DesignRequestService:
    """Service for design request submissions."""

    def submit(self, request: DesignRequest) -> DesignRequestResponse:
        """
        Handle a design request submission.

        Args:
            request: Validated submission

        Returns:
            DesignRequestResponse with the submission id and file URLs

        Raises:
            WebhookException: If the configured webhook rejects the payload
        """
        submission_id = str(int(time.time() * 1000))
        file_urls = [file.url for file in request.uploaded_files]

        logger.info(
            "Design request %s received from %s (%d file(s), contact mode: %s)",
            submission_id, request.email, len(file_urls), request.contact_mode or "Email"
        )
        for i, file in enumerate(request.uploaded_files, start=1):
            logger.info("  %d. %s -> %s", i, file.name, file.url)

        if config.settings.design_request_webhook_url:
            self._forward(self.build_webhook_payload(request))

        return DesignRequestResponse(
            submission_id=submission_id,
            message="Request submitted successfully.",
            files_uploaded=len(file_urls),
            file_urls=file_urls
        )

    def build_order_note(self, request: DesignRequest) -> str:
        """Summary note attached to the draft order."""
        inspiration_count = len([link for link in request.inspiration_links if link])
        return (
            f"Design Request:\n\n{request.design_description}\n\n"
            f"Contact Method: {request.contact_mode or 'Email'}\n"
            f"Style: {request.design_style or 'Not specified'}\n\n"
            f"Files: {len(request.uploaded_files)} uploaded\n"
            f"Inspiration Links: {inspiration_count}"
        )

    def build_webhook_payload(self, request: DesignRequest) -> dict:
        """Map a submission to the order webhook's customer/address/line item shape."""
        return {
            'customer': {
                'first_name': request.first_name,
                'last_name': request.last_name,
                'email': request.email,
                'phone': request.phone_number,
            },
            'shipping_address': {
                'address1': request.street_address,
                'city': request.city,
                'province': request.province,
                'zip': request.postal_code,
                'country': 'Canada',
                'phone': request.phone_number,
            },
            'line_items': [{
                'title': request.product_title,
                'variant_name': request.variant_title,
                'quantity': 1,
            }],
            'note': self.build_order_note(request),
            'tags': 'design-request,custom-order',
            'metafields': {
                'design_description': request.design_description,
                'contact_method': request.contact_mode,
                'design_style': request.design_style,
                'colors': request.colors,
                'uploaded_files': json.dumps([file.url for file in request.uploaded_files]),
                'inspiration_links': json.dumps(request.inspiration_links),
            }
        }

    def _forward(self, payload: dict) -> None:
        try:
            response = requests.post(
                config.settings.design_request_webhook_url,
                json=payload,
                timeout=config.settings.webhook_timeout_seconds
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Design request webhook failed: %s", e)
            raise WebhookException(f"Failed to send data to webhook: {str(e)}") from e
