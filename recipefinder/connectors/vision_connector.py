"""
Google Vision connector for ingredient detection.

Sends the uploaded photo to images:annotate with LABEL_DETECTION and returns
the raw label annotations. Turning labels into ingredient names is done by
recipefinder.detection.
"""

import base64
import logging
from typing import Any, Dict, List

from .gcloud import GoogleCloudConnector

logger = logging.getLogger(__name__)

VISION_ANNOTATE_URL = "https://vision.googleapis.com/v1/images:annotate"

# Ask for many labels so varied ingredients survive the generic-term filter
MAX_LABELS = 50


class VisionConnector(GoogleCloudConnector):
    """Connector for the Google Cloud Vision REST API."""
    service = "google-vision"

    def detect_labels(self, image_bytes: bytes) -> List[Dict[str, Any]]:
        """
        Run label detection on an image.

        Args:
            image_bytes: Raw image file content

        Returns:
            labelAnnotations of the first response (items with "description"
            and "score"), or an empty list

        Raises:
            RecipeAPIError: If the Vision API fails or does not return JSON
        """
        body = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [{"type": "LABEL_DETECTION", "maxResults": MAX_LABELS}],
                }
            ]
        }

        data = self._post_json(VISION_ANNOTATE_URL, body, "Vision API")
        responses = data.get("responses") or [{}]
        labels = responses[0].get("labelAnnotations") or []

        logger.info("Vision API returned %d labels", len(labels))
        return labels
