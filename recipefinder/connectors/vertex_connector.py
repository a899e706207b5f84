"""
Vertex AI connector generating food photos for a recipe.

Calls the imagegeneration@002 publisher model's predict endpoint in
us-central1. Predictions carry either an image URL ("image") or inline bytes
("bytesBase64Encoded" + "mimeType"); inline bytes are returned as a data URI
so the UI can render both the same way.
"""

import logging
from typing import Any, Dict, List, Optional

from .gcloud import GoogleCloudConnector

logger = logging.getLogger(__name__)

VERTEX_LOCATION = "us-central1"
IMAGE_MODEL = "imagegeneration@002"


def prediction_to_url(prediction: Dict[str, Any]) -> Optional[str]:
    """
    Image URL of a single prediction.

    Examples:
        >>> prediction_to_url({"image": "https://example.com/a.png"})
        'https://example.com/a.png'
        >>> prediction_to_url({"bytesBase64Encoded": "aGk=", "mimeType": "image/jpeg"})
        'data:image/jpeg;base64,aGk='
    """
    if prediction.get("image"):
        return prediction["image"]
    encoded = prediction.get("bytesBase64Encoded")
    if encoded:
        return f"data:{prediction.get('mimeType') or 'image/png'};base64,{encoded}"
    return None


class VertexImageConnector(GoogleCloudConnector):
    """Connector for Vertex AI image generation."""
    service = "vertex-ai"

    @property
    def predict_url(self) -> str:
        return (
            f"https://{VERTEX_LOCATION}-aiplatform.googleapis.com/v1/projects/{self.project_id}"
            f"/locations/{VERTEX_LOCATION}/publishers/google/models/{IMAGE_MODEL}:predict"
        )

    def generate_images(self, query: str) -> List[Dict[str, Any]]:
        """
        Generate food photos for a query.

        Args:
            query: Dish or ingredient description, e.g. "tomato basil pasta"

        Returns:
            List of {"url": ..., "alt": "<query> - result N"} dictionaries

        Raises:
            RecipeAPIError: If the Vertex AI call fails
        """
        body = {
            "instances": [
                {"prompt": f"High quality food photo of {query}", "sampleCount": 1}
            ]
        }

        data = self._post_json(self.predict_url, body, "Vertex AI")
        predictions = data.get("predictions") or []
        logger.info("Vertex AI returned %d predictions for %r", len(predictions), query)

        return [
            {"url": prediction_to_url(prediction), "alt": f"{query} - result {index + 1}"}
            for index, prediction in enumerate(predictions)
        ]
