"""
FastAPI application for the Recipe Finder proxy API.

This module defines the proxy routes the Streamlit UI calls:
- POST /api/search: Forward a search payload to the recipe backend
- POST /api/rawSearch: Same as /api/search, with per-IP rate limiting, raw JSON
  parsing and a short-lived response cache
- POST /api/detectIngredients: Detect ingredients in an uploaded photo (Google Vision)
- POST /api/imageSearch: Generate food photos for a query (Vertex AI)
- GET /api/health: Liveness information

Any other method on these routes answers 405 {"error": "Method not allowed"}.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Body, FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import (
    BackendConfig,
    CacheConfig,
    GoogleCloudConfig,
    RateLimitConfig,
    get_log_level,
    validate_required_config,
)
from api.schemas import (
    DetectIngredientsResponse,
    ErrorResponse,
    HealthResponse,
    ImageSearchRequest,
    ImageSearchResponse,
)
from recipefinder import events
from recipefinder.connectors.recipe_backend import RecipeBackendConnector
from recipefinder.connectors.vertex_connector import VertexImageConnector
from recipefinder.connectors.vision_connector import VisionConnector
from recipefinder.detection import NO_INGREDIENTS_MESSAGE, labels_to_ingredients
from recipefinder.errors import NonJSONResponseError, RecipeAPIError
from recipefinder.models import SearchResponse
from recipefinder.ratelimit import TokenBucketLimiter
from recipefinder.search import normalize_search_payload
from recipefinder.utils import cache

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "recipe-finder-proxy"

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

app = FastAPI(
    title="Recipe Finder API",
    description="Proxy API between the Recipe Finder UI, the recipe-search backend and Google Cloud",
    version="1.0.0",
    tags_metadata=[
        {"name": "search", "description": "Recipe search, forwarded to the recipe backend."},
        {"name": "images", "description": "Ingredient detection and food photo generation (Google Cloud)."},
        {"name": "health", "description": "Health check and monitoring endpoints."},
    ],
)

# Process-local state: resets on restart and is not shared between instances
rate_limiter = TokenBucketLimiter(
    max_tokens=RateLimitConfig.get_max_tokens(),
    refill_seconds=RateLimitConfig.get_refill_seconds(),
)
cache.SEARCH_CACHE_TTL_SECONDS = CacheConfig.get_ttl_seconds()

try:
    validate_required_config()
except RuntimeError as e:
    # Recipe search still works; the photo routes answer 500 until configured
    logger.warning("%s", e)


# Connector factories are looked up at call time so tests can patch them
def get_backend_connector() -> RecipeBackendConnector:
    return RecipeBackendConnector(BackendConfig.get_url())


def get_vision_connector() -> VisionConnector:
    return VisionConnector(GoogleCloudConfig.get_credentials_info(), GoogleCloudConfig.get_project_id())


def get_vertex_connector() -> VertexImageConnector:
    return VertexImageConnector(GoogleCloudConfig.get_credentials_info(), GoogleCloudConfig.get_project_id())


def get_client_ip(request: Request) -> str:
    """
    Client IP used as the rate-limit key.

    Returns:
        First X-Forwarded-For entry, else the peer address, else "unknown-ip"
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and forwarded.split(",")[0].strip():
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown-ip"


def require_google_cloud_config() -> None:
    """
    Raises:
        HTTPException 500: Naming the first missing Google Cloud variable
    """
    if not GoogleCloudConfig.get_credentials_json():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "GOOGLE_APPLICATION_CREDENTIALS_JSON is not configured"},
        )
    if not GoogleCloudConfig.get_project_id():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "GOOGLE_CLOUD_PROJECT_ID is not configured"},
        )


def backend_error_response(error: RecipeAPIError) -> JSONResponse:
    """
    Translate a backend failure into the proxy's response.

    HTTP errors are forwarded with the backend's status and body; transport
    errors become 500 "Failed to fetch recipes".
    """
    if error.status_code is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch recipes", "details": error.message},
        )
    logger.error("Backend response: %s %s", error.status_code, error.details)
    return JSONResponse(status_code=error.status_code, content=error.details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": ...} bodies."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Method not allowed"},
            headers=exc.headers,
        )

    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.post(
    "/api/search",
    tags=["search"],
    summary="Forward a recipe search to the backend",
    responses={
        200: {"model": SearchResponse, "description": "The backend's search results"},
        500: {"model": ErrorResponse, "description": "Backend unreachable"},
    },
)
def search(payload: Any = Body(...)):
    """
    Forward the JSON body to the recipe backend verbatim.

    Returns:
        The backend's JSON response

    Errors:
        Backend HTTP errors are returned with the backend's status and body;
        transport errors answer 500 {"error": "Failed to fetch recipes", "details": ...}
    """
    try:
        data = get_backend_connector().search_recipes(payload)
    except RecipeAPIError as e:
        logger.error("Error proxying search request: %r", e)
        return backend_error_response(e)

    return data


@app.post(
    "/api/rawSearch",
    tags=["search"],
    summary="Rate-limited, cached recipe search",
    responses={
        200: {"model": SearchResponse, "description": "The backend's search results"},
        400: {"model": ErrorResponse, "description": "Body is not valid JSON"},
        422: {"model": ErrorResponse, "description": "Body is not a search request"},
        429: {"model": ErrorResponse, "description": "Rate limited (Retry-After header set)"},
        500: {"model": ErrorResponse, "description": "Backend unreachable"},
    },
)
async def raw_search(request: Request):
    """
    Rate-limited search proxy.

    Flow:
    1. Consume a token for the client IP; 429 with Retry-After when exhausted
    2. Parse the raw body as JSON; 400 when it does not parse
    3. Check the body is an object whose ingredients (if present) is a list
       of strings; 422 otherwise
    4. Serve a fresh cached response for the normalised payload, or forward
       the parsed body to the backend and cache its response

    Backend 429s are answered with 429 and the backend's Retry-After (default 60).
    """
    client_ip = get_client_ip(request)

    if not rate_limiter.consume(client_ip):
        retry_after = rate_limiter.retry_after_seconds
        events.log_search_rate_limited(client_ip, source="proxy")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "error": "Too many requests",
                "message": f"Too many requests, please try again in {retry_after} seconds.",
            },
            headers={"Retry-After": str(retry_after)},
        )

    raw_body = await request.body()
    try:
        parsed_body = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        logger.warning("Error parsing raw body: %s", e)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid JSON body"})

    validation_message = _validate_search_body(parsed_body)
    if validation_message:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "Invalid search request", "message": validation_message},
        )

    normalized = normalize_search_payload(parsed_body)
    cache_key = cache.make_search_cache_key(normalized)

    cached = cache.get_cached_search(cache_key)
    if cached is not None:
        logger.debug("Serving cached search for %s", normalized.get("ingredients"))
        events.log_search_performed(
            client_ip, normalized["ingredients"], len(cached.get("recipes") or []),
            page=normalized["page"], cached=True,
        )
        return cached

    try:
        data = await run_in_threadpool(get_backend_connector().search_recipes, parsed_body)
    except RecipeAPIError as e:
        logger.error("Error proxying search request: %r", e)
        if e.is_rate_limited:
            retry_after = e.retry_after or "60"
            events.log_search_rate_limited(client_ip, source="backend")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": "Too many requests",
                    "message": f"Backend rate limit exceeded. Please try again in {retry_after} seconds.",
                },
                headers={"Retry-After": str(retry_after)},
            )
        return backend_error_response(e)

    if isinstance(data, dict):
        cache.set_cached_search(cache_key, data)
        result_count = len(data.get("recipes") or [])
    else:
        result_count = 0

    events.log_search_performed(client_ip, normalized["ingredients"], result_count, page=normalized["page"])
    return data


def _validate_search_body(body: Any) -> Optional[str]:
    """Return a message describing why body is not a search request, or None."""
    if not isinstance(body, dict):
        return "Request body must be a JSON object"

    ingredients = body.get("ingredients")
    if ingredients is not None and (
        not isinstance(ingredients, list) or not all(isinstance(item, str) for item in ingredients)
    ):
        return "ingredients must be a list of strings"

    return None


@app.post(
    "/api/detectIngredients",
    response_model=DetectIngredientsResponse,
    response_model_exclude_none=True,
    tags=["images"],
    summary="Detect ingredients in a food photo",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def detect_ingredients(request: Request, image: Optional[UploadFile] = File(None)):
    """
    Detect ingredients in the uploaded photo (multipart field "image").

    Returns:
        {"ingredients": [...]}; when nothing edible is found the list is empty
        and "message" explains why

    Raises:
        HTTPException 400: If no image was uploaded
        HTTPException 500: If Google Cloud is not configured or the Vision call fails
    """
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"error": "No image uploaded"})

    require_google_cloud_config()

    try:
        image_bytes = image.file.read()
        labels = get_vision_connector().detect_labels(image_bytes)
    except RecipeAPIError as e:
        logger.error("Error detecting ingredients: %r", e)
        if isinstance(e, NonJSONResponseError):
            error = "Vision API did not return JSON"
        else:
            error = "Failed to detect ingredients"
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": error, "details": e.details if e.details is not None else e.message},
        ) from e
    except Exception as e:
        logger.error("Error detecting ingredients: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to detect ingredients", "details": str(e)},
        ) from e

    ingredients = labels_to_ingredients(labels)
    events.log_ingredients_detected(get_client_ip(request), ingredients)

    if not ingredients:
        return DetectIngredientsResponse(ingredients=[], message=NO_INGREDIENTS_MESSAGE)
    return DetectIngredientsResponse(ingredients=ingredients)


@app.post(
    "/api/imageSearch",
    response_model=ImageSearchResponse,
    tags=["images"],
    summary="Generate food photos for a query",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def image_search(request: Request, payload: Optional[ImageSearchRequest] = Body(None)):
    """
    Generate food photos with Vertex AI.

    Raises:
        HTTPException 400: If query is missing or empty
        HTTPException 500: If Google Cloud is not configured or the Vertex AI call fails
    """
    query = payload.query if payload else None
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"error": "Query is required"})

    require_google_cloud_config()

    try:
        images = get_vertex_connector().generate_images(query)
    except RecipeAPIError as e:
        logger.error("Error searching images: %r", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to search images", "details": e.details if e.details is not None else e.message},
        ) from e
    except Exception as e:
        logger.error("Error searching images: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to search images", "details": str(e)},
        ) from e

    events.log_image_search_performed(get_client_ip(request), query, len(images))
    return ImageSearchResponse(images=images)


@app.get("/api/health", response_model=HealthResponse, tags=["health"])
def health() -> HealthResponse:
    """
    Health check endpoint for monitoring and status checks.

    Always returns 200 OK if the endpoint is reachable.
    """
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=time.time() - _APP_START_TIME,
    )


@app.get("/")
def root():
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": "Recipe Finder API",
        "version": "1.0.0",
        "description": "Proxy API between the Recipe Finder UI, the recipe-search backend and Google Cloud",
        "docs": "/docs",
    }
