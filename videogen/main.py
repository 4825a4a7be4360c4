from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict
from functools import lru_cache
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from . import __version__
from .config import (
    build_config,
    DEFAULT_IMAGE_RATIO,
    DEFAULT_TEXT_TO_VIDEO_RATIO,
    DEFAULT_VIDEO_RATIO,
    ImageRatio,
    STATIC_DIR,
    TextToVideoRatio,
    VideoRatio,
)
from .errors import InvalidRequestError, VideoGenError
from .helper import current_request_id, generate_request_id, setup_logging
from .pipeline import (
    create_pipeline,
    create_text_to_video_pipeline,
    ImageToVideoPipeline,
    TextToVideoPipeline,
)

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateRequest(CamelModel):
    prompt: str
    image_ratio: Optional[ImageRatio] = None
    video_ratio: Optional[VideoRatio] = None
    # Falls back to `prompt` when missing or empty.
    video_prompt: Optional[str] = None

    @field_validator("image_ratio", "video_ratio", mode="before")
    @classmethod
    def _empty_ratio_is_default(cls, v):
        # "" selects the default ratio, same as omitting the field
        return None if v == "" else v

    @field_validator("prompt")
    @classmethod
    def _prompt_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("prompt must not be empty")
        return v


class TextToVideoRequest(CamelModel):
    prompt: str
    ratio: Optional[TextToVideoRatio] = None

    @field_validator("ratio", mode="before")
    @classmethod
    def _empty_ratio_is_default(cls, v):
        return None if v == "" else v

    @field_validator("prompt")
    @classmethod
    def _prompt_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("prompt must not be empty")
        return v


class TaskInfo(CamelModel):
    id: str
    status: str
    ratio: str


class GenerateData(CamelModel):
    original_prompt: str
    video_prompt: str
    image_url: str
    video_url: str
    image_task: TaskInfo
    video_task: TaskInfo


class GenerateResponse(CamelModel):
    success: bool = True
    data: GenerateData


class TextToVideoData(CamelModel):
    prompt: str
    video_url: str
    task: TaskInfo
    duration: int


class TextToVideoResponse(CamelModel):
    success: bool = True
    data: TextToVideoData


@lru_cache
def get_pipeline() -> ImageToVideoPipeline:
    return create_pipeline(build_config())


@lru_cache
def get_text_to_video_pipeline() -> TextToVideoPipeline:
    return create_text_to_video_pipeline(build_config())


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = build_config()
    setup_logging(cfg.logging.level, cfg.logging.format)
    logger.info("videogen API started")
    yield
    logger.info("videogen API shutting down")


app = FastAPI(title="RunwayML Video Generator", version=__version__, lifespan=lifespan)


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request.state.request_id = generate_request_id()
    token = current_request_id.set(request.state.request_id)
    try:
        response = await call_next(request)
    finally:
        current_request_id.reset(token)
    response.headers["X-Request-ID"] = request.state.request_id
    return response


# ─── Error handlers ─────────────────────────────────────────────


def _request_id(request: Request) -> str:
    # unhandled errors are answered outside the request-id middleware
    return getattr(request.state, "request_id", None) or generate_request_id()


def _error_response(request_id: str, status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={"X-Request-ID": request_id},
    )


@app.exception_handler(VideoGenError)
async def videogen_error_handler(request: Request, exc: VideoGenError):
    request_id = _request_id(request)
    logger.error(
        "%s: %s",
        exc.code,
        exc.details or exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "request_id": request_id,
        },
    )
    return _error_response(request_id, exc.http_status, exc.to_response())


def _validation_error(exc: RequestValidationError) -> InvalidRequestError:
    errors = exc.errors()
    for e in errors:
        loc = tuple(e.get("loc", ()))
        # an empty body reaches us as a missing body
        if e.get("type") == "json_invalid" or (
            e.get("type") == "missing" and loc == ("body",)
        ):
            return InvalidRequestError("Invalid JSON in request body")
    for e in errors:
        loc = tuple(e.get("loc", ()))
        # loc == ("body",) means the body is not a JSON object
        if loc == ("body",) or "prompt" in loc:
            return InvalidRequestError("Invalid or missing prompt")
    details = "; ".join(
        f"{'.'.join(str(p) for p in e['loc'] if p != 'body')}: {e['msg']}"
        for e in errors
    )
    return InvalidRequestError(details=details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    err = _validation_error(exc)
    logger.warning(
        "Validation error on %s: %s",
        request.url.path,
        exc.errors(),
        extra={"path": request.url.path, "request_id": request_id},
    )
    return _error_response(request_id, err.http_status, err.to_response())


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(
        "Unhandled exception on %s: %s",
        request.url.path,
        exc,
        exc_info=True,
        extra={"path": request.url.path, "request_id": request_id},
    )
    return _error_response(
        request_id,
        500,
        {
            "success": False,
            "error": "Internal server error",
            "details": str(exc) or "Unknown error",
        },
    )


# ─── Routes ─────────────────────────────────────────────────────


@app.post("/api/generate", response_model=GenerateResponse)
def generate(
    payload: GenerateRequest,
    request: Request,
    pipeline: ImageToVideoPipeline = Depends(get_pipeline),
) -> GenerateResponse:
    """
    Generate an image from the prompt, then animate it into a video.

    - `prompt`: e.g. "A majestic dragon soaring through cloudy skies".
    - `videoPrompt`: optional motion prompt for the second step.
    """
    image_ratio = (payload.image_ratio or DEFAULT_IMAGE_RATIO).value
    video_ratio = (payload.video_ratio or DEFAULT_VIDEO_RATIO).value
    logger.info(
        "Text-to-image-to-video request (image %s, video %s)",
        image_ratio,
        video_ratio,
        extra={"request_id": request.state.request_id},
    )

    artifacts = pipeline.run(
        prompt=payload.prompt,
        image_ratio=image_ratio,
        video_ratio=video_ratio,
        video_prompt=payload.video_prompt,
    )
    return GenerateResponse(data=GenerateData.model_validate(asdict(artifacts)))


@app.get("/api/generate")
async def generate_usage() -> dict:
    return {
        "message": "RunwayML Text-to-Image-to-Video API",
        "usage": {
            "method": "POST",
            "contentType": "application/json",
            "body": {
                "prompt": "string (required) - Text prompt for image and video generation",
                "imageRatio": "string (optional) - Image aspect ratio: "
                + " | ".join(r.value for r in ImageRatio),
                "videoRatio": "string (optional) - Video aspect ratio: "
                + " | ".join(r.value for r in VideoRatio),
                "videoPrompt": "string (optional) - Different prompt for video generation, "
                "defaults to main prompt",
            },
        },
        "example": {
            "prompt": "A majestic dragon soaring through cloudy skies",
            "imageRatio": "1920:1080",
            "videoRatio": "1280:720",
            "videoPrompt": "The dragon slowly flaps its wings and breathes fire",
        },
    }


@app.post("/api/text-to-video", response_model=TextToVideoResponse)
def text_to_video(
    payload: TextToVideoRequest,
    request: Request,
    pipeline: TextToVideoPipeline = Depends(get_text_to_video_pipeline),
) -> TextToVideoResponse:
    """
    Generate a video directly from the prompt.
    """
    ratio = (payload.ratio or DEFAULT_TEXT_TO_VIDEO_RATIO).value
    logger.info(
        "Text-to-video request (ratio %s)",
        ratio,
        extra={"request_id": request.state.request_id},
    )

    artifacts = pipeline.run(prompt=payload.prompt, ratio=ratio)
    return TextToVideoResponse(data=TextToVideoData.model_validate(asdict(artifacts)))


@app.get("/api/text-to-video")
async def text_to_video_usage() -> dict:
    return {
        "message": "RunwayML Text-to-Video API",
        "usage": {
            "method": "POST",
            "contentType": "application/json",
            "body": {
                "prompt": "string (required) - Text prompt for video generation",
                "ratio": "string (optional) - Video aspect ratio: "
                + " | ".join(r.value for r in TextToVideoRatio),
            },
        },
        "example": {
            "prompt": "A paper boat drifting down a rainy street at dusk",
            "ratio": "1280:720",
        },
    }


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "service": "videogen", "version": __version__}


@app.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
