from enum import Enum
from pathlib import Path
from pydantic import BaseModel
import os


BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"


class ImageRatio(str, Enum):
    R1360_768 = "1360:768"
    R1024_1024 = "1024:1024"
    R1280_720 = "1280:720"
    R720_1280 = "720:1280"
    R1920_1080 = "1920:1080"
    R1080_1920 = "1080:1920"
    R1080_1080 = "1080:1080"
    R1168_880 = "1168:880"
    R1440_1080 = "1440:1080"
    R1080_1440 = "1080:1440"
    R1808_768 = "1808:768"
    R2112_912 = "2112:912"
    R720_720 = "720:720"
    R960_720 = "960:720"
    R720_960 = "720:960"
    R1680_720 = "1680:720"


class VideoRatio(str, Enum):
    R1280_720 = "1280:720"
    R720_1280 = "720:1280"
    R1104_832 = "1104:832"
    R832_1104 = "832:1104"
    R960_960 = "960:960"
    R1584_672 = "1584:672"
    R1280_768 = "1280:768"
    R768_1280 = "768:1280"


class TextToVideoRatio(str, Enum):
    R1280_720 = "1280:720"
    R720_1280 = "720:1280"
    R1920_1080 = "1920:1080"
    R1080_1920 = "1080:1920"


DEFAULT_IMAGE_RATIO = ImageRatio.R1360_768
DEFAULT_VIDEO_RATIO = VideoRatio.R1280_720
DEFAULT_TEXT_TO_VIDEO_RATIO = TextToVideoRatio.R1280_720


class RunwayConfig(BaseModel):
    # None lets the SDK fall back to RUNWAYML_API_SECRET itself
    api_key: str | None = None
    image_model: str = "gen4_image"
    video_model: str = "gen4_turbo"
    text_to_video_model: str = "veo3"
    text_to_video_duration: int = 8
    task_timeout_sec: float = 600.0
    max_retries: int = 2


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    runway: RunwayConfig
    logging: LoggingConfig


def build_config() -> AppConfig:
    """
    Build the AppConfig from environment variables.

    Runway:
      - RUNWAYML_API_SECRET: API key (required before the first generation).
      - RUNWAY_IMAGE_MODEL / RUNWAY_VIDEO_MODEL / RUNWAY_TEXT_TO_VIDEO_MODEL.
      - RUNWAY_TEXT_TO_VIDEO_DURATION: clip length in seconds.
      - RUNWAY_TASK_TIMEOUT: seconds to wait for a task before giving up.

    Logging:
      - LOG_LEVEL: e.g. DEBUG, INFO.
      - LOG_FORMAT: "json" or "text".
    """
    runway_cfg = RunwayConfig(
        api_key=os.environ.get("RUNWAYML_API_SECRET") or None,
        image_model=os.environ.get("RUNWAY_IMAGE_MODEL", "gen4_image"),
        video_model=os.environ.get("RUNWAY_VIDEO_MODEL", "gen4_turbo"),
        text_to_video_model=os.environ.get(
            "RUNWAY_TEXT_TO_VIDEO_MODEL", "veo3"
        ),
        text_to_video_duration=int(
            os.environ.get("RUNWAY_TEXT_TO_VIDEO_DURATION", "8")
        ),
        task_timeout_sec=float(os.environ.get("RUNWAY_TASK_TIMEOUT", "600")),
        max_retries=int(os.environ.get("RUNWAY_MAX_RETRIES", "2")),
    )
    logging_cfg = LoggingConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format=os.environ.get("LOG_FORMAT", "json"),
    )

    return AppConfig(runway=runway_cfg, logging=logging_cfg)
