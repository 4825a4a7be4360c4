from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import (
    AppConfig,
    build_config,
    DEFAULT_IMAGE_RATIO,
    DEFAULT_TEXT_TO_VIDEO_RATIO,
    DEFAULT_VIDEO_RATIO,
)
from .errors import EmptyOutputError
from .models.runway import RunwayEngine, TaskResult

logger = logging.getLogger(__name__)


@dataclass
class TaskSummary:
    id: str
    status: str
    ratio: str


@dataclass
class PipelineArtifacts:
    original_prompt: str
    video_prompt: str
    image_url: str
    video_url: str
    image_task: TaskSummary
    video_task: TaskSummary


@dataclass
class TextToVideoArtifacts:
    prompt: str
    video_url: str
    task: TaskSummary
    duration: int


def _summary(task: TaskResult, ratio: str) -> TaskSummary:
    return TaskSummary(id=task.id, status=task.status, ratio=ratio)


class ImageToVideoPipeline:
    """
    Prompt to image to video, in two sequential tasks.

    Step 1: text_to_image → still image URL
    Step 2: image_to_video → video URL animated from that image
    """

    def __init__(self, engine: RunwayEngine) -> None:
        self.engine = engine

    def run(
        self,
        prompt: str,
        image_ratio: str = DEFAULT_IMAGE_RATIO.value,
        video_ratio: str = DEFAULT_VIDEO_RATIO.value,
        video_prompt: Optional[str] = None,
    ) -> PipelineArtifacts:
        video_prompt = video_prompt or prompt

        # Step 1: image
        logger.info("Starting text-to-image generation with prompt: %s", prompt)
        image_task = self.engine.generate_image(prompt, image_ratio)
        image_url = image_task.first_output
        if image_url is None:
            raise EmptyOutputError("image")
        logger.info("Generated image URL: %s", image_url)

        # Step 2: video from the generated image
        logger.info("Starting image-to-video generation")
        video_task = self.engine.animate_image(image_url, video_prompt, video_ratio)
        video_url = video_task.first_output
        if video_url is None:
            # the image is still useful to the caller
            raise EmptyOutputError("video", extra={"imageUrl": image_url})

        return PipelineArtifacts(
            original_prompt=prompt,
            video_prompt=video_prompt,
            image_url=image_url,
            video_url=video_url,
            image_task=_summary(image_task, image_ratio),
            video_task=_summary(video_task, video_ratio),
        )


class TextToVideoPipeline:
    """Prompt straight to video in a single task."""

    def __init__(self, engine: RunwayEngine) -> None:
        self.engine = engine

    def run(
        self,
        prompt: str,
        ratio: str = DEFAULT_TEXT_TO_VIDEO_RATIO.value,
    ) -> TextToVideoArtifacts:
        logger.info("Starting text-to-video generation with prompt: %s", prompt)
        task = self.engine.text_to_video(prompt, ratio)
        video_url = task.first_output
        if video_url is None:
            raise EmptyOutputError("video")

        return TextToVideoArtifacts(
            prompt=prompt,
            video_url=video_url,
            task=_summary(task, ratio),
            duration=self.engine.cfg.text_to_video_duration,
        )


def create_pipeline(cfg: AppConfig | None = None) -> ImageToVideoPipeline:
    """
    Factory to build the image-to-video pipeline from config.
    """
    cfg = cfg or build_config()
    return ImageToVideoPipeline(RunwayEngine(cfg.runway))


def create_text_to_video_pipeline(cfg: AppConfig | None = None) -> TextToVideoPipeline:
    cfg = cfg or build_config()
    return TextToVideoPipeline(RunwayEngine(cfg.runway))
