from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from runwayml import (
    APIConnectionError,
    APIStatusError,
    RunwayML,
    TaskFailedError,
    TaskTimeoutError,
)

from ..config import RunwayConfig
from ..errors import (
    GenerationTaskFailedError,
    GenerationTimeoutError,
    UpstreamAPIError,
)

logger = logging.getLogger(__name__)


@dataclass
class TaskResult:
    id: str
    status: str
    output: List[str] = field(default_factory=list)

    @property
    def first_output(self) -> Optional[str]:
        return self.output[0] if self.output else None


class RunwayEngine:
    """
    Thin wrapper around the RunwayML SDK.

    Each operation creates one task and blocks until the task finishes.
    SDK exceptions are translated into VideoGenError subclasses.
    """

    def __init__(self, cfg: RunwayConfig, client: Any = None) -> None:
        self.cfg = cfg
        self._client = client

    def _load(self):
        if self._client is None:
            self._client = RunwayML(
                api_key=self.cfg.api_key,
                max_retries=self.cfg.max_retries,
            )
        return self._client

    def _wait(self, pending: Any, kind: str) -> TaskResult:
        try:
            task = pending.wait_for_task_output(timeout=self.cfg.task_timeout_sec)
        except TaskFailedError as exc:
            details = getattr(exc, "task_details", None)
            task_id = getattr(details, "id", None)
            logger.error(
                "%s task failed: %s", kind, exc, extra={"task_id": task_id}
            )
            raise GenerationTaskFailedError(str(exc), task_id=task_id) from exc
        except TaskTimeoutError as exc:
            logger.error("%s task timed out: %s", kind, exc)
            raise GenerationTimeoutError(str(exc)) from exc

        result = TaskResult(
            id=str(task.id),
            status=str(task.status),
            output=list(getattr(task, "output", None) or []),
        )
        logger.info(
            "%s task %s finished with status %s",
            kind,
            result.id,
            result.status,
            extra={"task_id": result.id},
        )
        return result

    def _submit(self, kind: str, create, **params: Any) -> TaskResult:
        try:
            pending = create(**params)
            return self._wait(pending, kind)
        except APIStatusError as exc:
            logger.error("%s request rejected (%s): %s", kind, exc.status_code, exc)
            raise UpstreamAPIError(str(exc), upstream_status=exc.status_code) from exc
        except APIConnectionError as exc:
            logger.error("%s request could not reach the API: %s", kind, exc)
            raise UpstreamAPIError(str(exc)) from exc

    def generate_image(self, prompt: str, ratio: str) -> TaskResult:
        client = self._load()
        return self._submit(
            "text_to_image",
            client.text_to_image.create,
            model=self.cfg.image_model,
            prompt_text=prompt,
            ratio=ratio,
        )

    def animate_image(self, image_url: str, prompt: str, ratio: str) -> TaskResult:
        client = self._load()
        return self._submit(
            "image_to_video",
            client.image_to_video.create,
            model=self.cfg.video_model,
            prompt_image=image_url,
            prompt_text=prompt,
            ratio=ratio,
        )

    def text_to_video(self, prompt: str, ratio: str) -> TaskResult:
        client = self._load()
        return self._submit(
            "text_to_video",
            client.text_to_video.create,
            model=self.cfg.text_to_video_model,
            prompt_text=prompt,
            ratio=ratio,
            duration=self.cfg.text_to_video_duration,
        )
