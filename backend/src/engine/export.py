"""Export job manager — renders waveform variants in the background with progress and cancel."""

import logging
import os
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable

import numpy as np
import sentry_sdk

from image.writer import write_image
from waveform.config import RenderConfig, ScaleMode, WaveformMode, check_config
from waveform.partition import as_samples
from waveform.render import render

logger = logging.getLogger(__name__)


class ExportStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"


def variant_filename(config: RenderConfig, ext: str = ".png") -> str:
    return f"waveform_{config.mode.value}_{config.scale.value}{ext}"


def variant_configs(base: RenderConfig) -> list[RenderConfig]:
    """Every mode x scale combination of base.

    HALF only draws one side, so its variants get half the base height.
    """
    configs = []
    for mode in WaveformMode:
        height = base.image_height
        if mode is WaveformMode.HALF:
            height = max(1, height // 2)
        for scale in ScaleMode:
            configs.append(replace(base, mode=mode, scale=scale, image_height=height))
    return configs


def export_variants(
    samples,
    output_dir: str,
    configs: list[RenderConfig],
    progress: Callable[[int, int], None] | None = None,
    cancel: threading.Event | None = None,
) -> list[str]:
    """Render each config and write it to output_dir. Returns written paths.

    All configs are validated before the first image is written. Stops early
    (returning what was written so far) once cancel is set.
    """
    arr = as_samples(samples)
    for config in configs:
        check_config(config)

    written: list[str] = []
    for i, config in enumerate(configs):
        if cancel is not None and cancel.is_set():
            logger.info("Export cancelled after %d/%d images", i, len(configs))
            break
        path = os.path.join(output_dir, variant_filename(config))
        write_image(path, render(arr, config))
        written.append(path)
        if progress is not None:
            progress(i + 1, len(configs))
    return written


@dataclass
class ExportJob:
    """Tracks state of a background export."""

    status: ExportStatus = ExportStatus.IDLE
    current_image: int = 0
    total_images: int = 0
    error: str | None = None
    output_dir: str = ""
    paths: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _cancel_event: threading.Event = field(default_factory=threading.Event)
    _thread: threading.Thread | None = field(default=None, repr=False)

    @property
    def progress(self) -> float:
        if self.total_images == 0:
            return 0.0
        return self.current_image / self.total_images

    def cancel(self):
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the export thread finishes. Returns False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()


class ExportManager:
    """Manages background export jobs. One job at a time."""

    def __init__(self):
        self._job: ExportJob | None = None

    @property
    def job(self) -> ExportJob | None:
        return self._job

    def start(
        self,
        samples: np.ndarray,
        output_dir: str,
        configs: list[RenderConfig],
    ) -> ExportJob:
        """Start a background export. Returns the job for status tracking.

        Raises:
            RuntimeError: If an export is already running.
        """
        if self._job is not None and self._job.status == ExportStatus.RUNNING:
            raise RuntimeError("Export already in progress")

        job = ExportJob(output_dir=output_dir, total_images=len(configs))
        self._job = job

        thread = threading.Thread(
            target=self._run_export,
            args=(job, samples, output_dir, configs),
            daemon=True,
        )
        job._thread = thread
        job.status = ExportStatus.RUNNING
        thread.start()

        return job

    def _run_export(
        self,
        job: ExportJob,
        samples: np.ndarray,
        output_dir: str,
        configs: list[RenderConfig],
    ):
        def _progress(done: int, total: int):
            with job._lock:
                job.current_image = done

        try:
            paths = export_variants(
                samples, output_dir, configs, _progress, job._cancel_event
            )
            with job._lock:
                job.paths = paths
                if len(paths) < len(configs):
                    job.status = ExportStatus.CANCELLED
                else:
                    job.status = ExportStatus.COMPLETE

        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.exception("Export failed")
            with job._lock:
                job.status = ExportStatus.ERROR
                job.error = f"Export failed: {type(e).__name__}: {e}"

    def cancel(self) -> bool:
        """Cancel the running export. Returns False if nothing is running."""
        if self._job is None or self._job.status != ExportStatus.RUNNING:
            return False
        self._job.cancel()
        return True

    def get_status(self) -> dict:
        """Return serializable status dict."""
        if self._job is None:
            return {
                "status": ExportStatus.IDLE.value,
                "progress": 0.0,
                "current_image": 0,
                "total_images": 0,
            }
        job = self._job
        with job._lock:
            status = {
                "status": job.status.value,
                "progress": round(job.progress, 4),
                "current_image": job.current_image,
                "total_images": job.total_images,
                "output_dir": job.output_dir,
                "paths": list(job.paths),
            }
            if job.error is not None:
                status["error"] = job.error
        return status
