import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from indiamap.models import FeatureCollection

from backend import config
from backend.geodata_store import geodata_store

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"


@dataclass
class Job:
    id: str
    status: JobStatus = JobStatus.queued
    progress: float = 0.0
    message: str = "Queued"
    messages: List[str] = field(default_factory=list)
    result: Optional[dict] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _sync_build(collection: FeatureCollection, output_filename: str,
                output_format: str = "glb", max_height_m: float = None,
                status=None) -> dict:
    """Build and export the map scene in a worker thread."""
    from indiamap.builder import MapBuilder

    kwargs = {"status": status}
    if max_height_m is not None:
        kwargs["max_height_m"] = max_height_m
    builder = MapBuilder(**kwargs)
    ctx = builder.build(collection)

    output_path = config.OUTPUT_DIR / output_filename
    if output_format == "stl":
        path = builder.generate_stl(str(output_path))
    else:
        path = builder.generate_glb(str(output_path))

    return {
        "format": output_format,
        "path": path,
        "model_url": f"/output/{output_filename}",
        "source": collection.source,
        "states": len(ctx.meshes),
    }


def safe_filename(name: str, output_format: str) -> str:
    """Derive a filename-safe stem from *name*."""
    stem = "".join(
        c for c in name.lower().replace(" ", "-")
        if c.isalnum() or c in "-_"
    ) or "india-map"
    suffix = ".stl" if output_format == "stl" else ".glb"
    return f"{stem}{suffix}"


class JobManager:
    def __init__(self) -> None:
        self.jobs: dict[str, Job] = {}
        self._tasks: set = set()

    def create_job(self) -> Job:
        job = Job(id=str(uuid.uuid4()))
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.jobs.get(job_id)

    def start_build(self, job: Job, name: str, output_format: str = "glb",
                    max_height_m: float = None) -> None:
        """Schedule run_build on the running loop, keeping the task alive."""
        task = asyncio.create_task(self.run_build(
            job, name, output_format=output_format, max_height_m=max_height_m))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def run_build(self, job: Job, name: str, output_format: str = "glb",
                        max_height_m: float = None) -> None:
        """Execute the build pipeline, updating *job* with progress."""
        def _update(msg: str) -> None:
            job.message = msg
            job.messages.append(msg)

        try:
            job.status = JobStatus.running
            job.progress = 5.0
            _update("Resolving map data...")

            collection = await geodata_store.get(status=_update)
            job.progress = 40.0

            result = await asyncio.to_thread(
                _sync_build,
                collection,
                safe_filename(name, output_format),
                output_format=output_format,
                max_height_m=max_height_m,
                status=_update,
            )

            job.progress = 100.0
            job.status = JobStatus.completed
            job.result = result
            _update("Build complete")

        except Exception as exc:
            logger.exception("Build failed for job %s", job.id)
            job.status = JobStatus.failed
            job.progress = 0.0
            _update(f"Build failed: {exc}")


# Singleton instance used across the application
job_manager = JobManager()
