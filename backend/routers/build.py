import logging

from fastapi import APIRouter, HTTPException

from backend.jobs import Job, job_manager
from backend.models import BuildRequest, JobResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/build", tags=["build"])

OUTPUT_FORMATS = ("glb", "stl")


def _job_response(job: Job) -> JobResponse:
    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        messages=list(job.messages),
        result=job.result,
    )


@router.post("", response_model=JobResponse)
async def start_build(request: BuildRequest):
    """Start a map build.

    Geo data is resolved (remote, then embedded fallback) inside the
    background job; the caller receives a job ID immediately and can poll
    ``/status/{job_id}``. Status notifications show up in ``messages``.
    """
    if request.output_format not in OUTPUT_FORMATS:
        raise HTTPException(
            status_code=400,
            detail=f"output_format must be one of {', '.join(OUTPUT_FORMATS)}")
    if request.max_height_m <= 0:
        raise HTTPException(status_code=400, detail="max_height_m must be positive")

    job = job_manager.create_job()
    job_manager.start_build(job, request.name,
                            output_format=request.output_format,
                            max_height_m=request.max_height_m)
    return _job_response(job)


@router.get("/status/{job_id}", response_model=JobResponse)
async def get_build_status(job_id: str):
    """Poll the status of a running or completed build job."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_response(job)
