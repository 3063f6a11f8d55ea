"""
API endpoints for logo generation, post-processing and downloads.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path
from fastapi.responses import Response

from app.api.deps import (
    get_file_saver,
    get_image_generation_client,
    get_job_store,
    get_resource_store,
    get_team_store,
)
from app.core.config import settings
from app.core.exceptions import (
    BatchInProgressError,
    GenerationError,
    ImageDecodeError,
    ImageFetchError,
    TeamBusyError,
    TeamNotFoundError,
)
from app.core.logging import logger
from app.core.team_store import BatchJob, JobStore, TeamStore
from app.schemas.logo import (
    BatchJobResponse,
    BatchJobStatusResponse,
    CropBox,
    GenerateLogoResponse,
    PostProcessOptions,
    PostProcessRequest,
    PostProcessResponse,
    ResourceInfo,
    SavedResourceResponse,
    TeamOutcome,
)
from app.utils.capabilities import FileSaver, safe_filename
from app.utils.image_generation_client import ImageGenerationClient
from app.utils.logo_generation import generate_all_logos, generate_team_logo, post_process_team_logo
from app.utils.postprocess import ProcessedLogo, post_process_logo
from app.utils.resources import ResourceHandle, ResourceStore

router = APIRouter()


def _resource_info(handle: ResourceHandle) -> ResourceInfo:
    return ResourceInfo(
        resource_id=handle.resource_id,
        url=handle.url,
        media_type=handle.media_type,
        filename=handle.filename,
    )


def _post_process_response(processed: ProcessedLogo) -> PostProcessResponse:
    box = processed.crop_box
    return PostProcessResponse(
        png=_resource_info(processed.png),
        svg=_resource_info(processed.svg) if processed.svg else None,
        width=processed.width,
        height=processed.height,
        crop_box=CropBox(min_x=box.min_x, min_y=box.min_y, max_x=box.max_x, max_y=box.max_y) if box else None,
    )


@router.post("/generate-all", response_model=BatchJobResponse, status_code=202)
async def generate_all(
    background_tasks: BackgroundTasks,
    store: TeamStore = Depends(get_team_store),
    jobs: JobStore = Depends(get_job_store),
    client: ImageGenerationClient = Depends(get_image_generation_client),
) -> BatchJobResponse:
    """
    Start generating logos for every team.

    Poll ``/logos/jobs/{job_id}`` for progress. A running batch cannot be
    cancelled.
    """
    if not len(store):
        raise HTTPException(status_code=400, detail="No teams loaded")
    active = jobs.active()
    if active is not None or store.batch_running:
        detail = f"Batch job {active.job_id} is still {active.status}" if active else "A logo batch is already running"
        raise HTTPException(status_code=409, detail=detail)

    job = jobs.create(total=len(store))
    logger.info(f"Starting batch job {job.job_id} for {job.total} teams")
    background_tasks.add_task(_run_batch_job, store, client, job)

    return BatchJobResponse(
        job_id=job.job_id,
        status=job.status,
        total=job.total,
        message="Logo generation started",
    )


async def _run_batch_job(store: TeamStore, client: ImageGenerationClient, job: BatchJob):
    try:
        await generate_all_logos(store, client, job)
    except Exception as e:
        logger.error(f"Batch job {job.job_id} failed: {str(e)}", exc_info=True)


@router.get("/jobs/{job_id}", response_model=BatchJobStatusResponse)
async def get_job_status(
    job_id: str = Path(..., description="Batch job ID"),
    jobs: JobStore = Depends(get_job_store),
) -> BatchJobStatusResponse:
    job = jobs.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Batch job not found")

    outcomes = [TeamOutcome(**o) for o in job.outcomes]
    return BatchJobStatusResponse(
        job_id=job.job_id,
        status=job.status,
        completed=job.completed,
        total=job.total,
        succeeded=sum(1 for o in outcomes if o.success),
        failed=sum(1 for o in outcomes if not o.success),
        outcomes=outcomes,
    )


@router.post("/postprocess", response_model=PostProcessResponse)
async def post_process_url(
    request: PostProcessRequest,
    resources: ResourceStore = Depends(get_resource_store),
) -> PostProcessResponse:
    """Quantize, crop and export an arbitrary image URL."""
    try:
        processed = await post_process_logo(
            request.image_url,
            request.primary,
            request.secondary,
            resources,
            vectorize=settings.VECTORIZE_BY_DEFAULT if request.vectorize is None else request.vectorize,
            filename_stem=safe_filename(request.filename) if request.filename else "logo",
        )
    except (ImageFetchError, ImageDecodeError) as e:
        logger.error(f"Post-processing failed for {request.image_url}: {str(e)}")
        raise HTTPException(status_code=502, detail=f"Post-processing failed: {str(e)}")
    return _post_process_response(processed)


@router.get("/resources/{resource_id}")
async def download_resource(
    resource_id: str = Path(..., description="Resource ID"),
    resources: ResourceStore = Depends(get_resource_store),
) -> Response:
    resource = resources.get(resource_id)
    if resource is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    return Response(
        content=resource.data,
        media_type=resource.media_type,
        headers={"Content-Disposition": f'attachment; filename="{resource.filename}"'},
    )


@router.post("/resources/{resource_id}/save", response_model=SavedResourceResponse)
async def save_resource(
    resource_id: str = Path(..., description="Resource ID"),
    resources: ResourceStore = Depends(get_resource_store),
    saver: FileSaver = Depends(get_file_saver),
) -> SavedResourceResponse:
    """Write a resource to the export directory."""
    resource = resources.get(resource_id)
    if resource is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    path = saver.save(resource.filename, resource.data)
    return SavedResourceResponse(resource_id=resource_id, path=path)


@router.post("/{team_id}/generate", response_model=GenerateLogoResponse)
async def generate_logo(
    team_id: str = Path(..., description="Team ID"),
    store: TeamStore = Depends(get_team_store),
    client: ImageGenerationClient = Depends(get_image_generation_client),
) -> GenerateLogoResponse:
    """Generate a logo for one team using its current settings."""
    try:
        team = await generate_team_logo(team_id, store, client)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (BatchInProgressError, TeamBusyError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return GenerateLogoResponse(team_id=team.id, url=team.logo_url)


@router.post("/{team_id}/postprocess", response_model=PostProcessResponse)
async def post_process_team(
    options: PostProcessOptions = None,
    team_id: str = Path(..., description="Team ID"),
    store: TeamStore = Depends(get_team_store),
    resources: ResourceStore = Depends(get_resource_store),
) -> PostProcessResponse:
    """Quantize, crop and export a team's current logo with the team's colors."""
    vectorize = options.vectorize if options else None
    try:
        team = store.get(team_id)
        processed = await post_process_team_logo(team_id, store, resources, vectorize=vectorize)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (ImageFetchError, ImageDecodeError) as e:
        logger.error(f"Post-processing failed for {team.name}: {str(e)}")
        raise HTTPException(status_code=502, detail=f"Post-processing failed for {team.name}: {str(e)}")
    return _post_process_response(processed)
