"""
Logo generation workflows over the team collection.
"""
from typing import Optional

from app.core.config import settings
from app.core.exceptions import BatchInProgressError, GenerationError, TeamBusyError, TeamNotFoundError
from app.core.logging import logger
from app.core.team_store import BatchJob, TeamStore
from app.schemas.team import Team
from app.utils.batch_runner import BatchResult, run_batch
from app.utils.capabilities import logo_stem
from app.utils.image_generation_client import ImageGenerationClient
from app.utils.postprocess import ProcessedLogo, post_process_logo
from app.utils.prompts import build_logo_prompt
from app.utils.resources import ResourceStore


def _update_if_present(store: TeamStore, team_id: str, **changes) -> Optional[Team]:
    """Apply ``changes`` unless the team was removed while we were working on it."""
    try:
        return store.update(team_id, **changes)
    except TeamNotFoundError:
        logger.debug(f"Team {team_id} was removed while generating")
        return None


async def request_logo(team: Team, client: ImageGenerationClient) -> str:
    """One generation call for a team; returns the image locator."""
    prompt = build_logo_prompt(team)
    return await client.generate(prompt, team.seed, settings.IMAGE_SIZE, settings.IMAGE_SIZE)


async def generate_team_logo(team_id: str, store: TeamStore, client: ImageGenerationClient) -> Team:
    """
    Generate a logo for one team and store its locator.

    The busy flag is set for the duration of the call and cleared whether or
    not it succeeds, so the user can retry straight away.

    Raises:
        TeamNotFoundError: unknown team id, or the team was removed meanwhile
        BatchInProgressError: a batch currently owns the collection
        TeamBusyError: the team already has a generation in flight
        GenerationError: the endpoint failed; the message names the team
    """
    team = store.get(team_id)
    if store.batch_running:
        raise BatchInProgressError("A logo batch is running; wait for it to finish")
    if team.generating:
        raise TeamBusyError(team.name)

    team = store.update(team_id, generating=True)
    try:
        url = await request_logo(team, client)
        _update_if_present(store, team_id, logo_url=url)
        logger.info(f"Generated logo for {team.name}")
    except GenerationError as e:
        logger.error(f"Logo generation failed for {team.name}: {str(e)}")
        raise GenerationError(f"Logo generation failed for {team.name}. Try again.", status_code=e.status_code) from e
    finally:
        _update_if_present(store, team_id, generating=False)
    return store.get(team_id)


async def generate_all_logos(
    store: TeamStore,
    client: ImageGenerationClient,
    job: BatchJob,
    max_concurrency: int = None,
    max_attempts: int = None,
    retry_delay: float = None,
) -> BatchResult:
    """
    Generate logos for every team currently in the store.

    Runs at most BATCH_MAX_CONCURRENCY generations at once and retries each
    team up to BATCH_MAX_ATTEMPTS times. Progress is written to ``job``.
    Only one batch may run over a store at a time.

    Raises:
        BatchInProgressError: another batch is already running
    """
    if store.batch_running:
        job.status = "failed"
        raise BatchInProgressError("A logo batch is already running")
    store.batch_running = True

    try:
        teams = store.list()
        job.status = "running"
        job.total = len(teams)

        async def generate(team: Team) -> str:
            # read the latest edit of the team, not the snapshot taken at queue time
            current = store.get(team.id)
            url = await request_logo(current, client)
            _update_if_present(store, team.id, logo_url=url)
            return url

        def set_busy(team: Team, busy: bool):
            _update_if_present(store, team.id, generating=busy)

        try:
            result = await run_batch(
                teams,
                generate,
                key=lambda t: t.name,
                set_busy=set_busy,
                on_progress=job.record_progress,
                max_concurrency=max_concurrency or settings.BATCH_MAX_CONCURRENCY,
                max_attempts=max_attempts or settings.BATCH_MAX_ATTEMPTS,
                retry_delay=settings.BATCH_RETRY_DELAY if retry_delay is None else retry_delay,
            )
        except Exception:
            job.status = "failed"
            raise
    finally:
        store.batch_running = False

    job.outcomes = [
        {
            "team_id": team.id,
            "team_name": team.name,
            "success": outcome.success,
            "attempts": outcome.attempts,
            "error": outcome.error,
        }
        for team, outcome in zip(teams, result.outcomes)
    ]
    job.status = "completed"
    return result


async def post_process_team_logo(
    team_id: str,
    store: TeamStore,
    resources: ResourceStore,
    vectorize: Optional[bool] = None,
) -> ProcessedLogo:
    """
    Post-process the current logo of a team with the team's own colors.

    Raises:
        TeamNotFoundError: unknown team id
        ValueError: the team has no generated logo yet
        ImageFetchError / ImageDecodeError: see ``post_process_logo``
    """
    team = store.get(team_id)
    if not team.logo_url:
        raise ValueError(f"{team.name} has no logo yet")

    return await post_process_logo(
        team.logo_url,
        team.primary,
        team.secondary,
        resources,
        vectorize=settings.VECTORIZE_BY_DEFAULT if vectorize is None else vectorize,
        filename_stem=logo_stem(team.name),
    )
