"""
Dependency functions for API endpoints.
"""
from typing import Optional

from app.core.config import settings
from app.core.team_store import JobStore, TeamStore
from app.utils.capabilities import FileSaver, LocalFileSaver
from app.utils.image_generation_client import ImageGenerationClient
from app.utils.league_client import LeagueImportClient
from app.utils.resources import ResourceStore

team_store = TeamStore()
job_store = JobStore()
resource_store = ResourceStore()

image_generation_client: Optional[ImageGenerationClient] = None
league_import_client: Optional[LeagueImportClient] = None


def get_team_store() -> TeamStore:
    return team_store


def get_job_store() -> JobStore:
    return job_store


def get_resource_store() -> ResourceStore:
    return resource_store


def get_image_generation_client() -> ImageGenerationClient:
    """Get or create the image generation client."""
    global image_generation_client
    if image_generation_client is None:
        image_generation_client = ImageGenerationClient()
    return image_generation_client


def get_league_import_client() -> LeagueImportClient:
    """Get or create the league import client."""
    global league_import_client
    if league_import_client is None:
        league_import_client = LeagueImportClient()
    return league_import_client


def get_file_saver() -> FileSaver:
    return LocalFileSaver(settings.EXPORT_DIR)


async def close_clients():
    """Close any HTTP clients created during the app's lifetime."""
    global image_generation_client, league_import_client
    if image_generation_client is not None:
        await image_generation_client.close()
        image_generation_client = None
    if league_import_client is not None:
        await league_import_client.close()
        league_import_client = None
