"""
Error types raised by the logo pipeline and its external clients.
"""


class LogoStudioError(Exception):
    """Base class for all application errors."""


class ImageFetchError(LogoStudioError):
    """The remote image could not be downloaded."""


class ImageDecodeError(LogoStudioError):
    """The downloaded bytes are not a decodable image."""


class GenerationError(LogoStudioError):
    """The image-generation endpoint did not produce an image."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class LeagueImportError(LogoStudioError):
    """The league-import endpoint failed or returned an unusable body."""


class TeamNotFoundError(LogoStudioError):
    """No team with the requested id exists in the collection."""

    def __init__(self, team_id: str):
        super().__init__(f"Team not found: {team_id}")
        self.team_id = team_id


class BatchInProgressError(LogoStudioError):
    """A batch generation is already running over the team collection."""


class TeamBusyError(LogoStudioError):
    """The team already has a generation in flight."""

    def __init__(self, team_name: str):
        super().__init__(f"{team_name} is already generating")
        self.team_name = team_name
