"""
In-memory team collection and batch job registry.

Nothing here is persisted. All mutations are single synchronous assignments
made from the event loop thread, so concurrent generation tasks never see a
partially written team.
"""
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.core.exceptions import TeamNotFoundError
from app.core.logging import logger
from app.schemas.team import Team


class TeamStore:
    """Ordered collection of teams keyed by id."""

    def __init__(self):
        self.league_name: Optional[str] = None
        # set while a batch owns the collection; at most one batch at a time
        self.batch_running = False
        self._teams: Dict[str, Team] = {}

    def replace_all(self, teams: List[Team], league_name: Optional[str] = None) -> List[Team]:
        self._teams = {}
        for team in teams:
            if team.id in self._teams:
                logger.warning(f"Duplicate team id {team.id}; keeping the later entry")
            self._teams[team.id] = team
        self.league_name = league_name
        logger.info(f"Loaded {len(self._teams)} teams{f' for {league_name}' if league_name else ''}")
        return self.list()

    def list(self) -> List[Team]:
        return list(self._teams.values())

    def get(self, team_id: str) -> Team:
        team = self._teams.get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        return team

    def put(self, team: Team) -> Team:
        """Insert or replace a team, keeping its position when it exists."""
        self._teams[team.id] = team
        return team

    def update(self, team_id: str, **changes) -> Team:
        """Replace a team with a copy carrying ``changes``."""
        updated = self.get(team_id).model_copy(update=changes)
        self._teams[team_id] = updated
        return updated

    def remove(self, team_id: str) -> Team:
        team = self.get(team_id)
        del self._teams[team_id]
        return team

    def busy_count(self) -> int:
        return sum(1 for t in self._teams.values() if t.generating)

    def __len__(self):
        return len(self._teams)


@dataclass
class BatchJob:
    """Progress of one "generate all" run."""
    total: int
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: str = "pending"
    completed: int = 0
    outcomes: list = field(default_factory=list)

    def record_progress(self, completed: int, total: int):
        # progress only moves forward
        if completed > self.completed:
            self.completed = completed
        self.total = total


class JobStore:
    """Registry of batch jobs for the lifetime of the process."""

    def __init__(self):
        self._jobs: Dict[str, BatchJob] = {}

    def create(self, total: int) -> BatchJob:
        job = BatchJob(total=total)
        self._jobs[job.job_id] = job
        return job

    def get(self, job_id: str) -> Optional[BatchJob]:
        return self._jobs.get(job_id)

    def active(self) -> Optional[BatchJob]:
        """The job that is pending or running, if any."""
        for job in self._jobs.values():
            if job.status in ("pending", "running"):
                return job
        return None
