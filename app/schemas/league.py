"""
Schema definitions for league import.
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    SLEEPER = "sleeper"
    MFL = "mfl"
    ESPN = "espn"


class LeagueImportRequest(BaseModel):
    """Request schema for importing a league"""
    provider: Provider = Field(..., description="League provider")
    league_id: str = Field(..., min_length=1, description="Provider league identifier")
    swid: Optional[str] = Field(None, description="ESPN SWID cookie for private leagues")
    s2: Optional[str] = Field(None, description="ESPN espn_s2 cookie for private leagues")


class LeagueTeamRecord(BaseModel):
    """A team as returned by the league-import endpoint"""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    name: Optional[str] = None
    owner: Optional[str] = None


class LeagueImportResult(BaseModel):
    league_name: str = Field("", description="League display name")
    teams: List[LeagueTeamRecord] = Field(default_factory=list)
