"""
Schema definitions for teams.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Team(BaseModel):
    """A fully normalized team. Changes produce a new instance."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Team identifier within the league")
    name: str = Field(..., description="Team display name")
    owner: str = Field("", description="Team owner / manager")
    mascot: str = Field(..., description="Subject phrase for the logo")
    primary: str = Field(..., description="Primary color (hex or basic name)")
    secondary: str = Field(..., description="Secondary color (hex or basic name)")
    seed: int = Field(..., ge=1, description="Variation seed for the generation endpoint")
    style: int = Field(..., ge=0, le=5, description="Style index 0..5")
    logo_url: str = Field("", description="Locator of the latest generated logo")
    generating: bool = Field(False, description="True while a generation is in flight")


class TeamDraft(BaseModel):
    """Loose team input; missing or malformed fields get defaults on normalization."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    name: Optional[str] = None
    owner: Optional[str] = None
    mascot: Optional[str] = None
    primary: Optional[str] = None
    secondary: Optional[str] = None
    seed: Optional[Any] = None
    style: Optional[Any] = None
    logo_url: Optional[str] = None


class TeamUpdate(BaseModel):
    """Edit patch; only the fields that are set are applied."""
    name: Optional[str] = None
    owner: Optional[str] = None
    mascot: Optional[str] = None
    primary: Optional[str] = None
    secondary: Optional[str] = None
    seed: Optional[Any] = None
    style: Optional[Any] = None


class TeamListResponse(BaseModel):
    league_name: Optional[str] = None
    teams: List[Team] = Field(default_factory=list)
