"""
Schema definitions for logo generation and post-processing.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class GenerateLogoResponse(BaseModel):
    team_id: str
    url: str = Field(..., description="Locator of the generated image")


class PostProcessRequest(BaseModel):
    """Post-process an explicit image URL"""
    image_url: str = Field(..., description="Image to fetch and process")
    primary: str = Field(..., description="Primary color")
    secondary: str = Field(..., description="Secondary color")
    vectorize: Optional[bool] = Field(None, description="Also trace an SVG (defaults to settings)")
    filename: Optional[str] = Field(None, description="Base filename for the exports")


class PostProcessOptions(BaseModel):
    vectorize: Optional[bool] = None


class CropBox(BaseModel):
    min_x: int
    min_y: int
    max_x: int
    max_y: int


class ResourceInfo(BaseModel):
    resource_id: str
    url: str
    media_type: str
    filename: str


class PostProcessResponse(BaseModel):
    png: ResourceInfo
    svg: Optional[ResourceInfo] = None
    width: int
    height: int
    crop_box: Optional[CropBox] = None


class SavedResourceResponse(BaseModel):
    resource_id: str
    path: str


class TeamOutcome(BaseModel):
    team_id: str
    team_name: str
    success: bool
    attempts: int
    error: Optional[str] = None


class BatchJobResponse(BaseModel):
    job_id: str
    status: str
    total: int
    message: str


class BatchJobStatusResponse(BaseModel):
    job_id: str
    status: str
    completed: int
    total: int
    succeeded: int = 0
    failed: int = 0
    outcomes: List[TeamOutcome] = Field(default_factory=list)
