from pydantic import BaseModel
from typing import List, Optional

from indiamap.constants import MAX_HEIGHT_M


class BuildRequest(BaseModel):
    name: str = "india-map"
    output_format: str = "glb"      # "glb" or "stl"
    max_height_m: float = MAX_HEIGHT_M


class JobResponse(BaseModel):
    job_id: str
    status: str
    progress: float
    message: str
    messages: List[str] = []
    result: Optional[dict] = None


class StateInfo(BaseModel):
    name: str
    population: int
    capital: str


class GeoDataSummary(BaseModel):
    source: str
    count: int
    total_population: int
    states: List[StateInfo]
    messages: List[str] = []


class ModelInfo(BaseModel):
    name: str
    filename: str
    size_kb: Optional[float] = None
