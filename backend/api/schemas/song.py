from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date

class SongCreate(BaseModel):
    group: str
    song: str

class SongRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    group: str
    song: str
    release_date: Optional[date] = Field(default=None, alias="releaseDate")
    text: str = ""
    link: str = ""

class SongListResponse(BaseModel):
    page: int
    limit: int
    songs: List[SongRead]

class VersesResponse(BaseModel):
    page: int
    limit: int
    verses: List[str]
    total: int
    message: str = "Song text retrieved successfully"

class MessageResponse(BaseModel):
    message: str
