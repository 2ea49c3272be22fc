import asyncio
from datetime import date
from typing import Optional
import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config import settings
from domain.exceptions import ExternalServiceError
from utils.dates import parse_release_date
from utils.logger import get_logger

logger = get_logger(__name__)

class SongDetail(BaseModel):
    """外部API /info のレスポンス"""
    model_config = ConfigDict(populate_by_name=True)

    release_date: Optional[date] = Field(default=None, alias="releaseDate")
    text: str = ""
    link: str = ""

    @field_validator("release_date", mode="before")
    @classmethod
    def _parse_release_date(cls, value):
        return parse_release_date(value)

async def fetch_song_details(group: str, title: str) -> SongDetail:
    """
    外部メタデータAPIから楽曲の詳細 (releaseDate, text, link) を取得する。
    リトライは行わず、失敗はすべて ExternalServiceError として送出する。
    """
    url = f"{settings.MUSIC_INFO_API_URL.rstrip('/')}/info"
    params = {"group": group, "song": title}
    timeout = aiohttp.ClientTimeout(total=settings.MUSIC_INFO_TIMEOUT)

    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    logger.error(f"Music info API returned {response.status} for group={group!r} song={title!r}")
                    raise ExternalServiceError(f"Music info API returned status {response.status}")
                data = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error(f"Get API request failed: {e}")
        raise ExternalServiceError("Failed to call external API") from e

    if not isinstance(data, dict):
        logger.error(f"Unexpected music info payload: {data!r}")
        raise ExternalServiceError("Unexpected response from external API")

    try:
        detail = SongDetail.model_validate(data)
    except ValidationError as e:
        logger.error(f"Failed to parse music info response: {e}")
        raise ExternalServiceError("Failed to parse external API response") from e

    logger.debug(f"Retrieved song details from external API: {detail}")
    return detail
