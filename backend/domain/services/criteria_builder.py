from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional
from pydantic import BaseModel
from sqlalchemy import and_, true
from sqlmodel import col

from domain.exceptions import InvalidInputError
from domain.models.song import Group, Song
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

class SongCriteria(BaseModel):
    """一覧取得の検索条件。未指定(None/空文字)のフィールドは条件なしを意味する"""
    group: Optional[str] = None
    song: Optional[str] = None
    release_date: Optional[date] = None
    text: Optional[str] = None
    link: Optional[str] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

@dataclass
class SongQuery:
    conditions: List[Any] = field(default_factory=list)
    # 条件の追加順に並んだバインド値。末尾は limit, offset の順
    parameters: List[Any] = field(default_factory=list)
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @property
    def predicate(self):
        return and_(true(), *self.conditions)

def validate_pagination(page: int, limit: int):
    if page < 1:
        raise InvalidInputError("Invalid page number")
    if limit < 1:
        raise InvalidInputError("Invalid limit number")

def build_song_query(criteria: SongCriteria) -> SongQuery:
    """
    検索条件から WHERE 句の条件リストとページング境界を組み立てる。
    条件は group, song, release_date, text, link の固定順で追加される。
    """
    validate_pagination(criteria.page, criteria.limit)

    query = SongQuery(limit=criteria.limit, offset=(criteria.page - 1) * criteria.limit)

    def add_ilike(column, value: Optional[str], label: str):
        if not value:
            return
        pattern = f"%{value}%"
        query.conditions.append(col(column).ilike(pattern))
        query.parameters.append(pattern)
        logger.debug(f"Adding filter for {label}: {value}")

    add_ilike(Group.name, criteria.group, "group")
    add_ilike(Song.title, criteria.song, "song")

    if criteria.release_date is not None:
        query.conditions.append(Song.release_date == criteria.release_date)
        query.parameters.append(criteria.release_date)
        logger.debug(f"Adding filter for release_date: {criteria.release_date}")

    add_ilike(Song.text, criteria.text, "text")
    add_ilike(Song.link, criteria.link, "link")

    query.parameters.extend([query.limit, query.offset])
    logger.debug(f"Adding pagination: LIMIT={query.limit}, OFFSET={query.offset}")
    return query
