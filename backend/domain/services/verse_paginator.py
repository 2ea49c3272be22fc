from typing import List
from pydantic import BaseModel

from domain.exceptions import NotFoundError
from domain.services.criteria_builder import validate_pagination

VERSE_DELIMITER = "\n\n"
DEFAULT_VERSE_LIMIT = 2

class VersePage(BaseModel):
    page: int
    limit: int
    verses: List[str]
    total: int

def split_verses(text: str) -> List[str]:
    """歌詞を空行区切りで節に分割する (空文字列は空の節1つになる)"""
    return text.split(VERSE_DELIMITER)

def paginate_verses(text: str, page: int, limit: int = DEFAULT_VERSE_LIMIT) -> VersePage:
    validate_pagination(page, limit)

    verses = split_verses(text)
    total = len(verses)

    # 範囲外のページは空の成功ではなく NotFound として扱う
    start = (page - 1) * limit
    if start >= total:
        raise NotFoundError("No verses on this page")

    end = min(start + limit, total)
    return VersePage(page=page, limit=limit, verses=verses[start:end], total=total)
