from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session
from typing import Optional
from infra.database.connection import get_session
from api.schemas.song import SongCreate, SongRead, SongListResponse, VersesResponse, MessageResponse
from app.services.song_app_service import SongAppService
from domain.exceptions import SongbookError, InvalidInputError, NotFoundError
from domain.services.criteria_builder import SongCriteria, DEFAULT_LIMIT, DEFAULT_PAGE
from domain.services.patch_planner import SongPatch
from domain.services.verse_paginator import DEFAULT_VERSE_LIMIT
from utils.dates import parse_release_date

router = APIRouter()

def to_http_exception(e: SongbookError) -> HTTPException:
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    # StorageError / ExternalServiceError
    return HTTPException(status_code=500, detail=e.message)

@router.get("/songs", response_model=SongListResponse)
def get_songs(
    group_name: Optional[str] = Query(None, alias="groupName", description="Group name (partial match)"),
    song: Optional[str] = Query(None, description="Song title (partial match)"),
    release_date: Optional[str] = Query(None, alias="releaseDate", description="Release date (exact match)"),
    text: Optional[str] = Query(None, description="Lyrics (partial match)"),
    link: Optional[str] = Query(None, description="Link (partial match)"),
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    session: Session = Depends(get_session)
):
    """
    楽曲一覧をフィルタリングとページネーション付きで取得する。
    """
    try:
        parsed_date = parse_release_date(release_date)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid release date")

    criteria = SongCriteria(
        group=group_name,
        song=song,
        release_date=parsed_date,
        text=text,
        link=link,
        page=page,
        limit=limit,
    )
    try:
        return SongAppService(session).list_songs(criteria)
    except SongbookError as e:
        raise to_http_exception(e)

@router.get("/songs/{song_id}/text", response_model=VersesResponse)
def get_song_text(
    song_id: int,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_VERSE_LIMIT,
    session: Session = Depends(get_session)
):
    """
    歌詞を節 (空行区切り) 単位でページネーションして返す。
    """
    try:
        verse_page = SongAppService(session).get_verses(song_id, page, limit)
    except SongbookError as e:
        raise to_http_exception(e)
    return VersesResponse(**verse_page.model_dump())

@router.get("/songs/{song_id}", response_model=SongRead)
def get_song(song_id: int, session: Session = Depends(get_session)):
    try:
        return SongAppService(session).get_song(song_id)
    except SongbookError as e:
        raise to_http_exception(e)

@router.post("/songs", response_model=SongRead, status_code=201)
async def add_song(payload: SongCreate, session: Session = Depends(get_session)):
    """
    外部APIから releaseDate / text / link を取得して楽曲を登録する。
    """
    try:
        return await SongAppService(session).create_song(payload.group, payload.song)
    except SongbookError as e:
        raise to_http_exception(e)

@router.put("/songs/{song_id}", response_model=MessageResponse)
def update_song(song_id: int, patch: SongPatch, session: Session = Depends(get_session)):
    """
    送られてきたフィールドのみ更新する。group を指定するとグループ名自体が変更される。
    """
    try:
        SongAppService(session).update_song(song_id, patch)
    except SongbookError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Song updated successfully")

@router.delete("/songs/{song_id}", response_model=MessageResponse)
def delete_song(song_id: int, session: Session = Depends(get_session)):
    try:
        SongAppService(session).delete_song(song_id)
    except SongbookError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Song deleted successfully")
