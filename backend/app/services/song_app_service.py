from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from api.schemas.song import SongRead, SongListResponse
from domain.exceptions import InvalidInputError, NotFoundError, StorageError
from domain.models.song import Song
from domain.services.criteria_builder import SongCriteria, build_song_query, validate_pagination
from domain.services.patch_planner import SongPatch, plan_song_patch
from domain.services.verse_paginator import VersePage, paginate_verses
from infra.repositories.group_repository import GroupRepository
from infra.repositories.song_repository import SongRepository
from utils.external_metadata import fetch_song_details
from utils.logger import get_logger

logger = get_logger(__name__)

def to_song_read(song: Song, group_name: str) -> SongRead:
    return SongRead(
        id=song.id,
        group=group_name,
        song=song.title,
        release_date=song.release_date,
        text=song.text or "",
        link=song.link or "",
    )

class SongAppService:
    """
    楽曲カタログのユースケース。
    リポジトリは flush までを担当し、commit / rollback はこのクラスで一括管理する。
    """
    def __init__(self, session: Session):
        self.session = session
        self.repository = SongRepository(session)
        self.group_repository = GroupRepository(session)

    def _rollback(self):
        try:
            self.session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback failed: {e}")

    def list_songs(self, criteria: SongCriteria) -> SongListResponse:
        song_query = build_song_query(criteria)
        try:
            rows = self.repository.search(song_query)
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to retrieve songs: {e}")
            raise StorageError("Failed to retrieve songs") from e

        songs: List[SongRead] = [to_song_read(song, group_name) for song, group_name in rows]
        logger.info(f"Retrieved {len(songs)} songs successfully")
        return SongListResponse(page=criteria.page, limit=criteria.limit, songs=songs)

    def get_song(self, song_id: int) -> SongRead:
        try:
            row = self.repository.get_with_group(song_id)
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to retrieve song {song_id}: {e}")
            raise StorageError("Failed to retrieve song") from e

        if not row:
            raise NotFoundError("Song not found")
        song, group_name = row
        return to_song_read(song, group_name)

    def get_verses(self, song_id: int, page: int, limit: int) -> VersePage:
        validate_pagination(page, limit)
        try:
            song = self.repository.get_by_id(song_id)
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to retrieve song text for ID {song_id}: {e}")
            raise StorageError("Failed to retrieve song text") from e

        if not song:
            logger.info(f"Song with ID {song_id} not found")
            raise NotFoundError("Song not found")

        return paginate_verses(song.text or "", page, limit)

    async def create_song(self, group: str, title: str) -> SongRead:
        if not group or not group.strip():
            raise InvalidInputError("Field 'group' is required")
        if not title or not title.strip():
            raise InvalidInputError("Field 'song' is required")

        # 外部APIの失敗時は DB に一切書き込まない
        detail = await fetch_song_details(group, title)

        try:
            group_row = self.group_repository.find_or_create(group)
            song = self.repository.add(Song(
                group_id=group_row.id,
                title=title,
                release_date=detail.release_date,
                text=detail.text,
                link=detail.link,
            ))
            created = to_song_read(song, group_row.name)
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to insert song into database: {e}")
            raise StorageError("Failed to insert song into database") from e

        logger.info(f"Song successfully added to database with ID: {created.id}")
        return created

    def update_song(self, song_id: int, patch: SongPatch) -> bool:
        """
        パッチを1トランザクションで適用する。
        group はこの曲が参照するグループ自体を改名するため、同じグループの全曲に反映される。
        songs 側の更新対象がなければ、その時点で成功として commit する。
        """
        plan = plan_song_patch(patch)
        logger.debug(f"Update plan for song {song_id}: group={plan.group_name!r} assignments={plan.assignments}")

        try:
            if plan.renames_group:
                group_id = self.repository.get_group_id(song_id)
                if group_id is not None:
                    self.group_repository.rename(group_id, plan.group_name)

            if not plan.has_song_changes:
                self.session.commit()
                return True

            if not self.repository.update_fields(song_id, plan.assignments):
                # グループ改名も含めて取り消す
                self._rollback()
                logger.warning(f"No song found with ID: {song_id}")
                raise NotFoundError("Song not found")

            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to update song {song_id}: {e}")
            raise StorageError("Failed to update song") from e

        logger.info(f"Song with ID {song_id} updated successfully")
        return True

    def delete_song(self, song_id: int) -> bool:
        try:
            song = self.repository.get_by_id(song_id)
            if not song:
                logger.info(f"Song with ID {song_id} not found")
                raise NotFoundError("Song not found")

            # グループは他の曲が参照しうるため削除しない
            self.repository.delete(song)
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to delete song with ID {song_id}: {e}")
            raise StorageError("Failed to delete song from database") from e

        logger.info(f"Song with ID {song_id} deleted successfully")
        return True
