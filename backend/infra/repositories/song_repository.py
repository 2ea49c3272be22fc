from typing import Any, Dict, List, Optional, Tuple
from sqlmodel import Session, select

from domain.models.song import Group, Song
from domain.services.criteria_builder import SongQuery

class SongRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, song_id: int) -> Optional[Song]:
        return self.session.get(Song, song_id)

    def get_with_group(self, song_id: int) -> Optional[Tuple[Song, str]]:
        query = (
            select(Song, Group.name)
            .join(Group, Song.group_id == Group.id)
            .where(Song.id == song_id)
        )
        return self.session.exec(query).first()

    def search(self, song_query: SongQuery) -> List[Tuple[Song, str]]:
        """
        検索条件を適用し (Song, グループ名) のリストを返す。
        ORDER BY は付けないため、並び順はストレージの返却順に依存する。
        """
        query = (
            select(Song, Group.name)
            .join(Group, Song.group_id == Group.id)
            .where(song_query.predicate)
            .offset(song_query.offset)
            .limit(song_query.limit)
        )
        return self.session.exec(query).all()

    def get_group_id(self, song_id: int) -> Optional[int]:
        return self.session.exec(select(Song.group_id).where(Song.id == song_id)).first()

    def add(self, song: Song) -> Song:
        self.session.add(song)
        self.session.flush()
        return song

    def update_fields(self, song_id: int, assignments: Dict[str, Any]) -> bool:
        """assignments の順にカラムを更新する。対象行がなければ False"""
        song = self.get_by_id(song_id)
        if not song:
            return False

        for column, value in assignments.items():
            setattr(song, column, value)
        self.session.add(song)
        self.session.flush()
        return True

    def delete(self, song: Song):
        self.session.delete(song)
        self.session.flush()
