from typing import Optional
from datetime import date
from sqlmodel import Field, SQLModel

class Group(SQLModel, table=True):
    __tablename__ = "groups"
    """
    演奏グループ。name は一意で、複数の Song から共有参照される。
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True, nullable=False)

class Song(SQLModel, table=True):
    __tablename__ = "songs"
    """
    楽曲モデル。グループ名は埋め込まず group_id で参照する。
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    group_id: int = Field(index=True, nullable=False, foreign_key="groups.id")

    title: str = Field(default="", index=True)
    release_date: Optional[date] = Field(default=None, index=True)
    # 歌詞全文 (節は空行 "\n\n" 区切り)
    text: str = Field(default="")
    link: str = Field(default="")
