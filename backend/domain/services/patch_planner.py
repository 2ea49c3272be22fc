from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.dates import parse_release_date

# パッチのキー -> songs テーブルのカラム。代入はこの順序で組み立てる
SONG_PATCH_COLUMNS = (
    ("song", "title"),
    ("release_date", "release_date"),
    ("text", "text"),
    ("link", "link"),
)

class SongPatch(BaseModel):
    """
    部分更新の入力。送られてきたキーだけが更新対象になる。
    空文字は有効な更新値、null は未指定と同じ扱い。
    """
    model_config = ConfigDict(populate_by_name=True)

    group: Optional[str] = None
    song: Optional[str] = None
    release_date: Optional[date] = Field(default=None, alias="releaseDate")
    text: Optional[str] = None
    link: Optional[str] = None

    @field_validator("release_date", mode="before")
    @classmethod
    def _parse_release_date(cls, value):
        return parse_release_date(value)

    def present_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)

@dataclass
class PatchPlan:
    group_name: Optional[str] = None
    assignments: Dict[str, Any] = field(default_factory=dict)

    @property
    def renames_group(self) -> bool:
        return self.group_name is not None

    @property
    def has_song_changes(self) -> bool:
        return bool(self.assignments)

def plan_song_patch(patch: SongPatch) -> PatchPlan:
    present = patch.present_fields()
    plan = PatchPlan(group_name=present.get("group"))

    for key, column in SONG_PATCH_COLUMNS:
        if key in present:
            plan.assignments[column] = present[key]

    return plan
