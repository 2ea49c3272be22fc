"""baseline: groups / songs schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00

テーブルとシーケンスは infra/database/schema.py の Raw SQL で作成されるため、
このリビジョンは既存DBの基準点としてのみ機能する。
"""
from typing import Sequence, Union

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    pass


def downgrade() -> None:
    pass
