# テーブルモデルの集約 (alembic/env.py などから参照)
from domain.models.song import Song, Group
