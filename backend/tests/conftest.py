import os
import pytest
import sys
import tempfile
import uuid
from datetime import date
from typing import Generator
from sqlmodel import Session, create_engine, select
from alembic.config import Config
from alembic import command

# 1. パス解決: backendディレクトリをsys.pathに追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(CURRENT_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import infra.database.connection as db_connection
from infra.database.schema import init_raw_db
from domain.models.song import Group, Song
from utils.external_metadata import SongDetail

@pytest.fixture(name="session", scope="function")
def session_fixture(mocker) -> Generator[Session, None, None]:
    """
    テストごとに完全に独立したDB環境（物理ファイル）を構築する。
    DuckDBの接続競合を避けるため、単一のエンジンを Alembic と共有します。
    """

    # ユニークなDBファイルパスを生成
    unique_id = str(uuid.uuid4())
    test_db_path = os.path.join(tempfile.gettempdir(), f"songbook_test_{unique_id}.duckdb")

    # アプリケーションが参照する環境変数を上書き
    os.environ["DB_PATH"] = test_db_path

    # テスト用エンジンの作成 (設定を固定)
    connect_args = {'config': {'worker_threads': 4, 'access_mode': 'READ_WRITE'}}
    engine = create_engine(
        f"duckdb:///{test_db_path}",
        connect_args=connect_args
    )

    # アプリケーション全体で使用されるエンジングローバル変数をテスト用に差し替え
    db_connection.engine = engine
    db_connection.DB_PATH = test_db_path
    db_connection.DATABASE_URL = f"duckdb:///{test_db_path}"

    # 1. Raw SQLでテーブルとシーケンスを直接作成
    init_raw_db(engine)

    # 2. Alembicにテスト用エンジンを注入して stamp を実行
    alembic_ini_path = os.path.join(BACKEND_DIR, "alembic.ini")
    alembic_cfg = Config(alembic_ini_path)
    alembic_cfg.set_main_option("script_location", os.path.join(BACKEND_DIR, "alembic"))

    with engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.stamp(alembic_cfg, "head")

    # 3. アプリ起動時の init_db / close_db がテスト中に走って競合しないようモック化
    mocker.patch("main.init_db")
    mocker.patch("main.close_db")

    # テスト実行用のセッションを提供
    with Session(engine) as session:
        yield session

    # テスト終了後のクリーンアップ
    engine.dispose()
    if os.path.exists(test_db_path):
        try:
            os.remove(test_db_path)
        except OSError:
            pass

@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator:
    """FastAPIのTestClientを提供し、DBセッションをDIで差し替える"""
    from fastapi.testclient import TestClient
    from main import app
    from infra.database.connection import get_session

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture(autouse=True)
def mock_music_info(mocker):
    """
    外部メタデータAPIをグローバルにモック化する。
    個別のテストでは return_value / side_effect を差し替えて使う。
    """
    return mocker.patch(
        "app.services.song_app_service.fetch_song_details",
        new_callable=mocker.AsyncMock,
        return_value=SongDetail(
            release_date=date(2006, 7, 16),
            text="Ooh baby, don't you know I suffer?\nOoh baby, can you hear me moan?\n\nYou caught me under false pretenses",
            link="https://www.youtube.com/watch?v=Xsp3_a-PMTw",
        ),
    )

@pytest.fixture
def add_song(session: Session):
    """グループを find-or-create して楽曲を1件登録するヘルパー"""
    def _add_song(group: str, title: str, text: str = "", link: str = "", release_date=None) -> Song:
        group_row = session.exec(select(Group).where(Group.name == group)).first()
        if group_row:
            group_id = group_row.id
        else:
            new_group = Group(name=group)
            session.add(new_group)
            session.commit()
            session.refresh(new_group)
            group_id = new_group.id

        song = Song(group_id=group_id, title=title, text=text, link=link, release_date=release_date)
        session.add(song)
        session.commit()
        session.refresh(song)
        return song

    return _add_song
