import os
from pydantic_settings import BaseSettings
from pydantic import Field
import platformdirs

APP_NAME = "Songbook"
APP_AUTHOR = "SongbookDev"

class Settings(BaseSettings):
    # App Info
    APP_NAME: str = APP_NAME
    APP_AUTHOR: str = APP_AUTHOR
    ENV: str = "prod"

    # Paths
    # デフォルトは platformdirs を使用するが、環境変数 DB_PATH があればそれを優先する
    USER_DATA_DIR: str = Field(default_factory=lambda: platformdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    DB_PATH: str | None = None

    # Network
    SONGBOOK_PORT: int = 8080
    FRONTEND_PORT: int = 3000

    # 外部メタデータAPI (/info?group=...&song=...)
    MUSIC_INFO_API_URL: str = "http://music-api:8080"
    MUSIC_INFO_TIMEOUT: float = 10.0

    # Logging
    SONGBOOK_LOG_DIR: str | None = None
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def model_post_init(self, __context):
        # DB_PATHが未設定ならデフォルト値を設定
        if not self.DB_PATH:
            self.DB_PATH = os.path.join(self.USER_DATA_DIR, "songbook.duckdb")

        # ログディレクトリ
        if not self.SONGBOOK_LOG_DIR:
            self.SONGBOOK_LOG_DIR = os.path.join(self.USER_DATA_DIR, "logs")

    def setup_environment(self):
        """ロガーが参照する環境変数を設定する"""
        if self.SONGBOOK_LOG_DIR:
            os.environ["SONGBOOK_LOG_DIR"] = self.SONGBOOK_LOG_DIR
        os.environ["LOG_LEVEL"] = self.LOG_LEVEL

settings = Settings()
