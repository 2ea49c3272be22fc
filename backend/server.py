import os
import uvicorn

if __name__ == "__main__":
    # 設定の読み込みと環境変数のセットアップ
    # ロガーのインポートより先に行い、ログ出力先を確定させる
    from config import settings
    settings.setup_environment()

    # アプリケーションデータディレクトリの確保
    os.makedirs(settings.USER_DATA_DIR, exist_ok=True)

    from main import app

    port = int(os.environ.get("SONGBOOK_PORT", settings.SONGBOOK_PORT))
    host = os.environ.get("SONGBOOK_HOST", "0.0.0.0")

    print(f"Starting Songbook Server on {host}:{port}...")
    print(f"User Data Directory: {settings.USER_DATA_DIR}")

    uvicorn.run(app, host=host, port=port, reload=False, workers=1)
