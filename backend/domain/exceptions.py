class SongbookError(Exception):
    """アプリケーション共通の基底例外"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class InvalidInputError(SongbookError):
    """呼び出し側の入力不正 (page/limit が 1 未満、必須項目の欠落など)"""

class NotFoundError(SongbookError):
    """対象の楽曲、または指定ページの節が存在しない"""

class StorageError(SongbookError):
    """DB接続・クエリ・トランザクションの失敗。送出前に必ずロールバック済み"""

class ExternalServiceError(SongbookError):
    """外部メタデータAPIの呼び出し失敗、またはレスポンスの解析失敗"""
