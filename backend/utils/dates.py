from datetime import date, datetime
from typing import Any, Optional

# 受け付ける日付表記 (例: "2006-07-16", "16.07.2006")
RELEASE_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")

def parse_release_date(value: Any) -> Optional[date]:
    """
    リリース日の文字列を date に変換する。空文字と None は None を返す。
    解釈できない表記は ValueError。
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if not raw:
        return None
    # "2006-07-16T00:00:00Z" のような日時表記は日付部分のみ使う
    raw = raw.split("T", 1)[0]
    for fmt in RELEASE_DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unsupported release date format: {value}")
