from datetime import date, datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import text
from sqlalchemy.engine import Connection

# 0/1 로 저장되는 플래그 컬럼
BOOL_COLUMNS = {"completed", "is_active"}


def normalize(record: Dict[str, Any]) -> Dict[str, Any]:
    """날짜는 ISO 문자열, 0/1 플래그는 bool 로 통일."""
    out = {}
    for k, v in record.items():
        if isinstance(v, datetime):
            v = v.isoformat(sep=" ")
        elif isinstance(v, date):
            v = v.isoformat()
        elif k in BOOL_COLUMNS and v is not None:
            v = bool(v)
        out[k] = v
    return out


def fetch_all(conn: Connection, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    rows = conn.execute(text(sql), params or {}).fetchall()
    return [normalize(dict(r._mapping)) for r in rows]


def model_to_dict(obj, exclude: tuple = ()) -> Dict[str, Any]:
    return normalize({c.name: getattr(obj, c.name) for c in obj.__table__.columns if c.name not in exclude})
