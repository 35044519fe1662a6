
from typing import Dict, List
from sqlalchemy.engine import Connection
from fitness_tracker.sql import fetch_all


def logs_for_date(conn: Connection, user_id: int, log_date: str) -> List[Dict]:
    return fetch_all(
        conn,
        """
        SELECT al.id, al.activity_id, al.user_id, al.completed, al.actual_value,
               al.notes, al.log_date, al.logged_at,
               fa.name, fa.description, fa.icon, fa.target_value, fa.target_unit, fa.category
        FROM activity_logs al
        JOIN fitness_activities fa ON al.activity_id = fa.id
        WHERE al.user_id = :uid
          AND al.log_date = :d
        ORDER BY al.activity_id
        """, {"uid": user_id, "d": log_date}
    )


def _completion_rate(completed: int, total: int) -> float:
    return round(completed * 100.0 / total, 2) if total else 0.0


def activity_stats(conn: Connection, user_id: int, start_date: str, end_date: str) -> List[Dict]:
    # 비활성(soft delete) 활동은 기간과 무관하게 제외
    rows = fetch_all(
        conn,
        """
        SELECT
          fa.id                                           AS activity_id,
          fa.name                                         AS name,
          fa.category                                     AS category,
          COUNT(CASE WHEN al.completed = 1 THEN 1 END)    AS completed_count,
          COUNT(al.id)                                    AS total_count
        FROM fitness_activities fa
        LEFT JOIN activity_logs al
          ON al.activity_id = fa.id
         AND al.user_id = :uid
         AND al.log_date BETWEEN :s AND :e
        WHERE fa.user_id = :uid
          AND fa.is_active = 1
        GROUP BY fa.id, fa.name, fa.category
        ORDER BY fa.id
        """, {"uid": user_id, "s": start_date, "e": end_date}
    )
    return [
        {"activity_id": int(r["activity_id"]),
         "name": r["name"],
         "category": r["category"],
         "completed_count": int(r["completed_count"] or 0),
         "total_count": int(r["total_count"] or 0),
         "completion_rate": _completion_rate(int(r["completed_count"] or 0), int(r["total_count"] or 0))}
        for r in rows
    ]
