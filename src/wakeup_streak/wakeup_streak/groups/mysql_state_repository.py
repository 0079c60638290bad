from __future__ import annotations

import mysql.connector

from ..core.exceptions import PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import EngineState, GroupState, UserState, require_naive, stored_pledge
from .repository import StateRepository


class MySQLStateRepository(StateRepository):
    """Snapshot stored in ``streak_groups`` / ``group_members``.

    ``save`` upserts every row inside one transaction; rows are never deleted.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self) -> EngineState:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT group_id, current_streak, best_streak FROM streak_groups")
                group_rows = fetchall(cur)
                cur.execute(
                    """
                    SELECT group_id, user_id, display_name, wakeup_hour, wakeup_minute,
                           last_report_at, reported_today, exemption_active, last_exemption_at,
                           week_exemption_count, week_window_start
                    FROM group_members
                    """
                )
                member_rows = fetchall(cur)
        except mysql.connector.Error as e:
            raise PersistenceError(f"Cannot load state from MySQL: {e}") from e

        state = EngineState()
        for r in group_rows:
            current = int(r["current_streak"])
            state.groups[str(r["group_id"])] = GroupState(
                group_id=str(r["group_id"]),
                current_streak=current,
                best_streak=max(current, int(r["best_streak"])),
            )

        for r in member_rows:
            group, _ = state.get_or_create_group(str(r["group_id"]))
            pledge = None
            if r.get("wakeup_hour") is not None:
                pledge = stored_pledge(r["wakeup_hour"], r["wakeup_minute"] or 0)
            group.users[str(r["user_id"])] = UserState(
                user_id=str(r["user_id"]),
                display_name=str(r["display_name"]),
                wakeup_time=pledge,
                last_report_at=require_naive(r.get("last_report_at")),
                reported_today=bool(r["reported_today"]),
                exemption_active=bool(r["exemption_active"]),
                last_exemption_at=require_naive(r.get("last_exemption_at")),
                week_exemption_count=min(1, max(0, int(r["week_exemption_count"]))),
                week_window_start=require_naive(r.get("week_window_start")),
            )
        return state

    def save(self, state: EngineState) -> None:
        group_params = [(g.group_id, g.current_streak, g.best_streak) for g in state.groups.values()]
        member_params = [
            (
                g.group_id,
                u.user_id,
                u.display_name,
                u.wakeup_time.hour if u.wakeup_time else None,
                u.wakeup_time.minute if u.wakeup_time else None,
                u.last_report_at,
                int(u.reported_today),
                int(u.exemption_active),
                u.last_exemption_at,
                u.week_exemption_count,
                u.week_window_start,
            )
            for g in state.groups.values()
            for u in g.users.values()
        ]

        try:
            with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
                if group_params:
                    cur.executemany(
                        """
                        INSERT INTO streak_groups(group_id, current_streak, best_streak)
                        VALUES(%s,%s,%s)
                        ON DUPLICATE KEY UPDATE
                            current_streak=VALUES(current_streak),
                            best_streak=VALUES(best_streak)
                        """,
                        group_params,
                    )
                if member_params:
                    cur.executemany(
                        """
                        INSERT INTO group_members(
                            group_id, user_id, display_name, wakeup_hour, wakeup_minute,
                            last_report_at, reported_today, exemption_active, last_exemption_at,
                            week_exemption_count, week_window_start
                        )
                        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                        ON DUPLICATE KEY UPDATE
                            display_name=VALUES(display_name),
                            wakeup_hour=VALUES(wakeup_hour),
                            wakeup_minute=VALUES(wakeup_minute),
                            last_report_at=VALUES(last_report_at),
                            reported_today=VALUES(reported_today),
                            exemption_active=VALUES(exemption_active),
                            last_exemption_at=VALUES(last_exemption_at),
                            week_exemption_count=VALUES(week_exemption_count),
                            week_window_start=VALUES(week_window_start)
                        """,
                        member_params,
                    )
        except mysql.connector.Error as e:
            raise PersistenceError(f"Cannot save state to MySQL: {e}") from e
