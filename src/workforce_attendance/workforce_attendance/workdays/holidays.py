from __future__ import annotations

from datetime import date
from typing import AbstractSet, Iterable, Protocol

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall


class HolidayCalendar(Protocol):
    def holidays_between(self, start: date, end: date) -> AbstractSet[date]:
        """Holiday dates within [start, end] inclusive."""

        raise NotImplementedError


class StaticHolidayCalendar(HolidayCalendar):
    """Fixed list of holidays, typically from settings."""

    def __init__(self, holidays: Iterable[date] = ()):
        self._holidays = frozenset(holidays)

    def holidays_between(self, start: date, end: date) -> AbstractSet[date]:
        return frozenset(d for d in self._holidays if start <= d <= end)


class MySQLHolidayRepository(HolidayCalendar):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def holidays_between(self, start: date, end: date) -> AbstractSet[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_date FROM holidays WHERE holiday_date BETWEEN %s AND %s",
                (start, end),
            )
            return frozenset(r["holiday_date"] for r in fetchall(cur))
