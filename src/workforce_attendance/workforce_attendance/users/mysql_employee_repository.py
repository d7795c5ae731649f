from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.full_name, e.role, e.dept_id, d.dept_name, e.supervisor_id, e.is_active
    FROM employees e
    LEFT JOIN departments d ON d.dept_id = e.dept_id
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        full_name=r["full_name"],
        role=Role(r.get("role") or Role.EMPLOYEE.value),
        dept_id=int(r["dept_id"]) if r.get("dept_id") is not None else None,
        dept_name=r.get("dept_name"),
        supervisor_id=str(r["supervisor_id"]) if r.get("supervisor_id") else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (str(employee_id),))
            r = fetchone(cur)
            if not r:
                return None
            return _to_employee(r)

    def list_active(
        self,
        *,
        dept_id: Optional[int] = None,
        supervisor_id: Optional[str] = None,
    ) -> Sequence[Employee]:
        clauses = ["e.is_active=1"]
        params: list[object] = []

        if dept_id is not None:
            clauses.append("e.dept_id=%s")
            params.append(int(dept_id))
        if supervisor_id is not None:
            clauses.append("e.supervisor_id=%s")
            params.append(str(supervisor_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY e.employee_id", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, dept_name FROM departments ORDER BY dept_name")
            rows = fetchall(cur)
            return [Department(dept_id=int(r["dept_id"]), dept_name=r["dept_name"]) for r in rows]
