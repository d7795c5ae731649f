from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository


class InMemoryEmployeeDirectory(EmployeeRepository, DepartmentRepository):
    def __init__(self, employees: Iterable[Employee] = (), departments: Iterable[Department] = ()):
        self._employees = {e.employee_id: e for e in employees}
        self._departments = list(departments)

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._employees.get(str(employee_id))

    def list_active(
        self,
        *,
        dept_id: Optional[int] = None,
        supervisor_id: Optional[str] = None,
    ) -> Sequence[Employee]:
        return [
            e
            for e in sorted(self._employees.values(), key=lambda e: e.employee_id)
            if e.is_active
            and (dept_id is None or e.dept_id == dept_id)
            and (supervisor_id is None or e.supervisor_id == supervisor_id)
        ]

    def list_all(self) -> Sequence[Department]:
        return sorted(self._departments, key=lambda d: d.dept_name)
