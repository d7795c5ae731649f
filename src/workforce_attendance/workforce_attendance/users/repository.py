from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, Employee


class EmployeeRepository(Protocol):
    """Employee directory interface.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(
        self,
        *,
        dept_id: Optional[int] = None,
        supervisor_id: Optional[str] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError
