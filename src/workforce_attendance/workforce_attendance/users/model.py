from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Department:
    """Reporting unit employees roll up to in the department report."""

    dept_id: int
    dept_name: str


@dataclass(frozen=True)
class Employee:
    """Domain entity: a subject whose attendance is tracked.

    Note: plain data object, accounts and credentials live in the user
    management service.
    """

    employee_id: str
    full_name: str
    role: Role = Role.EMPLOYEE
    dept_id: Optional[int] = None
    dept_name: Optional[str] = None
    supervisor_id: Optional[str] = None
    is_active: bool = True
