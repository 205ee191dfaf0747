"""
Employee Service
Directory search and held-asset lookup for the employee views.
"""

from typing import List, Optional

from assetguard.buisness.core.entity_repository import Snapshot
from assetguard.buisness.core.records import Asset, Assignment, Employee


class EmployeeService:

    @staticmethod
    def search(snapshot: Snapshot, term: Optional[str] = None) -> List[Employee]:
        """Partial, case-insensitive match on name, email or department."""
        if not term:
            return list(snapshot.employees)
        term = term.lower()
        return [
            employee for employee in snapshot.employees
            if term in employee.name.lower()
            or term in employee.email.lower()
            or term in employee.department.lower()
        ]

    @staticmethod
    def assets_held_by(snapshot: Snapshot, employee_id: str) -> List[Asset]:
        return [asset for asset in snapshot.assets if asset.assigned_to == employee_id]

    @staticmethod
    def assignment_history(snapshot: Snapshot, employee_id: str) -> List[Assignment]:
        """Every assignment of the employee, most recent borrow first."""
        history = [a for a in snapshot.assignments if a.employee_id == employee_id]
        return sorted(history, key=lambda a: a.borrow_date, reverse=True)
