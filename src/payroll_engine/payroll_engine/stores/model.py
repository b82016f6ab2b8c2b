from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WageAssignment:
    """Employee-store relation with the hourly wage currently applied."""

    employee_id: int
    store_id: int
    hourly_wage: int
