from __future__ import annotations

from typing import Protocol, Sequence

from ..geo.model import StoreLocation
from .model import WageAssignment


class StoreLocationLookup(Protocol):
    def get(self, store_id: int) -> StoreLocation:
        """Raise EntityNotFoundError when the store does not exist."""

        raise NotImplementedError


class WageAssignmentLookup(Protocol):
    def get(self, employee_id: int, store_id: int) -> WageAssignment:
        """Raise EntityNotFoundError when the employee-store relation does not exist."""

        raise NotImplementedError

    def list_all(self) -> Sequence[WageAssignment]:
        raise NotImplementedError


class AuthorizationCheck(Protocol):
    def is_store_master(self, user_id: int, store_id: int) -> bool:
        raise NotImplementedError
