"""
State machines for asset and request lifecycles

Encodes valid transitions. Keeps "what is allowed" separate from
"how persistence occurs".
"""

from typing import Dict, Set

from assetguard.buisness.core.records import AssetStatus, RequestStatus


class RequestStateMachine:
    """
    State machine for AssetRequest status transitions.

    Requests start as Pending and move exactly once to Approved or Rejected.
    """

    TERMINAL_STATES = {RequestStatus.APPROVED, RequestStatus.REJECTED}

    TRANSITIONS: Dict[str, Set[str]] = {
        RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.REJECTED},
        # APPROVED and REJECTED are terminal
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if transition is valid.

        Args:
            from_status: Current status
            to_status: Target status

        Returns:
            bool: True if transition is allowed
        """
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())


class AssetStatusMachine:
    """
    Documented asset status transitions.

    Available <-> Assigned via assign/return, Available -> In Repair -> Available
    via maintenance. Assigned -> In Repair is reachable because logging
    maintenance does not look at the prior status. The engine does not reject
    transitions; this table exists so callers and tests can check what a
    transition means.
    """

    TRANSITIONS: Dict[str, Set[str]] = {
        AssetStatus.AVAILABLE: {AssetStatus.ASSIGNED, AssetStatus.IN_REPAIR},
        AssetStatus.ASSIGNED: {AssetStatus.AVAILABLE, AssetStatus.IN_REPAIR, AssetStatus.ASSIGNED},
        AssetStatus.IN_REPAIR: {AssetStatus.AVAILABLE, AssetStatus.IN_REPAIR},
    }

    @classmethod
    def is_documented(cls, from_status: str, to_status: str) -> bool:
        if from_status == to_status:
            return True
        return to_status in cls.TRANSITIONS.get(from_status, set())
