from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class EntityRef:
    entity_type: str
    entity_id: str


@dataclass(frozen=True)
class StatusChange:
    entity_type: str
    entity_id: str
    from_status: Optional[str]
    to_status: str


@dataclass(frozen=True)
class SkippedUpdate:
    entity_type: str
    entity_id: Optional[str]
    reason: str


@dataclass
class OperationResult:
    """
    Outcome of one lifecycle operation.

    A referential miss is not an error: the missing side is listed in
    `skipped` and every found entity is still updated. `unresolved` lists
    references that were stored as given although nothing in the repository
    matches them (e.g. an assignment to an unknown employee).
    """
    operation: str
    created: List[EntityRef] = field(default_factory=list)
    updated: List[EntityRef] = field(default_factory=list)
    deleted: List[EntityRef] = field(default_factory=list)
    changes: List[StatusChange] = field(default_factory=list)
    skipped: List[SkippedUpdate] = field(default_factory=list)
    unresolved: List[EntityRef] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return bool(self.created or self.updated or self.deleted)

    @property
    def complete(self) -> bool:
        return not self.skipped

    def skip(self, entity_type: str, entity_id: Optional[str], reason: str) -> None:
        self.skipped.append(SkippedUpdate(entity_type, entity_id, reason))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': self.operation,
            'applied': self.applied,
            'complete': self.complete,
            'created': [vars(ref) for ref in self.created],
            'updated': [vars(ref) for ref in self.updated],
            'deleted': [vars(ref) for ref in self.deleted],
            'changes': [vars(change) for change in self.changes],
            'skipped': [vars(skip) for skip in self.skipped],
            'unresolved': [vars(ref) for ref in self.unresolved],
        }


@dataclass(frozen=True)
class DanglingReference:
    entity_type: str
    entity_id: str
    field: str
    missing_id: str


@dataclass
class ReconcileReport:
    resaved: List[EntityRef] = field(default_factory=list)
    deleted: List[EntityRef] = field(default_factory=list)
    adopted: List[EntityRef] = field(default_factory=list)
    orphaned: List[EntityRef] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not (self.resaved or self.deleted or self.adopted)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'in_sync': self.in_sync,
            'resaved': [vars(ref) for ref in self.resaved],
            'deleted': [vars(ref) for ref in self.deleted],
            'adopted': [vars(ref) for ref in self.adopted],
            'orphaned': [vars(ref) for ref in self.orphaned],
        }
