"""
Lifecycle records
Immutable in-memory views of the five entity kinds.

Records are frozen dataclasses; a transition produces a new record with
dataclasses.replace() rather than mutating the old one, so a snapshot handed
to a reader never changes underneath it.

Row mapping:
- from_row() builds a record from a persisted-row dictionary (camelCase keys)
  and checks field presence only.
- to_row() produces the persisted-row dictionary with ISO date strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from assetguard.buisness.core.errors import FieldFormatError, MissingFieldError


class AssetStatus:
    AVAILABLE = 'Available'
    ASSIGNED = 'Assigned'
    IN_REPAIR = 'In Repair'

    ALL = (AVAILABLE, ASSIGNED, IN_REPAIR)


class MaintenanceStatus:
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'


class RequestStatus:
    PENDING = 'Pending'
    APPROVED = 'Approved'
    REJECTED = 'Rejected'


@dataclass(frozen=True)
class RowField:
    attr: str
    key: str
    kind: str = 'str'
    optional: bool = False


def parse_date(entity_type: str, key: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    # Timestamps keep their date part; anything else after the date is rejected
    if len(text) > 10 and text[10] in ('T', ' '):
        text = text[:10]
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise FieldFormatError(entity_type, key, value) from None


def _parse_float(entity_type: str, key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise FieldFormatError(entity_type, key, value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise FieldFormatError(entity_type, key, value) from None


def _parse_bool(entity_type: str, key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in ('true', '1', 'yes', 't'):
        return True
    if text in ('false', '0', 'no', 'f'):
        return False
    raise FieldFormatError(entity_type, key, value)


_PARSERS = {
    'date': parse_date,
    'float': _parse_float,
    'bool': _parse_bool,
    'str': lambda entity_type, key, value: str(value),
}


class RowRecord:
    """Row mapping shared by every record type."""

    ENTITY_TYPE: ClassVar[str]
    ROW_FIELDS: ClassVar[Tuple[RowField, ...]]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        missing = [f.key for f in cls.ROW_FIELDS if not f.optional and row.get(f.key) is None]
        if missing:
            raise MissingFieldError(cls.ENTITY_TYPE, missing)

        values = {}
        for f in cls.ROW_FIELDS:
            value = row.get(f.key)
            if value is not None:
                value = _PARSERS[f.kind](cls.ENTITY_TYPE, f.key, value)
            values[f.attr] = value
        return cls(**values)

    def to_row(self) -> Dict[str, Any]:
        row = {}
        for f in self.ROW_FIELDS:
            value = getattr(self, f.attr)
            if f.kind == 'date' and value is not None:
                value = value.isoformat()
            row[f.key] = value
        return row


@dataclass(frozen=True)
class Asset(RowRecord):
    ENTITY_TYPE: ClassVar[str] = 'asset'
    ROW_FIELDS: ClassVar[Tuple[RowField, ...]] = (
        RowField('id', 'id'),
        RowField('tag', 'tag'),
        RowField('name', 'name'),
        RowField('serial_number', 'serialNumber'),
        RowField('category', 'category'),
        RowField('vendor', 'vendor'),
        RowField('purchase_date', 'purchaseDate', 'date'),
        RowField('cost', 'cost', 'float'),
        RowField('status', 'status'),
        RowField('condition', 'condition'),
        RowField('location', 'location'),
        RowField('assigned_to', 'assignedTo', optional=True),
        RowField('image', 'image', optional=True),
    )

    id: str
    tag: str
    name: str
    serial_number: str
    category: str
    vendor: str
    purchase_date: date
    cost: float
    status: str
    condition: str
    location: str
    assigned_to: Optional[str] = None
    image: Optional[str] = None


@dataclass(frozen=True)
class Employee(RowRecord):
    ENTITY_TYPE: ClassVar[str] = 'employee'
    ROW_FIELDS: ClassVar[Tuple[RowField, ...]] = (
        RowField('id', 'id'),
        RowField('name', 'name'),
        RowField('email', 'email'),
        RowField('department', 'department'),
        RowField('role', 'role'),
        RowField('join_date', 'joinDate', 'date'),
        RowField('avatar', 'avatar', optional=True),
    )

    id: str
    name: str
    email: str
    department: str
    role: str
    join_date: date
    avatar: Optional[str] = None


@dataclass(frozen=True)
class Assignment(RowRecord):
    ENTITY_TYPE: ClassVar[str] = 'assignment'
    ROW_FIELDS: ClassVar[Tuple[RowField, ...]] = (
        RowField('id', 'id'),
        RowField('asset_id', 'assetId'),
        RowField('employee_id', 'employeeId'),
        RowField('borrow_date', 'borrowDate', 'date'),
        RowField('is_active', 'isActive', 'bool'),
        RowField('expected_return_date', 'expectedReturnDate', 'date', optional=True),
        RowField('returned_date', 'returnedDate', 'date', optional=True),
        RowField('notes', 'notes', optional=True),
    )

    id: str
    asset_id: str
    employee_id: str
    borrow_date: date
    is_active: bool
    expected_return_date: Optional[date] = None
    returned_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class MaintenanceLog(RowRecord):
    ENTITY_TYPE: ClassVar[str] = 'maintenance_log'
    ROW_FIELDS: ClassVar[Tuple[RowField, ...]] = (
        RowField('id', 'id'),
        RowField('asset_id', 'assetId'),
        RowField('description', 'description'),
        RowField('vendor', 'vendor'),
        RowField('cost', 'cost', 'float'),
        RowField('date', 'date', 'date'),
        RowField('status', 'status'),
    )

    id: str
    asset_id: str
    description: str
    vendor: str
    cost: float
    date: date
    status: str


@dataclass(frozen=True)
class AssetRequest(RowRecord):
    ENTITY_TYPE: ClassVar[str] = 'request'
    ROW_FIELDS: ClassVar[Tuple[RowField, ...]] = (
        RowField('id', 'id'),
        RowField('employee_id', 'employeeId'),
        RowField('category', 'category'),
        RowField('reason', 'reason'),
        RowField('request_date', 'requestDate', 'date'),
        RowField('status', 'status'),
    )

    id: str
    employee_id: str
    category: str
    reason: str
    request_date: date
    status: str
