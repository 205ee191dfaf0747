"""
Domain exceptions for lifecycle business logic

These exceptions represent contract violations at the edge of the core.
Referential misses inside an operation are not exceptions; they are reported
as skipped updates on the operation result.
"""


class LifecycleDomainError(Exception):
    """Base exception for all lifecycle domain errors"""
    pass


class MissingFieldError(LifecycleDomainError):
    """Raised when a record is built from a row that lacks required fields"""

    def __init__(self, entity_type, fields):
        self.entity_type = entity_type
        self.fields = list(fields)
        super().__init__(f"{entity_type} is missing required fields: {', '.join(self.fields)}")


class FieldFormatError(LifecycleDomainError):
    """Raised when a present field cannot be read as its declared type"""

    def __init__(self, entity_type, field, value):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type}.{field} has an unreadable value: {value!r}")


class UnsupportedOperationError(LifecycleDomainError):
    """Raised when a store operation is not offered for an entity kind"""

    def __init__(self, kind, action):
        self.kind = kind
        self.action = action
        super().__init__(f"{kind} rows do not support {action}")
