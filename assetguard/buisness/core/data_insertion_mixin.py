"""
Generic row mapping mixin for SQLAlchemy models
Provides from_row and to_row methods keyed by the persisted column names

Persisted rows use the column names of each table (camelCase, e.g.
"serialNumber"), while model attributes are snake_case. This mixin is the
single place that translates between the two.
"""

from assetguard import db
from sqlalchemy import inspect
from assetguard.logger import get_logger

logger = get_logger("assetguard.buisness.core.data_insertion")


class DataInsertionMixin:
    """
    Mixin that provides row-shaped insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_row(): Create model instance from a persisted-row dictionary
    - to_row(): Convert model instance to a persisted-row dictionary
    - bulk_create_from_rows(): Create multiple instances from a list of rows
    """

    @classmethod
    def _column_keys(cls):
        """Map of column name (row key) to mapped attribute key"""
        mapper = inspect(cls)
        return {column.name: attr.key for attr in mapper.column_attrs for column in attr.columns}

    @classmethod
    def from_row(cls, row):
        """
        Create a model instance from a row dictionary

        Unknown keys are ignored so rows can carry presentation-only fields.

        Args:
            row (dict): Dictionary keyed by column name

        Returns:
            Model instance (not saved to database)
        """
        values = {}
        for column_name, attr_key in cls._column_keys().items():
            if column_name in row:
                values[attr_key] = row[column_name]
        return cls(**values)

    def to_row(self):
        """
        Convert model instance to a row dictionary keyed by column name

        Returns:
            dict: Row representation of the model
        """
        return {
            column_name: getattr(self, attr_key)
            for column_name, attr_key in self._column_keys().items()
        }

    @classmethod
    def bulk_create_from_rows(cls, rows, commit=True):
        """
        Create multiple model instances from a list of row dictionaries

        Args:
            rows (list): List of row dictionaries
            commit (bool): Whether to commit the transaction

        Returns:
            list: List of created model instances
        """
        instances = []

        for row in rows:
            instance = cls.from_row(row)
            instances.append(instance)
            db.session.add(instance)

        try:
            if commit:
                db.session.commit()
                logger.info(f"Created {len(instances)} {cls.__name__} rows")
            return instances
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error bulk creating {cls.__name__}: {e}")
            raise
