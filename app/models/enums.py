"""
Column type for the str enums used across the models
"""
import enum

from sqlalchemy import Enum as SQLEnum


def value_enum(enum_cls: type[enum.Enum]) -> SQLEnum:
    """
    SQLAlchemy Enum storing member values ("apartment") instead of names
    ("APARTMENT"), matching the enum types created by the migrations
    """
    return SQLEnum(
        enum_cls,
        name=enum_cls.__name__.lower(),
        values_callable=lambda members: [m.value for m in members],
    )
