"""
bigeo/DB/base_class.py
=================================
SQLAlchemy Base Model Definition
=================================

Declarative base class for all database models (SQLAlchemy 2.0 style).

Table names default to the lowercase class name; models that need a
different name (e.g. Shipment -> "shipments") override __tablename__.

Note:
    All application models must inherit from this Base class to be
    registered in Base.metadata, which create_all_tables() relies on.
"""

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models in the application.

    Class Attributes:
        __tablename__: Generated from the class name (lowercase) unless the
            model defines its own.
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
