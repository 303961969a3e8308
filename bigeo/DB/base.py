"""
bigeo/DB/base.py
==========================
SQLAlchemy Model Registry
==========================

Imports every model so that Base.metadata is complete before
create_all_tables() or drop_all_tables() run.

Important:
----------
Any new model class MUST be imported here to be included in schema
operations.
"""

from bigeo.DB.base_class import Base

# ============================================================
# MODEL IMPORTS - DO NOT REMOVE
# ============================================================
from bigeo.Models.shipment import Shipment

__all__ = ["Base", "Shipment"]
