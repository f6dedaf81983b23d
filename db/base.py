"""
db/base.py

Declarative base for the anomaly store.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Every persisted table registers on this metadata (see db/models).
    """
