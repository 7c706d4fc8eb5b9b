"""
SQLAlchemy declarative base shared by every model.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models annotate plain Column attributes (``id: int = Column(...)``)
    __allow_unmapped__ = True
