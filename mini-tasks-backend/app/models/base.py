# File: app/models/base.py

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    ``User`` and ``Task`` inherit from this; ``app.db.init_db`` creates
    their tables from ``Base.metadata``.
    """
    pass
