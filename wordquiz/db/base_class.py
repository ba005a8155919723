from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base shared by every SQLAlchemy model of the service.
    ``Base.metadata`` is what gets created on startup.
    """
