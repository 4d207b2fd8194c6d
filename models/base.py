# models/base.py
import uuid

from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
     """Primary keys are uuid4 strings, shareable in payment links."""
     return str(uuid.uuid4())


class Base(DeclarativeBase):
     """Base class for all SQLAlchemy models; each model names its table."""
