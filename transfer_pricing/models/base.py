import uuid
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_id() -> str:
    return uuid.uuid4().hex


class BaseModel(Base):
    __abstract__ = True

    id = Column(String(32), primary_key=True, default=generate_id)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
