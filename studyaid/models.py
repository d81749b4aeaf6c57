# studyaid/models.py
from datetime import datetime
from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


class StorageSlot(SQLModel, table=True):
    __tablename__ = "storage_slots"

    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow)
