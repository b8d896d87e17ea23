# image_insight/db/models/media/image_analysis.py
from typing import List, Optional
from sqlalchemy import Column, DateTime, Index, JSON, Text
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
import uuid

class ImageAnalysis(SQLModel, table=True):
    __tablename__ = "image_analyses"
    __table_args__ = (
        Index("ix_image_analyses_user_id_created_at", "user_id", "created_at"),
    )
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id")
    image_url: str = Field(sa_column=Column(Text, nullable=False))
    description: str = Field(sa_column=Column(Text, nullable=False))
    emotions: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    raw_response: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
