# image_insight/schemas/common/common.py
from pydantic import BaseModel
from typing import Any, Dict

class ErrorResponse(BaseModel):
    success: bool = False
    message: str

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class HealthResponse(BaseModel):
    success: bool
    message: str
    timestamp: str
    service: str
    version: str
    database: Dict[str, Any]
