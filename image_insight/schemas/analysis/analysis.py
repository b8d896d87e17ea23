# image_insight/schemas/analysis/analysis.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class AnalyzeRequest(BaseModel):
    imageBase64: Optional[str] = Field(None, description="Base64 encoded image, optionally as a data URL")

class AIResponseSummary(BaseModel):
    description: str
    emotions: str
    tags: List[str] = Field(default_factory=list)

class AIResponse(AIResponseSummary):
    rawResponse: Optional[str] = None

class AnalysisResult(BaseModel):
    id: str
    imageUrl: str
    aiResponse: AIResponse

class AnalyzeResponse(BaseModel):
    success: bool = True
    data: AnalysisResult

class HistoryItem(BaseModel):
    id: str
    imageUrl: str
    aiResponse: AIResponseSummary
    createdAt: Optional[datetime] = None

class HistoryResponse(BaseModel):
    success: bool = True
    count: int
    data: List[HistoryItem]

class HistoryDetail(BaseModel):
    id: str
    imageUrl: str
    aiResponse: AIResponse
    createdAt: Optional[datetime] = None

class HistoryDetailResponse(BaseModel):
    success: bool = True
    data: HistoryDetail
