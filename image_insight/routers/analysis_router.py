from fastapi import APIRouter, Depends
import logging

from ..application.ports.analysis_repo import AnalysisRecord
from ..application.services.analysis_service import AnalysisService
from ..dependencies import get_analysis_service, get_current_user
from ..schemas.analysis.analysis import (
    AnalyzeRequest,
    AnalyzeResponse,
    AnalysisResult,
    AIResponse,
    AIResponseSummary,
    HistoryResponse,
    HistoryItem,
    HistoryDetail,
    HistoryDetailResponse,
)
from ..schemas.common.common import MessageResponse

logger = logging.getLogger(__name__)

# Every route here requires a bearer token
router = APIRouter(tags=["Analysis"], dependencies=[Depends(get_current_user)])

def _ai_response(record: AnalysisRecord) -> AIResponse:
    return AIResponse(
        description=record.description,
        emotions=record.emotions,
        tags=record.tags,
        rawResponse=record.raw_response,
    )

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_image(
    body: AnalyzeRequest,
    current_user: str = Depends(get_current_user),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    record = await analysis_service.analyze(current_user, body.imageBase64)
    return AnalyzeResponse(
        data=AnalysisResult(id=record.id, imageUrl=record.image_url, aiResponse=_ai_response(record))
    )

@router.get("/history", response_model=HistoryResponse)
def get_history(
    current_user: str = Depends(get_current_user),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    records = analysis_service.list_history(current_user)
    items = [
        HistoryItem(
            id=r.id,
            imageUrl=r.image_url,
            aiResponse=AIResponseSummary(description=r.description, emotions=r.emotions, tags=r.tags),
            createdAt=r.created_at,
        )
        for r in records
    ]
    return HistoryResponse(count=len(items), data=items)

@router.get("/history/{record_id}", response_model=HistoryDetailResponse)
def get_history_item(
    record_id: str,
    current_user: str = Depends(get_current_user),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    record = analysis_service.get_for_user(current_user, record_id)
    return HistoryDetailResponse(
        data=HistoryDetail(
            id=record.id,
            imageUrl=record.image_url,
            aiResponse=_ai_response(record),
            createdAt=record.created_at,
        )
    )

@router.delete("/history/{record_id}", response_model=MessageResponse)
def delete_history_item(
    record_id: str,
    current_user: str = Depends(get_current_user),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    analysis_service.delete_for_user(current_user, record_id)
    return MessageResponse(message="Image analysis deleted")
