from dataclasses import dataclass
from typing import List, Optional
import logging

from fastapi.concurrency import run_in_threadpool

from ..ports.analysis_repo import AnalysisRepository, AnalysisRecord
from ..ports.ai_provider import AIProvider
from ..ports.image_host import ImageHost
from ...exceptions import ValidationError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

IMAGE_REQUIRED = "Please provide an image"
UPLOAD_FAILED = "Failed to upload image"
ANALYSIS_FAILED = "Failed to analyze image"
NOT_FOUND = "Image analysis not found"


@dataclass
class AnalysisService:
    analysis_repo: AnalysisRepository
    image_host: ImageHost
    ai_provider: AIProvider

    async def analyze(self, user_id: str, image_base64: Optional[str]) -> AnalysisRecord:
        """Upload, analyze and persist one image for ``user_id``.

        Steps run strictly in order; the AI model needs the hosted URL. Nothing is
        rolled back upstream if persisting fails.
        """
        if not image_base64 or not image_base64.strip():
            raise ValidationError(IMAGE_REQUIRED)

        try:
            image_url = await self.image_host.upload(image_base64)
        except Exception as e:
            logger.error(f"Image upload failed for user {user_id}: {e}", exc_info=True)
            raise UpstreamError(UPLOAD_FAILED) from e

        try:
            analysis = await self.ai_provider.analyze(image_url)
        except Exception as e:
            logger.error(f"Image analysis failed for user {user_id}: {e}", exc_info=True)
            raise UpstreamError(ANALYSIS_FAILED) from e

        # Repositories are synchronous; keep the commit off the event loop
        record = await run_in_threadpool(
            self.analysis_repo.create,
            user_id=user_id,
            image_url=image_url,
            description=analysis.description,
            emotions=analysis.emotions,
            tags=analysis.tags,
            raw_response=analysis.raw_response,
        )
        logger.info(f"Stored analysis {record.id} for user {user_id}")
        return record

    def list_history(self, user_id: str) -> List[AnalysisRecord]:
        return self.analysis_repo.list_for_user(user_id)

    def get_for_user(self, user_id: str, record_id: str) -> AnalysisRecord:
        record = self.analysis_repo.get_for_user(record_id, user_id)
        if not record:
            raise NotFoundError(NOT_FOUND)
        return record

    def delete_for_user(self, user_id: str, record_id: str) -> None:
        if not self.analysis_repo.delete_for_user(record_id, user_id):
            raise NotFoundError(NOT_FOUND)
        logger.info(f"Deleted analysis {record_id} for user {user_id}")
