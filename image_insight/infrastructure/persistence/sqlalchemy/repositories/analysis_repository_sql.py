from typing import List, Optional
from sqlmodel import Session, select

from .....db.models import ImageAnalysis
from .....application.ports.analysis_repo import AnalysisRepository, AnalysisRecord


class SqlAnalysisRepository(AnalysisRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_record(self, row: ImageAnalysis) -> AnalysisRecord:
        return AnalysisRecord(
            id=row.id,
            user_id=row.user_id,
            image_url=row.image_url,
            description=row.description,
            emotions=row.emotions,
            tags=list(row.tags or []),
            raw_response=row.raw_response,
            created_at=row.created_at,
        )

    def _owned(self, record_id: str, user_id: str) -> Optional[ImageAnalysis]:
        return self.session.exec(
            select(ImageAnalysis)
            .where(ImageAnalysis.id == record_id, ImageAnalysis.user_id == user_id)
        ).first()

    def create(self, user_id: str, image_url: str, description: str, emotions: str, tags: List[str], raw_response: Optional[str]) -> AnalysisRecord:
        entry = ImageAnalysis(
            user_id=user_id,
            image_url=image_url,
            description=description,
            emotions=emotions,
            tags=list(tags),
            raw_response=raw_response,
        )
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return self._to_record(entry)

    def list_for_user(self, user_id: str) -> List[AnalysisRecord]:
        rows = self.session.exec(
            select(ImageAnalysis)
            .where(ImageAnalysis.user_id == user_id)
            .order_by(ImageAnalysis.created_at.desc())
        ).all()
        return [self._to_record(r) for r in rows]

    def get_for_user(self, record_id: str, user_id: str) -> Optional[AnalysisRecord]:
        row = self._owned(record_id, user_id)
        return self._to_record(row) if row else None

    def delete_for_user(self, record_id: str, user_id: str) -> bool:
        row = self._owned(record_id, user_id)
        if not row:
            return False
        self.session.delete(row)
        self.session.commit()
        return True
