from typing import List, Optional
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AnalysisRecord:
    id: str
    user_id: str
    image_url: str
    description: str
    emotions: str
    tags: List[str] = field(default_factory=list)
    raw_response: Optional[str] = None
    created_at: Optional[datetime] = None


class AnalysisRepository:
    def create(self, user_id: str, image_url: str, description: str, emotions: str, tags: List[str], raw_response: Optional[str]) -> AnalysisRecord:
        ...

    def list_for_user(self, user_id: str) -> List[AnalysisRecord]:
        ...

    def get_for_user(self, record_id: str, user_id: str) -> Optional[AnalysisRecord]:
        ...

    def delete_for_user(self, record_id: str, user_id: str) -> bool:
        ...
