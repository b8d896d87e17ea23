from dataclasses import dataclass, field
from typing import List, Protocol


@dataclass
class AIAnalysis:
    description: str
    emotions: str
    tags: List[str] = field(default_factory=list)
    raw_response: str = ""


class AIProvider(Protocol):
    async def analyze(self, image_url: str) -> AIAnalysis:
        ...
