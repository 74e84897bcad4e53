"""Knowledge retrieval contracts."""

from typing import Optional

from pydantic import BaseModel, Field


class KnowledgeRecord(BaseModel):
    """A relevance-ranked record returned by the knowledge collaborator."""

    name: str
    category: str = "attraction"
    price: Optional[str] = None
    description: str = ""
    score: float = Field(default=0.0, description="Similarity score, 0-1")
    source: Optional[str] = Field(default=None, description="City or document source")


class Attraction(BaseModel):
    """An attraction kept in plan state after relevance filtering."""

    name: str
    category: str = "attraction"
    price: Optional[str] = Field(default=None, description="Raw price text")
    description: str = ""
    relevance_score: float = 0.0
    city: Optional[str] = None

    @classmethod
    def from_record(cls, record: KnowledgeRecord) -> "Attraction":
        return cls(
            name=record.name,
            category=record.category,
            price=record.price,
            description=record.description,
            relevance_score=record.score,
            city=record.source,
        )
