from datetime import datetime, timezone
from typing import List, Optional

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, DESCENDING, IndexModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tokens_used: Optional[int] = None
    generation_time: Optional[int] = None  # milliseconds
    model: Optional[str] = None


class Project(Document):
    """A saved prompt together with the code generated for it."""
    user_id: Indexed(str)
    title: str
    prompt: str
    generated_code: str
    framework: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        return value.strip()

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: List[str]) -> List[str]:
        return [tag.strip() for tag in value]

    class Settings:
        name = "projects"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)]),
            IndexModel([("user_id", ASCENDING), ("is_favorite", ASCENDING)]),
            IndexModel([("title", ASCENDING)]),
            IndexModel([("framework", ASCENDING)]),
        ]


class ProjectOut(BaseModel):
    """API shape of a project: camelCase keys, ``_id`` as a string."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id")
    user_id: str
    title: str
    prompt: str
    generated_code: str
    framework: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, doc: Project) -> "ProjectOut":
        return cls(
            id=str(doc.id),
            user_id=doc.user_id,
            title=doc.title,
            prompt=doc.prompt,
            generated_code=doc.generated_code,
            framework=doc.framework,
            tags=list(doc.tags),
            is_favorite=doc.is_favorite,
            metadata=doc.metadata,
            created_at=doc.created_at,
            updated_at=doc.updated_at,
        )

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
