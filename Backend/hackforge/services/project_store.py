# hackforge/services/project_store.py
"""
Project persistence.

MongoProjectStore talks to MongoDB through Beanie. MemoryProjectStore keeps
projects in process and is what the app runs on when no database is
configured (and what the tests use). Both return ProjectOut and raise
ProjectNotFoundError for ids that don't exist for the given user.
"""
import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

from beanie import PydanticObjectId
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from hackforge.core.exceptions import PersistenceError, ProjectNotFoundError
from hackforge.core.logging import log
from hackforge.models.project import Project, ProjectMetadata, ProjectOut, utcnow


# API sort keys -> stored field names
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "framework": "framework",
    "isFavorite": "is_favorite",
}
DEFAULT_SORT = "created_at"

UPDATABLE_FIELDS = {"title", "prompt", "generated_code", "framework", "tags", "is_favorite"}


def resolve_sort_field(sort_by: Optional[str]) -> str:
    return SORT_FIELDS.get(sort_by or "", DEFAULT_SORT)


def build_search_query(user_id: str, search: Optional[str] = None) -> Dict[str, Any]:
    """
    Mongo filter for a user's projects.

    The search term is matched literally and case-insensitively against
    title, prompt and any tag.
    """
    query: Dict[str, Any] = {"user_id": user_id}
    if search:
        pattern = re.escape(search)
        query["$or"] = [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"prompt": {"$regex": pattern, "$options": "i"}},
            {"tags": {"$regex": pattern, "$options": "i"}},
        ]
    return query


def _sort_key(value: Any) -> Tuple[bool, Any]:
    # None sorts lowest, as in MongoDB
    return (value is not None, value)


def _clean_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Keep updatable fields only, with the title and tags trimmed."""
    cleaned = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    if "title" in cleaned:
        cleaned["title"] = cleaned["title"].strip()
    if "tags" in cleaned:
        cleaned["tags"] = [t.strip() for t in cleaned["tags"]]
    return cleaned


class ProjectStore:
    """Interface shared by the Mongo and in-memory stores."""
    backend = "none"

    async def create(
        self,
        user_id: str,
        title: str,
        prompt: str,
        generated_code: str,
        framework: Optional[str] = None,
        tags: Optional[List[str]] = None,
        metadata: Optional[ProjectMetadata] = None,
    ) -> ProjectOut:
        raise NotImplementedError

    async def list(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        ascending: bool = False,
    ) -> Tuple[List[ProjectOut], int]:
        raise NotImplementedError

    async def get(self, project_id: str, user_id: str) -> ProjectOut:
        raise NotImplementedError

    async def update(self, project_id: str, user_id: str, changes: Dict[str, Any]) -> ProjectOut:
        raise NotImplementedError

    async def delete(self, project_id: str, user_id: str) -> None:
        raise NotImplementedError

    async def toggle_favorite(self, project_id: str, user_id: str) -> ProjectOut:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# MONGO
# ---------------------------------------------------------------------------

@contextmanager
def _db_errors(operation: str, error_code: str):
    try:
        yield
    except PyMongoError as e:
        log("DB", f"{operation} failed: {e}")
        raise PersistenceError(operation, str(e), error_code) from e


class MongoProjectStore(ProjectStore):
    backend = "mongodb"

    @staticmethod
    def _object_id(project_id: str) -> PydanticObjectId:
        try:
            return PydanticObjectId(project_id)
        except (InvalidId, TypeError):
            raise ProjectNotFoundError(project_id)

    async def _get_document(self, project_id: str, user_id: str) -> Project:
        oid = self._object_id(project_id)
        doc = await Project.find_one({"_id": oid, "user_id": user_id})
        if doc is None:
            raise ProjectNotFoundError(project_id)
        return doc

    async def create(self, user_id, title, prompt, generated_code, framework=None, tags=None, metadata=None):
        with _db_errors("create project", "CREATE_ERROR"):
            doc = Project(
                user_id=user_id,
                title=title,
                prompt=prompt,
                generated_code=generated_code,
                framework=framework,
                tags=tags or [],
                metadata=metadata or ProjectMetadata(),
            )
            await doc.insert()
        return ProjectOut.from_document(doc)

    async def list(self, user_id, page=1, limit=10, search=None, sort_by=None, ascending=False):
        query = build_search_query(user_id, search)
        field = resolve_sort_field(sort_by)
        sort = f"+{field}" if ascending else f"-{field}"

        with _db_errors("fetch projects", "FETCH_ERROR"):
            total = await Project.find(query).count()
            docs = await (
                Project.find(query)
                .sort(sort)
                .skip((page - 1) * limit)
                .limit(limit)
                .to_list()
            )
        return [ProjectOut.from_document(d) for d in docs], total

    async def get(self, project_id, user_id):
        with _db_errors("fetch project", "FETCH_ERROR"):
            doc = await self._get_document(project_id, user_id)
        return ProjectOut.from_document(doc)

    async def update(self, project_id, user_id, changes):
        with _db_errors("update project", "UPDATE_ERROR"):
            doc = await self._get_document(project_id, user_id)
            for key, value in _clean_changes(changes).items():
                setattr(doc, key, value)
            doc.updated_at = utcnow()
            await doc.save()
        return ProjectOut.from_document(doc)

    async def delete(self, project_id, user_id):
        with _db_errors("delete project", "DELETE_ERROR"):
            doc = await self._get_document(project_id, user_id)
            await doc.delete()

    async def toggle_favorite(self, project_id, user_id):
        with _db_errors("toggle favorite status", "TOGGLE_ERROR"):
            doc = await self._get_document(project_id, user_id)
            doc.is_favorite = not doc.is_favorite
            doc.updated_at = utcnow()
            await doc.save()
        return ProjectOut.from_document(doc)


# ---------------------------------------------------------------------------
# IN-MEMORY
# ---------------------------------------------------------------------------

class MemoryProjectStore(ProjectStore):
    backend = "memory"

    def __init__(self):
        self._projects: Dict[str, ProjectOut] = {}

    def __len__(self) -> int:
        return len(self._projects)

    def _lookup(self, project_id: str, user_id: str) -> ProjectOut:
        project = self._projects.get(project_id)
        if project is None or project.user_id != user_id:
            raise ProjectNotFoundError(project_id)
        return project

    @staticmethod
    def _matches(project: ProjectOut, pattern: "re.Pattern") -> bool:
        return bool(
            pattern.search(project.title)
            or pattern.search(project.prompt)
            or any(pattern.search(tag) for tag in project.tags)
        )

    async def create(self, user_id, title, prompt, generated_code, framework=None, tags=None, metadata=None):
        now = utcnow()
        project = ProjectOut(
            id=str(ObjectId()),
            user_id=user_id,
            title=title.strip(),
            prompt=prompt,
            generated_code=generated_code,
            framework=framework,
            tags=[t.strip() for t in tags or []],
            metadata=metadata or ProjectMetadata(),
            created_at=now,
            updated_at=now,
        )
        self._projects[project.id] = project
        return project

    async def list(self, user_id, page=1, limit=10, search=None, sort_by=None, ascending=False):
        items = [p for p in self._projects.values() if p.user_id == user_id]
        if search:
            pattern = re.compile(re.escape(search), re.IGNORECASE)
            items = [p for p in items if self._matches(p, pattern)]

        field = resolve_sort_field(sort_by)
        items.sort(key=lambda p: _sort_key(getattr(p, field)), reverse=not ascending)

        start = (page - 1) * limit
        return items[start:start + limit], len(items)

    async def get(self, project_id, user_id):
        return self._lookup(project_id, user_id)

    async def update(self, project_id, user_id, changes):
        project = self._lookup(project_id, user_id)
        updated = project.model_copy(update={**_clean_changes(changes), "updated_at": utcnow()})
        self._projects[project_id] = updated
        return updated

    async def delete(self, project_id, user_id):
        self._lookup(project_id, user_id)
        del self._projects[project_id]

    async def toggle_favorite(self, project_id, user_id):
        project = self._lookup(project_id, user_id)
        return await self.update(project_id, user_id, {"is_favorite": not project.is_favorite})
