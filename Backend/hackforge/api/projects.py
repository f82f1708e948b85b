# hackforge/api/projects.py
"""
Project management routes.

Projects are scoped by ``userId`` (query string on GET/DELETE, body on
writes), defaulting to the demo user. GET responses go through the Redis
cache when it is enabled; every write invalidates the user's cached entries.
"""
import math
from typing import List, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from hackforge.core.config import settings
from hackforge.core.exceptions import InvalidPayloadError, MissingFieldsError
from hackforge.core.logging import log
from hackforge.core.rate_limit import limiter
from hackforge.db import get_store
from hackforge.llm import get_adapter
from hackforge.models import ProjectMetadata
from hackforge.services.cache import cache_service, invalidate_user_projects, project_cache_prefix


router = APIRouter(prefix="/api/projects", tags=["Projects"])

PROJECTS_LIMIT = settings.rate_limits.projects


class CreateProjectRequest(BaseModel):
    title: Optional[str] = None
    prompt: Optional[str] = None
    generatedCode: Optional[str] = None
    framework: Optional[str] = None
    tags: Optional[List[str]] = None
    userId: Optional[str] = None


class UpdateProjectRequest(BaseModel):
    title: Optional[str] = None
    prompt: Optional[str] = None
    generatedCode: Optional[str] = None
    framework: Optional[str] = None
    tags: Optional[List[str]] = None
    isFavorite: Optional[bool] = None
    userId: Optional[str] = None

    def changes(self) -> dict:
        """Fields the client actually sent, renamed to stored field names."""
        renames = {"generatedCode": "generated_code", "isFavorite": "is_favorite"}
        sent = self.model_dump(exclude_unset=True, exclude={"userId"})
        return {renames.get(k, k): v for k, v in sent.items() if v is not None}


class FavoriteRequest(BaseModel):
    userId: Optional[str] = None


def _user(user_id: Optional[str]) -> str:
    return user_id or settings.default_user_id


def _positive_int(value: Optional[str], default: int) -> int:
    """Parse a paging parameter. Junk, zero and negatives mean the default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@router.post("", status_code=201)
@limiter.limit(PROJECTS_LIMIT)
async def create_project(request: Request, data: CreateProjectRequest):
    """Save a prompt/code pair as a project."""
    missing = [name for name in ("title", "prompt", "generatedCode") if not getattr(data, name)]
    if missing:
        raise MissingFieldsError(missing)

    user_id = _user(data.userId)
    project = await get_store().create(
        user_id=user_id,
        title=data.title,
        prompt=data.prompt,
        generated_code=data.generatedCode,
        framework=data.framework or "react",
        tags=data.tags or [],
        metadata=ProjectMetadata(model=get_adapter().model_name),
    )
    await invalidate_user_projects(user_id)
    log("PROJECTS", f"Created project {project.id} for {user_id}")

    return {
        "success": True,
        "project": project.to_api(),
        "message": "Project saved successfully",
    }


@router.get("")
@limiter.limit(PROJECTS_LIMIT)
async def list_projects(
    request: Request,
    userId: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: str = "",
    sortBy: str = "createdAt",
    sortOrder: str = "desc",
):
    """List a user's projects with search, sorting and pagination."""
    user_id = _user(userId)
    page = _positive_int(page, 1)
    limit = _positive_int(limit, 10)
    cache_key = cache_service.generate_key(
        f"{project_cache_prefix(user_id)}:list",
        {"page": page, "limit": limit, "search": search, "sortBy": sortBy, "sortOrder": sortOrder},
    )
    cached = await cache_service.get(cache_key)
    if cached is not None:
        log("CACHE-HIT", cache_key)
        return cached

    projects, total = await get_store().list(
        user_id,
        page=page,
        limit=limit,
        search=search or None,
        sort_by=sortBy,
        ascending=sortOrder == "asc",
    )

    body = {
        "success": True,
        "projects": [p.to_api() for p in projects],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }
    await cache_service.set(cache_key, body)
    return body


@router.get("/{project_id}")
@limiter.limit(PROJECTS_LIMIT)
async def get_project(request: Request, project_id: str, userId: Optional[str] = None):
    """Get one project."""
    user_id = _user(userId)
    cache_key = f"{project_cache_prefix(user_id)}:item:{project_id}"
    cached = await cache_service.get(cache_key)
    if cached is not None:
        log("CACHE-HIT", cache_key)
        return cached

    project = await get_store().get(project_id, user_id)
    body = {"success": True, "project": project.to_api()}
    await cache_service.set(cache_key, body)
    return body


@router.put("/{project_id}")
@limiter.limit(PROJECTS_LIMIT)
async def update_project(request: Request, project_id: str, data: UpdateProjectRequest):
    """Update a project's editable fields."""
    user_id = _user(data.userId)
    changes = data.changes()
    for field in ("title", "prompt", "generated_code"):
        if field in changes and not changes[field].strip():
            raise InvalidPayloadError("INVALID_UPDATE", f"{field} cannot be empty")

    project = await get_store().update(project_id, user_id, changes)
    await invalidate_user_projects(user_id)
    log("PROJECTS", f"Updated project {project_id}")

    return {
        "success": True,
        "project": project.to_api(),
        "message": "Project updated successfully",
    }


@router.delete("/{project_id}")
@limiter.limit(PROJECTS_LIMIT)
async def delete_project(request: Request, project_id: str, userId: Optional[str] = None):
    """Delete a project."""
    user_id = _user(userId)
    await get_store().delete(project_id, user_id)
    await invalidate_user_projects(user_id)
    log("PROJECTS", f"Deleted project {project_id}")

    return {"success": True, "message": "Project deleted successfully"}


@router.patch("/{project_id}/favorite")
@limiter.limit(PROJECTS_LIMIT)
async def toggle_favorite(request: Request, project_id: str, data: Optional[FavoriteRequest] = None):
    """Flip a project's favorite flag."""
    user_id = _user(data.userId if data else None)
    project = await get_store().toggle_favorite(project_id, user_id)
    await invalidate_user_projects(user_id)

    verb = "added to" if project.is_favorite else "removed from"
    return {
        "success": True,
        "project": project.to_api(),
        "message": f"Project {verb} favorites",
    }
