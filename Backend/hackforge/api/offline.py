# hackforge/api/offline.py
"""
Offline storage routes: code snippets and projects kept server-side for
clients that go offline, plus export/import and stats.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from starlette.responses import JSONResponse

from hackforge.services.offline_store import offline_store


router = APIRouter(prefix="/api/offline", tags=["Offline"])

EXPORT_FILENAME = "hackforge-offline-data.json"


class SaveCodeRequest(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    language: Optional[str] = None
    tags: Optional[List[str]] = None


class SaveProjectRequest(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    codes: Optional[List[Any]] = None


class UpdateProjectRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    description: Optional[str] = None
    codes: Optional[List[Any]] = None


class ImportRequest(BaseModel):
    codes: Optional[List[Dict[str, Any]]] = None
    projects: Optional[List[Dict[str, Any]]] = None


def _dump(item: BaseModel) -> Dict[str, Any]:
    return item.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# CODES
# ---------------------------------------------------------------------------

@router.post("/save-code")
async def save_code(data: SaveCodeRequest):
    code = offline_store.save_code(data.model_dump())
    return {"success": True, "message": "Code saved for offline access", "code": _dump(code)}


@router.get("/codes")
async def list_codes():
    codes = [_dump(c) for c in offline_store.codes]
    return {"success": True, "codes": codes, "count": len(codes)}


@router.get("/codes/search/{query}")
async def search_codes(query: str):
    results = [_dump(c) for c in offline_store.search_codes(query)]
    return {"success": True, "query": query, "results": results, "count": len(results)}


@router.get("/codes/{code_id}")
async def get_code(code_id: str):
    return {"success": True, "code": _dump(offline_store.get_code(code_id))}


@router.put("/codes/{code_id}/favorite")
async def toggle_code_favorite(code_id: str):
    code = offline_store.toggle_code_favorite(code_id)
    verb = "added to" if code.is_favorite else "removed from"
    return {"success": True, "message": f"Code {verb} favorites", "code": _dump(code)}


@router.delete("/codes/{code_id}")
async def delete_code(code_id: str):
    deleted = offline_store.delete_code(code_id)
    return {"success": True, "message": "Code deleted from offline storage", "deletedCode": _dump(deleted)}


# ---------------------------------------------------------------------------
# PROJECTS
# ---------------------------------------------------------------------------

@router.post("/save-project")
async def save_project(data: SaveProjectRequest):
    project = offline_store.save_project(data.model_dump())
    return {"success": True, "message": "Project saved for offline access", "project": _dump(project)}


@router.get("/projects")
async def list_projects():
    projects = [_dump(p) for p in offline_store.projects]
    return {"success": True, "projects": projects, "count": len(projects)}


@router.get("/projects/{project_id}")
async def get_project(project_id: str):
    return {"success": True, "project": _dump(offline_store.get_project(project_id))}


@router.put("/projects/{project_id}")
async def update_project(project_id: str, data: UpdateProjectRequest):
    project = offline_store.update_project(project_id, data.model_dump(exclude_none=True))
    return {"success": True, "message": "Project updated successfully", "project": _dump(project)}


@router.delete("/projects/{project_id}")
async def delete_project(project_id: str):
    deleted = offline_store.delete_project(project_id)
    return {"success": True, "message": "Project deleted from offline storage", "deletedProject": _dump(deleted)}


# ---------------------------------------------------------------------------
# BULK
# ---------------------------------------------------------------------------

@router.get("/export")
async def export_data():
    return JSONResponse(
        content=offline_store.export(),
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/import")
async def import_data(data: ImportRequest):
    counts = offline_store.import_data(data.codes, data.projects)
    return {"success": True, "message": "Offline data imported successfully", **counts}


@router.get("/stats")
async def stats():
    return {"success": True, "stats": offline_store.stats()}


@router.delete("/clear")
async def clear():
    deleted = offline_store.clear()
    return {"success": True, "message": "All offline data cleared successfully", "deletedCount": deleted}
