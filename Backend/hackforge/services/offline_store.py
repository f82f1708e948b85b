# hackforge/services/offline_store.py
"""
Server-side store for code snippets and projects kept for offline use.

Held in process memory. Items are upserted by id; missing ids get a
timestamp-based one, with a counter suffix when that id is already taken.
"""
import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hackforge.core.exceptions import InvalidPayloadError, OfflineItemNotFoundError
from hackforge.core.logging import log


EXPORT_VERSION = "1.0"


def now_ms() -> int:
    return int(time.time() * 1000)


class OfflineCode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: f"offline_{now_ms()}")
    title: str = ""
    description: str = ""
    code: str = ""
    language: Optional[str] = None
    timestamp: int = Field(default_factory=now_ms)
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = Field(default=False, alias="isFavorite")


class OfflineProject(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(default_factory=lambda: f"offline_project_{now_ms()}")
    name: str = ""
    description: str = ""
    codes: List[Any] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")


def _dump(item: BaseModel) -> Dict[str, Any]:
    return item.model_dump(by_alias=True)


def unique_id(prefix: str, taken: Set[str]) -> str:
    """A `<prefix>_<ms>` id, suffixed with a counter when that millisecond is already used."""
    base = f"{prefix}_{now_ms()}"
    candidate, n = base, 1
    while candidate in taken:
        candidate = f"{base}_{n}"
        n += 1
    return candidate


class OfflineStore:
    def __init__(self):
        self.codes: List[OfflineCode] = []
        self.projects: List[OfflineProject] = []

    # -- codes --------------------------------------------------------------

    def _code_index(self, code_id: str) -> int:
        for i, code in enumerate(self.codes):
            if code.id == code_id:
                return i
        return -1

    def save_code(self, data: Dict[str, Any]) -> OfflineCode:
        code = OfflineCode(
            id=data.get("id") or unique_id("offline", {c.id for c in self.codes}),
            title=data.get("title") or "",
            description=data.get("description") or "",
            code=data.get("code") or "",
            language=data.get("language"),
            tags=data.get("tags") or [],
        )
        index = self._code_index(code.id)
        if index >= 0:
            self.codes[index] = code
        else:
            self.codes.append(code)
        log("OFFLINE", f"Saved code {code.id}")
        return code

    def get_code(self, code_id: str) -> OfflineCode:
        index = self._code_index(code_id)
        if index < 0:
            raise OfflineItemNotFoundError("code", code_id)
        return self.codes[index]

    def search_codes(self, query: str) -> List[OfflineCode]:
        needle = query.lower()
        return [
            c for c in self.codes
            if needle in c.title.lower()
            or needle in c.description.lower()
            or any(needle in tag.lower() for tag in c.tags)
            or needle in c.code.lower()
        ]

    def toggle_code_favorite(self, code_id: str) -> OfflineCode:
        code = self.get_code(code_id)
        code.is_favorite = not code.is_favorite
        return code

    def delete_code(self, code_id: str) -> OfflineCode:
        index = self._code_index(code_id)
        if index < 0:
            raise OfflineItemNotFoundError("code", code_id)
        return self.codes.pop(index)

    # -- projects -----------------------------------------------------------

    def _project_index(self, project_id: str) -> int:
        for i, project in enumerate(self.projects):
            if project.id == project_id:
                return i
        return -1

    def save_project(self, data: Dict[str, Any]) -> OfflineProject:
        project = OfflineProject(
            id=data.get("id") or unique_id("offline_project", {p.id for p in self.projects}),
            name=data.get("name") or "",
            description=data.get("description") or "",
            codes=data.get("codes") or [],
        )
        index = self._project_index(project.id)
        if index >= 0:
            self.projects[index] = project
        else:
            self.projects.append(project)
        log("OFFLINE", f"Saved project {project.id}")
        return project

    def get_project(self, project_id: str) -> OfflineProject:
        index = self._project_index(project_id)
        if index < 0:
            raise OfflineItemNotFoundError("project", project_id)
        return self.projects[index]

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> OfflineProject:
        index = self._project_index(project_id)
        if index < 0:
            raise OfflineItemNotFoundError("project", project_id)
        merged = {**_dump(self.projects[index]), **updates, "id": project_id, "updatedAt": now_ms()}
        self.projects[index] = OfflineProject.model_validate(merged)
        return self.projects[index]

    def delete_project(self, project_id: str) -> OfflineProject:
        index = self._project_index(project_id)
        if index < 0:
            raise OfflineItemNotFoundError("project", project_id)
        return self.projects.pop(index)

    # -- bulk ---------------------------------------------------------------

    def export(self) -> Dict[str, Any]:
        return {
            "codes": [_dump(c) for c in self.codes],
            "projects": [_dump(p) for p in self.projects],
            "exportDate": datetime.now(timezone.utc).isoformat(),
            "version": EXPORT_VERSION,
        }

    def import_data(self, codes: Optional[List[Dict[str, Any]]], projects: Optional[List[Dict[str, Any]]]) -> Dict[str, Any]:
        """Append imported items as-is; nothing is de-duplicated."""
        codes = codes or []
        projects = projects or []
        try:
            new_codes = [OfflineCode.model_validate(c) for c in codes]
            new_projects = [OfflineProject.model_validate(p) for p in projects]
        except ValidationError as e:
            raise InvalidPayloadError("INVALID_IMPORT", "Offline data could not be imported", {"reason": str(e)}) from e

        # items sent without an id get one that no other item holds
        taken = {c.id for c in self.codes} | {c["id"] for c in codes if c.get("id")}
        for raw, item in zip(codes, new_codes):
            if not raw.get("id"):
                item.id = unique_id("offline", taken)
                taken.add(item.id)
        taken = {p.id for p in self.projects} | {p["id"] for p in projects if p.get("id")}
        for raw, item in zip(projects, new_projects):
            if not raw.get("id"):
                item.id = unique_id("offline_project", taken)
                taken.add(item.id)

        self.codes.extend(new_codes)
        self.projects.extend(new_projects)
        log("OFFLINE", f"Imported {len(codes)} codes, {len(projects)} projects")
        return {
            "imported": {"codes": len(codes), "projects": len(projects)},
            "total": {"codes": len(self.codes), "projects": len(self.projects)},
        }

    def stats(self) -> Dict[str, Any]:
        by_language: Dict[str, int] = {}
        for code in self.codes:
            key = str(code.language)
            by_language[key] = by_language.get(key, 0) + 1

        payload = {"codes": [_dump(c) for c in self.codes], "projects": [_dump(p) for p in self.projects]}
        return {
            "codes": {
                "total": len(self.codes),
                "favorites": sum(1 for c in self.codes if c.is_favorite),
                "byLanguage": by_language,
            },
            "projects": {
                "total": len(self.projects),
                "withCodes": sum(1 for p in self.projects if p.codes),
            },
            "storage": {
                "estimatedSize": len(json.dumps(payload, separators=(",", ":"))),
                "lastUpdated": datetime.now(timezone.utc).isoformat(),
            },
        }

    def clear(self) -> int:
        deleted = len(self.codes) + len(self.projects)
        self.codes = []
        self.projects = []
        log("OFFLINE", f"Cleared {deleted} offline items")
        return deleted


offline_store = OfflineStore()
