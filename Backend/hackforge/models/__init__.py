from .project import Project, ProjectMetadata, ProjectOut

__all__ = ["Project", "ProjectMetadata", "ProjectOut"]
