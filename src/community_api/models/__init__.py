"""ORM model registry. Importing this package registers every table on Base.metadata."""

from community_api.models.base import Base
from community_api.models.chapter import Chapter
from community_api.models.contributor import Contributor
from community_api.models.master_tech import MasterTech
from community_api.models.project import Project, ProjectTech
from community_api.models.user import User

__all__ = [
    "Base",
    "Chapter",
    "Contributor",
    "MasterTech",
    "Project",
    "ProjectTech",
    "User",
]
