"""Repositories bound to a single transaction connection."""

from pathctl.infrastructure.repositories.edges import EdgeRepository
from pathctl.infrastructure.repositories.points import PointRepository
from pathctl.infrastructure.repositories.projects import ProjectRepository
from pathctl.infrastructure.repositories.users import UserRepository

__all__ = ["EdgeRepository", "PointRepository", "ProjectRepository", "UserRepository"]
