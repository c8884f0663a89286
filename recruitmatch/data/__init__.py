"""
Data layer for RecruitMatch.

Submodules:
- database: MongoDB client management and index creation
- models: Pydantic documents and API schemas
- repositories: async data access for resumes, jobs and matches
"""

from .database import DatabaseManager, get_database_manager

__all__ = [
    "DatabaseManager",
    "get_database_manager",
]
