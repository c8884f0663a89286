"""HTTP API for RecruitMatch."""

from .app import create_app

__all__ = ["create_app"]
