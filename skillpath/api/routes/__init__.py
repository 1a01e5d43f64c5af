"""API routes."""

from skillpath.api.routes import activity, dashboard, profiles, roadmaps, shared

__all__ = ["activity", "dashboard", "profiles", "roadmaps", "shared"]
