"""
Project storage re-exports.
"""
from core.db.projects.projects_store import (
    find_all_projects_by_owner,
    get_project,
    create_projects_if_absent,
    update_project,
    find_all_projects_with_reminder_enabled,
)

__all__ = [
    "find_all_projects_by_owner",
    "get_project",
    "create_projects_if_absent",
    "update_project",
    "find_all_projects_with_reminder_enabled",
]
