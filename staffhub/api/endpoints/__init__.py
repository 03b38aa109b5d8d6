# API endpoints
from . import auth, users, files, projects, tasks, reports, health

__all__ = ["auth", "users", "files", "projects", "tasks", "reports", "health"]
