"""StaffHub - staff, project and task management backend"""

__version__ = "1.0.0"
