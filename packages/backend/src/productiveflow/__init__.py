"""ProductiveFlow: multi-tenant project and task management backend.

Organizations, teams, projects, tasks, tags, time tracking and dashboard
analytics behind a cookie-session-authenticated HTTP API.
"""

__version__ = "0.1.0"
