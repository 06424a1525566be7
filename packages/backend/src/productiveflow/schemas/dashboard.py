"""Dashboard and analytics response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from productiveflow.schemas.base import CamelModel
from productiveflow.schemas.project import ProjectRef


class TaskStats(CamelModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    overdue: int
    due_this_week: int


class ProjectProgress(CamelModel):
    id: uuid.UUID
    name: str
    status: str
    progress: int


class ProjectStats(CamelModel):
    total: int
    active: int
    completed: int
    recent: list[ProjectProgress]


class Activity(CamelModel):
    id: uuid.UUID
    user: str
    action: Optional[str] = None
    target: Optional[int] = None  # duration in seconds
    timestamp: datetime


class MemberLoad(CamelModel):
    user: str
    tasks: int


class TeamStats(CamelModel):
    total_members: int
    recent_activities: list[Activity]
    task_distribution: list[MemberLoad]


class DashboardRead(CamelModel):
    tasks: TaskStats
    projects: ProjectStats
    team: TeamStats


class AnalyticsTask(CamelModel):
    id: uuid.UUID
    title: str
    status: str
    priority: str
    created_at: datetime
    due_date: Optional[datetime] = None
    project: ProjectRef


class AnalyticsProject(ProjectRef):
    status: str
    tasks: list[AnalyticsTask] = []


class AnalyticsRead(CamelModel):
    projects: list[AnalyticsProject]
    tasks: list[AnalyticsTask]
