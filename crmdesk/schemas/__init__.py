from __future__ import annotations

from .activity import Activity, ActivityEntry, ActivityForm
from .auth import SessionRead, SessionRestore
from .common import (
    ActivityType,
    CollectionView,
    ContactStatus,
    ContactType,
    DealStage,
    DeleteResult,
    EntityRecord,
    ErrorResponse,
    FilterSpec,
    FormModel,
    PaginatedResponse,
    RecordId,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)
from .company import (
    Company,
    CompanyDetail,
    CompanyFilters,
    CompanyForm,
    CompanyOptions,
    EntityReference,
)
from .contact import Contact, ContactFilters, ContactForm
from .dashboard import DashboardResponse, DashboardStats
from .deal import Deal, DealFilters, DealForm, PipelineBoard, StageColumn, StageMove
from .health import DependencyHealth, HealthCheckResponse
from .task import Task, TaskFilters, TaskForm

__all__ = [
    # common
    "ActivityType",
    "CollectionView",
    "ContactStatus",
    "ContactType",
    "DealStage",
    "DeleteResult",
    "EntityRecord",
    "ErrorResponse",
    "FilterSpec",
    "FormModel",
    "PaginatedResponse",
    "RecordId",
    "TaskCategory",
    "TaskPriority",
    "TaskStatus",
    # health
    "DependencyHealth",
    "HealthCheckResponse",
    # auth
    "SessionRead",
    "SessionRestore",
    # contacts
    "Contact",
    "ContactFilters",
    "ContactForm",
    # companies
    "Company",
    "CompanyDetail",
    "CompanyFilters",
    "CompanyForm",
    "CompanyOptions",
    "EntityReference",
    # deals
    "Deal",
    "DealFilters",
    "DealForm",
    "PipelineBoard",
    "StageColumn",
    "StageMove",
    # tasks
    "Task",
    "TaskFilters",
    "TaskForm",
    # activities
    "Activity",
    "ActivityEntry",
    "ActivityForm",
    # dashboard
    "DashboardResponse",
    "DashboardStats",
]
