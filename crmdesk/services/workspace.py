from __future__ import annotations

from dataclasses import dataclass

from crmdesk.integrations.backend.base import DataBackend
from crmdesk.schemas.company import Company, CompanyFilters, CompanyForm
from crmdesk.schemas.contact import Contact, ContactFilters, ContactForm
from crmdesk.schemas.deal import Deal, DealFilters, DealForm
from crmdesk.schemas.task import Task, TaskFilters, TaskForm
from crmdesk.services.filtering import (
    COMPANY_VIEW,
    CONTACT_VIEW,
    DEAL_VIEW,
    TASK_VIEW,
    ListState,
)
from crmdesk.services.gateways import (
    ActivityGateway,
    CompanyGateway,
    ContactGateway,
    DealGateway,
    TaskGateway,
)
from crmdesk.services.store import EntityStore
from crmdesk.services.validation import (
    validate_company,
    validate_contact,
    validate_deal,
    validate_task,
)


@dataclass
class Workspace:
    """Per-page stores and list state, all sharing one backend client."""

    backend: DataBackend
    contacts: EntityStore[Contact]
    companies: EntityStore[Company]
    deals: EntityStore[Deal]
    tasks: EntityStore[Task]
    activities: ActivityGateway
    contact_list: ListState[ContactFilters]
    company_list: ListState[CompanyFilters]
    deal_list: ListState[DealFilters]
    task_list: ListState[TaskFilters]


def build_workspace(backend: DataBackend, page_size: int = 10) -> Workspace:
    return Workspace(
        backend=backend,
        contacts=EntityStore(ContactGateway(backend), ContactForm, validate_contact),
        companies=EntityStore(CompanyGateway(backend), CompanyForm, validate_company),
        deals=EntityStore(DealGateway(backend), DealForm, validate_deal),
        tasks=EntityStore(TaskGateway(backend), TaskForm, validate_task),
        activities=ActivityGateway(backend),
        contact_list=ListState(ContactFilters(), CONTACT_VIEW, page_size),
        company_list=ListState(CompanyFilters(), COMPANY_VIEW, page_size),
        deal_list=ListState(DealFilters(), DEAL_VIEW, page_size),
        task_list=ListState(TaskFilters(), TASK_VIEW, page_size),
    )
