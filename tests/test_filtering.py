from __future__ import annotations

from datetime import date

import pytest

from crmdesk.schemas import (
    Company,
    CompanyFilters,
    Contact,
    ContactFilters,
    Task,
    TaskFilters,
    TaskPriority,
)
from crmdesk.services.filtering import (
    COMPANY_VIEW,
    CONTACT_VIEW,
    TASK_VIEW,
    ListState,
    distinct_values,
    filter_records,
    paginate,
)


def _contacts() -> list[Contact]:
    return [
        Contact(id=1, first_name="Jane", last_name="Doe", email="jane@acme.com", company="Acme",
                type="customer", status="active"),
        Contact(id=2, first_name="Bob", last_name="Stone", email="bob@globex.com", company="Globex",
                type="lead", status="active"),
        Contact(id=3, first_name="Ann", last_name="Lee", company="ACME Labs",
                type="customer", status="inactive"),
        Contact(id=4, first_name="Raj", last_name="Patel", email="raj@initech.com",
                type="partner", status="active"),
    ]


@pytest.mark.unit
def test_no_filters_keeps_every_item_in_order() -> None:
    contacts = _contacts()
    assert filter_records(contacts, ContactFilters(), CONTACT_VIEW) == contacts


@pytest.mark.unit
def test_search_is_case_insensitive_substring() -> None:
    result = filter_records(_contacts(), ContactFilters(search_term="acme"), CONTACT_VIEW)
    assert [c.id for c in result] == [1, 3]


@pytest.mark.unit
def test_missing_field_does_not_match() -> None:
    # Ann has no email; searching on an email fragment must not fail
    result = filter_records(_contacts(), ContactFilters(search_term="@"), CONTACT_VIEW)
    assert [c.id for c in result] == [1, 2, 4]


@pytest.mark.unit
def test_categorical_filters_are_and_combined() -> None:
    result = filter_records(
        _contacts(), ContactFilters(type="customer", status="active"), CONTACT_VIEW
    )
    assert [c.id for c in result] == [1]


@pytest.mark.unit
def test_filter_order_does_not_matter() -> None:
    contacts = _contacts()
    by_type = filter_records(contacts, ContactFilters(type="customer"), CONTACT_VIEW)
    type_then_status = filter_records(by_type, ContactFilters(status="active"), CONTACT_VIEW)

    by_status = filter_records(contacts, ContactFilters(status="active"), CONTACT_VIEW)
    status_then_type = filter_records(by_status, ContactFilters(type="customer"), CONTACT_VIEW)

    combined = filter_records(contacts, ContactFilters(type="customer", status="active"), CONTACT_VIEW)
    assert type_then_status == status_then_type == combined


@pytest.mark.unit
def test_all_means_no_filter_but_not_for_search() -> None:
    filters = ContactFilters(search_term="all", type="all")
    assert filters.type is None
    assert filters.term == "all"


@pytest.mark.unit
def test_company_search_covers_location_and_description() -> None:
    companies = [
        Company(id=1, name="Acme", location="Berlin", industry="Tech", size="51-200"),
        Company(id=2, name="Globex", location="Austin", description="Berlin office planned",
                industry="Energy", size="1-10"),
        Company(id=3, name="Initech", location="Paris", industry="Tech", size="51-200"),
    ]
    result = filter_records(companies, CompanyFilters(search_term="berlin", industry="Tech"), COMPANY_VIEW)
    assert [c.id for c in result] == [1]


@pytest.mark.unit
def test_tasks_sorted_by_due_date_with_undated_last() -> None:
    tasks = [
        Task(id=1, title="Undated"),
        Task(id=2, title="Later", due_date=date(2026, 11, 1)),
        Task(id=3, title="Sooner", due_date=date(2026, 10, 20)),
        Task(id=4, title="Same day", due_date=date(2026, 11, 1)),
    ]
    result = filter_records(tasks, TaskFilters(), TASK_VIEW)
    # Ties keep their original order
    assert [t.id for t in result] == [3, 2, 4, 1]


@pytest.mark.unit
def test_same_day_tasks_sorted_by_priority() -> None:
    due = date(2026, 11, 1)
    tasks = [
        Task(id=1, title="Low", due_date=due, priority=TaskPriority.LOW),
        Task(id=2, title="Unset", due_date=due),
        Task(id=3, title="Urgent", due_date=due, priority=TaskPriority.URGENT),
        Task(id=4, title="Earlier", due_date=date(2026, 10, 1), priority=TaskPriority.LOW),
        Task(id=5, title="High", due_date=due, priority=TaskPriority.HIGH),
    ]
    result = filter_records(tasks, TaskFilters(), TASK_VIEW)
    assert [t.id for t in result] == [4, 3, 5, 1, 2]


@pytest.mark.unit
def test_pages_concatenate_to_filtered_list() -> None:
    items = list(range(23))
    first = paginate(items, 1, 10)

    assert first.pages == 3
    assert first.total == 23

    rebuilt: list[int] = []
    for page in range(1, first.pages + 1):
        rebuilt.extend(paginate(items, page, 10).items)
    assert rebuilt == items
    assert len(paginate(items, 3, 10).items) == 3


@pytest.mark.unit
def test_out_of_range_page_is_clamped() -> None:
    result = paginate(list(range(12)), 5, 10)
    assert result.page == 2
    assert result.items == [10, 11]


@pytest.mark.unit
def test_empty_collection_has_no_pages() -> None:
    result = paginate([], 1, 10)
    assert result.pages == 0
    assert result.page == 1
    assert result.items == []


@pytest.mark.unit
def test_changing_filters_resets_to_first_page() -> None:
    state = ListState(ContactFilters(), CONTACT_VIEW, page_size=2)
    state.set_page(2)

    assert state.set_filters(ContactFilters()) is False
    assert state.page == 2

    assert state.set_filters(ContactFilters(status="active")) is True
    assert state.page == 1


@pytest.mark.unit
def test_list_state_pages_filtered_items() -> None:
    state = ListState(ContactFilters(status="active"), CONTACT_VIEW, page_size=2)
    state.set_page(2)

    result = state.apply(_contacts())

    assert result.total == 3
    assert result.pages == 2
    assert [c.id for c in result.items] == [4]


@pytest.mark.unit
def test_unpaginated_view_returns_single_page() -> None:
    state = ListState(CompanyFilters(), COMPANY_VIEW, page_size=1)
    companies = [Company(id=i, name=f"Co {i}") for i in range(1, 4)]

    result = state.apply(companies)

    assert result.pages == 1
    assert len(result.items) == 3


@pytest.mark.unit
def test_distinct_values_are_sorted_and_skip_blanks() -> None:
    companies = [
        Company(id=1, industry="Tech"),
        Company(id=2, industry="Energy"),
        Company(id=3, industry="Tech"),
        Company(id=4, industry=""),
        Company(id=5),
    ]
    assert distinct_values(companies, "industry") == ["Energy", "Tech"]
