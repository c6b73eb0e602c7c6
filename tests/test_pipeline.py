from __future__ import annotations

from decimal import Decimal

import pytest

from crmdesk.schemas import Deal, DealStage
from crmdesk.services.pipeline import (
    STAGE_ORDER,
    build_board,
    group_by_stage,
    parse_deal_value,
    stage_label,
    total_value,
)


def _deals() -> list[Deal]:
    return [
        Deal(id=1, name="A", value="$1,000.50", stage="lead"),
        Deal(id=2, name="B", value="2500", stage="closed"),
        Deal(id=3, name="C", value="n/a", stage="lead"),
        Deal(id=4, name="D", value="$300", stage=None),
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$12,500.00", Decimal("12500.00")),
        ("750", Decimal("750")),
        ("", None),
        (None, None),
        ("TBD", None),
    ],
)
def test_parse_deal_value(raw: str | None, expected: Decimal | None) -> None:
    assert parse_deal_value(raw) == expected


@pytest.mark.unit
def test_total_value_skips_unparseable_values() -> None:
    assert total_value(_deals()) == Decimal("3800.50")


@pytest.mark.unit
def test_every_stage_gets_a_column() -> None:
    columns = group_by_stage(_deals())

    assert list(columns) == list(STAGE_ORDER)
    assert [d.id for d in columns[DealStage.LEAD]] == [1, 3]
    assert columns[DealStage.PROPOSAL] == []


@pytest.mark.unit
def test_board_counts_visible_deals_but_totals_all() -> None:
    deals = _deals()
    board = build_board([deals[0]], deals)

    lead = board.columns[0]
    assert lead.label == "Lead"
    assert lead.count == 1
    assert lead.value == Decimal("1000.50")
    assert board.total_value == Decimal("3800.50")


@pytest.mark.unit
def test_stage_labels() -> None:
    assert [stage_label(stage) for stage in STAGE_ORDER] == [
        "Lead", "Qualified", "Proposal", "Negotiation", "Closed",
    ]
