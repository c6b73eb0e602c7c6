from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import assert_never

from crmdesk.schemas.common import DealStage, RecordId
from crmdesk.schemas.deal import Deal, PipelineBoard, StageColumn
from crmdesk.services.store import EntityStore

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")

STAGE_ORDER: tuple[DealStage, ...] = (
    DealStage.LEAD,
    DealStage.QUALIFIED,
    DealStage.PROPOSAL,
    DealStage.NEGOTIATION,
    DealStage.CLOSED,
)


def stage_label(stage: DealStage) -> str:
    match stage:
        case DealStage.LEAD:
            return "Lead"
        case DealStage.QUALIFIED:
            return "Qualified"
        case DealStage.PROPOSAL:
            return "Proposal"
        case DealStage.NEGOTIATION:
            return "Negotiation"
        case DealStage.CLOSED:
            return "Closed"
        case _:
            assert_never(stage)


def parse_deal_value(value: str | None) -> Decimal | None:
    """Parse a currency string such as "$12,500.00"; None when nothing numeric is left."""
    if not value:
        return None
    cleaned = _NON_NUMERIC.sub("", value)
    if not cleaned:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def total_value(deals: Iterable[Deal]) -> Decimal:
    total = Decimal("0")
    for deal in deals:
        amount = parse_deal_value(deal.value)
        if amount is not None:
            total += amount
    return total


def group_by_stage(deals: Iterable[Deal]) -> dict[DealStage, list[Deal]]:
    """Every stage gets a column, in pipeline order; unstaged deals are left out."""
    columns: dict[DealStage, list[Deal]] = {stage: [] for stage in STAGE_ORDER}
    for deal in deals:
        if deal.stage is not None:
            columns[deal.stage].append(deal)
    return columns


def build_board(
    visible: list[Deal],
    all_deals: Iterable[Deal],
    error: str | None = None,
) -> PipelineBoard:
    """Kanban columns from the filtered deals; the headline total covers every deal."""
    columns = [
        StageColumn(
            stage=stage,
            label=stage_label(stage),
            deals=deals,
            count=len(deals),
            value=total_value(deals),
        )
        for stage, deals in group_by_stage(visible).items()
    ]
    return PipelineBoard(columns=columns, total_value=total_value(all_deals), error=error)


async def move_deal(store: EntityStore[Deal], deal_id: RecordId, stage: DealStage) -> Deal:
    """Drop a deal onto another stage column.

    Only the stage is sent; dropping onto the current stage does nothing.
    """
    deal = store.require(deal_id)
    if deal.stage == stage:
        return deal

    updated = await store.apply_edit(deal.id, {"stage": stage})
    logger.info('"%s" moved to %s', deal.name, stage_label(stage))
    return updated
