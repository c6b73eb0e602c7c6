"""In-memory entity collections kept in step with the record API.

Each page owns one EntityStore. The store never inserts a record before
the backend confirms it, replaces local items with the server's copy on
success, and leaves its items untouched when a call fails.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from crmdesk.core.errors import CRMError, DeleteNotConfirmed, RecordNotFound, ValidationFailed
from crmdesk.schemas.common import (
    EntityRecord,
    FilterSpec,
    FormModel,
    RecordId,
    form_errors,
    form_fields,
    normalize_id,
)
from crmdesk.services.gateways import EntityGateway
from crmdesk.services.validation import Validator, ensure_valid

logger = logging.getLogger(__name__)

MAX_TRACKED_OPERATIONS = 100


@dataclass(frozen=True)
class Pending:
    kind: str
    draft: dict[str, Any]
    record_id: RecordId | None = None


@dataclass(frozen=True)
class Confirmed[R]:
    kind: str
    record: R | None
    record_id: RecordId | None = None


@dataclass(frozen=True)
class Failed:
    kind: str
    draft: dict[str, Any]
    error: str
    record_id: RecordId | None = None


type Operation[R] = Pending | Confirmed[R] | Failed


@dataclass
class _Sequence:
    """Monotonic request tags; a response is fresh only if no newer tag was issued."""

    latest: int = 0
    per_key: dict[RecordId, int] = field(default_factory=dict)

    def next(self) -> int:
        self.latest += 1
        return self.latest

    def next_for(self, key: RecordId) -> int:
        tag = self.next()
        self.per_key[key] = tag
        return tag

    def is_latest_for(self, key: RecordId, tag: int) -> bool:
        return self.per_key.get(key) == tag


class EntityStore[R: EntityRecord]:
    """Items, loading flag, banner error and selection for one entity page."""

    def __init__(
        self,
        gateway: EntityGateway[R],
        form_model: type[FormModel],
        validator: Validator | None = None,
    ) -> None:
        self.gateway = gateway
        self.form_model = form_model
        self.validator = validator

        self.items: list[R] = []
        self.is_loading = False
        self.loaded = False
        self.error: str | None = None
        self.selected_id: RecordId | None = None
        self.pending_delete_id: RecordId | None = None
        self.operations: dict[str, Operation[R]] = {}

        self._refreshes = _Sequence()
        self._edits = _Sequence()
        self._writes = 0
        self._op_keys = itertools.count(1)

    @property
    def entity(self) -> str:
        return self.gateway.entity

    # -- lookups -----------------------------------------------------------

    def _index_of(self, record_id: RecordId) -> int | None:
        for index, item in enumerate(self.items):
            if item.id == record_id:
                return index
        return None

    def get(self, record_id: RecordId) -> R | None:
        index = self._index_of(normalize_id(record_id))
        return self.items[index] if index is not None else None

    def require(self, record_id: RecordId) -> R:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFound(self.entity, record_id)
        return record

    # -- operation bookkeeping ---------------------------------------------

    def _track(self, operation: Operation[R], key: str | None = None) -> str:
        key = key or f"tmp-{next(self._op_keys)}"
        self.operations[key] = operation
        while len(self.operations) > MAX_TRACKED_OPERATIONS:
            self.operations.pop(next(iter(self.operations)))
        return key

    def _prepare(self, fields: Mapping[str, Any], partial: bool) -> dict[str, Any]:
        """Validate a form and build its wire payload; raises ValidationFailed."""
        data = form_fields(fields, self.form_model)
        errors = self.validator(data, partial=partial) if self.validator else {}
        try:
            form = self.form_model.model_validate(data)
        except ValidationError as e:
            for name, message in form_errors(e, self.form_model).items():
                errors.setdefault(name, message)
            raise ValidationFailed(errors) from e

        ensure_valid(errors)
        return form.to_wire(partial=partial)

    def _confirm_write(self) -> None:
        # Refreshes issued before this point hold a pre-write snapshot
        self._writes += 1

    # -- operations --------------------------------------------------------

    async def refresh(self, filters: FilterSpec | None = None) -> bool:
        """Reload items from the backend.

        On failure the previous items stay in place and `error` is set.
        Responses overtaken by a newer refresh, or by a write confirmed
        while the fetch was in flight, are dropped.
        """
        tag = self._refreshes.next()
        writes = self._writes
        self.is_loading = True

        try:
            records = await self.gateway.list(filters)
        except (CRMError, ValidationError) as e:
            logger.error("Failed to load %s records: %s", self.entity, e)
            if tag == self._refreshes.latest:
                self.is_loading = False
                self.error = getattr(e, "user_message", f"Failed to load {self.entity} records")
            return False

        if tag != self._refreshes.latest:
            logger.info("Discarding superseded %s refresh", self.entity)
            return False

        if writes != self._writes:
            logger.info("Discarding %s refresh that predates a confirmed write", self.entity)
            self.is_loading = False
            return False

        self.items = records
        self.loaded = True
        self.is_loading = False
        self.error = None

        if self.selected_id is not None and self._index_of(self.selected_id) is None:
            self.selected_id = None
        return True

    async def add(self, fields: Mapping[str, Any]) -> R:
        """Validate, create on the backend, then append the server's record."""
        payload = self._prepare(fields, partial=False)
        key = self._track(Pending(kind="create", draft=dict(fields)))

        try:
            record = await self.gateway.create(payload)
        except CRMError as e:
            self._track(Failed(kind="create", draft=dict(fields), error=e.user_message), key)
            logger.error("Failed to create %s: %s", self.entity, e)
            raise

        self._confirm_write()

        self._track(Confirmed(kind="create", record=record, record_id=record.id), key)

        index = self._index_of(record.id)
        if index is None:
            self.items.append(record)
        else:
            # A refresh already brought it in
            self.items[index] = record

        logger.info("Created %s %s", self.entity, record.id)
        return record

    async def apply_edit(self, record_id: RecordId, fields: Mapping[str, Any]) -> R:
        """Send only the given fields; replace the local item on success."""
        record_id = normalize_id(record_id)
        payload = self._prepare(fields, partial=True)
        tag = self._edits.next_for(record_id)
        key = self._track(Pending(kind="update", draft=dict(fields), record_id=record_id))

        try:
            echoed = await self.gateway.update(record_id, payload)
        except CRMError as e:
            self._track(
                Failed(kind="update", draft=dict(fields), error=e.user_message, record_id=record_id),
                key,
            )
            logger.error("Failed to update %s %s: %s", self.entity, record_id, e)
            raise

        self._confirm_write()

        if not self._edits.is_latest_for(record_id, tag):
            logger.info("Discarding superseded edit of %s %s", self.entity, record_id)
            self._track(Confirmed(kind="update", record=echoed, record_id=record_id), key)
            return echoed

        index = self._index_of(record_id)
        if index is None:
            logger.warning(
                "%s %s updated remotely but is not in the local list; refresh to resync",
                self.entity,
                record_id,
            )
            self._track(Confirmed(kind="update", record=echoed, record_id=record_id), key)
            return echoed

        updated = self.items[index].merged_with(echoed)
        self.items[index] = updated
        self._track(Confirmed(kind="update", record=updated, record_id=record_id), key)
        logger.info("Updated %s %s", self.entity, record_id)
        return updated

    async def remove(self, record_id: RecordId) -> None:
        """Delete on the backend, then drop the item and any selection of it."""
        record_id = normalize_id(record_id)
        key = self._track(Pending(kind="delete", draft={}, record_id=record_id))

        try:
            await self.gateway.delete(record_id)
        except CRMError as e:
            self._track(Failed(kind="delete", draft={}, error=e.user_message, record_id=record_id), key)
            logger.error("Failed to delete %s %s: %s", self.entity, record_id, e)
            raise

        self._confirm_write()

        self.items = [item for item in self.items if item.id != record_id]
        if self.selected_id == record_id:
            self.selected_id = None
        if self.pending_delete_id == record_id:
            self.pending_delete_id = None

        self._track(Confirmed(kind="delete", record=None, record_id=record_id), key)
        logger.info("Deleted %s %s", self.entity, record_id)

    # -- two-phase delete --------------------------------------------------

    def request_delete(self, record_id: RecordId) -> R:
        record = self.require(record_id)
        self.pending_delete_id = record.id
        return record

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> RecordId:
        if self.pending_delete_id is None:
            raise DeleteNotConfirmed(self.entity)
        record_id = self.pending_delete_id
        await self.remove(record_id)
        return record_id

    # -- selection ---------------------------------------------------------

    def select(self, record_id: RecordId) -> R:
        record = self.require(record_id)
        self.selected_id = record.id
        return record

    def clear_selection(self) -> None:
        self.selected_id = None

    @property
    def selected(self) -> R | None:
        if self.selected_id is None:
            return None
        return self.get(self.selected_id)
