"""
Ledger Store

The single source of truth for stages, expenses, the payment log and the
client list, and the only component allowed to change them.

RULES THE STORE KEEPS:
- Status is derived from (paid, amount) on every change, never set.
- paid never goes below zero.
- Raising a stage's or expense's paid value logs one payment for the
  positive difference. Lowering it logs nothing.
- Editing or deleting a linked payment moves the linked item's paid
  value by the same difference.
- The aggregate total paid is the sum of the items' paid values, not of
  the payment log; the two can diverge.

Overpayment (paid > amount) is a valid state here. Capping a payment at
the remaining balance is a form-level check (see validation.validator).

Every mutation is written through to the persistence adapter before the
method returns.
"""

import datetime as dt
from typing import Callable, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from construction_ledger import calculations
from construction_ledger.audit import LedgerEventLogger
from construction_ledger.ledger.ids import IdGenerator
from construction_ledger.models.enums import (
    ClientStatus,
    ExpenseCategory,
    ExpenseStatus,
    PaymentMethod,
    PaymentType,
    ProjectType,
)
from construction_ledger.models.events import LedgerEventBuilder, LedgerEventType
from construction_ledger.models.ledger import (
    Client,
    ClientUpdate,
    Expense,
    ExpenseUpdate,
    LedgerSnapshot,
    Payment,
    PaymentUpdate,
    Project,
    SnapshotMetadata,
    Stage,
    StageUpdate,
    utcnow,
)
from construction_ledger.seed import LedgerSeed
from construction_ledger.services.storage import PersistenceAdapter


M = TypeVar("M", bound=BaseModel)


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class NotFoundError(LedgerError):
    """An operation referenced an id that is not in the collection."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.capitalize()} not found: {entity_id}")


class InvalidArgumentError(LedgerError):
    """An operation was called with a value the ledger cannot accept."""
    pass


class LedgerClosedError(LedgerError):
    """The store has not been opened, or has been closed."""
    pass


class CollectionKeys(BaseModel):
    """Storage keys, one per collection."""

    model_config = ConfigDict(frozen=True)

    stages: str = Field(default="construction-stages", min_length=1)
    expenses: str = Field(default="construction-expenses", min_length=1)
    payments: str = Field(default="construction-payments", min_length=1)
    clients: str = Field(default="construction-clients", min_length=1)


def _revise(entity: M, changes: dict) -> M:
    """Return a re-validated copy of ``entity`` with ``changes`` applied."""
    data = entity.model_dump()
    data.update(changes)
    data["updated_at"] = utcnow()
    try:
        return type(entity).model_validate(data)
    except ValidationError as e:
        raise InvalidArgumentError(str(e)) from e


def _build(model: type[M], **fields) -> M:
    try:
        return model(**fields)
    except ValidationError as e:
        raise InvalidArgumentError(str(e)) from e


def _is_whole_number(value) -> bool:
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)


class LedgerStore:
    """
    In-memory ledger with write-through persistence.

    Lifecycle:
        store = LedgerStore(project)
        store.open(adapter, seed)
        ...
        store.close()

    or use it as a context manager after open(). All operations run to
    completion synchronously; there is no internal concurrency.
    """

    def __init__(
        self,
        project: Project,
        keys: Optional[CollectionKeys] = None,
        id_generator: Optional[IdGenerator] = None,
        today: Optional[Callable[[], dt.date]] = None,
        event_logger: Optional[LedgerEventLogger] = None,
    ):
        """
        Args:
            project: Fixed reference data; stage amounts derive from its total cost.
            keys: Storage keys, one per collection.
            id_generator: Source of fresh ids.
            today: Current-date provider for defaulted payment dates.
            event_logger: Structured event sink.
        """
        self._project = project
        self._keys = keys or CollectionKeys()
        self._ids = id_generator or IdGenerator()
        self._today = today or dt.date.today
        self._events = event_logger or LedgerEventLogger()

        self._adapter: Optional[PersistenceAdapter] = None
        self._stages: dict[str, Stage] = {}
        self._expenses: dict[str, Expense] = {}
        self._payments: dict[str, Payment] = {}
        self._clients: dict[str, Client] = {}
        self._seed = LedgerSeed()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_open(self) -> bool:
        return self._adapter is not None

    @property
    def project(self) -> Project:
        return self._project

    def open(
        self,
        adapter: PersistenceAdapter,
        seed: Optional[LedgerSeed] = None,
    ) -> "LedgerStore":
        """
        Load every collection through ``adapter``.

        Collections that are missing or unreadable start from ``seed``.
        The seed is also what the reset operations restore.
        """
        if self.is_open:
            raise LedgerError("Ledger is already open")

        seed = seed or LedgerSeed()
        stages = adapter.load(self._keys.stages, Stage, seed.stages)
        expenses = adapter.load(self._keys.expenses, Expense, seed.expenses)
        payments = adapter.load(self._keys.payments, Payment, seed.payments)
        clients = adapter.load(self._keys.clients, Client, seed.clients)

        self._seed = seed.model_copy(deep=True)
        self._stages = {stage.id: stage for stage in stages}
        self._expenses = {expense.id: expense for expense in expenses}
        self._payments = {payment.id: payment for payment in payments}
        self._clients = {client.id: client for client in clients}
        self._adapter = adapter

        self._events.log(LedgerEventBuilder.ledger_opened(
            len(self._stages), len(self._expenses), len(self._payments), len(self._clients)
        ))
        return self

    def close(self) -> None:
        """Flush every collection and detach from storage."""
        if not self.is_open:
            return
        self._persist("stages", "expenses", "payments", "clients")
        self._adapter = None
        self._events.log(LedgerEventBuilder.ledger_closed())

    def __enter__(self) -> "LedgerStore":
        self._require_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_open(self) -> None:
        if not self.is_open:
            raise LedgerClosedError("Ledger is not open")

    def _persist(self, *collections: str) -> None:
        registry = {
            "stages": (self._keys.stages, Stage, self._stages),
            "expenses": (self._keys.expenses, Expense, self._expenses),
            "payments": (self._keys.payments, Payment, self._payments),
            "clients": (self._keys.clients, Client, self._clients),
        }
        for name in collections:
            key, model, items = registry[name]
            self._adapter.save(key, model, list(items.values()))

    def _log_change(
        self,
        event_type: LedgerEventType,
        entity_type: str,
        entity_id: str,
        name: str,
        details: Optional[dict] = None,
    ) -> None:
        self._events.log(LedgerEventBuilder.entity_changed(
            event_type, entity_type, entity_id, name, details
        ))

    # =========================================================================
    # STAGES
    # =========================================================================

    @property
    def stages(self) -> list[Stage]:
        self._require_open()
        return [stage.model_copy(deep=True) for stage in self._stages.values()]

    def get_stage(self, stage_id: str) -> Stage:
        return self._require_stage(stage_id).model_copy(deep=True)

    def _require_stage(self, stage_id: str) -> Stage:
        self._require_open()
        stage = self._stages.get(stage_id)
        if stage is None:
            raise NotFoundError("stage", stage_id)
        return stage

    def add_stage(
        self,
        name: str,
        percentage: int,
        date: Optional[dt.date] = None,
        notes: str = "",
    ) -> Stage:
        """
        Add a stage costed at ``percentage`` of the project total.

        Raises:
            InvalidArgumentError: empty name or percentage outside 1..100
        """
        self._require_open()
        if not _is_whole_number(percentage) or not 1 <= percentage <= 100:
            raise InvalidArgumentError(f"Percentage must be between 1 and 100, got {percentage!r}")
        if not name or not name.strip():
            raise InvalidArgumentError("Stage name is required")

        stage = _build(
            Stage,
            id=self._ids.next_id("stage", taken=self._stages.__contains__),
            name=name,
            percentage=percentage,
            amount=calculations.compute_stage_amount(self._project.total_cost, percentage),
            paid=0,
            date=date,
            notes=notes,
        )
        self._stages[stage.id] = stage
        self._persist("stages")

        self._log_change(
            LedgerEventType.STAGE_ADDED, "stage", stage.id, stage.name,
            {"percentage": stage.percentage, "amount": stage.amount},
        )
        return stage.model_copy(deep=True)

    def update_stage(self, stage_id: str, update: StageUpdate) -> Stage:
        """
        Apply ``update`` to a stage.

        A new ``paid`` value is taken as given (not capped at amount). When it
        is higher than the current one, a construction payment for the
        difference is appended to the log.

        Raises:
            NotFoundError: unknown stage id
        """
        current = self._require_stage(stage_id)
        updated = _revise(current, update.changes())
        self._stages[stage_id] = updated

        payment = self._record_paid_increase(
            current, updated, PaymentType.CONSTRUCTION, updated.amount
        )
        if payment:
            self._persist("stages", "payments")
        else:
            self._persist("stages")

        self._log_change(
            LedgerEventType.STAGE_UPDATED, "stage", stage_id, updated.name,
            {"fields": sorted(update.model_fields_set), "status": updated.status.value},
        )
        return updated.model_copy(deep=True)

    def complete_stage(self, stage_id: str) -> Stage:
        """Mark a stage fully paid; logs a payment for whatever was outstanding."""
        stage = self._require_stage(stage_id)
        return self.update_stage(stage_id, StageUpdate(paid=max(stage.amount, stage.paid)))

    def delete_stage(self, stage_id: str) -> Stage:
        """
        Remove a stage.

        Payments that reference it are kept, with their item_id left dangling.

        Raises:
            NotFoundError: unknown stage id
        """
        stage = self._require_stage(stage_id)
        del self._stages[stage_id]
        self._persist("stages")

        self._log_change(LedgerEventType.STAGE_DELETED, "stage", stage_id, stage.name)
        return stage.model_copy(deep=True)

    def search_stages(self, query: str) -> list[Stage]:
        """Case-insensitive match on name and notes."""
        needle = query.strip().lower()
        return [
            stage for stage in self.stages
            if needle in stage.name.lower() or needle in stage.notes.lower()
        ]

    def reorder_stages(self, start_index: int, end_index: int) -> list[Stage]:
        """
        Move the stage at ``start_index`` to ``end_index`` in the schedule.

        Stages in between shift by one place. Amounts and payments are
        unaffected.

        Raises:
            InvalidArgumentError: either index outside the schedule
        """
        self._require_open()
        ordered = list(self._stages.values())
        for index in (start_index, end_index):
            if not _is_whole_number(index) or not 0 <= index < len(ordered):
                raise InvalidArgumentError(
                    f"Stage position must be between 0 and {len(ordered) - 1}, got {index!r}"
                )

        moved = ordered.pop(start_index)
        ordered.insert(end_index, moved)
        self._stages = {stage.id: stage for stage in ordered}
        self._persist("stages")

        self._events.log(LedgerEventBuilder.stages_reordered(start_index, end_index, moved.id))
        return self.stages

    def bulk_update_stages(self, updates: dict[str, StageUpdate]) -> list[Stage]:
        """
        Apply several stage updates, keyed by stage id.

        Every update is checked before any is applied, so an unknown id or
        an invalid value leaves all stages unchanged. Each update then goes
        through update_stage and follows its payment rule.

        Raises:
            NotFoundError: unknown stage id
            InvalidArgumentError: an update the stage cannot accept
        """
        self._require_open()
        for stage_id, update in updates.items():
            _revise(self._require_stage(stage_id), update.changes())

        return [self.update_stage(stage_id, update) for stage_id, update in updates.items()]

    def reset_stages(self) -> list[Stage]:
        """
        Replace every stage with the seed schedule the ledger was opened with.

        The payment log is left as it is.
        """
        self._require_open()
        self._stages = {stage.id: stage.model_copy(deep=True) for stage in self._seed.stages}
        self._persist("stages")

        self._events.log(LedgerEventBuilder.collection_reset(self._keys.stages, len(self._stages)))
        return self.stages

    # =========================================================================
    # EXPENSES
    # =========================================================================

    @property
    def expenses(self) -> list[Expense]:
        self._require_open()
        return [expense.model_copy(deep=True) for expense in self._expenses.values()]

    def get_expense(self, expense_id: str) -> Expense:
        return self._require_expense(expense_id).model_copy(deep=True)

    def _require_expense(self, expense_id: str) -> Expense:
        self._require_open()
        expense = self._expenses.get(expense_id)
        if expense is None:
            raise NotFoundError("expense", expense_id)
        return expense

    def add_expense(
        self,
        name: str,
        amount: int,
        date: Optional[dt.date] = None,
        category: ExpenseCategory = ExpenseCategory.OTHER,
        notes: str = "",
        vendor: Optional[str] = None,
    ) -> Expense:
        """
        Add an expense.

        Raises:
            InvalidArgumentError: empty name, non-positive amount or unknown category
        """
        self._require_open()
        if not _is_whole_number(amount) or amount <= 0:
            raise InvalidArgumentError(f"Expense amount must be greater than 0, got {amount!r}")
        if not name or not name.strip():
            raise InvalidArgumentError("Expense name is required")

        expense = _build(
            Expense,
            id=self._ids.next_id("expense", taken=self._expenses.__contains__),
            name=name,
            amount=amount,
            paid=0,
            date=date,
            category=category,
            notes=notes,
            vendor=vendor,
        )
        self._expenses[expense.id] = expense
        self._persist("expenses")

        self._log_change(
            LedgerEventType.EXPENSE_ADDED, "expense", expense.id, expense.name,
            {"amount": expense.amount, "category": expense.category.value},
        )
        return expense.model_copy(deep=True)

    def update_expense(self, expense_id: str, update: ExpenseUpdate) -> Expense:
        """
        Apply ``update`` to an expense.

        Same payment rule as update_stage, with expense-type payments.

        Raises:
            NotFoundError: unknown expense id
        """
        current = self._require_expense(expense_id)
        updated = _revise(current, update.changes())
        self._expenses[expense_id] = updated

        payment = self._record_paid_increase(
            current, updated, PaymentType.EXPENSE, updated.amount
        )
        if payment:
            self._persist("expenses", "payments")
        else:
            self._persist("expenses")

        self._log_change(
            LedgerEventType.EXPENSE_UPDATED, "expense", expense_id, updated.name,
            {"fields": sorted(update.model_fields_set), "status": updated.status.value},
        )
        return updated.model_copy(deep=True)

    def mark_expense_paid(self, expense_id: str) -> Expense:
        """Mark an expense fully paid; logs a payment for whatever was outstanding."""
        expense = self._require_expense(expense_id)
        return self.update_expense(expense_id, ExpenseUpdate(paid=max(expense.amount, expense.paid)))

    def delete_expense(self, expense_id: str) -> Expense:
        """
        Remove an expense. Linked payments are kept.

        Raises:
            NotFoundError: unknown expense id
        """
        expense = self._require_expense(expense_id)
        del self._expenses[expense_id]
        self._persist("expenses")

        self._log_change(LedgerEventType.EXPENSE_DELETED, "expense", expense_id, expense.name)
        return expense.model_copy(deep=True)

    def search_expenses(self, query: str) -> list[Expense]:
        """Case-insensitive match on name, category and notes."""
        needle = query.strip().lower()
        return [
            expense for expense in self.expenses
            if needle in expense.name.lower()
            or needle in expense.category.value
            or needle in expense.notes.lower()
        ]

    def expenses_by_category(self, category: ExpenseCategory) -> list[Expense]:
        return [expense for expense in self.expenses if expense.category == category]

    def expenses_by_status(self, status: ExpenseStatus) -> list[Expense]:
        return [expense for expense in self.expenses if expense.status == status]

    def reset_expenses(self) -> list[Expense]:
        """Replace every expense with the seed expenses. The payment log is left as it is."""
        self._require_open()
        self._expenses = {
            expense.id: expense.model_copy(deep=True) for expense in self._seed.expenses
        }
        self._persist("expenses")

        self._events.log(LedgerEventBuilder.collection_reset(self._keys.expenses, len(self._expenses)))
        return self.expenses

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def _record_paid_increase(
        self,
        before: Union[Stage, Expense],
        after: Union[Stage, Expense],
        payment_type: PaymentType,
        amount: int,
    ) -> Optional[Payment]:
        """Append a payment for a positive change in paid. Zero or negative changes log nothing."""
        delta = after.paid - before.paid
        if delta <= 0:
            return None

        payment = _build(
            Payment,
            id=self._ids.next_id("payment", taken=self._payments.__contains__),
            item_id=after.id,
            item_name=before.name,
            amount=delta,
            type=payment_type,
            date=self._today(),
            total_paid=after.paid,
            balance=calculations.compute_balance(amount, after.paid),
        )
        self._payments[payment.id] = payment

        self._events.log(LedgerEventBuilder.payment_synthesized(
            payment.id, after.id, payment.item_name, delta, payment_type.value
        ))
        return payment

    @property
    def payments(self) -> list[Payment]:
        """The payment log in insertion order."""
        self._require_open()
        return [payment.model_copy(deep=True) for payment in self._payments.values()]

    def get_payment(self, payment_id: str) -> Payment:
        return self._require_payment(payment_id).model_copy(deep=True)

    def _require_payment(self, payment_id: str) -> Payment:
        self._require_open()
        payment = self._payments.get(payment_id)
        if payment is None:
            raise NotFoundError("payment", payment_id)
        return payment

    def get_all_payments(self) -> list[Payment]:
        """Payment log, newest date first; same-date entries keep insertion order."""
        return sorted(self.payments, key=lambda payment: payment.date, reverse=True)

    def get_payments_for_item(self, item_id: str) -> list[Payment]:
        """Payments linked to a stage or expense id, newest first."""
        return [p for p in self.get_all_payments() if p.item_id == item_id]

    def get_total_paid_for_item(self, item_id: str) -> int:
        """
        Sum of logged payments for an item.

        Not necessarily equal to the item's paid value.
        """
        return sum(p.amount for p in self.get_payments_for_item(item_id))

    def add_manual_payment(
        self,
        item_name: str,
        amount: int,
        date: Optional[dt.date] = None,
        notes: str = "",
        method: Optional[PaymentMethod] = None,
    ) -> Payment:
        """
        Record a standalone payment not linked to any stage or expense.

        Raises:
            InvalidArgumentError: empty name or non-positive amount
        """
        self._require_open()
        if not _is_whole_number(amount) or amount <= 0:
            raise InvalidArgumentError(f"Payment amount must be greater than 0, got {amount!r}")
        if not item_name or not item_name.strip():
            raise InvalidArgumentError("Payment name is required")

        payment = _build(
            Payment,
            id=self._ids.next_id("payment", taken=self._payments.__contains__),
            item_id=None,
            item_name=item_name,
            amount=amount,
            type=PaymentType.OTHER,
            date=date or self._today(),
            notes=notes,
            method=method,
        )
        self._payments[payment.id] = payment
        self._persist("payments")

        self._log_change(
            LedgerEventType.PAYMENT_RECORDED, "payment", payment.id, payment.item_name,
            {"amount": payment.amount, "type": payment.type.value},
        )
        return payment.model_copy(deep=True)

    def update_payment(self, payment_id: str, update: PaymentUpdate) -> Payment:
        """
        Apply ``update`` to a payment.

        When the amount changes on a linked payment, the linked item's paid
        value moves by the same difference (floored at zero). A dangling
        link is expected: only the payment changes.

        Raises:
            NotFoundError: unknown payment id
        """
        current = self._require_payment(payment_id)
        changes = update.changes()

        updated = _revise(current, changes)

        touched = None
        if updated.amount != current.amount and current.is_linked:
            touched = self._adjust_linked_paid(current, updated.amount - current.amount)

        self._payments[payment_id] = updated
        self._persist("payments", *([touched] if touched else []))

        self._log_change(
            LedgerEventType.PAYMENT_UPDATED, "payment", payment_id, updated.item_name,
            {"fields": sorted(update.model_fields_set), "amount": updated.amount},
        )
        return updated.model_copy(deep=True)

    def delete_payment(self, payment_id: str) -> Optional[Payment]:
        """
        Remove a payment from the log.

        A linked item's paid value drops by the payment amount, floored at
        zero. Whether this payment was the one that raised paid is not
        checked.

        Returns:
            The removed payment, or None if the id is unknown
        """
        self._require_open()
        payment = self._payments.pop(payment_id, None)
        if payment is None:
            return None

        touched = None
        if payment.is_linked:
            touched = self._adjust_linked_paid(payment, -payment.amount)
        self._persist("payments", *([touched] if touched else []))

        self._log_change(
            LedgerEventType.PAYMENT_DELETED, "payment", payment_id, payment.item_name,
            {"amount": payment.amount, "item_id": payment.item_id},
        )
        return payment

    def _adjust_linked_paid(self, payment: Payment, delta: int) -> Optional[str]:
        """
        Move the linked item's paid value by ``delta``, floored at zero.

        Returns the name of the collection that changed, or None if the
        link dangles.
        """
        if payment.type == PaymentType.CONSTRUCTION:
            collection, name = self._stages, "stages"
        elif payment.type == PaymentType.EXPENSE:
            collection, name = self._expenses, "expenses"
        else:
            return None

        item = collection.get(payment.item_id)
        if item is None:
            self._events.log(LedgerEventBuilder.linked_item_missing(
                payment.id, payment.item_id, payment.type.value
            ))
            return None

        collection[item.id] = _revise(item, {"paid": max(0, item.paid + delta)})
        return name

    def clear_all_payments(self) -> int:
        """
        Empty the payment log.

        Unlike delete_payment, this does not touch any stage's or expense's
        paid value.

        Returns:
            Number of payments removed
        """
        self._require_open()
        count = len(self._payments)
        self._payments = {}
        self._persist("payments")

        self._events.log(LedgerEventBuilder.payments_cleared(count))
        return count

    # =========================================================================
    # CLIENTS
    # =========================================================================

    @property
    def clients(self) -> list[Client]:
        self._require_open()
        return [client.model_copy(deep=True) for client in self._clients.values()]

    def get_client(self, client_id: str) -> Client:
        return self._require_client(client_id).model_copy(deep=True)

    def _require_client(self, client_id: str) -> Client:
        self._require_open()
        client = self._clients.get(client_id)
        if client is None:
            raise NotFoundError("client", client_id)
        return client

    def add_client(
        self,
        name: str,
        join_date: Optional[dt.date] = None,
        phone: str = "",
        email: str = "",
        address: str = "",
        project_type: ProjectType = ProjectType.OTHER,
        budget: int = 0,
        status: ClientStatus = ClientStatus.PLANNING,
        project_start: Optional[dt.date] = None,
        project_area: Optional[int] = None,
        notes: str = "",
    ) -> Client:
        """
        Add a client. ``join_date`` defaults to today.

        Raises:
            InvalidArgumentError: empty name, negative budget or unknown type/status
        """
        self._require_open()
        if not _is_whole_number(budget) or budget < 0:
            raise InvalidArgumentError(f"Client budget must be 0 or more, got {budget!r}")
        if not name or not name.strip():
            raise InvalidArgumentError("Client name is required")

        client = _build(
            Client,
            id=self._ids.next_id("client", taken=self._clients.__contains__),
            name=name,
            phone=phone,
            email=email,
            address=address,
            project_type=project_type,
            budget=budget,
            status=status,
            join_date=join_date or self._today(),
            project_start=project_start,
            project_area=project_area,
            notes=notes,
        )
        self._clients[client.id] = client
        self._persist("clients")

        self._log_change(
            LedgerEventType.CLIENT_ADDED, "client", client.id, client.name,
            {"status": client.status.value, "budget": client.budget},
        )
        return client.model_copy(deep=True)

    def update_client(self, client_id: str, update: ClientUpdate) -> Client:
        """
        Raises:
            NotFoundError: unknown client id
        """
        current = self._require_client(client_id)
        updated = _revise(current, update.changes())
        self._clients[client_id] = updated
        self._persist("clients")

        self._log_change(
            LedgerEventType.CLIENT_UPDATED, "client", client_id, updated.name,
            {"fields": sorted(update.model_fields_set), "status": updated.status.value},
        )
        return updated.model_copy(deep=True)

    def update_client_status(self, client_id: str, status: ClientStatus) -> Client:
        return self.update_client(client_id, ClientUpdate(status=status))

    def delete_client(self, client_id: str) -> Client:
        """
        Raises:
            NotFoundError: unknown client id
        """
        client = self._require_client(client_id)
        del self._clients[client_id]
        self._persist("clients")

        self._log_change(LedgerEventType.CLIENT_DELETED, "client", client_id, client.name)
        return client.model_copy(deep=True)

    def search_clients(self, query: str) -> list[Client]:
        """Case-insensitive match on name, email, phone, project type and address."""
        needle = query.strip().lower()
        return [
            client for client in self.clients
            if needle in client.name.lower()
            or needle in client.email.lower()
            or needle in client.phone.lower()
            or needle in client.project_type.value.replace("-", " ")
            or needle in client.project_type.value
            or needle in client.address.lower()
        ]

    def clients_by_status(self, status: ClientStatus) -> list[Client]:
        return [client for client in self.clients if client.status == status]

    def reset_clients(self) -> list[Client]:
        """Replace every client with the seed clients."""
        self._require_open()
        self._clients = {client.id: client.model_copy(deep=True) for client in self._seed.clients}
        self._persist("clients")

        self._events.log(LedgerEventBuilder.collection_reset(self._keys.clients, len(self._clients)))
        return self.clients

    # =========================================================================
    # AGGREGATES
    # =========================================================================

    @property
    def total_construction_cost(self) -> int:
        return self._project.total_cost

    @property
    def paid_construction_amount(self) -> int:
        self._require_open()
        return calculations.paid_construction_amount(self._stages.values())

    @property
    def balance_construction_amount(self) -> int:
        self._require_open()
        return calculations.balance_construction_amount(self._project, self._stages.values())

    @property
    def overall_progress(self) -> int:
        """Sum of percentages over completed stages."""
        self._require_open()
        return calculations.overall_progress(self._stages.values())

    @property
    def total_expenses_amount(self) -> int:
        self._require_open()
        return calculations.total_expenses_amount(self._expenses.values())

    @property
    def paid_expenses_amount(self) -> int:
        self._require_open()
        return calculations.paid_expenses_amount(self._expenses.values())

    @property
    def balance_expenses_amount(self) -> int:
        self._require_open()
        return calculations.balance_expenses_amount(self._expenses.values())

    @property
    def total_project_cost(self) -> int:
        self._require_open()
        return calculations.total_project_cost(self._project, self._expenses.values())

    @property
    def total_paid(self) -> int:
        self._require_open()
        return calculations.total_paid(self._stages.values(), self._expenses.values())

    @property
    def total_balance(self) -> int:
        return self.total_project_cost - self.total_paid

    @property
    def financial_progress(self) -> int:
        """Total paid as a whole-number percentage of the total project cost."""
        self._require_open()
        return calculations.financial_progress(
            self._project, self._stages.values(), self._expenses.values()
        )

    @property
    def financial_risk(self) -> int:
        """Risk score from 0 to 5; see calculations.financial_risk."""
        self._require_open()
        return calculations.financial_risk(
            self._project, self._stages.values(), self._expenses.values()
        )

    @property
    def cost_distribution(self) -> tuple[int, int]:
        """(construction, additional) percentages of the total project cost."""
        self._require_open()
        return calculations.cost_distribution(self._project, self._expenses.values())

    # =========================================================================
    # EXPORT / IMPORT
    # =========================================================================

    def export_snapshot(self) -> LedgerSnapshot:
        self._require_open()
        return LedgerSnapshot(
            metadata=SnapshotMetadata(
                total_stages=len(self._stages),
                total_expenses=len(self._expenses),
                total_payments=len(self._payments),
                total_clients=len(self._clients),
            ),
            stages=self.stages,
            expenses=self.expenses,
            payments=self.payments,
            clients=self.clients,
        )

    def export_json(self) -> str:
        return self.export_snapshot().model_dump_json(indent=2)

    def import_json(self, data: str) -> tuple[bool, str]:
        """
        Replace every collection with a previously exported snapshot.

        Returns:
            (success, message). A malformed document leaves the ledger untouched.
        """
        self._require_open()
        try:
            snapshot = LedgerSnapshot.model_validate_json(data)
        except ValidationError as e:
            return False, f"Invalid ledger snapshot: {e.error_count()} error(s)"

        self._stages = {stage.id: stage for stage in snapshot.stages}
        self._expenses = {expense.id: expense for expense in snapshot.expenses}
        self._payments = {payment.id: payment for payment in snapshot.payments}
        self._clients = {client.id: client for client in snapshot.clients}
        self._persist("stages", "expenses", "payments", "clients")

        self._events.log(LedgerEventBuilder.snapshot_imported(
            len(self._stages), len(self._expenses), len(self._payments), len(self._clients)
        ))
        return True, "Ledger imported successfully"
