"""
Main Orchestrator for the Construction Ledger

This module ties the components together for the presentation layer:
1. Building the store, its storage and its collaborators from settings
2. The payment-entry flow (form check -> paid increase -> payment details)

DESIGN DECISION: The orchestrator enforces the form-level boundary.
The store accepts any non-negative paid value; a payment entered by a
user goes through LedgerValidator first, so the screen caps payments at
the outstanding balance while the store itself stays permissive.
"""

from datetime import date
from typing import Callable, Optional

from construction_ledger.audit import LedgerEventLogger, configure_log_level
from construction_ledger.config import Settings, get_settings
from construction_ledger.ledger import (
    CollectionKeys,
    IdGenerator,
    InvalidArgumentError,
    LedgerStore,
)
from construction_ledger.models.enums import PaymentMethod, PaymentType
from construction_ledger.models.ledger import (
    ExpenseUpdate,
    Payment,
    PaymentUpdate,
    Project,
    StageUpdate,
    ValidationResult,
)
from construction_ledger.queries import LedgerReporter
from construction_ledger.seed import LedgerSeed, default_seed
from construction_ledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    PersistenceAdapter,
)
from construction_ledger.validation import LedgerValidator


class PaymentEntryFlow:
    """
    Records a payment a user entered against a stage or an expense.

    Flow:
    1. Validate → amount, date and description against the item's balance
    2. Apply → raise the item's paid value (the store logs the payment)
    3. Annotate → copy the entered date, description and method onto it
    """

    def __init__(self, store: LedgerStore, validator: LedgerValidator):
        self._store = store
        self._validator = validator

    def record_payment(
        self,
        payment_type: PaymentType,
        item_id: str,
        amount: int,
        payment_date: Optional[date],
        description: Optional[str],
        method: Optional[PaymentMethod] = None,
    ) -> tuple[Optional[Payment], ValidationResult]:
        """
        Returns:
            (payment, validation). payment is None when validation failed.

        Raises:
            NotFoundError: unknown item id
            InvalidArgumentError: payment_type is OTHER (use record_manual_payment)
        """
        if payment_type == PaymentType.CONSTRUCTION:
            item = self._store.get_stage(item_id)
        elif payment_type == PaymentType.EXPENSE:
            item = self._store.get_expense(item_id)
        else:
            raise InvalidArgumentError("Manual payments are not linked to an item")

        validation = self._validator.validate_payment(amount, payment_date, description, item)
        if not validation.is_valid:
            return None, validation

        before = {p.id for p in self._store.get_payments_for_item(item_id)}
        if payment_type == PaymentType.CONSTRUCTION:
            self._store.update_stage(item_id, StageUpdate(paid=item.paid + amount))
        else:
            self._store.update_expense(item_id, ExpenseUpdate(paid=item.paid + amount))

        created = [p for p in self._store.get_payments_for_item(item_id) if p.id not in before]
        payment = self._store.update_payment(
            created[0].id,
            PaymentUpdate(date=payment_date, notes=description, method=method),
        )
        return payment, validation

    def record_manual_payment(
        self,
        item_name: str,
        amount: int,
        payment_date: Optional[date],
        description: Optional[str],
        method: Optional[PaymentMethod] = None,
    ) -> tuple[Optional[Payment], ValidationResult]:
        """Validate and record a payment that is not linked to any item."""
        validation = self._validator.validate_payment(amount, payment_date, description)
        if not validation.is_valid:
            return None, validation

        payment = self._store.add_manual_payment(
            item_name=item_name,
            amount=amount,
            date=payment_date,
            notes=description,
            method=method,
        )
        return payment, validation


def build_key_value_store(settings: Settings) -> KeyValueStore:
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryStore()
    return JsonFileStore(storage.data_dir, write_attempts=storage.write_attempts)


def project_from_settings(settings: Settings) -> Project:
    project = settings.project
    return Project(
        name=project.name,
        engineer=project.engineer,
        per_sqft_rate=project.per_sqft_rate,
        total_sqft=project.total_sqft,
        total_cost=project.total_cost or project.per_sqft_rate * project.total_sqft,
    )


def create_ledger_components(
    settings: Optional[Settings] = None,
    kv_store: Optional[KeyValueStore] = None,
    today: Optional[Callable[[], date]] = None,
) -> tuple[LedgerStore, LedgerReporter, PaymentEntryFlow]:
    """
    Factory function to create and open all ledger components.

    Args:
        settings: Defaults to get_settings().
        kv_store: Overrides the configured storage backend.
        today: Current-date provider shared by the store and the validator.

    Returns:
        (store, reporter, payment_flow). The store is open; call
        store.close() on shutdown.
    """
    settings = settings or get_settings()
    app = settings.app
    configure_log_level(app.log_level)

    event_logger = LedgerEventLogger()
    project = project_from_settings(settings)
    seed: Optional[LedgerSeed] = default_seed(project) if app.seed_on_first_run else None

    storage = settings.storage
    store = LedgerStore(
        project,
        keys=CollectionKeys(
            stages=storage.stages_key,
            expenses=storage.expenses_key,
            payments=storage.payments_key,
            clients=storage.clients_key,
        ),
        id_generator=IdGenerator(),
        today=today,
        event_logger=event_logger,
    )
    adapter = PersistenceAdapter(kv_store or build_key_value_store(settings), event_logger)
    store.open(adapter, seed)

    validator = LedgerValidator(
        today=today,
        future_date_tolerance_days=app.future_date_tolerance_days,
        min_stage_name_length=app.min_stage_name_length,
    )
    return store, LedgerReporter(store, today), PaymentEntryFlow(store, validator)
