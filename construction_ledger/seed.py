"""
Default project and seed collections.

Loaded on first run, when nothing is stored yet, and used as the fallback
when a stored collection cannot be read.
"""

from datetime import date

from pydantic import BaseModel, Field

from construction_ledger.calculations import compute_stage_amount
from construction_ledger.models.enums import ClientStatus, ExpenseCategory, ProjectType
from construction_ledger.models.ledger import Client, Expense, Payment, Project, Stage


class LedgerSeed(BaseModel):
    """Collections to start from when storage holds nothing usable."""

    stages: list[Stage] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    clients: list[Client] = Field(default_factory=list)


# (id, name, percentage, paid, date, notes)
_DEFAULT_STAGES = [
    ("advance", "Advance", 20, None, date(2023, 9, 1), "Initial payment received"),
    ("basement", "Basement", 15, 50000, date(2023, 9, 15),
     "Excavation completed, foundation work in progress"),
    ("lintel", "Lintel", 15, 0, None, ""),
    ("roof-level", "Roof Level", 15, 0, None, ""),
    ("inner-plastering", "Inner Plastering", 10, 0, None, ""),
    ("outer-plastering", "Outer Plastering", 10, 0, None, ""),
    ("tiles", "Tiles", 8, 0, None, ""),
    ("electrical", "Electrical", 5, 0, None, ""),
    ("whitewash", "Whitewash", 2, 0, None, ""),
]


def default_project() -> Project:
    return Project(
        name="PGK Construction",
        engineer="Er. P. Govindaraj",
        per_sqft_rate=1650,
        total_sqft=625,
    )


def default_stages(project: Project) -> list[Stage]:
    """The standard stage schedule, costed against ``project``. A paid of None means fully paid."""
    stages = []
    for stage_id, name, percentage, paid, started, notes in _DEFAULT_STAGES:
        amount = compute_stage_amount(project.total_cost, percentage)
        stages.append(Stage(
            id=stage_id,
            name=name,
            percentage=percentage,
            amount=amount,
            paid=amount if paid is None else paid,
            date=started,
            notes=notes,
        ))
    return stages


def default_expenses() -> list[Expense]:
    return [
        Expense(
            id="borewell",
            name="Borewell",
            amount=50000,
            paid=50000,
            date=date(2023, 9, 10),
            category=ExpenseCategory.BOREWELL,
            notes="Completed successfully with good water flow",
            vendor="Water Solutions Inc.",
        ),
        Expense(
            id="sump",
            name="Sump",
            amount=15000,
            paid=15000,
            date=date(2023, 9, 20),
            category=ExpenseCategory.SUMP,
            notes="5000L capacity sump installed",
            vendor="Plumbing Masters",
        ),
        Expense(
            id="septic-tank",
            name="Septic Tank",
            amount=25000,
            paid=0,
            date=date(2023, 10, 5),
            category=ExpenseCategory.SEPTIC_TANK,
            notes="Installation in progress",
            vendor="Sanitation Experts",
        ),
    ]


def default_clients() -> list[Client]:
    return [
        Client(
            id="rajesh-kumar",
            name="Rajesh Kumar",
            phone="+91 9876543210",
            email="rajesh@example.com",
            address="123 Main Street, Chennai, Tamil Nadu - 600001",
            project_type=ProjectType.RESIDENTIAL_HOUSE,
            budget=2500000,
            status=ClientStatus.ACTIVE,
            join_date=date(2023, 8, 15),
            project_start=date(2023, 9, 1),
            project_area=1200,
        ),
        Client(
            id="priya-sharma",
            name="Priya Sharma",
            phone="+91 8765432109",
            email="priya@example.com",
            address="456 Oak Avenue, Bangalore, Karnataka - 560001",
            project_type=ProjectType.COMMERCIAL_BUILDING,
            budget=5000000,
            status=ClientStatus.COMPLETED,
            join_date=date(2023, 6, 10),
            project_start=date(2023, 7, 1),
            project_area=2500,
        ),
        Client(
            id="vikram-singh",
            name="Vikram Singh",
            phone="+91 7654321098",
            email="vikram@example.com",
            address="789 Pine Road, Hyderabad, Telangana - 500001",
            project_type=ProjectType.VILLA_CONSTRUCTION,
            budget=7500000,
            status=ClientStatus.PLANNING,
            join_date=date(2023, 9, 20),
            project_start=date(2023, 11, 1),
            project_area=3000,
        ),
    ]


def default_seed(project: Project) -> LedgerSeed:
    """Seed stages, expenses and clients; the payment log starts empty."""
    return LedgerSeed(
        stages=default_stages(project),
        expenses=default_expenses(),
        clients=default_clients(),
    )
