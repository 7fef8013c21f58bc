"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from gaston_budget.api.main import create_app
from gaston_budget.infrastructure.database.models import Base
from gaston_budget.infrastructure.database.session import get_db, init_db
from gaston_budget.domain.models import (
    BudgetExpense,
    BudgetIncome,
    Config,
    Debt,
    EmploymentType,
    Expense,
    FinancialGoal,
    Income,
    MonthlyLedger,
    PayFrequency,
    Period,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    init_db(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def entity_id(client: TestClient) -> str:
    """Household entity created through the API"""
    response = client.post(
        "/v1/entities",
        json={"name": "Casa", "kind": "household", "owner_id": "user_1"},
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def sample_ledger() -> MonthlyLedger:
    """A month with income in both periods and a mix of paid and unpaid expenses"""
    return MonthlyLedger(
        period1=Period(
            incomes=[Income(id="i1", description="Salario", amount=Decimal("1000000"), date=date(2024, 3, 1))],
            expenses=[
                Expense(id="e1", description="Arriendo", amount=Decimal("400000"), category="vivienda", paid=True),
                Expense(id="e2", description="Mercado", amount=Decimal("150000"), category="alimentacion"),
            ],
            savings_set_aside=Decimal("100000"),
        ),
        period2=Period(
            incomes=[Income(id="i2", description="Salario", amount=Decimal("1000000"), date=date(2024, 3, 16))],
            expenses=[
                Expense(id="e3", description="Tarjeta", amount=Decimal("200000"), category="deudas", paid=True),
                Expense(id="e4", description="Mercado", amount=Decimal("100000"), category="alimentacion", paid=True),
            ],
        ),
    )


@pytest.fixture
def sample_config() -> Config:
    """Biweekly employee with two recurring expenses, one debt and one goal"""
    return Config(
        currency="COP",
        employment_type=EmploymentType.EMPLOYEE,
        pay_frequency=PayFrequency.BIWEEKLY,
        categories=["vivienda", "alimentacion", "servicios", "otro"],
        budget_incomes=[BudgetIncome(id="bi1", name="Salario", total_amount=Decimal("2000000"))],
        budget_expenses=[
            BudgetExpense(
                id="be1",
                name="Arriendo",
                total_amount=Decimal("1000000"),
                category="vivienda",
                tentative_payment_day=20,
            ),
            BudgetExpense(
                id="be2",
                name="Internet",
                total_amount=Decimal("90000"),
                category="servicios",
                tentative_payment_day=5,
            ),
        ],
        debts=[
            Debt(
                id="d1",
                name="Tarjeta",
                total_amount=Decimal("1200000"),
                paid_amount=Decimal("300000"),
                installment_count=12,
                annual_interest_rate_percent=Decimal("28"),
            )
        ],
        financial_goals=[
            FinancialGoal(id="g1", name="Viaje", target_amount=Decimal("500000"), current_amount=Decimal("100000"))
        ],
    )
