import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from trenddit.schemas.company_schema import CompanyContext
from trenddit.schemas.trend_schema import Trend


@pytest.fixture
def company() -> CompanyContext:
    return CompanyContext(
        name="Acme Corp",
        industry="technology",
        size="large",
        techMaturity="high",
        challenges=["Manual invoicing", "Slow reporting"],
        goals=["Reduce operating costs"],
    )


@pytest.fixture
def startup_company() -> CompanyContext:
    return CompanyContext(name="Tiny Labs", industry="technology", size="startup", maturity="low")


@pytest.fixture
def trend() -> Trend:
    return Trend(
        id="trend_42",
        title="Agentic AI in back-office automation",
        summary="AI agents are taking over repetitive finance and operations workflows.",
        category="economy",
        impact_score=8,
    )
