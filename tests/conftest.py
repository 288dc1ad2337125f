"""
Shared fixtures: a Questrade activity statement and the bundled layouts.
"""
import pytest

from statement_import.common.models import Document
from statement_import.common.settings import BUNDLED_LAYOUTS_DIR
from statement_import.core.securities import InMemorySecurityRegistry
from statement_import.parsing.config.registry import InstitutionRegistry

QUESTRADE_TEXT = """Questrade, Inc.
Account statement April 2025
01. ACCOUNT SUMMARY
Combined in USD
04. ACTIVITY DETAILS
Transaction Settlement Activity type Symbol/description Quantity Price Gross amount Commission Net amount
04-09-2025 04-09-2025 Contribution CONT 6263984218 - - - - 10,000.00 - - - -
04-10-2025 04-11-2025 Buy .VEQT VANGUARD ALL-EQUITY ETF  PORTFOLIO
ETF UNIT  WE ACTED AS AGENT 50.0000 40.930 (2,046.50) - (2,046.50) - - - -
04-14-2025 04-15-2025 Buy .VEQT VANGUARD ALL-EQUITY ETF|PORTFOLIO ETF
UNIT|WE ACTED AS AGENT 50.0000 40.930 (2,046.50) (0.10) (2,046.60) - - - -
01-07-2025 01-07-2025 .VEQT UNIT DIST ON 29 SHS REC 12/30/24 PAY - - - - 20.69 - - - -
01-17-2023 01-19-2023 Buy .XEQT UNITS|WE ACTED AS AGENT|AVG PRICE - ASK 19 25.320 (481.08) - (481.08) - - - -"""


@pytest.fixture
def questrade_text():
    return QUESTRADE_TEXT


@pytest.fixture
def questrade_document():
    return Document(text=QUESTRADE_TEXT, source_id="questrade-2025-04.pdf")


@pytest.fixture
def bundled_registry():
    return InstitutionRegistry(BUNDLED_LAYOUTS_DIR)


@pytest.fixture
def questrade_config(bundled_registry):
    return bundled_registry.get("questrade")


@pytest.fixture
def securities():
    return InMemorySecurityRegistry()
