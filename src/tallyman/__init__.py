"""
Tallyman: client library and commands for a metered billing service.

Tallyman talks to the wallet, budget, plan, terms and SLA services over HTTP.
Every call either returns a decoded wire entity or raises one typed error,
so callers can tell an unreachable service from a rejected identity.

Example:
    from tallyman import BudgetClient, ClientConfig, render_budget_report

    with BudgetClient(ClientConfig(base_url="http://localhost:8080")) as client:
        print(render_budget_report(client.get_budget("personal")), end="")
"""

__version__ = "0.1.0"

from .api import BudgetClient, PlanClient, SLAClient, TermsClient
from .reports import render_budget_report, render_wallet_list, render_wallet_report
from .utils.config import ClientConfig, TallymanConfig
from .utils.errors import (
    HTTPError,
    MalformedResponseError,
    RequestFailedError,
    ServiceUnavailableError,
    TallymanError,
    UserValidationFailedError,
    ValidationError,
)

__all__ = [
    # Clients
    "BudgetClient",
    "PlanClient",
    "SLAClient",
    "TermsClient",
    # Reports
    "render_budget_report",
    "render_wallet_report",
    "render_wallet_list",
    # Configuration
    "ClientConfig",
    "TallymanConfig",
    # Error types
    "TallymanError",
    "RequestFailedError",
    "ServiceUnavailableError",
    "HTTPError",
    "UserValidationFailedError",
    "MalformedResponseError",
    "ValidationError",
    # Version
    "__version__",
]
