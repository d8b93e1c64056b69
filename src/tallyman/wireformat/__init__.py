"""
Tallyman Wire Format Package

Request and response entities exchanged with the billing services, and the
request descriptors that address them.
"""

from .budget import (
    Allocation,
    Budget,
    BudgetTotals,
    BudgetWithAllocations,
    ListWalletsResponse,
    ServiceAllocation,
    WalletSummary,
    WalletTotals,
    WalletWithBudgets,
    sort_allocations,
    sort_budgets,
)
from .common import USER_VALIDATION_FAILED_CODE, ErrorResponse
from .metrics import EnvResponse, Metric, MetricBatch, Response, UnitStatus
from .plan import AuthorizationRequest, Plan
from .sla import SLARequest, SLAResponse
from .terms import (
    AgreementResponse,
    CheckAgreementsRequest,
    GetTermsResponse,
    SaveAgreement,
    SaveAgreementResponses,
    SaveAgreements,
)

__all__ = [
    "Allocation",
    "Budget",
    "BudgetTotals",
    "BudgetWithAllocations",
    "ListWalletsResponse",
    "ServiceAllocation",
    "WalletSummary",
    "WalletTotals",
    "WalletWithBudgets",
    "sort_allocations",
    "sort_budgets",
    "ErrorResponse",
    "USER_VALIDATION_FAILED_CODE",
    "EnvResponse",
    "Metric",
    "MetricBatch",
    "Response",
    "UnitStatus",
    "AuthorizationRequest",
    "Plan",
    "SLARequest",
    "SLAResponse",
    "AgreementResponse",
    "CheckAgreementsRequest",
    "GetTermsResponse",
    "SaveAgreement",
    "SaveAgreements",
    "SaveAgreementResponses",
]
