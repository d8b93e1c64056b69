"""
Tallyman API Package

One client per service area, all sharing the same call-and-classify path.
"""

from .base import APIClient, check_response, classify_transport_error
from .budget import BudgetClient
from .plan import PlanClient
from .sla import SLAClient
from .terms import TermsClient

__all__ = [
    "APIClient",
    "BudgetClient",
    "PlanClient",
    "SLAClient",
    "TermsClient",
    "check_response",
    "classify_transport_error",
]
