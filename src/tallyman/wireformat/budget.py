"""Wallet, budget and allocation wire entities."""

from typing import Dict, Iterable, List, Tuple

from pydantic import Field, model_validator

from .common import WireModel, resolve_renamed


class ServiceAllocation(WireModel):
    """Consumption recorded against one service of an allocation."""

    consumed: str = Field("", description="Amount consumed by the service")


class _ServiceBreakdown(WireModel):
    """Per-service consumption, accepted as "services" or "applications"."""

    services: Dict[str, ServiceAllocation] = Field(
        default_factory=dict, description="Consumption keyed by service name"
    )

    @model_validator(mode="before")
    @classmethod
    def _fold_applications(cls, data):
        return resolve_renamed(data, "services", "applications")

    def service_names(self) -> List[str]:
        """Service names in presentation order."""
        return sorted(self.services)


class Allocation(_ServiceBreakdown):
    """A budget's consumption for one model, broken down by service."""

    owner: str = Field("", description="User that owns the allocation")
    limit: str = Field("", description="Allocated amount")
    consumed: str = Field("", description="Amount consumed")
    usage: str = Field("", description="Consumed share of the limit, e.g. 42%")
    model: str = Field("", description="Model identifier")

    def sort_key(self) -> Tuple[str, ...]:
        # model first; the rest only breaks ties deterministically
        return (
            self.model,
            self.owner,
            ",".join(self.service_names()),
            self.limit,
            self.consumed,
            self.usage,
        )

    def __lt__(self, other: "Allocation") -> bool:
        if not isinstance(other, Allocation):
            return NotImplemented
        return self.sort_key() < other.sort_key()


class Budget(_ServiceBreakdown):
    """The budget of a single model inside a wallet."""

    owner: str = Field("", description="User that owns the budget")
    limit: str = Field("", description="Budget limit")
    consumed: str = Field("", description="Amount consumed")
    usage: str = Field("", description="Consumed share of the limit")
    model: str = Field("", description="Model identifier")

    def __lt__(self, other: "Budget") -> bool:
        if not isinstance(other, Budget):
            return NotImplemented
        return self.model < other.model


def sort_allocations(allocations: Iterable[Allocation]) -> List[Allocation]:
    """Order allocations by model, owner, then service names."""
    return sorted(allocations, key=Allocation.sort_key)


def sort_budgets(budgets: Iterable[Budget]) -> List[Budget]:
    """Order budgets by model; equal models keep their input order."""
    return sorted(budgets, key=lambda b: b.model)


class BudgetTotals(WireModel):
    """Totals across all allocations of a budget."""

    allocated: str = ""
    unallocated: str = ""
    available: str = ""
    consumed: str = ""
    usage: str = ""


class BudgetWithAllocations(WireModel):
    """A budget together with its allocations."""

    limit: str = ""
    total: BudgetTotals = Field(default_factory=BudgetTotals)
    allocations: List[Allocation] = Field(default_factory=list)


class WalletTotals(WireModel):
    """Totals across the budgets of one or more wallets."""

    limit: str = ""
    budgeted: str = ""
    available: str = ""
    unallocated: str = ""
    usage: str = ""
    consumed: str = ""


class WalletSummary(WireModel):
    """One line of a wallet listing."""

    owner: str = ""
    wallet: str = ""
    limit: str = ""
    budgeted: str = ""
    unallocated: str = ""
    available: str = ""
    consumed: str = ""
    default: bool = False


class ListWalletsResponse(WireModel):
    """Response to a wallet listing."""

    wallets: List[WalletSummary] = Field(default_factory=list)
    total: WalletTotals = Field(default_factory=WalletTotals)
    credit: str = ""


class WalletWithBudgets(WireModel):
    """A wallet together with the budgets drawn from it."""

    limit: str = ""
    total: WalletTotals = Field(default_factory=WalletTotals)
    budgets: List[Budget] = Field(default_factory=list)
