"""
Tallyman Budget API Client

Wallets, the budgets of models drawn from them, and per-service allocations.
"""

from typing import Sequence

from ..utils.errors import ValidationError
from ..wireformat.budget import (
    BudgetWithAllocations,
    ListWalletsResponse,
    WalletWithBudgets,
)
from ..wireformat.requests import (
    CreateAllocationRequest,
    CreateBudgetRequest,
    CreateWalletRequest,
    DeleteBudgetRequest,
    GetBudgetRequest,
    GetWalletRequest,
    ListWalletsRequest,
    SetWalletRequest,
    UpdateAllocationRequest,
    UpdateBudgetRequest,
)
from .base import APIClient, require


class BudgetClient(APIClient):
    """Client for the wallet and budget service.

    Every method raises one of the classified Tallyman errors on failure.
    """

    def create_wallet(self, wallet: str, limit: str) -> str:
        """Create a wallet with the given limit and return the service message."""
        require(wallet=wallet, limit=limit)
        return self._call("create_wallet", CreateWalletRequest(wallet, limit), str)

    def list_wallets(self) -> ListWalletsResponse:
        """List the caller's wallets with their totals."""
        return self._call("list_wallets", ListWalletsRequest(), ListWalletsResponse)

    def set_wallet(self, wallet: str, limit: str) -> str:
        """Change the limit of a wallet."""
        require(wallet=wallet, limit=limit)
        return self._call("set_wallet", SetWalletRequest(wallet, limit), str)

    def get_wallet(self, wallet: str) -> WalletWithBudgets:
        """Fetch a wallet together with its budgets."""
        require(wallet=wallet)
        return self._call("get_wallet", GetWalletRequest(wallet), WalletWithBudgets)

    def create_budget(self, wallet: str, limit: str, model: str) -> str:
        """Create the budget of a model in a wallet."""
        require(wallet=wallet, limit=limit, model=model)
        return self._call(
            "create_budget", CreateBudgetRequest(wallet, limit, model), str
        )

    def update_budget(self, model: str, wallet: str, limit: str) -> str:
        """
        Update the budget of a model.

        Args:
            model: Model UUID the budget belongs to
            wallet: Wallet to move the budget to; empty keeps the current one
            limit: New budget limit

        Returns:
            Service message
        """
        require(model=model, limit=limit)
        return self._call(
            "update_budget", UpdateBudgetRequest(model, limit, wallet), str
        )

    def delete_budget(self, model: str) -> str:
        """Remove the budget of a model."""
        require(model=model)
        return self._call("delete_budget", DeleteBudgetRequest(model), str)

    def get_budget(self, budget: str) -> BudgetWithAllocations:
        """Fetch a budget with its per-model allocations."""
        require(budget=budget)
        return self._call("get_budget", GetBudgetRequest(budget), BudgetWithAllocations)

    def create_allocation(
        self, budget: str, limit: str, model: str, services: Sequence[str]
    ) -> str:
        """Allocate part of a budget to services of a model."""
        require(budget=budget, limit=limit, model=model)
        if not services:
            raise ValidationError("services required", field="services")
        return self._call(
            "create_allocation",
            CreateAllocationRequest(budget, limit, model, tuple(services)),
            str,
        )

    def update_allocation(self, model: str, service: str, limit: str) -> str:
        """Change the allocation limit of one service in a model."""
        require(model=model, service=service, limit=limit)
        return self._call(
            "update_allocation", UpdateAllocationRequest(model, service, limit), str
        )
