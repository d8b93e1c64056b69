"""
Request descriptors, one per remote operation.

A descriptor supplies an HTTP method, a URL built from the configured base
URL, and an optional JSON body. Identifiers interpolated into paths are used
as given; callers encode them if needed.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Protocol, Tuple
from urllib.parse import urlencode

from .common import WireModel
from .plan import AuthorizationRequest
from .sla import SLARequest
from .terms import SaveAgreements

JSON_CONTENT_TYPE = "application/json"


class RequestDescriptor(Protocol):
    """What the API clients need from a request descriptor."""

    method: ClassVar[str]

    def url(self, base_url: str) -> str: ...

    def body(self) -> Optional[Dict[str, Any]]: ...


def content_type(descriptor: RequestDescriptor) -> Optional[str]:
    """The content-type header for a descriptor; set only when it has a body."""
    return JSON_CONTENT_TYPE if descriptor.body() is not None else None


def _update_envelope(update: Dict[str, Any]) -> Dict[str, Any]:
    return {"update": update}


class _BudgetUpdate(WireModel):
    wallet: Optional[str] = None
    limit: str = ""


# Wallets


@dataclass(frozen=True)
class CreateWalletRequest:
    wallet: str
    limit: str

    method: ClassVar[str] = "POST"

    def url(self, base_url: str) -> str:
        return f"{base_url}/wallet"

    def body(self) -> Optional[Dict[str, Any]]:
        return {"wallet": self.wallet, "limit": self.limit}


@dataclass(frozen=True)
class ListWalletsRequest:
    method: ClassVar[str] = "GET"

    def url(self, base_url: str) -> str:
        return f"{base_url}/wallet"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class SetWalletRequest:
    """Update the limit of a wallet; the name only appears in the path."""

    wallet: str
    limit: str

    method: ClassVar[str] = "PATCH"

    def url(self, base_url: str) -> str:
        return f"{base_url}/wallet/{self.wallet}"

    def body(self) -> Optional[Dict[str, Any]]:
        return _update_envelope({"limit": self.limit})


@dataclass(frozen=True)
class GetWalletRequest:
    wallet: str

    method: ClassVar[str] = "GET"

    def url(self, base_url: str) -> str:
        return f"{base_url}/wallet/{self.wallet}"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


# Budgets


@dataclass(frozen=True)
class CreateBudgetRequest:
    """Create the budget of a model inside a wallet."""

    wallet: str
    limit: str
    model: str

    method: ClassVar[str] = "POST"

    def url(self, base_url: str) -> str:
        return f"{base_url}/wallet/{self.wallet}/budget"

    def body(self) -> Optional[Dict[str, Any]]:
        return {"model": self.model, "limit": self.limit}


@dataclass(frozen=True)
class UpdateBudgetRequest:
    """Change the limit of a model's budget, optionally moving it to another wallet.

    An empty wallet is left out of the update entirely.
    """

    model: str
    limit: str
    wallet: str = ""

    method: ClassVar[str] = "PATCH"

    def url(self, base_url: str) -> str:
        return f"{base_url}/model/{self.model}/budget"

    def body(self) -> Optional[Dict[str, Any]]:
        update = _BudgetUpdate(wallet=self.wallet or None, limit=self.limit)
        return _update_envelope(update.model_dump(exclude_none=True))


@dataclass(frozen=True)
class DeleteBudgetRequest:
    model: str

    method: ClassVar[str] = "DELETE"

    def url(self, base_url: str) -> str:
        return f"{base_url}/model/{self.model}/budget"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class GetBudgetRequest:
    """Fetch a budget with its per-model allocations."""

    budget: str

    method: ClassVar[str] = "GET"

    def url(self, base_url: str) -> str:
        return f"{base_url}/budget/{self.budget}"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


# Allocations


@dataclass(frozen=True)
class CreateAllocationRequest:
    budget: str
    limit: str
    model: str
    services: Tuple[str, ...]

    method: ClassVar[str] = "POST"

    def url(self, base_url: str) -> str:
        return f"{base_url}/budget/{self.budget}/allocation"

    def body(self) -> Optional[Dict[str, Any]]:
        return {
            "model": self.model,
            "services": list(self.services),
            "limit": self.limit,
        }


@dataclass(frozen=True)
class UpdateAllocationRequest:
    model: str
    service: str
    limit: str

    method: ClassVar[str] = "PATCH"

    def url(self, base_url: str) -> str:
        return f"{base_url}/model/{self.model}/service/{self.service}/allocation"

    def body(self) -> Optional[Dict[str, Any]]:
        return _update_envelope({"limit": self.limit})


# Plans


@dataclass(frozen=True)
class GetAssociatedPlansRequest:
    """List the plans offered for a charm."""

    charm_url: str

    method: ClassVar[str] = "GET"

    def url(self, base_url: str) -> str:
        return f"{base_url}/plan?{urlencode({'charm-url': self.charm_url})}"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class AuthorizePlanRequest:
    authorization: AuthorizationRequest

    method: ClassVar[str] = "POST"

    def url(self, base_url: str) -> str:
        return f"{base_url}/plan/authorize"

    def body(self) -> Optional[Dict[str, Any]]:
        return self.authorization.to_wire()


# Terms


@dataclass(frozen=True)
class GetUsersAgreementsRequest:
    method: ClassVar[str] = "GET"

    def url(self, base_url: str) -> str:
        return f"{base_url}/agreements"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class GetUnsignedTermsRequest:
    """Ask which of the given "<name>/<revision>" terms are still unsigned."""

    terms: Tuple[str, ...]

    method: ClassVar[str] = "GET"

    def url(self, base_url: str) -> str:
        query = urlencode([("Terms", term) for term in self.terms])
        return f"{base_url}/agreement?{query}"

    def body(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class SaveAgreementRequest:
    agreements: SaveAgreements

    method: ClassVar[str] = "POST"

    def url(self, base_url: str) -> str:
        return f"{base_url}/agreement"

    def body(self) -> Optional[Dict[str, Any]]:
        return self.agreements.to_wire()


# SLA


@dataclass(frozen=True)
class AuthorizeSLARequest:
    sla: SLARequest

    method: ClassVar[str] = "POST"

    def url(self, base_url: str) -> str:
        return f"{base_url}/sla/authorize"

    def body(self) -> Optional[Dict[str, Any]]:
        return self.sla.to_wire()
