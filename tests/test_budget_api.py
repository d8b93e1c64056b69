"""
Tests for the wallet and budget API client.
"""

import httpx
import pytest

from conftest import RecordingService
from tallyman.api import BudgetClient
from tallyman.utils.config import ClientConfig
from tallyman.utils.errors import (
    HTTPError,
    MalformedResponseError,
    RequestFailedError,
    ServiceUnavailableError,
    UserValidationFailedError,
    ValidationError,
)
from tallyman.wireformat.budget import BudgetWithAllocations, WalletWithBudgets

BASE = "https://api.jujucharms.com/omnibus/v3"


def budget_client(service: RecordingService, base_url=None) -> BudgetClient:
    return BudgetClient(ClientConfig(transport=service.client(), base_url=base_url))


class TestCreateWallet:
    """Test wallet creation and the failure classification of its call."""

    @pytest.mark.unit
    def test_create_wallet(self):
        """Test a successful wallet creation."""
        service = RecordingService(json_body="wallet created successfully")
        with budget_client(service) as client:
            response = client.create_wallet("personal", "200")

        assert response == "wallet created successfully"
        assert service.calls() == [("POST", f"{BASE}/wallet")]
        assert service.last_body() == {"wallet": "personal", "limit": "200"}
        assert service.last.headers["Content-Type"] == "application/json"

    @pytest.mark.unit
    def test_create_wallet_with_base_url(self):
        """Test that an explicit base URL replaces the default."""
        service = RecordingService(json_body="wallet created successfully")
        client = budget_client(service, base_url="http://httpbin.org")

        assert client.create_wallet("personal", "200") == "wallet created successfully"
        assert service.calls() == [("POST", "http://httpbin.org/wallet")]

    @pytest.mark.unit
    def test_create_wallet_server_error(self):
        """Test that the error body message is surfaced."""
        service = RecordingService(status_code=400, json_body={"error": "wallet already exists"})
        client = budget_client(service)

        with pytest.raises(HTTPError) as exc_info:
            client.create_wallet("personal", "200")

        assert exc_info.value.message == "wallet already exists"
        assert exc_info.value.status_code == 400
        assert len(service.requests) == 1

    @pytest.mark.unit
    def test_create_wallet_request_error(self):
        """Test that an unrecognized transport error is passed through."""
        error = httpx.ReadError("bogus error")
        service = RecordingService(error=error)
        client = budget_client(service)

        with pytest.raises(RequestFailedError) as exc_info:
            client.create_wallet("personal", "200")

        assert exc_info.value.message == "bogus error"
        assert exc_info.value.cause is error
        assert exc_info.value.__cause__ is error

    @pytest.mark.unit
    def test_create_wallet_service_unavailable(self):
        """Test that HTTP 503 is reported as unavailability."""
        service = RecordingService(status_code=503, content=b"")
        client = budget_client(service)

        with pytest.raises(ServiceUnavailableError):
            client.create_wallet("personal", "200")

    @pytest.mark.unit
    def test_create_wallet_connection_refused(self):
        """Test that a refused connection is reported as unavailability."""
        service = RecordingService(error=httpx.ConnectError("Connection refused"))
        client = budget_client(service)

        with pytest.raises(ServiceUnavailableError) as exc_info:
            client.create_wallet("personal", "200")

        assert exc_info.value.base_url == BASE

    @pytest.mark.unit
    def test_create_wallet_user_validation_failed(self):
        """Test that the reserved error code is reported as its own kind."""
        service = RecordingService(
            status_code=401,
            json_body={"code": "user validation failed", "error": "macaroon expired"},
        )
        client = budget_client(service)

        with pytest.raises(UserValidationFailedError) as exc_info:
            client.create_wallet("personal", "200")

        assert exc_info.value.message == "macaroon expired"

    @pytest.mark.unit
    def test_create_wallet_undecodable_error_body(self):
        """Test that a non-JSON error body carries status text and body."""
        service = RecordingService(status_code=404, content=b"something failed")
        client = budget_client(service)

        with pytest.raises(MalformedResponseError) as exc_info:
            client.create_wallet("personal", "200")

        assert exc_info.value.message == "Not Found: something failed"
        assert exc_info.value.body == "something failed"
        assert exc_info.value.status == "Not Found"

    @pytest.mark.unit
    def test_create_wallet_undecodable_success_body(self):
        """Test that a 2xx body of the wrong shape is malformed."""
        service = RecordingService(json_body={"not": "a string"})
        client = budget_client(service)

        with pytest.raises(MalformedResponseError) as exc_info:
            client.create_wallet("personal", "200")

        assert exc_info.value.message.startswith("failed to unmarshal the response")

    @pytest.mark.unit
    def test_create_wallet_missing_arguments(self):
        """Test that empty arguments are rejected before any request."""
        service = RecordingService(json_body="unused")
        client = budget_client(service)

        with pytest.raises(ValidationError) as exc_info:
            client.create_wallet("", "200")

        assert exc_info.value.message == "wallet required"
        assert service.requests == []


class TestWallets:
    """Test listing, reading and updating wallets."""

    @pytest.mark.unit
    def test_list_wallets(self):
        """Test decoding of a wallet listing."""
        service = RecordingService(
            json_body={
                "wallets": [
                    {
                        "owner": "bob",
                        "wallet": "personal",
                        "limit": "50",
                        "budgeted": "30",
                        "unallocated": "20",
                        "available": "45",
                        "consumed": "5",
                        "default": True,
                    },
                    {
                        "owner": "bob",
                        "wallet": "work",
                        "limit": "200",
                        "budgeted": "100",
                        "unallocated": "100",
                        "available": "150",
                        "consumed": "50",
                    },
                ],
                "total": {
                    "limit": "250",
                    "budgeted": "130",
                    "available": "195",
                    "unallocated": "120",
                    "consumed": "55",
                    "usage": "22%",
                },
                "credit": "400",
            }
        )
        client = budget_client(service)

        response = client.list_wallets()

        assert service.calls() == [("GET", f"{BASE}/wallet")]
        assert "Content-Type" not in service.last.headers
        assert [w.wallet for w in response.wallets] == ["personal", "work"]
        assert response.wallets[0].default is True
        assert response.wallets[1].default is False
        assert response.total.limit == "250"
        assert response.credit == "400"

    @pytest.mark.unit
    def test_list_wallets_not_found(self):
        """Test an error from the listing endpoint."""
        service = RecordingService(status_code=404, json_body={"error": "wallet already exists"})
        client = budget_client(service)

        with pytest.raises(HTTPError, match="wallet already exists"):
            client.list_wallets()

    @pytest.mark.unit
    def test_set_wallet(self):
        """Test that only the limit travels, inside the update envelope."""
        service = RecordingService(json_body="wallet updated successfully")
        client = budget_client(service)

        assert client.set_wallet("personal", "200") == "wallet updated successfully"
        assert service.calls() == [("PATCH", f"{BASE}/wallet/personal")]
        assert service.last_body() == {"update": {"limit": "200"}}

    @pytest.mark.unit
    def test_get_wallet(self):
        """Test decoding of a wallet with its budgets."""
        service = RecordingService(
            json_body={
                "limit": "4000",
                "total": {"budgeted": "2200", "unallocated": "1800", "consumed": "1100"},
                "budgets": [
                    {
                        "owner": "user.joe",
                        "limit": "1200",
                        "consumed": "500",
                        "usage": "42%",
                        "model": "model.joe",
                    }
                ],
            }
        )
        client = budget_client(service)

        wallet = client.get_wallet("personal")

        assert service.calls() == [("GET", f"{BASE}/wallet/personal")]
        assert isinstance(wallet, WalletWithBudgets)
        assert wallet.limit == "4000"
        assert wallet.total.budgeted == "2200"
        assert wallet.budgets[0].model == "model.joe"
        assert wallet.budgets[0].services == {}


class TestBudgets:
    """Test the budget endpoints of a model."""

    @pytest.mark.unit
    def test_create_budget(self):
        service = RecordingService(json_body="budget created")
        client = budget_client(service)

        assert client.create_budget("personal", "200", "model-uuid") == "budget created"
        assert service.calls() == [("POST", f"{BASE}/wallet/personal/budget")]
        assert service.last_body() == {"model": "model-uuid", "limit": "200"}

    @pytest.mark.unit
    def test_update_budget_with_wallet(self):
        """Test moving a budget to another wallet."""
        service = RecordingService(json_body="budget updated")
        client = budget_client(service)

        client.update_budget("model-uuid", "work", "200")

        assert service.calls() == [("PATCH", f"{BASE}/model/model-uuid/budget")]
        assert service.last_body() == {"update": {"wallet": "work", "limit": "200"}}

    @pytest.mark.unit
    def test_update_budget_without_wallet(self):
        """Test that an empty wallet is left out of the update."""
        service = RecordingService(json_body="budget updated")
        client = budget_client(service)

        client.update_budget("model-uuid", "", "200")

        assert service.last_body() == {"update": {"limit": "200"}}

    @pytest.mark.unit
    def test_delete_budget(self):
        service = RecordingService(json_body="budget deleted")
        client = budget_client(service)

        assert client.delete_budget("model-uuid") == "budget deleted"
        assert service.calls() == [("DELETE", f"{BASE}/model/model-uuid/budget")]
        assert service.last.content == b""
        assert "Content-Type" not in service.last.headers

    @pytest.mark.unit
    def test_get_budget(self):
        """Test decoding of a budget whose allocations use either field name."""
        service = RecordingService(
            json_body={
                "limit": "4000",
                "total": {
                    "allocated": "2200",
                    "unallocated": "1800",
                    "available": "1100",
                    "consumed": "1100",
                    "usage": "50%",
                },
                "allocations": [
                    {
                        "owner": "user.joe",
                        "limit": "1200",
                        "consumed": "500",
                        "usage": "42%",
                        "model": "model.joe",
                        "services": {"wordpress": {"consumed": "300"}},
                    },
                    {
                        "owner": "user.jess",
                        "limit": "1000",
                        "consumed": "600",
                        "usage": "60%",
                        "model": "model.jess",
                        "applications": {"landscape": {"consumed": "600"}},
                    },
                ],
            }
        )
        client = budget_client(service)

        budget = client.get_budget("personal")

        assert service.calls() == [("GET", f"{BASE}/budget/personal")]
        assert isinstance(budget, BudgetWithAllocations)
        assert budget.total.unallocated == "1800"
        assert budget.allocations[0].services["wordpress"].consumed == "300"
        assert budget.allocations[1].services["landscape"].consumed == "600"

    @pytest.mark.unit
    def test_get_budget_with_null_allocations(self):
        """Test that a budget with no allocations, sent as null, still decodes."""
        service = RecordingService(
            json_body={
                "limit": "100",
                "total": {"allocated": "0", "unallocated": "100", "consumed": "0", "usage": "0%"},
                "allocations": None,
            }
        )
        client = budget_client(service)

        budget = client.get_budget("personal")

        assert budget.allocations == []
        assert budget.total.unallocated == "100"


class TestAllocations:
    """Test the allocation endpoints."""

    @pytest.mark.unit
    def test_create_allocation(self):
        service = RecordingService(json_body="allocation updated")
        client = budget_client(service)

        response = client.create_allocation("personal", "100", "model-uuid", ["db", "app"])

        assert response == "allocation updated"
        assert service.calls() == [("POST", f"{BASE}/budget/personal/allocation")]
        assert service.last_body() == {
            "model": "model-uuid",
            "services": ["db", "app"],
            "limit": "100",
        }

    @pytest.mark.unit
    def test_create_allocation_without_services(self):
        service = RecordingService(json_body="unused")
        client = budget_client(service)

        with pytest.raises(ValidationError, match="services required"):
            client.create_allocation("personal", "100", "model-uuid", [])
        assert service.requests == []

    @pytest.mark.unit
    def test_update_allocation(self):
        service = RecordingService(json_body="name budget set to 5")
        client = budget_client(service)

        assert client.update_allocation("model-uuid", "db", "5") == "name budget set to 5"
        assert service.calls() == [
            ("PATCH", f"{BASE}/model/model-uuid/service/db/allocation")
        ]
        assert service.last_body() == {"update": {"limit": "5"}}


class TestClientLifecycle:
    """Test transport ownership."""

    @pytest.mark.unit
    def test_injected_transport_is_not_closed(self):
        service = RecordingService(json_body="ok")
        transport = service.client()

        with BudgetClient(ClientConfig(transport=transport)) as client:
            client.delete_budget("model-uuid")

        assert transport.is_closed is False

    @pytest.mark.unit
    def test_owned_transport_is_closed(self):
        client = BudgetClient()
        client.close()

        assert client._transport.is_closed is True
        assert client.base_url == BASE
