"""
Tallyman Plan API Client

Lists the rating plans offered for a charm and obtains plan authorizations.
"""

from typing import Any, List

from ..wireformat.plan import AuthorizationRequest, Plan
from ..wireformat.requests import AuthorizePlanRequest, GetAssociatedPlansRequest
from .base import APIClient, require


class PlanClient(APIClient):
    """Client for the plan service."""

    def get_associated_plans(self, charm_url: str) -> List[Plan]:
        """Return the plans associated with a charm."""
        require(charm_url=charm_url)
        return self._call(
            "get_associated_plans", GetAssociatedPlansRequest(charm_url), List[Plan]
        )

    def authorize_plan(
        self,
        environment_uuid: str,
        charm_url: str,
        service_name: str,
        plan_url: str,
    ) -> Any:
        """
        Obtain the authorization credential for running a service under a plan.

        Args:
            environment_uuid: UUID of the model the service is deployed in
            charm_url: Charm the service runs
            service_name: Name of the deployed service
            plan_url: Plan to authorize

        Returns:
            The opaque authorization credential, as decoded from the response

        Raises:
            ValidationError: When an identifier is malformed; nothing is sent
        """
        authorization = AuthorizationRequest(
            environment_uuid=environment_uuid,
            charm_url=charm_url,
            service_name=service_name,
            plan_url=plan_url,
        )
        authorization.validate_request()
        return self._call(
            "authorize_plan", AuthorizePlanRequest(authorization), Any
        )
