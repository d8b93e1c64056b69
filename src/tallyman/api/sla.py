"""Tallyman SLA API Client."""

from ..wireformat.requests import AuthorizeSLARequest
from ..wireformat.sla import SLARequest, SLAResponse
from .base import APIClient, require


class SLAClient(APIClient):
    """Client for the SLA service."""

    def authorize_sla(self, model_uuid: str, level: str, budget: str = "") -> SLAResponse:
        """
        Obtain an SLA authorization for a model.

        Args:
            model_uuid: UUID of the model
            level: Requested support level
            budget: Budget to charge; empty lets the service decide

        Returns:
            The SLA response with owner, credentials and message
        """
        require(model_uuid=model_uuid, level=level)
        request = SLARequest(model_uuid=model_uuid, level=level, budget=budget)
        return self._call("authorize_sla", AuthorizeSLARequest(request), SLAResponse)
