"""Wire format of metric batches sent to the collector and its responses."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field, model_validator

from .common import WireModel, resolve_renamed


class Metric(WireModel):
    """A single metric reading."""

    key: str = ""
    value: str = ""
    time: Optional[datetime] = None


class MetricBatch(WireModel):
    """A batch of metrics from one unit."""

    uuid: str = ""
    model_uuid: str = Field("", alias="env-uuid")
    unit_name: str = Field("", alias="unit-name")
    charm_url: str = Field("", alias="charm-url")
    created: Optional[datetime] = None
    metrics: List[Metric] = Field(default_factory=list)
    # base64 text, opaque to the client
    credentials: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fold_model_uuid(cls, data):
        return resolve_renamed(data, "env-uuid", "model-uuid")


class UnitStatus(WireModel):
    status: str = ""
    info: str = ""


class EnvResponse(WireModel):
    """Collector response for one model."""

    model_config = ConfigDict(frozen=False)

    acknowledged_batches: List[str] = Field(default_factory=list, alias="acks")
    unit_statuses: Dict[str, UnitStatus] = Field(
        default_factory=dict, alias="unit-statuses"
    )


class Response(WireModel):
    """Collector response, keyed by model UUID.

    Built up by the collector through ``ack`` and ``set_status``.
    """

    model_config = ConfigDict(frozen=False)

    uuid: str = ""
    env_responses: Dict[str, EnvResponse] = Field(
        default_factory=dict, alias="env-responses"
    )
    # nanoseconds
    new_grace_period: int = Field(0, alias="new-grace-period")

    @model_validator(mode="before")
    @classmethod
    def _fold_model_responses(cls, data):
        return resolve_renamed(data, "env-responses", "model-responses")

    def _model_response(self, model_uuid: str) -> EnvResponse:
        return self.env_responses.setdefault(model_uuid, EnvResponse())

    def ack(self, model_uuid: str, batch_uuid: str) -> None:
        """Record batch_uuid as acknowledged for the model."""
        self._model_response(model_uuid).acknowledged_batches.append(batch_uuid)

    def set_status(
        self, model_uuid: str, unit_name: str, status: str, info: str = ""
    ) -> None:
        """Record the status of a unit, replacing any previous one."""
        self._model_response(model_uuid).unit_statuses[unit_name] = UnitStatus(
            status=status, info=info
        )
