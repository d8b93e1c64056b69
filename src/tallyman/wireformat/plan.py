"""Wire entities for the plan management API."""

import re

from pydantic import Field, model_validator

from ..utils.errors import ValidationError
from .common import WireModel, resolve_renamed

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)

_APPLICATION_SNIPPET = r"(?:[a-z][a-z0-9]*(?:-[a-z0-9]*[a-z][a-z0-9]*)*)"
_USER_SNIPPET = r"(?:~[a-z0-9][a-zA-Z0-9+.\-]*/)"
_REVISION_SNIPPET = r"(?:-[0-9]+)"

_APPLICATION_RE = re.compile(rf"^{_APPLICATION_SNIPPET}$")

# cs:~user/series/name-rev and local:series/name-rev
_LEGACY_CHARM_RE = re.compile(
    rf"^(?:cs|local):{_USER_SNIPPET}?(?:[a-z][a-z0-9]*/)?"
    rf"{_APPLICATION_SNIPPET}{_REVISION_SNIPPET}?$"
)
# ch:arch/series/name-rev, ~user/name or a bare name
_CHARM_RE = re.compile(
    rf"^(?:ch:)?{_USER_SNIPPET}?(?:[a-z0-9]+/[a-z][a-z0-9.]*/)?"
    rf"{_APPLICATION_SNIPPET}{_REVISION_SNIPPET}?$"
)


def is_valid_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


def is_valid_application(name: str) -> bool:
    """Check an application (service) name against the naming grammar."""
    return bool(_APPLICATION_RE.match(name))


def is_valid_charm(url: str) -> bool:
    """Check a charm reference against the legacy or the current grammar."""
    return bool(_LEGACY_CHARM_RE.match(url) or _CHARM_RE.match(url))


class Plan(WireModel):
    """A rating plan and when it was published."""

    url: str = Field("", description="Name of the rating plan")
    definition: str = Field("", alias="plan", description="The rating plan")
    created_on: str = Field(
        "", alias="created-on", description="RFC3339 creation timestamp"
    )


class AuthorizationRequest(WireModel):
    """Request for a plan authorization.

    Decodes both the environment/service field names and their
    model/application successors.
    """

    environment_uuid: str = Field("", alias="env-uuid")
    charm_url: str = Field("", alias="charm-url")
    service_name: str = Field("", alias="service-name")
    plan_url: str = Field("", alias="plan-url")

    @model_validator(mode="before")
    @classmethod
    def _fold_renamed_fields(cls, data):
        data = resolve_renamed(data, "env-uuid", "model-uuid")
        return resolve_renamed(data, "service-name", "application-name")

    def validate_request(self) -> None:
        """Check the request before it is sent.

        Raises:
            ValidationError: When any identifier is missing or malformed
        """
        if not is_valid_uuid(self.environment_uuid):
            raise ValidationError(
                f"invalid environment UUID: {self.environment_uuid!r}",
                field="env-uuid",
            )
        if not self.service_name:
            raise ValidationError("undefined service name", field="service-name")
        if not is_valid_application(self.service_name):
            raise ValidationError(
                f"invalid service name: {self.service_name!r}", field="service-name"
            )
        if not self.charm_url:
            raise ValidationError("undefined charm url", field="charm-url")
        if not is_valid_charm(self.charm_url):
            raise ValidationError(
                f"invalid charm url: {self.charm_url!r}", field="charm-url"
            )
        if not self.plan_url:
            raise ValidationError("undefined plan url", field="plan-url")
