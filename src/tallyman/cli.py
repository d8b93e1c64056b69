"""
Tallyman CLI: Command-line interface for wallets, budgets, plans and terms.
"""

import json
import re
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

import click
import httpx

from . import __version__
from .api import BudgetClient, PlanClient, SLAClient, TermsClient
from .reports import (
    render_agreement_list,
    render_budget_report,
    render_json,
    render_plan_list,
    render_wallet_list,
    render_wallet_report,
    render_yaml,
)
from .utils.config import TallymanConfig
from .utils.errors import (
    ServiceUnavailableError,
    TallymanError,
    UserValidationFailedError,
    ValidationError,
)
from .utils.logging import get_logger, setup_logging
from .wireformat.plan import is_valid_application
from .wireformat.terms import CheckAgreementsRequest, SaveAgreement, SaveAgreements

logger = get_logger(__name__)

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_SERVICE_UNAVAILABLE = 3
EXIT_USER_VALIDATION_FAILED = 4

BUDGET_WITH_LIMIT_RE = re.compile(r"^[a-zA-Z0-9\-]+:[1-9][0-9]*$")
WHOLE_NUMBER_RE = re.compile(r"^[0-9]+$")

format_option = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    show_default=True,
    help="Output format",
)
model_option = click.option(
    "--model", "-m", "model", help="Model UUID (defaults to TALLYMAN_MODEL_UUID)"
)


def parse_budget_with_limit(value: str) -> Tuple[str, str]:
    """Split a "<budget>:<limit>" argument into its two parts."""
    if not BUDGET_WITH_LIMIT_RE.match(value):
        raise ValidationError(
            "invalid budget specification, expecting <budget>:<limit>"
        )
    budget, limit = value.split(":")
    return budget, limit


def parse_term(value: str) -> Tuple[str, int]:
    """Split a "<term>/<revision>" argument into name and revision."""
    name, sep, revision = value.rpartition("/")
    if not sep or not name or not WHOLE_NUMBER_RE.match(revision):
        raise ValidationError(
            f"invalid term {value!r}, expecting <term>/<revision>", field="terms"
        )
    return name, int(revision)


def _exit_code(error: TallymanError) -> int:
    if isinstance(error, ServiceUnavailableError):
        return EXIT_SERVICE_UNAVAILABLE
    if isinstance(error, UserValidationFailedError):
        return EXIT_USER_VALIDATION_FAILED
    if isinstance(error, ValidationError):
        return EXIT_USAGE
    return EXIT_FAILURE


def _fail(message: str, code: int) -> None:
    click.echo(f"❌ Error: {message}", err=True)
    sys.exit(code)


@contextmanager
def reported_errors(action: str) -> Iterator[None]:
    """Turn Tallyman errors into an error message and exit code.

    Failures coming back from the service are prefixed with ``action``;
    local validation failures are shown as they are.
    """
    try:
        yield
    except ValidationError as e:
        _fail(e.message, EXIT_USAGE)
    except TallymanError as e:
        _fail(f"{action}: {e.message}", _exit_code(e))


def _config(ctx: click.Context) -> TallymanConfig:
    return ctx.obj["config"]


def _transport(ctx: click.Context) -> Optional[httpx.Client]:
    return ctx.obj.get("transport")


def _budget_client(ctx: click.Context) -> BudgetClient:
    return BudgetClient(_config(ctx).client_config(_transport(ctx)))


def _plan_client(ctx: click.Context) -> PlanClient:
    return PlanClient(_config(ctx).client_config(_transport(ctx)))


def _terms_client(ctx: click.Context) -> TermsClient:
    return TermsClient(_config(ctx).client_config(_transport(ctx), terms=True))


def _sla_client(ctx: click.Context) -> SLAClient:
    return SLAClient(_config(ctx).client_config(_transport(ctx)))


def _resolve_model(ctx: click.Context, model: Optional[str]) -> str:
    resolved = model or _config(ctx).model_uuid
    if not resolved:
        raise ValidationError(
            "model required: pass --model or set TALLYMAN_MODEL_UUID", field="model"
        )
    return resolved


def _emit(value, output_format: str, table) -> None:
    if output_format == "json":
        click.echo(render_json(value), nl=False)
    elif output_format == "yaml":
        click.echo(render_yaml(value), nl=False)
    else:
        click.echo(table(value), nl=False)


@click.group()
@click.version_option(version=__version__, prog_name="tallyman")
@click.option(
    "--config", "-c", "config_path", type=click.Path(exists=True), help="Configuration file"
)
@click.option("--base-url", help="Base URL of the wallet, budget, plan and SLA services")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    base_url: Optional[str],
    log_level: Optional[str],
):
    """Tallyman: wallets, budgets and plans for metered services."""
    ctx.ensure_object(dict)

    try:
        config = TallymanConfig.from_file(config_path) if config_path else TallymanConfig.from_env()
    except (TallymanError, FileNotFoundError) as e:
        _fail(getattr(e, "message", str(e)), EXIT_USAGE)

    if base_url:
        config.base_url = base_url
    if log_level:
        config.log_level = log_level.upper()

    setup_logging(config.log_level, config.enable_structured_logging)
    logger.debug("Configuration loaded", extra={"structured_data": config.to_dict()})
    ctx.obj["config"] = config


# Wallets


@cli.command("create-wallet")
@click.argument("name")
@click.argument("limit")
@click.pass_context
def create_wallet(ctx: click.Context, name: str, limit: str):
    """Create a wallet NAME with a monthly LIMIT."""
    with reported_errors("failed to create the wallet"):
        with _budget_client(ctx) as client:
            click.echo(client.create_wallet(name, limit))


@cli.command("list-wallets")
@format_option
@click.pass_context
def list_wallets(ctx: click.Context, output_format: str):
    """List wallets; the default wallet is marked with '*'."""
    with reported_errors("failed to retrieve wallets"):
        with _budget_client(ctx) as client:
            wallets = client.list_wallets()
    _emit(wallets, output_format, render_wallet_list)


@cli.command("set-wallet")
@click.argument("name")
@click.argument("limit")
@click.pass_context
def set_wallet(ctx: click.Context, name: str, limit: str):
    """Change the monthly LIMIT of wallet NAME."""
    with reported_errors("failed to update the wallet"):
        with _budget_client(ctx) as client:
            click.echo(client.set_wallet(name, limit))


@cli.command("show-wallet")
@click.argument("name")
@format_option
@click.pass_context
def show_wallet(ctx: click.Context, name: str, output_format: str):
    """Show the budgets drawn from wallet NAME."""
    with reported_errors("failed to retrieve the wallet"):
        with _budget_client(ctx) as client:
            wallet = client.get_wallet(name)
    _emit(wallet, output_format, render_wallet_report)


# Budgets


@cli.command("create-budget")
@click.argument("wallet")
@click.argument("limit")
@model_option
@click.pass_context
def create_budget(ctx: click.Context, wallet: str, limit: str, model: Optional[str]):
    """Create the budget of a model in WALLET with LIMIT."""
    with reported_errors("failed to create the budget"):
        model_uuid = _resolve_model(ctx, model)
        with _budget_client(ctx) as client:
            click.echo(client.create_budget(wallet, limit, model_uuid))


@cli.command("update-budget")
@click.argument("limit")
@click.option("--wallet", "-w", default="", help="Move the budget to this wallet")
@model_option
@click.pass_context
def update_budget(ctx: click.Context, limit: str, wallet: str, model: Optional[str]):
    """Change the LIMIT of a model's budget."""
    with reported_errors("failed to update the budget"):
        model_uuid = _resolve_model(ctx, model)
        with _budget_client(ctx) as client:
            click.echo(client.update_budget(model_uuid, wallet, limit))


@cli.command("delete-budget")
@model_option
@click.pass_context
def delete_budget(ctx: click.Context, model: Optional[str]):
    """Remove the budget of a model."""
    with reported_errors("failed to delete the budget"):
        model_uuid = _resolve_model(ctx, model)
        with _budget_client(ctx) as client:
            click.echo(client.delete_budget(model_uuid))


@cli.command("show-budget")
@click.argument("name")
@format_option
@click.pass_context
def show_budget(ctx: click.Context, name: str, output_format: str):
    """Show the allocations made from budget NAME."""
    with reported_errors("failed to retrieve the budget"):
        with _budget_client(ctx) as client:
            budget = client.get_budget(name)
    _emit(budget, output_format, render_budget_report)


# Allocations


@cli.command("allocate")
@click.argument("args", nargs=-1)
@model_option
@click.pass_context
def allocate(ctx: click.Context, args: Tuple[str, ...], model: Optional[str]):
    """
    Allocate budget to services, replacing prior allocations for them.

    Usage: tallyman allocate <budget>:<limit> <service> [<service> ...]
    """
    with reported_errors("failed to create allocation"):
        if len(args) < 2:
            raise ValidationError("budget and service name required")
        budget, limit = parse_budget_with_limit(args[0])
        services: List[str] = list(args[1:])
        model_uuid = _resolve_model(ctx, model)
        with _budget_client(ctx) as client:
            click.echo(client.create_allocation(budget, limit, model_uuid, services))


@cli.command("update-allocation")
@click.argument("args", nargs=-1)
@model_option
@click.pass_context
def update_allocation(ctx: click.Context, args: Tuple[str, ...], model: Optional[str]):
    """
    Change the allocation limit of a service.

    Usage: tallyman update-allocation <service> <value>
    """
    with reported_errors("failed to update the allocation"):
        if len(args) < 2:
            raise ValidationError("service and value required")
        service, value = args[0], args[1]
        if not WHOLE_NUMBER_RE.match(value):
            raise ValidationError("value needs to be a whole number", field="value")
        model_uuid = _resolve_model(ctx, model)
        with _budget_client(ctx) as client:
            click.echo(client.update_allocation(model_uuid, service, value))


# Plans


@cli.command("list-plans")
@click.argument("charm_url")
@format_option
@click.pass_context
def list_plans(ctx: click.Context, charm_url: str, output_format: str):
    """List the plans offered for CHARM_URL."""
    with reported_errors("failed to retrieve plans"):
        with _plan_client(ctx) as client:
            plans = client.get_associated_plans(charm_url)
    _emit(plans, output_format, render_plan_list)


@cli.command("set-plan")
@click.argument("application")
@click.argument("plan")
@click.option("--charm-url", required=True, help="Charm the application runs")
@model_option
@click.pass_context
def set_plan(
    ctx: click.Context,
    application: str,
    plan: str,
    charm_url: str,
    model: Optional[str],
):
    """Authorize APPLICATION to run under PLAN and print the credentials."""
    with reported_errors("failed to authorize the plan"):
        if not is_valid_application(application):
            raise ValidationError(
                f'invalid service name "{application}"', field="application"
            )
        model_uuid = _resolve_model(ctx, model)
        with _plan_client(ctx) as client:
            credentials = client.authorize_plan(model_uuid, charm_url, application, plan)
    click.echo(json.dumps(credentials))


# Terms


@cli.command("agreements")
@format_option
@click.pass_context
def agreements(ctx: click.Context, output_format: str):
    """List the terms you have agreed to."""
    with reported_errors("failed to list agreements"):
        with _terms_client(ctx) as client:
            signed = client.get_users_agreements()
    _emit(signed, output_format, render_agreement_list)


@cli.command("agree")
@click.argument("terms", nargs=-1, required=True)
@click.pass_context
def agree(ctx: click.Context, terms: Tuple[str, ...]):
    """Agree to TERMS, each given as <term>/<revision>."""
    with reported_errors("failed to agree to terms"):
        for term in terms:
            parse_term(term)
        with _terms_client(ctx) as client:
            unsigned = client.get_unsigned_terms(CheckAgreementsRequest(terms=list(terms)))
            if not unsigned:
                click.echo("Already agreed")
                return
            request = SaveAgreements(
                agreements=[SaveAgreement(term=t.name, revision=t.revision) for t in unsigned]
            )
            saved = client.save_agreement(request)

    for agreement in saved.agreements:
        click.echo(f"Agreed to revision {agreement.revision} of {agreement.term}")


# SLA


@cli.command("sla")
@click.argument("level")
@click.option("--budget", "-b", default="", help="Budget to charge the support level to")
@model_option
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["message", "json", "yaml"]),
    default="message",
    show_default=True,
    help="Output format",
)
@click.pass_context
def sla(
    ctx: click.Context,
    level: str,
    budget: str,
    model: Optional[str],
    output_format: str,
):
    """Request support LEVEL for a model."""
    with reported_errors("failed to authorize the SLA"):
        model_uuid = _resolve_model(ctx, model)
        with _sla_client(ctx) as client:
            response = client.authorize_sla(model_uuid, level, budget)
    _emit(response, output_format, lambda r: f"{r.message}\n")


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
