"""
Tallyman Reports: tabular views of wallets, budgets and allocations.

Values are shown exactly as the service formatted them; the only work done
here is ordering and alignment.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

import yaml
from pydantic import BaseModel

from .wireformat.budget import (
    Allocation,
    Budget,
    BudgetWithAllocations,
    ListWalletsResponse,
    WalletWithBudgets,
    sort_allocations,
    sort_budgets,
)
from .wireformat.plan import Plan
from .wireformat.terms import AgreementResponse

USAGE_HEADER = ["MODEL", "SERVICES", "SPENT", "ALLOCATED", "BY", "USAGE"]
WALLETS_HEADER = ["WALLET", "MONTHLY", "BUDGETED", "AVAILABLE", "SPENT"]
PLANS_HEADER = ["PLAN", "CREATED ON"]
AGREEMENTS_HEADER = ["TERM", "REVISION", "AGREED ON"]

Row = List[str]


@dataclass
class UsageReport:
    """Rows of a budget or wallet usage report, header included."""

    rows: List[Row]
    summary: Dict[str, str] = field(default_factory=dict)

    def to_table(self) -> str:
        """Render the rows as an aligned table."""
        return format_table(self.rows)

    def get_summary(self) -> Dict[str, str]:
        """Get the totals shown at the foot of the report."""
        return dict(self.summary)


def format_table(rows: Sequence[Sequence[str]]) -> str:
    """
    Align rows into columns.

    Each cell is padded to the widest cell of its column and cells are
    separated by a tab. Rows may have fewer cells than the widest row.
    """
    widths: List[int] = []
    for row in rows:
        for i, cell in enumerate(row):
            if i == len(widths):
                widths.append(len(cell))
            else:
                widths[i] = max(widths[i], len(cell))

    lines = []
    for row in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(row)]
        lines.append("\t".join(cells) + "\n")
    return "".join(lines)


def _usage_rows(entry: Union[Allocation, Budget]) -> List[Row]:
    names = entry.service_names()
    if not names:
        return [[entry.model, "", entry.consumed, entry.limit, entry.owner, entry.usage]]

    rows = []
    for i, name in enumerate(names):
        spent = entry.services[name].consumed
        if i == 0:
            rows.append([entry.model, name, spent, entry.limit, entry.owner, entry.usage])
        else:
            rows.append(["", name, spent, "", ""])
    return rows


def _summary_rows(summary: Dict[str, str]) -> List[Row]:
    return [
        ["", "", "", "", ""],
        ["TOTAL", "", summary["consumed"], summary["allocated"], "", summary["usage"]],
        ["BUDGET", "", "", summary["limit"], ""],
        ["UNALLOCATED", "", "", summary["unallocated"], ""],
    ]


def build_budget_report(budget: BudgetWithAllocations) -> UsageReport:
    """Build the usage report of a budget, one row per model and service."""
    rows = [list(USAGE_HEADER)]
    for allocation in sort_allocations(budget.allocations):
        rows.extend(_usage_rows(allocation))

    summary = {
        "consumed": budget.total.consumed,
        "allocated": budget.total.allocated,
        "usage": budget.total.usage,
        "limit": budget.limit,
        "unallocated": budget.total.unallocated,
    }
    rows.extend(_summary_rows(summary))
    return UsageReport(rows=rows, summary=summary)


def build_wallet_report(wallet: WalletWithBudgets) -> UsageReport:
    """Build the usage report of a wallet, one row per budget and service."""
    rows = [list(USAGE_HEADER)]
    for budget in sort_budgets(wallet.budgets):
        rows.extend(_usage_rows(budget))

    summary = {
        "consumed": wallet.total.consumed,
        "allocated": wallet.total.budgeted,
        "usage": wallet.total.usage,
        "limit": wallet.limit,
        "unallocated": wallet.total.unallocated,
    }
    rows.extend(_summary_rows(summary))
    return UsageReport(rows=rows, summary=summary)


def build_wallet_list(response: ListWalletsResponse) -> UsageReport:
    """Build the wallet listing; the default wallet is marked with '*'."""
    rows = [list(WALLETS_HEADER)]
    for wallet in sorted(response.wallets, key=lambda w: w.wallet):
        name = f"{wallet.wallet}*" if wallet.default else wallet.wallet
        rows.append(
            [name, wallet.limit, wallet.budgeted, wallet.available, wallet.consumed]
        )

    total = response.total
    rows.append(["", "", "", "", ""])
    rows.append(["TOTAL", total.limit, total.budgeted, total.available, total.consumed])
    rows.append(["", "", "", "", ""])
    rows.append(["CREDIT LIMIT:", response.credit, "", "", ""])

    summary = {
        "limit": total.limit,
        "budgeted": total.budgeted,
        "available": total.available,
        "consumed": total.consumed,
        "credit": response.credit,
    }
    return UsageReport(rows=rows, summary=summary)


def render_plan_list(plans: Sequence[Plan]) -> str:
    """One row per plan, sorted by plan name."""
    rows = [list(PLANS_HEADER)]
    for plan in sorted(plans, key=lambda p: p.url):
        rows.append([plan.url, plan.created_on])
    return format_table(rows)


def render_agreement_list(agreements: Sequence[AgreementResponse]) -> str:
    rows = [list(AGREEMENTS_HEADER)]
    for agreement in sorted(agreements, key=lambda a: (a.term, a.revision)):
        agreed_on = agreement.created_on.isoformat() if agreement.created_on else ""
        rows.append([agreement.term, str(agreement.revision), agreed_on])
    return format_table(rows)


def render_budget_report(budget: BudgetWithAllocations) -> str:
    return build_budget_report(budget).to_table()


def render_wallet_report(wallet: WalletWithBudgets) -> str:
    return build_wallet_report(wallet).to_table()


def render_wallet_list(response: ListWalletsResponse) -> str:
    return build_wallet_list(response).to_table()


def _to_wire(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    return value


def render_json(value: Any, indent: int = 2) -> str:
    """Render a wire entity, or a list of them, as JSON."""
    return json.dumps(_to_wire(value), indent=indent, sort_keys=True) + "\n"


def render_yaml(value: Any) -> str:
    """Render a wire entity, or a list of them, as YAML."""
    return yaml.safe_dump(_to_wire(value), default_flow_style=False, sort_keys=True)
