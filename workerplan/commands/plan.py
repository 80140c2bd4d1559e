"""Node plan commands.

Compare node plans and patch their processes from the command line.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml

from ..modules.upgrader import (
    NodePlan,
    PlanChange,
    plan_change,
    update_only_required,
    upgrade_required,
    upsert_env_var,
)
from ..modules.upgrader.store import ClusterStore
from ..utils.kube import load_kubeconfig

logger = logging.getLogger("plan")

app = typer.Typer(help="Node plan comparison commands")


def load_plan(path: Path) -> NodePlan:
    """Load a node plan from a YAML or JSON file.

    A stored node plan wrapper (``{"plan": {...}}``) is unwrapped.

    Args:
        path: Path to the plan file

    Returns:
        NodePlan: The parsed plan
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if 'plan' in data and 'processes' not in data:
        data = data['plan'] or {}
    return NodePlan.model_validate(data)


def diff_result(new_plan: NodePlan, old_plan: Optional[NodePlan]) -> Dict[str, Any]:
    upgrade = upgrade_required(new_plan, old_plan)
    update_only = update_only_required(new_plan, old_plan)
    return {
        'change': plan_change(upgrade, update_only).value,
        'upgrade_required': upgrade,
        'update_only_required': update_only,
    }


def _print_result(result: Dict[str, Any], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(result, indent=2))
        return

    messages = {
        PlanChange.REDEPLOY.value: "🔁 Plan changed: node must be redeployed",
        PlanChange.UPDATE.value: "📝 Plan changed: record without redeploy",
        PlanChange.NONE.value: "✅ Plan unchanged",
    }
    typer.echo(messages[result['change']])
    typer.echo(f"  upgrade required:     {result['upgrade_required']}")
    typer.echo(f"  update only required: {result['update_only_required']}")


@app.command("diff")
def diff_plans(
    new: Path = typer.Option(..., "--new", help="Freshly built node plan (YAML or JSON)"),
    old: Optional[Path] = typer.Option(None, "--old", help="Last applied node plan; omit if none was applied"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Classify the change between a new node plan and the last applied one."""
    try:
        new_plan = load_plan(new)
        old_plan = load_plan(old) if old else None
    except (OSError, yaml.YAMLError, ValueError) as e:
        typer.echo(f"❌ Failed to load plan: {e}", err=True)
        raise typer.Exit(code=1)

    _print_result(diff_result(new_plan, old_plan), as_json)


@app.command("check")
def check_node(
    cluster: str = typer.Option(..., help="Cluster name"),
    node: str = typer.Option(..., help="Node name"),
    new: Path = typer.Option(..., "--new", help="Freshly built node plan (YAML or JSON)"),
    kubeconfig: Optional[str] = typer.Option(None, help="Kubeconfig of the management cluster"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Classify a new plan against the plan last applied to a node."""
    try:
        new_plan = load_plan(new)
        load_kubeconfig(kubeconfig)
        stored = ClusterStore().get_node(cluster, node)
    except Exception as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    if stored is None:
        typer.echo(f"❌ Node {node} not found in cluster {cluster}", err=True)
        raise typer.Exit(code=1)

    _print_result(diff_result(new_plan, stored.applied_plan), as_json)


@app.command("env")
def set_env(
    plan: Path = typer.Option(..., "--plan", help="Node plan (YAML or JSON)"),
    process: str = typer.Option(..., "--process", help="Process to patch"),
    var: str = typer.Option(..., "--var", help="Environment variable as KEY=VALUE"),
):
    """Add or overwrite an environment variable on a process and print the plan."""
    if '=' not in var:
        typer.echo(f"❌ Invalid environment variable '{var}', expected KEY=VALUE", err=True)
        raise typer.Exit(code=1)

    try:
        node_plan = load_plan(plan)
    except (OSError, yaml.YAMLError, ValueError) as e:
        typer.echo(f"❌ Failed to load plan: {e}", err=True)
        raise typer.Exit(code=1)

    if process not in node_plan.processes:
        typer.echo(f"❌ Process {process} not found in plan", err=True)
        raise typer.Exit(code=1)

    node_plan.processes[process] = upsert_env_var(node_plan.processes[process], var)
    logger.debug(f"Set {var.split('=', 1)[0]} on process {process}")
    typer.echo(yaml.safe_dump(
        node_plan.model_dump(by_alias=True, exclude_none=True),
        default_flow_style=False, sort_keys=False,
    ))
