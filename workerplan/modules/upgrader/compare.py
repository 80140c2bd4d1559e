"""Change detection between a freshly built node plan and the last applied one.

Two policies are provided:

- ``upgrade_required``: the plan differs in a way that needs the node's
  containers to be redeployed.
- ``update_only_required``: the plan differs only in ways that should be
  recorded without a redeploy (files, restart policy, health check, ...).

``share-mnt`` helper containers never trigger a redeploy; their changes are
reported through the update-only policy instead.
"""
import logging
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, List, Optional, Tuple

from workerplan.utils import redact_sensitive_data
from .models import File, NodePlan, PlanChange, Process

logger = logging.getLogger("upgrader.compare")

SHARE_MNT = "share-mnt"

# (field, old value, new value)
Difference = Tuple[str, Any, Any]


@dataclass(frozen=True)
class ComparableProcess:
    """The process fields that force a redeploy besides image, command, env, args and mounts."""
    labels: Optional[Dict[str, str]]
    network_mode: str
    pid_mode: str
    privileged: bool


def for_compare(process: Process) -> ComparableProcess:
    return ComparableProcess(
        labels=process.labels,
        network_mode=process.network_mode,
        pid_mode=process.pid_mode,
        privileged=process.privileged,
    )


def is_share_mnt(process_name: str) -> bool:
    """Whether the process is a share-mnt helper container."""
    return SHARE_MNT in process_name


def _unordered_changed(olds: Optional[List[str]], news: Optional[List[str]]) -> bool:
    # Duplicates collapse; None and [] are the same set.
    return set(olds or []) != set(news or [])


def _ordered_changed(olds: Optional[List[str]], news: Optional[List[str]]) -> bool:
    if not olds and not news:
        return False
    return olds != news


def _loggable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    return redact_sensitive_data(value)


def _emit_change(check: str, name: str, field: str, old: Any = None, new: Any = None) -> None:
    old, new = _loggable(old), _loggable(new)
    logger.info(
        "%s changed for [%s] old: %s new: %s", field, name, old, new,
        extra={'change': {'check': check, 'process': name, 'field': field, 'old': old, 'new': new}},
    )


def process_difference(old: Process, new: Process) -> Optional[Difference]:
    """Return the first redeploy-relevant difference between two processes, if any."""
    if old.image != new.image:
        return 'image', old.image, new.image

    for field in ('command', 'env', 'args'):
        olds, news = getattr(old, field), getattr(new, field)
        if _unordered_changed(olds, news):
            return field, olds, news

    for field in ('binds', 'volumes_from', 'publish'):
        olds, news = getattr(old, field), getattr(new, field)
        if _ordered_changed(olds, news):
            return field, olds, news

    old_cmp, new_cmp = for_compare(old), for_compare(new)
    if old_cmp != new_cmp:
        return 'process', old_cmp, new_cmp

    return None


def process_changed(old: Process, new: Process) -> bool:
    """Whether redeploying ``new`` in place of ``old`` would be observably different."""
    difference = process_difference(old, new)
    if difference is None:
        return False
    _emit_change('process', new.name, *difference)
    return True


def _upgrade_difference(new_plan: Optional[NodePlan], old_plan: Optional[NodePlan]) -> Optional[Tuple[str, Difference]]:
    if new_plan is None or old_plan is None:
        return '*', ('plan', old_plan is not None, new_plan is not None)

    new_processes = new_plan.processes
    old_processes = old_plan.processes

    if len(new_processes) != len(old_processes):
        return '*', ('number of processes', len(old_processes), len(new_processes))

    for name in new_processes:
        if is_share_mnt(name):
            continue
        if name not in old_processes:
            return name, ('presence', False, True)

    return None


def upgrade_required(new_plan: Optional[NodePlan], old_plan: Optional[NodePlan]) -> bool:
    """Whether the node's containers must be redeployed to apply ``new_plan``.

    A missing plan on either side always requires an upgrade. Processes whose
    name contains ``share-mnt`` are ignored.
    """
    result = _upgrade_difference(new_plan, old_plan)
    if result is not None:
        name, difference = result
        _emit_change('upgrade', name, *difference)
        return True

    for name, new_process in new_plan.processes.items():
        if is_share_mnt(name):
            continue
        if process_changed(old_plan.processes[name], new_process):
            return True

    return False


def _file_names(files: Optional[List[File]]) -> Optional[List[str]]:
    return None if files is None else [f.name for f in files]


def _update_difference(new_plan: Optional[NodePlan], old_plan: Optional[NodePlan]) -> Optional[Tuple[str, Difference]]:
    if new_plan is None or old_plan is None:
        return '*', ('plan', old_plan is not None, new_plan is not None)

    if new_plan.files != old_plan.files:
        return '*', ('files', _file_names(old_plan.files), _file_names(new_plan.files))

    # Only processes present in both plans are compared.
    for name, new_process in new_plan.processes.items():
        old_process = old_plan.processes.get(name)
        if old_process is None:
            continue

        if old_process.name != new_process.name:
            return name, ('name', old_process.name, new_process.name)
        if old_process.health_check.url != new_process.health_check.url:
            return name, ('healthCheck.url', old_process.health_check.url, new_process.health_check.url)
        if old_process.restart_policy != new_process.restart_policy:
            return name, ('restartPolicy', old_process.restart_policy, new_process.restart_policy)
        if old_process.image_registry_auth_config != new_process.image_registry_auth_config:
            return name, ('imageRegistryAuthConfig', '[REDACTED]', '[REDACTED]')

        if is_share_mnt(name):
            difference = process_difference(old_process, new_process)
            if difference is not None:
                return name, difference

    return None


def update_only_required(new_plan: Optional[NodePlan], old_plan: Optional[NodePlan]) -> bool:
    """Whether ``new_plan`` must be recorded on the node even though no redeploy is needed."""
    result = _update_difference(new_plan, old_plan)
    if result is None:
        return False
    name, difference = result
    _emit_change('update', name, *difference)
    return True


def plan_change(upgrade: bool, update_only: bool) -> PlanChange:
    """Map the results of the two policies to a single classification."""
    if upgrade:
        return PlanChange.REDEPLOY
    if update_only:
        return PlanChange.UPDATE
    return PlanChange.NONE


def classify_plan_change(new_plan: Optional[NodePlan], old_plan: Optional[NodePlan]) -> PlanChange:
    """Classify the delta between ``new_plan`` and the last applied ``old_plan``."""
    if upgrade_required(new_plan, old_plan):
        return PlanChange.REDEPLOY
    return plan_change(False, update_only_required(new_plan, old_plan))
