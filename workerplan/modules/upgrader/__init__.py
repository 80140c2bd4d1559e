"""
Worker Upgrade Planning Module

Builds the desired container plan for a cluster node and decides whether it
differs from the node's last applied plan enough to redeploy, to record
without redeploying, or not at all.
"""

from .models import (
    Cluster,
    File,
    HealthCheck,
    HostFacts,
    Node,
    NodeConfig,
    NodePlan,
    NodeRole,
    PlanChange,
    Process,
    Taint,
)
from .errors import (
    AugmentationError,
    HostLookupError,
    PlanError,
    PlanGenerationError,
    PlanNotFoundError,
    ServiceOptionsError,
    TokenError,
)
from .compare import (
    classify_plan_change,
    plan_change,
    process_changed,
    update_only_required,
    upgrade_required,
)
from .env import upsert_env_var
from .plan import PlanBuilder, apply_restore_marker
from .service_options import MetadataOptionsResolver, resolve_service_options

__all__ = [
    # Models
    'Cluster',
    'File',
    'HealthCheck',
    'HostFacts',
    'Node',
    'NodeConfig',
    'NodePlan',
    'NodeRole',
    'PlanChange',
    'Process',
    'Taint',

    # Errors
    'AugmentationError',
    'HostLookupError',
    'PlanError',
    'PlanGenerationError',
    'PlanNotFoundError',
    'ServiceOptionsError',
    'TokenError',

    # Change detection
    'classify_plan_change',
    'plan_change',
    'process_changed',
    'update_only_required',
    'upgrade_required',

    # Plan construction
    'upsert_env_var',
    'PlanBuilder',
    'apply_restore_marker',
    'MetadataOptionsResolver',
    'resolve_service_options',
]
