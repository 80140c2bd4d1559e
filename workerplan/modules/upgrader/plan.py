"""Node plan construction for worker upgrades."""
import copy
import logging
from typing import Any, Dict, Tuple

from .env import find_env_var, upsert_env_var
from .errors import (
    AugmentationError,
    HostLookupError,
    PlanGenerationError,
    PlanNotFoundError,
    TokenError,
)
from .interfaces import (
    ConfigAssembler,
    CredentialAugmenter,
    HostInspector,
    OptionsResolver,
    PlanEngine,
    Processes,
    TokenService,
)
from .models import Cluster, HostFacts, Node, NodePlan, NodeRole
from .service_options import WINDOWS, resolve_service_options

logger = logging.getLogger("upgrader.plan")

RESTORE_KEY = "CATTLE_ETCD_RESTORE_GENERATION"
RESTORE_ANNOTATION = "rke.cattle.io/restore"
KUBELET_PROCESS = "kubelet"

COMBINED_ROLES = [NodeRole.WORKER.value, NodeRole.ETCD.value, NodeRole.CONTROLPLANE.value]


class PlanBuilder:
    """Builds the desired plan for a node from the cluster's applied configuration.

    Every collaborator is called synchronously and failures are raised as
    ``PlanError`` subclasses; no plan is returned unless it is complete.
    """

    def __init__(
        self,
        engine: PlanEngine,
        host_inspector: HostInspector,
        augmenter: CredentialAugmenter,
        assembler: ConfigAssembler,
        token_service: TokenService,
        options_resolver: OptionsResolver,
        ctx: Any = None,
    ):
        """Initialize the plan builder.

        Args:
            engine: Generates raw per-address plans from a cluster configuration
            host_inspector: Reports runtime facts for a node's host
            augmenter: Injects credentials and taints into processes
            assembler: Assembles and filters the cluster configuration
            token_service: Issues the cluster-scoped token
            options_resolver: Looks up per-version service options
            ctx: Caller context handed unchanged to the engine
        """
        self.engine = engine
        self.host_inspector = host_inspector
        self.augmenter = augmenter
        self.assembler = assembler
        self.token_service = token_service
        self.options_resolver = options_resolver
        self.ctx = ctx

    def control_plane_plan(self, node: Node, cluster: Cluster) -> NodePlan:
        """Build the plan for a node serving the worker, etcd and control plane roles.

        The cluster configuration is reduced to a single copy of the node
        whose roles are forced to all three; the node itself is left untouched.

        Raises:
            PlanError: If any step fails
        """
        config = self._assemble_config(cluster)
        synthetic = node.node_config.model_copy(update={'role': list(COMBINED_ROLES)}, deep=True)
        config['nodes'] = [synthetic.model_dump(by_alias=True, exclude_none=True)]

        host_facts, facts = self._host_facts(node)
        logger.debug(f"getDockerInfo for node [{node.name}] dockerInfo [{facts.docker_root_dir}]")

        generated = self._generate(config, host_facts, facts)
        token = self._cluster_token(cluster)
        raw_plan = self._find_plan(generated, node.address, 'controlplane')

        processes = self._augment(token, raw_plan.processes, False, node, cluster)
        processes = self.augmenter.inject_taints(processes, node.node_config.taints)

        return NodePlan(processes=processes)

    def worker_plan(self, node: Node, cluster: Cluster) -> NodePlan:
        """Build the plan for a worker node.

        Windows hosts get a credential-free process rewrite, other hosts get
        credentials injected. The etcd restore marker is then applied to the
        kubelet process.

        Raises:
            PlanError: If any step fails
        """
        host_facts, facts = self._host_facts(node)

        config = self._assemble_config(cluster)
        try:
            config = self.assembler.filter_for_node(config, node)
        except Exception as e:
            raise PlanGenerationError(f"[workerplan] failed to filter configuration for node {node.name}: {e}") from e
        logger.debug(f"[workerplan] The number of nodes sent to the plan: {len(config.get('nodes') or [])}")

        generated = self._generate(config, host_facts, facts)
        logger.debug(f"[workerplan] getDockerInfo for node [{node.name}] dockerInfo [{facts.docker_root_dir}]")

        token = self._cluster_token(cluster)
        raw_plan = self._find_plan(generated, node.address, 'workerplan')

        if facts.os_type == WINDOWS:
            processes = self.augmenter.windows_augment(raw_plan.processes)
        else:
            processes = self._augment(token, raw_plan.processes, True, node, cluster)

        processes = apply_restore_marker(processes, node, cluster)
        processes = self.augmenter.inject_taints(processes, node.node_config.taints)

        return NodePlan(processes=processes, files=raw_plan.files)

    def _assemble_config(self, cluster: Cluster) -> Dict[str, Any]:
        try:
            return self.assembler.assemble_config(cluster, copy.deepcopy(cluster.applied_spec))
        except Exception as e:
            raise PlanGenerationError(f"failed to assemble configuration for cluster {cluster.name}: {e}") from e

    def _host_facts(self, node: Node) -> Tuple[Dict[str, HostFacts], HostFacts]:
        try:
            host_facts = self.host_inspector.get_host_facts(node)
        except Exception as e:
            raise HostLookupError(f"failed to get host facts for node {node.name}: {e}") from e

        facts = host_facts.get(node.address)
        if facts is None:
            raise HostLookupError(f"no host facts for node {node.name} at {node.address}")
        return host_facts, facts

    def _generate(self, config: Dict[str, Any], host_facts: Dict[str, HostFacts], facts: HostFacts) -> Dict[str, NodePlan]:
        service_options = resolve_service_options(
            self.options_resolver, config.get('kubernetesVersion', ''), facts.os_type
        )
        try:
            return self.engine.generate(self.ctx, config, host_facts, service_options)
        except Exception as e:
            raise PlanGenerationError(f"failed to generate plan: {e}") from e

    def _cluster_token(self, cluster: Cluster) -> str:
        try:
            return self.token_service.get_or_create_cluster_token(cluster.name)
        except Exception as e:
            raise TokenError(f"failed to create or get cluster token for share-mnt: {e}") from e

    @staticmethod
    def _find_plan(generated: Dict[str, NodePlan], address: str, context: str) -> NodePlan:
        raw_plan = generated.get(address)
        if raw_plan is None:
            raise PlanNotFoundError(address, context)
        return raw_plan

    def _augment(self, token: str, processes: Processes, is_worker: bool, node: Node, cluster: Cluster) -> Processes:
        try:
            return self.augmenter.augment(
                token, processes, is_worker, node.node_config.hostname_override, cluster
            )
        except Exception as e:
            raise AugmentationError(f"failed to augment processes for node {node.name}: {e}") from e


def apply_restore_marker(processes: Processes, node: Node, cluster: Cluster) -> Processes:
    """Set or carry forward the etcd restore marker on the kubelet process.

    While a restore is in progress the marker is set to the cluster's node
    version so that kubelet is redeployed. Otherwise an existing marker from
    the last applied plan is carried forward unchanged.
    """
    kubelet = processes.get(KUBELET_PROCESS)
    if kubelet is None:
        return processes

    if cluster.annotations.get(RESTORE_ANNOTATION) == "true":
        new_env_var = f"{RESTORE_KEY}={cluster.node_version}"
        logger.debug(f"[workerplan] adding/updating env var [{new_env_var}] on node [{node.name}]")
    else:
        old_plan = node.applied_plan
        old_kubelet = old_plan.processes.get(KUBELET_PROCESS) if old_plan is not None else None
        new_env_var = find_env_var(old_kubelet, RESTORE_KEY)
        if new_env_var is None:
            return processes

    patched = dict(processes)
    patched[KUBELET_PROCESS] = upsert_env_var(kubelet, new_env_var)
    return patched
