"""Contracts for the collaborators the plan builder delegates to."""
from typing import Any, Dict, List, Optional, Protocol

from .models import Cluster, HostFacts, Node, NodePlan, Process, Taint

Processes = Dict[str, Process]


class PlanEngine(Protocol):
    def generate(
        self,
        ctx: Any,
        config: Dict[str, Any],
        host_facts: Dict[str, HostFacts],
        service_options: Dict[str, Any],
    ) -> Dict[str, NodePlan]:
        """Return the generated plan for every node address in ``config``."""
        ...


class HostInspector(Protocol):
    def get_host_facts(self, node: Node) -> Dict[str, HostFacts]:
        ...


class CredentialAugmenter(Protocol):
    def augment(
        self,
        token: str,
        processes: Processes,
        is_worker: bool,
        hostname_override: str,
        cluster: Cluster,
    ) -> Processes:
        ...

    def windows_augment(self, processes: Processes) -> Processes:
        ...

    def inject_taints(self, processes: Processes, taints: List[Taint]) -> Processes:
        ...


class ConfigAssembler(Protocol):
    def assemble_config(self, cluster: Cluster, applied_spec: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def filter_for_node(self, config: Dict[str, Any], node: Node) -> Dict[str, Any]:
        ...


class TokenService(Protocol):
    def get_or_create_cluster_token(self, cluster_name: str) -> str:
        ...


class OptionsResolver(Protocol):
    def resolve_options(self, k8s_version: str, os_kind: str) -> Optional[Dict[str, Any]]:
        ...
