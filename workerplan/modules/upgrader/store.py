"""Read-only access to cluster and node objects on the management API."""
import logging
from typing import Any, Dict, List, Optional

from kubernetes import client
from kubernetes.client.rest import ApiException

from .models import Cluster, Node, NodeConfig, NodePlan

logger = logging.getLogger("upgrader.store")

GROUP = "management.cattle.io"
VERSION = "v3"


def cluster_from_object(obj: Dict[str, Any]) -> Cluster:
    metadata = obj.get('metadata') or {}
    status = obj.get('status') or {}
    applied_spec = status.get('appliedSpec') or {}
    return Cluster(
        name=metadata['name'],
        annotations=metadata.get('annotations') or {},
        node_version=status.get('nodeVersion') or 0,
        applied_spec=applied_spec.get('rancherKubernetesEngineConfig') or {},
    )


def node_from_object(obj: Dict[str, Any]) -> Optional[Node]:
    """Convert a node object, or return None if it has no node config yet."""
    status = obj.get('status') or {}
    node_config = status.get('rkeNode') or status.get('nodeConfig')
    if not node_config:
        return None

    node_plan = (status.get('nodePlan') or {}).get('plan')
    return Node(
        name=obj['metadata']['name'],
        node_config=NodeConfig.model_validate(node_config),
        applied_plan=NodePlan.model_validate(node_plan) if node_plan else None,
    )


class ClusterStore:
    """Fetches clusters and their nodes through the Kubernetes custom objects API."""

    def __init__(self, api: Optional[client.CustomObjectsApi] = None):
        self.api = api or client.CustomObjectsApi()

    def get_cluster(self, name: str) -> Cluster:
        obj = self.api.get_cluster_custom_object(GROUP, VERSION, "clusters", name)
        return cluster_from_object(obj)

    def get_node(self, cluster_name: str, node_name: str) -> Optional[Node]:
        try:
            obj = self.api.get_namespaced_custom_object(GROUP, VERSION, cluster_name, "nodes", node_name)
        except ApiException as e:
            if e.status == 404:
                return None
            raise
        return node_from_object(obj)

    def list_nodes(self, cluster_name: str) -> List[Node]:
        result = self.api.list_namespaced_custom_object(GROUP, VERSION, cluster_name, "nodes")
        nodes = []
        for obj in result.get('items', []):
            node = node_from_object(obj)
            if node is None:
                logger.debug(f"Skipping node {obj['metadata']['name']} without node config")
                continue
            nodes.append(node)
        return nodes
