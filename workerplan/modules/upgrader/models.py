"""
Data models for worker upgrade planning.

Field names are snake_case in Python and camelCase on the wire so that node
plans stored on the management API parse directly.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeRole(str, Enum):
    """Node roles understood by the plan generation engine."""
    WORKER = 'worker'
    ETCD = 'etcd'
    CONTROLPLANE = 'controlplane'


class PlanChange(str, Enum):
    """How a freshly built plan differs from the last applied one."""
    REDEPLOY = 'redeploy'
    UPDATE = 'update'
    NONE = 'none'


class HealthCheck(_WireModel):
    url: str = ''


class Process(_WireModel):
    """A named container on a node."""
    name: str = ''
    image: str = ''
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None
    env: Optional[List[str]] = None
    binds: Optional[List[str]] = None
    volumes_from: Optional[List[str]] = None
    publish: Optional[List[str]] = None
    labels: Optional[Dict[str, str]] = None
    network_mode: str = ''
    pid_mode: str = ''
    privileged: bool = False
    health_check: HealthCheck = Field(default_factory=HealthCheck)
    restart_policy: str = ''
    image_registry_auth_config: str = ''


class File(_WireModel):
    name: str = ''
    contents: str = ''


class NodePlan(_WireModel):
    """Desired processes and files for one node."""
    processes: Dict[str, Process] = Field(default_factory=dict)
    files: Optional[List[File]] = None


class Taint(_WireModel):
    key: str = ''
    value: str = ''
    effect: str = ''


class NodeConfig(_WireModel):
    """A node entry as it appears in the cluster configuration's node list."""
    model_config = ConfigDict(extra='allow')

    address: str
    role: List[str] = Field(default_factory=list)
    hostname_override: str = ''
    taints: List[Taint] = Field(default_factory=list)


class HostFacts(_WireModel):
    """Runtime facts about a host, as reported by the container runtime."""
    os_type: str = 'linux'
    docker_root_dir: str = ''


class Node(BaseModel):
    """A cluster node and its last applied plan."""
    name: str
    node_config: NodeConfig
    applied_plan: Optional[NodePlan] = None

    @property
    def address(self) -> str:
        return self.node_config.address


class Cluster(BaseModel):
    """A cluster and the parts of its status the planner reads."""
    name: str
    annotations: Dict[str, str] = Field(default_factory=dict)
    node_version: int = 0
    applied_spec: Dict[str, Any] = Field(default_factory=dict)
