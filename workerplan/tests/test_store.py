from unittest import mock

import pytest
from kubernetes.client.rest import ApiException

from workerplan.modules.upgrader.store import ClusterStore, cluster_from_object, node_from_object

CLUSTER_OBJECT = {
    "metadata": {"name": "c-abc12", "annotations": {"rke.cattle.io/restore": "true"}},
    "status": {
        "nodeVersion": 7,
        "appliedSpec": {
            "rancherKubernetesEngineConfig": {"kubernetesVersion": "v1.27.6-rancher1-1", "nodes": []},
        },
    },
}

NODE_OBJECT = {
    "metadata": {"name": "m-7f8d2", "namespace": "c-abc12"},
    "status": {
        "rkeNode": {
            "address": "10.0.0.11",
            "role": ["worker"],
            "hostnameOverride": "worker-1",
            "user": "docker",
            "taints": [{"key": "dedicated", "value": "gpu", "effect": "NoSchedule"}],
        },
        "nodePlan": {
            "plan": {
                "processes": {
                    "kubelet": {
                        "name": "kubelet",
                        "image": "rancher/hyperkube:v1.27.6-rancher1",
                        "env": ["CATTLE_ETCD_RESTORE_GENERATION=3"],
                        "volumesFrom": ["service-sidekick"],
                        "healthCheck": {"url": "https://localhost:10250/healthz"},
                        "restartPolicy": "always",
                    },
                },
            },
        },
    },
}


def test_cluster_from_object():
    cluster = cluster_from_object(CLUSTER_OBJECT)
    assert cluster.name == "c-abc12"
    assert cluster.node_version == 7
    assert cluster.annotations["rke.cattle.io/restore"] == "true"
    assert cluster.applied_spec["kubernetesVersion"] == "v1.27.6-rancher1-1"


def test_node_from_object():
    node = node_from_object(NODE_OBJECT)
    assert node.name == "m-7f8d2"
    assert node.address == "10.0.0.11"
    assert node.node_config.hostname_override == "worker-1"
    assert node.node_config.taints[0].effect == "NoSchedule"
    assert node.node_config.model_dump(by_alias=True)["user"] == "docker"

    kubelet = node.applied_plan.processes["kubelet"]
    assert kubelet.volumes_from == ["service-sidekick"]
    assert kubelet.health_check.url == "https://localhost:10250/healthz"
    assert kubelet.restart_policy == "always"
    assert node.applied_plan.files is None


def test_node_without_config():
    assert node_from_object({"metadata": {"name": "m-new"}, "status": {}}) is None


def test_node_without_plan():
    obj = {"metadata": {"name": "m-1"}, "status": {"rkeNode": {"address": "10.0.0.12"}}}
    assert node_from_object(obj).applied_plan is None


def test_store_get_cluster():
    api = mock.Mock()
    api.get_cluster_custom_object.return_value = CLUSTER_OBJECT
    cluster = ClusterStore(api).get_cluster("c-abc12")
    api.get_cluster_custom_object.assert_called_once_with("management.cattle.io", "v3", "clusters", "c-abc12")
    assert cluster.node_version == 7


def test_store_get_node():
    api = mock.Mock()
    api.get_namespaced_custom_object.return_value = NODE_OBJECT
    node = ClusterStore(api).get_node("c-abc12", "m-7f8d2")
    api.get_namespaced_custom_object.assert_called_once_with(
        "management.cattle.io", "v3", "c-abc12", "nodes", "m-7f8d2"
    )
    assert node.address == "10.0.0.11"


def test_store_get_missing_node():
    api = mock.Mock()
    api.get_namespaced_custom_object.side_effect = ApiException(status=404, reason="Not Found")
    assert ClusterStore(api).get_node("c-abc12", "m-gone") is None


def test_store_get_node_error():
    api = mock.Mock()
    api.get_namespaced_custom_object.side_effect = ApiException(status=500, reason="Internal Server Error")
    with pytest.raises(ApiException):
        ClusterStore(api).get_node("c-abc12", "m-7f8d2")


def test_store_list_nodes_skips_unconfigured():
    api = mock.Mock()
    api.list_namespaced_custom_object.return_value = {
        "items": [NODE_OBJECT, {"metadata": {"name": "m-new"}, "status": {}}],
    }
    nodes = ClusterStore(api).list_nodes("c-abc12")
    assert [n.name for n in nodes] == ["m-7f8d2"]
