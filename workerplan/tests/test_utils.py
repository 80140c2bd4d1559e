from unittest import mock

import pytest

from workerplan.utils import redact_sensitive_data
from workerplan.utils.kube import load_kubeconfig


def test_redact_env_strings():
    env = ["CATTLE_TOKEN=abc", "CATTLE_SERVER=https://rancher.example.com", "NO_VALUE"]
    assert redact_sensitive_data(env) == [
        "CATTLE_TOKEN=[REDACTED]",
        "CATTLE_SERVER=https://rancher.example.com",
        "NO_VALUE",
    ]


def test_redact_nested_dicts():
    data = {"auth": {"password": "hunter2", "user": "admin"}, "items": [{"api_key": "k"}]}
    assert redact_sensitive_data(data) == {
        "auth": {"password": "[REDACTED]", "user": "admin"},
        "items": [{"api_key": "[REDACTED]"}],
    }


def test_redact_leaves_other_values():
    assert redact_sensitive_data(3) == 3
    assert redact_sensitive_data(None) is None


def test_load_kubeconfig_from_path(tmp_path):
    kubeconfig = tmp_path / "kubeconfig.yaml"
    kubeconfig.write_text("apiVersion: v1\n")
    with mock.patch("workerplan.utils.kube.config.load_kube_config") as load:
        assert load_kubeconfig(str(kubeconfig)) == str(kubeconfig.resolve())
    load.assert_called_once_with(config_file=str(kubeconfig.resolve()))


def test_load_kubeconfig_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_kubeconfig(str(tmp_path / "missing.yaml"))


def test_load_kubeconfig_requires_source(monkeypatch):
    monkeypatch.delenv("KUBECONFIG_CONTENT", raising=False)
    monkeypatch.setattr("workerplan.utils.kube.Config.KUBECONFIG", "")
    with pytest.raises(ValueError):
        load_kubeconfig()
