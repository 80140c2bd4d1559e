import os
from pathlib import Path
from typing import Optional

from kubernetes import config

from ..config import Config


def load_kubeconfig(path: Optional[str] = None) -> str:
    """
    Load the kubeconfig for the management cluster.

    Uses the given path, then the KUBECONFIG setting, then KUBECONFIG_CONTENT.
    Returns the actual path used to load the kubeconfig.
    """
    path = path or Config.KUBECONFIG

    if path:
        resolved = Path(os.path.expanduser(path)).resolve()
        if not resolved.exists():
            raise FileNotFoundError(f"Kubeconfig not found: {resolved}")
        config.load_kube_config(config_file=str(resolved))
        return str(resolved)

    # CI/CD secret-based loading
    if "KUBECONFIG_CONTENT" in os.environ:
        temp_path = "/tmp/workerplan-kubeconfig.yaml"
        with open(temp_path, "w") as f:
            f.write(os.environ["KUBECONFIG_CONTENT"])
        config.load_kube_config(config_file=temp_path)
        return temp_path

    raise ValueError("No kubeconfig path provided and KUBECONFIG_CONTENT is not set.")
