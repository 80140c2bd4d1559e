"""Environment variable helpers for node plan processes."""
from typing import Optional

from .models import Process


def env_key(env_var: str) -> str:
    """Return the key part of a ``KEY=VALUE`` string."""
    return env_var.split('=', 1)[0]


def find_env_var(process: Optional[Process], key: str) -> Optional[str]:
    """Return the first ``KEY=VALUE`` entry of ``process`` whose key is ``key``."""
    if process is None:
        return None
    for env in process.env or []:
        if env_key(env) == key:
            return env
    return None


def upsert_env_var(process: Process, new_env_var: str) -> Process:
    """Add or overwrite an env var on a process.

    An existing entry with the same key is replaced in place, otherwise the
    new entry is appended. Processes without a name or image are returned
    unchanged, as is the process when ``new_env_var`` is empty.

    Args:
        process: The process to patch
        new_env_var: A ``KEY=VALUE`` string

    Returns:
        Process: A copy of ``process`` with the env var set
    """
    if not process.name or not process.image or not new_env_var:
        return process

    target_key = env_key(new_env_var)
    env = list(process.env or [])
    for i, existing in enumerate(env):
        if env_key(existing) == target_key:
            env[i] = new_env_var
            break
    else:
        env.append(new_env_var)

    return process.model_copy(update={'env': env})
