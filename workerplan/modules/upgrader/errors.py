"""Exceptions raised while building node plans."""


class PlanError(Exception):
    """Base class for node plan errors."""
    pass


class HostLookupError(PlanError):
    """Raised when runtime facts for a host cannot be obtained."""
    pass


class PlanGenerationError(PlanError):
    """Raised when the cluster configuration cannot be assembled or the engine fails."""
    pass


class ServiceOptionsError(PlanGenerationError):
    """Raised when service options for a Kubernetes version cannot be resolved."""
    pass


class TokenError(PlanError):
    """Raised when the cluster token cannot be obtained."""
    pass


class PlanNotFoundError(PlanError):
    """Raised when the generated plan has no entry for the node's address."""

    def __init__(self, address: str, context: str = ''):
        self.address = address
        prefix = f"[{context}] " if context else ''
        super().__init__(f"{prefix}failed to find plan for {address}")


class AugmentationError(PlanError):
    """Raised when credentials cannot be injected into the node's processes."""
    pass
