"""
nodeprobe Custom Exceptions
Error taxonomy for resolution, network, provider and scoring failures
"""


class NodeProbeError(Exception):
    """Base exception for all nodeprobe errors"""
    pass


class ConfigurationError(NodeProbeError):
    """Configuration-related errors"""
    pass


class ResolutionError(NodeProbeError):
    """Hostname could not be resolved"""

    def __init__(self, address: str, reason: str = ""):
        self.address = address
        self.reason = reason
        message = f"Could not resolve {address}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ProbeTimeoutError(NodeProbeError):
    """Connect or HTTP request exceeded its time bound"""
    pass


class ProviderError(NodeProbeError):
    """Geolocation provider returned an unusable response"""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class ScoringError(NodeProbeError):
    """Unexpected fault while assembling a purity score"""
    pass
