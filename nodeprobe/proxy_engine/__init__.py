from .purity_tests import (
    PurityTest, PortReachabilityTest, DnsConsistencyTest,
    ResponseStabilityTest, ConnectionSuccessRateTest,
    PuritySuite, ProbeTarget, build_default_tests
)
from .quality_scoring import ScoreAggregator, ScoreResult, TestOutcome
from .purity_manager import (
    PurityManager, create_purity_manager,
    get_global_purity_manager, set_global_purity_manager
)

__all__ = [
    "PurityTest", "PortReachabilityTest", "DnsConsistencyTest",
    "ResponseStabilityTest", "ConnectionSuccessRateTest",
    "PuritySuite", "ProbeTarget", "build_default_tests",
    "ScoreAggregator", "ScoreResult", "TestOutcome",
    "PurityManager", "create_purity_manager",
    "get_global_purity_manager", "set_global_purity_manager"
]
