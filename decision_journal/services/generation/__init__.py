from decision_journal.services.generation.generators import (
    AlternativeGenerator,
    GatewayAlternativeGenerator,
    GeneratedAlternative,
    ProxyAlternativeGenerator,
    SimulatedAlternativeGenerator,
    build_generator,
)
from decision_journal.services.generation.parsing import parse_alternatives
from decision_journal.services.generation.proxy import AlternativeProxy

__all__ = [
    "AlternativeGenerator",
    "AlternativeProxy",
    "GatewayAlternativeGenerator",
    "GeneratedAlternative",
    "ProxyAlternativeGenerator",
    "SimulatedAlternativeGenerator",
    "build_generator",
    "parse_alternatives",
]
