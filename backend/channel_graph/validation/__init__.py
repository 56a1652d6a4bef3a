"""
Validation of compiled topology graphs.
"""

from channel_graph.validation.graph_validator import (
    GraphValidationResult,
    GraphValidator,
    ValidationIssue,
    ValidationSeverity,
    raise_on_errors,
    validate_graph,
)

__all__ = [
    "GraphValidationResult",
    "GraphValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "raise_on_errors",
    "validate_graph",
]
