"""
Graph Validator - Checks that a compiled graph is safe to hand to a renderer.

Catches issues like:
- Duplicate node or edge IDs
- Edges pointing at missing nodes
- Contained nodes whose parent is missing or is not a server group
- Top-level-only kinds (identifiers, server groups) placed inside a parent
- The same identifier emitted twice
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from channel_graph.compiler.types import Graph, Node, NodeKind


class ValidationSeverity(Enum):
    ERROR = "error"      # Graph will not render correctly
    WARNING = "warning"  # Graph renders but has issues
    INFO = "info"        # Worth knowing


@dataclass
class ValidationIssue:
    """A single validation issue found in the graph"""
    severity: ValidationSeverity
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    node_id: Optional[str] = None
    edge_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_id": self.edge_id,
        }


@dataclass
class GraphValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.INFO)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        status = "Valid" if self.is_valid else "Invalid"
        return (
            f"{status} | "
            f"Errors: {self.error_count}, Warnings: {self.warning_count}, Info: {self.info_count}"
        )


class GraphValidator:
    """
    Validates compiled topology graphs.

    Usage:
        result = GraphValidator().validate(graph)
        if not result.is_valid:
            for issue in result.issues:
                log.error("[%s] %s", issue.code, issue.message)
    """

    TOP_LEVEL_KINDS = {NodeKind.SERVER_GROUP, NodeKind.IDENTIFIER}
    CONTAINED_KINDS = {NodeKind.SERVER_HEADER, NodeKind.CHANNEL}

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def validate(self, graph: Graph) -> GraphValidationResult:
        nodes_by_id: Dict[str, Node] = {}
        for node in graph.nodes:
            nodes_by_id.setdefault(node.id, node)

        issues: List[ValidationIssue] = []
        issues.extend(self._check_duplicate_node_ids(graph))
        issues.extend(self._check_duplicate_edge_ids(graph))
        issues.extend(self._check_missing_edge_references(graph, nodes_by_id))
        issues.extend(self._check_containment(graph, nodes_by_id))
        issues.extend(self._check_duplicate_identifiers(graph))
        issues.extend(self._check_unused_identifiers(graph))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == ValidationSeverity.WARNING for i in issues)

        is_valid = not has_errors
        if self.strict_mode:
            is_valid = not has_errors and not has_warnings

        return GraphValidationResult(
            is_valid=is_valid,
            issues=issues,
            stats=self._calculate_stats(graph),
        )

    def _check_duplicate_node_ids(self, graph: Graph) -> List[ValidationIssue]:
        counts: Dict[str, int] = defaultdict(int)
        for node in graph.nodes:
            counts[node.id] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="DUPLICATE_NODE_ID",
                message=f"Duplicate node ID '{node_id}' appears {count} times",
                node_id=node_id,
            )
            for node_id, count in counts.items()
            if count > 1
        ]

    def _check_duplicate_edge_ids(self, graph: Graph) -> List[ValidationIssue]:
        counts: Dict[str, int] = defaultdict(int)
        for edge in graph.edges:
            counts[edge.id] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="DUPLICATE_EDGE_ID",
                message=f"Duplicate edge ID '{edge_id}' appears {count} times",
                edge_id=edge_id,
            )
            for edge_id, count in counts.items()
            if count > 1
        ]

    def _check_missing_edge_references(
        self, graph: Graph, nodes_by_id: Dict[str, Node]
    ) -> List[ValidationIssue]:
        issues = []
        for edge in graph.edges:
            if edge.source not in nodes_by_id:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_SOURCE_NODE",
                    message=f"Edge '{edge.id}' references non-existent source node '{edge.source}'",
                    edge_id=edge.id,
                ))
            if edge.target not in nodes_by_id:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_TARGET_NODE",
                    message=f"Edge '{edge.id}' references non-existent target node '{edge.target}'",
                    edge_id=edge.id,
                ))
        return issues

    def _check_containment(
        self, graph: Graph, nodes_by_id: Dict[str, Node]
    ) -> List[ValidationIssue]:
        issues = []
        for node in graph.nodes:
            if node.kind in self.TOP_LEVEL_KINDS and node.parent_id is not None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="UNEXPECTED_PARENT",
                    message=f"{node.kind.value} node '{node.id}' must not have a parent",
                    node_id=node.id,
                ))
                continue

            if node.kind not in self.CONTAINED_KINDS:
                continue

            parent = nodes_by_id.get(node.parent_id) if node.parent_id else None
            if parent is None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_PARENT",
                    message=f"{node.kind.value} node '{node.id}' has no existing parent group",
                    node_id=node.id,
                ))
            elif parent.kind != NodeKind.SERVER_GROUP:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="PARENT_NOT_GROUP",
                    message=(
                        f"{node.kind.value} node '{node.id}' is contained in "
                        f"{parent.kind.value} '{parent.id}'"
                    ),
                    node_id=node.id,
                ))
        return issues

    def _check_duplicate_identifiers(self, graph: Graph) -> List[ValidationIssue]:
        counts: Dict[str, int] = defaultdict(int)
        for node in graph.nodes:
            if node.kind == NodeKind.IDENTIFIER:
                counts[node.payload.label] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="DUPLICATE_IDENTIFIER",
                message=f"Identifier '{label}' is emitted {count} times",
            )
            for label, count in counts.items()
            if count > 1
        ]

    def _check_unused_identifiers(self, graph: Graph) -> List[ValidationIssue]:
        connected = set()
        for edge in graph.edges:
            connected.add(edge.source)
            connected.add(edge.target)
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="UNUSED_IDENTIFIER",
                message=f"Identifier node '{node.id}' has no TX/RX edge",
                node_id=node.id,
            )
            for node in graph.nodes
            if node.kind == NodeKind.IDENTIFIER and node.id not in connected
        ]

    def _calculate_stats(self, graph: Graph) -> Dict[str, int]:
        kind_counts: Dict[NodeKind, int] = defaultdict(int)
        for node in graph.nodes:
            kind_counts[node.kind] += 1

        return {
            "nodes": len(graph.nodes),
            "edges": len(graph.edges),
            "servers": kind_counts[NodeKind.SERVER_GROUP],
            "channels": kind_counts[NodeKind.CHANNEL],
            "identifiers": kind_counts[NodeKind.IDENTIFIER],
            "top_level_nodes": sum(1 for n in graph.nodes if n.parent_id is None),
        }


def validate_graph(graph: Graph, strict: bool = False) -> GraphValidationResult:
    """Convenience function to validate a graph."""
    return GraphValidator(strict_mode=strict).validate(graph)


def raise_on_errors(graph: Graph) -> None:
    """Validate graph and raise ValueError if errors found."""
    result = validate_graph(graph)
    if not result.is_valid:
        error_messages = [
            f"[{i.code}] {i.message}"
            for i in result.issues
            if i.severity == ValidationSeverity.ERROR
        ]
        raise ValueError(
            f"Graph validation failed with {result.error_count} errors:\n" +
            "\n".join(error_messages)
        )
