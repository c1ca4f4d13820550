"""Runs a query through the whole pipeline and describes the resulting plans."""

from __future__ import annotations

from dataclasses import dataclass, field

from .lexer import tokenize
from .metadata import MetadataCatalog
from .optimizer import Optimizer
from .parser import parse
from .plan import (
    ExecutionNode,
    FilterNode,
    JoinNode,
    ProjectionNode,
    TableScanNode,
    build_plan,
)
from .semantic import SemanticValidator
from .strutils import join_fields


@dataclass
class PlanNodeView:
    """A plan node reduced to its label and the views of its children."""

    label: str = ""
    children: list[PlanNodeView] = field(default_factory=list)


@dataclass
class QueryProcessingResult:
    """Everything produced while processing one SQL string."""

    sql: str = ""
    success: bool = False
    error_message: str = ""
    relational_algebra: str = ""
    original_plan: PlanNodeView = field(default_factory=PlanNodeView)
    optimized_plan: PlanNodeView = field(default_factory=PlanNodeView)
    execution_order: list[str] = field(default_factory=list)


def _label(node: ExecutionNode) -> str:
    if isinstance(node, TableScanNode):
        return f"TableScan({node.table_name})"
    if isinstance(node, JoinNode):
        return f"Join({node.condition})"
    if isinstance(node, FilterNode):
        return f"Filter({node.condition})"
    if isinstance(node, ProjectionNode):
        return f"Projection({join_fields(node.fields)})"
    return "UnknownNode"


def build_plan_view(node: ExecutionNode) -> PlanNodeView:
    """Describe ``node`` and its subtree as a tree of labels."""
    if isinstance(node, (TableScanNode, JoinNode, FilterNode, ProjectionNode)):
        return PlanNodeView(_label(node), [build_plan_view(c) for c in node.children])
    return PlanNodeView("UnknownNode")


def subtree_depth(node: ExecutionNode | None) -> int:
    """Number of operator levels above the scans beneath ``node``."""
    if isinstance(node, (FilterNode, ProjectionNode)):
        return 1 + subtree_depth(node.child) if node.child is not None else 0
    if isinstance(node, JoinNode):
        return 1 + max(subtree_depth(node.left), subtree_depth(node.right))
    return 0


def _fill_order(node: ExecutionNode, order: list[str]) -> None:
    if isinstance(node, JoinNode):
        first, second = node.left, node.right
        if first is not None and second is not None:
            if subtree_depth(second) > subtree_depth(first):
                first, second = second, first
        for child in (first, second):
            if child is not None:
                _fill_order(child, order)
        order.append(_label(node))
    elif isinstance(node, (FilterNode, ProjectionNode)):
        if node.child is not None:
            _fill_order(node.child, order)
        order.append(_label(node))
    elif isinstance(node, TableScanNode):
        order.append(_label(node))


def execution_order(node: ExecutionNode) -> list[str]:
    """Labels of the nodes in the order they run.

    Children run before their parent; of a join's two inputs the deeper one
    runs first, the left one on a tie.
    """
    order: list[str] = []
    _fill_order(node, order)
    return order


def relational_algebra(node: ExecutionNode | None) -> str:
    """Write the tree under ``node`` as a relational algebra expression."""
    if node is None:
        return ""
    return _expression(node)


def _expression(node: ExecutionNode) -> str:
    def sub(child: ExecutionNode | None) -> str:
        return _expression(child) if child is not None else "?"

    if isinstance(node, TableScanNode):
        return node.table_name
    if isinstance(node, FilterNode):
        return f"σ[{node.condition}]({sub(node.child)})"
    if isinstance(node, ProjectionNode):
        return f"π[{join_fields(node.fields)}]({sub(node.child)})"
    if isinstance(node, JoinNode):
        return f"({sub(node.left)}) X [{node.condition}] ({sub(node.right)})"
    return "UnknownNode"


class QueryProcessorService:
    """Tokenizes, parses, validates, plans and optimizes SQL queries."""

    def __init__(self, catalog: MetadataCatalog | None = None) -> None:
        self._catalog = catalog if catalog is not None else MetadataCatalog()

    def process(self, sql: str) -> QueryProcessingResult:
        """Process ``sql``; failures are reported in the result, not raised."""
        result = QueryProcessingResult(sql=sql)
        try:
            query = parse(tokenize(sql))
            SemanticValidator(self._catalog).validate(query)
            original = build_plan(query)
            if original.root is None:
                result.error_message = "Plano de execução original inválido: raiz nula."
                return result
            result.original_plan = build_plan_view(original.root)

            optimized = Optimizer().optimize(original)
            if optimized.root is None:
                result.error_message = "Plano de execução otimizado inválido: raiz nula."
                return result

            result.relational_algebra = relational_algebra(optimized.root)
            result.optimized_plan = build_plan_view(optimized.root)
            result.execution_order = execution_order(optimized.root)
            result.success = True
        except ValueError as error:
            result.error_message = str(error)
        return result