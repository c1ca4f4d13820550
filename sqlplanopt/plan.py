"""Execution plan nodes and the builder that turns a Query into a plan."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto

from .query import Condition, Query
from .strutils import join_fields


class NodeType(Enum):
    """Kind of an execution node."""

    TABLE_SCAN = auto()
    FILTER = auto()
    JOIN = auto()
    PROJECTION = auto()


class ExecutionNode(ABC):
    """A node of an execution plan tree."""

    _label: str = ""

    @property
    @abstractmethod
    def type(self) -> NodeType:
        """The kind of this node."""

    @abstractmethod
    def _content(self) -> str:
        """Text shown between the parentheses of the node's description."""

    @property
    def children(self) -> tuple[ExecutionNode, ...]:
        """The child nodes that are present, left to right."""
        return ()

    def __str__(self) -> str:
        return f"{self._label}({self._content()})"


@dataclass
class TableScanNode(ExecutionNode):
    """Reads every row of one table."""

    table_name: str
    _label = "TableScan"

    @property
    def type(self) -> NodeType:
        return NodeType.TABLE_SCAN

    def _content(self) -> str:
        return self.table_name


@dataclass
class FilterNode(ExecutionNode):
    """Keeps the rows of its child that satisfy a condition."""

    condition: Condition
    child: ExecutionNode | None = None
    _label = "Filter"

    @property
    def type(self) -> NodeType:
        return NodeType.FILTER

    def _content(self) -> str:
        return str(self.condition)

    @property
    def children(self) -> tuple[ExecutionNode, ...]:
        return tuple(c for c in (self.child,) if c is not None)


@dataclass
class JoinNode(ExecutionNode):
    """Combines the rows of two children on a join condition."""

    condition: Condition
    left: ExecutionNode | None = None
    right: ExecutionNode | None = None
    _label = "Join"

    @property
    def type(self) -> NodeType:
        return NodeType.JOIN

    def _content(self) -> str:
        return str(self.condition)

    @property
    def children(self) -> tuple[ExecutionNode, ...]:
        return tuple(c for c in (self.left, self.right) if c is not None)


@dataclass
class ProjectionNode(ExecutionNode):
    """Keeps only the selected fields of its child's rows."""

    fields: list[str] = field(default_factory=list)
    child: ExecutionNode | None = None
    _label = "Projection"

    @property
    def type(self) -> NodeType:
        return NodeType.PROJECTION

    def _content(self) -> str:
        return join_fields(self.fields)

    @property
    def children(self) -> tuple[ExecutionNode, ...]:
        return tuple(c for c in (self.child,) if c is not None)


@dataclass
class ExecutionPlan:
    """A plan tree, identified by its root node."""

    root: ExecutionNode | None = None


def build_plan(query: Query) -> ExecutionPlan:
    """Build the unoptimized plan for ``query``.

    The FROM table is scanned, each JOIN wraps the tree built so far as its
    left side, each WHERE condition adds a filter on top, and a projection of
    the selected fields crowns the tree.
    """
    node: ExecutionNode = TableScanNode(query.from_table)
    for join in query.joins:
        node = JoinNode(join.condition, node, TableScanNode(join.table_name))
    for condition in query.where_conditions:
        node = FilterNode(condition, node)
    node = ProjectionNode(list(query.select_fields), node)
    return ExecutionPlan(node)