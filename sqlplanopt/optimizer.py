"""Rule-based rewriting of execution plans.

Filters are pushed towards the scans they restrict, projections are pushed
down so each branch only carries the columns it needs, and join trees are
rebuilt so the most restrictive operands are combined first.
"""

from __future__ import annotations

from .plan import (
    ExecutionNode,
    ExecutionPlan,
    FilterNode,
    JoinNode,
    ProjectionNode,
    TableScanNode,
)
from .query import Condition, Operand, OperandType
from .strutils import intersection, remove_duplicates, split_qualified, union

_OPERATOR_WEIGHTS = {
    "=": 4,
    "<": 3,
    ">": 3,
    "<=": 2,
    ">=": 2,
    "<>": 1,
}


def _qualified_parts(operand: Operand) -> list[str] | None:
    if operand.type is not OperandType.IDENTIFIER:
        return None
    parts = split_qualified(operand.value)
    return parts if len(parts) == 2 else None


def referenced_tables(condition: Condition) -> set[str]:
    """Tables named by the qualified identifiers of a condition."""
    tables = set()
    for operand in (condition.left, condition.right):
        parts = _qualified_parts(operand)
        if parts is not None:
            tables.add(parts[0])
    return tables


def referenced_columns(condition: Condition) -> list[str]:
    """Qualified column names used by a condition, without repeats."""
    columns = [
        operand.value
        for operand in (condition.left, condition.right)
        if _qualified_parts(operand) is not None
    ]
    return remove_duplicates(columns)


def collect_tables(node: ExecutionNode | None) -> set[str]:
    """Names of every table scanned beneath ``node``."""
    if node is None:
        return set()
    if isinstance(node, TableScanNode):
        return {node.table_name}
    if isinstance(node, (FilterNode, ProjectionNode)):
        return collect_tables(node.child)
    if isinstance(node, JoinNode):
        return collect_tables(node.left) | collect_tables(node.right)
    return set()


def operator_weight(op: str) -> int:
    """How strongly a comparison operator is expected to restrict rows."""
    return _OPERATOR_WEIGHTS.get(op, 1)


def restriction_score(node: ExecutionNode | None) -> int:
    """Sum of the operator weights of every filter beneath ``node``."""
    if node is None or isinstance(node, TableScanNode):
        return 0
    if isinstance(node, ProjectionNode):
        return restriction_score(node.child)
    if isinstance(node, FilterNode):
        return operator_weight(node.condition.op) + restriction_score(node.child)
    if isinstance(node, JoinNode):
        return restriction_score(node.left) + restriction_score(node.right)
    return 0


def _push_down_filter(condition: Condition, child: ExecutionNode | None) -> ExecutionNode:
    if child is None:
        return FilterNode(condition, None)

    if isinstance(child, ProjectionNode):
        return ProjectionNode(list(child.fields), _push_down_filter(condition, child.child))

    if not isinstance(child, JoinNode):
        return FilterNode(condition, child)

    tables = referenced_tables(condition)
    if tables <= collect_tables(child.left):
        return JoinNode(child.condition, _push_down_filter(condition, child.left), child.right)
    if tables <= collect_tables(child.right):
        return JoinNode(child.condition, child.left, _push_down_filter(condition, child.right))
    return FilterNode(condition, child)


def _push_down_projection(
    required: list[str], child: ExecutionNode | None
) -> ExecutionNode | None:
    if child is None:
        return None

    if isinstance(child, TableScanNode):
        return ProjectionNode(list(required), child)

    if isinstance(child, ProjectionNode):
        return _push_down_projection(intersection(required, child.fields), child.child)

    if isinstance(child, JoinNode):
        all_required = union(required, referenced_columns(child.condition))
        left_tables = collect_tables(child.left)
        right_tables = collect_tables(child.right)

        left_columns: list[str] = []
        right_columns: list[str] = []
        for column in all_required:
            parts = split_qualified(column)
            if len(parts) != 2:
                continue
            if parts[0] in left_tables:
                left_columns.append(column)
            elif parts[0] in right_tables:
                right_columns.append(column)

        join = JoinNode(
            child.condition,
            _push_down_projection(left_columns, child.left),
            _push_down_projection(right_columns, child.right),
        )
        if len(all_required) > len(required):
            return ProjectionNode(list(required), join)
        return join

    if isinstance(child, FilterNode):
        all_required = union(required, referenced_columns(child.condition))
        pushed = _push_down_projection(all_required, child.child)

        if isinstance(pushed, ProjectionNode):
            return ProjectionNode(list(required), FilterNode(child.condition, pushed.child))

        new_filter = FilterNode(child.condition, pushed)
        if len(all_required) > len(required):
            return ProjectionNode(list(required), new_filter)
        return new_filter

    return ProjectionNode(list(required), child)


def _join_operands(node: ExecutionNode | None) -> list[ExecutionNode]:
    if node is None:
        return []
    if isinstance(node, JoinNode):
        return _join_operands(node.left) + _join_operands(node.right)
    return [node]


def _join_conditions(node: ExecutionNode | None) -> list[Condition]:
    if not isinstance(node, JoinNode):
        return []
    return [*_join_conditions(node.left), *_join_conditions(node.right), node.condition]


def _rebuild_join_tree(
    operands: list[ExecutionNode], conditions: list[Condition]
) -> ExecutionNode | None:
    while len(operands) > 1:
        best: tuple[int, int, int] | None = None
        best_score = -1

        for i, first in enumerate(operands):
            for j in range(i + 1, len(operands)):
                second = operands[j]
                tables_i = collect_tables(first)
                tables_j = collect_tables(second)
                for c, condition in enumerate(conditions):
                    cond_tables = referenced_tables(condition)
                    if not (cond_tables & tables_i and cond_tables & tables_j):
                        continue
                    score = (
                        restriction_score(first)
                        + restriction_score(second)
                        + operator_weight(condition.op)
                    )
                    if score > best_score:
                        best_score = score
                        best = (i, j, c)

        if best is None:
            break

        i, j, c = best
        joined = JoinNode(conditions[c], operands[i], operands[j])
        del operands[j]
        del operands[i]
        del conditions[c]
        operands.append(joined)

    return operands[0] if operands else None


def _reorder_join_tree(node: ExecutionNode | None) -> ExecutionNode | None:
    if not isinstance(node, JoinNode):
        return node
    conditions = _join_conditions(node)
    operands = sorted(_join_operands(node), key=restriction_score, reverse=True)
    return _rebuild_join_tree(operands, conditions)


def _optimize_node(node: ExecutionNode | None) -> ExecutionNode | None:
    if node is None or isinstance(node, TableScanNode):
        return node

    if isinstance(node, ProjectionNode):
        final_columns = list(node.fields)
        pushed = _push_down_projection(final_columns, _optimize_node(node.child))
        if isinstance(pushed, ProjectionNode) and pushed.fields == final_columns:
            return ProjectionNode(final_columns, pushed.child)
        return ProjectionNode(final_columns, pushed)

    if isinstance(node, JoinNode):
        rebuilt = JoinNode(node.condition, _optimize_node(node.left), _optimize_node(node.right))
        return _reorder_join_tree(rebuilt)

    if isinstance(node, FilterNode):
        return _push_down_filter(node.condition, _optimize_node(node.child))

    return node


class Optimizer:
    """Applies the rewriting rules to a whole plan."""

    def optimize(self, plan: ExecutionPlan) -> ExecutionPlan:
        """Return an optimized plan; the given plan is left untouched."""
        return ExecutionPlan(_optimize_node(plan.root))