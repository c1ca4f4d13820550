import copy

import pytest

from sqlplanopt.optimizer import (
    Optimizer,
    collect_tables,
    operator_weight,
    referenced_columns,
    referenced_tables,
    restriction_score,
)
from sqlplanopt.parser import parse_sql
from sqlplanopt.plan import (
    ExecutionPlan,
    FilterNode,
    JoinNode,
    ProjectionNode,
    TableScanNode,
    build_plan,
)
from sqlplanopt.query import Condition, Operand, OperandType


def ident(value):
    return Operand(value, OperandType.IDENTIFIER)


def num(value):
    return Operand(value, OperandType.NUMBER)


def text(value):
    return Operand(value, OperandType.STRING_LITERAL)


def cond(left, op, right):
    return Condition(left, op, right)


def plan_for(sql):
    return build_plan(parse_sql(sql))


def walk(node):
    if node is None:
        return
    yield node
    for child in node.children:
        yield from walk(child)


def join_conditions(node):
    return sorted(str(n.condition) for n in walk(node) if isinstance(n, JoinNode))


@pytest.mark.parametrize(
    "op, weight",
    [("=", 4), ("<", 3), (">", 3), ("<=", 2), (">=", 2), ("<>", 1), ("~", 1)],
)
def test_operator_weight(op, weight):
    assert operator_weight(op) == weight


def test_referenced_tables_from_qualified_identifiers():
    c = cond(ident("cliente.idcliente"), "=", ident("pedido.cliente_idcliente"))
    assert referenced_tables(c) == {"cliente", "pedido"}


def test_referenced_tables_ignores_literals_and_unqualified():
    assert referenced_tables(cond(ident("cliente.nome"), "=", text("a.b"))) == {"cliente"}
    assert referenced_tables(cond(ident("nome"), "=", num("1.5"))) == set()


def test_referenced_columns_removes_duplicates():
    c = cond(ident("a.x"), "=", ident("a.x"))
    assert referenced_columns(c) == ["a.x"]
    c2 = cond(ident("a.x"), "<", ident("b.y"))
    assert referenced_columns(c2) == ["a.x", "b.y"]


def test_collect_tables_of_built_plan():
    plan = plan_for(
        "SELECT cliente.nome FROM cliente JOIN pedido "
        "ON cliente.idcliente = pedido.cliente_idcliente"
    )
    assert collect_tables(plan.root) == {"cliente", "pedido"}
    assert collect_tables(None) == set()


def test_restriction_score_sums_filter_weights():
    inner = FilterNode(cond(ident("a.x"), ">", num("1")), TableScanNode("a"))
    outer = FilterNode(cond(ident("a.y"), "=", num("2")), inner)
    joined = JoinNode(cond(ident("a.x"), "=", ident("b.x")), outer, TableScanNode("b"))
    expected = operator_weight("=") + operator_weight(">")
    assert restriction_score(outer) == expected
    assert restriction_score(ProjectionNode(["a.x"], joined)) == expected
    assert restriction_score(TableScanNode("a")) == 0


def test_optimize_empty_plan():
    assert Optimizer().optimize(ExecutionPlan(None)).root is None


def test_single_table_projection_is_kept():
    plan = plan_for("SELECT cliente.nome FROM cliente;")
    root = Optimizer().optimize(plan).root
    assert root == ProjectionNode(["cliente.nome"], TableScanNode("cliente"))


def test_nested_projections_collapse():
    plan = ExecutionPlan(
        ProjectionNode(["a.x"], ProjectionNode(["a.x", "a.y"], TableScanNode("a")))
    )
    root = Optimizer().optimize(plan).root
    assert root == ProjectionNode(["a.x"], TableScanNode("a"))


def test_filter_is_pushed_to_its_table():
    plan = plan_for(
        "SELECT cliente.nome FROM cliente JOIN pedido "
        "ON cliente.idcliente = pedido.cliente_idcliente "
        "WHERE pedido.valortotalpedido > 100"
    )
    root = Optimizer().optimize(plan).root
    assert isinstance(root, ProjectionNode)
    assert root.fields == ["cliente.nome"]
    assert isinstance(root.child, JoinNode)
    filters = [n for n in walk(root) if isinstance(n, FilterNode)]
    assert len(filters) == 1
    assert filters[0].child == TableScanNode("pedido")
    assert collect_tables(root) == {"cliente", "pedido"}


def test_filter_on_both_sides_stays_above_join():
    join = JoinNode(cond(ident("a.x"), "=", ident("b.x")), TableScanNode("a"), TableScanNode("b"))
    filter_cond = cond(ident("a.y"), "<", ident("b.y"))
    root = Optimizer().optimize(ExecutionPlan(FilterNode(filter_cond, join))).root
    assert isinstance(root, FilterNode)
    assert root.condition == filter_cond
    assert isinstance(root.child, JoinNode)


def test_more_restricted_operand_joined_first():
    join_cond = cond(ident("a.x"), "=", ident("b.x"))
    restricted = FilterNode(cond(ident("b.y"), "=", num("1")), TableScanNode("b"))
    plan = ExecutionPlan(JoinNode(join_cond, TableScanNode("a"), restricted))
    root = Optimizer().optimize(plan).root
    assert isinstance(root, JoinNode)
    assert root.condition == join_cond
    assert root.left == restricted
    assert root.right == TableScanNode("a")


def test_three_way_join_preserves_tables_and_conditions():
    plan = plan_for(
        "SELECT cliente.nome FROM cliente "
        "JOIN pedido ON cliente.idcliente = pedido.cliente_idcliente "
        "JOIN telefone ON telefone.cliente_idcliente = cliente.idcliente "
        "WHERE telefone.numero = '1'"
    )
    original = copy.deepcopy(plan.root)
    root = Optimizer().optimize(plan).root
    assert collect_tables(root) == collect_tables(original)
    assert join_conditions(root) == join_conditions(original)
    filters = [n for n in walk(root) if isinstance(n, FilterNode)]
    assert [f.child for f in filters] == [TableScanNode("telefone")]


def test_unconnected_join_keeps_first_operand():
    plan = ExecutionPlan(
        JoinNode(cond(num("1"), "=", num("1")), TableScanNode("a"), TableScanNode("b"))
    )
    assert Optimizer().optimize(plan).root == TableScanNode("a")


def test_optimize_does_not_modify_input():
    plan = plan_for(
        "SELECT cliente.nome, pedido.idpedido FROM cliente JOIN pedido "
        "ON cliente.idcliente = pedido.cliente_idcliente WHERE cliente.idcliente > 3"
    )
    snapshot = copy.deepcopy(plan.root)
    Optimizer().optimize(plan)
    assert plan.root == snapshot


def test_optimize_is_stable_on_table_set_for_where_only_query():
    plan = plan_for("SELECT nome FROM cliente WHERE idcliente = 1")
    root = Optimizer().optimize(plan).root
    assert collect_tables(root) == {"cliente"}
    assert isinstance(root, ProjectionNode)
    assert root.fields == ["nome"]
    assert any(isinstance(n, FilterNode) for n in walk(root))