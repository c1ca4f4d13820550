"""Command-line front end: process one query and print what came out of it."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterator, Sequence

from .service import PlanNodeView, QueryProcessingResult, QueryProcessorService

DEFAULT_SQL = "SELECT Cliente.Nome FROM Cliente;"

_INDENT = "  "
_RULE = "-" * 40


def format_execution_order(order: Sequence[str]) -> str:
    """Number the execution steps, one per line, under a heading."""
    lines = ["Ordem de Execucao", ""]
    if not order:
        lines.append("Nenhuma ordem de execucao disponivel.")
    else:
        lines.extend(f"{number}. {step}" for number, step in enumerate(order, start=1))
    return "\n".join(lines)


def format_relational_algebra(text: str) -> str:
    """Show a relational algebra expression under a heading."""
    body = text if text else "Nenhuma algebra relacional disponivel."
    return "\n".join(["Algebra Relacional", "", body])


def _tree_lines(view: PlanNodeView, depth: int) -> Iterator[str]:
    yield f"{_INDENT * depth}{view.label}"
    for child in view.children:
        yield from _tree_lines(child, depth + 1)


def format_plan_tree(view: PlanNodeView) -> str:
    """Draw a plan as an indented tree, children below and right of their parent."""
    if not view.label:
        return "Nenhum plano disponivel."
    return "\n".join(_tree_lines(view, 0))


def format_result(result: QueryProcessingResult, show_original: bool = False) -> str:
    """Describe a processing result; the optimized plan is shown unless asked otherwise."""
    sections = ["Status"]
    if not result.success:
        sections.append("Erro no processamento")
        sections.append(result.error_message)
        sections.append("Planos indisponiveis.")
        return "\n".join(sections)

    sections.append("Consulta processada com sucesso")
    sections.append(_RULE)
    sections.append(format_relational_algebra(result.relational_algebra))
    sections.append(_RULE)
    sections.append(format_execution_order(result.execution_order))
    sections.append(_RULE)
    if show_original:
        sections.append("Plano Original")
        sections.append(format_plan_tree(result.original_plan))
    else:
        sections.append("Plano Otimizado")
        sections.append(format_plan_tree(result.optimized_plan))
    return "\n".join(sections)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlplanopt",
        description="Otimizador de Consultas: validate, plan and optimize an SQL query.",
    )
    parser.add_argument(
        "sql",
        nargs="*",
        help="query text; '-' reads it from standard input (default: %(default)s)",
    )
    parser.add_argument(
        "--original",
        action="store_true",
        help="show the original plan instead of the optimized one",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Process the query given on the command line and print the result."""
    args = _build_parser().parse_args(argv)
    if not args.sql:
        sql = DEFAULT_SQL
    elif args.sql == ["-"]:
        sql = sys.stdin.read()
    else:
        sql = " ".join(args.sql)

    result = QueryProcessorService().process(sql)
    print(format_result(result, show_original=args.original))
    return 0 if result.success else 1