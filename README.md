# sqlplanopt

sqlplanopt is a small query processor for a subset of SQL. It takes a `SELECT`
statement and runs it through these stages:

1. **Lexing** (`sqlplanopt.lexer`): keywords, identifiers, numbers, string
   literals, punctuation and the comparison operators `=`, `<>`, `<`, `>`,
   `<=`, `>=`. Keywords are case-insensitive, and identifiers are lower-cased.
2. **Parsing** (`sqlplanopt.parser`): the grammar is

   ```
   SELECT field [, field]... FROM table
       [JOIN table ON condition]...
       [WHERE condition [AND condition]...] [;]
   ```

   A condition is `operand op operand` and may be wrapped in parentheses.
   An operand is a column (`table.column` or a bare `column`), a number or a
   `'string'` literal.
3. **Semantic validation** (`sqlplanopt.semantic`): tables and columns are
   checked against a `MetadataCatalog`. The default catalog holds the tables
   `cliente`, `pedido`, `produto`, `endereco`, `categoria`, `status`,
   `telefone`, `tipocliente`, `tipoendereco` and `pedido_has_produto`. A bare
   column must belong to exactly one table in the query. In `=` and `<>`,
   numbers may be compared with numbers and other types only with themselves.
   Ordering operators are allowed only on numeric and date/time values.
4. **Plan building** (`sqlplanopt.plan`): `build_plan` makes a naive tree.
   The FROM table is scanned, each JOIN wraps the tree built so far, each
   WHERE condition adds a filter, and a projection of the selected fields sits
   on top.
5. **Optimisation** (`sqlplanopt.optimizer`): filters are pushed down towards
   the side of a join whose tables they reference. Projections are pushed down
   so that each branch carries only the qualified columns it needs. Join trees
   are rebuilt so that the most restrictive operands are joined first. Operands
   are scored by the operators of the filters beneath them, from `=` highest
   down to `<>`.

## Installation

```
pip install .
```

## Command line

```
sqlplanopt "SELECT cliente.nome, pedido.datapedido FROM cliente JOIN pedido ON cliente.idcliente = pedido.cliente_idcliente WHERE pedido.valortotalpedido > 100;"
```

The command prints a status line and then one of two things:

- on success: the optimised plan in relational-algebra notation, the numbered
  execution order and the optimised plan as an indented tree;
- on failure: the error message.

Options:

- The words of the query may be given as several arguments; they are joined
  with spaces.
- `-` as the only argument reads the query from standard input.
- With no query, `SELECT Cliente.Nome FROM Cliente;` is processed.
- `--original` shows the original, unoptimised plan tree instead of the
  optimised one.

The exit status is 0 when the query was processed and 1 when it was rejected.

## Library use

```python
from sqlplanopt.metadata import MetadataCatalog
from sqlplanopt.service import QueryProcessorService

service = QueryProcessorService(MetadataCatalog())
result = service.process("SELECT cliente.nome FROM cliente WHERE cliente.idcliente = 1;")

if result.success:
    print(result.relational_algebra)
    for step in result.execution_order:
        print(step)
else:
    print(result.error_message)
```

`QueryProcessorService` uses the default catalog when none is given.
`process` returns a `QueryProcessingResult` with these fields:

- `sql` and `success`;
- `error_message`;
- `relational_algebra`, which uses `σ` for selection, `π` for projection and
  `X [...]` for joins;
- `original_plan` and `optimized_plan`, both `PlanNodeView` trees of labels
  such as `TableScan(cliente)` or `Filter(cliente.idcliente = 1)`;
- `execution_order`, which lists children before their parent and runs the
  deeper input of a join first.

The stages can also be used on their own:

- `sqlplanopt.lexer.tokenize(source)` returns the list of `Token`s, ending with
  an end-of-file token.
- `sqlplanopt.parser.parse_sql(sql)` returns a `Query`, and `parse(tokens)`
  parses a token list.
- `sqlplanopt.semantic.SemanticValidator(catalog).validate(query)` raises
  `SemanticError` for an invalid query and otherwise returns it.
- `sqlplanopt.plan.build_plan(query)` returns an `ExecutionPlan` whose `root`
  is a tree of `TableScanNode`, `JoinNode`, `FilterNode` and `ProjectionNode`.
- `sqlplanopt.optimizer.Optimizer().optimize(plan)` returns a new, optimised
  plan and leaves the given one unchanged.
- `sqlplanopt.service` offers `build_plan_view`, `execution_order`,
  `relational_algebra` and `subtree_depth` for any plan node.
- `sqlplanopt.cli` offers `format_result`, `format_plan_tree`,
  `format_execution_order` and `format_relational_algebra`, which produce the
  text the command prints.

The stages raise `LexicalError`, `ParseError` and `SemanticError`. All three
are subclasses of `ValueError`. `QueryProcessorService.process` catches these
errors and reports them through `result.error_message`.

## What it does not do

- Plans are built and rewritten but never executed. No data is stored or read,
  and the catalog describes only table and column names and types.
- The output is plain text. There is no graphical view of the plans.
- Only the grammar above is accepted. There is no `SELECT *`, no `OR`, no
  aliases, no aggregates and no subqueries.