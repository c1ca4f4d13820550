"""Catalog of the tables and columns a query may reference."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto


class ColumnType(Enum):
    """Data type of a column."""

    INTEGER = auto()
    DECIMAL = auto()
    STRING = auto()
    DATETIME = auto()


@dataclass(frozen=True)
class ColumnMetadata:
    """A column name and its type."""

    name: str
    type: ColumnType


@dataclass(frozen=True)
class TableMetadata:
    """A table name and its columns."""

    name: str
    columns: tuple[ColumnMetadata, ...]


def _table(name: str, *columns: tuple[str, ColumnType]) -> TableMetadata:
    return TableMetadata(name, tuple(ColumnMetadata(n, t) for n, t in columns))


_I, _D, _S, _T = ColumnType.INTEGER, ColumnType.DECIMAL, ColumnType.STRING, ColumnType.DATETIME

DEFAULT_TABLES = (
    _table(
        "endereco",
        ("idendereco", _I),
        ("enderecopadrao", _I),
        ("logradouro", _S),
        ("numero", _S),
        ("complemento", _S),
        ("bairro", _S),
        ("cidade", _S),
        ("uf", _S),
        ("cep", _S),
        ("tipoendereco_idtipoendereco", _I),
        ("cliente_idcliente", _I),
    ),
    _table(
        "cliente",
        ("idcliente", _I),
        ("nome", _S),
        ("email", _S),
        ("nascimento", _T),
        ("senha", _S),
        ("tipocliente_idtipocliente", _I),
        ("dataregistro", _T),
    ),
    _table(
        "pedido",
        ("idpedido", _I),
        ("status_idstatus", _I),
        ("datapedido", _T),
        ("valortotalpedido", _D),
        ("cliente_idcliente", _I),
    ),
    _table(
        "produto",
        ("idproduto", _I),
        ("nome", _S),
        ("descricao", _S),
        ("preco", _D),
        ("quantestoque", _D),
        ("categoria_idcategoria", _I),
    ),
    _table("tipoendereco", ("idtipoendereco", _I), ("descricao", _S)),
    _table("tipocliente", ("idtipocliente", _I), ("descricao", _S)),
    _table("status", ("idstatus", _I), ("descricao", _S)),
    _table("telefone", ("numero", _S), ("cliente_idcliente", _I)),
    _table(
        "pedido_has_produto",
        ("idpedidoproduto", _I),
        ("pedido_idpedido", _I),
        ("produto_idproduto", _I),
        ("quantidade", _D),
        ("precounitario", _D),
    ),
    _table("categoria", ("idcategoria", _I), ("descricao", _S)),
)


class MetadataCatalog:
    """Case-insensitive lookup of tables and column types."""

    def __init__(self, tables: Iterable[TableMetadata] = DEFAULT_TABLES) -> None:
        self._tables = {table.name.lower(): table for table in tables}

    def _find_column(self, table: TableMetadata, column_name: str) -> ColumnMetadata | None:
        normalized = column_name.lower()
        return next((c for c in table.columns if c.name == normalized), None)

    def table_exists(self, table_name: str) -> bool:
        return table_name.lower() in self._tables

    def column_exists(self, table_name: str, column_name: str) -> bool:
        table = self._tables.get(table_name.lower())
        return table is not None and self._find_column(table, column_name) is not None

    def column_type(self, table_name: str, column_name: str) -> ColumnType:
        """Return the type of a column, raising ValueError if it is unknown."""
        table = self._tables.get(table_name.lower())
        if table is None:
            raise ValueError(f"a tabela '{table_name}' nao existe no catalogo.")
        column = self._find_column(table, column_name)
        if column is None:
            raise ValueError(
                f"a coluna '{column_name}' nao existe na tabela '{table_name}'."
            )
        return column.type