import pytest

from sqlplanopt.metadata import (
    ColumnMetadata,
    ColumnType,
    MetadataCatalog,
    TableMetadata,
)


@pytest.fixture
def catalog():
    return MetadataCatalog()


@pytest.mark.parametrize(
    "table",
    [
        "endereco",
        "cliente",
        "pedido",
        "produto",
        "tipoendereco",
        "tipocliente",
        "status",
        "telefone",
        "pedido_has_produto",
        "categoria",
    ],
)
def test_default_tables_exist(catalog, table):
    assert catalog.table_exists(table)


def test_table_lookup_ignores_case(catalog):
    assert catalog.table_exists("Cliente")
    assert catalog.table_exists("CLIENTE")


def test_unknown_table_does_not_exist(catalog):
    assert not catalog.table_exists("fornecedor")


def test_column_exists_ignores_case(catalog):
    assert catalog.column_exists("cliente", "Nome")
    assert catalog.column_exists("CLIENTE", "NOME")


def test_column_of_other_table_does_not_exist(catalog):
    assert not catalog.column_exists("cliente", "idpedido")


def test_column_in_unknown_table_does_not_exist(catalog):
    assert not catalog.column_exists("fornecedor", "nome")


@pytest.mark.parametrize(
    "table, column, expected",
    [
        ("pedido", "valortotalpedido", ColumnType.DECIMAL),
        ("cliente", "nascimento", ColumnType.DATETIME),
        ("cliente", "idcliente", ColumnType.INTEGER),
        ("produto", "descricao", ColumnType.STRING),
        ("Pedido_Has_Produto", "PrecoUnitario", ColumnType.DECIMAL),
    ],
)
def test_column_types(catalog, table, column, expected):
    assert catalog.column_type(table, column) is expected


def test_column_type_unknown_table_raises(catalog):
    with pytest.raises(ValueError, match="'fornecedor' nao existe no catalogo"):
        catalog.column_type("fornecedor", "nome")


def test_column_type_unknown_column_raises(catalog):
    with pytest.raises(ValueError, match="'cor' nao existe na tabela 'produto'"):
        catalog.column_type("produto", "cor")


def test_column_type_agrees_with_column_exists(catalog):
    assert catalog.column_exists("telefone", "numero")
    assert catalog.column_type("telefone", "numero") is ColumnType.STRING


def test_custom_catalog_replaces_defaults():
    custom = MetadataCatalog(
        [TableMetadata("Item", (ColumnMetadata("peso", ColumnType.DECIMAL),))]
    )
    assert custom.table_exists("item")
    assert not custom.table_exists("cliente")
    assert custom.column_type("ITEM", "Peso") is ColumnType.DECIMAL