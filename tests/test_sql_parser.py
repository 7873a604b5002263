"""Tests for diagram_generator.core.sql_parser.

Covers parse_sql including:
    1. The e-commerce fixture end to end
    2. Column types, nullability and key flags
    3. Cardinality classification from primary key membership
    4. Dangling and forward foreign key references
    5. Fallback extraction and skipped statements
    6. ALTER TABLE foreign keys and inline REFERENCES
    7. Parser reuse and auto-layout
"""

from __future__ import annotations

import pytest

from diagram_generator import config as config_module
from diagram_generator.core.er_model import RelationshipType
from diagram_generator.core.sql_parser import (
    DDLSyntaxError,
    SQLParser,
    parse_create_table,
    parse_create_table_fallback,
    parse_sql,
)


def _edges(diagram):
    return [(rel.source_entity.name, rel.target_entity.name, rel.rel_type)
            for rel in diagram.relationships]


# ---------------------------------------------------------------------------
# 1. End-to-end fixture
# ---------------------------------------------------------------------------

class TestEcommerceFixture:
    """The six-table sample schema produces six entities and five edges."""

    def test_entities_in_declaration_order(self, sql_parser, ecommerce_sql) -> None:
        diagram = sql_parser.parse_sql(ecommerce_sql)

        assert [e.name for e in diagram.entities] == [
            "Customers", "Products", "Orders", "OrderItems",
            "Categories", "ProductCategories",
        ]

    def test_relationships_are_many_to_one(self, sql_parser, ecommerce_sql) -> None:
        diagram = sql_parser.parse_sql(ecommerce_sql)

        assert _edges(diagram) == [
            ("Orders", "Customers", RelationshipType.MANY_TO_ONE),
            ("OrderItems", "Orders", RelationshipType.MANY_TO_ONE),
            ("OrderItems", "Products", RelationshipType.MANY_TO_ONE),
            ("ProductCategories", "Products", RelationshipType.MANY_TO_ONE),
            ("ProductCategories", "Categories", RelationshipType.MANY_TO_ONE),
        ]

    def test_relationship_attributes_are_linked(self, sql_parser, ecommerce_sql) -> None:
        diagram = sql_parser.parse_sql(ecommerce_sql)
        rel = diagram.relationships[0]

        assert rel.source_attribute is diagram.get_entity_by_name("Orders").get_attribute("customer_id")
        assert rel.target_attribute is diagram.get_entity_by_name("Customers").get_attribute("customer_id")
        assert rel.name == "Orders_Customers"


# ---------------------------------------------------------------------------
# 2. Columns
# ---------------------------------------------------------------------------

class TestColumns:
    """Column definitions keep their type, nullability and key flags."""

    def test_inline_primary_key_is_not_nullable(self, sql_parser, ecommerce_sql) -> None:
        customers = sql_parser.parse_sql(ecommerce_sql).get_entity_by_name("Customers")
        pk = customers.get_attribute("customer_id")

        assert pk.is_primary_key
        assert not pk.is_nullable
        assert pk.data_type == "INT"

    def test_nullability(self, sql_parser, ecommerce_sql) -> None:
        customers = sql_parser.parse_sql(ecommerce_sql).get_entity_by_name("Customers")

        assert customers.get_attribute("name").is_nullable is False
        assert customers.get_attribute("email").is_nullable is True

    def test_type_parameters_are_kept(self, sql_parser, ecommerce_sql) -> None:
        products = sql_parser.parse_sql(ecommerce_sql).get_entity_by_name("Products")

        assert products.get_attribute("name").data_type == "VARCHAR(100)"
        assert products.get_attribute("price").data_type == "DECIMAL(10,2)"

    def test_foreign_key_columns_record_their_target(self, sql_parser, ecommerce_sql) -> None:
        orders = sql_parser.parse_sql(ecommerce_sql).get_entity_by_name("Orders")
        fk = orders.get_attribute("customer_id")

        assert fk.is_foreign_key
        assert fk.referenced_table == "Customers"
        assert fk.referenced_column == "customer_id"
        assert not fk.is_primary_key

    def test_table_level_composite_primary_key(self, sql_parser, ecommerce_sql) -> None:
        link = sql_parser.parse_sql(ecommerce_sql).get_entity_by_name("ProductCategories")

        assert [a.name for a in link.primary_keys] == ["product_id", "category_id"]
        assert all(not a.is_nullable for a in link.primary_keys)

    def test_quoted_identifiers_and_if_not_exists(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE IF NOT EXISTS `users` (\n"
            "  `id` INT NOT NULL AUTO_INCREMENT,\n"
            "  `login` VARCHAR(32) NOT NULL,\n"
            "  PRIMARY KEY (`id`),\n"
            "  UNIQUE KEY `uk_login` (`login`)\n"
            ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;"
        )

        users = diagram.get_entity_by_name("users")
        assert [a.name for a in users.attributes] == ["id", "login"]
        assert users.get_attribute("id").is_primary_key

    def test_comments_inside_statement_are_ignored(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE notes (\n"
            "  -- surrogate key\n"
            "  id INT PRIMARY KEY,\n"
            "  /* free text */ body TEXT\n"
            ");"
        )

        assert [a.name for a in diagram.entities[0].attributes] == ["id", "body"]

    def test_key_and_index_are_usable_column_names(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE kv (key VARCHAR(50) PRIMARY KEY, value TEXT);"
            "CREATE TABLE refs (id INT PRIMARY KEY, kv_key VARCHAR(50),"
            " FOREIGN KEY (kv_key) REFERENCES kv(key));"
        )

        kv = diagram.get_entity_by_name("kv")
        assert [a.name for a in kv.attributes] == ["key", "value"]
        assert kv.get_attribute("key").is_primary_key
        assert _edges(diagram) == [("refs", "kv", RelationshipType.MANY_TO_ONE)]

    def test_index_definitions_are_not_columns(self) -> None:
        entity, _ = parse_create_table(
            "CREATE TABLE t (id INT, index INT, kind ENUM('a', 'b'),"
            " KEY idx_id (id), INDEX (index), UNIQUE KEY uk_kind (kind),"
            " INDEX idx_both USING BTREE (id, kind));"
        )

        assert [a.name for a in entity.attributes] == ["id", "index", "kind"]

    def test_primary_key_with_index_method(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE t (id INT, name TEXT, PRIMARY KEY USING BTREE (id));"
            "CREATE TABLE u (id INT NOT NULL, CONSTRAINT pk_u PRIMARY KEY USING HASH (id)"
        )

        assert diagram.get_entity_by_name("t").get_attribute("id").is_primary_key
        assert diagram.get_entity_by_name("u").get_attribute("id").is_primary_key


# ---------------------------------------------------------------------------
# 3. Cardinality
# ---------------------------------------------------------------------------

class TestCardinality:
    """Relationship type follows primary key membership of both columns."""

    @pytest.mark.parametrize("sql, expected", [
        (
            "CREATE TABLE Users (id INT PRIMARY KEY);"
            "CREATE TABLE Profiles (user_id INT PRIMARY KEY,"
            " FOREIGN KEY (user_id) REFERENCES Users(id));",
            RelationshipType.ONE_TO_ONE,
        ),
        (
            "CREATE TABLE Users (id INT PRIMARY KEY);"
            "CREATE TABLE Posts (id INT PRIMARY KEY, user_id INT,"
            " FOREIGN KEY (user_id) REFERENCES Users(id));",
            RelationshipType.MANY_TO_ONE,
        ),
        (
            "CREATE TABLE Codes (code INT, label TEXT);"
            "CREATE TABLE Items (id INT PRIMARY KEY,"
            " FOREIGN KEY (id) REFERENCES Codes(code));",
            RelationshipType.ONE_TO_MANY,
        ),
        (
            "CREATE TABLE Tags (code INT, label TEXT);"
            "CREATE TABLE Notes (tag INT, body TEXT,"
            " FOREIGN KEY (tag) REFERENCES Tags(code));",
            RelationshipType.MANY_TO_MANY,
        ),
        (
            "CREATE TABLE A (a1 INT, a2 INT, PRIMARY KEY (a1, a2));"
            "CREATE TABLE B (b1 INT PRIMARY KEY,"
            " FOREIGN KEY (b1) REFERENCES A(a1));",
            RelationshipType.ONE_TO_ONE,
        ),
    ])
    def test_decision_table(self, sql_parser, sql, expected) -> None:
        diagram = sql_parser.parse_sql(sql)

        assert len(diagram.relationships) == 1
        assert diagram.relationships[0].rel_type is expected

    def test_missing_referenced_column_is_not_a_key(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Users (id INT PRIMARY KEY);"
            "CREATE TABLE Posts (id INT PRIMARY KEY, user_id INT,"
            " FOREIGN KEY (user_id) REFERENCES Users);"
        )

        rel = diagram.relationships[0]
        assert rel.rel_type is RelationshipType.MANY_TO_MANY
        assert rel.target_attribute is None


# ---------------------------------------------------------------------------
# 4. Reference resolution
# ---------------------------------------------------------------------------

class TestReferenceResolution:
    """Foreign keys resolve after all tables are read; dangling ones vanish."""

    def test_undeclared_target_produces_no_relationship(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Orders (id INT PRIMARY KEY, customer_id INT,"
            " FOREIGN KEY (customer_id) REFERENCES Missing(id));"
        )

        assert len(diagram.entities) == 1
        assert diagram.relationships == []
        fk = diagram.entities[0].get_attribute("customer_id")
        assert fk.is_foreign_key
        assert fk.referenced_table == "Missing"

    def test_forward_reference(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Child (id INT PRIMARY KEY, parent_id INT,"
            " FOREIGN KEY (parent_id) REFERENCES Parent(id));"
            "CREATE TABLE Parent (id INT PRIMARY KEY);"
        )

        assert _edges(diagram) == [("Child", "Parent", RelationshipType.MANY_TO_ONE)]

    def test_table_names_match_case_insensitively(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Customers (customer_id INT PRIMARY KEY);"
            "CREATE TABLE Orders (id INT PRIMARY KEY, customer_id INT,"
            " FOREIGN KEY (customer_id) REFERENCES customers(CUSTOMER_ID));"
        )

        assert _edges(diagram) == [("Orders", "Customers", RelationshipType.MANY_TO_ONE)]
        assert diagram.get_entity_by_name("CUSTOMERS") is diagram.entities[0]

    def test_duplicate_table_keeps_both_and_last_wins_lookup(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE T (a INT);"
            "CREATE TABLE T (b INT);"
        )

        assert len(diagram.entities) == 2
        assert diagram.get_entity_by_name("T") is diagram.entities[1]
        assert diagram.get_entity_by_name("T").attributes[0].name == "b"


# ---------------------------------------------------------------------------
# 5. Degraded input
# ---------------------------------------------------------------------------

class TestDegradedInput:
    """Malformed statements fall back or are skipped, never raise."""

    def test_empty_input(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql("   \n ; ;")

        assert diagram.entities == []
        assert diagram.relationships == []

    def test_other_statements_are_ignored(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "DROP TABLE IF EXISTS a;"
            "CREATE TABLE a (id INT PRIMARY KEY);"
            "INSERT INTO a VALUES (1);"
            "CREATE INDEX idx_a ON a(id);"
        )

        assert [e.name for e in diagram.entities] == ["a"]

    def test_unreadable_part_uses_fallback(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Legacy (id INT PRIMARY KEY, name VARCHAR(20), %% garbage %%);"
        )

        legacy = diagram.get_entity_by_name("Legacy")
        assert [a.name for a in legacy.attributes] == ["id", "name"]
        assert legacy.get_attribute("id").is_primary_key

    def test_missing_close_paren_uses_fallback(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Broken (id INT PRIMARY KEY, label TEXT NOT NULL"
        )

        broken = diagram.entities[0]
        assert broken.name == "Broken"
        assert [a.name for a in broken.attributes] == ["id", "label"]
        assert broken.get_attribute("label").is_nullable is False

    def test_semicolon_inside_literal_splits_statement(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Notes (id INT PRIMARY KEY, body TEXT DEFAULT 'a;b');"
        )

        assert [e.name for e in diagram.entities] == ["Notes"]
        assert [a.name for a in diagram.entities[0].attributes] == ["id", "body"]

    def test_strict_parser_rejects_unknown_parts(self) -> None:
        with pytest.raises(DDLSyntaxError):
            parse_create_table("CREATE TABLE t (id INT, ??? );")

    def test_fallback_without_table_name(self) -> None:
        assert parse_create_table_fallback("SELECT 1;") is None


# ---------------------------------------------------------------------------
# 6. Other foreign key spellings
# ---------------------------------------------------------------------------

class TestForeignKeySyntax:
    """Inline REFERENCES and ALTER TABLE constraints are recognized."""

    def test_inline_references(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Customers (customer_id INT PRIMARY KEY);"
            "CREATE TABLE Orders (order_id INT PRIMARY KEY,"
            " customer_id INT NOT NULL REFERENCES Customers(customer_id));"
        )

        assert _edges(diagram) == [("Orders", "Customers", RelationshipType.MANY_TO_ONE)]

    def test_named_constraint(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Customers (customer_id INT PRIMARY KEY);"
            "CREATE TABLE Orders (order_id INT, customer_id INT,"
            " CONSTRAINT pk_orders PRIMARY KEY (order_id),"
            " CONSTRAINT fk_customer FOREIGN KEY (customer_id) REFERENCES Customers (customer_id));"
        )

        orders = diagram.get_entity_by_name("Orders")
        assert orders.get_attribute("order_id").is_primary_key
        assert _edges(diagram) == [("Orders", "Customers", RelationshipType.MANY_TO_ONE)]

    def test_alter_table_add_foreign_key(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "CREATE TABLE Orders (order_id INT PRIMARY KEY, customer_id INT);"
            "CREATE TABLE Customers (customer_id INT PRIMARY KEY);"
            "ALTER TABLE Orders ADD CONSTRAINT fk_c FOREIGN KEY (customer_id)"
            " REFERENCES Customers(customer_id);"
        )

        assert diagram.get_entity_by_name("Orders").get_attribute("customer_id").is_foreign_key
        assert _edges(diagram) == [("Orders", "Customers", RelationshipType.MANY_TO_ONE)]

    def test_alter_table_on_unknown_table_is_ignored(self, sql_parser) -> None:
        diagram = sql_parser.parse_sql(
            "ALTER TABLE Ghost ADD FOREIGN KEY (x) REFERENCES Other(id);"
        )

        assert diagram.entities == []
        assert diagram.relationships == []


# ---------------------------------------------------------------------------
# 7. Parser lifecycle
# ---------------------------------------------------------------------------

class TestParserLifecycle:
    """Each call starts clean; layout follows configuration."""

    def test_reuse_does_not_leak_pending_keys(self, sql_parser) -> None:
        sql_parser.parse_sql(
            "CREATE TABLE A (id INT PRIMARY KEY, b_id INT,"
            " FOREIGN KEY (b_id) REFERENCES B(id));"
        )
        second = sql_parser.parse_sql("CREATE TABLE B (id INT PRIMARY KEY);")

        assert [e.name for e in second.entities] == ["B"]
        assert second.relationships == []

    def test_auto_layout_uses_square_grid(self, ecommerce_sql) -> None:
        class LayoutConfig(config_module.TestingConfig):
            AUTO_LAYOUT = True
            CELL_WIDTH = 250.0
            CELL_HEIGHT = 300.0
            LAYOUT_ORIGIN = 50.0

        diagram = SQLParser(LayoutConfig).parse_sql(ecommerce_sql)
        positions = [(e.x, e.y) for e in diagram.entities]

        # six tables -> three columns
        assert positions == [
            (50.0, 50.0), (300.0, 50.0), (550.0, 50.0),
            (50.0, 350.0), (300.0, 350.0), (550.0, 350.0),
        ]

    def test_module_level_parse_sql(self, ecommerce_sql) -> None:
        diagram = parse_sql(ecommerce_sql, config_module.TestingConfig)

        assert len(diagram.entities) == 6
        assert len(diagram.relationships) == 5
