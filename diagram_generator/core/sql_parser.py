"""
SQL DDL parser - CREATE TABLE statements to an ER diagram
"""
import logging
from typing import List, Optional, Tuple

from ..config import get_config
from .er_model import Attribute, Entity, ERDiagram
from .inference import PendingForeignKey, resolve_foreign_keys
from .patterns import (
    ADD_FOREIGN_KEY_PATTERN,
    ADD_PRIMARY_KEY_PATTERN,
    ALTER_TABLE_PATTERN,
    COLUMN_PATTERN,
    CREATE_TABLE_PATTERN,
    FOREIGN_KEY_ANYWHERE,
    FOREIGN_KEY_CONSTRAINT,
    INLINE_PRIMARY_KEY,
    INLINE_REFERENCES,
    LOOSE_COLUMN_PATTERN,
    LOOSE_TABLE_PATTERN,
    NOT_NULL,
    OTHER_CONSTRAINT,
    PRIMARY_KEY_ANYWHERE,
    PRIMARY_KEY_CONSTRAINT,
    SQL_CONSTRAINT_KEYWORDS,
    normalize_data_type,
    split_identifier_list,
    unquote_identifier,
)
from .splitter import find_matching_bracket, smart_split, split_sql_statements, strip_sql_comments

logger = logging.getLogger(__name__)


class DDLSyntaxError(ValueError):
    """A statement is not CREATE TABLE DDL the strict path understands"""


class SQLParseContext:
    """State for a single parse_sql call"""

    def __init__(self, name: str = "ER Diagram"):
        self.diagram = ERDiagram(name)
        self.pending_foreign_keys: List[PendingForeignKey] = []
        self.skipped_statements = 0


def build_foreign_keys(table_name: str, columns_text: str, ref_table: str,
                       ref_columns_text: Optional[str]) -> List[PendingForeignKey]:
    """Pair local and referenced columns positionally"""
    local_cols = split_identifier_list(columns_text)
    ref_cols = split_identifier_list(ref_columns_text) if ref_columns_text else []
    ref_table = unquote_identifier(ref_table)

    foreign_keys = []
    for i, local_col in enumerate(local_cols):
        foreign_keys.append(PendingForeignKey(
            source_table=table_name,
            column=local_col,
            target_table=ref_table,
            target_column=ref_cols[i] if i < len(ref_cols) else None,
        ))
    return foreign_keys


def apply_keys(entity: Entity, primary_keys: List[str],
               foreign_keys: List[PendingForeignKey]) -> None:
    """Flag key columns on entity; names that match no column are ignored"""
    for pk_col in primary_keys:
        attr = entity.get_attribute(pk_col)
        if attr is not None:
            attr.mark_primary_key()

    for fk in foreign_keys:
        attr = entity.get_attribute(fk.column)
        if attr is not None:
            attr.mark_foreign_key(fk.target_table, fk.target_column)


def _read_column_options(table_name: str, attribute: Attribute, options: str,
                         primary_keys: List[str], foreign_keys: List[PendingForeignKey]) -> None:
    if NOT_NULL.search(options):
        attribute.is_nullable = False

    if INLINE_PRIMARY_KEY.search(options):
        primary_keys.append(attribute.name)

    ref_match = INLINE_REFERENCES.search(options)
    if ref_match:
        foreign_keys.extend(build_foreign_keys(
            table_name, attribute.name, ref_match.group(1), ref_match.group(2)))


def parse_create_table(statement: str) -> Tuple[Entity, List[PendingForeignKey]]:
    """
    Strict CREATE TABLE parsing.

    Every part of the column list has to be a column definition or a known
    table constraint, otherwise DDLSyntaxError is raised and nothing is kept.

    Returns:
        Tuple of (entity, deferred foreign keys)
    """
    header = CREATE_TABLE_PATTERN.match(statement)
    if not header:
        raise DDLSyntaxError("not a CREATE TABLE statement")

    table_name = header.group(1)
    open_paren = header.end() - 1
    close_paren = find_matching_bracket(statement, open_paren)
    if close_paren == -1:
        raise DDLSyntaxError(f"unbalanced parentheses in table '{table_name}'")

    entity = Entity(table_name)
    primary_keys: List[str] = []
    foreign_keys: List[PendingForeignKey] = []

    for part in smart_split(statement[open_paren + 1:close_paren]):
        if not part:
            raise DDLSyntaxError(f"empty column definition in table '{table_name}'")

        pk_match = PRIMARY_KEY_CONSTRAINT.match(part)
        if pk_match:
            primary_keys.extend(split_identifier_list(pk_match.group(1)))
            continue

        fk_match = FOREIGN_KEY_CONSTRAINT.match(part)
        if fk_match:
            foreign_keys.extend(build_foreign_keys(
                table_name, fk_match.group(1), fk_match.group(2), fk_match.group(3)))
            continue

        if OTHER_CONSTRAINT.match(part):
            continue

        col_match = COLUMN_PATTERN.match(part)
        if not col_match or col_match.group(1).upper() in SQL_CONSTRAINT_KEYWORDS:
            raise DDLSyntaxError(f"unrecognized column definition '{part}' in table '{table_name}'")

        attribute = Attribute(col_match.group(1), normalize_data_type(col_match.group(2)))
        _read_column_options(table_name, attribute, col_match.group(3),
                             primary_keys, foreign_keys)
        entity.add_attribute(attribute)

    apply_keys(entity, primary_keys, foreign_keys)
    return entity, foreign_keys


def parse_create_table_fallback(statement: str) -> Optional[Tuple[Entity, List[PendingForeignKey]]]:
    """
    Best-effort extraction for statements the strict path rejects.

    Only the table name is required; columns that cannot be read are
    skipped. Returns None when no table name can be found.
    """
    header = LOOSE_TABLE_PATTERN.search(statement)
    if not header:
        return None

    table_name = header.group(1)
    entity = Entity(table_name)
    primary_keys: List[str] = []
    foreign_keys: List[PendingForeignKey] = []

    body = ''
    open_paren = statement.find('(', header.end())
    if open_paren != -1:
        close_paren = find_matching_bracket(statement, open_paren)
        if close_paren != -1:
            body = statement[open_paren + 1:close_paren]
        else:
            body = statement[open_paren + 1:].rstrip().rstrip(';')

    for pk_match in PRIMARY_KEY_ANYWHERE.finditer(statement):
        primary_keys.extend(split_identifier_list(pk_match.group(1)))

    for fk_match in FOREIGN_KEY_ANYWHERE.finditer(statement):
        foreign_keys.extend(build_foreign_keys(
            table_name, fk_match.group(1), fk_match.group(2), fk_match.group(3)))

    for part in smart_split(body):
        first_word = part.split()[0].upper() if part.split() else ''
        if first_word in SQL_CONSTRAINT_KEYWORDS or OTHER_CONSTRAINT.match(part):
            continue

        col_match = LOOSE_COLUMN_PATTERN.match(part)
        if not col_match:
            logger.debug(f"Skipping unreadable column text '{part}' in table '{table_name}'")
            continue

        attribute = Attribute(col_match.group(1), normalize_data_type(col_match.group(2)))
        _read_column_options(table_name, attribute, part[col_match.end():],
                             primary_keys, foreign_keys)
        entity.add_attribute(attribute)

    apply_keys(entity, primary_keys, foreign_keys)
    return entity, foreign_keys


class SQLParser:
    """
    Parses SQL scripts into ER diagrams.

    A parser instance keeps no state between calls; every parse_sql call
    starts from an empty context.
    """

    def __init__(self, config=None):
        self.config = config or get_config()

    def parse_sql(self, sql: str, name: str = "ER Diagram") -> ERDiagram:
        """
        Parse CREATE TABLE (and ALTER TABLE ... ADD FOREIGN KEY) statements.

        Malformed statements never raise: each one is tried strictly, then
        with the permissive extractor, and skipped if both fail.

        Args:
            sql: SQL script text
            name: Name for the resulting diagram

        Returns:
            The populated ERDiagram
        """
        context = SQLParseContext(name)
        statements = split_sql_statements(sql)

        for statement in statements:
            self._parse_statement(statement, context)

        relationships = resolve_foreign_keys(context.diagram, context.pending_foreign_keys)

        if self.config.AUTO_LAYOUT:
            context.diagram.auto_layout(**self.config.get_layout_config())

        logger.info(f"Parsed {len(context.diagram.entities)} table(s) and "
                    f"{len(relationships)} relationship(s) from {len(statements)} statement(s), "
                    f"{context.skipped_statements} skipped")
        return context.diagram

    def _parse_statement(self, statement: str, context: SQLParseContext) -> None:
        text = strip_sql_comments(statement)

        alter_match = ALTER_TABLE_PATTERN.match(text)
        if alter_match:
            self._parse_alter_table(alter_match.group(1), alter_match.group(2), context)
            return

        try:
            result = parse_create_table(text)
        except DDLSyntaxError as e:
            logger.debug(f"Strict parse failed ({e}), trying fallback extraction")
            result = parse_create_table_fallback(text)

        if result is None:
            context.skipped_statements += 1
            logger.debug(f"Skipping statement: {text[:60]!r}")
            return

        entity, foreign_keys = result
        context.diagram.add_entity(entity)
        context.pending_foreign_keys.extend(foreign_keys)

    def _parse_alter_table(self, table_name: str, alter_content: str,
                           context: SQLParseContext) -> None:
        entity = context.diagram.get_entity_by_name(table_name)
        if entity is None:
            context.skipped_statements += 1
            logger.debug(f"ALTER TABLE on undeclared table '{table_name}' ignored")
            return

        primary_keys = []
        for pk_match in ADD_PRIMARY_KEY_PATTERN.finditer(alter_content):
            primary_keys.extend(split_identifier_list(pk_match.group(1)))

        foreign_keys = []
        for fk_match in ADD_FOREIGN_KEY_PATTERN.finditer(alter_content):
            foreign_keys.extend(build_foreign_keys(
                entity.name, fk_match.group(1), fk_match.group(2), fk_match.group(3)))

        apply_keys(entity, primary_keys, foreign_keys)
        context.pending_foreign_keys.extend(foreign_keys)


def parse_sql(sql: str, config=None) -> ERDiagram:
    """Parse a SQL script with a fresh SQLParser"""
    return SQLParser(config).parse_sql(sql)
