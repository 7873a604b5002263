"""
Relationship Inferencer - second pass over deferred references

Both parsers record references they cannot resolve while reading (a foreign
key to a table declared further down, a parent class declared later) and
hand them to the functions here once every declaration is known.
"""
import logging
from typing import List, NamedTuple, Optional, Tuple

from .er_model import ERDiagram, Relationship, RelationshipType
from .patterns import is_primitive_or_common_type
from .uml_model import ClassKind, UMLDiagram, UMLRelationship, UMLRelationshipType

logger = logging.getLogger(__name__)


class PendingForeignKey(NamedTuple):
    """A foreign key column waiting for its target table"""
    source_table: str
    column: str
    target_table: str
    target_column: Optional[str]


class PendingEdge(NamedTuple):
    """An extends/implements clause waiting for its target class"""
    source: str
    target: str


# (source column is key, target column is key) -> cardinality
CARDINALITY_TABLE = {
    (True, True): RelationshipType.ONE_TO_ONE,
    (False, True): RelationshipType.MANY_TO_ONE,
    (True, False): RelationshipType.ONE_TO_MANY,
    (False, False): RelationshipType.MANY_TO_MANY,
}


def classify_cardinality(source_is_pk: bool, target_is_pk: bool) -> RelationshipType:
    return CARDINALITY_TABLE[(bool(source_is_pk), bool(target_is_pk))]


def resolve_foreign_keys(diagram: ERDiagram,
                         pending: List[PendingForeignKey]) -> List[Relationship]:
    """
    Turn deferred foreign keys into relationships on diagram.

    Keys whose source or target table was never declared are dropped without
    error. Returns the relationships that were added.
    """
    created = []
    for fk in pending:
        source = diagram.get_entity_by_name(fk.source_table)
        if source is None:
            continue

        target = diagram.get_entity_by_name(fk.target_table)
        if target is None:
            logger.debug(f"Dropping foreign key {fk.source_table}.{fk.column}: "
                         f"table '{fk.target_table}' is not declared")
            continue

        # source must be the whole primary key, target only a member of it
        target_attribute = target.get_attribute(fk.target_column)
        target_is_pk = target_attribute is not None and target_attribute.is_primary_key
        rel_type = classify_cardinality(source.is_unique_key(fk.column), target_is_pk)
        relationship = Relationship(
            source, target, rel_type,
            source_attribute=source.get_attribute(fk.column),
            target_attribute=target_attribute,
        )
        diagram.add_relationship(relationship)
        created.append(relationship)

    return created


def resolve_type_edges(diagram: UMLDiagram,
                       inheritance: List[PendingEdge],
                       implementation: List[PendingEdge]) -> List[UMLRelationship]:
    """
    Resolve extends/implements clauses, creating stub classes for parents and
    interfaces that were never declared.
    """
    created = []
    edge_groups: List[Tuple[List[PendingEdge], UMLRelationshipType, ClassKind]] = [
        (inheritance, UMLRelationshipType.INHERITANCE, ClassKind.CLASS),
        (implementation, UMLRelationshipType.IMPLEMENTATION, ClassKind.INTERFACE),
    ]

    for edges, rel_type, stub_kind in edge_groups:
        for edge in edges:
            source = diagram.find_class_by_name(edge.source)
            if source is None:
                continue
            target, is_new = diagram.resolve_or_stub(edge.target, stub_kind)
            if is_new:
                logger.debug(f"Stub {stub_kind.value} '{edge.target}' created for {edge.source}")

            relationship = UMLRelationship(source, target, rel_type)
            diagram.add_relationship(relationship)
            created.append(relationship)

    return created


def infer_compositions(diagram: UMLDiagram) -> List[UMLRelationship]:
    """
    Add a composition edge for every attribute whose type names a class in
    the diagram. Primitive and common library types are skipped.
    """
    created = []
    for umlclass in list(diagram.classes):
        for attribute in umlclass.attributes:
            if is_primitive_or_common_type(attribute.type):
                continue

            target = diagram.find_class_by_name(attribute.type)
            if target is None:
                continue

            relationship = UMLRelationship(umlclass, target, UMLRelationshipType.COMPOSITION,
                                           target_label='1')
            diagram.add_relationship(relationship)
            created.append(relationship)

    return created
