"""
Parsing and relationship inference core
"""
from .er_model import Attribute, Entity, ERDiagram, Relationship, RelationshipType
from .java_parser import JavaParser, parse_java_code
from .registry import SymbolRegistry
from .sql_parser import DDLSyntaxError, SQLParser, parse_sql
from .uml_model import (
    ClassKind,
    UMLAttribute,
    UMLClass,
    UMLDiagram,
    UMLMethod,
    UMLParameter,
    UMLRelationship,
    UMLRelationshipType,
)

__all__ = [
    'Attribute',
    'Entity',
    'ERDiagram',
    'Relationship',
    'RelationshipType',
    'SQLParser',
    'DDLSyntaxError',
    'parse_sql',
    'JavaParser',
    'parse_java_code',
    'SymbolRegistry',
    'ClassKind',
    'UMLAttribute',
    'UMLClass',
    'UMLDiagram',
    'UMLMethod',
    'UMLParameter',
    'UMLRelationship',
    'UMLRelationshipType',
]
