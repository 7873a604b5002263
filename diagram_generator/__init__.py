"""
Diagram Generator - SQL DDL to ER diagrams, Java source to UML class diagrams
"""
from .core import (
    ERDiagram,
    JavaParser,
    SQLParser,
    UMLDiagram,
    parse_java_code,
    parse_sql,
)

__version__ = '1.0.0'

__all__ = [
    'ERDiagram',
    'UMLDiagram',
    'SQLParser',
    'JavaParser',
    'parse_sql',
    'parse_java_code',
]
