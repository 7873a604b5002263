"""
UML Model Classes - Represent classes, members, and class relationships
"""
from enum import Enum
from typing import List, Optional, Dict, Any, Tuple

from .registry import SymbolRegistry

VISIBILITY_SYMBOLS = {
    'public': '+',
    'private': '-',
    'protected': '#',
    'package': '~',
}

DEFAULT_VISIBILITY = 'package'


class ClassKind(Enum):
    """Kind of a declared type"""
    CLASS = 'class'
    INTERFACE = 'interface'
    ENUM = 'enum'

    @classmethod
    def from_keyword(cls, keyword: str) -> 'ClassKind':
        return cls(keyword.strip().lower())


class UMLRelationshipType(Enum):
    """Relationship kinds between UML classes"""
    ASSOCIATION = 'association'
    INHERITANCE = 'inheritance'
    IMPLEMENTATION = 'implementation'
    DEPENDENCY = 'dependency'
    AGGREGATION = 'aggregation'
    COMPOSITION = 'composition'


def visibility_symbol(visibility: str) -> str:
    return VISIBILITY_SYMBOLS.get(visibility, VISIBILITY_SYMBOLS[DEFAULT_VISIBILITY])


class UMLParameter:
    """A single method parameter"""

    def __init__(self, name: str, type: str):
        self.name = name
        self.type = type

    def to_dict(self):
        return {"name": self.name, "type": self.type}

    def __str__(self):
        return f"{self.name} : {self.type}"

    def __repr__(self):
        return f"UMLParameter(name={self.name}, type={self.type})"


class UMLAttribute:
    """A field of a UML class"""

    def __init__(self, name: str, type: str, visibility: str = DEFAULT_VISIBILITY,
                 is_static: bool = False, is_final: bool = False):
        self.name = name
        self.type = type
        self.visibility = visibility
        self.is_static = is_static
        self.is_final = is_final

    def get_visibility_symbol(self) -> str:
        return visibility_symbol(self.visibility)

    def to_dict(self):
        return {
            "name": self.name,
            "type": self.type,
            "visibility": self.visibility,
            "isStatic": self.is_static,
            "isFinal": self.is_final,
        }

    def __str__(self):
        text = f"{self.get_visibility_symbol()} "
        if self.is_static:
            text += "static "
        if self.is_final:
            text += "final "
        return f"{text}{self.name} : {self.type}"

    def __repr__(self):
        return f"UMLAttribute(name={self.name}, type={self.type}, visibility={self.visibility})"


class UMLMethod:
    """A method of a UML class"""

    def __init__(self, name: str, return_type: str, visibility: str = DEFAULT_VISIBILITY,
                 is_static: bool = False, is_abstract: bool = False):
        self.name = name
        self.return_type = return_type
        self.parameters: List[UMLParameter] = []
        self.visibility = visibility
        self.is_static = is_static
        self.is_abstract = is_abstract

    def add_parameter(self, parameter: UMLParameter):
        self.parameters.append(parameter)

    def get_visibility_symbol(self) -> str:
        return visibility_symbol(self.visibility)

    def to_dict(self):
        return {
            "name": self.name,
            "returnType": self.return_type,
            "visibility": self.visibility,
            "isStatic": self.is_static,
            "isAbstract": self.is_abstract,
            "parameters": [param.to_dict() for param in self.parameters],
        }

    def __str__(self):
        text = f"{self.get_visibility_symbol()} "
        if self.is_static:
            text += "static "
        if self.is_abstract:
            text += "abstract "
        params = ", ".join(str(param) for param in self.parameters)
        text += f"{self.name}({params})"
        if self.return_type and self.return_type != 'void':
            text += f" : {self.return_type}"
        return text

    def __repr__(self):
        return f"UMLMethod(name={self.name}, returns={self.return_type}, params={len(self.parameters)})"


class UMLClass:
    """A class, interface or enum in a UML diagram"""

    def __init__(self, name: str, kind: ClassKind = ClassKind.CLASS,
                 package_name: Optional[str] = None, is_stub: bool = False):
        self.name = name
        self.kind = kind
        self.package_name = package_name
        self.attributes: List[UMLAttribute] = []
        self.methods: List[UMLMethod] = []
        # Only synthesized to satisfy a reference, never declared
        self.is_stub = is_stub
        self.x = 0.0
        self.y = 0.0

    def add_attribute(self, attribute: UMLAttribute):
        self.attributes.append(attribute)

    def add_method(self, method: UMLMethod):
        self.methods.append(method)

    @property
    def qualified_name(self) -> str:
        if self.package_name:
            return f"{self.package_name}.{self.name}"
        return self.name

    def to_dict(self):
        return {
            "name": self.name,
            "kind": self.kind.value,
            "package": self.package_name,
            "stub": self.is_stub,
            "attributes": [attr.to_dict() for attr in self.attributes],
            "methods": [method.to_dict() for method in self.methods],
            "x": self.x,
            "y": self.y,
        }

    def __str__(self):
        return self.name

    def __repr__(self):
        return (f"UMLClass(name={self.name}, kind={self.kind.value}, "
                f"attributes={len(self.attributes)}, methods={len(self.methods)})")


class UMLRelationship:
    """A directed relationship between two UML classes"""

    def __init__(self, source: UMLClass, target: UMLClass, rel_type: UMLRelationshipType,
                 source_label: Optional[str] = None, target_label: Optional[str] = None):
        self.source = source
        self.target = target
        self.rel_type = rel_type
        # multiplicity or role
        self.source_label = source_label
        self.target_label = target_label

    def involves(self, umlclass: UMLClass) -> bool:
        return self.source is umlclass or self.target is umlclass

    def to_dict(self):
        return {
            "source": self.source.name,
            "target": self.target.name,
            "type": self.rel_type.name,
            "sourceLabel": self.source_label,
            "targetLabel": self.target_label,
        }

    def __str__(self):
        return f"{self.source.name} --[{self.rel_type.value}]--> {self.target.name}"

    def __repr__(self):
        return f"UMLRelationship({self.source.name} -> {self.target.name}, type={self.rel_type.name})"


class UMLDiagram:
    """Classes and relationships produced from one Java source text"""

    def __init__(self, name: str = "UML Diagram"):
        self.name = name
        self.classes: List[UMLClass] = []
        self.relationships: List[UMLRelationship] = []
        self._registry = SymbolRegistry(case_sensitive=True)

    def add_class(self, umlclass: UMLClass):
        """Append a class; a duplicate name takes over the lookup slot"""
        self.classes.append(umlclass)
        self._registry.register(umlclass.name, umlclass)

    def remove_class(self, umlclass: UMLClass):
        """Remove a class together with every relationship that touches it"""
        if umlclass not in self.classes:
            return
        self.classes.remove(umlclass)
        self.relationships = [rel for rel in self.relationships if not rel.involves(umlclass)]
        self._registry.unregister(umlclass.name, umlclass)
        if umlclass.name not in self._registry:
            for other in reversed(self.classes):
                if other.name == umlclass.name:
                    self._registry.register(other.name, other)
                    break

    def find_class_by_name(self, name: Optional[str]) -> Optional[UMLClass]:
        return self._registry.get(name)

    def resolve_or_stub(self, name: str, kind: ClassKind = ClassKind.CLASS) -> Tuple[UMLClass, bool]:
        """
        Return the class registered under name, synthesizing an empty stub of
        the given kind when nothing was declared.
        """
        umlclass, created = self._registry.resolve_or_stub(
            name, lambda stub_name: UMLClass(stub_name, kind, is_stub=True))
        if created:
            self.classes.append(umlclass)
        return umlclass, created

    def add_relationship(self, relationship: UMLRelationship):
        self.relationships.append(relationship)

    def remove_relationship(self, relationship: UMLRelationship):
        if relationship in self.relationships:
            self.relationships.remove(relationship)

    def get_relationships_for_class(self, umlclass: UMLClass) -> List[UMLRelationship]:
        return [rel for rel in self.relationships if rel.involves(umlclass)]

    def clear(self):
        """Drop all classes and relationships"""
        self.classes = []
        self.relationships = []
        self._registry.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "classes": [umlclass.to_dict() for umlclass in self.classes],
            "relationships": [rel.to_dict() for rel in self.relationships],
        }

    def __repr__(self):
        return f"UMLDiagram(classes={len(self.classes)}, relationships={len(self.relationships)})"
