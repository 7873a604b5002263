"""
ER Model Classes - Represent entities, attributes, and relationships
"""
import math
from enum import Enum
from typing import List, Optional, Dict, Any

from .registry import SymbolRegistry


class RelationshipType(Enum):
    """Cardinality of a relationship between two entities"""
    ONE_TO_ONE = '1:1'
    ONE_TO_MANY = '1:N'
    MANY_TO_ONE = 'N:1'
    MANY_TO_MANY = 'N:M'

    @property
    def notation(self) -> str:
        return self.value


class Attribute:
    """Represents an attribute (column) of an entity."""
    def __init__(self, name: str, data_type: str, is_primary_key: bool = False,
                 is_foreign_key: bool = False, referenced_table: Optional[str] = None,
                 referenced_column: Optional[str] = None, is_nullable: bool = True):
        self.name = name
        self.data_type = data_type
        self.is_primary_key = is_primary_key
        self.is_foreign_key = is_foreign_key
        self.referenced_table = referenced_table
        self.referenced_column = referenced_column
        self.is_nullable = is_nullable and not is_primary_key

    def mark_primary_key(self):
        """Primary key columns are never nullable"""
        self.is_primary_key = True
        self.is_nullable = False

    def mark_foreign_key(self, table: str, column: Optional[str]):
        self.is_foreign_key = True
        self.referenced_table = table
        self.referenced_column = column

    def to_dict(self):
        """Converts the attribute to a dictionary."""
        return {
            "name": self.name,
            "type": self.data_type,
            "isPK": self.is_primary_key,
            "isFK": self.is_foreign_key,
            "referencedTable": self.referenced_table,
            "referencedColumn": self.referenced_column,
            "nullable": self.is_nullable,
        }

    def __str__(self):
        text = f"{self.name} ({self.data_type})"
        if self.is_primary_key:
            text += " PK"
        if self.is_foreign_key:
            text += " FK"
        if not self.is_nullable:
            text += " NOT NULL"
        return text

    def __repr__(self):
        pk_str = " [PK]" if self.is_primary_key else ""
        fk_str = f" [FK -> {self.referenced_table}]" if self.is_foreign_key else ""
        return f"Attribute(name={self.name}{pk_str}{fk_str}, type={self.data_type})"


class Entity:
    """Represents an entity (table) in the ER diagram"""

    def __init__(self, name: str):
        self.name = name
        self.attributes: List[Attribute] = []
        # Owned by the rendering side
        self.x = 0.0
        self.y = 0.0

    def add_attribute(self, attribute: Attribute):
        """Add an attribute to this entity"""
        self.attributes.append(attribute)

    def get_attribute(self, name: Optional[str]) -> Optional[Attribute]:
        """Find a column by name, ignoring case"""
        if name is None:
            return None
        lowered = name.lower()
        for attr in self.attributes:
            if attr.name.lower() == lowered:
                return attr
        return None

    @property
    def primary_keys(self) -> List[Attribute]:
        return [attr for attr in self.attributes if attr.is_primary_key]

    def is_unique_key(self, column: Optional[str]) -> bool:
        """
        True when column alone is this entity's primary key.

        A column that is only one part of a composite key does not identify a
        row by itself, so it counts as the "many" side of a relationship.
        """
        attr = self.get_attribute(column)
        if attr is None or not attr.is_primary_key:
            return False
        return len(self.primary_keys) == 1

    def to_dict(self):
        return {
            "name": self.name,
            "attributes": [attr.to_dict() for attr in self.attributes],
            "x": self.x,
            "y": self.y,
        }

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Entity(name={self.name}, attributes={len(self.attributes)})"


class Relationship:
    """Represents a relationship between entities"""

    def __init__(self, source_entity: Entity, target_entity: Entity,
                 rel_type: RelationshipType,
                 source_attribute: Optional[Attribute] = None,
                 target_attribute: Optional[Attribute] = None,
                 name: Optional[str] = None):
        self.source_entity = source_entity
        self.target_entity = target_entity
        self.rel_type = rel_type
        self.source_attribute = source_attribute
        self.target_attribute = target_attribute
        self.name = name or f"{source_entity.name}_{target_entity.name}"

    def involves(self, entity: Entity) -> bool:
        return self.source_entity is entity or self.target_entity is entity

    def to_dict(self):
        return {
            "name": self.name,
            "source": self.source_entity.name,
            "target": self.target_entity.name,
            "type": self.rel_type.name,
            "cardinality": self.rel_type.notation,
            "sourceAttribute": self.source_attribute.name if self.source_attribute else None,
            "targetAttribute": self.target_attribute.name if self.target_attribute else None,
        }

    def __str__(self):
        return f"{self.source_entity.name} {self.rel_type.notation} {self.target_entity.name}"

    def __repr__(self):
        return (f"Relationship({self.source_entity.name} -> {self.target_entity.name}, "
                f"type={self.rel_type.name})")


class ERDiagram:
    """Entities and relationships produced from one SQL script"""

    def __init__(self, name: str = "ER Diagram"):
        self.name = name
        self.entities: List[Entity] = []
        self.relationships: List[Relationship] = []
        self._registry = SymbolRegistry(case_sensitive=False)

    def add_entity(self, entity: Entity):
        """Append entity; a duplicate name takes over the lookup slot"""
        self.entities.append(entity)
        self._registry.register(entity.name, entity)

    def remove_entity(self, entity: Entity):
        """Remove entity together with every relationship that touches it"""
        if entity not in self.entities:
            return
        self.entities.remove(entity)
        self.relationships = [rel for rel in self.relationships if not rel.involves(entity)]
        self._registry.unregister(entity.name, entity)
        if entity.name not in self._registry:
            # fall back to the latest remaining declaration of the same table
            for other in reversed(self.entities):
                if other.name.lower() == entity.name.lower():
                    self._registry.register(other.name, other)
                    break

    def get_entity_by_name(self, name: Optional[str]) -> Optional[Entity]:
        return self._registry.get(name)

    def has_entity(self, name: str) -> bool:
        return name in self._registry

    def add_relationship(self, relationship: Relationship):
        self.relationships.append(relationship)

    def remove_relationship(self, relationship: Relationship):
        if relationship in self.relationships:
            self.relationships.remove(relationship)

    def get_relationships_for_entity(self, entity: Entity) -> List[Relationship]:
        return [rel for rel in self.relationships if rel.involves(entity)]

    def auto_layout(self, cell_width: float = 250, cell_height: float = 300,
                    start_x: float = 50, start_y: float = 50):
        """Place entities on a square-ish grid, row by row"""
        count = len(self.entities)
        if count == 0:
            return

        cols = math.ceil(math.sqrt(count))
        for index, entity in enumerate(self.entities):
            row, col = divmod(index, cols)
            entity.x = start_x + col * cell_width
            entity.y = start_y + row * cell_height

    def clear(self):
        """Drop all entities and relationships"""
        self.entities = []
        self.relationships = []
        self._registry.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "entities": [entity.to_dict() for entity in self.entities],
            "relationships": [rel.to_dict() for rel in self.relationships],
        }

    def __repr__(self):
        return f"ERDiagram(entities={len(self.entities)}, relationships={len(self.relationships)})"
