"""
Java source parser - class declarations to a UML class diagram
"""
import logging
import re
from typing import List, Optional, Tuple

from ..config import get_config
from .inference import PendingEdge, infer_compositions, resolve_type_edges
from .patterns import (
    ANNOTATION_PATTERN,
    CLASS_PATTERN,
    FIELD_PATTERN,
    JAVA_KEYWORDS,
    METHOD_PATTERN,
    PACKAGE_PATTERN,
    PARAMETER_PATTERN,
    normalize_java_type,
    split_type_list,
)
from .splitter import blank_comments_and_literals, find_matching_bracket, split_member_declarations
from .uml_model import (
    DEFAULT_VISIBILITY,
    ClassKind,
    UMLAttribute,
    UMLClass,
    UMLDiagram,
    UMLMethod,
    UMLParameter,
)

logger = logging.getLogger(__name__)


class JavaParseContext:
    """
    State for a single parse_java_code call.

    Pass 1 only appends to the lists here; pass 3 reads them back once every
    declaration is known.
    """

    def __init__(self, name: str = "UML Diagram"):
        self.diagram = UMLDiagram(name)
        self.declarations: List[Tuple[UMLClass, str]] = []
        self.pending_inheritance: List[PendingEdge] = []
        self.pending_implementation: List[PendingEdge] = []


def parse_package_name(source: str) -> Optional[str]:
    match = PACKAGE_PATTERN.search(source)
    return match.group(1) if match else None


def parse_field(declaration: str) -> Optional[UMLAttribute]:
    """Read `[visibility] [static|final]{0,2} Type name [= init]`"""
    match = FIELD_PATTERN.match(declaration)
    if not match:
        return None

    visibility, modifier1, modifier2, field_type, name = match.groups()
    if field_type in JAVA_KEYWORDS:
        return None

    modifiers = (modifier1, modifier2)
    return UMLAttribute(
        name,
        normalize_java_type(field_type),
        visibility or DEFAULT_VISIBILITY,
        is_static='static' in modifiers,
        is_final='final' in modifiers,
    )


def parse_parameters(parameter_list: str) -> List[UMLParameter]:
    """Tokenize a raw parameter list into parameters, left to right"""
    text = re.sub(r'\bfinal\s+', '', parameter_list)
    return [UMLParameter(name, normalize_java_type(param_type))
            for param_type, name in PARAMETER_PATTERN.findall(text)]


def parse_method(declaration: str, class_name: str) -> Optional[UMLMethod]:
    """Read a method signature; constructors of class_name yield None"""
    match = METHOD_PATTERN.match(declaration)
    if not match:
        return None

    visibility, modifier1, modifier2, return_type, name, parameter_list = match.groups()
    if name == class_name or return_type in JAVA_KEYWORDS:
        return None

    modifiers = (modifier1, modifier2)
    method = UMLMethod(
        name,
        normalize_java_type(return_type),
        visibility or DEFAULT_VISIBILITY,
        is_static='static' in modifiers,
        is_abstract='abstract' in modifiers,
    )
    for parameter in parse_parameters(parameter_list):
        method.add_parameter(parameter)
    return method


class JavaParser:
    """
    Parses Java source into UML class diagrams in three passes:
    declarations, members, then relationship resolution.
    """

    def __init__(self, config=None):
        self.config = config or get_config()

    def parse_java_code(self, java_code: str, name: str = "UML Diagram") -> UMLDiagram:
        """
        Build a UML diagram from Java source text.

        Parents and interfaces that are referenced but never declared become
        stub classes so their edges are kept.
        """
        context = JavaParseContext(name)
        source = blank_comments_and_literals(java_code)
        package_name = parse_package_name(source)

        self._collect_declarations(source, package_name, context)

        for umlclass, body in context.declarations:
            self._collect_members(umlclass, body)

        edges = resolve_type_edges(context.diagram,
                                   context.pending_inheritance,
                                   context.pending_implementation)
        compositions = infer_compositions(context.diagram)

        logger.info(f"Parsed {len(context.declarations)} declaration(s), "
                    f"{len(context.diagram.classes) - len(context.declarations)} stub(s), "
                    f"{len(edges) + len(compositions)} relationship(s)")
        return context.diagram

    def _collect_declarations(self, source: str, package_name: Optional[str],
                              context: JavaParseContext) -> None:
        diagram = context.diagram
        for match in CLASS_PATTERN.finditer(source):
            keyword, class_name, extends_text, implements_text = match.groups()

            umlclass = UMLClass(class_name, ClassKind.from_keyword(keyword), package_name)
            diagram.add_class(umlclass)

            if self.config.AUTO_LAYOUT:
                offset = self.config.CLASS_OFFSET + len(diagram.classes) * self.config.CLASS_STEP
                umlclass.x = offset
                umlclass.y = offset

            open_brace = match.end() - 1
            close_brace = find_matching_bracket(source, open_brace, '{', '}')
            if close_brace == -1:
                logger.debug(f"Body of {class_name} is not closed, reading to end of input")
                close_brace = len(source)
            context.declarations.append((umlclass, source[open_brace + 1:close_brace]))

            if extends_text:
                for parent in split_type_list(extends_text):
                    context.pending_inheritance.append(PendingEdge(class_name, parent))

            if implements_text:
                for interface in split_type_list(implements_text):
                    context.pending_implementation.append(PendingEdge(class_name, interface))

    def _collect_members(self, umlclass: UMLClass, body: str) -> None:
        body = ANNOTATION_PATTERN.sub(' ', body)

        for declaration, terminator in split_member_declarations(body):
            text = ' '.join(declaration.split())

            if terminator == ';':
                attribute = parse_field(text)
                if attribute is not None:
                    umlclass.add_attribute(attribute)
                    continue

            method = parse_method(text, umlclass.name)
            if method is not None:
                umlclass.add_method(method)
            elif terminator == ';':
                logger.debug(f"Ignoring member text in {umlclass.name}: {text[:60]!r}")


def parse_java_code(java_code: str, config=None) -> UMLDiagram:
    """Parse Java source with a fresh JavaParser"""
    return JavaParser(config).parse_java_code(java_code)
