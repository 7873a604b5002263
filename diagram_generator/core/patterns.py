"""
Lexical pattern matchers for SQL DDL and Java declarations.

Everything here is regex level; no grammar is built. The parsers combine
these patterns with the bracket scanners in ``splitter``.
"""
import re
from typing import List

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

# `name`, "name", [name] or plain name, optionally schema-qualified
_SQL_IDENT = r'[`"\[]?(?:\w+[`"\]]?\.[`"\[]?)?(\w+)[`"\]]?'

CREATE_TABLE_PATTERN = re.compile(
    r'^\s*CREATE\s+(?:(?:GLOBAL\s+|LOCAL\s+)?TEMP(?:ORARY)?\s+)?TABLE\s+'
    r'(?:IF\s+NOT\s+EXISTS\s+)?' + _SQL_IDENT + r'\s*\(',
    re.IGNORECASE)

# Permissive variant: anywhere in the statement, no opening paren required
LOOSE_TABLE_PATTERN = re.compile(
    r'CREATE\s+(?:\w+\s+){0,3}?TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?' + _SQL_IDENT,
    re.IGNORECASE)

ALTER_TABLE_PATTERN = re.compile(
    r'^\s*ALTER\s+TABLE\s+(?:ONLY\s+)?' + _SQL_IDENT + r'\s+(.*)$',
    re.IGNORECASE | re.DOTALL)

COLUMN_PATTERN = re.compile(
    r'^' + _SQL_IDENT + r'\s+([A-Za-z_]\w*(?:\s+(?:PRECISION|VARYING))?(?:\s*\([^)]*\))?(?:\s*\[\s*\])?)'
    r'(.*)$',
    re.IGNORECASE | re.DOTALL)

# Same shape but tolerates a missing closing paren on the type arguments
LOOSE_COLUMN_PATTERN = re.compile(
    r'^' + _SQL_IDENT + r'\s+([A-Za-z_]\w*(?:\s*\(\s*\d+(?:\s*,\s*\d+)?\s*\)?)?)',
    re.IGNORECASE)

CONSTRAINT_PREFIX = r'^\s*(?:CONSTRAINT\s+' + _SQL_IDENT.replace('(\\w+)', '\\w+') + r'\s+)?'

PRIMARY_KEY_CONSTRAINT = re.compile(
    CONSTRAINT_PREFIX + r'PRIMARY\s+KEY\s*(?:\w+\s*)?(?:USING\s+\w+\s*)?\(([^)]+)\)',
    re.IGNORECASE)

FOREIGN_KEY_CONSTRAINT = re.compile(
    CONSTRAINT_PREFIX + r'FOREIGN\s+KEY\s*(?:\w+\s*)?\(([^)]+)\)\s*REFERENCES\s+'
    + _SQL_IDENT + r'\s*(?:\(([^)]+)\))?',
    re.IGNORECASE)

# KEY/INDEX need a column list so `key` and `index` still work as column names;
# a digit or quote after `(` is a type argument, e.g. `key VARCHAR(50)`
OTHER_CONSTRAINT = re.compile(
    CONSTRAINT_PREFIX + r'(?:(?:CHECK|EXCLUDE)\b|'
    r'(?:UNIQUE(?:\s+(?:KEY|INDEX))?|(?:FULLTEXT\s+|SPATIAL\s+)?(?:KEY|INDEX))\s*'
    r'(?:[`"\[]?\w+[`"\]]?\s*)?(?:USING\s+\w+\s*)?\((?!\s*[\d\']))',
    re.IGNORECASE)

# Anywhere inside a statement, used by the fallback extractor
PRIMARY_KEY_ANYWHERE = re.compile(r'PRIMARY\s+KEY\s*(?:USING\s+\w+\s*)?\(([^)]+)\)', re.IGNORECASE)

FOREIGN_KEY_ANYWHERE = re.compile(
    r'FOREIGN\s+KEY\s*\(([^)]+)\)\s*REFERENCES\s+' + _SQL_IDENT + r'\s*(?:\(([^)]+)\))?',
    re.IGNORECASE)

ADD_FOREIGN_KEY_PATTERN = re.compile(
    r'ADD\s+(?:CONSTRAINT\s+[`"\[]?\w+[`"\]]?\s+)?FOREIGN\s+KEY\s*\(([^)]+)\)\s*REFERENCES\s+'
    + _SQL_IDENT + r'\s*(?:\(([^)]+)\))?',
    re.IGNORECASE)

ADD_PRIMARY_KEY_PATTERN = re.compile(
    r'ADD\s+(?:CONSTRAINT\s+[`"\[]?\w+[`"\]]?\s+)?PRIMARY\s+KEY\s*(?:USING\s+\w+\s*)?\(([^)]+)\)',
    re.IGNORECASE)

INLINE_REFERENCES = re.compile(
    r'\bREFERENCES\s+' + _SQL_IDENT + r'\s*(?:\(([^)]+)\))?',
    re.IGNORECASE)

INLINE_PRIMARY_KEY = re.compile(r'\bPRIMARY\s+KEY\b', re.IGNORECASE)
NOT_NULL = re.compile(r'\bNOT\s+NULL\b', re.IGNORECASE)

LINE_COMMENT = re.compile(r'--[^\n]*')
BLOCK_COMMENT = re.compile(r'/\*.*?\*/', re.DOTALL)

# Words that start a column-list part but never name a column.
# KEY and INDEX are left out, see OTHER_CONSTRAINT
SQL_CONSTRAINT_KEYWORDS = {
    'CONSTRAINT', 'PRIMARY', 'FOREIGN', 'UNIQUE', 'CHECK', 'FULLTEXT', 'SPATIAL',
    'EXCLUDE', 'CREATE', 'TABLE',
}


def unquote_identifier(name: str) -> str:
    """Strip quoting characters and surrounding whitespace from an identifier"""
    name = name.strip().strip('`"\'[]')
    # schema.table -> table
    if '.' in name:
        name = name.rsplit('.', 1)[-1].strip('`"\'[]')
    return name


def split_identifier_list(text: str) -> List[str]:
    """Split a parenthesized column list body such as `a`, "b", c"""
    names = []
    for item in text.split(','):
        # drop ordering/length suffixes like `name(10) DESC`
        item = re.sub(r'\(.*$', '', item.strip())
        item = item.split()[0] if item.split() else ''
        item = unquote_identifier(item)
        if item:
            names.append(item)
    return names


def normalize_data_type(data_type: str) -> str:
    """Collapse whitespace so `DECIMAL (10, 2)` reads `DECIMAL(10,2)`"""
    data_type = re.sub(r'\s*\(\s*', '(', data_type.strip())
    data_type = re.sub(r'\s*,\s*', ',', data_type)
    data_type = re.sub(r'\s*\)', ')', data_type)
    return re.sub(r'\s+', ' ', data_type)


# ---------------------------------------------------------------------------
# Java
# ---------------------------------------------------------------------------

_JAVA_TYPE = (r'[\w.$]+(?:\s*<[\w<>\[\]?,.\s$&]*?>)?(?:\s*\[\s*\])*(?:\s*\.\.\.)?')

PACKAGE_PATTERN = re.compile(r'^\s*package\s+([\w.]+)\s*;', re.MULTILINE)

CLASS_PATTERN = re.compile(
    r'(?<![\w.@])(?:(?:public|private|protected|abstract|final|static|sealed|non-sealed|strictfp)\s+)*'
    r'(class|interface|enum)\s+(\w+)'
    r'(?:\s*<[^{;]*?>)?'
    r'(?:\s+extends\s+([^{;]+?))?'
    r'(?:\s+implements\s+([^{;]+?))?'
    r'(?:\s+permits\s+[^{;]+?)?'
    r'\s*\{')

FIELD_PATTERN = re.compile(
    r'^(?:(public|private|protected)\s+)?'
    r'(?:(static|final|transient|volatile)\s+)?'
    r'(?:(static|final|transient|volatile)\s+)?'
    r'(' + _JAVA_TYPE + r')\s+(\w+)'
    r'(?:\s*=\s*.+)?$',
    re.DOTALL)

METHOD_PATTERN = re.compile(
    r'^(?:(public|private|protected)\s+)?'
    r'(?:(static|abstract|final|synchronized|native|default)\s+)?'
    r'(?:(static|abstract|final|synchronized|native|default)\s+)?'
    r'(?:<[^()]*?>\s+)?'
    r'(' + _JAVA_TYPE + r')\s+(\w+)\s*\(([^)]*)\)'
    r'(?:\s*throws\s+[\w.,\s]+)?$',
    re.DOTALL)

PARAMETER_PATTERN = re.compile(r'(' + _JAVA_TYPE + r')\s+(\w+)\s*(?:,|$)')

ANNOTATION_PATTERN = re.compile(r'@[\w.]+(?:\s*\([^()]*\))?')

# Source-level tokens that must not be mistaken for structure
JAVA_COMMENT_OR_LITERAL = re.compile(
    r'//[^\n]*|/\*.*?\*/|"""(?:\\.|[^\\])*?"""|"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\'',
    re.DOTALL)

JAVA_KEYWORDS = {
    'return', 'new', 'throw', 'else', 'case', 'package', 'import', 'class',
    'interface', 'enum', 'extends', 'implements', 'if', 'for', 'while',
    'switch', 'try', 'catch', 'do', 'synchronized',
}

PRIMITIVE_TYPES = {'int', 'boolean', 'double', 'float', 'long', 'short', 'byte', 'char'}

# Matched by substring, so `List<Course>` and `ArrayList` are both excluded
COMMON_TYPE_FRAGMENTS = (
    'String', 'Integer', 'Boolean', 'Double', 'Float', 'Long', 'Short', 'Byte',
    'Object', 'List', 'Map', 'Set', 'Collection', 'ArrayList', 'HashMap', 'HashSet',
)


def strip_type_arguments(type_name: str) -> str:
    """`Comparable<Student>` -> `Comparable`"""
    return re.sub(r'\s*<.*>\s*$', '', type_name.strip(), flags=re.DOTALL).strip()


def split_type_list(text: str) -> List[str]:
    """
    Split an `extends`/`implements` list on top-level commas and drop
    generic arguments from every entry.
    """
    names = []
    depth = 0
    current = ''
    for char in text:
        if char == '<':
            depth += 1
        elif char == '>':
            depth -= 1
        elif char == ',' and depth == 0:
            names.append(current)
            current = ''
            continue
        current += char
    names.append(current)

    result = []
    for name in names:
        name = strip_type_arguments(name)
        if name:
            result.append(name)
    return result


def normalize_java_type(type_name: str) -> str:
    """Collapse whitespace inside generic and array type spellings"""
    type_name = re.sub(r'\s+', ' ', type_name.strip())
    type_name = re.sub(r'\s*([<>\[\],])\s*', r'\1', type_name)
    return type_name.replace(',', ', ')


def is_primitive_or_common_type(type_name: str) -> bool:
    if type_name in PRIMITIVE_TYPES:
        return True
    return any(fragment in type_name for fragment in COMMON_TYPE_FRAGMENTS)
