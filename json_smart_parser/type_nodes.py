"""Structural type inference over decoded JSON values.

`infer` turns a value into a tree of immutable type nodes. Array
elements are inferred with literal types so small sets of strings or
numbers can surface as enums; `merge_union` widens literals back to
`string`/`number` once the configured limits are exceeded.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Tuple, Union

_ISO_DATE_RE = re.compile(
    r'[0-9]{4}-[0-9]{2}-[0-9]{2}'
    r'(?:[Tt\s][0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{3})?(?:[Zz]|[+\-][0-9]{2}:?[0-9]{2})?)?'
)
_SLASH_DATE_RE = re.compile(
    r'[0-9]{4}[/-][0-9]{1,2}[/-][0-9]{1,2}'
    r'(?:[Tt\s][0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{1,3})?)?'
)

EnumMode = Union[bool, str]


@dataclass
class TsGenOptions:
    root_name: str = "Root"
    array_sample: int = 100
    max_depth: int = 20
    # False disables literal inference; True or 'auto' keeps literals until a limit is hit.
    enum_strings: EnumMode = 'auto'
    enum_max_unique: int = 8
    enum_max_length: int = 32
    enum_numbers: EnumMode = 'auto'
    enum_num_max_unique: int = 8
    detect_date: bool = False


@dataclass(frozen=True)
class Primitive:
    kind: str


@dataclass(frozen=True)
class StringLiteral:
    value: str
    kind: ClassVar[str] = 'string-literal'


@dataclass(frozen=True)
class NumberLiteral:
    value: Union[int, float]
    kind: ClassVar[str] = 'number-literal'


@dataclass(frozen=True)
class ArrayNode:
    element: 'TypeNode'
    kind: ClassVar[str] = 'array'


@dataclass(frozen=True)
class Field:
    type: 'TypeNode'
    optional: bool = False


@dataclass(frozen=True)
class ObjectNode:
    props: Tuple[Tuple[str, Field], ...] = ()
    kind: ClassVar[str] = 'object'

    @property
    def fields(self) -> Dict[str, Field]:
        return dict(self.props)


@dataclass(frozen=True)
class UnionNode:
    members: Tuple['TypeNode', ...]
    kind: ClassVar[str] = 'union'


TypeNode = Union[Primitive, StringLiteral, NumberLiteral, ArrayNode, ObjectNode, UnionNode]

STRING = Primitive('string')
NUMBER = Primitive('number')
BOOLEAN = Primitive('boolean')
NULL = Primitive('null')
UNKNOWN = Primitive('unknown')
DATE = Primitive('date')


def format_number(value: Union[int, float]) -> str:
    """Render a number the way JSON.stringify would (`1.0` -> `1`)."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return json.dumps(value)


def signature(node: TypeNode) -> str:
    """Canonical text for a node's shape; equal shapes give equal signatures."""
    if isinstance(node, Primitive):
        return node.kind
    if isinstance(node, StringLiteral):
        return f"str({json.dumps(node.value, ensure_ascii=False)})"
    if isinstance(node, NumberLiteral):
        return f"num({format_number(node.value)})"
    if isinstance(node, ArrayNode):
        return f"arr<{signature(node.element)}>"
    if isinstance(node, UnionNode):
        return f"union<{'|'.join(sorted(signature(m) for m in node.members))}>"
    if isinstance(node, ObjectNode):
        fields = node.fields
        parts = [
            f"{json.dumps(k, ensure_ascii=False)}{'?' if fields[k].optional else ''}:{signature(fields[k].type)}"
            for k in sorted(fields)
        ]
        return f"obj{{{','.join(parts)}}}"
    raise TypeError(f"Unknown type node: {node!r}")


def is_likely_iso_date(s: str) -> bool:
    return bool(_ISO_DATE_RE.fullmatch(s) or _SLASH_DATE_RE.fullmatch(s))


def _enabled(mode: EnumMode) -> bool:
    return mode is True or mode == 'auto'


def _widen(members: List[TypeNode], generic: Primitive, literal_kind: str,
           mode: EnumMode, max_unique: int, max_length: int = -1) -> List[TypeNode]:
    literals = [m for m in members if m.kind == literal_kind]
    has_generic = any(m == generic for m in members)
    if not literals and not has_generic:
        return members

    widen = has_generic or not _enabled(mode) or len(literals) > max_unique
    if not widen and max_length >= 0:
        widen = any(len(m.value) > max_length for m in literals)
    if not widen:
        return members

    others = [m for m in members if m.kind != literal_kind and m != generic]
    return others + [generic]


def merge_union(a: TypeNode, b: TypeNode, opt: TsGenOptions) -> TypeNode:
    if a == UNKNOWN:
        return b
    if b == UNKNOWN:
        return a
    if signature(a) == signature(b):
        return a

    members: List[TypeNode] = []
    seen = set()
    for node in (*_flatten(a), *_flatten(b)):
        sig = signature(node)
        if sig not in seen:
            seen.add(sig)
            members.append(node)

    members = _widen(members, STRING, StringLiteral.kind, opt.enum_strings,
                     opt.enum_max_unique, opt.enum_max_length)
    members = _widen(members, NUMBER, NumberLiteral.kind, opt.enum_numbers,
                     opt.enum_num_max_unique)

    if len(members) == 1:
        return members[0]
    return UnionNode(tuple(members))


def _flatten(node: TypeNode) -> Tuple[TypeNode, ...]:
    if isinstance(node, UnionNode):
        return node.members
    return (node,)


def merge_objects(objects: List[ObjectNode], opt: TsGenOptions) -> ObjectNode:
    """Combine object shapes; a field missing from any object becomes optional."""
    names: List[str] = []
    for obj in objects:
        for name, _ in obj.props:
            if name not in names:
                names.append(name)

    props: List[Tuple[str, Field]] = []
    for name in names:
        present = [obj.fields[name] for obj in objects if name in obj.fields]
        merged = present[0].type
        for f in present[1:]:
            merged = merge_union(merged, f.type, opt)
        optional = len(present) < len(objects) or any(f.optional for f in present)
        props.append((name, Field(merged, optional)))
    return ObjectNode(tuple(props))


def infer(value: Any, opt: TsGenOptions, depth: int = 0, favor_literals: bool = False) -> TypeNode:
    if depth > opt.max_depth:
        return UNKNOWN
    if value is None:
        return NULL
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, str):
        if opt.detect_date and is_likely_iso_date(value):
            return DATE
        if favor_literals and _enabled(opt.enum_strings) and len(value) <= opt.enum_max_length:
            return StringLiteral(value)
        return STRING
    if isinstance(value, (int, float)):
        if favor_literals and _enabled(opt.enum_numbers):
            return NumberLiteral(value)
        return NUMBER
    if isinstance(value, list):
        if not value:
            return ArrayNode(UNKNOWN)
        elems = [infer(x, opt, depth + 1, True) for x in value[:max(1, opt.array_sample)]]
        if all(isinstance(e, ObjectNode) for e in elems):
            return ArrayNode(merge_objects(elems, opt))
        element = elems[0]
        for e in elems[1:]:
            element = merge_union(element, e, opt)
        return ArrayNode(element)
    if isinstance(value, dict):
        return ObjectNode(tuple((k, Field(infer(v, opt, depth + 1, False))) for k, v in value.items()))
    return UNKNOWN
