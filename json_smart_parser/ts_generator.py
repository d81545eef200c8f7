from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .paths import is_identifier
from .type_nodes import (
    ArrayNode,
    NumberLiteral,
    ObjectNode,
    Primitive,
    StringLiteral,
    TsGenOptions,
    TypeNode,
    UnionNode,
    format_number,
    infer,
    signature,
)

_NON_ALNUM_RE = re.compile(r'[^A-Za-z0-9]+')
_NAME_START_RE = re.compile(r'[A-Za-z_$]')
_FALLBACK_OBJECT = "{ [key: string]: unknown }"


@dataclass
class NameTable:
    """Declaration names keyed by object signature."""

    by_signature: Dict[str, str] = field(default_factory=dict)
    taken: Set[str] = field(default_factory=set)

    def claim(self, proposed: str, sig: str) -> str:
        base = declaration_name(proposed)
        name = base
        i = 2
        while name in self.taken:
            name = f"{base}{i}"
            i += 1
        self.taken.add(name)
        self.by_signature[sig] = name
        return name


def to_pascal(s: str) -> str:
    words = [w for w in _NON_ALNUM_RE.sub(' ', s or 'Type').split(' ') if w]
    return ''.join(w[0].upper() + w[1:] for w in words) or "Type"


def declaration_name(s: str) -> str:
    name = to_pascal(s)
    return name if _NAME_START_RE.match(name) else "Type"


def quote_key(key: str) -> str:
    return key if is_identifier(key) else json.dumps(key, ensure_ascii=False)


def assign_names(root: TypeNode, root_name: str) -> NameTable:
    """First pass: give every distinct object shape a declaration name.

    Names come from the enclosing property, depth first. When the root is
    not an object its name is reserved for the root alias.
    """
    table = NameTable()
    if not isinstance(root, ObjectNode):
        table.taken.add(declaration_name(root_name))
        _walk_names(root, f"{root_name}Item" if isinstance(root, ArrayNode) else root_name, table)
    else:
        _walk_names(root, root_name, table)
    return table


def _walk_names(node: TypeNode, prop_name: str, table: NameTable) -> None:
    if isinstance(node, ObjectNode):
        sig = signature(node)
        if sig not in table.by_signature:
            table.claim(prop_name, sig)
        for name, f in node.props:
            _walk_names(f.type, name, table)
    elif isinstance(node, ArrayNode):
        _walk_names(node.element, prop_name or "Item", table)
    elif isinstance(node, UnionNode):
        for member in node.members:
            _walk_names(member, prop_name, table)


def type_ref(node: TypeNode, table: NameTable) -> str:
    if isinstance(node, Primitive):
        return "Date" if node.kind == 'date' else node.kind
    if isinstance(node, StringLiteral):
        return json.dumps(node.value, ensure_ascii=False)
    if isinstance(node, NumberLiteral):
        return format_number(node.value)
    if isinstance(node, ArrayNode):
        return f"{type_ref(node.element, table)}[]"
    if isinstance(node, UnionNode):
        parts = sorted({type_ref(m, table) for m in node.members})
        return f"({' | '.join(parts)})" if len(parts) > 1 else parts[0]
    if isinstance(node, ObjectNode):
        return table.by_signature.get(signature(node), _FALLBACK_OBJECT)
    raise TypeError(f"Unknown type node: {node!r}")


def render_declarations(root: TypeNode, table: NameTable, root_name: str) -> str:
    """Second pass: print one interface per object signature, then a root alias if needed."""
    lines: List[str] = []
    printed: Set[str] = set()

    def emit(node: TypeNode) -> None:
        if isinstance(node, ObjectNode):
            sig = signature(node)
            if sig not in printed:
                printed.add(sig)
                fields = node.fields
                lines.append(f"export interface {table.by_signature[sig]} {{")
                for key in sorted(fields):
                    f = fields[key]
                    lines.append(f"  {quote_key(key)}{'?' if f.optional else ''}: {type_ref(f.type, table)};")
                lines.append("}")
            for _, f in node.props:
                emit(f.type)
        elif isinstance(node, ArrayNode):
            emit(node.element)
        elif isinstance(node, UnionNode):
            for member in node.members:
                emit(member)

    emit(root)
    if not isinstance(root, ObjectNode):
        lines.append(f"export type {declaration_name(root_name)} = {type_ref(root, table)}")
    return "\n".join(lines)


def generate_ts_from_json(value: Any, options: Optional[TsGenOptions] = None) -> str:
    """Infer TypeScript declarations describing `value`."""
    opt = options or TsGenOptions()
    root_name = opt.root_name or "Root"
    root = infer(value, opt)
    table = assign_names(root, root_name)
    return render_declarations(root, table, root_name)
