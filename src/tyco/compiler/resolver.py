# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of parsed Tyco syntax trees into a Document.

Passes, in order:

1. Schema: struct definitions become StructDefs; field defaults are coerced.
2. Globals and instances: literals are coerced to their declared types,
   omitted fields take their defaults (or null, if nullable).
3. Reference linking: a primary-key index is built over every keyed
   instance, then every reference is checked against it. References stay
   stored by identity, so forward references and reference cycles between
   instances need no particular declaration order.
4. Template expansion: ``{name}`` placeholders in strings are substituted on
   demand, tracking the (scope, field) nodes currently being expanded so a
   cycle fails instead of recursing forever.
"""

from __future__ import annotations

import datetime
import logging
import re
from typing import Any

from tyco.compiler.syntax import (
    Argument,
    ArrayExpr,
    CallExpr,
    Expr,
    FieldAssignment,
    Literal,
    LiteralKind,
    ObjectExpr,
    StructDecl,
    SyntaxTree,
    TypeExpr,
)
from tyco.config import LoaderConfig
from tyco.errors import (
    DuplicatePrimaryKey,
    MissingRequiredField,
    ParseError,
    TemplateCycleError,
    TycoError,
    TycoTypeError,
    UndefinedTemplateVariable,
    UnknownField,
    UnresolvedReference,
)
from tyco.model.entities import Document, StructDef, key_of
from tyco.model.types import ArrayTypeRef, FieldDef, PrimitiveType, PrimitiveTypeRef, StructTypeRef, TypeRef
from tyco.model.values import (
    ArrayValue,
    BoolValue,
    DateTimeValue,
    DateValue,
    FloatValue,
    InlineInstanceValue,
    Instance,
    IntegerValue,
    NullValue,
    ReferenceValue,
    StringValue,
    TimeValue,
    Value,
)

logger = logging.getLogger("tyco.resolver")

# ###############
# Public Interface
# ###############

TEMPLATE_REGEX = re.compile(r"\{((?:\.\.+)?[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)\}")


def resolve(trees: list[SyntaxTree], config: LoaderConfig | None = None) -> Document:
    """Resolve one or more syntax trees into a single Document.

    Args:
        trees: Parsed sources, in load order. Declarations from all trees
            share one namespace.
        config: Loader options; defaults apply when omitted.

    Returns:
        The fully resolved Document.

    Raises:
        ParseError: For structural problems only visible with the full schema
            (unknown structs or fields, malformed reference calls).
        ResolutionError: For type mismatches, missing fields, dangling
            references, duplicate keys, and template failures.
    """
    return _Resolver(trees, config or LoaderConfig()).resolve()


# ################
# Implementation
# ################

_Position = tuple[int | None, int | None, str | None]

_PRIMITIVES: dict[str, PrimitiveType] = {p.value: p for p in PrimitiveType}

_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TIME_RE = re.compile(r"(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d+))?)?(Z|[+-]\d{2}:\d{2})?")
_DATETIME_RE = re.compile(rf"{_DATE_RE.pattern}[T ]{_TIME_RE.pattern}")


class _Scope:
    """Name lookup context for template expansion: globals or one instance."""

    __slots__ = ("key", "fields", "parent", "struct", "label", "path")

    def __init__(
        self,
        key: int,
        fields: dict[str, Value],
        parent: _Scope | None,
        struct: StructDef | None,
        label: str,
        path: str | None,
    ) -> None:
        self.key = key
        self.fields = fields
        self.parent = parent
        self.struct = struct
        self.label = label
        self.path = path


class _Resolver:
    """Resolves merged syntax trees into a Document."""

    def __init__(self, trees: list[SyntaxTree], config: LoaderConfig) -> None:
        self._trees = trees
        self._config = config
        self._path: str | None = None
        self._struct_decls: dict[str, tuple[StructDecl, str | None]] = {}
        self._structs: dict[str, StructDef] = {}
        self._globals: dict[str, Value] = {}
        self._instances: dict[str, list[Instance]] = {}
        self._index: dict[str, dict[Any, Instance]] = {}
        # (id(owner), field name) -> source position, for diagnostics.
        self._field_pos: dict[tuple[int, str], _Position] = {}
        self._instance_pos: dict[int, _Position] = {}
        self._scopes: dict[int, _Scope] = {}
        self._global_scope = _Scope(id(self._globals), self._globals, None, None, "globals", None)
        self._active: list[tuple[_Scope, str]] = []
        self._active_keys: set[tuple[int, str]] = set()
        self._expanded: set[tuple[int, str]] = set()
        self._defaults_ready: set[str] = set()
        self._defaults_pending: set[str] = set()

    def resolve(self) -> Document:
        self._build_schema()
        self._coerce_defaults()
        self._resolve_globals()
        self._resolve_instances()
        self._build_key_index()
        self._link_references()
        self._expand_templates()
        return Document(globals=self._globals, structs=self._structs, instances=self._instances)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _pos(self, node: Any) -> _Position:
        return (node.line, node.column, self._path)

    def _error(self, cls: type[TycoError], message: str, pos: _Position | None) -> TycoError:
        if pos is None:
            return cls(message)
        return cls(message, *pos)

    # ------------------------------------------------------------------
    # Pass 1: schema
    # ------------------------------------------------------------------

    def _build_schema(self) -> None:
        for tree in self._trees:
            self._path = tree.path
            for decl in tree.structs:
                if decl.name in self._struct_decls:
                    raise self._error(ParseError, f"Struct '{decl.name}' is defined more than once", self._pos(decl))
                self._struct_decls[decl.name] = (decl, tree.path)
                self._structs[decl.name] = StructDef(name=decl.name)
                self._instances[decl.name] = []

        for name, (decl, path) in self._struct_decls.items():
            self._path = path
            self._structs[name].fields = [
                FieldDef(
                    name=f.name,
                    type=self._type_ref(f.type),
                    nullable=f.nullable,
                    is_primary_key=f.is_primary_key,
                )
                for f in decl.fields
            ]

        seen_globals: set[str] = set()
        for tree in self._trees:
            self._path = tree.path
            for decl in tree.globals:
                if decl.name in seen_globals:
                    raise self._error(
                        ParseError, f"Global attribute '{decl.name}' is defined more than once", self._pos(decl)
                    )
                if decl.name in self._structs:
                    raise self._error(
                        ParseError,
                        f"Global attribute '{decl.name}' has the same name as a struct",
                        self._pos(decl),
                    )
                seen_globals.add(decl.name)
        logger.debug("Collected %d struct definition(s)", len(self._structs))

    def _type_ref(self, type_expr: TypeExpr) -> TypeRef:
        if type_expr.element is not None:
            return ArrayTypeRef(element_type=self._type_ref(type_expr.element))
        if type_expr.name in _PRIMITIVES:
            return PrimitiveTypeRef(primitive=_PRIMITIVES[type_expr.name])
        if type_expr.name not in self._struct_decls:
            raise self._error(TycoTypeError, f"Unknown type '{type_expr.name}'", self._pos(type_expr))
        return StructTypeRef(name=type_expr.name)

    def _coerce_defaults(self) -> None:
        for name in self._struct_decls:
            self._ensure_defaults(name)

    def _ensure_defaults(self, name: str) -> None:
        """Coerce the defaults of struct *name*, and of structs they instantiate, once."""
        if name in self._defaults_ready:
            return
        decl, path = self._struct_decls[name]
        if name in self._defaults_pending:
            raise self._error(
                TycoTypeError, f"Default values of struct '{name}' depend on themselves", self._pos(decl)
            )
        self._defaults_pending.add(name)
        saved_path, self._path = self._path, path
        struct = self._structs[name]
        for field_decl, field_def in zip(decl.fields, struct.fields):
            if field_decl.default is None:
                continue
            label = f"default of '{name}.{field_def.name}'"
            field_def.default = self._coerce(field_decl.default, field_def.type, field_def.nullable, label)
        self._path = saved_path
        self._defaults_pending.discard(name)
        self._defaults_ready.add(name)

    # ------------------------------------------------------------------
    # Pass 2: globals and instances
    # ------------------------------------------------------------------

    def _resolve_globals(self) -> None:
        for tree in self._trees:
            self._path = tree.path
            for decl in tree.globals:
                type_ref = self._type_ref(decl.type) if decl.type is not None else None
                label = f"global '{decl.name}'"
                self._globals[decl.name] = self._coerce(decl.value, type_ref, decl.nullable, label)
                self._field_pos[(id(self._globals), decl.name)] = self._pos(decl)
        logger.debug("Resolved %d global attribute(s)", len(self._globals))

    def _resolve_instances(self) -> None:
        for tree in self._trees:
            self._path = tree.path
            for decl in tree.instances:
                struct = self._structs.get(decl.type_name)
                if struct is None:
                    raise self._error(
                        ParseError,
                        f"Instance of unknown struct '{decl.type_name}'; "
                        f"define it with 'struct {decl.type_name} {{ ... }}'",
                        self._pos(decl),
                    )
                inst = self._build_instance(struct, decl.args, decl.fields, self._pos(decl))
                self._instances[struct.name].append(inst)
        logger.debug("Resolved %d instance(s)", sum(len(v) for v in self._instances.values()))

    def _build_instance(
        self,
        struct: StructDef,
        args: list[Argument],
        assignments: list[FieldAssignment],
        pos: _Position,
    ) -> Instance:
        """Bind arguments and body fields to *struct*'s schema and coerce them."""
        self._ensure_defaults(struct.name)
        order = [f.name for f in struct.fields]
        primary_key = struct.primary_key
        if primary_key is not None:
            order.remove(primary_key)
            order.insert(0, primary_key)

        given: dict[str, Expr] = {}
        given_pos: dict[str, _Position] = {}
        named_seen = False
        positional = 0
        for arg in args:
            if arg.name is None:
                if named_seen:
                    raise self._error(
                        ParseError,
                        f"Positional arguments for '{struct.name}' must appear before named arguments",
                        self._pos(arg.value),
                    )
                if positional >= len(order):
                    raise self._error(
                        ParseError,
                        f"Too many positional arguments for '{struct.name}' (it has {len(order)} field(s))",
                        self._pos(arg.value),
                    )
                name = order[positional]
                positional += 1
            else:
                named_seen = True
                name = arg.name
            self._bind(struct, given, given_pos, name, arg.value, self._pos(arg.value))
        for assignment in assignments:
            self._bind(struct, given, given_pos, assignment.name, assignment.value, self._pos(assignment))

        inst = Instance(struct_name=struct.name)
        self._instance_pos[id(inst)] = pos
        for field_def in struct.fields:
            name = field_def.name
            label = f"field '{struct.name}.{name}'"
            if name in given:
                value = self._coerce(given[name], field_def.type, field_def.nullable, label)
                self._field_pos[(id(inst), name)] = given_pos[name]
            elif field_def.default is not None:
                value = field_def.default.model_copy(deep=True)
                self._field_pos[(id(inst), name)] = pos
            elif field_def.nullable:
                value = NullValue()
                self._field_pos[(id(inst), name)] = pos
            else:
                raise self._error(
                    MissingRequiredField,
                    f"Struct '{struct.name}' requires field '{name}': it is not nullable and has no default",
                    pos,
                )
            inst.fields[name] = value
        return inst

    def _bind(
        self,
        struct: StructDef,
        given: dict[str, Expr],
        given_pos: dict[str, _Position],
        name: str,
        value: Expr,
        pos: _Position,
    ) -> None:
        if struct.field(name) is None:
            raise self._error(UnknownField, f"Struct '{struct.name}' has no field '{name}'", pos)
        if name in given:
            raise self._error(ParseError, f"Field '{name}' of '{struct.name}' is given more than once", pos)
        given[name] = value
        given_pos[name] = pos

    # ------------------------------------------------------------------
    # Literal coercion
    # ------------------------------------------------------------------

    def _coerce(self, expr: Expr, type_ref: TypeRef | None, nullable: bool, label: str) -> Value:
        """Convert *expr* into a Value of *type_ref*; infer the type when it is None."""
        if isinstance(expr, Literal) and expr.kind is LiteralKind.NULL:
            if nullable or type_ref is None:
                return NullValue()
            raise self._error(TycoTypeError, f"{label} is not nullable, but null was given", self._pos(expr))
        if type_ref is None:
            return self._infer(expr, label)
        if isinstance(type_ref, ArrayTypeRef):
            if not isinstance(expr, ArrayExpr):
                raise self._error(TycoTypeError, f"{label} expects {type_ref}, got {_describe(expr)}", self._pos(expr))
            return ArrayValue(items=[self._coerce(item, type_ref.element_type, False, label) for item in expr.items])
        if isinstance(type_ref, StructTypeRef):
            return self._coerce_struct(expr, self._structs[type_ref.name], label)
        return self._coerce_primitive(expr, type_ref.primitive, label)

    def _coerce_primitive(self, expr: Expr, primitive: PrimitiveType, label: str) -> Value:
        pos = self._pos(expr)
        if not isinstance(expr, Literal):
            raise self._error(TycoTypeError, f"{label} expects {primitive.value}, got {_describe(expr)}", pos)
        kind = expr.kind
        is_text = kind in (LiteralKind.STRING, LiteralKind.RAW_STRING)
        if primitive is PrimitiveType.STR and is_text:
            return StringValue(value=expr.value, raw=kind is LiteralKind.RAW_STRING)
        if primitive is PrimitiveType.INT and kind is LiteralKind.INTEGER:
            return IntegerValue(value=expr.value)
        if primitive is PrimitiveType.FLOAT:
            if kind is LiteralKind.FLOAT:
                return FloatValue(value=expr.value)
            if kind is LiteralKind.INTEGER and self._config.numeric_widening:
                return FloatValue(value=float(expr.value))
        if primitive is PrimitiveType.BOOL and kind is LiteralKind.BOOL:
            return BoolValue(value=expr.value)
        if primitive is PrimitiveType.DATE and (kind is LiteralKind.DATE or is_text):
            return DateValue(value=self._parse_temporal(expr, _parse_date, "date (YYYY-MM-DD)"))
        if primitive is PrimitiveType.TIME and (kind is LiteralKind.TIME or is_text):
            return TimeValue(value=self._parse_temporal(expr, _parse_time, "time (HH:MM[:SS[.ffffff]])"))
        if primitive is PrimitiveType.DATETIME and (kind is LiteralKind.DATETIME or is_text):
            return DateTimeValue(
                value=self._parse_temporal(expr, _parse_datetime, "datetime (YYYY-MM-DD HH:MM[:SS][±HH:MM])")
            )
        raise self._error(TycoTypeError, f"{label} expects {primitive.value}, got {_describe(expr)}", pos)

    def _parse_temporal(self, expr: Literal, parser: Any, description: str) -> Any:
        try:
            return parser(expr.value)
        except ValueError:
            raise self._error(
                TycoTypeError, f"{expr.value!r} is not a valid ISO-8601 {description}", self._pos(expr)
            ) from None

    def _coerce_struct(self, expr: Expr, struct: StructDef, label: str) -> Value:
        pos = self._pos(expr)
        if isinstance(expr, CallExpr):
            if expr.type_name not in self._structs:
                raise self._error(UnresolvedReference, f"Reference to unknown struct '{expr.type_name}'", pos)
            if expr.type_name != struct.name:
                raise self._error(
                    TycoTypeError, f"{label} expects '{struct.name}', but '{expr.type_name}' was given", pos
                )
            if struct.primary_key is not None:
                return self._reference(expr, struct)
            return InlineInstanceValue(instance=self._build_instance(struct, expr.args, [], pos))
        if isinstance(expr, ObjectExpr):
            if expr.type_name is not None and expr.type_name != struct.name:
                if expr.type_name not in self._structs:
                    raise self._error(ParseError, f"Unknown struct '{expr.type_name}'", pos)
                raise self._error(
                    TycoTypeError, f"{label} expects '{struct.name}', but '{expr.type_name}' was given", pos
                )
            if struct.primary_key is not None:
                raise self._error(
                    ParseError,
                    f"Instances of keyed struct '{struct.name}' must be declared at top level; "
                    f"refer to one as {struct.name}(key)",
                    pos,
                )
            return InlineInstanceValue(instance=self._build_instance(struct, [], expr.fields, pos))
        raise self._error(TycoTypeError, f"{label} expects '{struct.name}', got {_describe(expr)}", pos)

    def _reference(self, expr: CallExpr, struct: StructDef) -> ReferenceValue:
        primary_key = struct.primary_key
        key_def = struct.field(primary_key)
        args = expr.args
        if len(args) != 1 or args[0].name not in (None, primary_key):
            raise self._error(
                ParseError,
                f"A reference to '{struct.name}' takes exactly one argument, its primary key '{primary_key}'",
                self._pos(expr),
            )
        key = self._coerce(args[0].value, key_def.type, False, f"primary key of '{struct.name}' reference")
        return ReferenceValue(struct_name=struct.name, key=key)

    def _infer(self, expr: Expr, label: str) -> Value:
        """Coerce an untyped global's value, inferring the type from the literal."""
        if isinstance(expr, Literal):
            if expr.kind is LiteralKind.NULL:
                return NullValue()
            return self._coerce_primitive(expr, _INFERRED_PRIMITIVES[expr.kind], label)
        if isinstance(expr, ArrayExpr):
            items = [self._infer(item, label) for item in expr.items]
            signatures = {_signature(item) for item in items}
            if signatures == {"int", "float"} and self._config.numeric_widening:
                items = [
                    FloatValue(value=float(item.value)) if isinstance(item, IntegerValue) else item for item in items
                ]
            elif len(signatures) > 1:
                found = ", ".join(sorted(signatures))
                message = f"Elements of {label} must share one type, found: {found}"
                raise self._error(TycoTypeError, message, self._pos(expr))
            return ArrayValue(items=items)
        if isinstance(expr, CallExpr):
            struct = self._structs.get(expr.type_name)
            if struct is None:
                message = f"Reference to unknown struct '{expr.type_name}'"
                raise self._error(UnresolvedReference, message, self._pos(expr))
            return self._coerce_struct(expr, struct, label)
        if expr.type_name is None:
            raise self._error(
                TycoTypeError,
                f"Cannot infer the struct type of an anonymous object for {label}; declare its type",
                self._pos(expr),
            )
        struct = self._structs.get(expr.type_name)
        if struct is None:
            raise self._error(ParseError, f"Unknown struct '{expr.type_name}'", self._pos(expr))
        return self._coerce_struct(expr, struct, label)

    # ------------------------------------------------------------------
    # Pass 3: reference linking
    # ------------------------------------------------------------------

    def _build_key_index(self) -> None:
        for name, struct in self._structs.items():
            primary_key = struct.primary_key
            if primary_key is None:
                continue
            table: dict[Any, Instance] = {}
            for inst in self._instances[name]:
                key_value = inst.fields[primary_key]
                key = key_of(key_value)
                if key in table:
                    raise self._error(
                        DuplicatePrimaryKey,
                        f"{name} with primary key {_display_key(key_value)} already exists",
                        self._instance_pos.get(id(inst)),
                    )
                table[key] = inst
            self._index[name] = table

    def _link_references(self) -> None:
        for name, value in self._globals.items():
            self._link(value, self._field_pos.get((id(self._globals), name)))
        for name, struct in self._structs.items():
            pos = self._pos(self._struct_decls[name][0])
            for field_def in struct.fields:
                if field_def.default is not None:
                    self._link(field_def.default, pos)
            for inst in self._instances[name]:
                for field_name, value in inst.fields.items():
                    self._link(value, self._field_pos.get((id(inst), field_name)))
        logger.debug("Linked references across %d keyed struct(s)", len(self._index))

    def _link(self, value: Value, pos: _Position | None) -> None:
        if isinstance(value, ReferenceValue):
            if key_of(value.key) not in self._index.get(value.struct_name, {}):
                raise self._error(
                    UnresolvedReference,
                    f"{value.struct_name}({_display_key(value.key)}) is referenced, but no such instance exists",
                    pos,
                )
        elif isinstance(value, ArrayValue):
            for item in value.items:
                self._link(item, pos)
        elif isinstance(value, InlineInstanceValue):
            for item in value.instance.fields.values():
                self._link(item, pos)

    # ------------------------------------------------------------------
    # Pass 4: template expansion
    # ------------------------------------------------------------------

    def _expand_templates(self) -> None:
        for name in self._globals:
            self._expand_field(self._global_scope, name)
        for insts in self._instances.values():
            for inst in insts:
                scope = self._scope_for(inst, None)
                for name in inst.fields:
                    self._expand_field(scope, name)
        logger.debug("Expanded templates in %d field(s)", len(self._expanded))

    def _scope_for(self, inst: Instance, parent: _Scope | None) -> _Scope:
        scope = self._scopes.get(id(inst))
        if scope is None:
            struct = self._structs[inst.struct_name]
            if parent is None:
                primary_key = struct.primary_key
                if primary_key is not None:
                    label = f"{struct.name}({_display_key(inst.fields[primary_key])})"
                else:
                    label = struct.name
                path = (self._instance_pos.get(id(inst)) or (None, None, None))[2]
            else:
                label = f"{parent.label} > {struct.name}"
                path = parent.path
            scope = self._scopes[id(inst)] = _Scope(id(inst), inst.fields, parent, struct, label, path)
        return scope

    def _expand_field(self, scope: _Scope, name: str) -> None:
        node = (scope.key, name)
        if node in self._expanded:
            return
        if scope.struct is not None and scope.struct.primary_key == name:
            self._expanded.add(node)
            return
        if node in self._active_keys:
            cycle = [f"{s.label}.{n}" for s, n in self._active] + [f"{scope.label}.{name}"]
            raise self._error(TemplateCycleError, "Template cycle: " + " -> ".join(cycle), self._template_pos(node))
        if len(self._active) >= self._config.max_template_depth:
            raise self._error(
                TemplateCycleError,
                f"Template expansion exceeded the maximum depth of {self._config.max_template_depth}",
                self._template_pos(node),
            )
        self._active.append((scope, name))
        self._active_keys.add(node)
        try:
            self._expand_value(scope.fields[name], scope)
        finally:
            self._active.pop()
            self._active_keys.discard(node)
        self._expanded.add(node)

    def _expand_value(self, value: Value, scope: _Scope) -> None:
        if isinstance(value, StringValue):
            if not value.raw and "{" in value.value:
                value.value = TEMPLATE_REGEX.sub(lambda m: self._substitute(m.group(1), scope), value.value)
        elif isinstance(value, ArrayValue):
            for item in value.items:
                self._expand_value(item, scope)
        elif isinstance(value, InlineInstanceValue):
            child = self._scope_for(value.instance, scope)
            for name in value.instance.fields:
                self._expand_field(child, name)

    def _substitute(self, placeholder: str, scope: _Scope) -> str:
        """Return the text for one ``{placeholder}`` evaluated in *scope*."""
        owner = scope
        if placeholder.startswith(".."):
            dots = len(placeholder) - len(placeholder.lstrip("."))
            for _ in range(dots - 1):
                if owner.parent is None:
                    raise self._undefined(f"Template '{{{placeholder}}}' refers to a parent that does not exist")
                owner = owner.parent
            parts = placeholder[dots:].split(".")
            if parts[0] not in owner.fields:
                raise self._undefined(f"Template '{{{placeholder}}}' refers to unknown field '{parts[0]}'")
        else:
            parts = placeholder.split(".")
            head = parts[0]
            if head == "global" and len(parts) > 1 and "global" not in self._globals:
                owner = self._global_scope
                parts = parts[1:]
                if parts[0] not in self._globals:
                    raise self._undefined(f"Template '{{{placeholder}}}' refers to unknown global '{parts[0]}'")
            elif head in self._globals:
                owner = self._global_scope
            elif head not in scope.fields:
                raise self._undefined(
                    f"Template '{{{placeholder}}}' is neither a global nor a field of {scope.label}"
                )

        for previous, part in zip(parts, parts[1:]):
            owner = self._object_scope(owner.fields[previous], owner, placeholder, previous)
            if part not in owner.fields:
                raise self._undefined(f"Template '{{{placeholder}}}' refers to unknown field '{part}' of {owner.label}")

        last = parts[-1]
        value = owner.fields[last]
        if isinstance(value, StringValue):
            self._expand_field(owner, last)
        return self._stringify(value, placeholder)

    def _object_scope(self, value: Value, owner: _Scope, placeholder: str, name: str) -> _Scope:
        if isinstance(value, ReferenceValue):
            return self._scope_for(self._index[value.struct_name][key_of(value.key)], None)
        if isinstance(value, InlineInstanceValue):
            return self._scope_for(value.instance, owner)
        raise self._undefined(f"Template '{{{placeholder}}}' reads a field of '{name}', which is not an object")

    def _stringify(self, value: Value, placeholder: str) -> str:
        if isinstance(value, StringValue):
            return value.value
        if isinstance(value, BoolValue):
            return "true" if value.value else "false"
        if isinstance(value, IntegerValue):
            return str(value.value)
        if isinstance(value, FloatValue):
            return repr(value.value)
        if isinstance(value, (DateValue, TimeValue, DateTimeValue)):
            return value.value.isoformat()
        raise self._error(
            TycoTypeError,
            f"Template '{{{placeholder}}}' refers to a {value.kind} value; only scalar values can be inserted",
            self._template_pos(None),
        )

    def _undefined(self, message: str) -> TycoError:
        return self._error(UndefinedTemplateVariable, message, self._template_pos(None))

    def _template_pos(self, node: tuple[int, str] | None) -> _Position | None:
        """Position of *node*, else of the innermost active field that has one."""
        candidates = [node] if node is not None else []
        candidates += [(s.key, n) for s, n in reversed(self._active)]
        for candidate in candidates:
            if candidate in self._field_pos:
                return self._field_pos[candidate]
        return None


_INFERRED_PRIMITIVES: dict[LiteralKind, PrimitiveType] = {
    LiteralKind.STRING: PrimitiveType.STR,
    LiteralKind.RAW_STRING: PrimitiveType.STR,
    LiteralKind.INTEGER: PrimitiveType.INT,
    LiteralKind.FLOAT: PrimitiveType.FLOAT,
    LiteralKind.BOOL: PrimitiveType.BOOL,
    LiteralKind.DATE: PrimitiveType.DATE,
    LiteralKind.TIME: PrimitiveType.TIME,
    LiteralKind.DATETIME: PrimitiveType.DATETIME,
}


def _signature(value: Value) -> str:
    if isinstance(value, ReferenceValue):
        return value.struct_name
    if isinstance(value, InlineInstanceValue):
        return value.instance.struct_name
    return value.kind


def _describe(expr: Expr) -> str:
    if isinstance(expr, Literal):
        return f"{expr.kind.value.replace('_', ' ')} {expr.value!r}"
    if isinstance(expr, ArrayExpr):
        return "an array"
    if isinstance(expr, CallExpr):
        return f"{expr.type_name}(...)"
    if expr.type_name is not None:
        return f"a '{expr.type_name}' object"
    return "an object"


def _display_key(value: Value) -> str:
    raw = getattr(value, "value", None)
    if isinstance(raw, str):
        return repr(raw)
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (datetime.date, datetime.time)):
        return raw.isoformat()
    return str(raw)


def _parse_date(text: str) -> datetime.date:
    match = _DATE_RE.fullmatch(text)
    if match is None:
        raise ValueError(text)
    year, month, day = (int(g) for g in match.groups())
    return datetime.date(year, month, day)


def _parse_time(text: str) -> datetime.time:
    match = _TIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(text)
    return _build_time(*match.groups())


def _parse_datetime(text: str) -> datetime.datetime:
    match = _DATETIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(text)
    year, month, day = (int(g) for g in match.groups()[:3])
    clock = _build_time(*match.groups()[3:])
    return datetime.datetime.combine(datetime.date(year, month, day), clock)


def _build_time(
    hour: str, minute: str, second: str | None, fraction: str | None, offset: str | None
) -> datetime.time:
    micros = int(fraction[:6].ljust(6, "0")) if fraction else 0
    tzinfo: datetime.tzinfo | None = None
    if offset == "Z":
        tzinfo = datetime.timezone.utc
    elif offset:
        sign = -1 if offset[0] == "-" else 1
        delta = datetime.timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
        tzinfo = datetime.timezone(sign * delta)
    return datetime.time(int(hour), int(minute), int(second or 0), micros, tzinfo=tzinfo)
