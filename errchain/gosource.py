"""
errchain/gosource.py
════════════════════

Go front-end: lowers ``.go`` sources into the engine's model using
tree-sitter and the tree-sitter-go grammar.

Produces, per package:

  * ``SourceFile`` records (package name, ``FuncDecl`` list, import
    paths, generated/test flags, an import-aware ``CallResolver``);
  * constant folding for ``const`` declarations (package level across
    all files, plus function-local ones), so that

        const fn = pkgName + ".Struct" + ".Method"
        return fmt.Errorf("%s: bad input", fn)

    evaluates to ``"aaa.Struct.Method: bad input"``.

Names bound inside a function (parameters, results, variables) hide
constants and imports of the same name for the whole function body.
Constants from other packages are unknown and ``iota`` is never folded.
"""

from __future__ import annotations

import logging
import operator
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    AbstractSet,
    Callable,
    Dict,
    FrozenSet,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
)

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from errchain.checkers import SourceFile
from errchain.errors import ErrorCodes, SourceError
from errchain.expr import (
    BasicLit,
    Binary,
    Call,
    Constant,
    ConstValue,
    Expr,
    Ident,
    Index,
    Opaque,
    Position,
    Selector,
    Slice,
    Unary,
)
from errchain.identity import FuncDecl, TypeRef

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

TEST_FILE_SUFFIX = "_test.go"
GENERATED_MARKER = "DO NOT EDIT"
GENERATED_PHRASE = " generated by "

EXPRESSION_TYPES: FrozenSet[str] = frozenset({
    "call_expression",
    "selector_expression",
    "identifier",
    "binary_expression",
    "unary_expression",
    "index_expression",
    "slice_expression",
    "parenthesized_expression",
    "type_assertion_expression",
    "type_conversion_expression",
    "type_instantiation_expression",
    "composite_literal",
    "func_literal",
    "interpreted_string_literal",
    "raw_string_literal",
    "int_literal",
    "float_literal",
    "imaginary_literal",
    "rune_literal",
    "true",
    "false",
    "nil",
    "iota",
})

LITERAL_TYPES: FrozenSet[str] = frozenset({
    "interpreted_string_literal",
    "raw_string_literal",
    "int_literal",
    "float_literal",
    "imaginary_literal",
    "rune_literal",
})


def new_parser() -> Parser:
    return Parser(GO_LANGUAGE)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — NODE HELPERS
# ═════════════════════════════════════════════════════════════════════════

def node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def node_position(node: Node, path: str) -> Position:
    row, column = node.start_point[0], node.start_point[1]
    return Position(file=path, line=row + 1, column=column + 1)


def named_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order traversal of every node below ``root``."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def maximal_expressions(node: Node) -> Iterator[Node]:
    """Yield the outermost expression nodes below ``node``, in source order."""
    for child in node.children:
        if child.type in EXPRESSION_TYPES:
            yield child
        else:
            yield from maximal_expressions(child)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — LITERALS
# ═════════════════════════════════════════════════════════════════════════

_SIMPLE_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r",
    "t": "\t", "v": "\v", "\\": "\\", "'": "'", '"': '"',
}

_ESCAPE_RE = re.compile(
    r"\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|[\s\S])"
)


def _unescape(body: str) -> str:
    def repl(m: "re.Match[str]") -> str:
        esc = m.group(1)
        if esc[0] in "xuU" and len(esc) > 1:
            return chr(int(esc[1:], 16))
        if esc[0] in "01234567" and len(esc) == 3:
            return chr(int(esc, 8))
        return _SIMPLE_ESCAPES.get(esc, esc)
    return _ESCAPE_RE.sub(repl, body)


def unquote_string(text: str) -> str:
    """Value of a Go interpreted (``"..."``) or raw (`` `...` ``) string literal."""
    if text.startswith("`"):
        return text[1:-1].replace("\r", "")
    return _unescape(text[1:-1])


def parse_int(text: str) -> int:
    s = text.replace("_", "")
    if len(s) > 1 and s[0] == "0" and s[1].isdigit():
        return int(s, 8)
    return int(s, 0)


def parse_float(text: str) -> float:
    s = text.replace("_", "")
    if s[:2].lower() == "0x":
        return float.fromhex(s)
    return float(s)


def parse_rune(text: str) -> int:
    value = _unescape(text[1:-1])
    return ord(value[0]) if value else 0


def literal_value(node: Node) -> Optional[ConstValue]:
    text = node_text(node)
    kind = node.type
    try:
        if kind in ("interpreted_string_literal", "raw_string_literal"):
            return unquote_string(text)
        if kind == "int_literal":
            return parse_int(text)
        if kind == "float_literal":
            return parse_float(text)
        if kind == "rune_literal":
            return parse_rune(text)
    except ValueError:
        logger.debug("cannot fold literal %r", text)
    return None


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — CONSTANT FOLDING
# ═════════════════════════════════════════════════════════════════════════

def _go_div(a: ConstValue, b: ConstValue) -> ConstValue:
    if isinstance(a, int) and isinstance(b, int):
        q = abs(a) // abs(b)
        return q if (a >= 0) == (b >= 0) else -q
    return a / b


def _go_mod(a: int, b: int) -> int:
    r = abs(a) % abs(b)
    return r if a >= 0 else -r


_NUMERIC_OPS: Dict[str, Callable[[ConstValue, ConstValue], ConstValue]] = {
    "-": operator.sub,
    "*": operator.mul,
    "/": _go_div,
}

_INTEGER_OPS: Dict[str, Callable[[int, int], int]] = {
    "%": _go_mod,
    "<<": operator.lshift,
    ">>": operator.rshift,
    "&": operator.and_,
    "|": operator.or_,
    "^": operator.xor,
    "&^": lambda a, b: a & ~b,
}

_COMPARISONS: Dict[str, Callable[[ConstValue, ConstValue], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _is_number(value: ConstValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def collect_const_specs(root: Node, stop_at_functions: bool = False) -> Dict[str, Node]:
    """Map constant names to their value expressions below ``root``."""
    specs: Dict[str, Node] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        if stop_at_functions and node.type in ("function_declaration", "method_declaration"):
            continue
        if node.type == "const_spec":
            names = node.children_by_field_name("name")
            value = node.child_by_field_name("value")
            values = named_children(value) if value is not None else []
            if len(values) == len(names):
                for name, val in zip(names, values):
                    specs[node_text(name)] = val
            continue
        stack.extend(node.children)
    return specs


# field holding the names each declaration binds
_BINDING_FIELDS: Dict[str, str] = {
    "parameter_declaration": "name",
    "variadic_parameter_declaration": "name",
    "var_spec": "name",
    "short_var_declaration": "left",
    "range_clause": "left",
    "receive_statement": "left",
    "type_switch_statement": "alias",
}

_SIGNATURE_OWNERS: FrozenSet[str] = frozenset({
    "function_declaration",
    "method_declaration",
    "func_literal",
})


def declared_names(root: Node) -> Set[str]:
    """
    Variable names bound anywhere below ``root``.

    Covers the receiver, parameters and named results of ``root`` and of
    nested function literals, plus ``var``, ``:=``, ``range``, ``select``
    receive and type-switch bindings.  Parameters of bare function types
    bind nothing.
    """
    names: Set[str] = set()
    for node in iter_nodes(root):
        fld = _BINDING_FIELDS.get(node.type)
        if fld is None:
            continue
        if node.type.endswith("parameter_declaration"):
            owner = node.parent.parent if node.parent is not None else None
            if owner is None or owner.type not in _SIGNATURE_OWNERS:
                continue
        for target in node.children_by_field_name(fld):
            idents = [target] if target.type == "identifier" else named_children(target)
            names.update(node_text(i) for i in idents if i.type == "identifier")
    names.discard("_")
    return names


class ConstFolder:
    """
    Folds constant expressions against a (possibly nested) constant scope.

    ``shadowed`` names are variables of the scope; they hide outer
    constants of the same name and never fold.
    """

    def __init__(
        self,
        specs: Mapping[str, Node],
        parent: Optional["ConstFolder"] = None,
        shadowed: AbstractSet[str] = frozenset(),
    ) -> None:
        self._specs = dict(specs)
        self._shadowed = frozenset(shadowed) - set(self._specs)
        self._parent = parent
        self._cache: Dict[str, Optional[Constant]] = {}
        self._resolving: Set[str] = set()

    def scoped(
        self,
        specs: Mapping[str, Node],
        shadowed: AbstractSet[str] = frozenset(),
    ) -> "ConstFolder":
        if not specs and not shadowed:
            return self
        return ConstFolder(specs, parent=self, shadowed=shadowed)

    def lookup(self, name: str) -> Optional[Constant]:
        if name in self._specs:
            if name in self._cache:
                return self._cache[name]
            if name in self._resolving:
                return None
            self._resolving.add(name)
            try:
                value = self.fold(self._specs[name])
            finally:
                self._resolving.discard(name)
            self._cache[name] = value
            return value
        if name in self._shadowed:
            return None
        if self._parent is not None:
            return self._parent.lookup(name)
        return None

    def fold(self, node: Node) -> Optional[Constant]:
        kind = node.type
        if kind in LITERAL_TYPES:
            value = literal_value(node)
            return None if value is None else Constant(value)
        if kind == "true":
            return Constant(True)
        if kind == "false":
            return Constant(False)
        if kind == "identifier":
            return self.lookup(node_text(node))
        if kind == "parenthesized_expression":
            inner = named_children(node)
            return self.fold(inner[0]) if len(inner) == 1 else None
        if kind == "unary_expression":
            return self._fold_unary(node)
        if kind == "binary_expression":
            return self._fold_binary(node)
        return None

    def _fold_unary(self, node: Node) -> Optional[Constant]:
        op_node = node.child_by_field_name("operator")
        operand = node.child_by_field_name("operand")
        if op_node is None or operand is None:
            return None
        value = self.fold(operand)
        if value is None:
            return None
        op, v = node_text(op_node), value.value
        if op == "-" and _is_number(v):
            return Constant(-v)
        if op == "+" and _is_number(v):
            return Constant(v)
        if op == "!" and isinstance(v, bool):
            return Constant(not v)
        if op == "^" and isinstance(v, int) and not isinstance(v, bool):
            return Constant(~v)
        return None

    def _fold_binary(self, node: Node) -> Optional[Constant]:
        op_node = node.child_by_field_name("operator")
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if op_node is None or left is None or right is None:
            return None
        lv, rv = self.fold(left), self.fold(right)
        if lv is None or rv is None:
            return None
        op, a, b = node_text(op_node), lv.value, rv.value

        try:
            if op == "+":
                if isinstance(a, str) and isinstance(b, str):
                    return Constant(a + b)
                if _is_number(a) and _is_number(b):
                    return Constant(a + b)
                return None
            if op in _NUMERIC_OPS and _is_number(a) and _is_number(b):
                return Constant(_NUMERIC_OPS[op](a, b))
            if op in _INTEGER_OPS and type(a) is int and type(b) is int:
                return Constant(_INTEGER_OPS[op](a, b))
            if op in _COMPARISONS and type(a) is type(b):
                return Constant(_COMPARISONS[op](a, b))
            if op == "&&" and isinstance(a, bool) and isinstance(b, bool):
                return Constant(a and b)
            if op == "||" and isinstance(a, bool) and isinstance(b, bool):
                return Constant(a or b)
        except (ZeroDivisionError, ValueError, OverflowError):
            return None
        return None


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — LOWERING TO THE GENERIC TREE
# ═════════════════════════════════════════════════════════════════════════

class ExprLowerer:
    """Converts tree-sitter expression nodes into ``errchain.expr`` nodes."""

    def __init__(
        self,
        path: str,
        folder: ConstFolder,
        local_names: AbstractSet[str] = frozenset(),
    ) -> None:
        self.path = path
        self.folder = folder
        self.local_names = frozenset(local_names)

    def lower(self, node: Node) -> Expr:
        pos = node_position(node, self.path)
        const = self.folder.fold(node)
        kind = node.type

        if kind in LITERAL_TYPES or kind in ("true", "false", "nil", "iota"):
            return BasicLit(position=pos, const=const, text=node_text(node))

        if kind == "identifier":
            name = node_text(node)
            return Ident(position=pos, const=const, name=name, local=name in self.local_names)

        if kind == "selector_expression":
            operand = node.child_by_field_name("operand")
            fld = node.child_by_field_name("field")
            if operand is not None and fld is not None:
                return Selector(position=pos, const=const, x=self.lower(operand), sel=node_text(fld))

        if kind == "binary_expression":
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            op = node.child_by_field_name("operator")
            if left is not None and right is not None and op is not None:
                return Binary(
                    position=pos, const=const,
                    x=self.lower(left), op=node_text(op), y=self.lower(right),
                )

        if kind == "unary_expression":
            operand = node.child_by_field_name("operand")
            op = node.child_by_field_name("operator")
            if operand is not None and op is not None:
                return Unary(position=pos, const=const, op=node_text(op), x=self.lower(operand))

        if kind == "call_expression":
            fun = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            if fun is not None:
                args = tuple(self.lower(a) for a in named_children(arguments)) if arguments else ()
                return Call(position=pos, const=const, fun=self.lower(fun), args=args)

        if kind == "index_expression":
            operand = node.child_by_field_name("operand")
            index = node.child_by_field_name("index")
            if operand is not None:
                return Index(
                    position=pos, const=const, x=self.lower(operand),
                    index=self.lower(index) if index is not None else None,
                )

        if kind == "slice_expression":
            operand = node.child_by_field_name("operand")
            if operand is not None:
                bounds = tuple(
                    self.lower(c) for c in named_children(node)
                    if c.id != operand.id and c.type in EXPRESSION_TYPES
                )
                return Slice(position=pos, const=const, x=self.lower(operand), bounds=bounds)

        inner = tuple(self.lower(c) for c in maximal_expressions(node))
        return Opaque(position=pos, const=const, kind=kind, inner=inner)


def type_ref(node: Optional[Node]) -> TypeRef:
    if node is None:
        return TypeRef.other()
    if node.type == "type_identifier":
        return TypeRef.named(node_text(node))
    if node.type == "pointer_type":
        inner = named_children(node)
        return TypeRef.pointer(type_ref(inner[0] if inner else None))
    if node.type == "parenthesized_type":
        inner = named_children(node)
        return type_ref(inner[0] if inner else None)
    return TypeRef.other(node_text(node))


def result_types(node: Optional[Node]) -> Tuple[TypeRef, ...]:
    if node is None:
        return ()
    if node.type != "parameter_list":
        return (type_ref(node),)
    results: List[TypeRef] = []
    for param in named_children(node):
        if param.type != "parameter_declaration":
            continue
        ref = type_ref(param.child_by_field_name("type"))
        count = max(1, len(param.children_by_field_name("name")))
        results.extend([ref] * count)
    return tuple(results)


def receiver_type(node: Optional[Node]) -> TypeRef:
    if node is None:
        return TypeRef.other()
    params = [c for c in named_children(node) if c.type == "parameter_declaration"]
    if len(params) != 1:
        return TypeRef.other()
    return type_ref(params[0].child_by_field_name("type"))


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — IMPORTS AND CALL RESOLUTION
# ═════════════════════════════════════════════════════════════════════════

_MAJOR_VERSION_RE = re.compile(r"^v[0-9]+$")


def default_import_name(path: str) -> str:
    """Best guess at the package name an import path declares."""
    elems = [e for e in path.split("/") if e]
    if not elems:
        return path
    name = elems[-1]
    if _MAJOR_VERSION_RE.match(name) and len(elems) > 1:
        name = elems[-2]
    name = re.sub(r"\.v[0-9]+$", "", name)
    if name.startswith("go-"):
        name = name[3:]
    return name.replace("-", "_").replace(".", "_")


class ImportResolver:
    """Resolves ``alias.Func(...)`` through the file's import table."""

    def __init__(
        self,
        imports: Mapping[str, str],
        dot_imports: Sequence[str] = (),
    ) -> None:
        self.imports = dict(imports)
        self.dot_imports = tuple(dot_imports)

    def qualified_name(self, call: Call) -> Optional[str]:
        fun = call.fun
        if isinstance(fun, Selector) and isinstance(fun.x, Ident):
            if fun.x.local:
                return None
            path = self.imports.get(fun.x.name)
            if path is None:
                return None
            return f"{path}.{fun.sel}"
        if isinstance(fun, Ident) and not fun.local and len(self.dot_imports) == 1:
            return f"{self.dot_imports[0]}.{fun.name}"
        return None

    def __repr__(self) -> str:
        return f"ImportResolver({self.imports!r}, dot_imports={self.dot_imports!r})"


def parse_imports(root: Node) -> Tuple[Dict[str, str], List[str]]:
    """Return ``(local name → import path, dot-imported paths)``."""
    imports: Dict[str, str] = {}
    dots: List[str] = []
    for decl in named_children(root):
        if decl.type != "import_declaration":
            continue
        for spec in iter_nodes(decl):
            if spec.type != "import_spec":
                continue
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                continue
            path = unquote_string(node_text(path_node))
            name_node = spec.child_by_field_name("name")
            if name_node is None:
                imports[default_import_name(path)] = path
            elif name_node.type == "dot":
                dots.append(path)
            elif name_node.type == "blank_identifier":
                continue
            else:
                imports[node_text(name_node)] = path
    return imports, dots


# ═════════════════════════════════════════════════════════════════════════
#  PART 6 — FILES AND PACKAGES
# ═════════════════════════════════════════════════════════════════════════

def is_generated_source(root: Node) -> bool:
    """A file is generated if any comment says so."""
    for node in iter_nodes(root):
        if node.type != "comment":
            continue
        text = node_text(node)
        if GENERATED_MARKER in text:
            return True
        if GENERATED_PHRASE in text.lower():
            return True
    return False


def is_test_path(path: str) -> bool:
    return path.endswith(TEST_FILE_SUFFIX)


def _first_error(root: Node) -> Optional[Node]:
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


@dataclass
class GoFile:
    """A parsed Go file."""
    path: str
    tree: Tree
    package_name: str
    imports: Dict[str, str] = field(default_factory=dict)
    dot_imports: List[str] = field(default_factory=list)
    is_generated: bool = False
    is_test: bool = False

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def import_paths(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(list(self.imports.values()) + self.dot_imports))


def parse_go_file(
    path: str,
    source: Optional[bytes] = None,
    parser: Optional[Parser] = None,
) -> GoFile:
    """Parse one Go file; raises ``SourceError`` on I/O or syntax errors."""
    if source is None:
        try:
            source = Path(path).read_bytes()
        except OSError as exc:
            raise SourceError(
                f"cannot read {path}: {exc.strerror or exc}",
                code=ErrorCodes.UNREADABLE_FILE,
            ) from exc

    tree = (parser or new_parser()).parse(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        raise SourceError(
            "syntax error",
            code=ErrorCodes.SYNTAX_ERROR,
            position=node_position(bad, path) if bad is not None else Position(file=path),
        )

    package_name = ""
    for child in named_children(root):
        if child.type == "package_clause":
            ident = named_children(child)
            package_name = node_text(ident[0]) if ident else ""
            break
    if not package_name:
        raise SourceError(
            "missing package clause",
            code=ErrorCodes.NO_PACKAGE_CLAUSE,
            position=Position(file=path, line=1),
        )

    imports, dots = parse_imports(root)
    return GoFile(
        path=path,
        tree=tree,
        package_name=package_name,
        imports=imports,
        dot_imports=dots,
        is_generated=is_generated_source(root),
        is_test=is_test_path(path),
    )


def _func_decl(node: Node, path: str, folder: ConstFolder) -> Optional[FuncDecl]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None

    receiver: Optional[TypeRef] = None
    if node.type == "method_declaration":
        receiver = receiver_type(node.child_by_field_name("receiver"))

    body_node = node.child_by_field_name("body")
    body: Optional[Tuple[Expr, ...]] = None
    if body_node is not None:
        local_names = declared_names(node)
        scope = folder.scoped(collect_const_specs(body_node), shadowed=local_names)
        lowerer = ExprLowerer(path, scope, local_names)
        body = tuple(lowerer.lower(e) for e in maximal_expressions(body_node))

    return FuncDecl(
        name=node_text(name_node),
        position=node_position(node, path),
        receiver=receiver,
        results=result_types(node.child_by_field_name("result")),
        body=body,
    )


def lower_file(go_file: GoFile, folder: ConstFolder) -> SourceFile:
    """Convert a parsed file into the engine's ``SourceFile``."""
    decls: List[FuncDecl] = []
    for node in named_children(go_file.root):
        if node.type in ("function_declaration", "method_declaration"):
            decl = _func_decl(node, go_file.path, folder)
            if decl is not None:
                decls.append(decl)

    return SourceFile(
        path=go_file.path,
        package_name=go_file.package_name,
        decls=tuple(decls),
        imports=go_file.import_paths,
        is_generated=go_file.is_generated,
        is_test=go_file.is_test,
        resolver=ImportResolver(go_file.imports, go_file.dot_imports),
    )


@dataclass
class GoPackage:
    """All files of one package directory."""
    name: str
    files: List[GoFile]

    @property
    def import_paths(self) -> FrozenSet[str]:
        paths: Set[str] = set()
        for f in self.files:
            if not f.is_test:
                paths.update(f.import_paths)
        return frozenset(paths)

    def source_files(self) -> List[SourceFile]:
        """Lower every file; package-level constants are shared across files."""
        specs: Dict[str, Node] = {}
        for f in self.files:
            if f.package_name == self.name:
                specs.update(collect_const_specs(f.root, stop_at_functions=True))
        package_folder = ConstFolder(specs)
        lowered = []
        for f in self.files:
            folder = package_folder if f.package_name == self.name else ConstFolder(
                collect_const_specs(f.root, stop_at_functions=True)
            )
            lowered.append(lower_file(f, folder))
        return lowered


def load_package(
    paths: Sequence[str],
    parser: Optional[Parser] = None,
    sources: Optional[Mapping[str, bytes]] = None,
) -> GoPackage:
    """
    Parse the files of one package directory.

    The package name comes from the non-test files; ``_test`` external
    test packages are kept as test files.  ``sources`` supplies in-memory
    contents for some or all of ``paths``.
    """
    parser = parser or new_parser()
    sources = sources or {}
    files = [parse_go_file(p, source=sources.get(p), parser=parser) for p in paths]

    names = {f.package_name for f in files if not f.is_test}
    if not names:
        names = {f.package_name for f in files if not f.package_name.endswith("_test")}
    if len(names) > 1:
        raise SourceError(
            f"found packages {', '.join(sorted(names))} in one directory",
            code=ErrorCodes.MIXED_PACKAGES,
            position=Position(file=str(Path(paths[0]).parent)),
        )
    name = names.pop() if names else files[0].package_name if files else ""
    return GoPackage(name=name, files=files)


__all__ = [
    "GO_LANGUAGE",
    "new_parser",
    "unquote_string",
    "parse_int",
    "parse_float",
    "parse_rune",
    "ConstFolder",
    "collect_const_specs",
    "declared_names",
    "ExprLowerer",
    "type_ref",
    "result_types",
    "receiver_type",
    "default_import_name",
    "ImportResolver",
    "parse_imports",
    "is_generated_source",
    "is_test_path",
    "GoFile",
    "parse_go_file",
    "lower_file",
    "GoPackage",
    "load_package",
]
