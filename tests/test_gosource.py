# tests/test_gosource.py
"""Tests for the tree-sitter Go front-end."""

import textwrap

import pytest

from errchain.driver import check_sources
from errchain.errors import ErrorCodes, SourceError
from errchain.expr import Call, Ident, Opaque, Selector, calls
from errchain.gosource import (
    ImportResolver,
    declared_names,
    default_import_name,
    load_package,
    parse_float,
    parse_go_file,
    parse_int,
    parse_rune,
    unquote_string,
)
from errchain.identity import TypeShape
from errchain.matcher import MismatchKind


def go(text):
    return textwrap.dedent(text).lstrip().encode("utf-8")


def lowered(text, path="x.go"):
    """Parse one in-memory file and return its ``SourceFile``."""
    package = load_package([path], sources={path: go(text)})
    (source,) = package.source_files()
    return source


def body_calls(decl):
    return [c for e in decl.body for c in calls(e)]


class TestLiterals:

    @pytest.mark.parametrize("text, value", [
        ('"plain"', "plain"),
        ('"a\\nb"', "a\nb"),
        ('"tab\\tq\\""', 'tab\tq"'),
        ('"\\x41\\101"', "AA"),
        ('"\\u00e9"', "é"),
        ('`raw\\n`', "raw\\n"),
        ('`a\r\nb`', "a\nb"),
    ])
    def test_unquote_string(self, text, value):
        assert unquote_string(text) == value

    @pytest.mark.parametrize("text, value", [
        ("0", 0),
        ("42", 42),
        ("1_000", 1000),
        ("0x1F", 31),
        ("0o17", 15),
        ("017", 15),
        ("0b101", 5),
    ])
    def test_parse_int(self, text, value):
        assert parse_int(text) == value

    def test_parse_float(self):
        assert parse_float("1e3") == 1000.0
        assert parse_float(".5") == 0.5
        assert parse_float("0x1p-2") == 0.25

    def test_parse_rune(self):
        assert parse_rune("'a'") == 97
        assert parse_rune("'\\n'") == 10


class TestImports:

    @pytest.mark.parametrize("path, name", [
        ("errors", "errors"),
        ("github.com/pkg/errors", "errors"),
        ("gopkg.in/yaml.v3", "yaml"),
        ("github.com/urfave/cli/v2", "cli"),
        ("github.com/mattn/go-sqlite3", "sqlite3"),
    ])
    def test_default_import_name(self, path, name):
        assert default_import_name(path) == name

    def test_parse_imports(self):
        f = parse_go_file("x.go", source=go('''
            package x

            import (
                "fmt"
                stderrors "errors"
                . "github.com/pkg/errors"
                _ "embed"
            )
        '''))
        assert f.imports == {"fmt": "fmt", "stderrors": "errors"}
        assert f.dot_imports == ["github.com/pkg/errors"]
        assert "embed" not in f.import_paths

    def test_resolver_aliases(self):
        resolver = ImportResolver({"stderrors": "errors"})
        c = Call(fun=Selector(x=Ident(name="stderrors"), sel="New"))
        assert resolver.qualified_name(c) == "errors.New"
        assert resolver.qualified_name(Call(fun=Selector(x=Ident(name="errors"), sel="New"))) is None

    def test_resolver_dot_import(self):
        resolver = ImportResolver({}, ["github.com/pkg/errors"])
        c = Call(fun=Ident(name="Errorf"))
        assert resolver.qualified_name(c) == "github.com/pkg/errors.Errorf"


class TestParseGoFile:

    def test_package_name(self):
        assert parse_go_file("x.go", source=b"package aaa\n").package_name == "aaa"

    def test_syntax_error(self):
        with pytest.raises(SourceError) as exc_info:
            parse_go_file("bad.go", source=b"package bad\n\nfunc F( {\n")
        assert exc_info.value.code == ErrorCodes.SYNTAX_ERROR
        assert exc_info.value.position.file == "bad.go"

    def test_missing_package_clause(self):
        with pytest.raises(SourceError) as exc_info:
            parse_go_file("x.go", source=b"func F() {}\n")
        assert exc_info.value.code == ErrorCodes.NO_PACKAGE_CLAUSE

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(SourceError) as exc_info:
            parse_go_file(str(tmp_path / "missing.go"))
        assert exc_info.value.code == ErrorCodes.UNREADABLE_FILE

    def test_generated_marker(self):
        f = parse_go_file("x.go", source=b"// Code generated by mockgen. DO NOT EDIT.\n\npackage x\n")
        assert f.is_generated

    def test_generated_phrase_is_case_insensitive(self):
        f = parse_go_file("x.go", source=b"package x\n\n// This file was Generated by hand-tool\n")
        assert f.is_generated

    def test_plain_file_is_not_generated(self):
        assert not parse_go_file("x.go", source=b"// generated\npackage x\n").is_generated

    def test_test_file(self):
        assert parse_go_file("x_test.go", source=b"package x\n").is_test


class TestDeclarations:

    def test_function_and_methods(self):
        src = lowered('''
            package aaa

            type Store struct{}

            func (s *Store) Get(key string) (v int, err error) { return 0, nil }
            func (s Store) Name() string { return "" }
            func Free(a, b int) (int, int, error)
            func (l *List[T]) Push(v T) error { return nil }
        ''')
        get, name, free, push = src.decls

        assert get.name == "Get"
        assert get.receiver.shape is TypeShape.POINTER
        assert get.receiver.elem.name == "Store"
        assert [r.name for r in get.results] == ["int", "error"]

        assert name.receiver.shape is TypeShape.NAMED
        assert name.results[0].name == "string"

        assert free.receiver is None
        assert free.body is None
        assert len(free.results) == 3

        assert push.receiver.shape is TypeShape.POINTER
        assert push.receiver.elem.shape is TypeShape.OTHER

    def test_positions_are_one_based(self):
        src = lowered('''
            package aaa

            import "errors"

            func F() error {
            \treturn errors.New("x")
            }
        ''')
        (c,) = body_calls(src.decls[0])
        assert (c.position.line, c.position.column) == (6, 9)
        assert c.position.file == "x.go"


class TestConstantFolding:

    def test_package_and_local_constants(self):
        src = lowered('''
            package aaa

            import "fmt"

            const pkgName = "aaa"

            func F(input string) error {
                const fn = pkgName + ".F"
                const n = 1 << 3
                return fmt.Errorf("%s: %d %q", fn, n, input)
            }
        ''')
        (c,) = body_calls(src.decls[0])
        values = [a.const.value if a.const else None for a in c.args]
        assert values == ["%s: %d %q", "aaa.F", 8, None]

    @pytest.mark.parametrize("expr, value", [
        ('"a" + "b"', "ab"),
        ("7 / 2", 3),
        ("-7 / 2", -3),
        ("-7 % 3", -1),
        ("2.5 * 2", 5.0),
        ("(1 + 2) * 3", 9),
        ("1 < 2", True),
        ("!false", True),
        ("^0", -1),
        ("'a' + 1", 98),
    ])
    def test_expressions(self, expr, value):
        src = lowered(f'''
            package aaa

            import "fmt"

            const c = {expr}

            func F() error {{ return fmt.Errorf("%v", c) }}
        ''')
        (c,) = body_calls(src.decls[0])
        assert c.args[1].const.value == value

    def test_unfoldable(self):
        src = lowered('''
            package aaa

            import "errors"

            func F(text string) error {
                return errors.New(text + "x")
            }
        ''')
        (c,) = body_calls(src.decls[0])
        assert c.args[0].const is None

    def test_constants_are_shared_across_files(self):
        package = load_package(["a.go", "b.go"], sources={
            "a.go": go('''
                package aaa

                const prefix = "aaa: "
            '''),
            "b.go": go('''
                package aaa

                import "errors"

                func F() error { return errors.New(prefix + "boom") }
            '''),
        })
        _, b = package.source_files()
        (c,) = body_calls(b.decls[0])
        assert c.args[0].const.value == "aaa: boom"


class TestScopes:

    def test_declared_names(self):
        f = parse_go_file("x.go", source=go('''
            package aaa

            func (s *S) F(a string, rest ...int) (n int, err error) {
                var v, w = 1, 2
                x := 3
                for i, e := range rest {
                    _ = func(p int) {}
                }
                switch t := any(a).(type) {
                }
                var cb func(unused string)
                return 0, nil
            }
        '''))
        (decl,) = [n for n in f.root.named_children if n.type == "method_declaration"]
        assert declared_names(decl) == {
            "s", "a", "rest", "n", "err", "v", "w", "x", "i", "e", "p", "t", "cb",
        }

    def test_parameter_hides_package_constant(self):
        src = lowered('''
            package aaa

            import "fmt"

            const pkgName = "aaa"

            func F(pkgName string) error {
                return fmt.Errorf("%s: boom", pkgName)
            }

            func G() error {
                return fmt.Errorf("%s: boom", pkgName)
            }
        ''')
        (f_call,) = body_calls(src.decls[0])
        assert f_call.args[1].const is None
        assert f_call.args[1].local
        (g_call,) = body_calls(src.decls[1])
        assert g_call.args[1].const.value == "aaa"

    def test_shadowed_constant_is_a_placeholder(self):
        results = check_sources({"a.go": textwrap.dedent('''
            package aaa

            import "fmt"

            const pkgName = "aaa"

            func F(pkgName string) error {
                return fmt.Errorf("%s: boom", pkgName)
            }
        ''').lstrip()})
        (diag,) = results.diagnostics
        assert diag.kind is MismatchKind.PACKAGE_MISMATCH
        assert diag.got == "{pkgName}"

    def test_local_variable_hides_import(self):
        results = check_sources({"a.go": textwrap.dedent('''
            package aaa

            import "errors"

            type T struct{}

            func (T) New(string) error { return nil }

            func F() error {
                errors := T{}
                return errors.New("boom")
            }

            func G() error {
                return errors.New("boom")
            }
        ''').lstrip()})
        (diag,) = results.diagnostics
        assert diag.kind is MismatchKind.NO_PREFIX
        assert diag.location.line == 15

    def test_resolver_skips_local_operands(self):
        resolver = ImportResolver({"errors": "errors"}, ["github.com/pkg/errors"])
        assert resolver.qualified_name(Call(fun=Selector(x=Ident(name="errors", local=True), sel="New"))) is None
        assert resolver.qualified_name(Call(fun=Ident(name="Errorf", local=True))) is None


class TestClosures:

    def test_calls_inside_func_literals_are_reachable(self):
        src = lowered('''
            package aaa

            import "errors"

            func F() error {
                err := func() error {
                    return errors.New("inner")
                }()
                return err
            }
        ''')
        found = body_calls(src.decls[0])
        assert any(isinstance(c.fun, Opaque) and c.fun.kind == "func_literal" for c in found)
        names = [c.fun.sel for c in found if isinstance(c.fun, Selector)]
        assert names == ["New"]


class TestLoadPackage:

    def test_mixed_packages(self):
        with pytest.raises(SourceError) as exc_info:
            load_package(["a.go", "b.go"], sources={"a.go": b"package a\n", "b.go": b"package b\n"})
        assert exc_info.value.code == ErrorCodes.MIXED_PACKAGES

    def test_external_test_package_is_allowed(self):
        package = load_package(["a.go", "a_test.go"], sources={
            "a.go": b"package a\n",
            "a_test.go": b"package a_test\n",
        })
        assert package.name == "a"

    def test_import_paths_ignore_tests(self):
        package = load_package(["a.go", "a_test.go"], sources={
            "a.go": b'package a\n\nimport "errors"\n',
            "a_test.go": b'package a\n\nimport "testing"\n',
        })
        assert package.import_paths == frozenset({"errors"})
