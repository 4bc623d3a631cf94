# tests/test_checkers.py
"""
Tests for ErrorPrefixChecker: the pure message check, diagnostic
rendering and the declaration walk over hand-built source files.
"""

import json

import pytest

from conftest import call, ident, lit
from errchain.checkers import (
    LEAD_IN,
    CheckerContext,
    CheckerRunResults,
    Diagnostic,
    DiagnosticSeverity,
    ErrorPrefixChecker,
    PackageInfo,
    SelectorCallResolver,
    SourceFile,
    check_message,
    check_package,
    render_message,
)
from errchain.config import CheckConfig
from errchain.expr import Opaque, Position
from errchain.identity import FuncDecl, TypeRef
from errchain.matcher import MismatchKind, PrefixMismatch
from errchain.recommend import candidate_prefixes

ERROR = TypeRef.named("error")
PTR_STRUCT = TypeRef.pointer(TypeRef.named("Struct"))


def func(name, *body, receiver=None, results=(ERROR,)):
    return FuncDecl(name=name, receiver=receiver, results=results, body=tuple(body))


def source(*decls, path="aaa.go", **kw):
    return SourceFile(path=path, package_name="aaa", decls=tuple(decls), **kw)


AAA = PackageInfo(name="aaa")


class TestCheckMessage:

    def test_success(self, pointer_method):
        assert check_message("aaa.Struct.Method: ok", pointer_method) is None

    def test_no_separator(self, pointer_method):
        m = check_message("input too short", pointer_method)
        assert m.kind is MismatchKind.NO_PREFIX

    def test_unbalanced_pointer_is_invalid_syntax(self, pointer_method):
        m = check_message("aaa.(*Struct.Method: error", pointer_method)
        assert m.kind is MismatchKind.INVALID_SYNTAX
        assert m.got == "aaa.(*Struct.Method"
        assert "aaa.(*Struct).Method" in m.expected

    def test_empty_component_is_invalid_syntax(self, pointer_method):
        m = check_message("aaa.Method.: x", pointer_method)
        assert m.kind is MismatchKind.INVALID_SYNTAX

    def test_four_components_on_free_function(self, free_func):
        m = check_message("aaa.Struct.PublicFunction.extra: x", free_func)
        assert m.kind is MismatchKind.INVALID_SYNTAX
        assert m.expected == "aaa or aaa.PublicFunction"

    def test_matching_raw_tokens_give_no_prefix(self, pointer_method):
        m = check_message("aaa.Struct.Method.Inner: x", pointer_method)
        assert m.kind is MismatchKind.NO_PREFIX

    def test_value_receiver_accepts_pointer_spelling(self, value_method):
        assert check_message("aaa.(*Struct).MethodWithoutPointer: error", value_method) is None

    def test_package_mismatch(self, free_func):
        assert check_message("zzz: x", free_func).kind is MismatchKind.PACKAGE_MISMATCH


class TestRenderMessage:

    def test_no_prefix_lists_suggestions(self, free_func):
        text = render_message(
            PrefixMismatch(MismatchKind.NO_PREFIX),
            candidate_prefixes(free_func),
        )
        assert text == (
            LEAD_IN + ": Consider starting message with one of the following strings: "
            '"aaa: ", "aaa.PublicFunction: "'
        )

    def test_other_kinds_name_got_and_expected(self):
        text = render_message(
            PrefixMismatch(MismatchKind.PACKAGE_MISMATCH, got="bbb", expected="aaa"), (),
        )
        assert text == LEAD_IN + ': package name mismatch: got "bbb", expected "aaa"'


class TestDiagnostic:

    @pytest.fixture
    def diag(self):
        return Diagnostic(
            location=Position("aaa.go", 21, 13),
            kind=MismatchKind.NO_PREFIX,
            message="msg",
            suggestions=("aaa: ",),
            checker_name="errchain",
        )

    def test_gcc_format(self, diag):
        assert diag.to_gcc_format() == "aaa.go:21:13: warning: msg [noPrefix]"

    def test_json(self, diag):
        data = json.loads(diag.to_json_str())
        assert data["errorId"] == "noPrefix"
        assert data["line"] == 21
        assert data["suggestions"] == ["aaa: "]
        assert data["severity"] == DiagnosticSeverity.WARNING.value


class TestErrorPrefixChecker:

    def test_pointer_method_scenarios(self):
        method = func(
            "Method",
            call("fmt.Errorf", lit("input too short, require longer than %d"), lit(3), line=21),
            call("fmt.Errorf", lit("aaa.(*Struct.Method: error"), line=24),
            call("errors.New", lit("aaa.Struct.Method: ok"), line=27),
            receiver=PTR_STRUCT,
        )
        diags = check_package(AAA, [source(method)])
        assert [(d.location.line, d.kind) for d in diags] == [
            (21, MismatchKind.NO_PREFIX),
            (24, MismatchKind.INVALID_SYNTAX),
        ]
        assert diags[0].suggestions == (
            "aaa: ", "aaa.Struct.Method: ", "aaa.(*Struct).Method: ", "aaa.Struct: ",
        )

    def test_free_function_suggestions(self):
        f = func("PublicFunction", call("errors.New", lit("anonymous function err")))
        (diag,) = check_package(AAA, [source(f)])
        assert diag.kind is MismatchKind.NO_PREFIX
        assert diag.suggestions == ("aaa: ", "aaa.PublicFunction: ")
        assert diag.message.startswith(LEAD_IN)

    def test_calls_nested_in_closures_are_checked(self):
        closure = Opaque(kind="func_literal", inner=(call("errors.New", lit("boom")),))
        diags = check_package(AAA, [source(func("PublicFunction", closure))])
        assert len(diags) == 1

    def test_unexported_and_non_error_functions_are_ignored(self):
        files = [source(
            func("privateFunction", call("errors.New", lit("anything"))),
            func("PublicFunction3", call("errors.New", lit("anything")),
                 results=(TypeRef.named("string"),)),
        )]
        assert check_package(AAA, files) == []

    def test_non_constant_message_is_skipped(self):
        ctx = CheckerContext(package=AAA, files=[
            source(func("PublicFunction2", call("errors.New", ident("text"))))
        ])
        assert ErrorPrefixChecker().run(ctx) == []
        assert ctx.stats["calls"] == 1
        assert ctx.stats["skipped"] == 1

    def test_unknown_callee_is_ignored(self):
        f = func("PublicFunction", call("log.Printf", lit("no prefix")))
        assert check_package(AAA, [source(f)]) == []

    def test_generated_and_test_files_are_skipped(self):
        bad = func("PublicFunction", call("errors.New", lit("boom")))
        files = [source(bad, is_generated=True), source(bad, path="aaa_test.go", is_test=True)]
        assert check_package(AAA, files) == []

    def test_include_tests(self):
        bad = func("PublicFunction", call("errors.New", lit("boom")))
        config = CheckConfig(skip_tests=False)
        assert len(check_package(AAA, [source(bad, is_test=True)], config)) == 1

    def test_main_like_package_is_skipped(self):
        bad = func("Run", call("errors.New", lit("boom")))
        pkg = PackageInfo(name="main", is_main_like=True)
        assert check_package(pkg, [source(bad)]) == []

    def test_package_path_suffix(self):
        f = func("Get", call("errors.New", lit("internal/store: not found")))
        pkg = PackageInfo(name="store", path="example.com/app/internal/store")
        assert check_package(pkg, [source(f)]) == []

    def test_configured_constructor(self):
        f = func("PublicFunction", call("errors.Errorf", lit("oops %d"), lit(1)))
        config = CheckConfig().with_constructors(["errors.Errorf=format"])
        (diag,) = check_package(AAA, [source(f)], config)
        assert diag.kind is MismatchKind.NO_PREFIX

    def test_debug_mode_logs_reports(self, caplog):
        f = func("PublicFunction", call("errors.New", lit("boom")))
        with caplog.at_level("DEBUG", logger="errchain"):
            check_package(AAA, [source(f)], CheckConfig(debug=True))
        assert "errors.New('boom')" in caplog.text

    def test_checker_metadata(self):
        checker = ErrorPrefixChecker()
        assert checker.name == "errchain"
        assert "noPointer" in checker.error_ids


class TestSelectorCallResolver:

    def test_qualified_name(self):
        assert SelectorCallResolver().qualified_name(call("fmt.Errorf")) == "fmt.Errorf"

    def test_plain_call(self):
        assert SelectorCallResolver().qualified_name(call("panic")) is None


class TestCheckerRunResults:

    def test_summary_and_filters(self):
        results = CheckerRunResults(packages=["aaa"])
        d = Diagnostic(location=Position("a.go", 1, 1), kind=MismatchKind.NO_POINTER, message="m")
        results.merge([d], {"files": 1, "calls": 2})
        assert results.total_count == 1
        assert results.by_file("a.go") == [d]
        assert results.by_kind(MismatchKind.NO_PREFIX) == []
        summary = results.summary()
        assert "1 diagnostics in 1 packages" in summary
        assert "noPointer: 1" in summary
        assert "calls: 2" in summary
