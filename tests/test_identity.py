# tests/test_identity.py
"""Tests for function identity resolution."""

import pytest

from errchain.identity import (
    FuncDecl,
    FunctionIdentity,
    TypeRef,
    is_exported,
    receiver_of,
    resolve_identity,
)

ERROR = TypeRef.named("error")


def decl(name, receiver=None, results=(ERROR,), body=()):
    return FuncDecl(name=name, receiver=receiver, results=results, body=body)


class TestPredicates:

    @pytest.mark.parametrize("name, expected", [
        ("Method", True),
        ("method", False),
        ("_Method", False),
        ("", False),
    ])
    def test_is_exported(self, name, expected):
        assert is_exported(name) is expected

    def test_receiver_of_named(self):
        assert receiver_of(TypeRef.named("Struct")) == ("Struct", False)

    def test_receiver_of_pointer(self):
        assert receiver_of(TypeRef.pointer(TypeRef.named("Struct"))) == ("Struct", True)

    def test_receiver_of_generic(self):
        assert receiver_of(TypeRef.pointer(TypeRef.other("List[T]"))) is None


class TestResolveIdentity:

    def test_free_function(self):
        identity = resolve_identity(decl("PublicFunction"), "aaa")
        assert identity == FunctionIdentity(package_name="aaa", function_name="PublicFunction")
        assert not identity.is_method

    def test_pointer_method(self):
        d = decl("Method", receiver=TypeRef.pointer(TypeRef.named("Struct")),
                 results=(TypeRef.named("int"), ERROR))
        identity = resolve_identity(d, "aaa", "example.com/aaa")
        assert identity.receiver_name == "Struct"
        assert identity.is_pointer_receiver
        assert identity.package_path == "example.com/aaa"

    def test_value_method(self):
        identity = resolve_identity(decl("Get", receiver=TypeRef.named("Struct")), "aaa")
        assert identity.receiver_name == "Struct"
        assert not identity.is_pointer_receiver

    def test_unexported_is_skipped(self):
        assert resolve_identity(decl("method"), "aaa") is None

    def test_error_not_last_is_skipped(self):
        d = decl("Get", results=(ERROR, TypeRef.named("int")))
        assert resolve_identity(d, "aaa") is None

    def test_no_results_is_skipped(self):
        assert resolve_identity(decl("Run", results=()), "aaa") is None

    def test_qualified_error_type_is_not_error(self):
        d = decl("Run", results=(TypeRef.other("pkg.error"),))
        assert resolve_identity(d, "aaa") is None

    def test_bodyless_declaration_is_skipped(self):
        assert resolve_identity(decl("Asm", body=None), "aaa") is None

    def test_non_simple_receiver_is_skipped(self):
        d = decl("Push", receiver=TypeRef.pointer(TypeRef.other("List[T]")))
        assert resolve_identity(d, "aaa") is None

    def test_package_path_defaults_to_name(self):
        assert FunctionIdentity(package_name="aaa", function_name="F").package_path == "aaa"
