# tests/test_recommend.py
"""Tests for canonical prefix recommendations."""

import pytest

from errchain.checkers import check_message
from errchain.identity import FunctionIdentity
from errchain.recommend import candidate_prefixes, format_candidates, go_quote

IDENTITIES = [
    FunctionIdentity(package_name="aaa", function_name="PublicFunction"),
    FunctionIdentity(package_name="aaa", function_name="Method",
                     receiver_name="Struct", is_pointer_receiver=True),
    FunctionIdentity(package_name="aaa", function_name="Get", receiver_name="Struct"),
    FunctionIdentity(package_name="store", function_name="Get", receiver_name="DB",
                     is_pointer_receiver=True, package_path="example.com/app/store"),
    FunctionIdentity(package_name="x", function_name="X", receiver_name="X"),
]


class TestCandidatePrefixes:

    def test_free_function(self, free_func):
        assert candidate_prefixes(free_func) == ("aaa: ", "aaa.PublicFunction: ")

    def test_pointer_method(self, pointer_method):
        assert candidate_prefixes(pointer_method) == (
            "aaa: ",
            "aaa.Struct.Method: ",
            "aaa.(*Struct).Method: ",
            "aaa.Struct: ",
        )

    def test_value_method(self, value_method):
        assert candidate_prefixes(value_method) == (
            "aaa: ",
            "aaa.Struct.MethodWithoutPointer: ",
            "aaa.Struct: ",
        )

    @pytest.mark.parametrize("identity", IDENTITIES)
    def test_no_duplicates(self, identity):
        prefixes = candidate_prefixes(identity)
        assert len(prefixes) == len(set(prefixes))

    @pytest.mark.parametrize("identity", IDENTITIES)
    def test_every_candidate_matches_its_identity(self, identity):
        for prefix in candidate_prefixes(identity):
            assert check_message(prefix + "something failed", identity) is None


class TestQuoting:

    def test_go_quote_escapes(self):
        assert go_quote('a "b"\n') == '"a \\"b\\"\\n"'

    def test_format_candidates(self, free_func):
        text = format_candidates(candidate_prefixes(free_func))
        assert text == '"aaa: ", "aaa.PublicFunction: "'
