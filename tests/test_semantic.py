"""Tests for the per-file semantic model."""
from __future__ import annotations

from pathlib import Path

import pytest
from tree_sitter import Node

from junitguard.expectations import InvocationCollector
from junitguard.nodes import (
    METHOD_INVOCATION,
    OBJECT_CREATION,
    invocation_arguments,
    invocation_name,
    iter_nodes,
    node_text,
)
from junitguard.parser import ParseResult, parse_source
from junitguard.semantic import SemanticModel
from junitguard.symbols import CONSTRUCTOR_NAME, JavaType, MethodSymbol


def _parse(source: str) -> tuple[SemanticModel, Node]:
    result: ParseResult = parse_source(source=source, file=Path("SampleTest.java"))
    assert result.tree is not None, result.syntax_error
    return SemanticModel.build(result.tree), result.tree.root_node


def _invocations(root: Node, name: str) -> list[Node]:
    return [
        n for n in iter_nodes(root)
        if n.type == METHOD_INVOCATION and node_text(invocation_name(n)) == name
    ]


def _creation(root: Node) -> Node:
    return next(n for n in iter_nodes(root) if n.type == OBJECT_CREATION)


class TestDeclarations:
    def test_package_and_nested_types(self) -> None:
        model, _ = _parse(
            """\
package com.example;

class OuterTest {
    static class Helper {}
    interface Callback {}
}

enum Mode { ON, OFF }
"""
        )
        assert model.package == "com.example"
        assert set(model.declarations) == {
            "com.example.OuterTest",
            "com.example.OuterTest.Helper",
            "com.example.OuterTest.Callback",
            "com.example.Mode",
        }

    def test_declared_supertypes_resolved_through_imports(self) -> None:
        model, _ = _parse(
            """\
import java.io.IOException;

class StorageException extends IOException {}
class QuotaException extends StorageException {}
"""
        )
        assert model.supertypes("QuotaException") == ("StorageException",)
        assert model.is_subtype(JavaType("QuotaException"), "java.io.IOException")
        assert model.is_subtype(JavaType("QuotaException"), "java.lang.Exception")
        assert not model.is_subtype(JavaType("QuotaException"), "java.lang.RuntimeException")

    def test_class_without_supertypes_extends_object(self) -> None:
        model, _ = _parse("class Plain {}\n")
        assert model.supertypes("Plain") == ("java.lang.Object",)


class TestTypeResolution:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            pytest.param("IOException", JavaType("java.io.IOException"), id="single_import"),
            pytest.param("ExecutionException", JavaType("java.util.concurrent.ExecutionException"), id="on_demand"),
            pytest.param("IllegalStateException", JavaType("java.lang.IllegalStateException"), id="java_lang"),
            pytest.param("int", JavaType("int"), id="primitive"),
            pytest.param("Mystery", JavaType("Mystery", known=False), id="unknown"),
        ],
    )
    def test_resolve_type_name(self, name: str, expected: JavaType) -> None:
        model, _ = _parse(
            """\
import java.io.IOException;
import java.util.concurrent.*;

class SampleTest {}
"""
        )
        assert model.resolve_type_name(name) == expected

    def test_qualified_nested_type(self) -> None:
        model, _ = _parse(
            """\
class SampleTest {
    static class Failure extends RuntimeException {}
}
"""
        )
        assert model.resolve_type_name("SampleTest.Failure") == JavaType("SampleTest.Failure")


class TestInvocationResolution:
    def test_local_method_with_throws_clause(self) -> None:
        model, root = _parse(
            """\
import java.io.IOException;

class SampleTest {
    void load(String path) throws IOException {}

    void test() {
        load("a.txt");
    }
}
"""
        )
        symbol: MethodSymbol | None = model.resolve_invocation(_invocations(root, "load")[0])
        assert symbol is not None
        assert symbol.owner == "SampleTest"
        assert symbol.thrown_types == (JavaType("java.io.IOException"),)

    def test_static_import_resolves_library_method(self) -> None:
        model, root = _parse(
            """\
import static org.junit.Assert.fail;

class SampleTest {
    void test() {
        fail();
        fail("boom");
    }
}
"""
        )
        symbols: list[MethodSymbol | None] = [
            model.resolve_invocation(n) for n in _invocations(root, "fail")
        ]
        assert [s.owner for s in symbols if s is not None] == ["org.junit.Assert"] * 2
        assert [len(s.parameter_types) for s in symbols if s is not None] == [0, 1]

    def test_static_on_demand_import(self) -> None:
        model, root = _parse(
            """\
import static org.junit.jupiter.api.Assertions.*;

class SampleTest {
    void test() {
        fail("boom");
    }
}
"""
        )
        symbol: MethodSymbol | None = model.resolve_invocation(_invocations(root, "fail")[0])
        assert symbol is not None
        assert symbol.owner == "org.junit.jupiter.api.Assertions"

    def test_inherited_method_from_junit3_test_case(self) -> None:
        model, root = _parse(
            """\
import junit.framework.TestCase;

class LegacyTest extends TestCase {
    void test() {
        fail();
    }
}
"""
        )
        symbol: MethodSymbol | None = model.resolve_invocation(_invocations(root, "fail")[0])
        assert symbol is not None
        assert symbol.owner == "junit.framework.Assert"

    def test_qualified_static_call(self) -> None:
        model, root = _parse(
            """\
class SampleTest {
    void test() throws Exception {
        Thread.sleep(10L);
        Integer.parseInt("12");
    }
}
"""
        )
        sleep: MethodSymbol | None = model.resolve_invocation(_invocations(root, "sleep")[0])
        parse: MethodSymbol | None = model.resolve_invocation(_invocations(root, "parseInt")[0])
        assert sleep is not None and sleep.thrown_types == (JavaType("java.lang.InterruptedException"),)
        assert parse is not None and parse.owner == "java.lang.Integer"

    def test_call_on_typed_local_variable(self) -> None:
        model, root = _parse(
            """\
import java.io.BufferedReader;

class SampleTest {
    void test(BufferedReader reader) throws Exception {
        reader.readLine();
        reader.close();
    }
}
"""
        )
        read_line: MethodSymbol | None = model.resolve_invocation(_invocations(root, "readLine")[0])
        close: MethodSymbol | None = model.resolve_invocation(_invocations(root, "close")[0])
        assert read_line is not None and read_line.owner == "java.io.BufferedReader"
        assert close is not None and close.owner == "java.io.Closeable"

    def test_this_and_field_receivers(self) -> None:
        model, root = _parse(
            """\
import java.io.IOException;

class SampleTest {
    private final Loader loader = new Loader();

    void test() throws IOException {
        this.loader.load();
        this.helper();
    }

    void helper() {}

    static class Loader {
        void load() throws IOException {}
    }
}
"""
        )
        load: MethodSymbol | None = model.resolve_invocation(_invocations(root, "load")[0])
        helper: MethodSymbol | None = model.resolve_invocation(_invocations(root, "helper")[0])
        assert load is not None and load.owner == "SampleTest.Loader"
        assert helper is not None and helper.owner == "SampleTest"

    def test_unknown_receiver_is_unresolved(self) -> None:
        model, root = _parse(
            """\
class SampleTest {
    void test() {
        service.call();
    }
}
"""
        )
        assert model.resolve_invocation(_invocations(root, "call")[0]) is None

    def test_overload_selected_by_argument_types(self) -> None:
        model, root = _parse(
            """\
import java.io.IOException;

class SampleTest {
    void store(int value) {}
    void store(String value) throws IOException {}

    void test() throws IOException {
        store("x");
        store(1);
    }
}
"""
        )
        calls: list[Node] = _invocations(root, "store")
        by_string: MethodSymbol | None = model.resolve_invocation(calls[0])
        by_int: MethodSymbol | None = model.resolve_invocation(calls[1])
        assert by_string is not None and by_string.thrown_types
        assert by_int is not None and not by_int.thrown_types

    def test_varargs_accepts_any_trailing_count(self) -> None:
        model, root = _parse(
            """\
class SampleTest {
    void log(String format, Object... args) {}

    void test() {
        log("a");
        log("a", 1, 2, 3);
    }
}
"""
        )
        calls: list[Node] = _invocations(root, "log")
        assert all(model.resolve_invocation(c) is not None for c in calls)

    def test_varargs_of_arrays_after_other_parameters(self) -> None:
        model, root = _parse(
            """\
import java.io.IOException;
import static org.junit.Assert.assertThrows;

class SampleTest {
    void rows(int[]... values) throws IOException {}
    void tagged(String label, int[]... values) throws IOException {}

    void test() {
        int[] r = {1};
        assertThrows(IOException.class, () -> {
            rows(r);
            tagged("a", r, r);
        });
    }
}
"""
        )
        rows: MethodSymbol | None = model.resolve_invocation(_invocations(root, "rows")[0])
        tagged: MethodSymbol | None = model.resolve_invocation(_invocations(root, "tagged")[0])
        assert rows is not None and rows.varargs
        assert rows.parameter_types == (JavaType("int[]"),)
        assert tagged is not None
        assert tagged.parameter_types == (JavaType("java.lang.String"), JavaType("int[]"))

        lambda_body: Node | None = next(
            n for n in iter_nodes(root) if n.type == "lambda_expression"
        ).child_by_field_name("body")
        assert lambda_body is not None
        sites: list[Node] = InvocationCollector(
            predicate=lambda symbol: symbol is not None, model=model,
        ).collect(lambda_body)
        assert [node_text(s) for s in sites] == ["rows", "tagged"]

    def test_varargs_without_parameter_types_matches_any_argument(self) -> None:
        model, root = _parse(
            """\
class SampleTest {
    void test() {
        run(1, 2);
    }
}
"""
        )
        symbol: MethodSymbol = MethodSymbol(owner="SampleTest", name="run", varargs=True)
        call: Node = _invocations(root, "run")[0]
        assert model._select_overload([symbol], invocation_arguments(call)) == symbol

    def test_rejects_non_invocation(self) -> None:
        model, root = _parse("class SampleTest {}\n")
        with pytest.raises(ValueError):
            model.resolve_invocation(root)


class TestConstructorResolution:
    def test_catalogued_constructor_throws(self) -> None:
        model, root = _parse(
            """\
import java.io.FileInputStream;

class SampleTest {
    void test() throws Exception {
        new FileInputStream("missing.txt");
    }
}
"""
        )
        symbol: MethodSymbol | None = model.resolve_constructor(_creation(root))
        assert symbol is not None
        assert symbol.name == CONSTRUCTOR_NAME
        assert symbol.thrown_types == (JavaType("java.io.FileNotFoundException"),)

    def test_declared_constructor(self) -> None:
        model, root = _parse(
            """\
import java.io.IOException;

class SampleTest {
    static class Connection {
        Connection(String url) throws IOException {}
    }

    void test() throws IOException {
        new Connection("db://");
    }
}
"""
        )
        symbol: MethodSymbol | None = model.resolve_constructor(_creation(root))
        assert symbol is not None
        assert symbol.owner == "SampleTest.Connection"

    def test_implicit_default_constructor(self) -> None:
        model, root = _parse(
            """\
class SampleTest {
    static class Widget {}

    void test() {
        new Widget();
    }
}
"""
        )
        symbol: MethodSymbol | None = model.resolve_constructor(_creation(root))
        assert symbol == MethodSymbol(owner="SampleTest.Widget", name=CONSTRUCTOR_NAME)

    def test_unknown_type_is_unresolved(self) -> None:
        model, root = _parse(
            """\
class SampleTest {
    void test() {
        new Mystery(1);
    }
}
"""
        )
        assert model.resolve_constructor(_creation(root)) is None
