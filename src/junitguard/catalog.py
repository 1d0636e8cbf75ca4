"""Known JDK and test-library types and signatures.

Only what is needed to classify exceptions and to resolve the assertion
and failure APIs is listed here, together with a handful of common JDK
calls whose ``throws`` clauses matter in tests. Anything else resolves
to an unknown symbol.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Final

from junitguard.symbols import (
    CLASS_TYPE,
    CONSTRUCTOR_NAME,
    OBJECT_TYPE,
    STRING_TYPE,
    JavaType,
    MethodSymbol,
)

JUNIT4_ASSERT: Final[str] = "org.junit.Assert"
JUNIT5_ASSERTIONS: Final[str] = "org.junit.jupiter.api.Assertions"
JUNIT3_ASSERT: Final[str] = "junit.framework.Assert"
JUNIT3_TEST_CASE: Final[str] = "junit.framework.TestCase"
ASSERTJ_ASSERTIONS: Final[str] = "org.assertj.core.api.Assertions"
ASSERTJ_FAIL: Final[str] = "org.assertj.core.api.Fail"
FEST_FAIL: Final[str] = "org.fest.assertions.Fail"

_THROWABLE: Final[str] = "java.lang.Throwable"
_EXCEPTION: Final[str] = "java.lang.Exception"
_RUNTIME: Final[str] = "java.lang.RuntimeException"
_ERROR: Final[str] = "java.lang.Error"
_IO: Final[str] = "java.io.IOException"

_SUPERTYPES: dict[str, tuple[str, ...]] = {
    OBJECT_TYPE: (),
    STRING_TYPE: (OBJECT_TYPE,),
    CLASS_TYPE: (OBJECT_TYPE,),
    "java.lang.Integer": ("java.lang.Number",),
    "java.lang.Long": ("java.lang.Number",),
    "java.lang.Number": (OBJECT_TYPE,),
    "java.lang.Thread": (OBJECT_TYPE, "java.lang.Runnable"),
    "java.lang.Runnable": (),
    "java.lang.AutoCloseable": (),
    # throwable roots
    _THROWABLE: (OBJECT_TYPE,),
    _EXCEPTION: (_THROWABLE,),
    _ERROR: (_THROWABLE,),
    _RUNTIME: (_EXCEPTION,),
    # java.lang errors
    "java.lang.AssertionError": (_ERROR,),
    "java.lang.LinkageError": (_ERROR,),
    "java.lang.NoClassDefFoundError": ("java.lang.LinkageError",),
    "java.lang.ExceptionInInitializerError": ("java.lang.LinkageError",),
    "java.lang.VirtualMachineError": (_ERROR,),
    "java.lang.OutOfMemoryError": ("java.lang.VirtualMachineError",),
    "java.lang.StackOverflowError": ("java.lang.VirtualMachineError",),
    # java.lang runtime exceptions
    "java.lang.IllegalArgumentException": (_RUNTIME,),
    "java.lang.NumberFormatException": ("java.lang.IllegalArgumentException",),
    "java.lang.IllegalStateException": (_RUNTIME,),
    "java.lang.NullPointerException": (_RUNTIME,),
    "java.lang.ArithmeticException": (_RUNTIME,),
    "java.lang.ClassCastException": (_RUNTIME,),
    "java.lang.UnsupportedOperationException": (_RUNTIME,),
    "java.lang.IndexOutOfBoundsException": (_RUNTIME,),
    "java.lang.ArrayIndexOutOfBoundsException": ("java.lang.IndexOutOfBoundsException",),
    "java.lang.StringIndexOutOfBoundsException": ("java.lang.IndexOutOfBoundsException",),
    "java.lang.NegativeArraySizeException": (_RUNTIME,),
    "java.lang.ArrayStoreException": (_RUNTIME,),
    "java.lang.SecurityException": (_RUNTIME,),
    # java.lang checked exceptions
    "java.lang.InterruptedException": (_EXCEPTION,),
    "java.lang.CloneNotSupportedException": (_EXCEPTION,),
    "java.lang.ReflectiveOperationException": (_EXCEPTION,),
    "java.lang.ClassNotFoundException": ("java.lang.ReflectiveOperationException",),
    "java.lang.NoSuchMethodException": ("java.lang.ReflectiveOperationException",),
    "java.lang.NoSuchFieldException": ("java.lang.ReflectiveOperationException",),
    "java.lang.InstantiationException": ("java.lang.ReflectiveOperationException",),
    "java.lang.IllegalAccessException": ("java.lang.ReflectiveOperationException",),
    # java.io
    _IO: (_EXCEPTION,),
    "java.io.FileNotFoundException": (_IO,),
    "java.io.EOFException": (_IO,),
    "java.io.UnsupportedEncodingException": (_IO,),
    "java.io.InterruptedIOException": (_IO,),
    "java.io.ObjectStreamException": (_IO,),
    "java.io.NotSerializableException": ("java.io.ObjectStreamException",),
    "java.io.UncheckedIOException": (_RUNTIME,),
    "java.io.File": (OBJECT_TYPE,),
    "java.io.Closeable": ("java.lang.AutoCloseable",),
    "java.io.InputStream": (OBJECT_TYPE, "java.io.Closeable"),
    "java.io.FileInputStream": ("java.io.InputStream",),
    "java.io.OutputStream": (OBJECT_TYPE, "java.io.Closeable"),
    "java.io.FileOutputStream": ("java.io.OutputStream",),
    "java.io.Reader": (OBJECT_TYPE, "java.io.Closeable"),
    "java.io.InputStreamReader": ("java.io.Reader",),
    "java.io.FileReader": ("java.io.InputStreamReader",),
    "java.io.BufferedReader": ("java.io.Reader",),
    # java.net
    "java.net.MalformedURLException": (_IO,),
    "java.net.UnknownHostException": (_IO,),
    "java.net.SocketException": (_IO,),
    "java.net.ConnectException": ("java.net.SocketException",),
    "java.net.SocketTimeoutException": ("java.io.InterruptedIOException",),
    "java.net.URISyntaxException": (_EXCEPTION,),
    "java.net.URI": (OBJECT_TYPE,),
    "java.net.URL": (OBJECT_TYPE,),
    # java.nio.file
    "java.nio.file.FileSystemException": (_IO,),
    "java.nio.file.NoSuchFileException": ("java.nio.file.FileSystemException",),
    "java.nio.file.FileAlreadyExistsException": ("java.nio.file.FileSystemException",),
    "java.nio.file.AccessDeniedException": ("java.nio.file.FileSystemException",),
    "java.nio.file.DirectoryNotEmptyException": ("java.nio.file.FileSystemException",),
    "java.nio.file.InvalidPathException": ("java.lang.IllegalArgumentException",),
    "java.nio.file.Files": (OBJECT_TYPE,),
    "java.nio.file.Path": (),
    # java.sql, java.text, java.security, java.time
    "java.sql.SQLException": (_EXCEPTION,),
    "java.text.ParseException": (_EXCEPTION,),
    "java.security.GeneralSecurityException": (_EXCEPTION,),
    "java.security.NoSuchAlgorithmException": ("java.security.GeneralSecurityException",),
    "java.time.DateTimeException": (_RUNTIME,),
    "java.time.format.DateTimeParseException": ("java.time.DateTimeException",),
    # java.util
    "java.util.NoSuchElementException": (_RUNTIME,),
    "java.util.InputMismatchException": ("java.util.NoSuchElementException",),
    "java.util.ConcurrentModificationException": (_RUNTIME,),
    "java.util.MissingResourceException": (_RUNTIME,),
    "java.util.concurrent.ExecutionException": (_EXCEPTION,),
    "java.util.concurrent.TimeoutException": (_EXCEPTION,),
    "java.util.concurrent.CancellationException": ("java.lang.IllegalStateException",),
    "java.util.concurrent.CompletionException": (_RUNTIME,),
    "java.util.concurrent.RejectedExecutionException": (_RUNTIME,),
    "java.util.concurrent.Callable": (),
    "java.util.concurrent.Future": (),
    "java.util.concurrent.CompletableFuture": (OBJECT_TYPE, "java.util.concurrent.Future"),
    "java.util.function.Supplier": (),
    # test libraries
    JUNIT4_ASSERT: (OBJECT_TYPE,),
    "org.junit.function.ThrowingRunnable": (),
    JUNIT5_ASSERTIONS: (OBJECT_TYPE,),
    "org.junit.jupiter.api.function.Executable": (),
    JUNIT3_ASSERT: (OBJECT_TYPE,),
    JUNIT3_TEST_CASE: (JUNIT3_ASSERT,),
    ASSERTJ_ASSERTIONS: (OBJECT_TYPE,),
    ASSERTJ_FAIL: (OBJECT_TYPE,),
    FEST_FAIL: (OBJECT_TYPE,),
}

KNOWN_SUPERTYPES: Final[MappingProxyType[str, tuple[str, ...]]] = MappingProxyType(
    _SUPERTYPES
)


def _t(name: str) -> JavaType:
    return JavaType(name)


def _method(
    owner: str,
    name: str,
    params: tuple[str, ...] = (),
    throws: tuple[str, ...] = (),
    *,
    varargs: bool = False,
) -> MethodSymbol:
    return MethodSymbol(
        owner=owner,
        name=name,
        parameter_types=tuple(_t(p) for p in params),
        thrown_types=tuple(_t(t) for t in throws),
        varargs=varargs,
    )


_JUNIT4_RUNNABLE: Final[str] = "org.junit.function.ThrowingRunnable"
_JUNIT5_EXECUTABLE: Final[str] = "org.junit.jupiter.api.function.Executable"
_SUPPLIER: Final[str] = "java.util.function.Supplier"

LIBRARY_METHODS: Final[tuple[MethodSymbol, ...]] = (
    # JUnit 4
    _method(JUNIT4_ASSERT, "assertThrows", (CLASS_TYPE, _JUNIT4_RUNNABLE)),
    _method(JUNIT4_ASSERT, "assertThrows", (STRING_TYPE, CLASS_TYPE, _JUNIT4_RUNNABLE)),
    _method(JUNIT4_ASSERT, "fail"),
    _method(JUNIT4_ASSERT, "fail", (STRING_TYPE,)),
    # JUnit 5
    _method(JUNIT5_ASSERTIONS, "assertThrows", (CLASS_TYPE, _JUNIT5_EXECUTABLE)),
    _method(JUNIT5_ASSERTIONS, "assertThrows", (CLASS_TYPE, _JUNIT5_EXECUTABLE, STRING_TYPE)),
    _method(JUNIT5_ASSERTIONS, "assertThrows", (CLASS_TYPE, _JUNIT5_EXECUTABLE, _SUPPLIER)),
    _method(JUNIT5_ASSERTIONS, "fail"),
    _method(JUNIT5_ASSERTIONS, "fail", (STRING_TYPE,)),
    _method(JUNIT5_ASSERTIONS, "fail", (_THROWABLE,)),
    _method(JUNIT5_ASSERTIONS, "fail", (STRING_TYPE, _THROWABLE)),
    _method(JUNIT5_ASSERTIONS, "fail", (_SUPPLIER,)),
    # JUnit 3
    _method(JUNIT3_ASSERT, "fail"),
    _method(JUNIT3_ASSERT, "fail", (STRING_TYPE,)),
    # AssertJ
    _method(ASSERTJ_ASSERTIONS, "fail", (STRING_TYPE,)),
    _method(ASSERTJ_ASSERTIONS, "fail", (STRING_TYPE, _THROWABLE)),
    _method(ASSERTJ_ASSERTIONS, "failBecauseExceptionWasNotThrown", (CLASS_TYPE,)),
    _method(ASSERTJ_ASSERTIONS, "shouldHaveThrown", (CLASS_TYPE,)),
    _method(ASSERTJ_FAIL, "fail", (STRING_TYPE,)),
    _method(ASSERTJ_FAIL, "fail", (STRING_TYPE, _THROWABLE)),
    _method(ASSERTJ_FAIL, "failBecauseExceptionWasNotThrown", (CLASS_TYPE,)),
    _method(ASSERTJ_FAIL, "shouldHaveThrown", (CLASS_TYPE,)),
    # FEST
    _method(FEST_FAIL, "fail"),
    _method(FEST_FAIL, "fail", (STRING_TYPE,)),
    # java.lang
    _method("java.lang.Thread", "sleep", ("long",), ("java.lang.InterruptedException",)),
    _method("java.lang.Thread", "join", (), ("java.lang.InterruptedException",)),
    _method(CLASS_TYPE, "forName", (STRING_TYPE,), ("java.lang.ClassNotFoundException",)),
    _method("java.lang.Integer", "parseInt", (STRING_TYPE,), ("java.lang.NumberFormatException",)),
    _method("java.lang.Long", "parseLong", (STRING_TYPE,), ("java.lang.NumberFormatException",)),
    _method("java.lang.AutoCloseable", "close", (), (_EXCEPTION,)),
    # java.io
    _method("java.io.Closeable", "close", (), (_IO,)),
    _method("java.io.InputStream", "read", (), (_IO,)),
    _method("java.io.InputStream", "readAllBytes", (), (_IO,)),
    _method("java.io.OutputStream", "write", ("int",), (_IO,)),
    _method("java.io.OutputStream", "flush", (), (_IO,)),
    _method("java.io.Reader", "read", (), (_IO,)),
    _method("java.io.BufferedReader", "readLine", (), (_IO,)),
    _method("java.io.FileInputStream", CONSTRUCTOR_NAME, (STRING_TYPE,), ("java.io.FileNotFoundException",)),
    _method("java.io.FileInputStream", CONSTRUCTOR_NAME, ("java.io.File",), ("java.io.FileNotFoundException",)),
    _method("java.io.FileOutputStream", CONSTRUCTOR_NAME, (STRING_TYPE,), ("java.io.FileNotFoundException",)),
    _method("java.io.FileOutputStream", CONSTRUCTOR_NAME, ("java.io.File",), ("java.io.FileNotFoundException",)),
    _method("java.io.FileReader", CONSTRUCTOR_NAME, (STRING_TYPE,), ("java.io.FileNotFoundException",)),
    _method("java.io.FileReader", CONSTRUCTOR_NAME, ("java.io.File",), ("java.io.FileNotFoundException",)),
    _method("java.io.File", CONSTRUCTOR_NAME, (STRING_TYPE,)),
    # java.net
    _method("java.net.URI", CONSTRUCTOR_NAME, (STRING_TYPE,), ("java.net.URISyntaxException",)),
    _method("java.net.URL", CONSTRUCTOR_NAME, (STRING_TYPE,), ("java.net.MalformedURLException",)),
    # java.nio.file
    _method("java.nio.file.Files", "readAllBytes", ("java.nio.file.Path",), (_IO,)),
    _method("java.nio.file.Files", "readAllLines", ("java.nio.file.Path",), (_IO,)),
    _method("java.nio.file.Files", "readString", ("java.nio.file.Path",), (_IO,)),
    _method("java.nio.file.Files", "newBufferedReader", ("java.nio.file.Path",), (_IO,)),
    _method("java.nio.file.Files", "delete", ("java.nio.file.Path",), (_IO,)),
    _method(
        "java.nio.file.Files", "createFile",
        ("java.nio.file.Path", "java.nio.file.attribute.FileAttribute"), (_IO,),
        varargs=True,
    ),
    _method(
        "java.nio.file.Files", "createDirectory",
        ("java.nio.file.Path", "java.nio.file.attribute.FileAttribute"), (_IO,),
        varargs=True,
    ),
    # java.util.concurrent
    _method("java.util.concurrent.Callable", "call", (), (_EXCEPTION,)),
    _method(
        "java.util.concurrent.Future", "get", (),
        ("java.lang.InterruptedException", "java.util.concurrent.ExecutionException"),
    ),
)


def is_known_type(name: str) -> bool:
    return name in KNOWN_SUPERTYPES


def library_methods(*, owner: str, name: str) -> list[MethodSymbol]:
    """Catalogued methods declared directly on ``owner`` with ``name``."""
    return [m for m in LIBRARY_METHODS if m.owner == owner and m.name == name]
