from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    CulInt,
    CulebraArityError,
    CulebraImmutableError,
    CulebraTypeError,
    run_program,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("f = fn(x) { x + 1 }; f(5)", ("int", 6), None, id="call-one-arg"),
    pytest.param("f = fn(x) { x + 1 }; f()", None, CulebraArityError, id="call-too-few-args"),
    pytest.param("f = fn(x) { x + 1 }; f(5, 99)", ("int", 6), None, id="call-extra-arg-ignored"),
    pytest.param("f = fn() {}; f()", ("null", None), None, id="empty-body-null"),
    pytest.param("fn(a, b) { a * b }(6, 7)", ("int", 42), None, id="immediate-call"),
    pytest.param("f = fn() { 1 }; f", ("function", None), None, id="function-value"),
    pytest.param("x = 1; x()", None, CulebraTypeError, id="call-non-function"),
    pytest.param("'abc'()", None, CulebraTypeError, id="call-string"),
    pytest.param("puts()", None, CulebraArityError, id="builtin-arity"),
    pytest.param(
        dedent(
            """\
            fact = fn(n) {
              if n <= 1 { 1 } else { n * fact(n - 1) }
            }
            fact(5)
        """
        ),
        ("int", 120),
        None,
        id="named-recursion",
    ),
    pytest.param(
        dedent(
            """\
            fib = fn(n) {
              if n < 2 { n } else { self(n - 1) + self(n - 2) }
            }
            fib(10)
        """
        ),
        ("int", 55),
        None,
        id="self-recursion",
    ),
    pytest.param(
        dedent(
            """\
            make = fn(n) { fn() { n } }
            g = make(7)
            g()
        """
        ),
        ("int", 7),
        None,
        id="closure-captures-param",
    ),
    pytest.param(
        dedent(
            """\
            make = fn() {
              mut c = 0
              fn() { c = c + 1; c }
            }
            ctr = make()
            ctr()
            ctr()
        """
        ),
        ("int", 2),
        None,
        id="closure-counter",
    ),
    pytest.param(
        dedent(
            """\
            make = fn() { mut c = 0; fn() { c = c + 1; c } }
            a = make()
            b = make()
            a()
            a()
            b()
        """
        ),
        ("int", 1),
        None,
        id="closures-independent",
    ),
    pytest.param("f = fn(x) { x = 2 }; f(1)", None, CulebraImmutableError, id="param-immutable"),
    pytest.param("f = fn(mut x) { x = x + 1; x }; f(1)", ("int", 2), None, id="param-mut"),
    pytest.param("x = 10; f = fn(x) { x }; f(3)", ("int", 3), None, id="param-shadows-outer"),
    pytest.param("x = 10; f = fn() { x }; f()", ("int", 10), None, id="reads-outer"),
    pytest.param(
        dedent(
            """\
            f = fn() { [__LINE__, __COLUMN__] }

              f()
        """
        ),
        ("array", [3, 3]),
        None,
        id="call-site-position",
    ),
    pytest.param(
        "o = {add: fn(a, b) { a + b }}; o.add(2, 3)",
        ("int", 5),
        None,
        id="object-function-call",
    ),
    pytest.param(
        "compose = fn(f, g) { fn(x) { f(g(x)) } }; inc = fn(x) { x + 1 }; dbl = fn(x) { x * 2 }; compose(inc, dbl)(5)",
        ("int", 11),
        None,
        id="higher-order",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_extra_arguments_are_never_evaluated(env) -> None:
    source = dedent(
        """\
        mut calls = 0
        sideEffect = fn() { calls = calls + 1 }
        f = fn(x) { x + 1 }
        f(5, sideEffect())
    """
    )
    result = run_program(source, env)

    assert result == CulInt(6)
    assert env.get("calls") == CulInt(0)


def test_arity_checked_before_arguments(env) -> None:
    source = dedent(
        """\
        mut calls = 0
        sideEffect = fn() { calls = calls + 1 }
        f = fn(a, b) { a }
        f(sideEffect())
    """
    )
    with pytest.raises(CulebraArityError):
        run_program(source, env)

    assert env.get("calls") == CulInt(0)


def test_arity_message_names_counts() -> None:
    with pytest.raises(CulebraArityError) as exc_info:
        run_program("f = fn(a, b) { a }; f(1)")

    assert exc_info.value.message == "function expects 2 argument(s); got 1"


def test_deep_recursion() -> None:
    source = dedent(
        """\
        countdown = fn(n) { if n == 0 { 0 } else { self(n - 1) } }
        countdown(500)
    """
    )

    assert run_program(source) == CulInt(0)


def test_deep_recursion_accumulates() -> None:
    source = dedent(
        """\
        sum = fn(n) { if n == 0 { 0 } else { n + sum(n - 1) } }
        sum(600)
    """
    )

    assert run_program(source) == CulInt(180300)
