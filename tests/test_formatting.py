import pytest

from locatorforge.formatting import (
    format_args,
    format_array,
    format_literal,
    format_number,
    format_selector,
    format_variable_declaration,
    quote_literal,
    stable_selector_to_code,
)


def test_quote_literal_escapes_quotes_backslashes_and_newlines() -> None:
    assert quote_literal("it's") == "'it\\'s'"
    assert quote_literal("C:\\temp") == "'C:\\\\temp'"
    assert quote_literal("a\nb") == "'a\\nb'"


def test_format_args_variable_reference_is_emitted_bare() -> None:
    assert format_args("{{username}}") == "username"
    assert format_args("{{ user.email }}") == "user.email"
    assert format_args("Hello {{name}}") == "'Hello {{name}}'"


def test_format_args_collapses_single_element_lists() -> None:
    assert format_args(["x"]) == "'x'"
    assert format_args(["a", "{{b}}"]) == "['a', b]"
    assert format_args([]) == "[]"


def test_format_args_scalars_and_objects() -> None:
    assert format_args(True) == "true"
    assert format_args(None) == "null"
    assert format_args(3) == "3"
    assert format_args(2.0) == "2"
    assert format_args(1.5) == "1.5"
    assert format_args({"force": True, "data-id": "x"}) == "{ force: true, 'data-id': 'x' }"


def test_format_number_special_values() -> None:
    assert format_number(float("nan")) == "NaN"
    assert format_number(float("-inf")) == "-Infinity"


def test_format_literal_does_not_substitute_references() -> None:
    assert format_literal("{{name}}") == "'{{name}}'"
    assert format_literal(["only"]) == "['only']"


def test_format_array_always_renders_brackets() -> None:
    assert format_array("red") == "['red']"
    assert format_array(["red", "green"]) == "['red', 'green']"


def test_format_selector_adds_single_xpath_prefix() -> None:
    assert format_selector("//button") == "'xpath=//button'"
    assert format_selector("xpath=//a[@title='x']") == "'xpath=//a[@title=\\'x\\']'"


@pytest.mark.parametrize(
    ("selector", "kind", "expected"),
    [
        ("submit", "test-id", "page.getByTestId('submit')"),
        ("button|Sign up", "role", "page.getByRole('button', { name: 'Sign up' })"),
        ("heading", "role", "page.getByRole('heading')"),
        ("Email", "label", "page.getByLabel('Email')"),
        ("Search", "placeholder", "page.getByPlaceholder('Search')"),
        ("Logo", "alt-text", "page.getByAltText('Logo')"),
        ("Close", "title", "page.getByTitle('Close')"),
        ("Sign up", "text", "page.getByText('Sign up')"),
        ("#signup", "css", "page.locator('#signup')"),
        ("//div", "xpath", "page.locator('xpath=//div')"),
        ("//div", None, "page.locator('xpath=//div')"),
    ],
)
def test_stable_selector_to_code(selector: str, kind, expected: str) -> None:
    assert stable_selector_to_code(selector, kind) == expected


def test_format_variable_declaration() -> None:
    assert format_variable_declaration("username", "alice") == "let username = 'alice';"
    assert format_variable_declaration("retries", 3) == "let retries = 3;"
    assert format_variable_declaration("bad name", 1) == "// Skipped variable with invalid name: bad name"
