from __future__ import annotations

import math
import re
from typing import Any, Callable, Mapping

from .models import SelectorKind
from .selector_rules import normalize_space, split_role_selector, strip_xpath_prefix

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_VARIABLE_REFERENCE = re.compile(r"^\{\{\s*([A-Za-z_$][A-Za-z0-9_$.]*)\s*\}\}$")


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER.fullmatch(value))


def quote_literal(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )
    return f"'{escaped}'"


def variable_reference(value: str) -> str | None:
    match = _VARIABLE_REFERENCE.fullmatch(value)
    return match.group(1) if match else None


def format_number(value: int | float) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def format_args(args: Any) -> str:
    if isinstance(args, str):
        reference = variable_reference(args)
        if reference is not None:
            return reference
        return quote_literal(args)

    if isinstance(args, bool):
        return "true" if args else "false"

    if isinstance(args, (int, float)):
        return format_number(args)

    if args is None:
        return "null"

    if isinstance(args, (list, tuple)):
        if len(args) == 1:
            return format_args(args[0])
        return "[" + ", ".join(format_args(item) for item in args) + "]"

    if isinstance(args, Mapping):
        return _format_object(args, format_args)

    return quote_literal(str(args))


def format_literal(value: Any) -> str:
    """Render a value as a plain literal, without variable references or list collapsing."""
    if isinstance(value, str):
        return quote_literal(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_literal(item) for item in value) + "]"
    if isinstance(value, Mapping):
        return _format_object(value, format_literal)
    return quote_literal(str(value))


def format_array(values: Any) -> str:
    items = list(values) if isinstance(values, (list, tuple)) else [values]
    return "[" + ", ".join(format_args(item) for item in items) + "]"


def _format_object(value: Mapping[Any, Any], render: Callable[[Any], str]) -> str:
    if not value:
        return "{}"
    pairs = []
    for key, item in value.items():
        name = str(key)
        rendered_key = name if is_identifier(name) else quote_literal(name)
        pairs.append(f"{rendered_key}: {render(item)}")
    return "{ " + ", ".join(pairs) + " }"


def format_selector(selector: str) -> str:
    return quote_literal(f"xpath={strip_xpath_prefix(selector)}")


def _role_constructor(selector: str) -> str:
    role, name = split_role_selector(selector)
    if name:
        return f"page.getByRole({quote_literal(role)}, {{ name: {quote_literal(name)} }})"
    return f"page.getByRole({quote_literal(role)})"


SELECTOR_CONSTRUCTORS: dict[SelectorKind, Callable[[str], str]] = {
    "test-id": lambda selector: f"page.getByTestId({quote_literal(selector)})",
    "role": _role_constructor,
    "label": lambda selector: f"page.getByLabel({quote_literal(selector)})",
    "placeholder": lambda selector: f"page.getByPlaceholder({quote_literal(selector)})",
    "alt-text": lambda selector: f"page.getByAltText({quote_literal(selector)})",
    "title": lambda selector: f"page.getByTitle({quote_literal(selector)})",
    "text": lambda selector: f"page.getByText({quote_literal(selector)})",
    "css": lambda selector: f"page.locator({quote_literal(selector)})",
    "xpath": lambda selector: f"page.locator({format_selector(selector)})",
}


def stable_selector_to_code(selector: str, kind: SelectorKind | None = "xpath") -> str:
    constructor = SELECTOR_CONSTRUCTORS.get(kind or "xpath", SELECTOR_CONSTRUCTORS["xpath"])
    return constructor(selector)


def format_variable_declaration(name: str, value: Any) -> str:
    if not is_identifier(name):
        return f"// Skipped variable with invalid name: {normalize_space(name, limit=80)}"
    return f"let {name} = {format_literal(value)};"
