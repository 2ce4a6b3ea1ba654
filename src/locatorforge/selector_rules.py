from __future__ import annotations

import re

_XPATH_PREFIX = re.compile(r"^\s*xpath=", re.IGNORECASE)
_CSS_PUNCTUATION = frozenset(" !\"#$%&'()*+,./:;<=>?@[\\]^`{|}~")
_CONTROL_CHARS = frozenset("\t\n\f\r")

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
BUTTON_INPUT_TYPES = frozenset({"button", "submit", "reset"})

_IMPLICIT_TAG_ROLES: dict[str, str] = {
    "button": "button",
    "a": "link",
    "select": "combobox",
    "textarea": "textbox",
    "img": "img",
}


def normalize_space(value: str | None, limit: int = 200) -> str:
    if not value:
        return ""
    compact = re.sub(r"\s+", " ", str(value)).strip()
    return compact[:limit] if compact else ""


def strip_xpath_prefix(xpath: str) -> str:
    return _XPATH_PREFIX.sub("", xpath or "", count=1).strip()


def css_escape(value: str) -> str:
    if not value:
        return ""

    escaped: list[str] = []
    for index, char in enumerate(value):
        if char == "\0":
            escaped.append("\\\ufffd")
            continue
        if (
            char in _CONTROL_CHARS
            or (index == 0 and char.isdigit())
            or (index == 0 and char == "-" and len(value) == 1)
        ):
            escaped.append(f"\\{char}")
            continue
        if char in _CSS_PUNCTUATION:
            escaped.append(f"\\{char}")
        else:
            escaped.append(char)
    return "".join(escaped)


def escape_css_attribute_value(value: str) -> str:
    return value.replace('"', '\\"')


def build_css_attribute_selector(attr: str, value: str) -> str:
    if attr == "id":
        return f"#{css_escape(value)}"
    return f'[{attr}="{escape_css_attribute_value(value)}"]'


def implicit_role(tag: str, input_type: str | None = None) -> str | None:
    normalized = (tag or "").strip().lower()
    if normalized in HEADING_TAGS:
        return "heading"
    if normalized == "input":
        kind = (input_type or "text").strip().lower()
        if kind == "checkbox":
            return "checkbox"
        if kind == "radio":
            return "radio"
        if kind in BUTTON_INPUT_TYPES:
            return "button"
        return "textbox"
    return _IMPLICIT_TAG_ROLES.get(normalized)


def split_role_selector(selector: str) -> tuple[str, str | None]:
    role, separator, name = selector.partition("|")
    if not separator or not name:
        return role, None
    return role, name


def join_role_selector(role: str, name: str | None) -> str:
    return f"{role}|{name}" if name else role
