from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .models import ElementSnapshot
from .selector_rules import BUTTON_INPUT_TYPES

if TYPE_CHECKING:
    from playwright.sync_api import Locator

_SNAPSHOT_SCRIPT = """
(el) => {
  const attrs = {};
  for (const attr of Array.from(el.attributes || [])) {
    attrs[attr.name] = attr.value;
  }

  const tag = (el.tagName || '').toLowerCase();
  const textOf = (node) => ((node && node.textContent) || '').trim();

  let labelForText = null;
  if (el.id) {
    const label = Array.from(document.querySelectorAll('label[for]'))
      .find((item) => item.getAttribute('for') === el.id);
    if (label) labelForText = textOf(label);
  }

  let ancestorLabelText = null;
  let parent = el.parentElement;
  while (parent) {
    if ((parent.tagName || '').toLowerCase() === 'label') {
      ancestorLabelText = textOf(parent);
      break;
    }
    parent = parent.parentElement;
  }

  const labelledBy = (el.getAttribute('aria-labelledby') || '').trim();
  const labelledByTexts = labelledBy
    ? labelledBy.split(/\\s+/).map((id) => textOf(document.getElementById(id)))
    : [];

  const visibleText = ((el.innerText || '').trim()) || textOf(el);

  return {
    tag,
    input_type: tag === 'input' ? String(el.type || 'text').toLowerCase() : null,
    explicit_role: el.getAttribute('role'),
    text: visibleText,
    text_content: textOf(el),
    outer_html: el.outerHTML || '',
    attributes: attrs,
    value: typeof el.value === 'string' ? el.value : null,
    label_for_text: labelForText,
    ancestor_label_text: ancestorLabelText,
    labelledby_texts: labelledByTexts,
  };
}
"""


def extract_element_snapshot(locator: Locator) -> ElementSnapshot:
    payload: dict[str, Any] = locator.evaluate(_SNAPSHOT_SCRIPT) or {}
    return snapshot_from_payload(payload)


def snapshot_from_payload(payload: dict[str, Any]) -> ElementSnapshot:
    attributes = {str(key): str(value) for key, value in dict(payload.get("attributes") or {}).items()}
    input_type = payload.get("input_type")
    explicit_role = payload.get("explicit_role")
    value = payload.get("value")
    text = str(payload.get("text") or "").strip()
    text_content = payload.get("text_content")
    return ElementSnapshot(
        tag=str(payload.get("tag") or "").lower(),
        input_type=str(input_type).lower() if input_type else None,
        explicit_role=str(explicit_role).strip() or None if explicit_role else None,
        text=text,
        text_content=str(text_content).strip() if text_content is not None else text,
        outer_html=str(payload.get("outer_html") or ""),
        attributes=attributes,
        value=str(value) if value is not None else None,
        label_for_text=payload.get("label_for_text"),
        ancestor_label_text=payload.get("ancestor_label_text"),
        labelledby_texts=[str(item) for item in payload.get("labelledby_texts") or []],
    )


def resolve_accessible_name(snapshot: ElementSnapshot) -> str | None:
    """Name an element the way assistive technology would.

    Rules are tried in order and the first one producing non-empty text wins:
    aria-label, text of buttons and links, value of button-like inputs,
    ``<label for>``, an enclosing ``<label>``, image alt text,
    aria-labelledby references, and finally the element's ``textContent``.
    """
    tag = snapshot.tag
    explicit_role = (snapshot.explicit_role or "").strip().lower()
    own_text = snapshot.text_content if snapshot.text_content is not None else snapshot.text

    aria_label = _clean(snapshot.attributes.get("aria-label"))
    if aria_label:
        return aria_label

    if tag in {"button", "a"} or explicit_role in {"button", "link"}:
        text = _clean(own_text)
        if text:
            return text

    if tag == "input" and (snapshot.input_type or "") in BUTTON_INPUT_TYPES:
        value = _clean(snapshot.value if snapshot.value is not None else snapshot.attributes.get("value"))
        if value:
            return value

    if snapshot.attributes.get("id"):
        label = _clean(snapshot.label_for_text)
        if label:
            return label

    label = _clean(snapshot.ancestor_label_text)
    if label:
        return label

    if tag == "img":
        alt = _clean(snapshot.attributes.get("alt"))
        if alt:
            return alt

    if snapshot.attributes.get("aria-labelledby"):
        joined = " ".join(text for text in (_clean(item) for item in snapshot.labelledby_texts) if text)
        if joined:
            return joined

    return _clean(own_text)


def _clean(value: str | None) -> str | None:
    text = (value or "").strip()
    return text or None
