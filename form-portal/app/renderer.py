"""Field rendering for the form view.

build_widget() is a pure mapping from a field descriptor (plus its current
value and error) to a Widget describing what to draw. render_field() draws
that Widget with Streamlit and wires each change back into the FormSession.
"""

from __future__ import annotations

import html as html_mod
from dataclasses import dataclass, field
from datetime import date

import streamlit as st

from app.schema import FieldDescriptor, FieldType
from app.session_state import FormSession

EMPTY_OPTION_LABEL = "Select an option"

_DATE_MIN = date(1900, 1, 1)
_DATE_MAX = date(2100, 12, 31)

# Widget kinds
TEXT_AREA = "text_area"
SELECT = "select"
RADIO_GROUP = "radio_group"
CHECKBOX_GROUP = "checkbox_group"
DATE_INPUT = "date_input"
TEXT_INPUT = "text_input"

_KIND_BY_TYPE = {
    FieldType.TEXTAREA: TEXT_AREA,
    FieldType.DROPDOWN: SELECT,
    FieldType.RADIO: RADIO_GROUP,
    FieldType.CHECKBOX: CHECKBOX_GROUP,
    FieldType.DATE: DATE_INPUT,
    FieldType.TEXT: TEXT_INPUT,
    FieldType.TEL: TEXT_INPUT,
    FieldType.EMAIL: TEXT_INPUT,
}


@dataclass(frozen=True)
class Choice:
    value: str
    label: str
    selected: bool = False
    data_test_id: str = ""


@dataclass(frozen=True)
class Widget:
    """Everything needed to draw one field."""

    kind: str
    field_id: str
    label: str
    input_type: str
    required: bool = False
    value: str = ""
    placeholder: str = ""
    choices: tuple[Choice, ...] = ()
    error: str = ""
    attrs: dict = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"field:{self.field_id}"

    @property
    def error_id(self) -> str:
        return f"{self.field_id}-error"

    def choice_key(self, index: int) -> str:
        # Keyed by position; option values are free text
        return f"opt:{self.field_id}:{index}"


def build_widget(
    field_def: FieldDescriptor,
    value: str | list[str] | None,
    error: str = "",
) -> Widget:
    """Map a field descriptor and its state to a Widget."""
    kind = _KIND_BY_TYPE[field_def.type]

    attrs = {
        "aria-invalid": "true" if error else "false",
    }
    if error:
        attrs["aria-describedby"] = f"{field_def.field_id}-error"
    if field_def.data_test_id:
        attrs["data-testid"] = field_def.data_test_id

    scalar = ""
    choices: tuple[Choice, ...] = ()
    if kind == CHECKBOX_GROUP:
        selected = set(value or [])
        choices = tuple(
            Choice(o.value, o.label, o.value in selected, o.data_test_id)
            for o in field_def.options
        )
    else:
        scalar = "" if value is None else str(value)
        if kind == SELECT:
            choices = (Choice("", EMPTY_OPTION_LABEL, scalar == ""),)
        if kind in (SELECT, RADIO_GROUP):
            choices += tuple(
                Choice(o.value, o.label, o.value == scalar, o.data_test_id)
                for o in field_def.options
            )

    return Widget(
        kind=kind,
        field_id=field_def.field_id,
        label=field_def.label,
        input_type=field_def.type.value,
        required=field_def.required,
        value=scalar,
        placeholder=field_def.placeholder,
        choices=choices,
        error=error,
        attrs=attrs,
    )


# ── Markup ───────────────────────────────────────────────────────────────────


def label_html(widget: Widget) -> str:
    """Field label with its required marker and accessibility attributes."""
    esc = html_mod.escape
    attrs = "".join(f' {k}="{esc(v)}"' for k, v in widget.attrs.items())
    marker = ' <span class="required-marker">*</span>' if widget.required else ""
    return (
        f'<div class="field-label" id="{esc(widget.field_id)}-label"{attrs}>'
        f"{esc(widget.label)}{marker}</div>"
    )


def error_html(widget: Widget) -> str:
    """Inline error under the field; hidden when there is no error."""
    esc = html_mod.escape
    hidden = "" if widget.error else " hidden"
    return (
        f'<div class="field-error" id="{esc(widget.error_id)}" role="alert"{hidden}>'
        f"{esc(widget.error)}</div>"
    )


# ── Streamlit ────────────────────────────────────────────────────────────────


def render_field(field_def: FieldDescriptor, session: FormSession) -> Widget:
    """Draw one field and bind its changes to *session*."""
    widget = build_widget(
        field_def,
        session.values.get(field_def.field_id),
        session.errors.get(field_def.field_id, ""),
    )

    st.markdown(label_html(widget), unsafe_allow_html=True)

    if widget.kind == TEXT_AREA:
        st.text_area(
            widget.label,
            value=widget.value,
            placeholder=widget.placeholder or None,
            height=120,
            key=widget.key,
            on_change=_sync_scalar,
            args=(session, widget.field_id, widget.key),
            label_visibility="collapsed",
        )
    elif widget.kind == SELECT:
        labels = {c.value: c.label for c in widget.choices}
        values = [c.value for c in widget.choices]
        st.selectbox(
            widget.label,
            options=values,
            index=values.index(widget.value) if widget.value in values else 0,
            format_func=lambda v: labels.get(v, v),
            key=widget.key,
            on_change=_sync_scalar,
            args=(session, widget.field_id, widget.key),
            label_visibility="collapsed",
        )
    elif widget.kind == RADIO_GROUP:
        labels = {c.value: c.label for c in widget.choices}
        values = [c.value for c in widget.choices]
        st.radio(
            widget.label,
            options=values,
            index=values.index(widget.value) if widget.value in values else None,
            format_func=lambda v: labels.get(v, v),
            key=widget.key,
            on_change=_sync_scalar,
            args=(session, widget.field_id, widget.key),
            label_visibility="collapsed",
        )
    elif widget.kind == CHECKBOX_GROUP:
        for index, choice in enumerate(widget.choices):
            st.checkbox(
                choice.label,
                value=choice.selected,
                key=widget.choice_key(index),
                on_change=session.set_value,
                args=(widget.field_id, choice.value),
            )
    elif widget.kind == DATE_INPUT:
        st.date_input(
            widget.label,
            value=_parse_date(widget.value),
            min_value=_DATE_MIN,
            max_value=_DATE_MAX,
            format="YYYY-MM-DD",
            key=widget.key,
            on_change=_sync_date,
            args=(session, widget.field_id, widget.key),
            label_visibility="collapsed",
        )
    else:
        # text, tel, email
        st.text_input(
            widget.label,
            value=widget.value,
            placeholder=widget.placeholder or None,
            key=widget.key,
            on_change=_sync_scalar,
            args=(session, widget.field_id, widget.key),
            label_visibility="collapsed",
        )

    st.markdown(error_html(widget), unsafe_allow_html=True)
    return widget


def _sync_scalar(session: FormSession, field_id: str, key: str) -> None:
    value = st.session_state.get(key)
    session.set_value(field_id, "" if value is None else str(value))


def _sync_date(session: FormSession, field_id: str, key: str) -> None:
    value = st.session_state.get(key)
    session.set_value(field_id, value.isoformat() if isinstance(value, date) else "")


def _parse_date(value: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
