"""Tests for form-portal/app/renderer.py — widget mapping and Streamlit wiring."""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

import pytest

import app.renderer as renderer_mod
from app.renderer import (
    CHECKBOX_GROUP,
    DATE_INPUT,
    EMPTY_OPTION_LABEL,
    RADIO_GROUP,
    SELECT,
    TEXT_AREA,
    TEXT_INPUT,
    build_widget,
    error_html,
    label_html,
    render_field,
)
from app.schema import FormSchema
from app.session_state import FormSession


# ── build_widget ─────────────────────────────────────────────────────────


class TestBuildWidget:
    @pytest.mark.parametrize(
        "field_id, kind",
        [
            ("fullName", TEXT_INPUT),
            ("email", TEXT_INPUT),
            ("phone", TEXT_INPUT),
            ("gender", RADIO_GROUP),
            ("bio", TEXT_AREA),
            ("country", SELECT),
            ("interests", CHECKBOX_GROUP),
            ("dob", DATE_INPUT),
        ],
    )
    def test_kind_per_field_type(self, schema, field_id, kind):
        w = build_widget(schema.get_field(field_id), "")
        assert w.kind == kind

    def test_input_type_passes_through(self, schema):
        assert build_widget(schema.get_field("phone"), "").input_type == "tel"
        assert build_widget(schema.get_field("email"), "").input_type == "email"

    def test_select_starts_with_empty_choice(self, schema):
        w = build_widget(schema.get_field("country"), "us")
        assert w.choices[0].value == ""
        assert w.choices[0].label == EMPTY_OPTION_LABEL
        assert [c.value for c in w.choices] == ["", "in", "us"]
        assert [c.selected for c in w.choices] == [False, False, True]

    def test_radio_selection(self, schema):
        w = build_widget(schema.get_field("gender"), "female")
        assert [(c.value, c.selected) for c in w.choices] == [("male", False), ("female", True)]

    def test_checkbox_selection(self, schema):
        w = build_widget(schema.get_field("interests"), ["music"])
        assert [(c.value, c.selected) for c in w.choices] == [("sports", False), ("music", True)]
        assert w.choices[0].data_test_id == "opt-sports"

    def test_no_error_attrs(self, schema):
        w = build_widget(schema.get_field("fullName"), "Al")
        assert w.attrs["aria-invalid"] == "false"
        assert "aria-describedby" not in w.attrs
        assert w.attrs["data-testid"] == "full-name"

    def test_error_attrs(self, schema):
        w = build_widget(schema.get_field("email"), "x", "Please enter a valid email address")
        assert w.attrs["aria-invalid"] == "true"
        assert w.attrs["aria-describedby"] == "email-error"
        assert w.error_id == "email-error"
        assert "data-testid" not in w.attrs

    def test_none_value_is_empty(self, schema):
        assert build_widget(schema.get_field("fullName"), None).value == ""


class TestMarkup:
    def test_required_marker(self, schema):
        html = label_html(build_widget(schema.get_field("fullName"), ""))
        assert 'class="required-marker"' in html
        assert 'data-testid="full-name"' in html

    def test_optional_has_no_marker(self, schema):
        html = label_html(build_widget(schema.get_field("phone"), ""))
        assert "required-marker" not in html

    def test_error_hidden_when_empty(self, schema):
        html = error_html(build_widget(schema.get_field("phone"), ""))
        assert " hidden" in html
        assert 'id="phone-error"' in html

    def test_error_shown_with_alert_role(self, schema):
        html = error_html(build_widget(schema.get_field("phone"), "1", "Bad <phone>"))
        assert " hidden" not in html
        assert 'role="alert"' in html
        assert "Bad &lt;phone&gt;" in html


# ── render_field ─────────────────────────────────────────────────────────


class TestRenderField:
    def test_text_input_binds_change(self, schema, session):
        with patch.object(renderer_mod, "st") as mock_st:
            mock_st.session_state = {"field:fullName": "Grace"}
            render_field(schema.get_field("fullName"), session)

            kwargs = mock_st.text_input.call_args.kwargs
            assert kwargs["key"] == "field:fullName"
            assert kwargs["placeholder"] == "Jane Doe"
            kwargs["on_change"](*kwargs["args"])

        assert session.values["fullName"] == "Grace"

    def test_textarea(self, schema, session):
        with patch.object(renderer_mod, "st") as mock_st:
            render_field(schema.get_field("bio"), session)
        mock_st.text_area.assert_called_once()
        mock_st.text_input.assert_not_called()

    def test_select_options(self, schema, session):
        with patch.object(renderer_mod, "st") as mock_st:
            render_field(schema.get_field("country"), session)
            kwargs = mock_st.selectbox.call_args.kwargs
        assert kwargs["options"] == ["", "in", "us"]
        assert kwargs["index"] == 0
        assert kwargs["format_func"]("") == EMPTY_OPTION_LABEL
        assert kwargs["format_func"]("us") == "United States"

    def test_radio_without_selection(self, schema, session):
        with patch.object(renderer_mod, "st") as mock_st:
            render_field(schema.get_field("gender"), session)
            kwargs = mock_st.radio.call_args.kwargs
        assert kwargs["options"] == ["male", "female"]
        assert kwargs["index"] is None

    def test_checkbox_per_option_toggles(self, schema, session):
        with patch.object(renderer_mod, "st") as mock_st:
            render_field(schema.get_field("interests"), session)
            calls = mock_st.checkbox.call_args_list

        assert len(calls) == 2
        music = calls[1].kwargs
        assert music["key"] == "opt:interests:1"
        music["on_change"](*music["args"])
        assert session.values["interests"] == ["music"]

    def test_date_stored_as_iso_text(self, schema, session):
        with patch.object(renderer_mod, "st") as mock_st:
            mock_st.session_state = {"field:dob": date(2001, 2, 3)}
            render_field(schema.get_field("dob"), session)
            kwargs = mock_st.date_input.call_args.kwargs
            kwargs["on_change"](*kwargs["args"])

        assert kwargs["value"] is None
        assert session.values["dob"] == "2001-02-03"

    def test_cleared_date_is_empty(self, schema, session):
        session.set_value("dob", "2001-02-03")
        with patch.object(renderer_mod, "st") as mock_st:
            mock_st.session_state = {"field:dob": None}
            render_field(schema.get_field("dob"), session)
            kwargs = mock_st.date_input.call_args.kwargs
            assert kwargs["value"] == date(2001, 2, 3)
            kwargs["on_change"](*kwargs["args"])

        assert session.values["dob"] == ""

    def test_error_rendered_under_field(self, schema, session):
        session.errors["email"] = "Please enter a valid email address"
        with patch.object(renderer_mod, "st") as mock_st:
            widget = render_field(schema.get_field("email"), session)
        assert widget.error == "Please enter a valid email address"
        last_markup = mock_st.markdown.call_args_list[-1].args[0]
        assert "Please enter a valid email address" in last_markup


class TestWidgetKeys:
    def test_option_keys_never_match_field_keys(self):
        schema = FormSchema.from_dict({
            "formTitle": "Contact",
            "sections": [{
                "title": "Contact",
                "fields": [
                    {"fieldId": "contact", "type": "checkbox", "label": "Contact by",
                     "options": [{"value": "email", "label": "Email"},
                                 {"value": "phone", "label": "Phone"}]},
                    {"fieldId": "contact-email", "type": "email", "label": "Email"},
                    {"fieldId": "contact-phone", "type": "tel", "label": "Phone"},
                ],
            }],
        })
        session = FormSession(schema=schema)

        with patch.object(renderer_mod, "st") as mock_st:
            for f in schema.sections[0].fields:
                render_field(f, session)
            keys = [c.kwargs["key"] for c in mock_st.checkbox.call_args_list]
            keys += [c.kwargs["key"] for c in mock_st.text_input.call_args_list]

        assert len(keys) == 4
        assert len(set(keys)) == len(keys)
