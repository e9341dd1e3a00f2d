"""Data models for the Form Portal.

Dataclasses for the identity, the form schema fetched from the form service,
and its sections, fields and options. Schemas are parsed from the service's
camelCase JSON via from_dict and serialized back with to_dict.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum


class FieldType(str, Enum):
    """The closed set of field kinds a form schema may use."""

    TEXT = "text"
    TEL = "tel"
    EMAIL = "email"
    TEXTAREA = "textarea"
    DATE = "date"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    CHECKBOX = "checkbox"


# Kinds that select from FieldDescriptor.options
OPTION_TYPES = frozenset({FieldType.DROPDOWN, FieldType.RADIO, FieldType.CHECKBOX})


@dataclass(frozen=True)
class Identity:
    """The signed-in user, cached for the life of the browser session."""

    roll_number: str
    name: str

    def to_dict(self) -> dict:
        return {"rollNumber": self.roll_number, "name": self.name}

    @classmethod
    def from_dict(cls, d: dict) -> Identity | None:
        """Build from the cached record, or None if it is incomplete."""
        if not isinstance(d, dict):
            return None
        roll_number = str(d.get("rollNumber") or "").strip()
        if not roll_number:
            return None
        return cls(roll_number=roll_number, name=str(d.get("name") or "").strip())


@dataclass(frozen=True)
class FieldOption:
    value: str
    label: str
    data_test_id: str = ""

    def to_dict(self) -> dict:
        d = {"value": self.value, "label": self.label}
        if self.data_test_id:
            d["dataTestId"] = self.data_test_id
        return d

    @classmethod
    def from_dict(cls, d: dict) -> FieldOption:
        if not isinstance(d, dict) or "value" not in d:
            raise ValueError(f"Option must be an object with a value: {d!r}")
        value = str(d["value"])
        return cls(
            value=value,
            label=str(d.get("label", value)),
            data_test_id=str(d.get("dataTestId") or ""),
        )


@dataclass(frozen=True)
class FieldDescriptor:
    """A single input within a section."""

    field_id: str
    type: FieldType
    label: str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    placeholder: str = ""
    options: tuple[FieldOption, ...] = ()
    data_test_id: str = ""

    @property
    def is_multi_select(self) -> bool:
        return self.type is FieldType.CHECKBOX

    def empty_value(self) -> str | list[str]:
        """The value a field starts with when the schema loads."""
        return [] if self.is_multi_select else ""

    def to_dict(self) -> dict:
        d: dict = {
            "fieldId": self.field_id,
            "type": self.type.value,
            "label": self.label,
            "required": self.required,
        }
        if self.min_length is not None:
            d["minLength"] = self.min_length
        if self.max_length is not None:
            d["maxLength"] = self.max_length
        if self.placeholder:
            d["placeholder"] = self.placeholder
        if self.options:
            d["options"] = [o.to_dict() for o in self.options]
        if self.data_test_id:
            d["dataTestId"] = self.data_test_id
        return d

    @classmethod
    def from_dict(cls, d: dict) -> FieldDescriptor:
        if not isinstance(d, dict):
            raise ValueError(f"Field must be an object: {d!r}")
        field_id = str(d.get("fieldId") or "").strip()
        if not field_id:
            raise ValueError("Field is missing a fieldId")
        try:
            field_type = FieldType(d.get("type"))
        except ValueError:
            raise ValueError(
                f"Field {field_id!r} has unsupported type {d.get('type')!r}"
            ) from None

        options: tuple[FieldOption, ...] = ()
        if field_type in OPTION_TYPES:
            options = tuple(FieldOption.from_dict(o) for o in d.get("options") or [])
            values = [o.value for o in options]
            if len(set(values)) != len(values):
                raise ValueError(f"Field {field_id!r} repeats an option value")

        return cls(
            field_id=field_id,
            type=field_type,
            label=str(d.get("label") or field_id),
            required=bool(d.get("required", False)),
            min_length=_optional_int(d.get("minLength")),
            max_length=_optional_int(d.get("maxLength")),
            placeholder=str(d.get("placeholder") or ""),
            options=options,
            data_test_id=str(d.get("dataTestId") or ""),
        )


@dataclass(frozen=True)
class Section:
    title: str
    description: str = ""
    fields: tuple[FieldDescriptor, ...] = ()

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, d: dict) -> Section:
        if not isinstance(d, dict) or not isinstance(d.get("fields"), list):
            raise ValueError("Section must be an object with a fields list")
        return cls(
            title=str(d.get("title") or ""),
            description=str(d.get("description") or ""),
            fields=tuple(FieldDescriptor.from_dict(f) for f in d["fields"]),
        )


@dataclass(frozen=True)
class FormSchema:
    """Complete schema for a form, immutable once fetched."""

    form_title: str
    version: str = ""
    sections: tuple[Section, ...] = field(default_factory=tuple)

    def all_fields(self) -> list[FieldDescriptor]:
        """Every field across all sections, in display order."""
        return [f for s in self.sections for f in s.fields]

    def get_field(self, field_id: str) -> FieldDescriptor | None:
        for f in self.all_fields():
            if f.field_id == field_id:
                return f
        return None

    def initial_values(self) -> dict[str, str | list[str]]:
        """FormValues with an empty entry for every field in every section."""
        return {f.field_id: f.empty_value() for f in self.all_fields()}

    def to_dict(self) -> dict:
        return {
            "formTitle": self.form_title,
            "version": self.version,
            "sections": [s.to_dict() for s in self.sections],
        }

    @classmethod
    def from_dict(cls, d: dict) -> FormSchema:
        """Parse a schema payload.

        Raises ValueError when the payload cannot be rendered: no sections,
        a malformed section or field, or a fieldId used twice.
        """
        if not isinstance(d, dict):
            raise ValueError("Form must be an object")
        raw_sections = d.get("sections")
        if not isinstance(raw_sections, list) or not raw_sections:
            raise ValueError("Form has no sections")

        sections = tuple(Section.from_dict(s) for s in raw_sections)

        seen: set[str] = set()
        for s in sections:
            for f in s.fields:
                if f.field_id in seen:
                    raise ValueError(f"Duplicate fieldId {f.field_id!r}")
                seen.add(f.field_id)

        return cls(
            form_title=str(d.get("formTitle") or ""),
            version=str(d.get("version") if d.get("version") is not None else ""),
            sections=sections,
        )


def _optional_int(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Length constraint must be an integer: {value!r}") from None


@dataclass
class ActivityEntry:
    """A single activity trail entry."""

    timestamp: str
    action: str                # remote_call | signed_in | form_loaded | form_submitted | hard_logout
    roll_number: str = ""
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> ActivityEntry:
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})
