"""In-memory state for one pass through a multi-section form.

A FormSession owns the fetched schema, the current section index, the
values entered so far, the per-field errors, and the flags that gate
section transitions and submission. It lives in st.session_state for the
life of the form view but has no Streamlit dependency itself.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from app.schema import FieldDescriptor, FormSchema, Section
from app.validation import validate_section


class TransitionState(str, Enum):
    IDLE = "idle"
    TRANSITIONING = "transitioning"
    SETTLED = "settled"


# CSS classes for the slide effect, keyed by (phase, direction)
_EFFECTS = {
    ("out", 1): "slide-out-left",
    ("in", 1): "slide-in-right",
    ("out", -1): "slide-out-right",
    ("in", -1): "slide-in-left",
}


@dataclass
class FormSession:
    schema: FormSchema
    current_section: int = 0
    values: dict[str, str | list[str]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    transition: TransitionState = TransitionState.IDLE
    pending_step: int = 0
    last_step: int = 0
    submit_requested: bool = False
    is_submitting: bool = False
    submitted: bool = False
    api_error: str = ""

    def __post_init__(self) -> None:
        # Every field in every section gets an entry, not just the visible one
        initial = self.schema.initial_values()
        initial.update(self.values)
        self.values = initial

    # ── Section access ──────────────────────────────────────────────────

    @property
    def section_count(self) -> int:
        return len(self.schema.sections)

    @property
    def section(self) -> Section:
        return self.schema.sections[self.current_section]

    @property
    def is_first_section(self) -> bool:
        return self.current_section == 0

    @property
    def is_last_section(self) -> bool:
        return self.current_section == self.section_count - 1

    @property
    def can_go_next(self) -> bool:
        return self.current_section + 1 < self.section_count

    @property
    def progress(self) -> float:
        """Percent of sections reached, counting the current one."""
        return (self.current_section + 1) / self.section_count * 100

    @property
    def progress_display(self) -> int:
        """Progress rounded half-up for display."""
        return int(math.floor(self.progress + 0.5))

    @property
    def transition_effect(self) -> str:
        """CSS class for the section header during and after a move."""
        if self.transition is TransitionState.TRANSITIONING:
            return _EFFECTS[("out", self.pending_step)]
        if self.transition is TransitionState.SETTLED and self.last_step:
            return _EFFECTS[("in", self.last_step)]
        return ""

    # ── Input ───────────────────────────────────────────────────────────

    def set_value(self, field_id: str, value: str) -> None:
        """Apply one input change.

        Checkbox fields toggle *value* in their selection list instead of
        overwriting it. Any error on the field is cleared straight away; the
        field is not re-validated until the next transition attempt.
        """
        f = self._require_field(field_id)
        if f.is_multi_select:
            selected = list(self.values.get(field_id) or [])
            if value in selected:
                selected.remove(value)
            else:
                selected.append(value)
            self.values[field_id] = selected
        else:
            self.values[field_id] = "" if value is None else value
        self.errors.pop(field_id, None)

    def _require_field(self, field_id: str) -> FieldDescriptor:
        f = self.schema.get_field(field_id)
        if f is None:
            raise KeyError(f"Unknown field: {field_id}")
        return f

    # ── Validation ──────────────────────────────────────────────────────

    def validate_current_section(self) -> bool:
        """Validate the visible section, merging failures into errors."""
        fields = self.section.fields
        section_errors = validate_section(fields, self.values)
        for f in fields:
            self.errors.pop(f.field_id, None)
        self.errors.update(section_errors)
        return not section_errors

    # ── Pagination ──────────────────────────────────────────────────────

    def request_next(self) -> bool:
        """Start a move to the next section if the current one validates.

        Returns True when a transition is now pending. A request made while
        another transition is pending is ignored.
        """
        if self.transition is TransitionState.TRANSITIONING or not self.can_go_next:
            return False
        if not self.validate_current_section():
            return False
        return self._begin_transition(1)

    def request_prev(self) -> bool:
        """Start a move to the previous section. No validation is run."""
        if self.transition is TransitionState.TRANSITIONING or self.is_first_section:
            return False
        return self._begin_transition(-1)

    def _begin_transition(self, step: int) -> bool:
        self.transition = TransitionState.TRANSITIONING
        self.pending_step = step
        return True

    def settle(self) -> None:
        """Apply the pending move once the transition delay has elapsed."""
        if self.transition is not TransitionState.TRANSITIONING:
            return
        target = self.current_section + self.pending_step
        self.current_section = max(0, min(target, self.section_count - 1))
        self.last_step = self.pending_step
        self.pending_step = 0
        self.transition = TransitionState.SETTLED

    def next_section(self) -> bool:
        """Validate and advance in one step, for a zero transition delay."""
        if not self.request_next():
            return False
        self.settle()
        return True

    def prev_section(self) -> bool:
        if not self.request_prev():
            return False
        self.settle()
        return True

    # ── Submission ──────────────────────────────────────────────────────

    @property
    def submit_locked(self) -> bool:
        """True from the moment Submit is clicked until the call finishes."""
        return self.submit_requested or self.is_submitting

    def request_submit(self) -> bool:
        """Queue a submission from the Submit button's click callback.

        Only allowed from the last section, when nothing is queued or in
        flight, and when the last section validates. The request itself is
        sent later in the same script run, after the disabled button has
        been drawn.
        """
        if self.submit_locked or not self.is_last_section:
            return False
        if not self.validate_current_section():
            return False
        self.submit_requested = True
        self.api_error = ""
        return True

    def begin_submit(self) -> bool:
        """Claim the in-flight flag for a submission.

        Consumes a queued request; without one, the last section is
        validated here instead.
        """
        if self.is_submitting or not self.is_last_section:
            return False
        if not self.submit_requested and not self.validate_current_section():
            return False
        self.submit_requested = False
        self.is_submitting = True
        self.api_error = ""
        return True

    def finish_submit(self, error: str = "") -> None:
        """Release the in-flight flag and record the outcome."""
        self.is_submitting = False
        self.api_error = error
        self.submitted = not error

    def payload(self) -> dict[str, str | list[str]]:
        """A copy of FormValues for the submit-form request."""
        return {
            k: list(v) if isinstance(v, list) else v for k, v in self.values.items()
        }
