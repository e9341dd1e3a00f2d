"""Shared fixtures for all tests."""

from __future__ import annotations

import pytest


@pytest.fixture()
def sample_form() -> dict:
    """A two-section form payload as the form service returns it."""
    return {
        "formTitle": "Student Registration",
        "version": "1.0",
        "sections": [
            {
                "title": "Personal Details",
                "description": "Tell us about yourself",
                "fields": [
                    {
                        "fieldId": "fullName",
                        "type": "text",
                        "label": "Full Name",
                        "required": True,
                        "minLength": 2,
                        "placeholder": "Jane Doe",
                        "dataTestId": "full-name",
                    },
                    {
                        "fieldId": "email",
                        "type": "email",
                        "label": "Email",
                        "required": True,
                    },
                    {
                        "fieldId": "phone",
                        "type": "tel",
                        "label": "Phone",
                        "required": False,
                    },
                    {
                        "fieldId": "gender",
                        "type": "radio",
                        "label": "Gender",
                        "required": True,
                        "options": [
                            {"value": "male", "label": "Male"},
                            {"value": "female", "label": "Female"},
                        ],
                    },
                ],
            },
            {
                "title": "Preferences",
                "description": "Almost done",
                "fields": [
                    {
                        "fieldId": "bio",
                        "type": "textarea",
                        "label": "Bio",
                        "required": False,
                        "maxLength": 50,
                    },
                    {
                        "fieldId": "country",
                        "type": "dropdown",
                        "label": "Country",
                        "required": True,
                        "options": [
                            {"value": "in", "label": "India"},
                            {"value": "us", "label": "United States"},
                        ],
                    },
                    {
                        "fieldId": "interests",
                        "type": "checkbox",
                        "label": "Interests",
                        "required": True,
                        "options": [
                            {"value": "sports", "label": "Sports", "dataTestId": "opt-sports"},
                            {"value": "music", "label": "Music"},
                        ],
                    },
                    {
                        "fieldId": "dob",
                        "type": "date",
                        "label": "Date of Birth",
                        "required": False,
                    },
                ],
            },
        ],
    }


@pytest.fixture()
def section_one_values() -> dict:
    """Valid answers for the first section of sample_form."""
    return {
        "fullName": "Alan Turing",
        "email": "alan@example.com",
        "phone": "1234567890",
        "gender": "male",
    }
