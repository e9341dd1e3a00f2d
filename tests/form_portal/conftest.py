"""
Import setup for Form Portal tests.

The tool lives in form-portal/ (not an importable name), so its directory
is added to sys.path and tests import the `app.*` package directly; a
collection hook clears any cached `app.*` modules that belong elsewhere.
The activity trail is redirected to tmp_path for every test.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

_TOOL_DIR = str(Path(__file__).resolve().parent.parent.parent / "form-portal")
if _TOOL_DIR not in sys.path:
    sys.path.insert(0, _TOOL_DIR)


def pytest_collect_file(parent, file_path):
    # Drop a stale `app` package (e.g. another tool's) before importing ours
    if file_path.suffix == ".py" and file_path.name.startswith("test_"):
        mod = sys.modules.get("app")
        if mod is not None and _TOOL_DIR not in " ".join(getattr(mod, "__path__", [])):
            for key in list(sys.modules.keys()):
                if key == "app" or key.startswith("app."):
                    del sys.modules[key]
    return None


@pytest.fixture(autouse=True)
def _isolate_activity_log(tmp_path):
    import app.activity_log as activity_mod

    activity_dir = tmp_path / "activity"
    with patch.object(activity_mod, "DATA_DIR", activity_dir):
        yield activity_dir


@pytest.fixture()
def schema(sample_form):
    from app.schema import FormSchema

    return FormSchema.from_dict(sample_form)


@pytest.fixture()
def session(schema):
    from app.session_state import FormSession

    return FormSession(schema=schema)
