"""Step checklist for the review screen."""
from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional

from core.validation import validate_step
from rentwise.models import ApplicationForm
from rentwise.presets import STEP_TITLES


def build_step_checklist(form: ApplicationForm, today: Optional[date] = None) -> List[Dict]:
    """One row per step; a step is checked when its gate passes."""
    return [
        {"label": title, "checked": validate_step(form, i, today=today).is_valid}
        for i, title in enumerate(STEP_TITLES)
    ]


def incomplete_steps(form: ApplicationForm, today: Optional[date] = None) -> List[int]:
    return [i for i, row in enumerate(build_step_checklist(form, today=today)) if not row["checked"]]
