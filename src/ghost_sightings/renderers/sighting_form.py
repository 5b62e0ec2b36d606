"""Submission form (modal dialog) renderer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ghost_sightings.renderers import render_template
from ghost_sightings.schemas import TimeOfDay

if TYPE_CHECKING:
    from datetime import date

    from ghost_sightings.view import SubmissionForm


def build_sighting_form_html(form: SubmissionForm, today: date) -> str:
    """Build the "post a sighting" dialog, open or hidden per ``form.state``."""
    return render_template(
        "sighting_form.html.j2",
        is_open=form.is_open,
        show_success=form.show_success,
        error=form.error,
        today=today.isoformat(),
        latitude="" if form.latitude is None else form.latitude,
        longitude="" if form.longitude is None else form.longitude,
        time_options=[t.value for t in TimeOfDay],
    )
