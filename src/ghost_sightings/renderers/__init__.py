"""Pure rendering functions: structured data -> HTML strings.

All renderers follow the same pattern:
  - Input: dataclasses / models from analysis/ and view.py
  - Output: str (HTML fragment, not a full page), except ``page`` which
    assembles the fragments into the full document
  - No side effects, no I/O, no Prefect decorators

Used by flows/build.py (static site) and api/app.py (live page).

Public API:
  - stats: build_stats_html
  - sightings_map: build_sightings_map_html, sample_markers, map_center
  - sightings_table: build_sightings_table_html
  - sighting_form: build_sighting_form_html
  - page: build_page_html

Adding a renderer (UI module)
-----------------------------
1. Create ``renderers/{name}.py`` with a build function::

       from ghost_sightings.renderers import render_template

       def build_mywidget_html(data: SomeDataclass) -> str:
           return render_template("mywidget.html.j2", rows=[...])

2. Create a Jinja2 template in ``templates/{name}.html.j2``.
   Templates produce HTML fragments (no <html>/<body> tags).
   CSS goes in ``templates/base.html.j2`` within the <style> block.

3. Wire into ``renderers/page.py`` and add the placeholder in ``base.html.j2``.

4. Add tests: call your build function with sample data and assert
   the returned HTML contains expected content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
