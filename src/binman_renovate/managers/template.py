"""
Template rendering for regex manager output fields.

Renovate templates use handlebars syntax. Regex managers only ever reference
captured group names, so the supported subset is plain variable substitution
with either the triple-stash (``{{{name}}}``) or double-stash (``{{name}}``)
form. Neither form escapes its value.
"""

import re
from collections.abc import Mapping

from ..exceptions import TemplateRenderError

_VARIABLE_PATTERN = re.compile(
    r"\{\{\{\s*(?P<triple>[A-Za-z_]\w*)\s*\}\}\}|\{\{\s*(?P<double>[A-Za-z_]\w*)\s*\}\}"
)


def template_variables(template: str) -> set[str]:
    """Return the names referenced by a template."""
    return {
        match.group("triple") or match.group("double")
        for match in _VARIABLE_PATTERN.finditer(template)
    }


def render_template(template: str, values: Mapping[str, str]) -> str:
    """
    Render a template against captured values.

    Args:
        template: Template string, e.g. ``"{{{depName}}}"``
        values: Captured group values keyed by group name

    Returns:
        The rendered string

    Raises:
        TemplateRenderError: If the template references an unknown name
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group("triple") or match.group("double")
        if name not in values:
            raise TemplateRenderError(
                f"Template references unknown value: {name}",
                variable=name,
                context={"template": template, "available": sorted(values)},
            )
        return values[name]

    return _VARIABLE_PATTERN.sub(_substitute, template)
