"""
Tests for handlebars-style template rendering.
"""

import pytest

from binman_renovate.exceptions import TemplateRenderError
from binman_renovate.managers.template import render_template, template_variables


def test_identity_templates_round_trip():
    """Test identity templates return captured values unchanged."""
    captured = {"datasource": "github-releases", "depName": "mikefarah/yq"}

    assert render_template("{{{datasource}}}", captured) == "github-releases"
    assert render_template("{{{depName}}}", captured) == "mikefarah/yq"


def test_double_stash_does_not_escape():
    """Test both forms substitute values verbatim."""
    captured = {"depName": "a&b<c>"}

    assert render_template("{{depName}}", captured) == "a&b<c>"
    assert render_template("{{{ depName }}}", captured) == "a&b<c>"


def test_literal_text_is_kept():
    """Test text around variables is preserved."""
    captured = {"registry": "ghcr.io", "image": "org/app"}

    assert render_template("{{registry}}/{{{image}}}", captured) == "ghcr.io/org/app"
    assert render_template("docker", captured) == "docker"


def test_unknown_variable():
    """Test referencing a value that was not captured."""
    with pytest.raises(TemplateRenderError) as exc_info:
        render_template("{{{packageName}}}", {"depName": "nginx"})

    assert exc_info.value.variable == "packageName"
    assert exc_info.value.context["available"] == ["depName"]


def test_template_variables():
    """Test variable discovery."""
    assert template_variables("{{registry}}/{{{ image }}}") == {"registry", "image"}
    assert template_variables("docker") == set()
