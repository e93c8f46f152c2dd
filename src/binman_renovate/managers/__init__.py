"""
Regex manager package.

Compiled extraction rules, handlebars-style templates and package file
scanning.
"""

from .regex import ExtractedDependency, ExtractionRule, to_python_pattern
from .scanner import PackageFile, scan_directory, scan_text
from .template import render_template, template_variables

__all__ = [
    "ExtractedDependency",
    "ExtractionRule",
    "PackageFile",
    "render_template",
    "scan_directory",
    "scan_text",
    "template_variables",
    "to_python_pattern",
]
