"""
Custom exceptions for binman-renovate.

This module defines the exception classes raised while loading the Renovate
configuration, compiling extraction rules and reading binman manifests.
"""

from typing import Any


class BinmanRenovateError(Exception):
    """Base exception for binman-renovate errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code or "BINMAN_RENOVATE_ERROR"
        self.context = context or {}


class ConfigurationError(BinmanRenovateError):
    """Exception for configuration related errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, code or "CONFIGURATION_ERROR", context)


class PatternCompilationError(ConfigurationError):
    """Exception for match strings that cannot be compiled into a rule."""

    def __init__(
        self,
        message: str,
        pattern: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "PATTERN_COMPILATION_ERROR", context)
        self.pattern = pattern


class TemplateRenderError(BinmanRenovateError):
    """Exception for templates referencing values that were not captured."""

    def __init__(
        self,
        message: str,
        variable: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "TEMPLATE_RENDER_ERROR", context)
        self.variable = variable


class ManifestError(BinmanRenovateError):
    """Exception for binman.yaml manifests that cannot be read."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "MANIFEST_ERROR", context)
