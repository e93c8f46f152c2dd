"""
Regex manager extraction rules.

An extraction rule mirrors a Renovate ``regexManagers`` entry: a set of
``fileMatch`` patterns selecting package files and one or more
``matchStrings`` whose named groups describe a dependency. Patterns are
written for the JavaScript regex engine Renovate runs on and are translated
to Python's ``re`` syntax when the rule is built.
"""

import re
from collections.abc import Iterable, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from ..exceptions import PatternCompilationError, TemplateRenderError
from .template import render_template, template_variables

logger = structlog.get_logger(__name__)

# JavaScript's "." stops at every line terminator, not only "\n".
_JS_ANY_CHAR = r"[^\n\r\u2028\u2029]"

# Members of JavaScript's \s, for use inside a character class. Python's own
# \s differs: it adds \x1c-\x1f and \x85 and leaves out \ufeff.
_JS_SPACE = (
    r"\t\n\x0b\x0c\r \xa0\u1680\u2000-\u200a"
    r"\u2028\u2029\u202f\u205f\u3000\ufeff"
)

TEMPLATED_FIELDS = ("datasource", "depName")
VALUE_FIELD = "currentValue"


def _translate_class(body: str) -> str:
    """Translate the inside of a ``[...]`` class into a Python atom."""
    negated = body.startswith("^")
    if negated:
        body = body[1:]

    members: list[str] = []
    non_space = False
    i = 0
    while i < len(body):
        if body[i] == "\\":
            escape = body[i : i + 2]
            if escape == r"\s":
                members.append(_JS_SPACE)
            elif escape == r"\S":
                non_space = True
            else:
                members.append(escape)
            i += 2
            continue
        members.append(body[i])
        i += 1

    rest = "".join(members)
    if rest.startswith("^"):
        rest = "\\" + rest

    if not non_space:
        if not rest:
            # [] never matches, [^] matches anything
            return r"[\s\S]" if negated else "(?!)"
        return f"[{'^' if negated else ''}{rest}]"
    # \S cannot be expressed inside a Python class, so split it out
    if negated:
        return f"(?:(?![{rest}])[{_JS_SPACE}])" if rest else f"[{_JS_SPACE}]"
    return f"(?:[^{_JS_SPACE}]|[{rest}])" if rest else f"[^{_JS_SPACE}]"


def to_python_pattern(pattern: str) -> str:
    """
    Translate a JavaScript regular expression into Python ``re`` syntax.

    Named groups ``(?<name>...)`` become ``(?P<name>...)``. An unescaped
    ``.`` outside a character class becomes a class excluding all JavaScript
    line terminators, and ``\\s``/``\\S`` are spelled out with JavaScript's
    whitespace set, inside classes too. Lookbehind assertions are left
    untouched. The result must be compiled with ``re.ASCII`` so that ``\\d``,
    ``\\w`` and ``\\b`` keep their ASCII-only JavaScript meaning.
    """
    translated: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            escape = pattern[i : i + 2]
            if escape == r"\s":
                translated.append(f"[{_JS_SPACE}]")
            elif escape == r"\S":
                translated.append(f"[^{_JS_SPACE}]")
            else:
                translated.append(escape)
            i += 2
            continue
        if char == "[":
            end = i + 1
            while end < len(pattern) and pattern[end] != "]":
                end += 2 if pattern[end] == "\\" else 1
            if end >= len(pattern):
                # Unterminated class, left for re.compile to reject
                translated.append(pattern[i:])
                break
            translated.append(_translate_class(pattern[i + 1 : end]))
            i = end + 1
            continue
        if char == ".":
            translated.append(_JS_ANY_CHAR)
        elif pattern.startswith("(?<", i) and pattern[i + 3 : i + 4] not in ("=", "!"):
            translated.append("(?P<")
            i += 3
            continue
        else:
            translated.append(char)
        i += 1
    return "".join(translated)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(to_python_pattern(pattern), re.ASCII)
    except re.error as e:
        raise PatternCompilationError(
            f"Invalid pattern {pattern!r}: {e}", pattern=pattern
        ) from e


class ExtractedDependency(BaseModel):
    """A dependency found by an extraction rule."""

    model_config = ConfigDict(frozen=True)

    datasource: str
    dep_name: str
    current_value: str
    package_file: str | None = None
    span: tuple[int, int] = (0, 0)

    def as_tuple(self) -> tuple[str, str, str]:
        """Return ``(datasource, depName, currentValue)``."""
        return (self.datasource, self.dep_name, self.current_value)


class ExtractionRule:
    """
    Compiled regex manager.

    Each match string is applied to the whole file text; every
    non-overlapping match becomes one ``ExtractedDependency``. Matches are
    returned per match string, in source order.
    """

    def __init__(
        self,
        file_match: Iterable[str],
        match_strings: Sequence[str],
        datasource_template: str | None = None,
        dep_name_template: str | None = None,
    ):
        """
        Build and validate a rule.

        Args:
            file_match: Regular expressions selecting package file paths
            match_strings: Patterns with named capture groups
            datasource_template: Template producing the datasource
            dep_name_template: Template producing the dependency name

        Raises:
            PatternCompilationError: If a pattern does not compile or cannot
                produce every dependency field
        """
        if not match_strings:
            raise PatternCompilationError("Regex manager has no match strings")

        self.file_match = tuple(file_match)
        self.match_strings = tuple(match_strings)
        self.templates: dict[str, str | None] = {
            "datasource": datasource_template,
            "depName": dep_name_template,
        }
        self._file_patterns = [_compile(p) for p in self.file_match]
        self._patterns = [_compile(p) for p in self.match_strings]

        for source, compiled in zip(self.match_strings, self._patterns):
            self._validate_groups(source, set(compiled.groupindex))

        logger.debug(
            "Extraction rule compiled",
            file_match=list(self.file_match),
            match_strings=len(self.match_strings),
        )

    def _validate_groups(self, source: str, groups: set[str]) -> None:
        if VALUE_FIELD not in groups:
            raise PatternCompilationError(
                f"Pattern must capture a '{VALUE_FIELD}' group", pattern=source
            )
        for field in TEMPLATED_FIELDS:
            template = self.templates[field]
            if template is None:
                if field not in groups:
                    raise PatternCompilationError(
                        f"Pattern must capture a '{field}' group "
                        f"or the rule must define a {field} template",
                        pattern=source,
                    )
                continue
            missing = template_variables(template) - groups
            if missing:
                raise PatternCompilationError(
                    f"{field} template references groups the pattern "
                    f"does not capture: {', '.join(sorted(missing))}",
                    pattern=source,
                    context={"template": template},
                )

    def applies_to(self, path: str) -> bool:
        """Check if a repository-relative POSIX path is a package file."""
        return any(pattern.search(path) for pattern in self._file_patterns)

    def extract(
        self, text: str, package_file: str | None = None
    ) -> list[ExtractedDependency]:
        """
        Extract dependencies from file content.

        Args:
            text: Full file content
            package_file: Path recorded on each dependency

        Returns:
            Dependencies in match order; empty when nothing matches
        """
        deps: list[ExtractedDependency] = []
        for pattern in self._patterns:
            for match in pattern.finditer(text):
                groups = {k: v for k, v in match.groupdict().items() if v is not None}
                dep = self._to_dependency(groups, match.span(), package_file)
                if dep is not None:
                    deps.append(dep)
        return deps

    def _to_dependency(
        self,
        groups: dict[str, str],
        span: tuple[int, int],
        package_file: str | None,
    ) -> ExtractedDependency | None:
        fields: dict[str, str] = {}
        try:
            for field in TEMPLATED_FIELDS:
                template = self.templates[field]
                if template is not None:
                    fields[field] = render_template(template, groups)
                elif field in groups:
                    fields[field] = groups[field]
        except TemplateRenderError as e:
            # Optional groups that did not participate leave nothing to render
            logger.debug(
                "Skipping match with missing group",
                package_file=package_file,
                variable=e.variable,
                span=span,
            )
            return None

        if VALUE_FIELD not in groups or len(fields) < len(TEMPLATED_FIELDS):
            logger.debug(
                "Skipping incomplete match", package_file=package_file, span=span
            )
            return None

        return ExtractedDependency(
            datasource=fields["datasource"],
            dep_name=fields["depName"],
            current_value=groups[VALUE_FIELD],
            package_file=package_file,
            span=span,
        )
