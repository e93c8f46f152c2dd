"""
binman.yaml manifest model.

A binman manifest maps a binary name to where it is downloaded from and which
version is pinned. URLs and original file names may contain ``${version}``,
``${system}`` and ``${cpu}`` placeholders, resolved with Go's platform naming
so manifests stay interchangeable with the binman tool.

Example::

    yq:
      originalName: yq_${system}_${cpu}
      url: https://github.com/mikefarah/yq/releases/download/${version}/yq_${system}_${cpu}.tar.gz
      # renovate: datasource=github-releases depName=mikefarah/yq
      version: v4.44.6
"""

import platform
from collections.abc import Mapping

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ManifestError

logger = structlog.get_logger(__name__)

_GO_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


def current_system() -> str:
    """Return the running OS in Go's naming (``linux``, ``darwin``, ``windows``)."""
    return platform.system().lower()


def current_cpu() -> str:
    """Return the running architecture in Go's naming (``amd64``, ``arm64``, ...)."""
    machine = platform.machine().lower()
    return _GO_ARCH.get(machine, machine)


def replace_placeholders(
    s: str, version: str, system: str | None = None, cpu: str | None = None
) -> str:
    """Substitute ``${version}``, ``${system}`` and ``${cpu}`` in a string."""
    s = s.replace("${version}", version)
    s = s.replace("${system}", system or current_system())
    s = s.replace("${cpu}", cpu or current_cpu())
    return s


class Binary(BaseModel):
    """A binary entry of a binman manifest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original_name: str | None = Field(default=None, alias="originalName")
    url: str
    version: str
    url_postfix: dict[str, str] = Field(default_factory=dict, alias="urlPostfix")
    header: list[str] = Field(default_factory=list)
    source: list[str] = Field(default_factory=list)

    def resolved_url(self, system: str | None = None, cpu: str | None = None) -> str:
        """
        Resolve the download URL for a platform.

        Args:
            system: OS name, defaults to the running system
            cpu: Architecture name, defaults to the running architecture

        Returns:
            URL with placeholders replaced and the platform postfix appended
        """
        system = system or current_system()
        cpu = cpu or current_cpu()
        url = replace_placeholders(self.url, self.version, system, cpu)
        return url + self.url_postfix.get(f"{system}-{cpu}", "")

    def resolved_original_name(
        self, system: str | None = None, cpu: str | None = None
    ) -> str | None:
        """Resolve the file name of the binary inside a downloaded archive."""
        if self.original_name is None:
            return None
        return replace_placeholders(self.original_name, self.version, system, cpu)


class RenovateAnnotation(BaseModel):
    """Comment telling Renovate where to look up new versions of a binary."""

    model_config = ConfigDict(frozen=True)

    datasource: str
    dep_name: str

    def comment(self) -> str:
        return f"# renovate: datasource={self.datasource} depName={self.dep_name}"


def load_manifest(text: str) -> dict[str, Binary]:
    """
    Parse a binman.yaml manifest.

    Args:
        text: Manifest content

    Returns:
        Binaries keyed by name, in file order

    Raises:
        ManifestError: If the content is not a valid manifest
    """
    try:
        # BaseLoader keeps every scalar as written, e.g. "1.10" or "2024-01-01"
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in manifest: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ManifestError(
            "Manifest must be a mapping of binary names to entries",
            context={"type": type(data).__name__},
        )

    binaries: dict[str, Binary] = {}
    for name, entry in data.items():
        try:
            binaries[str(name)] = Binary.model_validate(entry)
        except ValidationError as e:
            raise ManifestError(
                f"Invalid manifest entry {name!r}: {e}", context={"binary": str(name)}
            ) from e

    logger.debug("Manifest loaded", binaries=list(binaries))
    return binaries


def default_manifest() -> dict[str, Binary]:
    """Return the manifest a fresh binman installation starts with."""
    return {
        "binman": Binary(
            original_name="bin-manager-${system}-${cpu}",
            url="https://github.com/juliankr/binman/releases/download/"
            "${version}/bin-manager-${system}-${cpu}",
            version="0.0.4",
        )
    }


DEFAULT_ANNOTATIONS = {
    "binman": RenovateAnnotation(
        datasource="github-releases", dep_name="juliankr/binman"
    ),
}


_LINE_BREAKS = frozenset("\n\r\x85\u2028\u2029")


def _check_single_line(field: str, name: str, value: str) -> None:
    if _LINE_BREAKS.intersection(value):
        raise ManifestError(
            f"{field} of {name!r} must fit on one line", context={"binary": name}
        )


def _key(name: str) -> str:
    _check_single_line("Name", name, name)
    return yaml.safe_dump(name, width=float("inf")).split("\n", 1)[0]


def _version_line(name: str, version: str) -> str:
    """
    Write ``version`` unquoted so the regex manager captures it verbatim.

    Versions YAML would read back differently (quotes, comments, surrounding
    whitespace) cannot be written that way and are rejected.
    """
    _check_single_line("Version", name, version)
    line = f"version: {version}"
    try:
        loaded = yaml.load(line, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        loaded = None
    if loaded != {"version": version}:
        raise ManifestError(
            f"Version {version!r} of {name!r} cannot be written as a plain scalar",
            context={"binary": name, "version": version},
        )
    return line


def dump_manifest(
    binaries: Mapping[str, Binary],
    annotations: Mapping[str, RenovateAnnotation] | None = None,
) -> str:
    """
    Render a manifest, writing each annotation directly above its ``version``.

    Args:
        binaries: Binaries keyed by name
        annotations: Renovate annotations keyed by binary name

    Returns:
        binman.yaml content

    Raises:
        ManifestError: If a name or version cannot be written on one plain line
    """
    annotations = annotations or {}
    lines: list[str] = []

    for name, binary in binaries.items():
        data = binary.model_dump(by_alias=True, exclude_defaults=True)
        data.pop("version", None)

        lines.append(f"{_key(name)}:")
        if data:
            body = yaml.safe_dump(
                data,
                sort_keys=False,
                default_flow_style=False,
                width=float("inf"),
            )
            lines.extend(f"  {line}" for line in body.splitlines())
        if name in annotations:
            lines.append(f"  {annotations[name].comment()}")
        lines.append(f"  {_version_line(name, binary.version)}")

    return "\n".join(lines) + "\n" if lines else ""
