"""
Pytest configuration and fixtures for binman-renovate tests.
"""

import pytest

from binman_renovate.config import BINMAN_MANAGER, Settings
from binman_renovate.managers.regex import ExtractionRule


@pytest.fixture
def mock_settings() -> Settings:
    """Settings for testing."""
    return Settings(
        _env_file=None,
        github_token="test-token",
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def binman_rule() -> ExtractionRule:
    """The binman.yaml extraction rule."""
    return BINMAN_MANAGER.to_rule()


@pytest.fixture
def sample_manifest() -> str:
    """Annotated binman.yaml content."""
    return """\
binman:
  url: https://github.com/juliankr/binman/releases/download/${version}/bin-manager-${system}-${cpu}
  # renovate: datasource=github-releases depName=juliankr/binman
  version: 0.0.4
  originalName: bin-manager-${system}-${cpu}
yq:
  originalName: yq_${system}_${cpu}
  url: https://github.com/mikefarah/yq/releases/download/${version}/yq_${system}_${cpu}.tar.gz
  # renovate: datasource=github-releases depName=mikefarah/yq
  version: v4.44.6
kubectl:
  url: https://dl.k8s.io/release/${version}/bin/${system}/${cpu}/kubectl
  version: v1.25.0
private-release:
  url: https://api.github.com/repos/juliankr/private-release/releases/assets/
  urlPostfix:
    darwin-arm64: 217034482
    linux-amd64: 217034480
  version: 1.0.1
  header:
    - "Authorization: token ${GITHUB_TOKEN}"
    - "Accept: application/octet-stream"
"""
