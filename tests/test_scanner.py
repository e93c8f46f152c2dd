"""
Tests for package file scanning.
"""

from pathlib import Path
from unittest.mock import patch

from binman_renovate.managers.scanner import scan_directory, scan_text

BLOCK = "# renovate: datasource=github-releases depName={dep}\nversion: {version}\n"


def test_scan_directory(tmp_path, binman_rule):
    """Test matching files are scanned in sorted order."""
    (tmp_path / "binman.yaml").write_text(BLOCK.format(dep="org/a", version="1.0.0"))
    (tmp_path / "team").mkdir()
    (tmp_path / "team" / "binman.yaml").write_text(
        BLOCK.format(dep="org/b", version="2.0.0")
    )
    (tmp_path / "other.yaml").write_text(BLOCK.format(dep="org/c", version="3.0.0"))

    results = scan_directory(tmp_path, [binman_rule])

    assert [r.package_file for r in results] == ["binman.yaml", "team/binman.yaml"]
    assert [d.as_tuple() for d in results[1].deps] == [
        ("github-releases", "org/b", "2.0.0")
    ]
    assert results[1].deps[0].package_file == "team/binman.yaml"


def test_scan_directory_skips_git(tmp_path, binman_rule):
    """Test the .git directory is never scanned."""
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "binman.yaml").write_text(
        BLOCK.format(dep="org/a", version="1.0.0")
    )

    assert scan_directory(tmp_path, [binman_rule]) == []


def test_scan_directory_omits_files_without_deps(tmp_path, binman_rule):
    """Test package files with no matches are left out."""
    (tmp_path / "binman.yaml").write_text("yq:\n  version: v4.44.6\n")

    assert scan_directory(tmp_path, [binman_rule]) == []


def test_scan_directory_skips_undecodable_files(tmp_path, binman_rule):
    """Test binary content does not abort the scan."""
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "binman.yaml").write_bytes(b"\xff\xfe\x00binary")
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "binman.yaml").write_text(
        BLOCK.format(dep="org/b", version="2.0.0")
    )

    results = scan_directory(tmp_path, [binman_rule])

    assert [r.package_file for r in results] == ["b/binman.yaml"]


def test_scan_text_respects_file_match(binman_rule):
    """Test in-memory scanning only applies matching rules."""
    text = BLOCK.format(dep="org/a", version="1.0.0")

    assert len(scan_text("binman.yaml", text, [binman_rule])) == 1
    assert scan_text("README.md", text, [binman_rule]) == []


def test_scan_directory_skips_dangling_symlinks(tmp_path, binman_rule):
    """Test a broken symlink does not abort the scan."""
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "binman.yaml").symlink_to(tmp_path / "missing.yaml")
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "binman.yaml").write_text(
        BLOCK.format(dep="org/b", version="2.0.0")
    )

    results = scan_directory(tmp_path, [binman_rule])

    assert [r.package_file for r in results] == ["b/binman.yaml"]


def test_scan_directory_skips_unreadable_files(tmp_path, binman_rule):
    """Test read errors are logged and skipped."""
    (tmp_path / "binman.yaml").write_text(BLOCK.format(dep="org/a", version="1.0.0"))

    with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
        results = scan_directory(tmp_path, [binman_rule])

    assert results == []
