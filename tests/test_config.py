"""Tests for k6report.config."""

import pytest

from k6report.config import OUTPUT_FORMATS, ReportConfig, _read_toml, load_config
from k6report.errors import ConfigError
from k6report.report import RENDERERS


def _write(path, text):
    path.write_text(text, encoding="utf-8")


# ---------------------------------------------------------------------------
# _read_toml
# ---------------------------------------------------------------------------


def test_read_toml_missing_file(tmp_path):
    assert _read_toml(tmp_path / "nonexistent.toml") == {}


def test_read_toml_invalid_utf8(tmp_path):
    bad_file = tmp_path / "bad.toml"
    bad_file.write_bytes(b"\x80\x81\x82")
    assert _read_toml(bad_file) == {}


def test_read_toml_invalid_syntax(tmp_path):
    bad_file = tmp_path / "bad.toml"
    _write(bad_file, "input_path = \n")
    assert _read_toml(bad_file) == {}


# ---------------------------------------------------------------------------
# load_config: sources and precedence
# ---------------------------------------------------------------------------


def test_defaults_when_no_files(tmp_path):
    cfg = load_config(project_root=tmp_path)
    assert cfg == ReportConfig(
        input_path="results.json", output_path=None, output_format="text"
    )


def test_pyproject_section_applied(tmp_path):
    _write(tmp_path / "pyproject.toml", "[tool.k6report]\noutput_path = 'k6-report.txt'\n")
    cfg = load_config(project_root=tmp_path)
    assert cfg.output_path == "k6-report.txt"
    assert cfg.input_path == "results.json"


def test_pyproject_without_section(tmp_path):
    _write(tmp_path / "pyproject.toml", "[tool.pytest]\naddopts = '-q'\n")
    assert load_config(project_root=tmp_path) == ReportConfig()


def test_local_file_overrides_pyproject(tmp_path):
    _write(
        tmp_path / "pyproject.toml",
        "[tool.k6report]\ninput_path = 'a.json'\noutput_format = 'json'\n",
    )
    _write(tmp_path / ".k6report.toml", "input_path = 'b.json'\n")
    cfg = load_config(project_root=tmp_path)
    assert cfg.input_path == "b.json"
    assert cfg.output_format == "json"


def test_unknown_keys_ignored(tmp_path):
    _write(tmp_path / ".k6report.toml", "thresholds = [1, 2]\n")
    assert load_config(project_root=tmp_path) == ReportConfig()


def test_uses_cwd_when_no_root(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write(tmp_path / ".k6report.toml", "output_format = 'json'\n")
    assert load_config().output_format == "json"


def test_output_formats_match_renderers():
    assert set(OUTPUT_FORMATS) == set(RENDERERS)


# ---------------------------------------------------------------------------
# load_config: rejected values
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "line",
    [
        "input_path = 5",
        "input_path = ''",
        "output_path = true",
        "output_path = ['a.txt']",
        "output_format = 1",
    ],
)
def test_wrongly_typed_local_value_rejected(tmp_path, line):
    _write(tmp_path / ".k6report.toml", line + "\n")
    with pytest.raises(ConfigError, match=r"\.k6report\.toml: .* must be a non-empty string"):
        load_config(project_root=tmp_path)


def test_wrongly_typed_pyproject_value_rejected(tmp_path):
    _write(tmp_path / "pyproject.toml", "[tool.k6report]\ninput_path = 5\n")
    with pytest.raises(ConfigError, match="pyproject.toml: input_path"):
        load_config(project_root=tmp_path)


def test_unknown_output_format_rejected(tmp_path):
    _write(tmp_path / ".k6report.toml", "output_format = 'html'\n")
    with pytest.raises(ConfigError, match="output_format must be one of text, json"):
        load_config(project_root=tmp_path)


def test_non_table_section_rejected(tmp_path):
    _write(tmp_path / "pyproject.toml", "[tool]\nk6report = 'results.json'\n")
    with pytest.raises(ConfigError, match="must be a table"):
        load_config(project_root=tmp_path)


def test_non_table_tool_key_ignored(tmp_path):
    _write(tmp_path / "pyproject.toml", "tool = 3\n")
    assert load_config(project_root=tmp_path) == ReportConfig()
