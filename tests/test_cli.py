"""
CLI Tests - Verify the docscan command line entry point.
"""

import json

import pytest

from docscan.engine import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DOCSCAN_INCLUDE_EXTENSIONS", "DOCSCAN_EXCLUDE_DIRS", "DOCSCAN_SCAN_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


class TestMain:
    """Tests for main()."""

    def test_prints_relative_paths(self, scenario_tree, capsys):
        assert main([str(scenario_tree)]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == ["a.md", "sub/d.md"]

    def test_json_output(self, scenario_tree, capsys):
        assert main([str(scenario_tree), "--json"]) == 0

        body = json.loads(capsys.readouterr().out)
        assert [d["name"] for d in body["documents"]] == ["a.md", "sub/d.md"]
        assert body["documents"][0]["path"] == str(scenario_tree / "a.md")

    def test_filter_flags(self, scenario_tree, capsys):
        code = main([str(scenario_tree), "--include-ext", "txt", "md", "--exclude-dir", "sub"])
        assert code == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [".git/c.md", "a.md", "b.txt"]

    def test_invalid_root_exit_code(self, temp_dir, capsys):
        assert main([str(temp_dir / "missing")]) == 2
        assert "Invalid scan root" in capsys.readouterr().err

    def test_timeout_exit_code(self, scenario_tree):
        assert main([str(scenario_tree), "--timeout", "0"]) == 3

    def test_invalid_workers(self, scenario_tree):
        with pytest.raises(SystemExit):
            main([str(scenario_tree), "--workers", "0"])

    def test_empty_exclude_env_disables_pruning(self, scenario_tree, monkeypatch, capsys):
        monkeypatch.setenv("DOCSCAN_EXCLUDE_DIRS", "")
        assert main([str(scenario_tree)]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [".git/c.md", "a.md", "sub/d.md"]
