"""Tests for the tempest-views command line."""

import json
from pathlib import Path

import pytest

from tempest_views.cli import collect_php_files, main

HOME = "<?php\nuse function Tempest\\view as render;\nreturn render('home.view.php');\n"


@pytest.fixture
def project(tmp_path: Path):
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "Home.php").write_text(HOME)
    (tmp_path / "app" / "Plain.php").write_text("<?php echo 1;\n")
    (tmp_path / "vendor").mkdir()
    (tmp_path / "vendor" / "Lib.php").write_text(HOME)
    (tmp_path / "notes.txt").write_text("view('x')")
    return tmp_path


class TestCollectPhpFiles:
    def test_directory_scan_skips_ignored_and_non_php(self, project: Path):
        files = collect_php_files([project])

        assert [f.relative_to(project).as_posix() for f in files] == [
            "app/Home.php",
            "app/Plain.php",
        ]

    def test_no_ignore_includes_vendor(self, project: Path):
        files = collect_php_files([project], respect_ignore=False)

        assert project / "vendor" / "Lib.php" in files

    def test_explicit_file_and_duplicates(self, project: Path):
        home = project / "app" / "Home.php"

        assert collect_php_files([home, project / "app"]) == [home, project / "app" / "Plain.php"]

    def test_missing_path(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            collect_php_files([tmp_path / "missing"])


class TestMain:
    def test_no_command_is_usage_error(self):
        assert main([]) == 2

    def test_missing_path_is_usage_error(self, tmp_path: Path, capsys):
        pytest.importorskip("tree_sitter_php")

        assert main(["analyze", str(tmp_path / "missing.php")]) == 2
        assert "No such file or directory" in capsys.readouterr().err

    def test_analyze_prints_report(self, project: Path, capsys):
        pytest.importorskip("tree_sitter_php")

        assert main(["analyze", str(project)]) == 0

        out = capsys.readouterr().out
        assert "Found Tempest view call - name: 'render'" in out
        assert "Plain.php" not in out

    def test_all_reports_files_without_calls(self, project: Path, capsys):
        pytest.importorskip("tree_sitter_php")

        assert main(["analyze", "--all", str(project)]) == 0

        out = capsys.readouterr().out
        assert "Available Tempest view functions in " in out
        assert "Plain.php" in out

    def test_analyze_json(self, project: Path, capsys):
        pytest.importorskip("tree_sitter_php")

        assert main(["analyze", "--json", str(project / "app" / "Home.php")]) == 0

        data = json.loads(capsys.readouterr().out)
        (report,) = data["files"].values()
        assert report["calls"][0]["name"] == "render"
        assert report["imports"]["render"]["type"] == "aliased"

    def test_too_large_file_fails(self, project: Path, capsys, monkeypatch):
        pytest.importorskip("tree_sitter_php")
        monkeypatch.setattr("tempest_views.cli.MAX_FILE_SIZE", 10)

        assert main(["analyze", str(project / "app" / "Home.php")]) == 1
        assert "exceeds limit" in capsys.readouterr().err

    def test_stdio_flag_accepted(self):
        assert main(["--stdio"]) == 2

    def test_init_ignore(self, tmp_path: Path, capsys):
        assert main(["init-ignore", str(tmp_path)]) == 0
        assert main(["init-ignore", str(tmp_path)]) == 1
        assert (tmp_path / ".tempestignore").exists()
