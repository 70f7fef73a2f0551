"""
Tests for the pmake command line.
"""

from pmake.cli import main

from tests.infrastructure import read, run_cli, tree


def test_generates_project(templates, tmp_path, capsys):
    out = tmp_path / "out"
    rc = main([
        "-n", "demo",
        "-s", "20",
        "-f", "tests,imgui",
        "--templates", str(templates),
        "-o", str(out),
    ])

    assert rc == 0
    assert "CMakeLists.txt" in tree(out / "demo")
    assert "set(CMAKE_CXX_STANDARD 20)" in read(out / "demo" / "CMakeLists.txt")

    summary = capsys.readouterr().out
    assert "| name.......: demo" in summary
    assert "| language...: c++ (20)" in summary
    assert "| kind.......: executable (console)" in summary
    assert "| features...: tests,imgui" in summary


def test_summary_without_features(templates, tmp_path, capsys):
    rc = main(["-n", "lib", "-k", "library", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 0
    summary = capsys.readouterr().out
    assert "| features" not in summary
    assert "| kind.......: library (static)" in summary


def test_mode_flag(templates, tmp_path):
    rc = main(["-n", "lib", "-k", "library", "--header-only", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 0
    assert read(tmp_path / "lib" / "README.md") == "# lib (header-only)\n"


def test_mode_option_selects_catalog_mode(templates, tmp_path, capsys):
    rc = main(["-n", "demo", "-m", "gui", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 0
    assert "target_link_libraries(demo PRIVATE imgui glfw)" in read(tmp_path / "demo" / "CMakeLists.txt")

    summary = capsys.readouterr().out
    assert "| kind.......: executable (gui)" in summary
    assert "| features...: imgui" in summary


def test_empty_features_override_required(templates, tmp_path, capsys):
    rc = main(["-n", "demo", "--mode", "gui", "-f", "", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 0
    assert read(tmp_path / "demo" / "CMakeLists.txt") == "project(demo LANGUAGES CXX)\n"
    assert "| features" not in capsys.readouterr().out


def test_unknown_mode_option(templates, tmp_path, capsys):
    rc = main(["-n", "demo", "-m", "tui", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 2
    assert 'The mode "tui" for the kind "executable"' in capsys.readouterr().err


def test_destination_file_exit_code(templates, tmp_path, capsys):
    (tmp_path / "demo").write_text("x", encoding="utf-8")

    rc = main(["-n", "demo", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 2
    assert "exists and is not a directory" in capsys.readouterr().err


def test_user_error_exit_code(templates, tmp_path, capsys):
    rc = main(["-n", "demo", "-l", "rust", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 2
    err = capsys.readouterr().err
    assert 'The language "rust"' in err
    assert not (tmp_path / "demo").exists()


def test_missing_templates_folder(tmp_path, capsys):
    rc = main(["-n", "demo", "--templates", str(tmp_path / "none"), "-o", str(tmp_path)])

    assert rc == 2
    assert "Couldn't find templates folder" in capsys.readouterr().err


def test_template_error_is_reported(templates, tmp_path, capsys):
    (templates / "c++" / "executable" / "console" / "bad.txt").write_text("{{ ENV:OWNER }}", encoding="utf-8")

    rc = main(["-n", "demo", "--templates", str(templates), "-o", str(tmp_path)])

    assert rc == 2
    assert "bad.txt:1:1: undefined variable 'ENV:OWNER'" in capsys.readouterr().err


def test_subprocess_uses_env_templates(templates, tmp_path):
    cp = run_cli(tmp_path, "-n", "demo", "-k", "library", templates=templates)

    assert cp.returncode == 0, cp.stderr
    assert read(tmp_path / "demo" / "README.md") == "# demo\n\nStatic library.\n"
    assert "output.....: " in cp.stdout


def test_version(tmp_path):
    cp = run_cli(tmp_path, "--version")

    assert cp.returncode == 0
    assert cp.stdout.startswith("pmake ")
