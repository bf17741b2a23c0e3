from pathlib import Path
import subprocess

import pytest

from microfolio.config import DEFAULT_CONFIG
from microfolio.errors import MicrofolioError, ProjectError
from microfolio.project import create_project, find_build_output, is_project


def _which_all(monkeypatch):
    monkeypatch.setattr("microfolio.executable_utils.shutil.which", lambda name: f"/usr/bin/{name}")


def _fake_run(calls, fail_on=None, stderr=""):
    def fake_run(cmd, cwd=None, check=None, capture_output=None, text=None):
        calls.append((list(cmd), cwd, capture_output))
        if cmd[1] == "clone" and fail_on != "clone":
            dest = Path(cmd[-1])
            (dest / ".git" / "objects").mkdir(parents=True)
            (dest / "content" / "projects" / "sample").mkdir(parents=True)
            (dest / "content" / "projects" / "sample" / "index.md").write_text("# Sample", encoding="utf-8")
            (dest / "static").mkdir()
            (dest / "package.json").write_text("{}", encoding="utf-8")
            (dest / ".gitignore").write_text("node_modules\n", encoding="utf-8")
        returncode = 128 if cmd[1] == fail_on else 0
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)

    return fake_run


def test_is_project(tmp_path):
    assert not is_project(tmp_path)
    (tmp_path / "package.json").mkdir()
    assert not is_project(tmp_path)  # a directory is not a marker file
    (tmp_path / "site.json").write_text("{}", encoding="utf-8")
    assert is_project(tmp_path, marker_file="site.json")


def test_find_build_output_prefers_first_candidate(tmp_path):
    assert find_build_output(tmp_path) is None
    (tmp_path / "build").mkdir()
    assert find_build_output(tmp_path) == tmp_path / "build"
    (tmp_path / "dist").mkdir()
    assert find_build_output(tmp_path) == tmp_path / "dist"
    assert find_build_output(tmp_path, ["out"]) is None


def test_find_build_output_ignores_files(tmp_path):
    (tmp_path / "dist").write_text("not a directory", encoding="utf-8")
    assert find_build_output(tmp_path) is None


def test_create_project_copies_template_without_git(tmp_path, monkeypatch):
    calls = []
    _which_all(monkeypatch)
    monkeypatch.setattr("microfolio.project.subprocess.run", _fake_run(calls))
    target = tmp_path / "portfolio"

    create_project(target, DEFAULT_CONFIG.copy())

    assert (target / "package.json").is_file()
    assert (target / ".gitignore").is_file()
    assert (target / "content" / "projects" / "sample" / "index.md").read_text(encoding="utf-8") == "# Sample"
    assert (target / "static").is_dir()
    assert not (target / ".git" / "objects").exists()

    argv = [cmd for cmd, _, _ in calls]
    assert argv[0][:2] == ["/usr/bin/git", "clone"]
    assert DEFAULT_CONFIG["template_repo"] in argv[0]
    assert argv[1] == ["/usr/bin/git", "init"]
    assert argv[2] == ["/usr/bin/git", "add", "."]
    assert argv[3] == ["/usr/bin/git", "commit", "-m", "Initial commit - microfolio project"]
    assert argv[4] == ["/usr/bin/pnpm", "install"]
    assert all(cwd == target for _, cwd, _ in calls)
    # Install output is shown to the user; git output is captured.
    assert calls[4][2] is False
    assert calls[1][2] is True


def test_create_project_without_install_or_git(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr("microfolio.executable_utils.shutil.which", lambda name: "/usr/bin/git" if name == "git" else None)
    monkeypatch.setattr("microfolio.project.subprocess.run", _fake_run(calls))

    create_project(tmp_path / "p", DEFAULT_CONFIG.copy(), install=False, git_init=False)

    assert [cmd[1] for cmd, _, _ in calls] == ["clone"]


def test_create_project_rejects_existing_target(tmp_path, monkeypatch):
    calls = []
    _which_all(monkeypatch)
    monkeypatch.setattr("microfolio.project.subprocess.run", _fake_run(calls))

    with pytest.raises(ProjectError, match="already exists"):
        create_project(tmp_path, DEFAULT_CONFIG.copy())
    assert calls == []


def test_create_project_missing_git_creates_nothing(tmp_path, monkeypatch):
    monkeypatch.setattr("microfolio.executable_utils.shutil.which", lambda name: None)
    target = tmp_path / "p"

    with pytest.raises(MicrofolioError, match="'git' was not found"):
        create_project(target, DEFAULT_CONFIG.copy())
    assert not target.exists()


def test_create_project_clone_failure(tmp_path, monkeypatch):
    calls = []
    _which_all(monkeypatch)
    monkeypatch.setattr(
        "microfolio.project.subprocess.run",
        _fake_run(calls, fail_on="clone", stderr="fatal: repository not found\n"),
    )
    target = tmp_path / "p"

    with pytest.raises(ProjectError) as excinfo:
        create_project(target, DEFAULT_CONFIG.copy(), template="https://example.com/missing.git")
    assert "https://example.com/missing.git" in excinfo.value.message
    assert excinfo.value.hint == "fatal: repository not found"
    # No rollback: the directory created before the failure stays.
    assert target.is_dir()
    assert len(calls) == 1


def test_create_project_commit_failure(tmp_path, monkeypatch):
    calls = []
    _which_all(monkeypatch)
    monkeypatch.setattr(
        "microfolio.project.subprocess.run",
        _fake_run(calls, fail_on="commit", stderr="Please tell me who you are."),
    )

    with pytest.raises(ProjectError, match="git commit failed"):
        create_project(tmp_path / "p", DEFAULT_CONFIG.copy())
    assert [cmd[1] for cmd, _, _ in calls] == ["clone", "init", "add", "commit"]


def test_create_project_install_failure(tmp_path, monkeypatch):
    calls = []
    _which_all(monkeypatch)
    monkeypatch.setattr("microfolio.project.subprocess.run", _fake_run(calls, fail_on="install"))
    target = tmp_path / "p"

    with pytest.raises(ProjectError) as excinfo:
        create_project(target, DEFAULT_CONFIG.copy())
    assert "exit code 128" in excinfo.value.message
    assert "pnpm install" in excinfo.value.hint
    assert (target / "package.json").exists()


def test_project_error_formats_hint():
    err = ProjectError("Something broke", hint="Try again")
    assert err.format_message() == "Something broke\nTry again"
    assert err.exit_code == 1
    assert MicrofolioError("plain").format_message() == "plain"
