"""Tests for the tmpl command line."""
import pytest
import requests
from typer.testing import CliRunner

from tmpl.cli import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch, tmpl_config):
    """Empty project directory used as the current directory."""
    path = tmp_path / "project"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


def install_local(tmpl_config, name, text):
    path = tmpl_config.templates_dir / name / "file.tmpl"
    path.parent.mkdir(parents=True)
    path.write_text(text)
    return path


class TestTemplateCommands:
    """Test install, remove and list."""

    def test_list_empty(self, project):
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No templates installed" in result.stdout

    def test_list_installed(self, project, tmpl_config):
        install_local(tmpl_config, "web", "")
        install_local(tmpl_config, "api", "")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert result.stdout.index("api") < result.stdout.index("web")

    def test_install_from_registry(self, project, tmpl_config, monkeypatch):
        class Response:
            ok = True
            status_code = 200
            headers = {"content-length": "11"}

            def iter_content(self, chunk_size=1):
                yield b"mkdir: src\n"

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr(requests, "get", lambda url, **kwargs: Response())

        result = runner.invoke(app, ["install", "python-cli"])

        assert result.exit_code == 0
        assert "downloaded" in result.stdout
        assert (tmpl_config.templates_dir / "python-cli" / "file.tmpl").read_text() == "mkdir: src\n"

    def test_install_rejects_empty_name(self, project):
        result = runner.invoke(app, ["install", "  "])

        assert result.exit_code == 1
        assert "cannot be empty" in result.stdout

    def test_install_current_directory_single_file(self, project, tmpl_config):
        (project / "starter.tmpl").write_text("mkdir: app\n")

        result = runner.invoke(app, ["install", "."], input="\n")

        assert result.exit_code == 0
        assert "Template copied as 'starter'" in result.stdout
        assert (tmpl_config.templates_dir / "starter" / "file.tmpl").read_text() == "mkdir: app\n"

    def test_install_current_directory_selects_file(self, project, tmpl_config):
        (project / "a.tmpl").write_text("mkdir: a\n")
        (project / "b.tmpl").write_text("mkdir: b\n")

        result = runner.invoke(app, ["install", "."], input="2\nchosen\n")

        assert result.exit_code == 0
        assert (tmpl_config.templates_dir / "chosen" / "file.tmpl").read_text() == "mkdir: b\n"

    def test_install_current_directory_without_templates(self, project):
        result = runner.invoke(app, ["install", "."])

        assert result.exit_code == 1
        assert "No .tmpl files found" in result.stdout

    def test_remove(self, project, tmpl_config):
        install_local(tmpl_config, "old", "")

        result = runner.invoke(app, ["remove", "old"])

        assert result.exit_code == 0
        assert "removed" in result.stdout
        assert not (tmpl_config.templates_dir / "old").exists()

    def test_remove_missing(self, project):
        result = runner.invoke(app, ["remove", "ghost"])

        assert result.exit_code == 1
        assert "does not exist" in result.stdout


class TestRunCommand:
    """Test executing templates from the command line."""

    def test_run_installed_template(self, project, tmpl_config):
        install_local(tmpl_config, "starter", "\n".join([
            "var: name = demo",
            "mkdir: $name/src",
            r"write_file($name/README.md): # $name\n",
        ]))

        result = runner.invoke(app, ["run", "starter"])

        assert result.exit_code == 0
        assert "applied" in result.stdout
        assert (project / "demo" / "src").is_dir()
        assert (project / "demo" / "README.md").read_text() == "# demo\n"

    def test_run_prompts_for_input(self, project, tmpl_config):
        install_local(tmpl_config, "ask", "var: app = input(App name, fallback)\nmkdir: $app")

        result = runner.invoke(app, ["run", "ask"], input="rocket\n")

        assert result.exit_code == 0
        assert (project / "rocket").is_dir()

    def test_run_file_option(self, project, tmp_path):
        template = tmp_path / "local.tmpl"
        template.write_text("create_file: from_file.txt")

        result = runner.invoke(app, ["run", "--file", str(template)])

        assert result.exit_code == 0
        assert (project / "from_file.txt").is_file()

    def test_run_file_with_invalid_utf8(self, project, tmp_path):
        template = tmp_path / "bad.tmpl"
        template.write_bytes(b"mkdir: \xff\xfe")

        result = runner.invoke(app, ["run", "--file", str(template)])

        assert result.exit_code == 1
        assert "not valid UTF-8" in result.stdout
        assert list(project.iterdir()) == []

    def test_run_reports_problems(self, project, tmpl_config):
        install_local(tmpl_config, "messy", "bogus line\nmkdir: ok")

        result = runner.invoke(app, ["run", "messy"])

        assert result.exit_code == 0
        assert "1 problem(s)" in result.stdout
        assert (project / "ok").is_dir()

    def test_run_missing_template(self, project):
        result = runner.invoke(app, ["run", "ghost"])

        assert result.exit_code == 1
        assert "not installed" in result.stdout

    def test_run_without_name(self, project):
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "No template name provided" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "tmpl v" in result.stdout
