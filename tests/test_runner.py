"""Tests for ghrelease.runner ensuring orchestration, failure isolation, and exit codes.

Run with:
    pytest tests/test_runner.py --maxfail=1 -v --cov=ghrelease.runner --cov-report=term-missing
"""

from unittest.mock import MagicMock, patch

import pytest

from ghrelease import runner
from ghrelease.config import RunConfig
from ghrelease.errors import ConfigurationError, GitHubAPIError, TransportError
from ghrelease.http_client import GitHubClient


def _settings(**overrides) -> RunConfig:
    values = dict(
        owner="acme",
        source="main",
        fallback_branch="master",
        support_branch_name="",
        tag="v1.1",
        previous_tag="",
        release_name="Duke",
        pre_release=True,
        timeout=5,
        projects=("a", "b", "c"),
    )
    values.update(overrides)
    return RunConfig(**values)


def _resp(status, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else {}
    resp.text = str(payload)
    return resp


def test_end_to_end_tag_source_creates_support_branch_then_release():
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = [
        _resp(404, {"message": "Branch not found"}),
        _resp(200, {"tag_name": "v1.0"}),
        _resp(200, {"ref": "refs/tags/v1.0", "object": {"sha": "abc123", "type": "commit"}}),
        _resp(201, {"ref": "refs/heads/support/v1.x", "object": {"sha": "abc123"}}),
        _resp(201, {"id": 42}),
    ]
    client = GitHubClient("token", "acme", timeout=5, base_url="https://api.github.com", session=session)
    settings = _settings(source="v1.0", support_branch_name="support/v1.x", projects=("widget",))

    result = runner.run(client, settings)

    assert result.released == {"widget": "support/v1.x"}
    base = "https://api.github.com/repos/acme/widget"
    calls = [(c.args, c.kwargs.get("json")) for c in session.request.call_args_list]
    assert calls[0] == (("GET", f"{base}/branches/v1.0"), None)
    assert calls[1] == (("GET", f"{base}/releases/tags/v1.0"), None)
    assert calls[2] == (("GET", f"{base}/git/refs/tags/v1.0"), None)
    assert calls[3] == (("POST", f"{base}/git/refs"), {"ref": "refs/heads/support/v1.x", "sha": "abc123"})
    assert calls[4][0] == ("POST", f"{base}/releases")
    assert calls[4][1]["target_commitish"] == "support/v1.x"
    assert calls[4][1]["tag_name"] == "v1.1"
    assert len(calls) == 5


@patch("ghrelease.runner.file_release", return_value={"id": 1})
@patch("ghrelease.runner.resolve_target_branch", return_value="main")
def test_process_project_resolves_then_files(mock_resolve, mock_file):
    client = MagicMock()
    outcome = runner.process_project(client, _settings(), "a")
    assert outcome == {"project": "a", "branch": "main", "release": {"id": 1}}
    mock_file.assert_called_once_with(client, mock_resolve.call_args.args[1], "a", "main")


def test_run_isolates_project_failures(monkeypatch, capsys):
    def fake_process(client, settings, project):
        if project == "b":
            raise TransportError("timeout")
        return {"project": project, "branch": "main", "release": {}}

    monkeypatch.setattr(runner, "process_project", fake_process)
    result = runner.run(MagicMock(), _settings())
    assert list(result.released) == ["a", "c"]
    assert list(result.failed) == ["b"]
    assert result.ok is False
    assert "[error] b: timeout" in capsys.readouterr().out


def test_run_fail_fast_skips_remaining(monkeypatch):
    def fake_process(client, settings, project):
        if project == "a":
            raise GitHubAPIError(500, "url")
        return {"project": project, "branch": "main", "release": {}}

    monkeypatch.setattr(runner, "process_project", fake_process)
    result = runner.run(MagicMock(), _settings(fail_fast=True))
    assert result.released == {}
    assert list(result.failed) == ["a"]
    assert result.skipped == ["b", "c"]


def test_run_aborts_on_configuration_error(monkeypatch):
    seen = []

    def fake_process(client, settings, project):
        seen.append(project)
        if project == "b":
            raise ConfigurationError("support branch required")
        return {"project": project, "branch": "main", "release": {}}

    monkeypatch.setattr(runner, "process_project", fake_process)
    with pytest.raises(ConfigurationError) as excinfo:
        runner.run(MagicMock(), _settings())
    assert seen == ["a", "b"]
    partial = excinfo.value.result
    assert partial.released == {"a": "main"}
    assert list(partial.failed) == ["b"]
    assert partial.skipped == ["c"]


def test_main_exits_when_token_missing(capsys):
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--tag", "v1.1", "widget"], environ={})
    assert excinfo.value.code == 1
    assert "OAUTH_TOKEN" in capsys.readouterr().err


def test_main_prints_numbered_errors_and_usage(capsys):
    with pytest.raises(SystemExit) as excinfo:
        runner.main([], environ={"OAUTH_TOKEN": "t"})
    assert excinfo.value.code == 3
    err = capsys.readouterr().err
    assert " 1 : tag parameter is mandatory" in err
    assert " 2 : At least provide one project" in err
    assert "usage:" in err


@patch("ghrelease.runner.run")
@patch("ghrelease.runner.GitHubClient")
@patch("ghrelease.runner.fetch_random_name", return_value="")
def test_main_wires_settings_and_release_name(mock_fetch, mock_client_cls, mock_run):
    mock_run.return_value = runner.BatchResult(released={"widget": "main"})
    runner.main(["--owner", "acme", "--tag", "v1.1", "--timeout", "8", "widget"], environ={"OAUTH_TOKEN": "t"})

    mock_client_cls.assert_called_once_with("t", "acme", timeout=8)
    settings = mock_run.call_args.args[1]
    assert settings.release_name == "Release of v1.1"
    assert settings.projects == ("widget",)
    mock_client_cls.return_value.close.assert_called_once()


@patch("ghrelease.runner.run")
@patch("ghrelease.runner.GitHubClient")
def test_main_exits_non_zero_when_a_project_failed(mock_client_cls, mock_run, capsys):
    mock_run.return_value = runner.BatchResult(released={"a": "main"}, failed={"b": "HTTP 500"})
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--tag", "v1.1", "--release-name", "Duke", "a", "b"], environ={"OAUTH_TOKEN": "t"})
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "[failed] b: HTTP 500" in out


@patch("ghrelease.runner.run", side_effect=ConfigurationError("v1.0 is a tag"))
@patch("ghrelease.runner.GitHubClient")
def test_main_reports_configuration_error_during_run(mock_client_cls, mock_run, capsys):
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--tag", "v1.1", "--release-name", "Duke", "a"], environ={"OAUTH_TOKEN": "t"})
    assert excinfo.value.code == 1
    assert "v1.0 is a tag" in capsys.readouterr().err
    mock_client_cls.return_value.close.assert_called_once()


@patch("ghrelease.runner.GitHubClient")
def test_main_prints_partial_summary_when_configuration_error_aborts(mock_client_cls, monkeypatch, capsys):
    def fake_process(client, settings, project):
        if project == "b":
            raise ConfigurationError("v1.0 is a tag")
        return {"project": project, "branch": "main", "release": {}}

    monkeypatch.setattr(runner, "process_project", fake_process)
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--tag", "v1.1", "--release-name", "Duke", "a", "b", "c"], environ={"OAUTH_TOKEN": "t"})
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "[ok] a on main" in out
    assert "[skipped] c" in out
