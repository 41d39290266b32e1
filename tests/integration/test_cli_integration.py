from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from textify import cli


@pytest.mark.integration
def test_main_restricts_output_to_git_tracked_files(
    tmp_path: Path,
    mocker: MockerFixture,
) -> None:
    repo = tmp_path / "repo"
    (repo / "src").mkdir(parents=True)
    (repo / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")
    (repo / "scratch.txt").write_text("local notes\n", encoding="utf-8")

    tracked = mocker.patch.object(cli, "git_tracked_files", return_value={"src/app.py"})
    output = tmp_path / "out.txt"

    exit_code = cli.main(["--path", str(repo), "--output", str(output), "--no-progress"])

    assert exit_code == 0
    tracked.assert_called_once_with(repo.resolve())
    content = output.read_text(encoding="utf-8")
    assert "File: src/app.py" in content
    assert "scratch.txt" not in content


@pytest.mark.integration
def test_main_collects_everything_when_git_is_unavailable(
    tmp_path: Path,
    mocker: MockerFixture,
) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "notes.md").write_text("# notes\n", encoding="utf-8")

    mocker.patch.object(cli, "git_tracked_files", return_value=None)
    output = tmp_path / "out.txt"

    exit_code = cli.main(["--path", str(repo), "--output", str(output), "--no-progress"])

    assert exit_code == 0
    assert "File: notes.md" in output.read_text(encoding="utf-8")
