import os
from pathlib import Path
from unittest.mock import patch

from utils.env import _find_project_root, load_project_dotenv

# --- Test _find_project_root --- #


def test_find_project_root_found_in_start(tmp_path: Path):
    """Test finding pyproject.toml in the starting directory."""
    (tmp_path / "pyproject.toml").touch()
    assert _find_project_root(start=tmp_path) == tmp_path


def test_find_project_root_found_levels_up(tmp_path: Path):
    """Test finding pyproject.toml several levels up."""
    (tmp_path / "pyproject.toml").touch()
    start_dir = tmp_path / "engine" / "sub"
    start_dir.mkdir(parents=True)
    assert _find_project_root(start=start_dir) == tmp_path


# --- Test load_project_dotenv --- #


@patch("utils.env.load_dotenv")
@patch("utils.env._find_project_root")
def test_load_dotenv_called_when_env_file_exists(mock_find_root, mock_load_dotenv, tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.touch()
    mock_find_root.return_value = tmp_path

    assert load_project_dotenv() == env_file
    mock_load_dotenv.assert_called_once_with(dotenv_path=env_file, override=False)


@patch("utils.env.load_dotenv")
@patch("utils.env._find_project_root")
def test_load_dotenv_skipped_without_env_file(mock_find_root, mock_load_dotenv, tmp_path: Path):
    mock_find_root.return_value = tmp_path

    assert load_project_dotenv() is None
    mock_load_dotenv.assert_not_called()


@patch("utils.env._find_project_root")
def test_existing_variables_win_unless_override(mock_find_root, tmp_path: Path, monkeypatch):
    """RENTAL_* values already in the environment are not replaced by .env by default."""
    (tmp_path / ".env").write_text("RENTAL_BUFFER_DAYS=5\nRENTAL_LOG_LEVEL=DEBUG\n")
    mock_find_root.return_value = tmp_path
    monkeypatch.setenv("RENTAL_BUFFER_DAYS", "1")
    monkeypatch.delenv("RENTAL_LOG_LEVEL", raising=False)

    load_project_dotenv()
    assert os.environ["RENTAL_BUFFER_DAYS"] == "1"
    assert os.environ["RENTAL_LOG_LEVEL"] == "DEBUG"

    load_project_dotenv(override=True)
    assert os.environ["RENTAL_BUFFER_DAYS"] == "5"
    # monkeypatch restores RENTAL_BUFFER_DAYS; drop the one .env introduced
    monkeypatch.delenv("RENTAL_LOG_LEVEL", raising=False)
