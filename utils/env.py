from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

"""Environment helper utilities.

Loads a `.env` file from the project root so that engine settings defined
there (``RENTAL_BUFFER_DAYS``, ``RENTAL_LOG_LEVEL``, ...) become available
via ``os.getenv`` before `RentalEngineConfig.from_env` reads them.
"""

__all__ = ["load_project_dotenv"]


def _find_project_root(start: Path | None = None) -> Path:
    """Walk upwards until a directory containing `pyproject.toml` is found."""
    current = start or Path(__file__).resolve().parent
    for _ in range(10):  # safety break
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv(override: bool = False) -> Path | None:
    """
    Load variables from the project-level `.env` if present.
    Returns the path that was loaded, or None.
    """
    dotenv_path = _find_project_root() / ".env"
    if not dotenv_path.exists():
        return None
    load_dotenv(dotenv_path=dotenv_path, override=override)
    return dotenv_path
