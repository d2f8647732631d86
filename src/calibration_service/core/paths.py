from pathlib import Path

PYPROJECT_FILENAME = "pyproject.toml"


class ProjectRootNotFound(Exception):
    pass


def get_project_root_dir() -> Path:
    """Nearest ancestor of this package holding a pyproject.toml"""
    for directory in Path(__file__).resolve().parents:
        if (directory / PYPROJECT_FILENAME).is_file():
            return directory
    raise ProjectRootNotFound
