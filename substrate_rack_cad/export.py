"""Export parts to STL and STEP files."""

from pathlib import Path

import build123d as bd
from loguru import logger


def find_build_dir(stem: str) -> Path:
    """Get `<repo root>/build/<stem>`, creating it if needed.

    Falls back to the current directory when not inside a git checkout.
    """
    import git

    try:
        repo_dir = git.Repo(Path.cwd(), search_parent_directories=True).working_tree_dir
    except git.InvalidGitRepositoryError:
        logger.info("Not in a git repository. Using the current directory.")
        repo_dir = None

    export_folder = Path(repo_dir or Path.cwd()) / "build" / stem
    export_folder.mkdir(exist_ok=True, parents=True)
    return export_folder


def export_parts(parts: dict[str, bd.Shape], export_folder: Path) -> list[Path]:
    """Export each part as `<name>.stl` and `<name>.step` into `export_folder`."""
    logger.info(f"Saving {len(parts)} CAD model(s) to {export_folder}")

    export_folder.mkdir(exist_ok=True, parents=True)

    written: list[Path] = []
    for name, part in parts.items():
        stl_path = export_folder / f"{name}.stl"
        step_path = export_folder / f"{name}.step"

        bd.export_stl(part, str(stl_path))
        bd.export_step(part, str(step_path))

        written += [stl_path, step_path]

    return written
