"""Ignore file handling (.tempestignore + .gitignore).

Decides which PHP files a directory scan skips. Uses the pathspec library for
gitignore-compatible pattern matching.

Precedence (highest to lowest):
1. .tempestignore patterns (explicit include/exclude)
2. .gitignore patterns (via git check-ignore, if in git repo)
3. Default patterns (if no .tempestignore exists)
"""

from __future__ import annotations

import subprocess
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathspec import PathSpec

IGNORE_FILENAME = ".tempestignore"

DEFAULT_TEMPLATE = """\
# Tempest view analysis ignore patterns (gitignore syntax)
# Docs: https://git-scm.com/docs/gitignore

# Dependencies
vendor/
node_modules/

# Framework caches and build output
.tempest/
.cache/
dist/
build/

# IDE/editors
.idea/
.vscode/
*.swp
*~

# Version control
.git/
.hg/
.svn/

# Project-specific
# Add your custom patterns below
"""


@lru_cache(maxsize=128)
def is_git_repo(project_dir: str) -> bool:
    """Check if directory is inside a git repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--git-dir"],
            cwd=project_dir,
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False


def is_gitignored(file_path: str | Path, project_dir: str | Path) -> bool:
    """Check if a file is ignored by .gitignore using git check-ignore.

    Args:
        file_path: Path to the file to check
        project_dir: Root directory of the git repo

    Returns:
        True if file is gitignored, False otherwise
    """
    project_path = Path(project_dir)
    file_path = Path(file_path)

    try:
        rel_path = file_path.relative_to(project_path)
    except ValueError:
        rel_path = file_path

    try:
        result = subprocess.run(
            ["git", "check-ignore", "-q", str(rel_path)],
            cwd=str(project_path),
            capture_output=True,
            timeout=5,
        )
        # Return code 0 = ignored, 1 = not ignored, 128 = error
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False


def load_ignore_patterns(project_dir: str | Path) -> "PathSpec":
    """Load patterns from .tempestignore, or the defaults when it is absent."""
    import pathspec

    ignore_path = Path(project_dir) / IGNORE_FILENAME

    if ignore_path.exists():
        patterns = ignore_path.read_text().splitlines()
    else:
        patterns = DEFAULT_TEMPLATE.splitlines()

    return pathspec.GitIgnoreSpec.from_lines(patterns)


def ensure_ignore_file(project_dir: str | Path) -> tuple[bool, str]:
    """Create .tempestignore with defaults if it does not exist.

    Returns:
        Tuple of (created: bool, message: str)
    """
    project_path = Path(project_dir)

    if not project_path.exists():
        return False, f"Project directory does not exist: {project_path}"

    ignore_path = project_path / IGNORE_FILENAME
    if ignore_path.exists():
        return False, f"{IGNORE_FILENAME} already exists at {ignore_path}"

    ignore_path.write_text(DEFAULT_TEMPLATE)
    return True, f"Created {ignore_path} (vendor/, node_modules/, caches and VCS dirs ignored)"


def should_ignore(
    file_path: str | Path,
    project_dir: str | Path,
    spec: "PathSpec | None" = None,
    use_gitignore: bool = True,
) -> bool:
    """Check if a file should be skipped.

    .gitignore provides the baseline (if in a git repo); .tempestignore can add
    ignores or un-ignore files via ! patterns.
    """
    if spec is None:
        spec = load_ignore_patterns(project_dir)

    project_path = Path(project_dir)
    file_path = Path(file_path)

    try:
        rel_path = file_path.relative_to(project_path)
    except ValueError:
        rel_path = file_path

    rel_path_str = rel_path.as_posix()
    ignored = spec.match_file(rel_path_str)

    if _has_negation_for_file(spec, rel_path_str):
        return ignored

    if ignored:
        return True

    if use_gitignore and is_git_repo(str(project_path)):
        return is_gitignored(file_path, project_path)

    return False


def _has_negation_for_file(spec: "PathSpec", rel_path: str) -> bool:
    """True if a ! pattern in the PathSpec matches this file."""
    for pattern in spec.patterns:
        # include is False only for negated patterns; None for comments/blanks
        if pattern.include is False and pattern.match_file(rel_path) is not None:
            return True
    return False


def filter_files(
    files: list[Path],
    project_dir: str | Path,
    respect_ignore: bool = True,
    use_gitignore: bool = True,
) -> list[Path]:
    """Drop files matched by ignore rules; a no-op when respect_ignore is False."""
    if not respect_ignore:
        return files

    spec = load_ignore_patterns(project_dir)
    return [f for f in files if not should_ignore(f, project_dir, spec, use_gitignore)]
