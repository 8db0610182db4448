"""All-or-nothing application of merged files to a destination tree.

Files are staged in a temporary directory inside the destination root, so
that the final renames stay on one filesystem. Nothing in the destination is
touched until every file has been staged. Files being replaced are moved into
the staging directory first; if any rename fails, they are moved back and the
files created by the run are removed.

Precondition: one coordinator per destination at a time. Concurrent runs
against the same tree must be serialized by the caller.
"""

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Sequence

from ..errors import WriteError
from ..logs import get_logger
from ..regions.merge import MergeResult
from .summary import Summary

logger = get_logger(__name__)

STAGING_PREFIX = ".modelgen-staging-"
ENCODING = "utf-8"


@dataclass
class _Staged:
    path: str
    dest: Path
    staged: Path


def read_text(path: Path) -> str | None:
    """Read a file exactly as stored, or None if it does not exist.

    Line endings are not translated, so what was extracted can be written
    back byte for byte.
    """
    try:
        with open(path, "r", encoding=ENCODING, newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None


def _write_staged(path: Path, text: str) -> None:
    with open(path, "w", encoding=ENCODING, newline="") as f:
        f.write(text)


class WriteCoordinator:
    """Applies a batch of merged files to a destination root."""

    def __init__(self, root: str | Path, dry_run: bool = False):
        """Initialize the coordinator.

        Args:
            root: The destination root directory.
            dry_run: Report what would change without touching the tree.
        """
        self.root = Path(root)
        self.dry_run = dry_run

    def destination(self, path: str) -> Path:
        """Resolve a relative target path inside the root.

        Raises:
            WriteError: If the path is absolute or escapes the root.
        """
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise WriteError(f"Target path escapes the destination: {path}", path)
        return self.root.joinpath(*rel.parts)

    def apply(self, results: Sequence[tuple[str, MergeResult]]) -> Summary:
        """Write every merged file, or none of them.

        Args:
            results: ``(relative path, merge result)`` pairs in plan order.

        Returns:
            Summary of unchanged and changed files and recovered orphans.

        Raises:
            WriteError: If staging or committing fails. The destination tree
                is left as it was.
        """
        summary = Summary(dry_run=self.dry_run)
        pending: list[tuple[str, Path, str]] = []

        for path, result in results:
            dest = self.destination(path)
            if result.orphans:
                summary.orphans[path] = list(result.orphans)
                summary.orphans_recovered += len(result.orphans)
            for message in result.diagnostics:
                logger.debug("%s: %s", path, message)
            try:
                current = read_text(dest)
            except (OSError, UnicodeDecodeError) as e:
                raise WriteError(f"Cannot read {dest}: {e}", path) from e
            if current is not None and result.missing:
                summary.missing[path] = list(result.missing)
            if current == result.text:
                summary.files_unchanged += 1
                summary.unchanged.append(path)
            else:
                summary.files_changed += 1
                summary.written.append(path)
                pending.append((path, dest, result.text))

        if self.dry_run or not pending:
            return summary

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(dir=self.root, prefix=STAGING_PREFIX) as tmp:
                staging = Path(tmp)
                staged = self._stage(pending, staging)
                self._commit(staged, staging)
        except WriteError:
            raise
        except OSError as e:
            raise WriteError(f"Cannot write generated files: {e}", getattr(e, "filename", None)) from e

        logger.debug(
            "Committed %d changed file(s), %d unchanged",
            summary.files_changed,
            summary.files_unchanged,
        )
        return summary

    def _stage(self, pending: list[tuple[str, Path, str]], staging: Path) -> list[_Staged]:
        new_dir = staging / "new"
        new_dir.mkdir()
        staged: list[_Staged] = []
        for i, (path, dest, text) in enumerate(pending):
            staged_path = new_dir / str(i)
            try:
                _write_staged(staged_path, text)
                if dest.exists():
                    shutil.copymode(dest, staged_path)
            except OSError as e:
                raise WriteError(f"Cannot stage {path}: {e}", path) from e
            staged.append(_Staged(path=path, dest=dest, staged=staged_path))
        return staged

    def _commit(self, staged: list[_Staged], staging: Path) -> None:
        backup_dir = staging / "backup"
        backup_dir.mkdir()
        done: list[tuple[Path, Path | None]] = []
        created_dirs: list[Path] = []

        try:
            for i, item in enumerate(staged):
                created_dirs.extend(_missing_parents(item.dest.parent, self.root))
                item.dest.parent.mkdir(parents=True, exist_ok=True)
                if item.dest.exists():
                    backup = backup_dir / str(i)
                    os.replace(item.dest, backup)
                    done.append((item.dest, backup))
                else:
                    done.append((item.dest, None))
                self._commit_one(item.staged, item.dest)
        except BaseException as e:
            self._rollback(done, created_dirs)
            if isinstance(e, OSError):
                raise WriteError(f"Cannot commit {item.path}: {e}", item.path) from e
            raise

    def _commit_one(self, staged: Path, dest: Path) -> None:
        os.replace(staged, dest)

    def _rollback(self, done: list[tuple[Path, Path | None]], created_dirs: list[Path]) -> None:
        errors: list[str] = []
        for dest, backup in reversed(done):
            try:
                if backup is None:
                    dest.unlink(missing_ok=True)
                else:
                    os.replace(backup, dest)
            except OSError as e:
                errors.append(f"{dest}: {e}")
        for directory in reversed(created_dirs):
            try:
                directory.rmdir()
            except OSError:
                pass  # Not empty: something else lives there now
        if errors:
            raise WriteError("Rollback incomplete: " + "; ".join(errors))


def _missing_parents(directory: Path, root: Path) -> list[Path]:
    """Directories between root and ``directory`` that do not exist yet, outermost first."""
    missing: list[Path] = []
    while directory != root and not directory.exists():
        missing.append(directory)
        directory = directory.parent
    return list(reversed(missing))
