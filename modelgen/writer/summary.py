"""Summary of one generation run."""

from dataclasses import dataclass, field

from ..regions.errors import RegionError


@dataclass
class FileFailure:
    """A target skipped because its existing file has malformed regions."""

    path: str
    error: RegionError

    @property
    def line(self) -> int | None:
        return self.error.line

    def __str__(self) -> str:
        return str(self.error)


@dataclass
class Summary:
    """Counts and paths reported after applying a plan."""

    files_unchanged: int = 0
    files_changed: int = 0
    orphans_recovered: int = 0
    malformed_regions: int = 0
    written: list[str] = field(default_factory=list)  # Paths with a content delta
    unchanged: list[str] = field(default_factory=list)
    orphans: dict[str, list[str]] = field(default_factory=dict)  # Path -> region keys
    missing: dict[str, list[str]] = field(default_factory=dict)  # Regions new to an existing file
    failures: list[FileFailure] = field(default_factory=list)
    stale: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def files_written(self) -> int:
        """Files that reflect the new model, changed or not."""
        return self.files_unchanged + self.files_changed

    @property
    def has_failures(self) -> bool:
        """Check whether any target was skipped."""
        return bool(self.failures)

    def record_failure(self, failure: FileFailure) -> None:
        """Add a skipped target."""
        self.failures.append(failure)
        self.malformed_regions += 1
