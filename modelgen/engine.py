"""Engine entry point: model graph in, summary of file writes out."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .errors import StructuralRegionError, WriteError
from .graph.model_graph import ModelGraph
from .logs import get_logger
from .plan.builder import COMMENT_LEADERS, GENERATED_HEADER, build_plan, is_stub
from .plan.models import GenerationTarget
from .regions.errors import RegionError
from .regions.extractor import extract
from .regions.markers import split_lines
from .regions.merge import MergeResult, merge
from .schema.profile import TargetProfile
from .writer.coordinator import WriteCoordinator, read_text
from .writer.summary import FileFailure, Summary

logger = get_logger(__name__)


def generate(
    model_graph: ModelGraph,
    destination_root: str | Path,
    profile: TargetProfile | None = None,
    *,
    dry_run: bool = False,
) -> Summary:
    """Generate source files for a model and merge them into a tree.

    Developer code inside protected regions of existing files is carried
    over; regions whose anchor disappeared from the model are kept in an
    "unrecovered" section at the end of their file. Files generated for
    entities that left the model are reported as stale; their edited regions
    are moved into such a section as well.

    Callers must not run two generations against the same destination at
    the same time.

    Args:
        model_graph: The loaded model.
        destination_root: Directory receiving the generated files.
        profile: Generation settings (defaults to ``TargetProfile()``).
        dry_run: Compute the summary without writing anything.

    Returns:
        Summary of the run.

    Raises:
        PlanError: If the plan is inconsistent.
        StructuralRegionError: In strict mode, if any existing file has
            malformed or unterminated regions. Nothing is written.
        WriteError: If existing files cannot be read or the batch cannot be
            written. Nothing is written.
    """
    profile = profile or TargetProfile()
    root = Path(destination_root)
    coordinator = WriteCoordinator(root, dry_run=dry_run)

    targets = build_plan(model_graph, profile)
    existing = _read_existing(targets, coordinator, profile)

    results: list[tuple[str, MergeResult]] = []
    failures: list[FileFailure] = []
    for target in targets:
        try:
            preserved = extract(existing[target.path], target.path)
        except RegionError as e:
            failures.append(FileFailure(path=target.path, error=e))
            continue
        results.append(
            (target.path, merge(target.body, target.region_keys, preserved, target.comment))
        )

    # Edited regions of files whose entity left the model join the same batch
    stale = find_stale(root, targets, profile)
    comment = COMMENT_LEADERS[profile.language]
    for path in stale:
        try:
            recovered = recover_stale(coordinator, path, comment)
        except RegionError as e:
            failures.append(FileFailure(path=path, error=e))
            continue
        if recovered is not None:
            results.append((path, recovered))

    if failures and profile.strict:
        details = "; ".join(str(failure) for failure in failures)
        raise StructuralRegionError(
            f"{len(failures)} file(s) have malformed protected regions: {details}",
            failures,
        )

    summary = coordinator.apply(results)
    for failure in failures:
        summary.record_failure(failure)
    summary.stale = stale

    logger.debug(
        "Generation of '%s' done: %d changed, %d unchanged, %d orphan(s), %d skipped",
        model_graph.namespace,
        summary.files_changed,
        summary.files_unchanged,
        summary.orphans_recovered,
        summary.malformed_regions,
    )
    return summary


def _read_existing(
    targets: list[GenerationTarget],
    coordinator: WriteCoordinator,
    profile: TargetProfile,
) -> dict[str, str | None]:
    """Read the current content of every target path.

    Paths are unique within a plan, so concurrent reads never touch the
    same file.
    """

    def read(target: GenerationTarget) -> str | None:
        path = coordinator.destination(target.path)
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise WriteError(f"Cannot read {path}: {e}", target.path) from e

    if profile.parallel and len(targets) > 1:
        with ThreadPoolExecutor(max_workers=profile.max_workers) as pool:
            contents = list(pool.map(read, targets))
    else:
        contents = [read(target) for target in targets]
    return {target.path: content for target, content in zip(targets, contents)}


def find_stale(
    root: Path, targets: list[GenerationTarget], profile: TargetProfile
) -> list[str]:
    """Find previously generated files that the current plan no longer covers.

    Stale files are reported, never deleted.
    """
    if not root.is_dir():
        return []

    planned = {target.path for target in targets}
    header = f"{COMMENT_LEADERS[profile.language]} {GENERATED_HEADER}"
    stale = []
    for path in sorted(root.glob(f"*.{profile.extension}")):
        if path.name in planned or not path.is_file():
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                first = f.readline()
        except (OSError, UnicodeDecodeError):
            continue
        if first.startswith(header):
            stale.append(path.name)
    return stale


def recover_stale(
    coordinator: WriteCoordinator, path: str, comment: str = "#"
) -> MergeResult | None:
    """Move the developer code of a stale file into its unrecovered section.

    The file keeps its header line; every region whose text differs from
    the template placeholder is appended as an orphan. Files without edited
    regions are left alone.

    Returns:
        The merge result to write, or None if there is nothing to recover.

    Raises:
        RegionError: If the file has malformed or unterminated regions.
        WriteError: If the file cannot be read.
    """
    dest = coordinator.destination(path)
    try:
        text = read_text(dest)
    except (OSError, UnicodeDecodeError) as e:
        raise WriteError(f"Cannot read {dest}: {e}", path) from e
    if text is None:
        return None

    edited = {
        key: body for key, body in extract(text, path).items() if not is_stub(body, comment)
    }
    if not edited:
        return None
    return merge(split_lines(text)[0], (), edited, comment)
