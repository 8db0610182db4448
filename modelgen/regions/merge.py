"""Splicing preserved developer text into freshly generated bodies."""

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ..logs import get_logger
from .errors import RegionError, TemplateMismatch
from .extractor import scan_regions
from .markers import begin_marker, end_marker, split_lines

logger = get_logger(__name__)

UNRECOVERED_RULE = "-" * 72
UNRECOVERED_NOTICE = (
    "Unrecovered regions: the model no longer anchors the code below.",
    "Move it into a live region or delete it; it is kept until then.",
)


@dataclass(frozen=True)
class MergeResult:
    """Final text for one target plus merge diagnostics."""

    text: str
    recovered: tuple[str, ...] = ()  # Preserved text spliced into a live region
    missing: tuple[str, ...] = ()  # Expected by the body but absent on disk
    orphans: tuple[str, ...] = ()  # On disk but not referenced by the body
    diagnostics: list[str] = field(default_factory=list, compare=False)

    @property
    def has_orphans(self) -> bool:
        """Check whether any region was moved to the unrecovered section."""
        return bool(self.orphans)


def merge(
    generated_body: str,
    region_keys: Sequence[str],
    preserved: Mapping[str, str],
    comment: str = "#",
) -> MergeResult:
    """Combine a generated body with previously preserved regions.

    Each region of the body keeps its generated marker lines. Its content is
    the preserved text for that key when there is one, otherwise the default
    stub written into the body. Preserved keys the body does not reference are
    appended under an "unrecovered" section with regular markers, so the text
    is never dropped and is extracted again on the next run.

    Args:
        generated_body: The freshly generated text with embedded regions.
        region_keys: The region keys embedded in the body, in order.
        preserved: Region text extracted from the existing file.
        comment: Line-comment leader for the unrecovered section.

    Returns:
        The merged text and its diagnostics.

    Raises:
        TemplateMismatch: If the body's regions differ from ``region_keys``
            or are structurally invalid.
    """
    try:
        regions = scan_regions(generated_body)
    except RegionError as e:
        raise TemplateMismatch(f"Generated body is malformed: {e.reason}", e.key, e.line) from e

    keys = [region.key for region in regions]
    if keys != list(region_keys):
        raise TemplateMismatch(
            f"Generated body declares regions {keys}, expected {list(region_keys)}"
        )

    lines = split_lines(generated_body)
    out: list[str] = []
    recovered: list[str] = []
    missing: list[str] = []
    pos = 0

    for region in regions:
        # Everything up to and including the BEGIN line
        out.extend(lines[pos : region.begin])
        if region.key in preserved:
            out.append(preserved[region.key])
            recovered.append(region.key)
        else:
            out.append(region.text)
            missing.append(region.key)
        # Resume at the END line
        pos = region.end - 1
    out.extend(lines[pos:])

    referenced = set(keys)
    orphans = [key for key in preserved if key not in referenced]
    text = "".join(out)
    diagnostics = [
        f"region '{key}' has no anchor in the model; kept in the unrecovered section"
        for key in orphans
    ]
    if orphans:
        text = _append_unrecovered(text, orphans, preserved, comment)
        logger.debug("Recovered %d orphaned region(s): %s", len(orphans), ", ".join(orphans))

    return MergeResult(
        text=text,
        recovered=tuple(recovered),
        missing=tuple(missing),
        orphans=tuple(orphans),
        diagnostics=diagnostics,
    )


def _append_unrecovered(
    text: str, orphans: list[str], preserved: Mapping[str, str], comment: str
) -> str:
    prefix = f"{comment} " if comment else ""
    parts = [text if not text or text.endswith("\n") else text + "\n", "\n"]
    parts.append(f"{prefix}{UNRECOVERED_RULE}\n")
    parts.extend(f"{prefix}{line}\n" for line in UNRECOVERED_NOTICE)
    parts.append(f"{prefix}{UNRECOVERED_RULE}\n")
    for key in orphans:
        body = preserved[key]
        if body and not body.endswith("\n"):
            body += "\n"
        parts.append(begin_marker(key, comment) + "\n")
        parts.append(body)
        parts.append(end_marker(key, comment) + "\n")
    return "".join(parts)
