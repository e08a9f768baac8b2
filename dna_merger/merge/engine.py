"""N-way merge of parsed raw data files.

Three phases, each reporting progress at batch boundaries:

1. Indexing (0-60%): every marker is keyed by identifier in an
   insertion-ordered dict holding one genotype slot per file. The first
   file to report a marker fixes its chromosome and position.
2. Resolution (60-90%): markers whose normalised genotypes disagree are
   resolved by priority or consensus and recorded as conflicts.
3. Sorting (90-100%): markers ordered by chromosome rank then position.

The engine performs no I/O and never raises for well-formed input.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from dna_merger.merge.resolution import (
    MIN_CONSENSUS_FILES,
    Resolution,
    resolve_by_consensus,
    resolve_by_priority,
)
from dna_merger.models import (
    ConflictEntry,
    ConflictResolution,
    FileMetadata,
    Marker,
    MergeOptions,
    MergeResult,
    ParseResult,
    SkippedEntry,
)
from dna_merger.progress import BATCH_SIZE, Phase, ProgressCallback, ProgressEvent, Steps, drive
from dna_merger.utils import chromosome_sort_key, position_sort_key
from dna_merger.validation import normalize_genotype_for_comparison

logger = logging.getLogger(__name__)

INDEXING_END = 60
RESOLVING_END = 90


@dataclass(slots=True)
class _IndexedMarker:
    """Marker as first seen plus the genotype reported by each file."""

    marker: Marker
    file_genotypes: list[str | None]


def merge_files(
    results: Sequence[ParseResult],
    options: MergeOptions | None = None,
    progress_callback: ProgressCallback | None = None,
) -> MergeResult:
    """Merge N parse results into one marker set.

    Args:
        results: Parse results in priority order (index 0 = highest priority)
        options: Merge policy (defaults: fill missing, priority resolution)
        progress_callback: Called with a non-decreasing percentage at every
            batch boundary

    Returns:
        MergeResult with sorted markers, conflicts, skipped rows and metadata

    Example:
        >>> result = merge_files([parse_ancestry(a), parse_livingdna(b, file_index=1)])
        >>> len(result.conflicts)
        12
    """
    return drive(iter_merge(results, options), progress_callback)


def iter_merge(
    results: Sequence[ParseResult],
    options: MergeOptions | None = None,
    batch_size: int = BATCH_SIZE,
) -> Steps[MergeResult]:
    """Merge N parse results cooperatively.

    Yields a ProgressEvent at every batch boundary and returns the MergeResult.
    """
    options = options or MergeOptions()
    file_count = len(results)

    # Phase 1: indexing
    index: dict[str, _IndexedMarker] = {}
    skipped: list[SkippedEntry] = []
    total = sum(len(result.markers) for result in results)
    processed = 0

    for file_index, result in enumerate(results):
        skipped.extend(replace(entry, source_file=file_index) for entry in result.skipped)

        for marker in result.markers:
            existing = index.get(marker.rsid)
            if existing is None:
                slots: list[str | None] = [None] * file_count
                slots[file_index] = marker.genotype
                index[marker.rsid] = _IndexedMarker(
                    replace(marker, source_file=file_index), slots
                )
            else:
                existing.file_genotypes[file_index] = marker.genotype

            processed += 1
            if processed % batch_size == 0:
                yield ProgressEvent(
                    Phase.INDEXING,
                    min(round(processed / total * INDEXING_END), INDEXING_END - 1),
                )

    yield ProgressEvent(Phase.INDEXING, INDEXING_END)
    logger.debug("Indexed %d unique markers from %d files", len(index), file_count)

    # Phase 2: conflict resolution
    conflicts: list[ConflictEntry] = []
    merged: list[Marker] = []
    entry_count = len(index)
    span = RESOLVING_END - INDEXING_END

    for i, (rsid, entry) in enumerate(index.items()):
        if i > 0 and i % batch_size == 0:
            yield ProgressEvent(
                Phase.RESOLVING,
                min(INDEXING_END + round(i / entry_count * span), RESOLVING_END - 1),
            )

        normalized = [
            normalize_genotype_for_comparison(g) if g is not None else None
            for g in entry.file_genotypes
        ]
        distinct = {g for g in normalized if g is not None}

        if len(distinct) <= 1:
            merged.append(entry.marker)
            continue

        resolution = _resolve(entry.file_genotypes, normalized, options)
        conflicts.append(
            ConflictEntry(
                rsid=rsid,
                chromosome=entry.marker.chromosome,
                position=entry.marker.position,
                file_genotypes=tuple(entry.file_genotypes),
                chosen_genotype=resolution.genotype,
                chosen_from_file=resolution.source_file,
                resolution_reason=resolution.reason,
            )
        )
        merged.append(
            replace(
                entry.marker,
                genotype=resolution.genotype,
                source_file=resolution.source_file,
            )
        )

    yield ProgressEvent(Phase.RESOLVING, RESOLVING_END)
    logger.debug("Resolved %d conflicts (%s)", len(conflicts), options.conflict_resolution.value)

    # Phase 3: sorting
    keyed: list[tuple[int, int, Marker]] = []
    for i, marker in enumerate(merged):
        if i > 0 and i % batch_size == 0:
            yield ProgressEvent(
                Phase.SORTING,
                min(RESOLVING_END + round(i / len(merged) * 9), 99),
            )
        keyed.append(
            (chromosome_sort_key(marker.chromosome), position_sort_key(marker.position), marker)
        )

    # Stable sort: equal keys keep first-sighting order
    keyed.sort(key=lambda item: (item[0], item[1]))

    yield ProgressEvent(Phase.SORTING, 100)

    return MergeResult(
        markers=[item[2] for item in keyed],
        conflicts=conflicts,
        skipped=skipped,
        files_metadata=[result.metadata or FileMetadata() for result in results],
    )


def _resolve(
    file_genotypes: list[str | None],
    normalized: list[str | None],
    options: MergeOptions,
) -> Resolution:
    if (
        options.conflict_resolution == ConflictResolution.CONSENSUS
        and len(file_genotypes) >= MIN_CONSENSUS_FILES
    ):
        return resolve_by_consensus(file_genotypes, normalized)
    if options.conflict_resolution == ConflictResolution.CONSENSUS:
        # Two files cannot outvote each other
        return resolve_by_priority(file_genotypes, fill_missing=True)
    return resolve_by_priority(file_genotypes, options.fill_missing)
