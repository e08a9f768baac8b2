"""Tests for the N-way merge engine and resolution policies."""

import asyncio

from dna_merger.merge import iter_merge, merge_files, resolve_by_consensus, resolve_by_priority
from dna_merger.models import (
    ConflictResolution,
    DNAFormat,
    FileMetadata,
    Marker,
    MergeOptions,
    ParseResult,
    SkippedEntry,
)
from dna_merger.parsers import parse_livingdna
from dna_merger.progress import Phase, drive_async
from dna_merger.utils import chromosome_sort_key, position_sort_key
from dna_merger.validation import is_missing_value, normalize_genotype_for_comparison

PRIORITY = MergeOptions(fill_missing=True, conflict_resolution=ConflictResolution.PRIORITY)
STRICT_PRIORITY = MergeOptions(fill_missing=False, conflict_resolution=ConflictResolution.PRIORITY)
CONSENSUS = MergeOptions(fill_missing=True, conflict_resolution=ConflictResolution.CONSENSUS)


def make_result(
    rows: list[tuple[str, str, str, str]],
    skipped: tuple[SkippedEntry, ...] = (),
    metadata: FileMetadata | None = None,
) -> ParseResult:
    """Build a ParseResult from (rsid, chromosome, position, genotype) rows."""
    return ParseResult(
        markers=tuple(Marker(*row) for row in rows),
        skipped=skipped,
        format=DNAFormat.LIVINGDNA,
        metadata=metadata,
    )


def genotype_files(*genotypes: str | None) -> list[ParseResult]:
    """One file per genotype for marker rs1 (None = file lacks the marker)."""
    return [
        make_result([] if g is None else [("rs1", "1", "100", g)]) for g in genotypes
    ]


class TestIndexing:
    """Test phase 1 behaviour."""

    def test_identifier_once(self) -> None:
        """Every identifier appears at most once in the output."""
        results = [
            make_result([("rs1", "1", "100", "AA"), ("rs2", "1", "200", "CC")]),
            make_result([("rs2", "1", "200", "CC"), ("rs3", "2", "50", "GG")]),
            make_result([("rs1", "1", "100", "AA"), ("rs3", "2", "50", "GG")]),
        ]
        merged = merge_files(results, PRIORITY)

        rsids = [m.rsid for m in merged.markers]
        assert sorted(rsids) == ["rs1", "rs2", "rs3"]
        assert len(rsids) == len(set(rsids))

    def test_first_sighting_coordinates(self) -> None:
        """Chromosome and position come from the first file reporting the marker."""
        results = [
            make_result([("rs1", "1", "100", "AA")]),
            make_result([("rs1", "5", "999", "AA")]),
        ]
        merged = merge_files(results, PRIORITY)

        assert merged.markers == [Marker("rs1", "1", "100", "AA", 0)]

    def test_marker_source_is_first_file(self) -> None:
        """Markers only in a later file are tagged with that file."""
        results = [make_result([]), make_result([("rs1", "1", "100", "AA")])]
        merged = merge_files(results, PRIORITY)

        assert merged.markers[0].source_file == 1

    def test_skipped_retagged(self) -> None:
        """Skipped rows carry the index of the file they came from."""
        entry = SkippedEntry(3, "bad", "Invalid genotype: NN", source_file=0)
        results = [make_result([]), make_result([], skipped=(entry,))]
        merged = merge_files(results, PRIORITY)

        assert merged.skipped == [SkippedEntry(3, "bad", "Invalid genotype: NN", source_file=1)]

    def test_files_metadata(self) -> None:
        """Metadata per file, empty where the file had none."""
        metadata = FileMetadata(chip="GSA")
        merged = merge_files([make_result([], metadata=metadata), make_result([])], PRIORITY)

        assert merged.files_metadata == [metadata, FileMetadata()]

    def test_empty_input(self) -> None:
        """No files gives an empty result."""
        merged = merge_files([], PRIORITY)

        assert merged.markers == []
        assert merged.conflicts == []
        assert merged.skipped == []


class TestConflictDetection:
    """Test which markers count as conflicts."""

    def test_hemizygous_equivalent(self) -> None:
        """'A' and 'AA' agree; the first sighting is kept as-is."""
        merged = merge_files(genotype_files("A", "AA"), PRIORITY)

        assert merged.conflicts == []
        assert merged.markers[0].genotype == "A"
        assert merged.markers[0].source_file == 0

    def test_case_insensitive(self) -> None:
        """'ag' and 'AG' agree."""
        assert merge_files(genotype_files("ag", "AG"), PRIORITY).conflicts == []

    def test_absent_slots_ignored(self) -> None:
        """Files that never reported the marker do not conflict."""
        assert merge_files(genotype_files("AA", None, "AA"), PRIORITY).conflicts == []

    def test_conflict_entry(self) -> None:
        """Conflicts record every file's genotype."""
        merged = merge_files(genotype_files("AA", None, "AC"), PRIORITY)

        conflict = merged.conflicts[0]
        assert conflict.rsid == "rs1"
        assert conflict.chromosome == "1"
        assert conflict.position == "100"
        assert conflict.file_genotypes == ("AA", None, "AC")


class TestPriorityResolution:
    """Test priority conflict resolution."""

    def test_strict_priority_scenario(self) -> None:
        """rs123 AA vs AC without fill-missing keeps file 1's AA."""
        results = [
            parse_livingdna("rs123  1  100  AA\n", file_index=0),
            parse_livingdna("rs123  1  100  AC\n", file_index=1),
        ]
        merged = merge_files(results, STRICT_PRIORITY)

        assert len(merged.conflicts) == 1
        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "AA"
        assert conflict.chosen_from_file == 0
        assert conflict.resolution_reason == "Used File 1 (highest priority)"
        assert merged.markers[0].genotype == "AA"

    def test_strict_priority_keeps_missing(self) -> None:
        """Without fill-missing a no-call in file 1 wins."""
        merged = merge_files(genotype_files("--", "AG"), STRICT_PRIORITY)

        assert merged.markers[0].genotype == "--"
        assert merged.markers[0].source_file == 0

    def test_strict_priority_absent_slot(self) -> None:
        """File 1 lacking the marker yields the '--' placeholder."""
        merged = merge_files(genotype_files(None, "AA", "CC"), STRICT_PRIORITY)

        assert merged.conflicts[0].chosen_genotype == "--"
        assert merged.conflicts[0].chosen_from_file == 0

    def test_fill_missing(self) -> None:
        """The first non-missing genotype in priority order wins."""
        merged = merge_files(genotype_files("--", "00", "AG", "CC"), PRIORITY)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "AG"
        assert conflict.chosen_from_file == 2
        assert conflict.resolution_reason == (
            "Filled missing from File 3 (highest priority non-missing)"
        )
        assert merged.markers[0] == Marker("rs1", "1", "100", "AG", 2)

    def test_fill_missing_all_missing(self) -> None:
        """All files missing falls back to file 1's raw value."""
        merged = merge_files(genotype_files("--", "00"), PRIORITY)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "--"
        assert conflict.chosen_from_file == 0
        assert conflict.resolution_reason == "All files missing, used File 1 placeholder"

    def test_fill_missing_never_chooses_missing(self) -> None:
        """With fill-missing the choice is missing only when every file is."""
        cases = [
            ("--", "AA"),
            ("00", "--", "CT"),
            ("AA", "--", "GG"),
            (None, "--", "TT"),
            ("--", "00"),
        ]
        for genotypes in cases:
            merged = merge_files(genotype_files(*genotypes), PRIORITY)
            for conflict in merged.conflicts:
                if is_missing_value(conflict.chosen_genotype):
                    assert all(g is None or is_missing_value(g) for g in conflict.file_genotypes)


class TestConsensusResolution:
    """Test consensus conflict resolution."""

    def test_majority_scenario(self) -> None:
        """AA, CC, CC resolves to CC with 2/3 files."""
        merged = merge_files(genotype_files("AA", "CC", "CC"), CONSENSUS)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "CC"
        assert conflict.chosen_from_file == 1
        assert "2/3 files" in conflict.resolution_reason
        assert conflict.resolution_reason == "Consensus: CC (2/3 files)"

    def test_raw_genotype_of_first_supporter(self) -> None:
        """The stored genotype is the first supporting file's raw call."""
        merged = merge_files(genotype_files("A", "GG", "AA"), CONSENSUS)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "A"
        assert conflict.chosen_from_file == 0
        assert conflict.resolution_reason == "Consensus: AA (2/3 files)"

    def test_tie_uses_priority(self) -> None:
        """Ties go to the genotype first reported by the lowest-index file."""
        merged = merge_files(genotype_files("AA", "CC", "TT"), CONSENSUS)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "AA"
        assert conflict.chosen_from_file == 0
        assert conflict.resolution_reason == (
            "Consensus: Tie between AA, CC, TT, used AA from File 1 (priority)"
        )

    def test_tie_skips_missing(self) -> None:
        """Missing values do not vote."""
        merged = merge_files(genotype_files("--", "CC", "AA"), CONSENSUS)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "CC"
        assert conflict.chosen_from_file == 1
        assert conflict.resolution_reason == (
            "Consensus: Tie between CC, AA, used CC from File 2 (priority)"
        )

    def test_denominator_is_file_count(self) -> None:
        """Counts are reported against all files, voting or not."""
        merged = merge_files(genotype_files("GG", None, "AA", "AA"), CONSENSUS)

        assert merged.conflicts[0].resolution_reason == "Consensus: AA (2/4 files)"

    def test_all_missing(self) -> None:
        """No votes gives the '--' placeholder."""
        merged = merge_files(genotype_files("--", "00", "--"), CONSENSUS)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "--"
        assert conflict.chosen_from_file == 0
        assert conflict.resolution_reason == "Consensus: All files missing"

    def test_two_files_fall_back_to_priority(self) -> None:
        """Two files use the fill-missing priority path, even with fill-missing off."""
        options = MergeOptions(fill_missing=False, conflict_resolution=ConflictResolution.CONSENSUS)
        merged = merge_files(genotype_files("--", "AG"), options)

        conflict = merged.conflicts[0]
        assert conflict.chosen_genotype == "AG"
        assert conflict.resolution_reason == (
            "Filled missing from File 2 (highest priority non-missing)"
        )


class TestResolutionFunctions:
    """Test the policy functions directly."""

    def test_resolve_by_priority(self) -> None:
        """Priority returns genotype, file and reason."""
        resolution = resolve_by_priority(["--", "AG", "AA"])

        assert resolution.genotype == "AG"
        assert resolution.source_file == 1

    def test_resolve_by_consensus_insertion_order(self) -> None:
        """Tie listing follows first-seen order, not alphabetical order."""
        raw = ["TT", "AA", "GG", "CC"]
        normalized = [normalize_genotype_for_comparison(g) for g in raw]
        resolution = resolve_by_consensus(raw, normalized)

        assert resolution.reason == (
            "Consensus: Tie between TT, AA, GG, CC, used TT from File 1 (priority)"
        )


class TestOrdering:
    """Test phase 3 ordering."""

    def test_sorted_by_chromosome_then_position(self) -> None:
        """Output is non-decreasing in (chromosome rank, numeric position)."""
        results = [
            make_result(
                [
                    ("rs1", "MT", "10", "AA"),
                    ("rs2", "X", "5", "AA"),
                    ("rs3", "2", "100", "AA"),
                    ("rs4", "10", "1", "AA"),
                    ("rs5", "2", "20", "AA"),
                    ("rs6", "XY", "7", "AA"),
                    ("rs7", "Y", "3", "AA"),
                    ("rs8", "1", "900", "AA"),
                ]
            )
        ]
        merged = merge_files(results, PRIORITY)

        assert [m.rsid for m in merged.markers] == [
            "rs8", "rs5", "rs3", "rs4", "rs2", "rs7", "rs6", "rs1"
        ]
        keys = [
            (chromosome_sort_key(m.chromosome), position_sort_key(m.position))
            for m in merged.markers
        ]
        assert keys == sorted(keys)

    def test_ancestry_numeric_codes_sort_with_letters(self) -> None:
        """23/24/26 sort where X/Y/MT would."""
        results = [make_result([("rs1", "26", "1", "AA"), ("rs2", "23", "1", "AA"), ("rs3", "22", "1", "AA")])]
        merged = merge_files(results, PRIORITY)

        assert [m.chromosome for m in merged.markers] == ["22", "23", "26"]

    def test_superscript_chromosome_sorts_last(self) -> None:
        """Kept invalid-position rows with odd digit tokens rank as unknown."""
        results = [
            parse_livingdna("rs2\t²\t0\tAG\nrs1\t1\t100\tAA\n", include_invalid_positions=True)
        ]
        merged = merge_files(results, PRIORITY)

        assert [m.rsid for m in merged.markers] == ["rs1", "rs2"]
        assert chromosome_sort_key("²") == 999

    def test_invalid_coordinates_first(self) -> None:
        """Chromosome 0 markers sort before chromosome 1."""
        results = [make_result([("rs1", "1", "5", "AA"), ("rs2", "0", "0", "AA")])]
        merged = merge_files(results, PRIORITY)

        assert [m.rsid for m in merged.markers] == ["rs2", "rs1"]

    def test_stable_ties(self) -> None:
        """Equal keys keep first-sighting order."""
        results = [make_result([("rsB", "1", "100", "AA"), ("rsA", "1", "100", "CC")])]
        merged = merge_files(results, PRIORITY)

        assert [m.rsid for m in merged.markers] == ["rsB", "rsA"]


class TestMergeProgress:
    """Test merge progress reporting."""

    def test_phase_bands(self) -> None:
        """Indexing 0-60, resolution 60-90, sorting 90-100."""
        rows = [("rs1", "1", "1", "AA"), ("rs2", "1", "2", "AA"), ("rs3", "1", "3", "AA")]
        steps = iter_merge([make_result(rows), make_result(rows)], PRIORITY, batch_size=2)

        events = []
        try:
            while True:
                events.append(next(steps))
        except StopIteration as stop:
            merged = stop.value

        assert [e.percent for e in events] == [20, 40, 59, 60, 80, 90, 96, 100]
        assert [e.phase for e in events][:4] == [Phase.INDEXING] * 4
        assert events[-1].phase == Phase.SORTING
        assert len(merged.markers) == 3

    def test_callback_monotonic(self) -> None:
        """Callback percentages never decrease and end at 100."""
        rows = [(f"rs{i}", "1", str(i + 1), "AA") for i in range(11000)]
        seen: list[int] = []

        merge_files([make_result(rows), make_result(rows[::2])], PRIORITY, seen.append)

        assert seen == sorted(seen)
        assert seen[-1] == 100

    def test_drive_async(self) -> None:
        """The async driver returns the same result."""
        files = genotype_files("AA", "CC", "CC")
        seen: list[int] = []

        merged = asyncio.run(drive_async(iter_merge(files, CONSENSUS), seen.append))

        assert merged == merge_files(files, CONSENSUS)
        assert seen[-1] == 100
