"""N-way merge engine and conflict resolution policies."""

from dna_merger.merge.engine import iter_merge, merge_files
from dna_merger.merge.resolution import Resolution, resolve_by_consensus, resolve_by_priority

__all__ = [
    "iter_merge",
    "merge_files",
    "Resolution",
    "resolve_by_consensus",
    "resolve_by_priority",
]
