"""
DNA Raw Data Merger.

Merges consumer DNA raw data downloads (AncestryDNA, MyHeritage, Living DNA,
23andMe, FamilyTreeDNA) into a single file in a vendor upload format, with a
log of every conflict and skipped row.
"""

__version__ = "1.0.0"
