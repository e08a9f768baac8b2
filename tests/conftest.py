"""Pytest fixtures for dna_merger tests."""

from pathlib import Path

import pytest

from dna_merger.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging() -> None:
    """Start every test with unconfigured logging."""
    reset_logging()


@pytest.fixture
def ancestry_content() -> str:
    """Minimal AncestryDNA download.

    - rs1: chr 1, A/A
    - rs2: chr 1, A/G
    - rs3: chr 23 (X), 0/0 no-call
    - rs4: chr 25 (PAR), C/T
    - rs5: chr 2, invalid genotype N/N
    """
    return (
        "#AncestryDNA raw data download\n"
        "#This file was generated by AncestryDNA at: 01/01/2024 00:00:00 UTC\n"
        "#Data was collected using AncestryDNA array version: V2.0\n"
        "#Data is formatted using AncestryDNA converter version: V1.0\n"
        "#Genotypes are reported on human reference build 37.1 coordinates.\n"
        "rsid\tchromosome\tposition\tallele1\tallele2\n"
        "rs1\t1\t1000\tA\tA\n"
        "rs2\t1\t2000\tA\tG\n"
        "rs3\t23\t5000\t0\t0\n"
        "rs4\t25\t6000\tC\tT\n"
        "rs5\t2\t3000\tN\tN\n"
    )


@pytest.fixture
def myheritage_content() -> str:
    """Minimal MyHeritage download.

    - rs1: chr 1, AA (agrees with AncestryDNA)
    - rs2: chr 1, AA (conflicts with AncestryDNA AG)
    - rs3: chr X, CT (fills AncestryDNA no-call)
    - rs6: chr MT, GG
    """
    return (
        "##fileformat=MyHeritage\n"
        "##format=MHv1.0\n"
        "##chip=GSA\n"
        "##reference=build37\n"
        "#\n"
        'RSID,CHROMOSOME,POSITION,RESULT\n'
        '"rs1","1","1000","AA"\n'
        '"rs2","1","2000","AA"\n'
        '"rs3","X","5000","CT"\n'
        '"rs6","MT","7000","GG"\n'
    )


@pytest.fixture
def livingdna_content() -> str:
    """Minimal Living DNA download with one indel marker."""
    return (
        "# Living DNA customer genotype data download file version: 1.0.1\n"
        "# Genotype chip: GSAv3\n"
        "# Human Genome Reference Build 37 (GRCh37.p13)\n"
        "# rsid\tchromosome\tposition\tgenotype\n"
        "rs1\t1\t1000\tAA\n"
        "rs7\t3\t117564\tTAAGTGTAAGTG\n"
        "rs8\t4\t8000\tCG\n"
    )


@pytest.fixture
def twentythreeandme_content() -> str:
    """Minimal 23andMe download with a hemizygous X call."""
    return (
        "# This data file generated by 23andMe at: Mon Jan 01 00:00:00 2024\n"
        "# file_id: abc123\n"
        "# signature: deadbeef\n"
        "# timestamp: 2024-01-01 00:00:00\n"
        "# More information on reference human assembly build 37 (a.k.a. GRCh37):\n"
        "# rsid\tchromosome\tposition\tgenotype\n"
        "rs1\t1\t1000\tAA\n"
        "rs9\tX\t9000\tA\n"
        "i700\tMT\t16519\tT\n"
    )


@pytest.fixture
def ftdna_content() -> str:
    """Minimal FamilyTreeDNA download mixing quoted and unquoted rows."""
    return (
        "RSID,CHROMOSOME,POSITION,RESULT\n"
        '"rs1","1","1000","AA"\n'
        "rs10,5,10000,GT\n"
        '"rs11","6","11000","--"\n'
    )


@pytest.fixture
def write_file(tmp_path: Path):
    """Factory writing content to a file under tmp_path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write
