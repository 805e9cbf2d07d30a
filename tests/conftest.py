import pytest

BASIC_GFF = """##gff-version 3
# This is a comment
chr1\tAUGUSTUS\tgene\t1000\t2000\t.\t+\t.\tID=gene1;Name=TestGene
chr1\tAUGUSTUS\tmRNA\t1000\t2000\t.\t+\t.\tID=transcript1;Parent=gene1
chr1\tAUGUSTUS\texon\t1000\t1200\t.\t+\t0\tID=exon1;Parent=transcript1
chr2\tmanual\tCDS\t5000\t5500\t100\t-\t0\tID=cds1;product=hypothetical protein
chr3\ttest\tregion\t100\t200\t.\t.\t.\t.
"""

PROKKA_GFF = """##gff-version 3
##sequence-region contig_1 1 60
contig_1\tProdigal:2.6\tCDS\t1\t30\t.\t+\t0\tID=gene1;locus_tag=TAG_00001
contig_1\tProdigal:2.6\tCDS\t25\t45\t.\t-\t0\tID=gene2;locus_tag=TAG_00002
contig_2\tProdigal:2.6\tCDS\t5\t10\t.\t+\t0\tID=gene3
##FASTA
>contig_1 assembled
ACGTACGTACGTACGTACGTACGTACGTACGTACGTACGTACGTACGTACGTACGTACGT
>contig_2
ACGTACGTACGTACGTACGT
"""


@pytest.fixture
def basic_gff(tmp_path):
    path = tmp_path / "basic.gff"
    path.write_text(BASIC_GFF, encoding="utf-8")
    return path


@pytest.fixture
def prokka_gff(tmp_path):
    path = tmp_path / "prokka.gff"
    path.write_text(PROKKA_GFF, encoding="utf-8")
    return path


@pytest.fixture
def write_gff(tmp_path):
    def _write(text, name="input.gff"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
