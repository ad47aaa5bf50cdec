"""Tests for the genome catalog."""

import pytest

from wgsimtruth.core.genome import Contig, Genome, alignment_read_mode, load_genome
from wgsimtruth.exceptions import FileFormatError, GenomeLookupError


class TestGenomeLayout:
    def test_from_lengths_concatenates(self, genome):
        assert [c.beginning_offset for c in genome] == [0, 1000, 1500]
        assert genome.size == 1600
        assert len(genome) == 3

    def test_offset_of_contig(self, genome):
        assert genome.offset_of_contig("chr_1") == 0
        assert genome.offset_of_contig("chr2") == 1000
        assert genome.offset_of_contig("chrUn") is None

    def test_membership(self, genome):
        assert "chrM" in genome
        assert "chr1" not in genome
        assert genome.get_contig("chrM") == Contig("chrM", 1500, 100)

    def test_padding(self):
        padded = Genome.from_lengths([("a", 10), ("b", 10), ("c", 1)], padding=3)
        assert [c.beginning_offset for c in padded] == [0, 13, 26]
        assert padded.size == 27

    def test_negative_padding_rejected(self):
        with pytest.raises(GenomeLookupError):
            Genome.from_lengths([("a", 10)], padding=-1)

    def test_duplicate_names_rejected(self):
        with pytest.raises(GenomeLookupError, match="Duplicate"):
            Genome.from_lengths([("a", 10), ("a", 5)])

    def test_overlapping_contigs_rejected(self):
        with pytest.raises(GenomeLookupError):
            Genome([Contig("a", 0, 10), Contig("b", 5, 10)])

    def test_empty_genome(self):
        empty = Genome([])
        assert empty.size == 0
        with pytest.raises(GenomeLookupError):
            empty.contig_at_location(0)


class TestContigAtLocation:
    @pytest.mark.parametrize(
        "location, name",
        [(0, "chr_1"), (999, "chr_1"), (1000, "chr2"), (1499, "chr2"), (1500, "chrM"), (1599, "chrM")],
    )
    def test_lookup(self, genome, location, name):
        assert genome.contig_at_location(location).name == name

    @pytest.mark.parametrize("location", [-1, 1600, 10**9])
    def test_outside_genome(self, genome, location):
        with pytest.raises(GenomeLookupError):
            genome.contig_at_location(location)

    def test_inside_padding(self):
        padded = Genome.from_lengths([("a", 10), ("b", 10)], padding=5)
        assert padded.contig_at_location(9).name == "a"
        with pytest.raises(GenomeLookupError):
            padded.contig_at_location(12)
        assert padded.contig_at_location(15).name == "b"


class TestLoaders:
    def test_from_fasta(self, reference_fasta, genome):
        loaded = Genome.from_fasta(reference_fasta)
        assert loaded.contigs == genome.contigs

    def test_from_fasta_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Genome.from_fasta(tmp_path / "missing.fa")

    def test_from_fasta_empty(self, tmp_path):
        path = tmp_path / "empty.fa"
        path.write_text("")
        with pytest.raises(FileFormatError):
            Genome.from_fasta(path)

    def test_from_fai(self, reference_fai, genome):
        assert Genome.from_fai(reference_fai).contigs == genome.contigs

    def test_from_fai_malformed(self, tmp_path):
        path = tmp_path / "bad.fai"
        path.write_text("chr1\tnot_a_number\n")
        with pytest.raises(FileFormatError):
            Genome.from_fai(path)

    def test_from_alignment_header(self, write_sam, genome):
        sam = write_sam([])
        assert Genome.from_alignment_header(sam).contigs == genome.contigs

    def test_load_genome_prefers_fai(self, reference_fasta, tmp_path):
        (tmp_path / "ref.fa.fai").write_text("only\t42\t6\t60\t61\n")
        loaded = load_genome(reference=reference_fasta)
        assert [c.name for c in loaded] == ["only"]

    def test_load_genome_reads_fasta(self, reference_fasta, genome):
        assert load_genome(reference=reference_fasta).contigs == genome.contigs

    def test_load_genome_requires_input(self):
        with pytest.raises(GenomeLookupError):
            load_genome()


def test_alignment_read_mode(tmp_path):
    assert alignment_read_mode(tmp_path / "x.bam") == "rb"
    assert alignment_read_mode(tmp_path / "x.CRAM") == "rc"
    assert alignment_read_mode(tmp_path / "x.sam") == "r"
