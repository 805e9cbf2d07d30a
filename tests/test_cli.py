import pandas as pd
import pytest

from readgff.cli import build_filter, build_parser, main
from readgff.core.filters import RecordFilter
from readgff.core.pipeline import StatsConfig, run_stats


def test_select_filters_by_type(basic_gff, capsys):
    main(["select", str(basic_gff), "-t", "exon"])
    out = capsys.readouterr().out.splitlines()
    assert out == ["chr1\tAUGUSTUS\texon\t1000\t1200\t.\t+\t0\tID=exon1;Parent=transcript1"]


def test_select_length_and_contig(basic_gff, capsys):
    main(["select", str(basic_gff), "--contig", "chr1", "--min-len", "1000"])
    out = capsys.readouterr().out.splitlines()
    assert [line.split("\t")[2] for line in out] == ["gene", "mRNA"]


def test_select_invalid_length(basic_gff):
    with pytest.raises(SystemExit, match="Invalid value 'x' supplied for --max-len."):
        main(["select", str(basic_gff), "-x", "x"])


def test_build_filter_defaults():
    args = build_parser().parse_args(["select", "in.gff"])
    assert build_filter(args) == RecordFilter()


def test_stats_report(basic_gff, capsys):
    main(["stats", str(basic_gff)])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Total records: 5"
    assert out[2] == "Total unique bases covered: 1603"
    assert "Per feature type:" in out


def test_stats_by_seqid_uses_embedded_fasta(prokka_gff, tmp_path, capsys):
    table_path = tmp_path / "seqids.tsv"
    main(["stats", str(prokka_gff), "--by-seqid", "--table", str(table_path)])
    out = capsys.readouterr().out
    assert "Per sequence id:" in out
    table = pd.read_csv(table_path, sep="\t")
    assert table["seqid"].tolist() == ["contig_1", "contig_2"]
    assert table["seq_length"].tolist() == [60, 20]
    assert table["fraction_covered"].tolist() == pytest.approx([0.75, 0.3])


def test_stats_type_table_jsonl(basic_gff, tmp_path):
    table_path = tmp_path / "types.jsonl"
    main(["stats", str(basic_gff), "--table", str(table_path), "--emit", "jsonl"])
    frame = pd.read_json(table_path, lines=True)
    assert frame["feature_type"].tolist() == ["CDS", "exon", "gene", "mRNA", "region"]


def test_parse_error_exits(write_gff):
    path = write_gff("chr1\tAUGUSTUS\tgene\tABC\t2000\t.\t+\t.\tID=x\n")
    with pytest.raises(SystemExit, match="Error at line 1: Invalid start position: ABC"):
        main(["stats", str(path)])


def test_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit, match="Cannot open file"):
        main(["select", str(tmp_path / "missing.gff")])


def test_bad_log_level(basic_gff):
    with pytest.raises(SystemExit, match="Unknown log level"):
        main(["--log-level", "loud", "stats", str(basic_gff)])


def test_run_stats_with_filter(basic_gff):
    config = StatsConfig(gff=str(basic_gff), record_filter=RecordFilter(seqid="chr1"))
    result = run_stats(config)
    assert result.summary.total_records == 3
    assert result.seq_lengths == {}
    assert list(result.table().columns) == ["feature_type", "n_records", "total_bp", "mean_len"]


def test_run_stats_external_fasta(prokka_gff, tmp_path):
    fasta = tmp_path / "lengths.fa"
    fasta.write_text(">contig_1\n" + "A" * 90 + "\n", encoding="utf-8")
    result = run_stats(StatsConfig(gff=str(prokka_gff), by_seqid=True, fasta=str(fasta)))
    assert result.seq_lengths == {"contig_1": 90}
    assert result.table().loc[0, "fraction_covered"] == pytest.approx(0.5)


def test_invalid_utf8_exits(write_gff):
    path = write_gff("")
    path.write_bytes(b"chr1\ts\tgene\t1\t10\t.\t+\t.\tNote=\xff\xfe\n")
    with pytest.raises(SystemExit, match="Error at line 1: Line is not valid utf-8"):
        main(["stats", str(path)])
