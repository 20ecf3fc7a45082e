from pathlib import Path 
import pytest
from nwaligner.nwalign import ScoringParams, align
from nwaligner.report import format_alignment, write_alignment, read_alignment, AlignmentReport

PARAMS = ScoringParams(match=1, mismatch=-1, gap=-2)

def test_format_alignment(): 
    result = align("ACGT", "AGT", PARAMS)
    assert format_alignment(result, "ref", "qry") == [
        "1", 
        ">ref", 
        "ACGT", 
        "| ||", 
        "A_GT", 
        ">qry", 
    ]

def test_write_then_read(tmp_path: Path): 
    result = align("ACCGT", "AGGTT", PARAMS)
    p = tmp_path / "out.txt"
    write_alignment(p, result, "ref one", "qry two")
    report = read_alignment(p)
    assert report.score == result.score 
    assert report.label1 == "ref one"
    assert report.label2 == "qry two"
    assert report.indicator == result.indicator
    assert report.counts() == (result.matches, result.mismatches, result.gaps)
    assert report.aligned1 == result.aligned1
    assert report.aligned2 == result.aligned2

def test_differences(): 
    report = AlignmentReport(0, "a", "MK_V", "|x |", "MRAV", "b")
    assert report.counts() == (2, 1, 1)
    assert report.differences() == ["Position 2: K vs R", "Position 3: _ vs A"]

def test_read_short_file(tmp_path: Path): 
    p = tmp_path / "short.txt"
    p.write_text("3\n>a\nAAA\n")
    with pytest.raises(ValueError): 
        read_alignment(p)

def test_read_bad_score(tmp_path: Path): 
    p = tmp_path / "bad.txt"
    p.write_text("three\n>a\nAAA\n|||\nAAA\n>b\n")
    with pytest.raises(ValueError): 
        read_alignment(p)

def test_dash_residues_are_not_gaps(): 
    result = align("A-C", "A-C", PARAMS)
    assert format_alignment(result, "a", "b") == ["3", ">a", "A-C", "|||", "A-C", ">b"]

    result = align("A-C", "AC", PARAMS)
    lines = format_alignment(result, "a", "b")
    assert lines[2:5] == ["A-C", "| |", "A_C"]

def test_missing_labels(tmp_path: Path): 
    result = align("ACGT", "AGT", PARAMS)
    assert format_alignment(result, None, "qry") == ["1", "", "ACGT", "| ||", "A_GT", ">qry"]
    p = tmp_path / "out.txt"
    write_alignment(p, result, None, None)
    report = read_alignment(p)
    assert report.label1 is None 
    assert report.label2 is None 
    assert report.score == 1
