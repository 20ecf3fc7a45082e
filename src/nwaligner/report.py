from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from .nwalign import AlignmentResult, Column


def label_line(label: Optional[str]) -> str:
    return "" if label is None else f">{label}"


def parse_label(line: str) -> Optional[str]:
    if line.startswith('>'):
        return line[1:]
    return line or None


def format_alignment(result: AlignmentResult, label1: Optional[str], label2: Optional[str]) -> List[str]:
    """Renders an alignment as the six lines of the output format

    score, first label, first aligned sequence, indicator line, second aligned
    sequence, second label. Aligned sequences are written as they are, with gaps as
    underscores; a label of None (no FASTA header) gives an empty line.
    """
    return [
        str(result.score),
        label_line(label1),
        result.aligned1,
        result.indicator,
        result.aligned2,
        label_line(label2),
    ]


def write_alignment(p: Path, result: AlignmentResult, label1: Optional[str], label2: Optional[str]):
    logger = logging.getLogger("report.py")
    with p.open('wt') as outf:
        for line in format_alignment(result, label1, label2):
            outf.write(f"{line}\n")
    logger.info(f"Wrote alignment ({result.score=}, {len(result)} columns) to {p}")


@dataclass
class AlignmentReport:
    score: int
    label1: Optional[str]
    aligned1: str
    indicator: str
    aligned2: str
    label2: Optional[str]

    def counts(self) -> Tuple[int, int, int]:
        """(matches, mismatches, gaps) read off the indicator line"""
        return (
            self.indicator.count(Column.MATCH.symbol),
            self.indicator.count(Column.MISMATCH.symbol),
            self.indicator.count(Column.GAP.symbol),
        )

    def differences(self) -> List[str]:
        return [
            f"Position {k}: {c1} vs {c2}"
            for (k, (c1, c2, v)) in enumerate(zip(self.aligned1, self.aligned2, self.indicator), start=1)
            if v != Column.MATCH.symbol
        ]


def read_alignment(p: Path) -> AlignmentReport:
    with p.open('rt') as inf:
        lines = [line.rstrip('\n') for line in inf]
    if len(lines) < 6:
        raise ValueError(f"{p} needs at least six lines, found {len(lines)}")
    (score, label1, aligned1, indicator, aligned2, label2) = lines[:6]
    try:
        score = int(score.strip())
    except ValueError as e:
        raise ValueError(f"{p} doesn't start with an integer score: {score!r}") from e
    return AlignmentReport(
        score=score,
        label1=parse_label(label1),
        aligned1=aligned1,
        indicator=indicator,
        aligned2=aligned2,
        label2=parse_label(label2),
    )
