from dataclasses import dataclass
from typing import Dict, Generator, Tuple, Optional
from pathlib import Path
from contextlib import contextmanager
from typing import TextIO
import logging

import gzip

GC = frozenset("GC")
AT = frozenset("ATU")


@contextmanager
def open_with_gz(p: Path, mode: str = 'rt'):
    outf = None
    try:
        if is_gzip(p):
            outf = gzip.open(p, mode)
        else:
            outf = p.open(mode)
        yield outf
    finally:
        if outf is not None:
            outf.close()


def is_gzip(p: Path) -> bool:
    return p.name.lower().endswith(".gz")


def parse_fasta_stream(inf: TextIO) -> Generator[Tuple[Optional[str], str], None, None]:
    """Generates (name, sequence) records from a FASTA stream

    Sequence lines are stripped, joined and upper-cased. Residue lines that appear before
    the first '>' header are yielded under a name of None.
    """
    def process_string(seq: str) -> str:
        return seq.upper()
    current_name = None
    current_sequence = []
    seen_header = False
    for raw in inf:
        line = raw.strip()
        if len(line) == 0:
            continue
        if line.startswith('>'):
            if seen_header or len(current_sequence) > 0:
                yield (current_name, process_string(''.join(current_sequence)))
            current_name = line[1:].strip()
            current_sequence = []
            seen_header = True
        else:
            current_sequence.append(line)
    if seen_header or len(current_sequence) > 0:
        yield (current_name, process_string(''.join(current_sequence)))


def read_fasta(p: Path) -> Dict[str, str]:
    with open_with_gz(p) as inf:
        return {
            name: seq for (name, seq) in parse_fasta_stream(inf) if name is not None
        }


def read_fasta_record(p: Path) -> Tuple[Optional[str], str]:
    """Reads the first record of a FASTA file as a (label, sequence) pair

    A file of bare residue lines gives a label of None.
    """
    logger = logging.getLogger("fasta.py")
    with open_with_gz(p) as inf:
        record = next(parse_fasta_stream(inf), None)
    if record is None:
        raise ValueError(f"No sequence found in {p}")
    (name, seq) = record
    logger.info(f"Read {len(seq)} residues from {p.name} ({name=})")
    return (name, seq)


def write_fasta_record(p: Path, label: Optional[str], seq: str, width: Optional[int] = None):
    with open_with_gz(p, 'wt') as outf:
        outf.write(f">{label}\n" if label is not None else "\n")
        if width is None:
            outf.write(f"{seq}\n")
        else:
            for offset in range(0, len(seq), width):
                outf.write(f"{seq[offset:offset+width]}\n")


@dataclass
class GCContent:
    gc_count: int
    total: int

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.gc_count / self.total

    def __str__(self) -> str:
        return f"{self.percent:.2f}% (GC Count: {self.gc_count}, Total: {self.total})"


def gc_content(seq: str) -> GCContent:
    """Counts G/C against all A/C/G/T/U residues, ignoring case and any other symbol"""
    gc = 0
    total = 0
    for c in seq.upper():
        if c in GC:
            gc += 1
            total += 1
        elif c in AT:
            total += 1
    return GCContent(gc_count=gc, total=total)
