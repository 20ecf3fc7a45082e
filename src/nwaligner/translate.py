from types import MappingProxyType
from typing import Mapping
import logging

START_CODON = "ATG"
STOP = "*"
UNKNOWN = "X"

BASES = "TCAG"
# Standard genetic code, codons ordered TTT, TTC, TTA, TTG, TCT, ... GGG
AMINO_ACIDS = "FFLLSSSSYY**CC*WLLLLPPPPHHQQRRRRIIIMTTTTNNKKSSRRVVVVAAAADDEEGGGG"

CODON_TABLE: Mapping[str, str] = MappingProxyType({
    a + b + c: aa
    for ((a, b, c), aa) in zip(
        ((a, b, c) for a in BASES for b in BASES for c in BASES), AMINO_ACIDS
    )
})


class TranslationError(ValueError):
    ...


def translate(dna: str) -> str:
    """Translates a DNA or RNA sequence into amino acids

    Reading starts at the first ATG and stops at the first stop codon (which is not
    emitted) or when fewer than three bases remain. Codons outside the table, e.g.
    ones containing N, become X.
    """
    logger = logging.getLogger("translate")
    seq = dna.upper().replace("U", "T")
    start = seq.find(START_CODON)
    if start == -1:
        raise TranslationError(
            f"Start codon '{START_CODON}' not found in the provided sequence (length {len(seq)})"
        )
    logger.debug(f"Translating from offset {start}")

    residues = []
    for i in range(start, len(seq) - 2, 3):
        aa = CODON_TABLE.get(seq[i:i + 3], UNKNOWN)
        if aa == STOP:
            break
        residues.append(aa)
    return "".join(residues)
