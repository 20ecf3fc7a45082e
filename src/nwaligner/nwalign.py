import logging
from enum import Enum
from dataclasses import dataclass, field, replace
from typing import Tuple, List


@dataclass
class ScoringParams:

    match: int
    mismatch: int
    gap: int
    free_end_gaps: bool = field(default=False)


GAP_CHAR = "_"

LEFT_ARROW = "←"
UP_ARROW = "↑"
DIAGONAL_ARROW = "↖"


class TraceOp(Enum):
    START = 0
    DIAGONAL = 1
    UP = 2
    LEFT = 3

    def advances_first(self) -> bool:
        return self == TraceOp.DIAGONAL or self == TraceOp.UP

    def advances_second(self) -> bool:
        return self == TraceOp.DIAGONAL or self == TraceOp.LEFT

    def prev_idx(self, idx: Tuple[int, int]) -> Tuple[int, int]:
        (i, j) = idx
        return (i - int(self.advances_first()), j - int(self.advances_second()))

    def fits(self, idx: Tuple[int, int]) -> bool:
        """True when stepping back from idx along this op stays inside the matrix"""
        (i, j) = self.prev_idx(idx)
        return self != TraceOp.START and i >= 0 and j >= 0

    def arrow(self) -> str:
        if self == TraceOp.DIAGONAL:
            return DIAGONAL_ARROW
        elif self == TraceOp.UP:
            return UP_ARROW
        elif self == TraceOp.LEFT:
            return LEFT_ARROW
        else:
            return "↻"


class Column(Enum):
    MATCH = "|"
    MISMATCH = "x"
    GAP = " "

    @property
    def symbol(self) -> str:
        return self.value

    def score(self, params: ScoringParams) -> int:
        if self == Column.MATCH:
            return params.match
        elif self == Column.MISMATCH:
            return params.mismatch
        else:
            return params.gap


@dataclass(frozen=True)
class AlignmentResult:
    """An optimal alignment of two sequences.

    aligned1 and aligned2 are gapped with GAP_CHAR and read left to right; indicator
    holds one Column symbol per aligned column. 'end' is the cell the traceback started
    from; in semi-global mode it may stop short of (len(seq1), len(seq2)), in which case
    the residues beyond it are not part of the alignment (see with_trailing).
    """

    score: int
    aligned1: str
    aligned2: str
    indicator: str
    end: Tuple[int, int] = field(default=(0, 0))

    def __len__(self) -> int:
        return len(self.indicator)

    @property
    def columns(self) -> List[Column]:
        return [Column(c) for c in self.indicator]

    @property
    def matches(self) -> int:
        return self.indicator.count(Column.MATCH.symbol)

    @property
    def mismatches(self) -> int:
        return self.indicator.count(Column.MISMATCH.symbol)

    @property
    def gaps(self) -> int:
        return self.indicator.count(Column.GAP.symbol)

    @property
    def identity(self) -> float:
        if len(self) == 0:
            return 0.0
        return self.matches / len(self)

    def with_trailing(self, seq1: str, seq2: str) -> "AlignmentResult":
        """Appends the residues past the end cell as unpenalized gap columns.

        The score is left as is, since trailing gaps are free wherever the end cell
        can differ from the bottom-right corner.
        """
        (i, j) = self.end
        tail1 = seq1[i:]
        tail2 = seq2[j:]
        n = len(tail1) + len(tail2)
        if n == 0:
            return self
        return replace(
            self,
            aligned1=self.aligned1 + tail1 + GAP_CHAR * len(tail2),
            aligned2=self.aligned2 + GAP_CHAR * len(tail1) + tail2,
            indicator=self.indicator + Column.GAP.symbol * n,
            end=(len(seq1), len(seq2)),
        )


class Aligner:
    """Needleman-Wunsch aligner with a linear gap penalty.

    Holds the score and traceback matrices for a single pair of sequences; both are
    (len(first) + 1) x (len(second) + 1). With params.free_end_gaps the first row and
    column start at zero, and stepping down into the last row or right into the last
    column costs nothing, which makes leading and trailing gaps free.
    """

    params: ScoringParams

    M: int
    first: str

    N: int
    second: str

    scores: List[List[int]]
    ops: List[List[TraceOp]]

    def __init__(self, params: ScoringParams, first: str, second: str):
        self.M = len(first) + 1
        self.first = first
        self.N = len(second) + 1
        self.second = second
        self.params = params
        self.scores = [[0 for j in range(self.N)] for i in range(self.M)]
        self.ops = [[TraceOp.START for j in range(self.N)] for i in range(self.M)]

    @property
    def score_matrix(self) -> str:
        width = max(len(str(s)) for row in self.scores for s in row)
        return "\n".join(" ".join(f"{s:>{width}}" for s in row) for row in self.scores)

    @property
    def backtrack_matrix(self) -> str:
        return "\n".join("".join(op.arrow() for op in row) for row in self.ops)

    def fill(self):
        (m, n) = (self.M - 1, self.N - 1)
        free = self.params.free_end_gaps
        gap = self.params.gap

        for i in range(1, self.M):
            self.scores[i][0] = 0 if free else i * gap
            self.ops[i][0] = TraceOp.UP

        for j in range(1, self.N):
            self.scores[0][j] = 0 if free else j * gap
            self.ops[0][j] = TraceOp.LEFT

        for i in range(1, self.M):
            c1 = self.first[i - 1]
            up_gap = 0 if free and i == m else gap
            for j in range(1, self.N):
                c2 = self.second[j - 1]
                left_gap = 0 if free and j == n else gap
                diag_score = self.scores[i - 1][j - 1] + (
                    self.params.match if c1 == c2 else self.params.mismatch
                )
                up_score = self.scores[i - 1][j] + up_gap
                left_score = self.scores[i][j - 1] + left_gap

                best = max(diag_score, up_score, left_score)
                self.scores[i][j] = best
                if best == diag_score:
                    self.ops[i][j] = TraceOp.DIAGONAL
                elif best == up_score:
                    self.ops[i][j] = TraceOp.UP
                else:
                    self.ops[i][j] = TraceOp.LEFT

    def start_cell(self) -> Tuple[int, int]:
        """Picks the cell the traceback starts from.

        Global alignments always end in the bottom-right corner. With free end gaps the
        last row is scanned left to right and then the last column top to bottom, and
        the first cell holding the highest score wins.
        """
        (m, n) = (self.M - 1, self.N - 1)
        if not self.params.free_end_gaps:
            return (m, n)

        candidates = [(m, j) for j in range(self.N)] + [(i, n) for i in range(self.M)]
        (best_i, best_j) = candidates[0]
        for (i, j) in candidates[1:]:
            if self.scores[i][j] > self.scores[best_i][best_j]:
                (best_i, best_j) = (i, j)
        logging.getLogger("Aligner").debug(f"Best end cell ({best_i}, {best_j}) of {len(candidates)} candidates")
        return (best_i, best_j)

    def backtrack_from(self, i: int, j: int) -> Tuple[str, str, str]:
        letters1 = []
        letters2 = []
        marks = []

        while i > 0 or j > 0:
            op = self.ops[i][j]
            if not op.fits((i, j)):
                break
            if op == TraceOp.DIAGONAL:
                (c1, c2) = (self.first[i - 1], self.second[j - 1])
                marks.append(Column.MATCH if c1 == c2 else Column.MISMATCH)
            elif op == TraceOp.UP:
                (c1, c2) = (self.first[i - 1], GAP_CHAR)
                marks.append(Column.GAP)
            else:
                (c1, c2) = (GAP_CHAR, self.second[j - 1])
                marks.append(Column.GAP)
            letters1.append(c1)
            letters2.append(c2)
            (i, j) = op.prev_idx((i, j))

        return (
            "".join(reversed(letters1)),
            "".join(reversed(letters2)),
            "".join(c.symbol for c in reversed(marks)),
        )

    def align(self) -> AlignmentResult:
        logger = logging.getLogger("Aligner")
        logger.info(
            f"Aligning {self.M - 1} x {self.N - 1} residues, "
            f"{'free' if self.params.free_end_gaps else 'penalized'} end gaps"
        )
        self.fill()
        (i, j) = self.start_cell()
        (aligned1, aligned2, indicator) = self.backtrack_from(i, j)
        score = self.scores[i][j]
        logger.info(f"Traceback from ({i}, {j}), {score=}, {len(indicator)} columns")
        return AlignmentResult(score, aligned1, aligned2, indicator, end=(i, j))


def align(seq1: str, seq2: str, params: ScoringParams) -> AlignmentResult:
    return Aligner(params, seq1, seq2).align()
