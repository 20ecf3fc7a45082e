import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import click
import pandas as pd
import requests
from rich.progress import track

from .fasta import read_fasta_record, write_fasta_record, gc_content
from .fetch import DEFAULT_BASE_URL, FetchError, ensure_file
from .nwalign import Aligner, AlignmentResult, ScoringParams
from .report import read_alignment, write_alignment
from .stats import two_proportion_z_test
from .translate import translate

NUCLEOTIDE = "nucleotide"
AMINOACID = "aminoacid"
SEQUENCE_TYPES = [NUCLEOTIDE, AMINOACID]

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


@contextmanager
def fatal_errors():
    try:
        yield
    except (OSError, ValueError, FetchError, requests.RequestException) as e:
        raise click.ClickException(str(e)) from e


def load_input(p: Path, fetch: bool, base_url: str) -> Tuple[Optional[str], str]:
    if fetch:
        ensure_file(p, base_url=base_url)
    return read_fasta_record(p)


def run_alignment(reference: str, query: str, params: ScoringParams, show_trailing: bool = False) -> AlignmentResult:
    result = Aligner(params, reference, query).align()
    if show_trailing:
        result = result.with_trailing(reference, query)
    return result


@click.group(context_settings=dict(auto_envvar_prefix="NWALIGNER"))
@click.option("-v", "--verbose", count=True, help="Repeat for more logging (INFO, then DEBUG)")
def main(verbose: int):
    logging.basicConfig(level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)])


@main.command("align")
@click.option("-q", "--query", type=click.Path(path_type=Path), required=True, help="Query sequence file in FASTA format")
@click.option("-r", "--reference", type=click.Path(path_type=Path), required=True, help="Reference sequence file in FASTA format")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), required=True, help="Output alignment file")
@click.option("-g", "--gap", "gap_penalty", type=int, required=True, help="Gap penalty (negative integer)")
@click.option("-p", "--mismatch", "mismatch_penalty", type=int, required=True, help="Mismatch penalty (negative integer)")
@click.option("-m", "--match", "match_score", type=int, required=True, help="Match score (positive integer)")
@click.option("-u", "--unpenalized", is_flag=True, help="Unpenalized start and end gaps")
@click.option("-t", "--type", "sequence_type", type=click.Choice(SEQUENCE_TYPES, case_sensitive=False), required=True, help="Sequence type")
@click.option("--show-trailing", is_flag=True, help="Append residues left past the end of a semi-global traceback")
@click.option("--fetch/--no-fetch", default=True, help="Download missing input files")
@click.option("--base-url", default=DEFAULT_BASE_URL, show_default=True)
def align_sequences(
    query: Path,
    reference: Path,
    output: Path,
    gap_penalty: int,
    mismatch_penalty: int,
    match_score: int,
    unpenalized: bool,
    sequence_type: str,
    show_trailing: bool,
    fetch: bool,
    base_url: str,
):
    """Aligns QUERY against REFERENCE and writes the six-line alignment to OUTPUT"""
    logger = logging.getLogger("align")
    logger.info(f"Sequence Type: {sequence_type.lower()}")
    logger.info(f"Unpenalized End Gaps: {unpenalized}")
    params = ScoringParams(
        match=match_score, mismatch=mismatch_penalty, gap=gap_penalty, free_end_gaps=unpenalized
    )
    with fatal_errors():
        (query_label, query_seq) = load_input(query, fetch, base_url)
        (reference_label, reference_seq) = load_input(reference, fetch, base_url)
        result = run_alignment(reference_seq, query_seq, params, show_trailing=show_trailing)
        write_alignment(output, result, reference_label, query_label)
    click.echo(f"Score: {result.score} ({result.matches} matches, {result.mismatches} mismatches, {result.gaps} gaps)")


@main.command("translate")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path))
def translate_file(input_file: Path, output_file: Path):
    """Translates the first record of INPUT_FILE into OUTPUT_FILE"""
    with fatal_errors():
        (label, seq) = read_fasta_record(input_file)
        protein = translate(seq)
        write_fasta_record(output_file, label, protein)
    click.echo(f"{label or input_file.name}: {len(seq)} bases -> {len(protein)} residues")


@main.command("gc")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def gc(files: Tuple[Path, ...]):
    """Prints the GC content of the first record of each file"""
    with fatal_errors():
        for p in files:
            (_, seq) = read_fasta_record(p)
            click.echo(f"{p.name} GC Content: {gc_content(seq)}")


@dataclass
class AlignmentRun:
    name: str
    reference: str
    query: str
    params: ScoringParams
    output: Path


@main.command("analyze")
@click.option("-q", "--query", type=click.Path(path_type=Path), default=Path("pfizer_mrna.fna"), show_default=True)
@click.option("-r", "--reference", type=click.Path(path_type=Path), default=Path("sars_spike_protein.fna"), show_default=True)
@click.option("-w", "--workdir", type=click.Path(file_okay=False, path_type=Path), default=Path("."), show_default=True)
@click.option("-g", "--gap", "gap_penalty", type=int, default=-2, show_default=True)
@click.option("-p", "--mismatch", "mismatch_penalty", type=int, default=-1, show_default=True)
@click.option("-m", "--match", "match_score", type=int, default=1, show_default=True)
@click.option("--fetch/--no-fetch", default=True)
@click.option("--base-url", default=DEFAULT_BASE_URL, show_default=True)
def analyze(
    query: Path,
    reference: Path,
    workdir: Path,
    gap_penalty: int,
    mismatch_penalty: int,
    match_score: int,
    fetch: bool,
    base_url: str,
):
    """Compares global, semi-global and protein alignments of QUERY against REFERENCE,
    then tests whether their GC content differs."""
    logger = logging.getLogger("analyze")
    with fatal_errors():
        workdir.mkdir(parents=True, exist_ok=True)
        (query_label, query_seq) = load_input(query, fetch, base_url)
        (reference_label, reference_seq) = load_input(reference, fetch, base_url)

        logger.info("Translating sequences to amino acids")
        reference_aa = translate(reference_seq)
        query_aa = translate(query_seq)
        write_fasta_record(workdir / reference.with_suffix(".aa").name, reference_label, reference_aa)
        write_fasta_record(workdir / query.with_suffix(".aa").name, query_label, query_aa)

        penalized = ScoringParams(match_score, mismatch_penalty, gap_penalty)
        free = ScoringParams(match_score, mismatch_penalty, gap_penalty, free_end_gaps=True)
        runs: List[AlignmentRun] = [
            AlignmentRun("global", reference_seq, query_seq, penalized, workdir / "global_output.txt"),
            AlignmentRun("semi-global", reference_seq, query_seq, free, workdir / "semiglobal_output.txt"),
            AlignmentRun("amino acid", reference_aa, query_aa, penalized, workdir / "aminoacid_output.txt"),
        ]
        rows = []
        for run in track(runs, description=f"Running {len(runs)} alignments"):
            result = run_alignment(run.reference, run.query, run.params)
            write_alignment(run.output, result, reference_label, query_label)
            report = read_alignment(run.output)
            (matches, mismatches, gaps) = report.counts()
            rows.append({
                "alignment": run.name,
                "score": report.score,
                "matches": matches,
                "mismatches": mismatches,
                "gaps": gaps,
                "total_mismatches": mismatches + gaps,
                "output": run.output.name,
            })
        summary = pd.DataFrame(rows).set_index("alignment")
        click.echo(summary.to_string())

        differences = read_alignment(runs[-1].output).differences()
        click.echo("Differences between a.a. sequences:")
        if len(differences) == 0:
            click.echo("No differences found")
        for diff in differences:
            click.echo(diff)

        gc_reference = gc_content(reference_seq)
        gc_query = gc_content(query_seq)
        click.echo(f"{reference.name} GC Content: {gc_reference}")
        click.echo(f"{query.name} GC Content: {gc_query}")

        test = two_proportion_z_test(
            gc_reference.gc_count, gc_reference.total, gc_query.gc_count, gc_query.total
        )
    click.echo(f"Z-Score: {test.z:.4f}")
    click.echo(f"P-Value: {test.p_value_text}")
    if test.significant():
        click.echo("Result: Significant difference in GC content.")
    else:
        click.echo("Result: No significant difference in GC content.")
