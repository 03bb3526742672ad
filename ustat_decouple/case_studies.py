"""
Biological Case Studies

Two end-to-end analyses on simulated data, each returning the DecoupleResult
and logging a plain-language reading of it:

- run_genomic_case_study: Hamming distance over a chain of mutated DNA
  sequences. Dependence points to shared evolutionary history.
- analyze_gene_expression_correlations: absolute Spearman correlation over
  block-correlated expression profiles. Dependence points to co-expression.

The interpretation has three outcomes: significant (p < 0.05), not
significant, or undefined when the decoupled null has zero spread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ustat_decouple.datasets import generate_dna_sequences, generate_expression_profiles
from ustat_decouple.decouple import decouple_u_stat
from ustat_decouple.kernels import HAMMING_KERNEL, SPEARMAN_KERNEL
from ustat_decouple.result import DecoupleResult

logger = logging.getLogger(__name__)


SIGNIFICANCE_LEVEL = 0.05


@dataclass(frozen=True)
class _Wording:
    heading: str
    statistic: str
    expectation: str
    significant: Tuple[str, str]
    independent: Tuple[str, str]
    undefined: str


GENOMIC_WORDING = _Wording(
    heading="=== Biological Interpretation ===",
    statistic="Original mean Hamming distance",
    expectation="Expected distance under independence",
    significant=(
        "Significant evidence of dependence between sequences (p < 0.05)",
        "This suggests shared evolutionary history or functional constraints",
    ),
    independent=(
        "No significant evidence of dependence between sequences (p >= 0.05)",
        "Sequences appear to evolve independently",
    ),
    undefined="Dependence between sequences cannot be assessed",
)

EXPRESSION_WORDING = _Wording(
    heading="=== Gene Expression Analysis ===",
    statistic="Original mean absolute correlation",
    expectation="Expected correlation under independence",
    significant=(
        "Significant evidence of co-expression structure (p < 0.05)",
        "This suggests the presence of regulatory networks or functional modules",
    ),
    independent=(
        "No significant evidence of co-expression structure (p >= 0.05)",
        "Genes appear to be expressed independently",
    ),
    undefined="Co-expression structure cannot be assessed",
)


def _interpret(result: DecoupleResult, wording: _Wording) -> List[str]:
    lines = [
        wording.heading,
        f"{wording.statistic}: {result.original_stat:.4f}",
        f"{wording.expectation}: {result.null_mean:.4f}",
        f"Null distribution SD: {result.null_sd:.4f}",
    ]
    if result.p_value is None:
        lines.append("P-value undefined: the decoupled null distribution has zero spread")
        lines.append(wording.undefined)
        return lines

    lines.append(
        f"Observed statistic is {result.z_score:.2f} standard deviations "
        f"from independence expectation"
    )
    if result.p_value < SIGNIFICANCE_LEVEL:
        lines.extend(wording.significant)
    else:
        lines.extend(wording.independent)
    return lines


def interpret_genomic_result(result: DecoupleResult) -> str:
    """Plain-language reading of a Hamming-distance decoupling over sequences."""
    return "\n".join(_interpret(result, GENOMIC_WORDING))


def interpret_expression_result(result: DecoupleResult) -> str:
    """Plain-language reading of a Spearman decoupling over expression profiles."""
    return "\n".join(_interpret(result, EXPRESSION_WORDING))


def _log_interpretation(text: str) -> None:
    for line in text.splitlines():
        logger.info(line)


def run_genomic_case_study(
    num_sequences: int = 10,
    sequence_length: int = 50,
    B: int = 500,
    seed: int = 123,
    parallel: bool = False,
) -> DecoupleResult:
    """
    Decouple mean pairwise Hamming distance over simulated related DNA sequences.

    The same seed drives sequence generation and the decoupling streams.
    """
    sequences = generate_dna_sequences(num_sequences, sequence_length, seed=seed)
    result = decouple_u_stat(sequences, HAMMING_KERNEL, B=B, parallel=parallel, seed=seed)
    _log_interpretation(interpret_genomic_result(result))
    return result


def analyze_gene_expression_correlations(
    num_genes: int = 20,
    num_samples: int = 15,
    B: int = 500,
    seed: int = 123,
    parallel: bool = False,
) -> DecoupleResult:
    """
    Decouple mean absolute Spearman correlation over simulated gene profiles.

    Genes come in co-expressed blocks of five; see generate_expression_profiles.
    """
    profiles = generate_expression_profiles(num_genes, num_samples, seed=seed)
    result = decouple_u_stat(profiles, SPEARMAN_KERNEL, B=B, parallel=parallel, seed=seed)
    _log_interpretation(interpret_expression_result(result))
    return result


# (example dataset, kernel name) -> interpretation used by the CLI
INTERPRETATIONS: Dict[Tuple[str, str], Callable[[DecoupleResult], str]] = {
    ("genomic", HAMMING_KERNEL.name): interpret_genomic_result,
    ("expression", SPEARMAN_KERNEL.name): interpret_expression_result,
}


__all__ = [
    "SIGNIFICANCE_LEVEL",
    "INTERPRETATIONS",
    "interpret_genomic_result",
    "interpret_expression_result",
    "run_genomic_case_study",
    "analyze_gene_expression_correlations",
]
