"""
Probabilistic Decoupling for Pairwise U-Statistics

Turns a U-statistic over dependent pairs of observations into a null
distribution of statistics over independent-copy pairs, then tests how far
the original statistic lies from that null.
All methods guarantee reproducibility: same seed → identical results,
whether iterations run sequentially or in parallel.
"""

from ustat_decouple.case_studies import (
    analyze_gene_expression_correlations,
    interpret_expression_result,
    interpret_genomic_result,
    run_genomic_case_study,
)
from ustat_decouple.config import DecoupleConfig
from ustat_decouple.decouple import decouple_u_stat, validate_input_data
from ustat_decouple.errors import (
    ComputationError,
    DecouplingCancelled,
    DecouplingError,
    DegenerateDistribution,
    InputError,
    InsufficientSample,
    ShapeMismatch,
)
from ustat_decouple.executor import CancellationToken, run_iterations
from ustat_decouple.kernels import (
    HAMMING_KERNEL,
    SPEARMAN_KERNEL,
    UStatKernel,
    create_kernel,
    hamming_distance,
    resolve_kernel,
    spearman_correlation,
)
from ustat_decouple.result import DecoupleResult, DistributionHistogram, HistogramBin
from ustat_decouple.significance import SignificanceResult, evaluate_significance
from ustat_decouple.statistic import compute_pairwise_statistic

__version__ = "0.1.0"

__all__ = [
    # Orchestration
    "decouple_u_stat",
    "validate_input_data",
    "DecoupleConfig",
    # Kernels
    "UStatKernel",
    "create_kernel",
    "resolve_kernel",
    "hamming_distance",
    "spearman_correlation",
    "HAMMING_KERNEL",
    "SPEARMAN_KERNEL",
    # Engine
    "compute_pairwise_statistic",
    "run_iterations",
    "CancellationToken",
    "evaluate_significance",
    "SignificanceResult",
    # Results
    "DecoupleResult",
    "DistributionHistogram",
    "HistogramBin",
    # Case studies
    "run_genomic_case_study",
    "analyze_gene_expression_correlations",
    "interpret_genomic_result",
    "interpret_expression_result",
    # Errors
    "DecouplingError",
    "InputError",
    "InsufficientSample",
    "ShapeMismatch",
    "DegenerateDistribution",
    "ComputationError",
    "DecouplingCancelled",
]
