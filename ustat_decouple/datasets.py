"""
Example datasets for decoupling analyses.

- load_example_sequences: five fixed 8-base DNA sequences.
- generate_dna_sequences: a chain of sequences where each one is a mutated
  copy of the previous one, mimicking shared evolutionary history.
- generate_expression_profiles: gene expression profiles with block
  (pathway) correlation structure.

All generators take an explicit seed and never touch global random state.
"""

from __future__ import annotations

from typing import List

import numpy as np
from numpy.random import PCG64, Generator


DNA_BASES = ("A", "C", "G", "T")
DEFAULT_BASE_PROBS = (0.3, 0.2, 0.3, 0.2)


def load_example_sequences() -> List[List[str]]:
    return [
        list("ATGCATGC"),
        list("ATGTATGC"),
        list("ACGCATGT"),
        list("ATCCATGC"),
        list("ATGCGTGC"),
    ]


def generate_dna_sequences(
    num_sequences: int = 10,
    sequence_length: int = 50,
    *,
    mutation_rate: float = 0.1,
    seed: int = 123,
) -> List[List[str]]:
    """
    Generate related DNA sequences.

    The first sequence is drawn from DEFAULT_BASE_PROBS; every later sequence
    copies its predecessor and redraws round(sequence_length * mutation_rate)
    distinct positions.
    """
    if num_sequences < 1 or sequence_length < 1:
        raise ValueError("num_sequences and sequence_length must be positive")
    if not 0.0 <= mutation_rate <= 1.0:
        raise ValueError(f"mutation_rate must be in [0, 1], got {mutation_rate}")

    rng = Generator(PCG64(seed))
    bases = np.array(DNA_BASES)
    n_mutations = int(round(sequence_length * mutation_rate))

    current = rng.choice(bases, size=sequence_length, p=DEFAULT_BASE_PROBS)
    sequences = [current.tolist()]
    for _ in range(1, num_sequences):
        current = current.copy()
        positions = rng.choice(sequence_length, size=n_mutations, replace=False)
        current[positions] = rng.choice(bases, size=n_mutations)
        sequences.append(current.tolist())
    return sequences


def _block_correlation(num_genes: int, block_size: int, rng: Generator) -> np.ndarray:
    corr = np.eye(num_genes)
    for start in range(0, num_genes - num_genes % block_size, block_size):
        stop = start + block_size
        for i in range(start, stop):
            for j in range(i + 1, stop):
                value = 0.7 + rng.uniform(-0.1, 0.1)
                corr[i, j] = corr[j, i] = value

    min_eig = float(np.min(np.linalg.eigvalsh(corr)))
    if min_eig < 0:
        corr = corr + (abs(min_eig) + 0.1) * np.eye(num_genes)
    return corr


def generate_expression_profiles(
    num_genes: int = 20,
    num_samples: int = 15,
    *,
    block_size: int = 5,
    seed: int = 123,
) -> List[np.ndarray]:
    """
    Simulate expression profiles, one array of length num_samples per gene.

    Genes within each block of block_size are co-expressed (pairwise
    correlation around 0.7); genes in different blocks are independent.
    """
    if num_genes < 1 or num_samples < 1 or block_size < 1:
        raise ValueError("num_genes, num_samples and block_size must be positive")

    rng = Generator(PCG64(seed))
    corr = _block_correlation(num_genes, block_size, rng)
    samples = rng.multivariate_normal(np.zeros(num_genes), corr, size=num_samples)
    return [samples[:, g].copy() for g in range(num_genes)]


__all__ = [
    "DNA_BASES",
    "load_example_sequences",
    "generate_dna_sequences",
    "generate_expression_profiles",
]
