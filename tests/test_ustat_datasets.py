"""
Tests for the bundled example dataset generators.
"""

import numpy as np
import pytest

from ustat_decouple.datasets import (
    DNA_BASES,
    generate_dna_sequences,
    generate_expression_profiles,
    load_example_sequences,
)


def test_example_sequences():
    sequences = load_example_sequences()
    assert len(sequences) == 5
    assert all(len(s) == 8 for s in sequences)
    assert sequences[0] == list("ATGCATGC")


def test_dna_sequences_shape_and_alphabet():
    sequences = generate_dna_sequences(num_sequences=6, sequence_length=40, seed=1)
    assert len(sequences) == 6
    assert all(len(s) == 40 for s in sequences)
    assert {base for s in sequences for base in s} <= set(DNA_BASES)


def test_dna_sequences_are_deterministic():
    assert generate_dna_sequences(seed=5) == generate_dna_sequences(seed=5)
    assert generate_dna_sequences(seed=5) != generate_dna_sequences(seed=6)


def test_dna_sequences_mutate_from_predecessor():
    sequences = generate_dna_sequences(num_sequences=10, sequence_length=50, mutation_rate=0.1, seed=2)
    for previous, current in zip(sequences, sequences[1:]):
        changed = sum(a != b for a, b in zip(previous, current))
        assert changed <= 5


def test_dna_sequences_validation():
    with pytest.raises(ValueError):
        generate_dna_sequences(num_sequences=0)
    with pytest.raises(ValueError):
        generate_dna_sequences(mutation_rate=1.5)


def test_expression_profiles_shape():
    profiles = generate_expression_profiles(num_genes=12, num_samples=9, seed=3)
    assert len(profiles) == 12
    assert all(p.shape == (9,) for p in profiles)


def test_expression_profiles_are_deterministic():
    a = generate_expression_profiles(seed=4)
    b = generate_expression_profiles(seed=4)
    assert all(np.array_equal(x, y) for x, y in zip(a, b))


def test_expression_profiles_block_structure():
    profiles = generate_expression_profiles(num_genes=10, num_samples=500, block_size=5, seed=7)
    corr = np.corrcoef(np.vstack(profiles))
    within = np.mean([corr[i, j] for i in range(5) for j in range(5) if i != j])
    across = np.mean([corr[i, j] for i in range(5) for j in range(5, 10)])
    assert within > 0.5
    assert abs(across) < 0.2
