"""Outcome statistics for repeated, non-destructive sampling."""

from __future__ import annotations

import math
from typing import Dict, Hashable, Mapping, Optional, Union

import torch

from .qubit import Qubit
from .register import Register

Target = Union[Qubit, Register]


def sample_counts(
    target: Target,
    shots: int,
    generator: Optional[torch.Generator] = None,
) -> Dict[int, int]:
    """
    Sample a qubit or register repeatedly and count the outcomes.

    Sampling never collapses the state, so every shot draws from the same
    distribution.

    Parameters
    ----------
    target:
        Qubit or Register to sample.
    shots:
        Number of draws, must be positive.
    generator:
        Optional torch.Generator for reproducible draws.

    Returns
    -------
    Dict[int, int]
        Mapping from outcome (0/1 for a qubit, the integer value for a
        register) to the number of occurrences.
    """
    if shots <= 0:
        raise ValueError(f"shots must be positive, got {shots}.")

    counts: Dict[int, int] = {}
    for _ in range(shots):
        outcome = int(target.sample(generator))
        counts[outcome] = counts.get(outcome, 0) + 1
    return counts


def exact_probs(target: Target) -> Dict[int, float]:
    """
    Exact outcome probabilities of a qubit or register.

    Outcomes with zero probability are left out.
    """
    if isinstance(target, Qubit):
        probs = {0: target.probability_of(False), 1: target.probability_of(True)}
    else:
        probs = {v: float(p) for v, p in enumerate(target.probabilities().tolist())}
    return {k: p for k, p in probs.items() if p > 0.0}


def counts_to_probs(counts: Mapping[Hashable, int]) -> Dict[Hashable, float]:
    """
    Convert integer counts into a probability distribution.

    Parameters
    ----------
    counts:
        Mapping from outcome to non-negative integer count.

    Returns
    -------
    Dict
        Mapping from outcome to probability, summing to 1.0.
    """
    total = sum(counts.values())
    if total <= 0:
        raise ValueError("Total count must be positive.")
    return {k: v / float(total) for k, v in counts.items()}


def kl_divergence(
    p: Mapping[Hashable, float],
    q: Mapping[Hashable, float],
    epsilon: float = 1e-12,
) -> float:
    """
    Compute the Kullback-Leibler divergence KL(p || q) for discrete
    distributions.

    Parameters
    ----------
    p, q:
        Mappings from outcome to probability. Keys not present in q are
        treated as having zero probability. Both are renormalized first.
    epsilon:
        Lower clamp on probabilities, keeping log(0) out of the sum.

    Returns
    -------
    float
        KL(p || q) in nats.
    """
    sum_p = sum(p.values())
    sum_q = sum(q.values())
    if sum_p <= 0 or sum_q <= 0:
        raise ValueError("Distributions p and q must have positive total probability.")

    kl = 0.0
    for key, p_val in p.items():
        p_prob = max(p_val / sum_p, epsilon)
        q_prob = max(q.get(key, 0.0) / sum_q, epsilon)
        kl += p_prob * math.log(p_prob / q_prob)
    return kl


__all__ = ["sample_counts", "exact_probs", "counts_to_probs", "kl_divergence"]
