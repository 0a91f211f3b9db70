"""Synthetic price series for demos and tests."""

from typing import List

import numpy as np

from cndl.codecs import Sample
from cndl.constants import GBM_MU, GBM_S0, GBM_SEED, GBM_SIGMA, GBM_STEPS


def generate_gbm(
    s0: float = GBM_S0,
    steps: int = GBM_STEPS,
    mu: float = GBM_MU,
    sigma: float = GBM_SIGMA,
    seed: int = GBM_SEED,
) -> np.ndarray:
    """Simulate geometric Brownian motion with unit time steps.

    Args:
        s0: Starting price
        steps: Number of prices, including ``s0``
        mu: Drift per step
        sigma: Volatility per step
        seed: Seed for the normal draws

    Returns:
        Array of ``steps`` prices starting at ``s0``
    """
    if steps <= 0:
        return np.empty(0, dtype=np.float64)

    rng = np.random.default_rng(seed)
    z = rng.standard_normal(steps - 1)
    log_returns = (mu - 0.5 * sigma ** 2) + sigma * z
    prices = np.empty(steps, dtype=np.float64)
    prices[0] = s0
    prices[1:] = s0 * np.exp(np.cumsum(log_returns))
    return prices


def gbm_series(
    s0: float = GBM_S0,
    steps: int = GBM_STEPS,
    mu: float = GBM_MU,
    sigma: float = GBM_SIGMA,
    seed: int = GBM_SEED,
) -> List[Sample]:
    """GBM prices as samples with timestamps ``1..steps``."""
    prices = generate_gbm(s0=s0, steps=steps, mu=mu, sigma=sigma, seed=seed)
    return [(i + 1, float(price)) for i, price in enumerate(prices)]
