"""Unit tests for synthetic series generation."""

import numpy as np

from cndl.synthetic import generate_gbm, gbm_series


class TestGenerateGbm:
    """Test geometric Brownian motion."""

    def test_starts_at_s0(self) -> None:
        prices = generate_gbm(s0=100.0, steps=50)
        assert prices.shape == (50,)
        assert prices[0] == 100.0

    def test_deterministic_for_seed(self) -> None:
        np.testing.assert_array_equal(generate_gbm(seed=7, steps=100), generate_gbm(seed=7, steps=100))
        assert not np.array_equal(generate_gbm(seed=7, steps=100), generate_gbm(seed=8, steps=100))

    def test_positive(self) -> None:
        assert (generate_gbm(steps=1000, sigma=0.05) > 0).all()

    def test_zero_volatility_is_flat(self) -> None:
        np.testing.assert_allclose(generate_gbm(s0=10.0, steps=20, sigma=0.0), 10.0)

    def test_empty(self) -> None:
        assert generate_gbm(steps=0).size == 0


def test_gbm_series_timestamps() -> None:
    samples = gbm_series(steps=5)
    assert [t for t, _ in samples] == [1, 2, 3, 4, 5]
    assert all(isinstance(v, float) for _, v in samples)
