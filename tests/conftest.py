"""Pytest configuration and shared fixtures for nlpmodel tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Small functions and problems reused across test modules
"""

import os

import numpy as np
import pytest
import torch

from nlpmodel.function import AutogradFunction, NumericLinearFunction


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch RNG for tests."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    generator = torch.Generator(device="cpu")
    generator.manual_seed(seed)
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds(rng: np.random.Generator, torch_rng: torch.Generator) -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))
    torch.manual_seed(int(os.environ.get("TEST_RNG_SEED", "0")))


@pytest.fixture
def objective() -> NumericLinearFunction:
    """Scalar objective R^2 -> R: f(x) = x0 + 2 x1."""
    return NumericLinearFunction(np.array([[1.0, 2.0]]), np.array([0.0]), "objective")


@pytest.fixture
def scalar_constraint() -> NumericLinearFunction:
    """Single-output constraint R^2 -> R: g(x) = x0 - x1."""
    return NumericLinearFunction(np.array([[1.0, -1.0]]), np.array([0.0]), "difference")


@pytest.fixture
def triple_constraint() -> NumericLinearFunction:
    """Three-output constraint R^2 -> R^3."""
    A = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    return NumericLinearFunction(A, np.zeros(3), "triple")


@pytest.fixture
def circle() -> AutogradFunction:
    """Nonlinear constraint R^2 -> R: x0^2 + x1^2."""
    return AutogradFunction(lambda x: (x**2).sum(), 2, 1, "circle")
