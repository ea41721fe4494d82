"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: small pibble fit objects (posterior-like draws, prior-only
  objects) shared across test files.

Notes
-----
- Contributors should install the package in editable mode
  (`pip install -e .[dev]`) so that imports are resolved consistently in
  local dev and CI environments.
- Fixture draws come from a seeded numpy Generator; they are not samples
  from a fitted model, only arrays of the right shapes and properties
  (Sigma draws are symmetric positive-definite).
"""

import numpy as np
import pytest

import pibble  # noqa: F401  (enables 64-bit floats before arrays are built)
from pibble.fit import Alr, PibbleFit

D, N, Q, ITER = 3, 5, 2, 100


def _spd_stack(rng, k, n):
    A = rng.normal(size=(k, k, n))
    return np.einsum("ijn,ljn->iln", A, A) + k * np.eye(k)[:, :, None]


@pytest.fixture
def rng():
    return np.random.default_rng(20240601)


@pytest.fixture
def design(rng):
    """Design matrix X (Q, N): intercept row plus one covariate."""
    return np.vstack([np.ones(N), rng.normal(size=N)])


@pytest.fixture
def counts(rng):
    """Observed counts Y (D, N)."""
    return rng.integers(5, 50, size=(D, N))


@pytest.fixture
def hyper():
    """Prior hyperparameters in ALR(last) coordinates."""
    k = D - 1
    return {
        "upsilon": k + 3.0,
        "Theta": np.zeros((k, Q)),
        "Gamma": np.eye(Q),
        "Xi": np.eye(k),
    }


@pytest.fixture
def names():
    return {
        "names_categories": ("a", "b", "c"),
        "names_covariates": ("intercept", "x"),
        "names_samples": tuple(f"s{i}" for i in range(N)),
    }


@pytest.fixture
def posterior_fit(rng, design, counts, hyper, names):
    """Fit with Eta, Lambda, Sigma, data and hyperparameters in ALR(base=2)."""
    k = D - 1
    Lambda = rng.normal(size=(k, Q, ITER))
    Eta = np.einsum("kqi,qn->kni", Lambda, design) + 0.1 * rng.normal(size=(k, N, ITER))
    return PibbleFit(
        D=D,
        N=N,
        Q=Q,
        iter=ITER,
        coord_system=Alr(D - 1),
        Eta=Eta,
        Lambda=Lambda,
        Sigma=_spd_stack(rng, k, ITER),
        X=design,
        Y=counts,
        log_marginal_likelihood=-123.45678,
        **hyper,
        **names,
    )


@pytest.fixture
def bare_fit(posterior_fit):
    """Same fit without name vectors."""
    return posterior_fit.replace(names_categories=None, names_covariates=None, names_samples=None)


@pytest.fixture
def prior_setup(design, hyper):
    """Prior-only object (no Y, no draws) as used before sample_prior."""
    return PibbleFit(D=D, N=N, Q=Q, iter=1, X=design, **hyper)
