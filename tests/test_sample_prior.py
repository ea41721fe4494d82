"""
test_sample_prior.py
--------------------

Tests for prior sampling and its matrix-variate building blocks.
"""

import jax.numpy as jnp
import jax.random as jr
import numpy as np
import pytest

from pibble.errors import InvalidArgumentError, MissingDataError, MissingHyperparameterError
from pibble.fit import Alr, Clr
from pibble.sampling import (
    covariance_from_precision_chol,
    rinvwishart_chol,
    rmatrixnormal,
    rwishart,
    sample_prior,
)
from pibble.transforms import to_clr
from pibble.utils.math import is_positive_definite


class TestDistributions:
    def test_wishart_shape_and_symmetry(self):
        W = rwishart(jr.PRNGKey(0), 5.0, jnp.eye(3), 20)
        assert W.shape == (3, 3, 20)
        assert jnp.allclose(W, jnp.swapaxes(W, 0, 1))

    def test_wishart_mean(self):
        # E[W] = df * scale
        scale = jnp.array([[2.0, 0.5], [0.5, 1.0]])
        W = rwishart(jr.PRNGKey(1), 6.0, scale, 4000)
        assert jnp.allclose(jnp.mean(W, axis=-1), 6.0 * scale, rtol=0.1, atol=0.2)

    def test_wishart_df_checked(self):
        with pytest.raises(InvalidArgumentError):
            rwishart(jr.PRNGKey(0), 1.0, jnp.eye(3), 2)

    def test_inverse_wishart_mean(self):
        # E[Sigma] = Xi / (df - k - 1)
        Xi = jnp.eye(2)
        U = rinvwishart_chol(jr.PRNGKey(2), 10.0, Xi, 4000)
        Sigma = covariance_from_precision_chol(U)
        assert jnp.allclose(jnp.mean(Sigma, axis=-1), Xi / 7.0, atol=0.02)

    def test_precision_factor_is_upper(self):
        U = rinvwishart_chol(jr.PRNGKey(3), 6.0, jnp.eye(3), 5)
        assert jnp.allclose(U, jnp.triu(jnp.moveaxis(U, -1, 0)).transpose(1, 2, 0))

    def test_matrix_normal_shapes(self):
        U = rinvwishart_chol(jr.PRNGKey(4), 6.0, jnp.eye(2), 7)
        M2 = jnp.zeros((2, 3))
        M3 = jnp.ones((2, 3, 7))
        assert rmatrixnormal(jr.PRNGKey(5), M2, U, jnp.eye(3)).shape == (2, 3, 7)
        draws = rmatrixnormal(jr.PRNGKey(5), M3, U, jnp.eye(3))
        assert draws.shape == (2, 3, 7)


class TestSamplePrior:
    def test_shapes(self, prior_setup):
        # Scenario: D=3, Q=2, N=5 prior with 50 draws
        prior = sample_prior(prior_setup, n_samples=50, key=jr.PRNGKey(0))
        assert prior.iter == 50
        assert prior.Eta.shape == (2, 5, 50)
        assert prior.Lambda.shape == (2, 2, 50)
        assert prior.Sigma.shape == (2, 2, 50)
        assert prior.Y is None
        assert prior.coord_system == Alr(2)

    def test_sigma_positive_definite_and_symmetric(self, prior_setup):
        prior = sample_prior(prior_setup, n_samples=30, pars="Sigma", key=jr.PRNGKey(1))
        S = prior.Sigma
        assert jnp.allclose(S, jnp.swapaxes(S, 0, 1), atol=1e-12)
        assert all(is_positive_definite(S[..., i]) for i in range(30))

    def test_only_requested_parameters(self, prior_setup):
        prior = sample_prior(prior_setup, n_samples=10, pars=["Sigma"], key=jr.PRNGKey(2))
        assert prior.present_parameters == ("Sigma",)
        prior = sample_prior(prior_setup, n_samples=10, pars=("Lambda",), key=jr.PRNGKey(2))
        assert prior.present_parameters == ("Lambda",)

    def test_hyperparameters_and_data_carried(self, prior_setup):
        prior = sample_prior(prior_setup, n_samples=10, key=jr.PRNGKey(3))
        assert prior.upsilon == prior_setup.upsilon
        assert jnp.allclose(prior.Theta, prior_setup.Theta)
        assert jnp.allclose(prior.Gamma, prior_setup.Gamma)
        assert jnp.allclose(prior.X, prior_setup.X)

    def test_reproducible_with_key(self, prior_setup):
        a = sample_prior(prior_setup, n_samples=5, key=jr.PRNGKey(7))
        b = sample_prior(prior_setup, n_samples=5, key=jr.PRNGKey(7))
        assert jnp.array_equal(a.Eta, b.Eta)

    def test_lambda_mean_follows_theta(self, prior_setup):
        Theta = jnp.array([[1.0, -2.0], [0.5, 3.0]])
        prior = sample_prior(
            prior_setup.replace(Theta=Theta), n_samples=3000, pars="Lambda", key=jr.PRNGKey(4)
        )
        assert jnp.allclose(jnp.mean(prior.Lambda, axis=-1), Theta, atol=0.15)

    def test_names_carried_or_dropped(self, prior_setup, names):
        named = prior_setup.replace(**names)
        kept = sample_prior(named, n_samples=5, key=jr.PRNGKey(5))
        assert kept.names_categories == ("a", "b", "c")
        dropped = sample_prior(named, n_samples=5, use_names=False, key=jr.PRNGKey(5))
        assert dropped.names_categories is None
        assert dropped.names_samples is None

    def test_coordinate_system_preserved(self, prior_setup):
        clr_setup = to_clr(prior_setup)
        prior = sample_prior(clr_setup, n_samples=20, key=jr.PRNGKey(6))
        assert prior.coord_system == Clr()
        assert prior.Sigma.shape == (3, 3, 20)
        assert jnp.allclose(jnp.sum(prior.Eta, axis=0), 0.0, atol=1e-10)

    def test_alr_reference_preserved(self, prior_setup):
        prior = sample_prior(prior_setup.to_alr(0), n_samples=5, key=jr.PRNGKey(8))
        assert prior.coord_system == Alr(0)

    def test_existing_draws_ignored(self, posterior_fit):
        prior = sample_prior(posterior_fit, n_samples=7, key=jr.PRNGKey(9))
        assert prior.iter == 7
        assert prior.Y is None

    def test_method_delegates(self, prior_setup):
        prior = prior_setup.sample_prior(n_samples=4, pars="Sigma", key=jr.PRNGKey(0))
        assert prior.Sigma.shape == (2, 2, 4)


class TestSamplePriorErrors:
    def test_missing_hyperparameters(self, prior_setup):
        with pytest.raises(MissingHyperparameterError, match="Xi"):
            sample_prior(prior_setup.replace(Xi=None), n_samples=5)

    def test_missing_design_for_eta(self, prior_setup):
        with pytest.raises(MissingDataError):
            sample_prior(prior_setup.replace(X=None), n_samples=5, pars="Eta")

    def test_design_not_needed_without_eta(self, prior_setup):
        prior = sample_prior(
            prior_setup.replace(X=None), n_samples=5, pars=["Lambda", "Sigma"], key=jr.PRNGKey(0)
        )
        assert prior.X is None
        assert prior.Lambda.shape == (2, 2, 5)

    def test_unknown_parameter(self, prior_setup):
        with pytest.raises(InvalidArgumentError):
            sample_prior(prior_setup, pars=["Pi"])

    def test_non_positive_draws(self, prior_setup):
        with pytest.raises(InvalidArgumentError):
            sample_prior(prior_setup, n_samples=0)


def test_prior_sigma_mean_matches_inverse_wishart(prior_setup):
    prior = sample_prior(
        prior_setup.replace(upsilon=12.0), n_samples=4000, pars="Sigma", key=jr.PRNGKey(11)
    )
    # k = 2: E[Sigma] = Xi / (upsilon - k - 1) = Xi / 9
    assert np.allclose(np.mean(np.asarray(prior.Sigma), axis=-1), np.eye(2) / 9.0, atol=0.01)
