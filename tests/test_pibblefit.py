"""
test_pibblefit.py
-----------------

Tests for the PibbleFit container: validation, accessors, names, coef and
the plain-text report.
"""

import jax.numpy as jnp
import numpy as np
import pytest
import xarray as xr

from pibble.errors import InvalidArgumentError, MissingComponentError
from pibble.fit import (
    Alr,
    Clr,
    Ilr,
    PibbleFit,
    category_count,
    coef,
    covariate_count,
    format_fit,
    iteration_count,
    names_coords,
    niter,
    print_fit,
    sample_count,
    set_names_categories,
    set_names_covariates,
    set_names_samples,
)
from pibble.transforms import to_clr, to_ilr, to_proportions


class TestValidation:
    def test_default_coordinate_system_is_last_alr(self):
        fit = PibbleFit(D=4, N=2, Q=1, iter=3)
        assert fit.coord_system == Alr(3)
        assert fit.k == 3

    def test_dimensions_must_be_positive(self):
        with pytest.raises(InvalidArgumentError):
            PibbleFit(D=3, N=0, Q=1, iter=1)
        with pytest.raises(InvalidArgumentError):
            PibbleFit(D=1, N=2, Q=1, iter=1)

    def test_array_shape_checked(self):
        with pytest.raises(InvalidArgumentError, match="Lambda"):
            PibbleFit(D=3, N=5, Q=2, iter=10, Lambda=np.zeros((3, 2, 10)))

    def test_iteration_axis_checked(self):
        with pytest.raises(InvalidArgumentError):
            PibbleFit(D=3, N=5, Q=2, iter=10, Sigma=np.zeros((2, 2, 9)))

    def test_name_length_checked(self):
        with pytest.raises(InvalidArgumentError):
            PibbleFit(D=3, N=5, Q=2, iter=1, names_categories=("a", "b"))

    def test_coord_system_type_checked(self):
        with pytest.raises(InvalidArgumentError):
            PibbleFit(D=3, N=5, Q=2, iter=1, coord_system="alr")

    def test_arrays_become_jax_arrays(self, posterior_fit):
        assert isinstance(posterior_fit.Lambda, jnp.ndarray)
        assert posterior_fit.upsilon == pytest.approx(5.0)

    def test_frozen(self, posterior_fit):
        with pytest.raises(AttributeError):
            posterior_fit.N = 7


class TestAccessors:
    def test_counts(self, posterior_fit):
        assert category_count(posterior_fit) == 3
        assert sample_count(posterior_fit) == 5
        assert covariate_count(posterior_fit) == 2
        assert iteration_count(posterior_fit) == 100
        assert niter(posterior_fit) == 100

    def test_present_parameters(self, posterior_fit):
        assert posterior_fit.present_parameters == ("Eta", "Lambda", "Sigma")
        assert posterior_fit.replace(Eta=None).present_parameters == ("Lambda", "Sigma")

    def test_to_dict(self, posterior_fit):
        d = posterior_fit.to_dict()
        assert d["D"] == 3
        assert d["Lambda"] is posterior_fit.Lambda
        assert "summary" in d


class TestNames:
    def test_setters_return_new_objects(self, bare_fit):
        named = set_names_categories(bare_fit, ["x", "y", "z"])
        assert named.names_categories == ("x", "y", "z")
        assert bare_fit.names_categories is None

    def test_setter_length_mismatch(self, bare_fit):
        with pytest.raises(InvalidArgumentError):
            set_names_covariates(bare_fit, ["only-one"])
        with pytest.raises(InvalidArgumentError):
            set_names_samples(bare_fit, ["s0"])

    def test_setter_none_clears(self, posterior_fit):
        assert set_names_samples(posterior_fit, None).names_samples is None

    def test_names_coords_per_system(self, posterior_fit):
        assert names_coords(posterior_fit) == ("log(a/c)", "log(b/c)")
        assert names_coords(to_clr(posterior_fit)) == ("clr_a", "clr_b", "clr_c")
        assert names_coords(to_ilr(posterior_fit)) == ("ilr_1", "ilr_2")
        assert names_coords(to_proportions(posterior_fit)) == ("a", "b", "c")
        assert names_coords(posterior_fit.to_alr(0)) == ("log(b/a)", "log(c/a)")

    def test_names_coords_without_categories(self, bare_fit):
        assert names_coords(bare_fit) is None


class TestCoef:
    def test_coef_named(self, posterior_fit):
        L = coef(posterior_fit)
        assert isinstance(L, xr.DataArray)
        assert L.dims == ("coord", "covariate", "iter")
        assert L.shape == (2, 2, 100)
        assert list(L.coords["covariate"].values) == ["intercept", "x"]
        assert list(L.coords["coord"].values) == ["log(a/c)", "log(b/c)"]

    def test_coef_unnamed(self, posterior_fit):
        L = posterior_fit.coef(use_names=False)
        assert L is posterior_fit.Lambda

    def test_coef_missing_lambda(self):
        # Scenario: a fit holding only Eta has no coefficients
        fit = PibbleFit(D=3, N=4, Q=2, iter=5, Eta=np.zeros((2, 4, 5)))
        with pytest.raises(MissingComponentError, match="Lambda"):
            coef(fit)

    def test_coef_in_clr(self, posterior_fit):
        L = coef(to_clr(posterior_fit))
        assert L.shape == (3, 2, 100)


class TestDisplay:
    def test_posterior_report(self, posterior_fit):
        text = format_fit(posterior_fit)
        assert text.startswith("PibbleFit Object: ")
        assert "Number of Samples:\t\t 5" in text
        assert "Number of Categories:\t\t 3" in text
        assert "Number of Covariates:\t\t 2" in text
        assert "Number of Posterior Samples:\t 100" in text
        assert "Eta  Lambda  Sigma" in text
        assert "alr, reference category: 2 [c]" in text
        assert "Log Marginal Likelihood:\t -123.457" in text

    def test_prior_only_report(self, prior_setup):
        text = str(prior_setup)
        assert text.startswith(" PibbleFit Object (Priors Only): ")
        assert "Log Marginal Likelihood" not in text

    def test_report_other_systems(self, posterior_fit):
        assert "Coordinate System:\t\t clr" in format_fit(to_clr(posterior_fit))
        assert "Coordinate System:\t\t ilr" in format_fit(posterior_fit.replace(
            coord_system=Ilr(),
        ))

    def test_print_fit_with_summary(self, posterior_fit, capsys):
        print_fit(posterior_fit, summary=True, pars=["Sigma"])
        out = capsys.readouterr().out
        assert "Summary:" in out
        assert "Sigma:" in out

    def test_repr_is_compact(self, posterior_fit):
        r = repr(posterior_fit)
        assert r.startswith("PibbleFit(D=3")
        assert "Clr" not in r
        assert isinstance(to_clr(posterior_fit).coord_system, Clr)
