def test_top_level_api_imports():
    import pibble as p

    for name in [
        "PibbleFit",
        "Alr",
        "Clr",
        "Ilr",
        "Default",
        "to_alr",
        "to_clr",
        "to_ilr",
        "to_proportions",
        "sample_prior",
        "predict",
        "ppc_summary",
        "tidy_samples",
        "summarize",
        "precompute_summary",
        "SummaryConfig",
        "PibbleError",
    ]:
        assert hasattr(p, name)


def test_x64_enabled():
    import jax.numpy as jnp

    import pibble  # noqa: F401

    assert jnp.zeros(1).dtype == jnp.float64


def test_errors_are_value_errors():
    from pibble import errors

    for name in [
        "MissingComponentError",
        "MissingHyperparameterError",
        "MissingDataError",
        "MissingSizeError",
        "UnsupportedTransformError",
        "InvalidArgumentError",
    ]:
        cls = getattr(errors, name)
        assert issubclass(cls, errors.PibbleError)
        assert issubclass(cls, ValueError)
