import json
import pytest
import numpy as np
import jaxmix as jxm

from utilities import BIP_COLLECTION, DEPARTURE_COLLECTION, get_fluid

# state used for the model evaluations
T = 350.0
RHO = 3000.0
X = np.array([0.4, 0.6])

# Overrides that reproduce the base parameters of the FluidA/FluidB pair
BASE_OVERRIDES = {
    "0": {
        "1": {
            "BIP": {"betaT": 1.05, "gammaT": 0.98, "betaV": 0.99, "gammaV": 1.02, "Fij": 1.0},
            "departure": DEPARTURE_COLLECTION[0],
        }
    }
}

INVARIANT_OVERRIDES = {
    "0": {
        "1": {
            "BIP": {"phiT": 1.02, "lambdaT": 0.05, "phiV": 0.98, "lambdaV": -0.03, "Fij": 0.5},
            "departure": DEPARTURE_COLLECTION[1],
        }
    }
}


def _base_model(components=("FluidA", "FluidB")):
    return jxm.build_multifluid_model_from_json(
        components,
        [get_fluid(name) for name in components],
        BIP_COLLECTION,
        DEPARTURE_COLLECTION,
        {"estimate": True},
    )


def _with_bip(**changes):
    overrides = json.loads(json.dumps(BASE_OVERRIDES))
    overrides["0"]["1"]["BIP"].update(changes)
    return overrides


def test_mutant_with_base_parameters_matches_base():
    model = _base_model()
    mutant = jxm.build_multifluid_mutant(model, BASE_OVERRIDES)
    assert isinstance(mutant, jxm.MultiFluidAdapter)
    assert np.isclose(float(mutant.alphar(T, RHO, X)), float(model.alphar(T, RHO, X)), rtol=1e-14)


def test_mutant_borrows_pure_fluids():
    model = _base_model()
    Tc, vc = np.array(model.redfunc.Tc), np.array(model.redfunc.vc)
    mutant = jxm.build_multifluid_mutant(model, _with_bip(betaT=1.2, gammaV=0.9))

    assert mutant.base is model
    assert mutant.corr is model.corr
    assert np.array_equal(np.asarray(mutant.redfunc.Tc), Tc)
    assert np.array_equal(np.asarray(mutant.redfunc.vc), vc)
    assert np.array_equal(np.asarray(model.redfunc.Tc), Tc)
    assert float(model.redfunc.betaT[0, 1]) == 1.05


def test_mutant_reducing_parameters():
    model = _base_model()
    mutant = jxm.build_multifluid_mutant(model, _with_bip(betaT=1.2, betaV=0.8, gammaT=1.1))
    red = mutant.redfunc
    assert float(red.betaT[0, 1]) == 1.2
    assert np.isclose(float(red.betaT[1, 0]), 1.0 / 1.2, rtol=1e-15)
    assert np.isclose(float(red.betaV[1, 0]), 1.0 / 0.8, rtol=1e-15)
    assert float(red.gammaT[1, 0]) == float(red.gammaT[0, 1]) == 1.1
    assert float(red.gammaV[1, 0]) == float(red.gammaV[0, 1]) == 1.02


@pytest.mark.parametrize(
    "overrides",
    [
        _with_bip(betaT=1.2),
        _with_bip(gammaV=0.9),
        _with_bip(Fij=0.0),
    ],
    ids=["betaT", "gammaV", "Fij"],
)
def test_mutant_changes_alphar(overrides):
    model = _base_model()
    mutant = jxm.build_multifluid_mutant(model, overrides)
    assert not np.isclose(float(mutant.alphar(T, RHO, X)), float(model.alphar(T, RHO, X)), rtol=1e-10)


def test_mutant_departure_override():
    model = _base_model()
    overrides = json.loads(json.dumps(BASE_OVERRIDES))
    overrides["0"]["1"]["departure"] = {"type": "none"}
    mutant = jxm.build_multifluid_mutant(model, overrides)

    assert [type(term) for term in mutant.dep.funcs[0][0]] == [jxm.NullTerm]
    assert [type(term) for term in mutant.dep.funcs[0][1]] == [jxm.NullTerm]
    assert float(mutant.dep.alphar(0.9, 1.1, X)) == 0.0
    assert float(model.dep.alphar(0.9, 1.1, X)) != 0.0


def test_mutant_metadata():
    model = _base_model()
    mutant = jxm.build_multifluid_mutant(model, BASE_OVERRIDES)
    assert mutant.get_meta() == json.dumps(BASE_OVERRIDES)
    assert json.loads(mutant.get_meta()) == BASE_OVERRIDES
    assert model.get_meta() == ""


def test_mutant_missing_entries():
    model = _base_model()
    with pytest.raises(jxm.SchemaError, match=r"pair \(0, 1\)"):
        jxm.build_multifluid_mutant(model, {})

    overrides = json.loads(json.dumps(BASE_OVERRIDES))
    del overrides["0"]["1"]["BIP"]["gammaT"]
    with pytest.raises(jxm.SchemaError, match="gammaT"):
        jxm.build_multifluid_mutant(model, overrides)


def test_mutant_of_ternary_mixture():
    model = _base_model(("FluidA", "FluidB", "FluidC"))
    overrides = {
        "0": {
            "1": BASE_OVERRIDES["0"]["1"],
            "2": {"BIP": {"betaT": 1.0, "gammaT": 1.0, "betaV": 1.0, "gammaV": 1.0, "Fij": 0.0}, "departure": {"type": "none"}},
        },
        "1": {
            "2": {"BIP": {"betaT": 1.1, "gammaT": 1.03, "betaV": 0.97, "gammaV": 1.01, "Fij": 0.0}, "departure": {"type": "none"}},
        },
    }
    mutant = jxm.build_multifluid_mutant(model, overrides)
    x = np.array([0.2, 0.5, 0.3])
    assert np.isclose(float(mutant.alphar(T, RHO, x)), float(model.alphar(T, RHO, x)), rtol=1e-14)


# ------------------------------------------------------------------------------------ #
# Invariant reducing function
# ------------------------------------------------------------------------------------ #

def test_invariant_mutant_parameters():
    model = _base_model()
    mutant = jxm.build_multifluid_mutant_invariant(model, INVARIANT_OVERRIDES)
    red = mutant.redfunc
    assert isinstance(red, jxm.MultiFluidInvariantReducingFunction)
    for name in ("phiT", "phiV"):
        matrix = np.asarray(getattr(red, name))
        assert np.array_equal(matrix, matrix.T)
        assert np.all(np.diag(matrix) == 1.0)
    for name in ("lambdaT", "lambdaV"):
        matrix = np.asarray(getattr(red, name))
        assert np.array_equal(matrix, -matrix.T)
    assert float(red.lambdaT[0, 1]) == 0.05
    assert float(red.lambdaV[1, 0]) == 0.03
    assert float(mutant.dep.get_F(1, 0)) == 0.5


def test_invariant_mutant_evaluation():
    model = _base_model()
    mutant = jxm.build_multifluid_mutant_invariant(model, INVARIANT_OVERRIDES)
    Tc = np.asarray(model.redfunc.Tc)
    phi, lam = 1.02, 0.05
    YT01 = np.sqrt(Tc[0] * Tc[1])
    Tr = (
        X[0] ** 2 * Tc[0]
        + X[1] ** 2 * Tc[1]
        + X[0] * X[1] * (phi + X[1] * lam) * YT01
        + X[1] * X[0] * (phi - X[0] * lam) * YT01
    )
    assert np.isclose(float(mutant.redfunc.get_Tr(X)), Tr, rtol=1e-14)
    assert np.isfinite(float(mutant.alphar(T, RHO, X)))
    assert mutant.get_meta() == json.dumps(INVARIANT_OVERRIDES)


def test_invariant_mutant_requires_binary_mixture():
    model = _base_model(("FluidA", "FluidB", "FluidC"))
    with pytest.raises(jxm.MixtureSizeError, match="Only binary mixtures"):
        jxm.build_multifluid_mutant_invariant(model, INVARIANT_OVERRIDES)


if __name__ == "__main__":

    # Running pytest from this script
    pytest.main([__file__, "-v"])
