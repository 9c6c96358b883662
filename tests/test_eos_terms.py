import pytest
import numpy as np
import jax
import jaxmix as jxm

# tolerances
RTOL = 1e-12
ATOL = 1e-14

# reduced state used for the comparisons
TAU = 0.8
DELTA = 1.3


def _check(term_name, value_calc, value_ref):
    value_calc = float(value_calc)
    if not np.isclose(value_calc, value_ref, rtol=RTOL, atol=ATOL):
        pytest.fail(
            f"{term_name}: alphar mismatch\n"
            f"  ref  = {value_ref:.12e}\n"
            f"  calc = {value_calc:.12e}\n"
            f"  err  = {value_calc - value_ref:.3e}"
        )


# ------------------------------------------------------------------------------------ #
# Term evaluators against the closed-form expressions
# ------------------------------------------------------------------------------------ #

def test_power_term():
    n, t, d, l = [0.5, -0.2, 0.1], [0.5, 1.0, 2.0], [1, 2, 3], [0, 2, 1]
    term = jxm.PowerTerm(n, t, d, l)
    c = np.array([0.0, 1.0, 1.0])
    expected = np.sum(
        np.array(n) * DELTA ** np.array(d) * TAU ** np.array(t) * np.exp(-c * DELTA ** np.array(l))
    )
    _check("power", term.alphar(TAU, DELTA), expected)
    assert np.array_equal(np.asarray(term.c), c)


def test_power_term_default_arrays():
    term = jxm.PowerTerm([2.0])
    _check("power (defaults)", term.alphar(TAU, DELTA), 2.0)


def test_gaussian_term():
    n, t, d = [0.05, -0.02], [1.0, 2.0], [2, 3]
    eta, beta, gamma, epsilon = [1.0, 20.0], [1.2, 150.0], [1.1, 1.2], [0.9, 1.0]
    term = jxm.GaussianTerm(n, t, d, eta, beta, gamma, epsilon)
    expected = np.sum(
        np.array(n)
        * DELTA ** np.array(d)
        * TAU ** np.array(t)
        * np.exp(
            -np.array(eta) * (DELTA - np.array(epsilon)) ** 2
            - np.array(beta) * (TAU - np.array(gamma)) ** 2
        )
    )
    _check("Gaussian", term.alphar(TAU, DELTA), expected)


def test_gerg2004_term():
    n, t, d = [0.02, -0.01], [1.5, 2.0], [3, 1]
    eta, beta, gamma, epsilon = [1.0, 0.5], [0.5, 0.5], [0.5, 0.5], [0.5, 0.5]
    term = jxm.GERG2004Term(n, t, d, eta, beta, gamma, epsilon)
    expected = np.sum(
        np.array(n)
        * DELTA ** np.array(d)
        * TAU ** np.array(t)
        * np.exp(
            -np.array(eta) * (DELTA - np.array(epsilon)) ** 2
            - np.array(beta) * (DELTA - np.array(gamma))
        )
    )
    _check("GERG-2004", term.alphar(TAU, DELTA), expected)


def test_exponential_term():
    n, t, d, g, l = [-0.1, 0.2], [2.0, 1.0], [1, 2], [0.8, 1.0], [2, 1]
    term = jxm.ExponentialTerm(n, t, d, g, l)
    expected = np.sum(
        np.array(n) * DELTA ** np.array(d) * TAU ** np.array(t) * np.exp(-np.array(g) * DELTA ** np.array(l))
    )
    _check("exponential", term.alphar(TAU, DELTA), expected)


def test_lemmon2005_term():
    n, t, d, m, l = [0.3, -0.1, 0.05], [1.0, 2.0, 0.5], [1, 2, 3], [0.0, 1.5, 2.0], [0, 1, 2]
    term = jxm.Lemmon2005Term(n, t, d, m, l)
    n, t, d, m, l = map(np.array, (n, t, d, m, l))
    # The first entry has l = m = 0 and reduces to a polynomial term
    expected = n[0] * DELTA ** d[0] * TAU ** t[0]
    expected += np.sum(
        n[1:] * DELTA ** d[1:] * TAU ** t[1:] * np.exp(-(DELTA ** l[1:]) - TAU ** m[1:])
    )
    _check("Lemmon2005", term.alphar(TAU, DELTA), expected)


def test_gaob_term_sign_convention():
    n, t, d = [-0.6, 0.2], [1.0, 0.5], [1, 2]
    eta, beta, gamma, epsilon, b = [-1.0, -0.5], [-1.7, -0.4], [1.3, 1.1], [0.9, 1.0], [1.2, 0.9]
    term = jxm.GaoBTerm(n, t, d, eta, beta, gamma, epsilon, b)
    assert np.array_equal(np.asarray(term.eta), -np.array(eta))
    expected = np.sum(
        np.array(n)
        * DELTA ** np.array(d)
        * TAU ** np.array(t)
        * np.exp(
            np.array(eta) * (DELTA - np.array(epsilon)) ** 2
            + 1.0 / (np.array(beta) * (TAU - np.array(gamma)) ** 2 + np.array(b))
        )
    )
    _check("GaoB", term.alphar(TAU, DELTA), expected)


def test_nonanalytic_term():
    # Coefficients of the IAPWS-95 non-analytic terms
    n = [-0.14874640856724, 0.31806110878444]
    a, b, beta = [3.5, 3.5], [0.85, 0.95], [0.2, 0.2]
    A, B, C, D = [0.32, 0.32], [0.2, 0.2], [28.0, 32.0], [700.0, 800.0]
    term = jxm.NonAnalyticTerm(n, A, B, C, D, a, b, beta)

    tau, delta = 0.98, 1.05
    n, a, b, beta, A, B, C, D = map(np.array, (n, a, b, beta, A, B, C, D))
    theta = (1 - tau) + A * ((delta - 1) ** 2) ** (1 / (2 * beta))
    Delta = theta**2 + B * ((delta - 1) ** 2) ** a
    Psi = np.exp(-C * (delta - 1) ** 2 - D * (tau - 1) ** 2)
    expected = np.sum(n * Delta**b * delta * Psi)
    _check("nonanalytic", term.alphar(tau, delta), expected)


def test_null_term():
    assert float(jxm.NullTerm().alphar(TAU, DELTA)) == 0.0


# ------------------------------------------------------------------------------------ #
# Construction-time validation
# ------------------------------------------------------------------------------------ #

def test_length_mismatch():
    with pytest.raises(jxm.LengthMismatchError, match="Lengths are not all identical"):
        jxm.PowerTerm(n=[1.0, 2.0, 3.0], t=[1.0, 2.0])
    with pytest.raises(jxm.LengthMismatchError):
        jxm.GaussianTerm([1.0], [1.0], [1.0], [1.0, 2.0], [1.0], [1.0], [1.0])


def test_non_integer_exponent():
    with pytest.raises(jxm.NonIntegerExponentError, match="Non-integer entry in l"):
        jxm.PowerTerm([1.0], [1.0], [1.0], [1.5])
    with pytest.raises(jxm.NonIntegerExponentError):
        jxm.Lemmon2005Term([1.0], [1.0], [1.0], [1.0], [0.5])
    with pytest.raises(jxm.NonIntegerExponentError):
        jxm.ExponentialTerm([1.0], [1.0], [1.0], [1.0], [2.25])


def test_non_numeric_coefficients():
    with pytest.raises(jxm.SchemaError):
        jxm.PowerTerm(["a", 1.0])
    with pytest.raises(jxm.SchemaError):
        jxm.PowerTerm([True])


def test_validation_errors_are_value_errors():
    with pytest.raises(ValueError):
        jxm.PowerTerm([1.0], [1.0], [1.0], [0.5])


# ------------------------------------------------------------------------------------ #
# Generic scalar types
# ------------------------------------------------------------------------------------ #

TERMS = {
    "power": jxm.PowerTerm([0.5, -0.2], [0.5, 1.5], [1, 2], [0, 1]),
    "gaussian": jxm.GaussianTerm([0.05], [1.0], [2], [1.0], [1.2], [1.1], [0.9]),
    "gerg": jxm.GERG2004Term([0.02], [1.5], [3], [1.0], [0.5], [0.5], [0.5]),
    "exponential": jxm.ExponentialTerm([-0.1], [2.0], [1], [0.8], [2]),
    "lemmon2005": jxm.Lemmon2005Term([-0.1], [2.0], [2], [1.5], [1]),
    "gaob": jxm.GaoBTerm([-0.6], [1.0], [1], [-1.0], [-1.7], [1.3], [0.9], [1.2]),
    "nonanalytic": jxm.NonAnalyticTerm([-0.15], [0.32], [0.2], [28.0], [700.0], [3.5], [0.85], [0.2]),
}


@pytest.mark.parametrize("name", TERMS.keys())
def test_complex_step_matches_autodiff(name):
    """The same code path evaluates complex and traced inputs."""
    term = TERMS[name]
    tau, delta, h = 0.95, 1.15, 1e-20

    dtau_cs = float(np.imag(term.alphar(tau + 1j * h, delta)) / h)
    ddelta_cs = float(np.imag(term.alphar(tau, delta + 1j * h)) / h)
    dtau_ad, ddelta_ad = jax.grad(term.alphar, argnums=(0, 1))(tau, delta)

    assert np.isclose(dtau_cs, float(dtau_ad), rtol=1e-10, atol=1e-14)
    assert np.isclose(ddelta_cs, float(ddelta_ad), rtol=1e-10, atol=1e-14)


if __name__ == "__main__":

    # Running pytest from this script
    pytest.main([__file__, "-v"])
