r"""
Closed-form terms of the residual Helmholtz energy.

Every term is an immutable equinox module holding equal-length coefficient
arrays and exposing ``alphar(tau, delta)``, the contribution of the term to the
reduced residual Helmholtz energy at reciprocal reduced temperature
:math:`\tau` and reduced density :math:`\delta`.

The terms are written with ``jax.numpy`` only, in the
:math:`n\,\exp(t \ln\tau + d \ln\delta + \dots)` form, so the same code accepts
real numbers, complex numbers (complex-step derivatives) and JAX tracers
(``jax.grad``, ``jax.jit``, ``jax.vmap``).

Coefficient arrays are validated when a term is constructed:

- all arrays of one term must have the same length (``LengthMismatchError``)
- the ``l`` exponents must be exact integers (``NonIntegerExponentError``)
"""

import numpy as np
import jax.numpy as jnp
import equinox as eqx

from .exceptions import SchemaError, LengthMismatchError, NonIntegerExponentError
from .utils import is_numeric


# ----------------------------------------------------------------------------- #
# Construction-time helpers
# ----------------------------------------------------------------------------- #

def as_coefficients(values, name, label):
    """Convert a list of numbers from a parameter table into a 1-D float64 array."""
    values = np.atleast_1d(np.asarray(values, dtype=object))
    if values.ndim != 1 or not all(is_numeric(v) for v in values):
        raise SchemaError(f"Coefficient array '{name}' of {label} term must be a list of numbers")
    return values.astype(np.float64)


def zeros_or_coefficients(values, size, name, label):
    """Return the coefficients, or zeros of the given size when the entry is absent or empty."""
    if values is None or len(np.atleast_1d(values)) == 0:
        return np.zeros(size)
    return as_coefficients(values, name, label)


def check_same_length(label, **arrays):
    """Raise LengthMismatchError unless all coefficient arrays have the same length."""
    lengths = {name: len(arr) for name, arr in arrays.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={size}" for name, size in lengths.items())
        raise LengthMismatchError(f"Lengths are not all identical in {label} term ({detail})")


def check_integer_exponents(l, label):
    """Return ``l`` cast to integers, raising NonIntegerExponentError for fractional entries."""
    l_i = l.astype(np.int64)
    if np.any(np.abs(l_i - l) > 0.0):
        raise NonIntegerExponentError(f"Non-integer entry in l found in {label} term: {l.tolist()}")
    return l_i


# ----------------------------------------------------------------------------- #
# Term evaluators
# ----------------------------------------------------------------------------- #

class PowerTerm(eqx.Module):
    r"""
    Polynomial and exponential terms

    .. math::
        \alpha^r = \sum_k n_k \delta^{d_k} \tau^{t_k} \exp(-c_k \delta^{l_k})

    with :math:`c_k = 1` if :math:`l_k > 0` and zero otherwise. The ``c``
    array is derived from ``l`` and is never read from the input. Missing
    ``t``, ``d`` or ``l`` arrays default to zeros.
    """

    n: jnp.ndarray
    t: jnp.ndarray
    d: jnp.ndarray
    c: jnp.ndarray
    l: jnp.ndarray
    l_i: jnp.ndarray

    def __init__(self, n, t=None, d=None, l=None):
        label = "power"
        n = as_coefficients(n, "n", label)
        t = zeros_or_coefficients(t, n.size, "t", label)
        d = zeros_or_coefficients(d, n.size, "d", label)
        l = zeros_or_coefficients(l, n.size, "l", label)
        check_same_length(label, n=n, t=t, d=d, l=l)
        l_i = check_integer_exponents(l, label)

        self.n = jnp.asarray(n)
        self.t = jnp.asarray(t)
        self.d = jnp.asarray(d)
        self.c = jnp.asarray((l > 0).astype(np.float64))
        self.l = jnp.asarray(l)
        self.l_i = jnp.asarray(l_i)

    def alphar(self, tau, delta):
        lntau = jnp.log(tau)
        lndelta = jnp.log(delta)
        exponent = self.t * lntau + self.d * lndelta - self.c * jnp.power(delta, self.l_i)
        return jnp.sum(self.n * jnp.exp(exponent))


class GaussianTerm(eqx.Module):
    r"""
    Gaussian bell-shaped terms

    .. math::
        \alpha^r = \sum_k n_k \delta^{d_k} \tau^{t_k}
        \exp\left(-\eta_k(\delta-\varepsilon_k)^2 - \beta_k(\tau-\gamma_k)^2\right)
    """

    n: jnp.ndarray
    t: jnp.ndarray
    d: jnp.ndarray
    eta: jnp.ndarray
    beta: jnp.ndarray
    gamma: jnp.ndarray
    epsilon: jnp.ndarray

    def __init__(self, n, t, d, eta, beta, gamma, epsilon):
        label = "Gaussian"
        arrays = {
            name: as_coefficients(values, name, label)
            for name, values in dict(
                n=n, t=t, d=d, eta=eta, beta=beta, gamma=gamma, epsilon=epsilon
            ).items()
        }
        check_same_length(label, **arrays)
        for name, arr in arrays.items():
            setattr(self, name, jnp.asarray(arr))

    def alphar(self, tau, delta):
        lntau = jnp.log(tau)
        lndelta = jnp.log(delta)
        exponent = (
            self.t * lntau
            + self.d * lndelta
            - self.eta * (delta - self.epsilon) ** 2
            - self.beta * (tau - self.gamma) ** 2
        )
        return jnp.sum(self.n * jnp.exp(exponent))


class GERG2004Term(eqx.Module):
    r"""
    Exponential part of the GERG-2004/GERG-2008 departure functions

    .. math::
        \alpha^r = \sum_k n_k \delta^{d_k} \tau^{t_k}
        \exp\left(-\eta_k(\delta-\varepsilon_k)^2 - \beta_k(\delta-\gamma_k)\right)
    """

    n: jnp.ndarray
    t: jnp.ndarray
    d: jnp.ndarray
    eta: jnp.ndarray
    beta: jnp.ndarray
    gamma: jnp.ndarray
    epsilon: jnp.ndarray

    def __init__(self, n, t, d, eta, beta, gamma, epsilon):
        label = "GERG"
        arrays = {
            name: as_coefficients(values, name, label)
            for name, values in dict(
                n=n, t=t, d=d, eta=eta, beta=beta, gamma=gamma, epsilon=epsilon
            ).items()
        }
        check_same_length(label, **arrays)
        for name, arr in arrays.items():
            setattr(self, name, jnp.asarray(arr))

    def alphar(self, tau, delta):
        lntau = jnp.log(tau)
        lndelta = jnp.log(delta)
        exponent = (
            self.t * lntau
            + self.d * lndelta
            - self.eta * (delta - self.epsilon) ** 2
            - self.beta * (delta - self.gamma)
        )
        return jnp.sum(self.n * jnp.exp(exponent))


class ExponentialTerm(eqx.Module):
    r"""
    Exponential terms with a density coefficient

    .. math::
        \alpha^r = \sum_k n_k \delta^{d_k} \tau^{t_k} \exp(-g_k \delta^{l_k})
    """

    n: jnp.ndarray
    t: jnp.ndarray
    d: jnp.ndarray
    g: jnp.ndarray
    l: jnp.ndarray
    l_i: jnp.ndarray

    def __init__(self, n, t, d, g, l):
        label = "exponential"
        n = as_coefficients(n, "n", label)
        t = as_coefficients(t, "t", label)
        d = as_coefficients(d, "d", label)
        g = as_coefficients(g, "g", label)
        l = as_coefficients(l, "l", label)
        check_same_length(label, n=n, t=t, d=d, g=g, l=l)
        l_i = check_integer_exponents(l, label)

        self.n = jnp.asarray(n)
        self.t = jnp.asarray(t)
        self.d = jnp.asarray(d)
        self.g = jnp.asarray(g)
        self.l = jnp.asarray(l)
        self.l_i = jnp.asarray(l_i)

    def alphar(self, tau, delta):
        lntau = jnp.log(tau)
        lndelta = jnp.log(delta)
        exponent = self.t * lntau + self.d * lndelta - self.g * jnp.power(delta, self.l_i)
        return jnp.sum(self.n * jnp.exp(exponent))


class Lemmon2005Term(eqx.Module):
    r"""
    Terms of the Lemmon (2005) form with an exponential in temperature

    .. math::
        \alpha^r = \sum_k n_k \delta^{d_k} \tau^{t_k} \exp(-\delta^{l_k} - \tau^{m_k})

    The :math:`\delta^{l_k}` factor is dropped when :math:`l_k = 0` and the
    :math:`\tau^{m_k}` factor is dropped when :math:`m_k = 0`.
    """

    n: jnp.ndarray
    t: jnp.ndarray
    d: jnp.ndarray
    m: jnp.ndarray
    l: jnp.ndarray
    l_i: jnp.ndarray
    cl: jnp.ndarray
    cm: jnp.ndarray

    def __init__(self, n, t, d, m, l):
        label = "Lemmon2005"
        n = as_coefficients(n, "n", label)
        t = as_coefficients(t, "t", label)
        d = as_coefficients(d, "d", label)
        m = as_coefficients(m, "m", label)
        l = as_coefficients(l, "l", label)
        check_same_length(label, n=n, t=t, d=d, m=m, l=l)
        l_i = check_integer_exponents(l, label)

        self.n = jnp.asarray(n)
        self.t = jnp.asarray(t)
        self.d = jnp.asarray(d)
        self.m = jnp.asarray(m)
        self.l = jnp.asarray(l)
        self.l_i = jnp.asarray(l_i)
        self.cl = jnp.asarray((l_i != 0).astype(np.float64))
        self.cm = jnp.asarray((m != 0).astype(np.float64))

    def alphar(self, tau, delta):
        lntau = jnp.log(tau)
        lndelta = jnp.log(delta)
        exponent = (
            self.t * lntau
            + self.d * lndelta
            - self.cl * jnp.power(delta, self.l_i)
            - self.cm * jnp.power(tau, self.m)
        )
        return jnp.sum(self.n * jnp.exp(exponent))


class GaoBTerm(eqx.Module):
    r"""
    Terms of the Gao et al. (2020) ammonia equation of state

    .. math::
        \alpha^r = \sum_k n_k \delta^{d_k} \tau^{t_k}
        \exp\left(-\eta_k(\delta-\varepsilon_k)^2 + \frac{1}{\beta_k(\tau-\gamma_k)^2 + b_k}\right)

    The stored ``eta`` is the negative of the tabulated value, so that the
    tabulated (negative) coefficients give a decaying Gaussian in density.
    """

    n: jnp.ndarray
    t: jnp.ndarray
    d: jnp.ndarray
    eta: jnp.ndarray
    beta: jnp.ndarray
    gamma: jnp.ndarray
    epsilon: jnp.ndarray
    b: jnp.ndarray

    def __init__(self, n, t, d, eta, beta, gamma, epsilon, b):
        label = "GaoB"
        arrays = {
            name: as_coefficients(values, name, label)
            for name, values in dict(
                n=n, t=t, d=d, eta=eta, beta=beta, gamma=gamma, epsilon=epsilon, b=b
            ).items()
        }
        check_same_length(label, **arrays)
        arrays["eta"] = -arrays["eta"]  # Sign flip of the tabulated value
        for name, arr in arrays.items():
            setattr(self, name, jnp.asarray(arr))

    def alphar(self, tau, delta):
        lntau = jnp.log(tau)
        lndelta = jnp.log(delta)
        exponent = (
            self.t * lntau
            + self.d * lndelta
            - self.eta * (delta - self.epsilon) ** 2
            + 1.0 / (self.beta * (tau - self.gamma) ** 2 + self.b)
        )
        return jnp.sum(self.n * jnp.exp(exponent))


class NonAnalyticTerm(eqx.Module):
    r"""
    Non-analytic terms describing the critical region (IAPWS-95, Span-Wagner CO2)

    .. math::
        \alpha^r = \sum_k n_k \Delta^{b_k} \delta \, \Psi

    with

    .. math::
        \theta = (1-\tau) + A_k \left((\delta-1)^2\right)^{1/(2\beta_k)} \\
        \Delta = \theta^2 + B_k \left((\delta-1)^2\right)^{a_k} \\
        \Psi = \exp\left(-C_k(\delta-1)^2 - D_k(\tau-1)^2\right)
    """

    n: jnp.ndarray
    A: jnp.ndarray
    B: jnp.ndarray
    C: jnp.ndarray
    D: jnp.ndarray
    a: jnp.ndarray
    b: jnp.ndarray
    beta: jnp.ndarray

    def __init__(self, n, A, B, C, D, a, b, beta):
        label = "nonanalytic"
        arrays = {
            name: as_coefficients(values, name, label)
            for name, values in dict(n=n, A=A, B=B, C=C, D=D, a=a, b=b, beta=beta).items()
        }
        check_same_length(label, **arrays)
        for name, arr in arrays.items():
            setattr(self, name, jnp.asarray(arr))

    def alphar(self, tau, delta):
        dm1_sq = (delta - 1.0) ** 2
        theta = (1.0 - tau) + self.A * dm1_sq ** (1.0 / (2.0 * self.beta))
        Delta = theta**2 + self.B * dm1_sq**self.a
        Psi = jnp.exp(-self.C * dm1_sq - self.D * (tau - 1.0) ** 2)
        return jnp.sum(self.n * Delta**self.b * delta * Psi)


class NullTerm(eqx.Module):
    """Placeholder term that always contributes zero."""

    def alphar(self, tau, delta):
        return jnp.zeros_like(tau * delta)
