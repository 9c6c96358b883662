import jax.numpy as jnp
import equinox as eqx


class CorrespondingStatesContribution(eqx.Module):
    r"""
    Mole-fraction weighted sum of the pure-fluid residual Helmholtz energies

    .. math::
        \alpha^r_{\mathrm{CS}}(\tau, \delta, x) = \sum_i x_i \, \alpha^r_{0i}(\tau, \delta)

    Each pure-fluid term container is evaluated at the reduced variables of the
    mixture, not at those of the pure component.

    Parameters
    ----------
    EOSs : sequence
        One term container (anything with ``alphar(tau, delta)``) per component.
    """

    EOSs: tuple

    def __init__(self, EOSs):
        self.EOSs = tuple(EOSs)

    def alphar(self, tau, delta, molefracs):
        result = 0.0
        for i, eos in enumerate(self.EOSs):
            result = result + molefracs[i] * eos.alphar(tau, delta)
        return result

    def alphari(self, tau, delta, i):
        """Contribution of component `i`, without the mole-fraction weighting."""
        return self.EOSs[i].alphar(tau, delta)

    def get_EOS(self, i):
        return self.EOSs[i]


class DepartureContribution(eqx.Module):
    r"""
    Pairwise departure contribution of the mixture

    .. math::
        \Delta\alpha^r(\tau, \delta, x) = \sum_{i<j} x_i x_j F_{ij} \, \alpha^r_{ij}(\tau, \delta)

    Every unordered pair is counted once.

    Parameters
    ----------
    F : array_like
        Symmetric N x N matrix of interaction factors.
    funcs : sequence of sequences
        N x N nested sequence of departure functions (anything with
        ``alphar(tau, delta)``). Only the upper triangle is evaluated.
    """

    F: jnp.ndarray
    funcs: tuple
    pairs: tuple = eqx.field(static=True)

    def __init__(self, F, funcs):
        self.F = jnp.asarray(F, dtype=jnp.float64)
        self.funcs = tuple(tuple(row) for row in funcs)
        N = len(self.funcs)
        self.pairs = tuple((i, j) for i in range(N) for j in range(i + 1, N))

    def alphar(self, tau, delta, molefracs):
        result = 0.0
        for i, j in self.pairs:
            result = result + molefracs[i] * molefracs[j] * self.F[i, j] * self.funcs[i][j].alphar(tau, delta)
        return result

    def get_F(self, i, j):
        return self.F[i, j]
