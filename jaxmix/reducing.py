r"""
Reducing functions of multi-fluid mixture models.

A reducing function maps the mole fractions of a mixture to its reducing
temperature :math:`T_r(x)` and reducing molar density :math:`\rho_r(x)`.
Two families are implemented:

- `MultiFluidReducingFunction`, the GERG-2004/2008 mixing rule with
  :math:`\beta`/:math:`\gamma` parameters
- `MultiFluidInvariantReducingFunction`, the invariant mixing rule with
  :math:`\phi`/:math:`\lambda` parameters

The parameter matrices are plain N x N arrays. The opposite triangle is
written explicitly when the matrices are built: gamma and phi are symmetric,
beta is reciprocal (``beta[j, i] = 1/beta[i, j]``) and lambda is
antisymmetric (``lambda[j, i] = -lambda[i, j]``).
"""

import logging
import numpy as np
import jax.numpy as jnp
import equinox as eqx

from .exceptions import BinaryPairNotFoundError, SchemaError
from .helpers_props import ESTIMATED_BIP
from .utils import get_float, get_required
from . import data_sources

logger = logging.getLogger(__name__)


def _cross_volume(vc_i, vc_j):
    return 1.0 / 8.0 * (np.cbrt(vc_i) + np.cbrt(vc_j)) ** 3


class MultiFluidReducingFunction(eqx.Module):
    r"""
    Reducing function of the GERG-2004/2008 mixing rule

    For a generic reducing property :math:`Y` (temperature or molar volume):

    .. math::
        Y(x) = \sum_i x_i^2 Y_{c,i}
        + \sum_{i<j} \frac{2 x_i x_j (x_i + x_j)}{\beta_{ij}^2 x_i + x_j} Y_{ij}

    with the cross values computed once at construction

    .. math::
        Y_{T,ij} = \beta_{T,ij} \gamma_{T,ij} \sqrt{T_{c,i} T_{c,j}} \\
        Y_{v,ij} = \frac{1}{8} \beta_{v,ij} \gamma_{v,ij} \left(v_{c,i}^{1/3} + v_{c,j}^{1/3}\right)^3

    Parameters
    ----------
    betaT, gammaT, betaV, gammaV : array_like
        N x N binary interaction parameter matrices.
    Tc : array_like
        Critical (reducing) temperatures of the pure components [K].
    vc : array_like
        Critical (reducing) molar volumes of the pure components [m³/mol].
    """

    betaT: jnp.ndarray
    gammaT: jnp.ndarray
    betaV: jnp.ndarray
    gammaV: jnp.ndarray
    Tc: jnp.ndarray
    vc: jnp.ndarray
    YT: jnp.ndarray
    Yv: jnp.ndarray
    upper_i: jnp.ndarray
    upper_j: jnp.ndarray

    def __init__(self, betaT, gammaT, betaV, gammaV, Tc, vc):
        betaT, gammaT = np.asarray(betaT, dtype=float), np.asarray(gammaT, dtype=float)
        betaV, gammaV = np.asarray(betaV, dtype=float), np.asarray(gammaV, dtype=float)
        Tc, vc = np.atleast_1d(np.asarray(Tc, dtype=float)), np.atleast_1d(np.asarray(vc, dtype=float))

        N = Tc.size
        YT = np.zeros((N, N))
        Yv = np.zeros((N, N))
        for i in range(N):
            for j in range(i + 1, N):
                YT[i, j] = betaT[i, j] * gammaT[i, j] * np.sqrt(Tc[i] * Tc[j])
                YT[j, i] = betaT[j, i] * gammaT[j, i] * np.sqrt(Tc[i] * Tc[j])
                Yv[i, j] = betaV[i, j] * gammaV[i, j] * _cross_volume(vc[i], vc[j])
                Yv[j, i] = betaV[j, i] * gammaV[j, i] * _cross_volume(vc[i], vc[j])

        upper_i, upper_j = np.triu_indices(N, k=1)

        self.betaT = jnp.asarray(betaT)
        self.gammaT = jnp.asarray(gammaT)
        self.betaV = jnp.asarray(betaV)
        self.gammaV = jnp.asarray(gammaV)
        self.Tc = jnp.asarray(Tc)
        self.vc = jnp.asarray(vc)
        self.YT = jnp.asarray(YT)
        self.Yv = jnp.asarray(Yv)
        self.upper_i = jnp.asarray(upper_i)
        self.upper_j = jnp.asarray(upper_j)

    def Y(self, z, Yc, beta, Yij):
        z = jnp.asarray(z)
        sum1 = jnp.sum(z**2 * Yc)

        zi = z[self.upper_i]
        zj = z[self.upper_j]
        beta_ij = beta[self.upper_i, self.upper_j]
        Y_ij = Yij[self.upper_i, self.upper_j]

        # Pairs of absent components contribute zero instead of 0/0
        denominator = beta_ij**2 * zi + zj
        denominator = jnp.where(denominator == 0.0, 1.0, denominator)
        sum2 = jnp.sum(2.0 * zi * zj * (zi + zj) / denominator * Y_ij)

        return sum1 + sum2

    def get_Tr(self, molefracs):
        return self.Y(molefracs, self.Tc, self.betaT, self.YT)

    def get_rhor(self, molefracs):
        return 1.0 / self.Y(molefracs, self.vc, self.betaV, self.Yv)

    # ------------------------------------------------------------------ #
    # Construction from parameter tables
    # ------------------------------------------------------------------ #

    @staticmethod
    def get_BIPdep(collection, components, flags=None):
        """
        Find the binary interaction record of a pair of components.

        Names are compared case-insensitively and in either order. When no
        record matches and ``flags["estimate"]`` is set, default parameters
        (betas and gammas of one, ``F = 0``, no departure function) are
        returned instead.

        Parameters
        ----------
        collection : list of dict
            Binary interaction records with ``Name1`` and ``Name2`` entries.
        components : sequence of str
            The two component names.
        flags : dict, optional
            Builder flags.

        Returns
        -------
        dict
            The matching record (or the estimated defaults).

        Raises
        ------
        BinaryPairNotFoundError
            If no record matches and estimation is not enabled.
        """
        comp0, comp1 = (str(c).upper() for c in components[:2])
        for el in collection:
            name1 = str(get_required(el, "Name1", "binary interaction record")).upper()
            name2 = str(get_required(el, "Name2", "binary interaction record")).upper()
            if (comp0, comp1) in ((name1, name2), (name2, name1)):
                logger.debug("Binary interaction record found for %s/%s", *components[:2])
                return el

        if flags and flags.get("estimate", False):
            logger.debug("No binary data for %s/%s, using estimated parameters", *components[:2])
            return dict(ESTIMATED_BIP)

        raise BinaryPairNotFoundError(f"Can't match this binary pair: {components[0]}/{components[1]}")

    @staticmethod
    def get_binary_interaction_double(collection, components, flags=None):
        """
        Return ``(betaT, gammaT, betaV, gammaV)`` for a pair in the order given.

        The betas of a record stored in the reverse order of `components` are
        inverted.
        """
        el = MultiFluidReducingFunction.get_BIPdep(collection, components, flags)
        context = f"binary interaction record {components[0]}/{components[1]}"
        betaT = get_float(el, "betaT", context)
        gammaT = get_float(el, "gammaT", context)
        betaV = get_float(el, "betaV", context)
        gammaV = get_float(el, "gammaV", context)

        # Backwards order of components, flip beta values
        name1 = str(el.get("Name1", "")).upper()
        name2 = str(el.get("Name2", "")).upper()
        comp0, comp1 = (str(c).upper() for c in components[:2])
        if name1 != name2 and comp0 == name2 and comp1 == name1:
            betaT = 1.0 / betaT
            betaV = 1.0 / betaV

        return betaT, gammaT, betaV, gammaV

    @staticmethod
    def get_BIP_matrices(collection, components, flags=None):
        """
        Build the N x N ``betaT, gammaT, betaV, gammaV`` matrices of a mixture.

        The upper triangle holds the values of each pair in component order;
        the lower triangle is filled with the reciprocal betas and the mirrored
        gammas. Diagonal entries are one.
        """
        N = len(components)
        betaT, gammaT = np.ones((N, N)), np.ones((N, N))
        betaV, gammaV = np.ones((N, N)), np.ones((N, N))
        for i in range(N):
            for j in range(i + 1, N):
                betaT_, gammaT_, betaV_, gammaV_ = MultiFluidReducingFunction.get_binary_interaction_double(
                    collection, [components[i], components[j]], flags
                )
                betaT[i, j] = betaT_
                betaT[j, i] = 1.0 / betaT[i, j]
                gammaT[i, j] = gammaT_
                gammaT[j, i] = gammaT[i, j]
                betaV[i, j] = betaV_
                betaV[j, i] = 1.0 / betaV[i, j]
                gammaV[i, j] = gammaV_
                gammaV[j, i] = gammaV[i, j]
        return betaT, gammaT, betaV, gammaV

    @staticmethod
    def get_Tcvc_from_json(fluids, names=None):
        """Return arrays of reducing temperatures and molar volumes from pure-fluid records."""
        names = names or [None] * len(fluids)
        Tc = np.empty(len(fluids))
        vc = np.empty(len(fluids))
        for i, (fluid, name) in enumerate(zip(fluids, names)):
            eos = data_sources.get_EOS_record(fluid, name)
            context = f"reducing state of fluid '{name}'" if name else "reducing state"
            try:
                red = eos["STATES"]["reducing"]
            except (KeyError, TypeError) as exc:
                raise SchemaError(f"Missing {context}") from exc
            Tc[i] = get_float(red, "T", context)
            vc[i] = 1.0 / get_float(red, "rhomolar", context)
        return Tc, vc

    @staticmethod
    def get_Tcvc(coolprop_root, components):
        """Read reducing temperatures and molar volumes from the fluid files of `components`."""
        fluids = [data_sources.load_fluid_json(coolprop_root, c) for c in components]
        return MultiFluidReducingFunction.get_Tcvc_from_json(fluids, list(components))

    @staticmethod
    def get_F_matrix(collection, components, flags=None):
        """Build the symmetric N x N matrix of departure interaction factors ``F``."""
        N = len(components)
        F = np.zeros((N, N))
        for i in range(N):
            for j in range(i + 1, N):
                el = MultiFluidReducingFunction.get_BIPdep(collection, [components[i], components[j]], flags)
                if el:
                    F[i, j] = get_float(el, "F", f"binary interaction record {components[i]}/{components[j]}")
                    F[j, i] = F[i, j]
        return F


class MultiFluidInvariantReducingFunction(eqx.Module):
    r"""
    Reducing function of the invariant mixing rule

    .. math::
        Y(x) = \sum_i \sum_j x_i x_j \left(\phi_{ij} + x_j \lambda_{ij}\right) Y_{ij}

    with :math:`Y_{T,ij} = \sqrt{T_{c,i} T_{c,j}}` and
    :math:`Y_{v,ij} = \frac{1}{8}\left(v_{c,i}^{1/3} + v_{c,j}^{1/3}\right)^3`.
    The pair weighting is carried by the symmetric :math:`\phi` and the
    antisymmetric :math:`\lambda` matrices.

    Parameters
    ----------
    phiT, lambdaT, phiV, lambdaV : array_like
        N x N parameter matrices.
    Tc, vc : array_like
        Reducing temperatures [K] and molar volumes [m³/mol] of the components.
    """

    phiT: jnp.ndarray
    lambdaT: jnp.ndarray
    phiV: jnp.ndarray
    lambdaV: jnp.ndarray
    Tc: jnp.ndarray
    vc: jnp.ndarray
    YT: jnp.ndarray
    Yv: jnp.ndarray

    def __init__(self, phiT, lambdaT, phiV, lambdaV, Tc, vc):
        Tc, vc = np.atleast_1d(np.asarray(Tc, dtype=float)), np.atleast_1d(np.asarray(vc, dtype=float))

        YT = np.sqrt(np.outer(Tc, Tc))
        Yv = _cross_volume(vc[:, None], vc[None, :])

        self.phiT = jnp.asarray(phiT, dtype=jnp.float64)
        self.lambdaT = jnp.asarray(lambdaT, dtype=jnp.float64)
        self.phiV = jnp.asarray(phiV, dtype=jnp.float64)
        self.lambdaV = jnp.asarray(lambdaV, dtype=jnp.float64)
        self.Tc = jnp.asarray(Tc)
        self.vc = jnp.asarray(vc)
        self.YT = jnp.asarray(YT)
        self.Yv = jnp.asarray(Yv)

    def Y(self, z, phi, lambda_, Yij):
        z = jnp.asarray(z)
        zi = z[:, None]
        zj = z[None, :]
        return jnp.sum(zi * zj * (phi + zj * lambda_) * Yij)

    def get_Tr(self, molefracs):
        return self.Y(molefracs, self.phiT, self.lambdaT, self.YT)

    def get_rhor(self, molefracs):
        return 1.0 / self.Y(molefracs, self.phiV, self.lambdaV, self.Yv)
