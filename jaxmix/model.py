import dataclasses
import jax.numpy as jnp
import equinox as eqx

from .helpers_props import GAS_CONSTANT, ReducedState
from .contributions import CorrespondingStatesContribution, DepartureContribution


class AbstractMultiFluid(eqx.Module):
    r"""
    Common evaluation interface of multi-fluid mixture models.

    Concrete models provide a reducing function ``redfunc``, a
    corresponding-states contribution ``corr`` and a departure contribution
    ``dep``. The reduced residual Helmholtz energy of the mixture is

    .. math::
        \alpha^r(T, \rho, x) = \alpha^r_{\mathrm{CS}}(\tau, \delta, x) + \Delta\alpha^r(\tau, \delta, x)

    with :math:`\tau = T_r(x)/T` and :math:`\delta = \rho/\rho_r(x)`.

    Models are immutable pytrees. Evaluation never modifies the model and can
    be wrapped in ``jax.grad``, ``jax.vmap`` or ``eqx.filter_jit``.
    """

    def alphar(self, T, rho, molefrac):
        """
        Reduced residual Helmholtz energy of the mixture.

        Parameters
        ----------
        T : scalar
            Temperature [K].
        rho : scalar
            Molar density [mol/m³].
        molefrac : array_like
            Mole fractions of the components.

        Returns
        -------
        scalar
            :math:`\alpha^r` with the dtype of the inputs (float, complex or traced).
        """
        molefrac = jnp.asarray(molefrac)
        tau, delta = self.get_reduced_variables(T, rho, molefrac)
        return self.corr.alphar(tau, delta, molefrac) + self.dep.alphar(tau, delta, molefrac)

    def alphar_rhovec(self, T, rhovec, rhotot=None):
        """
        Reduced residual Helmholtz energy from the molar densities of the components.

        The total density defaults to the sum of `rhovec` and the mole
        fractions are ``rhovec / rhotot``.
        """
        rhovec = jnp.asarray(rhovec)
        if rhotot is None:
            rhotot = jnp.sum(rhovec)
        molefrac = rhovec / rhotot
        return self.alphar(T, rhotot, molefrac)

    def get_reduced_variables(self, T, rho, molefrac):
        """Return ``(tau, delta)`` of the mixture at the given state."""
        Tred = self.redfunc.get_Tr(molefrac)
        rhored = self.redfunc.get_rhor(molefrac)
        return Tred / T, rho / rhored

    def get_reducing_state(self, T, rho, molefrac, identifier=None):
        """
        Evaluate the model and collect the intermediate quantities.

        Returns
        -------
        ReducedState
            Reducing temperature and density, reduced variables, and the
            corresponding-states and departure parts of :math:`\alpha^r`.
        """
        molefrac = jnp.asarray(molefrac)
        Tred = self.redfunc.get_Tr(molefrac)
        rhored = self.redfunc.get_rhor(molefrac)
        tau = Tred / T
        delta = rho / rhored
        alphar_corr = self.corr.alphar(tau, delta, molefrac)
        alphar_dep = self.dep.alphar(tau, delta, molefrac)
        return ReducedState(
            identifier=identifier,
            temperature=jnp.asarray(T),
            density=jnp.asarray(rho),
            reducing_temperature=Tred,
            reducing_density=rhored,
            tau=tau,
            delta=delta,
            alphar=alphar_corr + alphar_dep,
            alphar_corresponding_states=alphar_corr,
            alphar_departure=alphar_dep,
        )

    def R(self, molefrac):
        """Molar gas constant [J/(mol K)], identical for every composition."""
        return GAS_CONSTANT

    def get_meta(self):
        """Return the metadata string attached to the model."""
        return self.meta

    def set_meta(self, meta):
        """Return a copy of the model carrying the metadata string `meta`."""
        return dataclasses.replace(self, meta=str(meta))


class MultiFluid(AbstractMultiFluid):
    """
    Multi-fluid mixture model.

    Parameters
    ----------
    redfunc : MultiFluidReducingFunction or MultiFluidInvariantReducingFunction
        Reducing function of the mixture.
    corr : CorrespondingStatesContribution
        Pure-fluid residual contributions.
    dep : DepartureContribution
        Pairwise departure contribution.
    meta : str, optional
        Free-form metadata, e.g. the JSON document used to build the model.
    """

    redfunc: eqx.Module
    corr: CorrespondingStatesContribution
    dep: DepartureContribution
    meta: str = eqx.field(static=True, default="")


class MultiFluidAdapter(AbstractMultiFluid):
    """
    Mixture model that reuses the pure-fluid part of a base model.

    The corresponding-states contribution (components, their Tc, vc and pure
    EOS terms) is read from `base`, which is never modified. The reducing
    function and the departure contribution are owned by the adapter.
    """

    base: AbstractMultiFluid
    redfunc: eqx.Module
    dep: DepartureContribution
    meta: str = eqx.field(static=True, default="")

    @property
    def corr(self):
        return self.base.corr

    def R(self, molefrac):
        return self.base.R(molefrac)


# ------------------------------------------------------------------------------------ #
# Placeholder model used to check the composition logic
# ------------------------------------------------------------------------------------ #

class DummyEOS(eqx.Module):
    """Residual term equal to ``tau * delta``."""

    def alphar(self, tau, delta):
        return tau * delta


class DummyReducingFunction(eqx.Module):
    """Reducing function returning the first mole fraction for both Tr and rhor."""

    def get_Tr(self, molefracs):
        return molefracs[0]

    def get_rhor(self, molefracs):
        return molefracs[0]


def build_dummy_multifluid_model(components):
    """
    Build a model with ``tau * delta`` pure terms, no departure (``F = 0``) and
    the dummy reducing function, one entry per name in `components`.
    """
    N = len(components)
    EOSs = [DummyEOS() for _ in range(N)]
    funcs = [[DummyEOS() for _ in range(N)] for _ in range(N)]
    F = jnp.zeros((N, N))
    return MultiFluid(
        redfunc=DummyReducingFunction(),
        corr=CorrespondingStatesContribution(EOSs),
        dep=DepartureContribution(F, funcs),
    )
