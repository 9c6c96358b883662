from typing import ClassVar

import jax.numpy as jnp
import equinox as eqx

from .exceptions import UnknownTermTypeError
from .eos_terms import (
    PowerTerm,
    GaussianTerm,
    NonAnalyticTerm,
    Lemmon2005Term,
    GaoBTerm,
    ExponentialTerm,
    GERG2004Term,
    NullTerm,
)


class TermContainer(eqx.Module):
    """
    Ordered collection of residual Helmholtz terms whose contributions are summed.

    Subclasses fix the closed set of term kinds they accept through
    ``allowed_types``. Containers are immutable: ``add_term`` returns a new
    container. An empty container contributes zero.
    """

    terms: tuple
    allowed_types: ClassVar[tuple] = ()

    def __init__(self, terms=()):
        terms = tuple(terms)
        for term in terms:
            if not isinstance(term, self.allowed_types):
                allowed = ", ".join(cls.__name__ for cls in self.allowed_types)
                raise UnknownTermTypeError(
                    f"{type(self).__name__} cannot hold a {type(term).__name__}; "
                    f"allowed types are: {{{allowed}}}"
                )
        self.terms = terms

    def add_term(self, term):
        """Return a new container with `term` appended."""
        return type(self)(self.terms + (term,))

    def alphar(self, tau, delta):
        if not self.terms:
            return jnp.zeros_like(tau * delta)
        result = self.terms[0].alphar(tau, delta)
        for term in self.terms[1:]:
            result = result + term.alphar(tau, delta)
        return result

    def __len__(self):
        return len(self.terms)

    def __getitem__(self, index):
        return self.terms[index]

    def __iter__(self):
        return iter(self.terms)


class EOSTerms(TermContainer):
    """Residual part of a pure-fluid equation of state."""

    allowed_types: ClassVar[tuple] = (
        PowerTerm,
        GaussianTerm,
        NonAnalyticTerm,
        Lemmon2005Term,
        GaoBTerm,
        ExponentialTerm,
    )


class DepartureTerms(TermContainer):
    """Departure function of one binary pair."""

    allowed_types: ClassVar[tuple] = (
        PowerTerm,
        GaussianTerm,
        GERG2004Term,
        NullTerm,
    )
