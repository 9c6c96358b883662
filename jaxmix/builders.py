"""
Table-driven assembly of multi-fluid mixture models.

The builders read pure-fluid records, binary interaction collections and
departure-function collections (CoolProp schema), validate them and compose
the term containers, reducing function and contributions of a model. Every
check runs before the model object is created, so a failing build never
returns a partially assembled model.
"""

import json
import logging
import numpy as np

from .exceptions import (
    SchemaError,
    UnknownTermTypeError,
    DepartureFunctionNotFoundError,
    MixtureSizeError,
)
from .helpers_props import PURE_TERM_TYPES, DEPARTURE_TYPES
from .utils import get_float, get_required
from .eos_terms import (
    PowerTerm,
    GaussianTerm,
    NonAnalyticTerm,
    Lemmon2005Term,
    GaoBTerm,
    ExponentialTerm,
    GERG2004Term,
    NullTerm,
    as_coefficients,
    check_same_length,
)
from .term_containers import EOSTerms, DepartureTerms
from .contributions import CorrespondingStatesContribution, DepartureContribution
from .reducing import MultiFluidReducingFunction, MultiFluidInvariantReducingFunction
from .model import MultiFluid, MultiFluidAdapter
from . import data_sources

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------------ #
# Pure-fluid equations of state
# ------------------------------------------------------------------------------------ #

def _coefficients(term, keys, label):
    return {key: get_required(term, key, f"{label} term") for key in keys}


def _build_power(term):
    return PowerTerm(term.get("n"), term.get("t"), term.get("d"), term.get("l"))


def _build_gaussian(term):
    return GaussianTerm(**_coefficients(term, ("n", "t", "d", "eta", "beta", "gamma", "epsilon"), "Gaussian"))


def _build_nonanalytic(term):
    return NonAnalyticTerm(**_coefficients(term, ("n", "A", "B", "C", "D", "a", "b", "beta"), "nonanalytic"))


def _build_lemmon2005(term):
    return Lemmon2005Term(**_coefficients(term, ("n", "t", "d", "m", "l"), "Lemmon2005"))


def _build_gaob(term):
    return GaoBTerm(**_coefficients(term, ("n", "t", "d", "eta", "beta", "gamma", "epsilon", "b"), "GaoB"))


def _build_exponential(term):
    return ExponentialTerm(**_coefficients(term, ("n", "t", "d", "g", "l"), "exponential"))


PURE_TERM_BUILDERS = {
    "ResidualHelmholtzPower": _build_power,
    "ResidualHelmholtzGaussian": _build_gaussian,
    "ResidualHelmholtzNonAnalytic": _build_nonanalytic,
    "ResidualHelmholtzLemmon2005": _build_lemmon2005,
    "ResidualHelmholtzGaoB": _build_gaob,
    "ResidualHelmholtzExponential": _build_exponential,
}


def build_EOS_terms(alphar):
    """
    Build the residual term container of a pure fluid.

    Parameters
    ----------
    alphar : list of dict
        The ``EOS[0]["alphar"]`` list of a fluid record. Each entry carries a
        ``type`` tag and the coefficient arrays of that term.

    Returns
    -------
    EOSTerms
        Container with one term per entry, in input order.

    Raises
    ------
    UnknownTermTypeError
        If any entry has a type tag outside the six supported ones. All tags
        are checked before any term is built.
    SchemaError
        If a coefficient array is missing, has the wrong length or holds
        non-integer ``l`` exponents.
    """
    if not isinstance(alphar, list):
        raise SchemaError("The 'alphar' entry of a fluid record must be a list of terms")

    for term in alphar:
        term_type = get_required(term, "type", "residual term")
        if term_type not in PURE_TERM_TYPES:
            raise UnknownTermTypeError(
                f"Bad type: {term_type}; allowed types are: {{{','.join(PURE_TERM_TYPES)}}}"
            )

    return EOSTerms(PURE_TERM_BUILDERS[term["type"]](term) for term in alphar)


def get_EOS_terms(coolprop_root, name):
    """Load the fluid file of `name` and build its residual term container."""
    fluid = data_sources.load_fluid_json(coolprop_root, name)
    eos = data_sources.get_EOS_record(fluid, name)
    return build_EOS_terms(get_required(eos, "alphar", f"equation of state of '{name}'"))


def get_EOSs(coolprop_root, names):
    return [get_EOS_terms(coolprop_root, name) for name in names]


# ------------------------------------------------------------------------------------ #
# Departure functions
# ------------------------------------------------------------------------------------ #

def _split_composite(j, label):
    """
    Split a composite departure function into its power head and its tail.

    Returns the power-term coefficients of the first ``Npower`` entries and a
    dict with the ``n, t, d, eta, beta, gamma, epsilon`` arrays of the
    remaining entries.
    """
    keys = ("n", "t", "d", "eta", "beta", "gamma", "epsilon")
    arrays = {key: as_coefficients(get_required(j, key, f"{label} departure function"), key, label) for key in keys}
    check_same_length(label, **arrays)

    N = arrays["n"].size
    Npower = get_required(j, "Npower", f"{label} departure function")
    if isinstance(Npower, bool) or not isinstance(Npower, (int, np.integer)) or not 0 <= Npower <= N:
        raise SchemaError(f"Npower of {label} departure function must be an integer between 0 and {N}. Received: {Npower!r}")

    if j.get("l") is not None and len(j["l"]) > 0:
        l_head = as_coefficients(j["l"], "l", label)[:Npower]
    else:
        l_head = np.zeros(Npower)

    head = PowerTerm(arrays["n"][:Npower], arrays["t"][:Npower], arrays["d"][:Npower], l_head)
    tail = {key: arr[Npower:] for key, arr in arrays.items()}
    return head, tail


def build_departure_function(j):
    """
    Build the departure term container of one binary pair.

    Parameters
    ----------
    j : dict
        Departure-function record with a ``type`` entry:

        - ``"Exponential"``: one power term from ``n, t, d`` and optional ``l``
        - ``"GERG-2004"`` / ``"GERG-2008"``: power terms for the first
          ``Npower`` entries and GERG exponential terms for the rest
        - ``"Gaussian+Exponential"``: power terms for the first ``Npower``
          entries and Gaussian terms for the rest
        - ``"none"``: a null term

    Returns
    -------
    DepartureTerms
    """
    dep_type = get_required(j, "type", "departure function")

    if dep_type == "Exponential":
        return DepartureTerms([_build_power(j)])

    if dep_type in ("GERG-2004", "GERG-2008"):
        head, tail = _split_composite(j, "GERG")
        return DepartureTerms([head, GERG2004Term(**tail)])

    if dep_type == "Gaussian+Exponential":
        head, tail = _split_composite(j, "Gaussian+Exponential")
        return DepartureTerms([head, GaussianTerm(**tail)])

    if dep_type == "none":
        return DepartureTerms([NullTerm()])

    raise UnknownTermTypeError(
        f"Bad departure term type: {dep_type}; allowed types are: {{{','.join(DEPARTURE_TYPES)}}}"
    )


def get_departure_json(depcollection, name):
    """Return the departure-function record named `name` (exact match on ``Name``)."""
    for el in depcollection:
        if el.get("Name") == name:
            return el
    raise DepartureFunctionNotFoundError(f"No departure function named '{name}' in the collection")


def build_departure_function_matrix(depcollection, BIPcollection, components, flags=None):
    """
    Build the N x N nested list of departure term containers of a mixture.

    Pairs whose interaction record has no ``function`` entry (or an empty one)
    and all diagonal entries get a null departure.
    """
    N = len(components)
    funcs = [[None] * N for _ in range(N)]
    for i in range(N):
        funcs[i][i] = DepartureTerms([NullTerm()])
        for j in range(i + 1, N):
            BIP = MultiFluidReducingFunction.get_BIPdep(BIPcollection, [components[i], components[j]], flags)
            funcname = BIP.get("function") or ""
            if funcname:
                dep = build_departure_function(get_departure_json(depcollection, funcname))
                logger.debug("Departure function '%s' used for %s/%s", funcname, components[i], components[j])
            else:
                dep = DepartureTerms([NullTerm()])
            funcs[i][j] = dep
            funcs[j][i] = dep
    return funcs


def get_departure_function_matrix(coolprop_root, BIPcollection, components, flags=None):
    """Load the departure collection of the fluid library and build the departure matrix."""
    depcollection = data_sources.load_departure_collection(coolprop_root)
    return build_departure_function_matrix(depcollection, BIPcollection, components, flags)


# ------------------------------------------------------------------------------------ #
# Mixture models
# ------------------------------------------------------------------------------------ #

def build_multifluid_model_from_json(components, fluids, BIPcollection, depcollection, flags=None):
    """
    Assemble a multi-fluid model from parameter records already in memory.

    Parameters
    ----------
    components : sequence of str
        Component names, used to look up the binary interaction records.
    fluids : sequence of dict
        One pure-fluid record per component, in the same order.
    BIPcollection : list of dict
        Binary interaction records.
    depcollection : list of dict
        Departure-function records.
    flags : dict, optional
        Builder flags. ``{"estimate": True}`` replaces missing binary
        interaction records by default parameters.

    Returns
    -------
    MultiFluid
    """
    components = list(components)
    fluids = list(fluids)
    if len(fluids) != len(components):
        raise SchemaError(f"Expected one fluid record per component ({len(components)}), received {len(fluids)}")

    # Pure fluids
    Tc, vc = MultiFluidReducingFunction.get_Tcvc_from_json(fluids, components)
    EOSs = []
    for name, fluid in zip(components, fluids):
        eos = data_sources.get_EOS_record(fluid, name)
        EOSs.append(build_EOS_terms(get_required(eos, "alphar", f"equation of state of '{name}'")))

    # Mixture interactions
    F = MultiFluidReducingFunction.get_F_matrix(BIPcollection, components, flags)
    funcs = build_departure_function_matrix(depcollection, BIPcollection, components, flags)
    betaT, gammaT, betaV, gammaV = MultiFluidReducingFunction.get_BIP_matrices(BIPcollection, components, flags)

    redfunc = MultiFluidReducingFunction(betaT, gammaT, betaV, gammaV, Tc, vc)
    logger.debug("Built multi-fluid model for components: %s", ", ".join(components))

    return MultiFluid(
        redfunc=redfunc,
        corr=CorrespondingStatesContribution(EOSs),
        dep=DepartureContribution(F, funcs),
    )


def build_multifluid_model(components, coolprop_root, BIPcollectionpath, flags=None):
    """
    Assemble a multi-fluid model from a CoolProp-style fluid library.

    Parameters
    ----------
    components : sequence of str
        Fluid names; ``<coolprop_root>/dev/fluids/<name>.json`` must exist.
    coolprop_root : str or os.PathLike
        Root of the fluid library.
    BIPcollectionpath : str or os.PathLike
        JSON file with the binary interaction records.
    flags : dict, optional
        Builder flags, see `build_multifluid_model_from_json`.

    Returns
    -------
    MultiFluid
    """
    BIPcollection = data_sources.load_json(BIPcollectionpath, "binary interaction collection")
    fluids = [data_sources.load_fluid_json(coolprop_root, name) for name in components]

    # Only needed when some pair names a departure function
    if _needs_departure_collection(BIPcollection, components, flags):
        depcollection = data_sources.load_departure_collection(coolprop_root)
    else:
        depcollection = []

    return build_multifluid_model_from_json(components, fluids, BIPcollection, depcollection, flags)


def _needs_departure_collection(BIPcollection, components, flags):
    for i in range(len(components)):
        for j in range(i + 1, len(components)):
            BIP = MultiFluidReducingFunction.get_BIPdep(BIPcollection, [components[i], components[j]], flags)
            if BIP.get("function"):
                return True
    return False


# ------------------------------------------------------------------------------------ #
# Mutant models
# ------------------------------------------------------------------------------------ #

def _get_override_entry(overrides, i, j):
    try:
        entry = overrides[str(i)][str(j)]
        return entry["BIP"], entry["departure"]
    except (KeyError, TypeError) as exc:
        raise SchemaError(f"Missing override entry for pair ({i}, {j}) with 'BIP' and 'departure'") from exc


def _build_mutant_departure(overrides, N, get_parameters):
    """Read the per-pair overrides, filling F, the departure matrix and the reducing parameters."""
    F = np.zeros((N, N))
    funcs = [[None] * N for _ in range(N)]
    for i in range(N):
        funcs[i][i] = DepartureTerms([NullTerm()])
        for j in range(i + 1, N):
            BIP, dep = _get_override_entry(overrides, i, j)
            context = f"override BIP of pair ({i}, {j})"
            get_parameters(i, j, BIP, context)
            F[i, j] = get_float(BIP, "Fij", context)
            F[j, i] = F[i, j]
            funcs[i][j] = build_departure_function(dep)
            funcs[j][i] = funcs[i][j]
    return F, funcs


def build_multifluid_mutant(model, overrides):
    """
    Build a model that reuses the pure fluids of `model` with new mixture parameters.

    Parameters
    ----------
    model : MultiFluid
        Base model with a `MultiFluidReducingFunction`. It is not modified.
    overrides : dict
        Mapping ``{"i": {"j": {"BIP": {...}, "departure": {...}}}}`` keyed by
        zero-based component indices with ``i < j``. ``BIP`` holds ``betaT,
        gammaT, betaV, gammaV, Fij`` and ``departure`` is a departure-function
        record.

    Returns
    -------
    MultiFluidAdapter
        Adapter with the new reducing function and departure contribution. The
        override document is stored as JSON in its metadata.
    """
    red = model.redfunc
    N = red.Tc.size

    betaT, gammaT = np.array(red.betaT), np.array(red.gammaT)
    betaV, gammaV = np.array(red.betaV), np.array(red.gammaV)

    def set_parameters(i, j, BIP, context):
        betaT[i, j] = get_float(BIP, "betaT", context)
        betaT[j, i] = 1.0 / betaT[i, j]
        betaV[i, j] = get_float(BIP, "betaV", context)
        betaV[j, i] = 1.0 / betaV[i, j]
        gammaT[i, j] = get_float(BIP, "gammaT", context)
        gammaT[j, i] = gammaT[i, j]
        gammaV[i, j] = get_float(BIP, "gammaV", context)
        gammaV[j, i] = gammaV[i, j]

    F, funcs = _build_mutant_departure(overrides, N, set_parameters)

    newred = MultiFluidReducingFunction(betaT, gammaT, betaV, gammaV, red.Tc, red.vc)
    meta = json.dumps(overrides)
    logger.debug("Built multi-fluid mutant with overrides: %s", meta)
    return MultiFluidAdapter(base=model, redfunc=newred, dep=DepartureContribution(F, funcs), meta=meta)


def build_multifluid_mutant_invariant(model, overrides):
    """
    Build a binary-mixture model using the invariant reducing function.

    Same as `build_multifluid_mutant`, except that each ``BIP`` entry holds
    ``phiT, lambdaT, phiV, lambdaV, Fij``. Unset entries default to
    ``phi = 1`` and ``lambda = 0``.

    Raises
    ------
    MixtureSizeError
        If the base model does not have exactly two components.
    """
    red = model.redfunc
    N = red.Tc.size
    if N != 2:
        raise MixtureSizeError(
            f"Only binary mixtures are currently supported with invariant departure functions. Number of components: {N}"
        )

    phiT, lambdaT = np.ones((N, N)), np.zeros((N, N))
    phiV, lambdaV = np.ones((N, N)), np.zeros((N, N))

    def set_parameters(i, j, BIP, context):
        phiT[i, j] = get_float(BIP, "phiT", context)
        phiT[j, i] = phiT[i, j]
        lambdaT[i, j] = get_float(BIP, "lambdaT", context)
        lambdaT[j, i] = -lambdaT[i, j]
        phiV[i, j] = get_float(BIP, "phiV", context)
        phiV[j, i] = phiV[i, j]
        lambdaV[i, j] = get_float(BIP, "lambdaV", context)
        lambdaV[j, i] = -lambdaV[i, j]

    F, funcs = _build_mutant_departure(overrides, N, set_parameters)

    newred = MultiFluidInvariantReducingFunction(phiT, lambdaT, phiV, lambdaV, red.Tc, red.vc)
    meta = json.dumps(overrides)
    logger.debug("Built invariant multi-fluid mutant with overrides: %s", meta)
    return MultiFluidAdapter(base=model, redfunc=newred, dep=DepartureContribution(F, funcs), meta=meta)
