import os
os.environ["JAX_PLATFORM_NAME"] = "cpu"
import jax
jax.config.update("jax_enable_x64", True)


from .exceptions import *
from .helpers_props import *
from .utils import *

# Import API classes and builders
from .eos_terms import (
    PowerTerm,
    GaussianTerm,
    GERG2004Term,
    ExponentialTerm,
    Lemmon2005Term,
    GaoBTerm,
    NonAnalyticTerm,
    NullTerm,
)
from .term_containers import TermContainer, EOSTerms, DepartureTerms
from .contributions import CorrespondingStatesContribution, DepartureContribution
from .reducing import MultiFluidReducingFunction, MultiFluidInvariantReducingFunction
from .model import (
    AbstractMultiFluid,
    MultiFluid,
    MultiFluidAdapter,
    DummyEOS,
    DummyReducingFunction,
    build_dummy_multifluid_model,
)
from .builders import (
    build_EOS_terms,
    get_EOS_terms,
    get_EOSs,
    build_departure_function,
    get_departure_json,
    build_departure_function_matrix,
    get_departure_function_matrix,
    build_multifluid_model,
    build_multifluid_model_from_json,
    build_multifluid_mutant,
    build_multifluid_mutant_invariant,
)
from .data_sources import load_json, load_coolprop_fluid


# Package info
__version__ = "0.1.0"
PACKAGE_NAME = "jaxmix"
BREAKLINE = 80 * "-"
