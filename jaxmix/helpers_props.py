import os
import jax.numpy as jnp
import equinox as eqx

# Universal molar gas constant (CODATA 2018)
GAS_CONSTANT = 8.31446261815324

# -------------------------------------------------------------------- #
# Layout of the fluid library and schema constants
# -------------------------------------------------------------------- #

# Relative to the root of a CoolProp-style fluid library
FLUIDS_SUBDIR = os.path.join("dev", "fluids")
DEPARTURE_FUNCTIONS_PATH = os.path.join("dev", "mixtures", "mixture_departure_functions.json")

# Closed set of residual term tags accepted in pure-fluid EOS records
PURE_TERM_TYPES = (
    "ResidualHelmholtzPower",
    "ResidualHelmholtzGaussian",
    "ResidualHelmholtzNonAnalytic",
    "ResidualHelmholtzGaoB",
    "ResidualHelmholtzLemmon2005",
    "ResidualHelmholtzExponential",
)

# Closed set of departure-function types
DEPARTURE_TYPES = (
    "Exponential",
    "GERG-2004",
    "GERG-2008",
    "Gaussian+Exponential",
    "none",
)

# Binary interaction parameters used for pairs without data when estimating
ESTIMATED_BIP = {
    "betaT": 1.0,
    "gammaT": 1.0,
    "betaV": 1.0,
    "gammaV": 1.0,
    "F": 0.0,
}

# -------------------------------------------------------------------- #
# Define aliases for canonical property names
# -------------------------------------------------------------------- #

PROPERTY_ALIASES = {
    "temperature": ["T"],
    "density": ["rho", "rhomolar"],
    "reducing_temperature": ["Tr", "Tred", "T_red"],
    "reducing_density": ["rhor", "rhored", "rho_red"],
    "tau": [],
    "delta": [],
    "alphar": ["alpha_r"],
    "alphar_corresponding_states": ["alphar_corr"],
    "alphar_departure": ["alphar_dep"],
}

# flat lookup alias -> canonical
ALIAS_TO_CANONICAL = {}
for canonical, aliases in PROPERTY_ALIASES.items():
    for alias in aliases:
        if alias in ALIAS_TO_CANONICAL:
            raise ValueError(f"Alias {alias} defined for multiple properties")
        ALIAS_TO_CANONICAL[alias] = canonical
    # also allow canonical name itself
    ALIAS_TO_CANONICAL[canonical] = canonical

PROPERTIES_CANONICAL = PROPERTY_ALIASES.keys()


# -------------------------------------------------------------------- #
# Define equinox Module to represent reduced mixture states
# -------------------------------------------------------------------- #

class ReducedState(eqx.Module):
    """
    Reduced state of a mixture evaluated by a multi-fluid model.

    Holds the reducing temperature and density, the reduced variables and the
    split of the residual Helmholtz energy into its corresponding-states and
    departure parts. Fields can be read as attributes or dictionary-style,
    using either canonical names or aliases (e.g. ``state["Tr"]``).
    """

    # --- metadata
    identifier: str = eqx.field(static=True, default=None)

    # --- inputs
    temperature: jnp.ndarray = jnp.nan
    density: jnp.ndarray = jnp.nan

    # --- reducing state and reduced variables
    reducing_temperature: jnp.ndarray = jnp.nan
    reducing_density: jnp.ndarray = jnp.nan
    tau: jnp.ndarray = jnp.nan
    delta: jnp.ndarray = jnp.nan

    # --- residual Helmholtz energy
    alphar: jnp.ndarray = jnp.nan
    alphar_corresponding_states: jnp.ndarray = jnp.nan
    alphar_departure: jnp.ndarray = jnp.nan

    def __getitem__(self, key: str):
        """Allow dictionary-style access via canonical or alias name"""
        if key == "identifier":
            return self.identifier
        if key in ALIAS_TO_CANONICAL:
            return getattr(self, ALIAS_TO_CANONICAL[key])
        raise KeyError(f"Unknown property alias: {key}")

    def __getattr__(self, key: str):
        """Allow attribute-style access via alias names"""
        if key in ALIAS_TO_CANONICAL:
            return getattr(self, ALIAS_TO_CANONICAL[key])
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")

    def __repr__(self) -> str:
        lines = [] if self.identifier is None else [f"  identifier={self.identifier}"]
        lines += [f"  {name}={getattr(self, name)}" for name in PROPERTIES_CANONICAL]
        return f"{type(self).__name__}(\n" + ",\n".join(lines) + "\n)"

    def to_dict(self, include_aliases: bool = False):
        """Return dict of numeric properties, with optional aliases."""
        out = {}
        for k in PROPERTIES_CANONICAL:
            out[k] = jnp.asarray(getattr(self, k))

        if include_aliases:
            for canonical, aliases in PROPERTY_ALIASES.items():
                for alias in aliases:
                    out[alias] = out[canonical]

        return out

    def keys(self):
        return self.to_dict().keys()

    def values(self):
        return self.to_dict().values()

    def items(self):
        return self.to_dict().items()
