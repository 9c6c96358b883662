"""
Access to the external parameter tables used to build multi-fluid models.

The tables follow the layout of the CoolProp fluid library::

    <coolprop_root>/dev/fluids/<name>.json
    <coolprop_root>/dev/mixtures/mixture_departure_functions.json

Binary interaction collections are read from an explicit path. Pure-fluid
records can also be taken from an installed CoolProp package with
`load_coolprop_fluid`.
"""

import os
import json
import logging
import CoolProp.CoolProp as CP

from .exceptions import DataSourceError, SchemaError
from .helpers_props import FLUIDS_SUBDIR, DEPARTURE_FUNCTIONS_PATH

logger = logging.getLogger(__name__)


def load_json(path, description="JSON file"):
    """
    Read and parse a JSON file.

    Parameters
    ----------
    path : str or os.PathLike
        Location of the file.
    description : str, optional
        Short description of the content, used in messages.

    Returns
    -------
    dict or list
        The parsed document.

    Raises
    ------
    DataSourceError
        If the file does not exist, cannot be read or is not valid JSON.
    """
    path = os.fspath(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise DataSourceError(f"Load path is invalid for {description}: {path}") from exc
    except json.JSONDecodeError as exc:
        raise DataSourceError(f"Could not parse {description} at {path}: {exc}") from exc

    logger.debug("Loaded %s from: %s", description, path)
    return data


def get_fluid_path(coolprop_root, name):
    return os.path.join(os.fspath(coolprop_root), FLUIDS_SUBDIR, f"{name}.json")


def get_departure_path(coolprop_root):
    return os.path.join(os.fspath(coolprop_root), DEPARTURE_FUNCTIONS_PATH)


def load_fluid_json(coolprop_root, name):
    """Load the pure-fluid record of `name` from the fluid library."""
    return load_json(get_fluid_path(coolprop_root, name), f"fluid file of '{name}'")


def load_departure_collection(coolprop_root):
    """Load the collection of departure functions from the fluid library."""
    return load_json(get_departure_path(coolprop_root), "departure function collection")


def get_EOS_record(fluid, name=None):
    """
    Return the first equation of state of a pure-fluid record.

    A top-level list wrapping the record, as returned by CoolProp, is accepted.
    """
    label = f"fluid '{name}'" if name else "fluid record"
    if isinstance(fluid, list):
        if not fluid:
            raise SchemaError(f"Empty {label}")
        fluid = fluid[0]
    try:
        return fluid["EOS"][0]
    except (KeyError, IndexError, TypeError) as exc:
        raise SchemaError(f"No equation of state found in {label}") from exc


def load_coolprop_fluid(name):
    """
    Return the pure-fluid record of `name` from the installed CoolProp library.

    Parameters
    ----------
    name : str
        CoolProp fluid name (e.g. ``"Water"``).

    Returns
    -------
    dict
        Fluid record with the same schema as the files under ``dev/fluids``.

    Raises
    ------
    DataSourceError
        If the fluid is not known to CoolProp.
    """
    try:
        fluid = json.loads(CP.get_fluid_param_string(name, "JSON"))
    except (ValueError, RuntimeError) as exc:
        raise DataSourceError(f"CoolProp has no fluid named '{name}'") from exc

    if isinstance(fluid, list):
        fluid = fluid[0]

    logger.debug("Loaded fluid '%s' from CoolProp %s", name, CP.get_global_param_string("version"))
    return fluid
