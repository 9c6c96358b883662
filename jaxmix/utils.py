import numbers
import numpy as np

from .exceptions import SchemaError


def is_float(element: any) -> bool:
    """
    Check if the given element can be converted to a float.

    Parameters
    ----------
    element : any
        The element to be checked.

    Returns
    -------
    bool
        True if the element can be converted to a float, False otherwise.
    """

    if element is None:
        return False
    try:
        float(element)
        return True
    except (TypeError, ValueError):
        return False


def is_numeric(value):
    """
    Check if a value is a real numeric type, including both Python and NumPy numeric types.

    Booleans and complex numbers are rejected because table coefficients must be
    real numbers.

    Parameters
    ----------
    value : any type
        The value to be checked for being a numeric type.

    Returns
    -------
    bool
        Returns True if the value is a real numeric type (excluding booleans),
        otherwise False.
    """
    # Exclude Python bool
    if isinstance(value, bool):
        return False

    # Python numbers (int, float)
    if isinstance(value, numbers.Real):
        return True

    # NumPy scalar types
    if isinstance(value, np.generic):
        return np.issubdtype(type(value), np.number) and not (
            np.issubdtype(type(value), np.bool_) or np.issubdtype(type(value), np.complexfloating)
        )

    return False


def get_float(record, key, context):
    """
    Read a required scalar entry from a parameter record as a float.

    Parameters
    ----------
    record : dict
        Parameter record (e.g. one binary interaction entry).
    key : str
        Name of the entry.
    context : str
        Description of the record used in error messages.

    Returns
    -------
    float
        The entry converted to a float.

    Raises
    ------
    SchemaError
        If the entry is missing or is not a number.
    """
    if not isinstance(record, dict) or key not in record:
        raise SchemaError(f"Missing required entry '{key}' in {context}")
    value = record[key]
    if isinstance(value, bool) or not is_float(value):
        raise SchemaError(f"Entry '{key}' in {context} must be a number. Received: {value!r}")
    return float(value)


def get_required(record, key, context):
    """Return ``record[key]``, raising SchemaError naming the context if it is absent."""
    if not isinstance(record, dict) or key not in record:
        raise SchemaError(f"Missing required entry '{key}' in {context}")
    return record[key]
