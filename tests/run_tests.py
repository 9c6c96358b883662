#!/usr/bin/env python3
import pytest

# Define the list of tests
tests_list = [
    "test_eos_terms.py",
    "test_term_containers.py",
    "test_reducing.py",
    "test_builders.py",
    "test_model.py",
    "test_mutants.py",
    "test_derivatives.py",
    "test_coolprop_reference.py",
]

# Run pytest when this python script is executed
pytest.main(tests_list + ["-v"])
