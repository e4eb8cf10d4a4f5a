# tests/__init__.py

"""
Testing Package for CART Forest
"""

# Makes `tests` a package so the harness and the dataset generators can be
# imported as `tests.test_harness` and `tests.generated_datasets`.
