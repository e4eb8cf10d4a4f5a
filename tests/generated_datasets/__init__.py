# tests/generated_datasets/__init__.py

"""
Generated Datasets Sub-Package for CART Forest Tests
"""

# Synthetic labelled datasets. Every generator returns a list of rows whose
# last value is the integer class label.
