# cart_forest/__init__.py

"""
CART Forest Package

Gini-splitting decision trees, a bagged random forest with majority voting,
and k-fold cross-validation of forest accuracy.
"""

from .exceptions import IncompleteModelError, InvalidInputError
from .tree import DecisionTree, Node
from .forest import AccuracyMetrics, RandomForest
from .cross_validation import KFoldCrossValidation

VERSION = "0.1.0"
