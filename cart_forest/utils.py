# cart_forest/utils.py
import numpy as np

from .exceptions import InvalidInputError


def calculate_gini_impurity(label_counts, size=None):
    """
    Calculate the Gini impurity 1 - sum(p_c^2) of a set from its per-class counts.

    Args:
        label_counts (array-like): Count of each class in the set.
        size (int, optional): Number of samples in the set. Defaults to sum(label_counts).

    Returns:
        float: The impurity, 0.0 for a pure (or empty) set.
    """
    counts = np.asarray(label_counts, dtype=float)
    if size is None:
        size = counts.sum()
    if size == 0:
        return 0.0
    proportions = counts / size
    return float(1.0 - np.sum(proportions * proportions))


def calculate_weighted_gini(left_counts, right_counts, left_size, right_size):
    """
    Weighted Gini impurity of a binary split:
    (|L| * gini(L) + |R| * gini(R)) / (|L| + |R|)

    Works on a single split (1-D count arrays, int sizes) or on a batch of
    candidate splits (2-D count arrays of shape (n_candidates, n_classes) and
    1-D size arrays), in which case an array of costs is returned.
    """
    left_counts = np.asarray(left_counts, dtype=float)
    right_counts = np.asarray(right_counts, dtype=float)
    left_size = np.asarray(left_size, dtype=float)
    right_size = np.asarray(right_size, dtype=float)

    total = left_size + right_size
    if np.any(total == 0):
        raise ValueError("A split must contain at least one sample.")

    with np.errstate(divide='ignore', invalid='ignore'):
        left_p = left_counts / np.expand_dims(left_size, -1)
        right_p = right_counts / np.expand_dims(right_size, -1)
        left_gini = 1.0 - np.nansum(left_p * left_p, axis=-1)
        right_gini = 1.0 - np.nansum(right_p * right_p, axis=-1)

    weighted = (left_gini * left_size + right_gini * right_size) / total
    if weighted.ndim == 0:
        return float(weighted)
    return weighted


def determine_majority_label(labels):
    """
    Majority vote over a sequence of integer labels.
    Ties go to the lowest label.
    """
    labels = np.asarray(labels, dtype=int)
    if labels.size == 0:
        raise ValueError("Cannot determine a majority label from no labels.")
    unique_labels, counts = np.unique(labels, return_counts=True)
    # np.unique sorts, and argmax returns the first maximum
    return int(unique_labels[np.argmax(counts)])


# --- Input Validation Utilities ---

def to_dataset(data):
    """
    Converts a labelled dataset into a 2-D float array and validates it.
    The last column is the class label, every other column is a numeric feature.

    Args:
        data: list of rows, 2-D numpy array, or Pandas DataFrame.

    Returns:
        np.ndarray: A new (n_samples, n_columns) float array owned by the caller.

    Raises:
        InvalidInputError: If the dataset is empty, ragged, has fewer than two
            columns, contains non-finite values, or has labels that are not
            non-negative integers.
    """
    if is_pandas_dataframe(data):
        data = convert_pandas_to_array(data)

    try:
        dataset = np.array(data, dtype=float)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Dataset must be rectangular and numeric: {e}") from e

    if dataset.size == 0:
        raise InvalidInputError("Dataset cannot be empty.")
    if dataset.ndim != 2:
        raise InvalidInputError(f"Dataset must be 2-dimensional, got {dataset.ndim} dimension(s).")
    if dataset.shape[1] < 2:
        raise InvalidInputError("Dataset needs at least one feature column and a label column.")
    if not np.all(np.isfinite(dataset)):
        raise InvalidInputError("Dataset contains NaN or infinite values; missing values are not supported.")

    labels = dataset[:, -1]
    if np.any(labels < 0) or np.any(labels != np.round(labels)):
        raise InvalidInputError("Labels (last column) must be non-negative integers.")

    return dataset


def split_features_and_labels(dataset):
    """Splits a validated dataset into a feature matrix copy and an int label vector."""
    features = np.array(dataset[:, :-1], dtype=float)
    labels = dataset[:, -1].astype(int)
    return features, labels


def to_feature_vector(feature_vector, n_features):
    """
    Converts a single feature vector to a 1-D float array of the training width.

    Raises:
        InvalidInputError: If the vector is not 1-D, not finite numeric, or its width differs from n_features.
    """
    try:
        vector = np.asarray(feature_vector, dtype=float)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Feature vector must be numeric: {e}") from e

    if vector.ndim != 1:
        raise InvalidInputError(f"Feature vector must be 1-dimensional, got shape {vector.shape}.")
    if vector.shape[0] != n_features:
        raise InvalidInputError(
            f"Feature vector has {vector.shape[0]} values but the model was trained on {n_features} features."
        )
    if not np.all(np.isfinite(vector)):
        raise InvalidInputError("Feature vector contains NaN or infinite values; missing values are not supported.")
    return vector


# --- Random Sampling Utilities ---

def check_random_state(random_state=None):
    """
    Turns None, an int seed, or an existing np.random.Generator into a Generator.
    An existing Generator is returned as-is, so draws stay on one stream.
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    raise InvalidInputError(f"random_state must be None, an int or a numpy Generator, got {type(random_state).__name__}.")


def shuffled_indices(n, rng):
    """A random permutation of 0..n-1."""
    return rng.permutation(n)


def bootstrap_indices(n, rng):
    """
    Draws n indices uniformly from 0..n-1 with replacement.
    Returns an empty array for n == 0.
    """
    if n < 0:
        raise ValueError("n cannot be negative.")
    if n == 0:
        return np.empty(0, dtype=int)
    return rng.integers(0, n, size=n)


# --- Pandas DataFrame Utilities ---

_PANDAS_INSTALLED = True
try:
    import pandas as pd
except ImportError:
    _PANDAS_INSTALLED = False

def is_pandas_dataframe(data):
    """Checks if the provided data is a Pandas DataFrame."""
    if not _PANDAS_INSTALLED:
        return False
    return isinstance(data, pd.DataFrame)

def convert_pandas_to_array(dataframe):
    """
    Converts a Pandas DataFrame to a float array, keeping column order.
    The last column is taken as the label.
    """
    if not is_pandas_dataframe(dataframe):
        raise TypeError("Input is not a Pandas DataFrame.")
    non_numeric = [col for col, dtype in dataframe.dtypes.items() if not pd.api.types.is_numeric_dtype(dtype)]
    if non_numeric:
        raise InvalidInputError(f"Only numeric columns are supported, got non-numeric columns {non_numeric}.")
    return dataframe.to_numpy(dtype=float, na_value=np.nan)
