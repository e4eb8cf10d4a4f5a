# cart_forest/splitting.py
import time # For performance logging
import numpy as np
from .utils import calculate_weighted_gini

def find_best_numerical_split(
    feature_values_node: np.ndarray,
    labels_node: np.ndarray,
    feature_index: int,
    verbose: bool = False,
    node_id_for_logs = None,
    node_depth_for_logs: int = 0
):
    """
    Finds the Gini-minimizing threshold for one feature over a node's samples.

    Candidate thresholds are midpoints between consecutive distinct values of the
    feature, taken in ascending order. The first candidate with the lowest weighted
    Gini wins, so ties resolve to the lowest threshold.

    Returns:
        dict: {'gini': inf} if the feature has fewer than two distinct values,
              otherwise the feature index, threshold, weighted Gini and the number
              of candidates evaluated.
    """
    best_split = {'gini': float('inf')}
    indent = "  " * (node_depth_for_logs + 2)

    n_samples = feature_values_node.size
    if n_samples < 2:
        if verbose:
            print(f"{indent}  NumericalSplit feature {feature_index} (Node {node_id_for_logs}): Less than 2 samples, no split possible.")
        return best_split

    # Stable sort keeps equal values in their current range order
    order = np.argsort(feature_values_node, kind='stable')
    sorted_values = feature_values_node[order]
    sorted_labels = labels_node[order]

    # Split positions: between i and i+1 wherever the value changes
    boundaries = np.flatnonzero(sorted_values[:-1] != sorted_values[1:])
    if boundaries.size == 0:
        if verbose:
            print(f"{indent}  NumericalSplit feature {feature_index} (Node {node_id_for_logs}): Constant over node, no split possible.")
        return best_split

    classes, label_codes = np.unique(sorted_labels, return_inverse=True)
    one_hot = np.zeros((n_samples, classes.size), dtype=float)
    one_hot[np.arange(n_samples), label_codes] = 1.0
    cumulative_counts = np.cumsum(one_hot, axis=0)

    left_counts = cumulative_counts[boundaries]
    right_counts = cumulative_counts[-1] - left_counts
    left_sizes = boundaries + 1
    right_sizes = n_samples - left_sizes

    ginis = calculate_weighted_gini(left_counts, right_counts, left_sizes, right_sizes)
    thresholds = (sorted_values[boundaries] + sorted_values[boundaries + 1]) / 2.0

    best_candidate = int(np.argmin(ginis))
    best_split['feature'] = feature_index
    best_split['threshold'] = float(thresholds[best_candidate])
    best_split['gini'] = float(ginis[best_candidate])
    best_split['num_candidates'] = int(boundaries.size)

    return best_split

def find_best_split_for_node(
    features: np.ndarray,
    labels: np.ndarray,
    start: int,
    end: int,
    feature_subset,
    verbose: bool = False,
    node_id_for_logs = None,
    node_depth_for_logs: int = 0
):
    """
    Searches every feature in feature_subset over the row range [start, end) and
    returns the split with the globally lowest weighted Gini impurity.
    Features are visited in the given order and a later feature must be strictly
    better to replace an earlier one.

    Returns:
        dict: The best split, or {} if no feature has a candidate threshold.
    """
    overall_best_split = {'gini': float('inf')}
    indent = "  " * (node_depth_for_logs + 1)
    labels_node = labels[start:end]

    for feature_index in feature_subset:
        if verbose:
            t_feat_split_start = time.time()

        current_feature_best_split = find_best_numerical_split(
            feature_values_node=features[start:end, feature_index],
            labels_node=labels_node,
            feature_index=feature_index,
            verbose=verbose,
            node_id_for_logs=node_id_for_logs,
            node_depth_for_logs=node_depth_for_logs
        )

        if verbose:
            t_feat_split_end = time.time()
            if current_feature_best_split['gini'] < float('inf'):
                print(f"{indent}    Feature {feature_index} best split Gini: {current_feature_best_split['gini']:.4f} "
                      f"(Threshold: {current_feature_best_split['threshold']:.3f}, "
                      f"candidates: {current_feature_best_split['num_candidates']}). "
                      f"Took {t_feat_split_end - t_feat_split_start:.4f}s")
            else:
                print(f"{indent}    Feature {feature_index} did not yield a valid split. Took {t_feat_split_end - t_feat_split_start:.4f}s")

        if current_feature_best_split['gini'] < overall_best_split['gini']:
            overall_best_split = current_feature_best_split

    if overall_best_split['gini'] < float('inf'):
        if verbose:
            print(f"{indent}  Overall best split for Node {node_id_for_logs}: Feature {overall_best_split['feature']}, "
                  f"Threshold: {overall_best_split['threshold']:.3f}, Gini: {overall_best_split['gini']:.4f}")
        return overall_best_split

    return {}

def partition_range(features, labels, start, end, feature_index, threshold):
    """
    Partitions rows [start, end) in place so rows with features[:, feature_index] < threshold
    come first. Features and labels move together and relative order is kept on
    both sides.

    If every row lands on one side, the split index falls back to the middle of
    the range so both sub-ranges are strictly smaller than the parent.

    Returns:
        int: The split index; [start, split) is the left range and [split, end) the right.
    """
    goes_left = features[start:end, feature_index] < threshold
    order = np.concatenate((np.flatnonzero(goes_left), np.flatnonzero(~goes_left)))

    features[start:end] = features[start:end][order]
    labels[start:end] = labels[start:end][order]

    split_index = start + int(np.count_nonzero(goes_left))
    if split_index == start or split_index == end:
        split_index = start + (end - start) // 2
    return split_index

if __name__ == '__main__':
    print("--- Mock Data Setup ---")
    mock_features = np.array([
        [1.0, 0.0],
        [8.0, 1.0],
        [2.0, 0.0],
        [9.0, 1.0],
        [5.0, 0.0],
    ])
    mock_labels = np.array([0, 1, 0, 1, 1])

    print("\n--- Testing find_best_numerical_split ---")
    for idx in range(mock_features.shape[1]):
        split = find_best_numerical_split(mock_features[:, idx], mock_labels, feature_index=idx)
        print(f"Feature {idx}: {split}")

    print("\n--- Testing find_best_split_for_node ---")
    best = find_best_split_for_node(mock_features, mock_labels, 0, len(mock_labels), [0, 1], verbose=True)
    print(f"Overall best split: {best}")

    print("\n--- Testing partition_range ---")
    split_at = partition_range(mock_features, mock_labels, 0, len(mock_labels), best['feature'], best['threshold'])
    print(f"Split index: {split_at}")
    print(f"Features after partition:\n{mock_features}")
    print(f"Labels after partition: {mock_labels}")
