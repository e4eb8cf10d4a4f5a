# cart_forest/stopping.py
import numpy as np


def check_pre_split_stopping_conditions(node_labels):
    """
    Checks the stopping conditions before attempting to find a split.
    The tree grows until every leaf is pure, so there is no depth or
    sample-count limit here.

    Args:
        node_labels (np.ndarray): Labels of the samples in the node's range.

    Returns:
        str or None: A string describing the reason for stopping, or None if the node should be split.
    """
    if node_labels.size == 0:
        return "empty_range"

    if np.all(node_labels == node_labels[0]):
        return f"pure_node (label {int(node_labels[0])})"

    return None


def check_post_search_stopping_condition(best_split, verbose=False, node_id_for_logs=None, node_depth_for_logs=0):
    """
    Called after the split search. A mixed node can still be unsplittable when
    every candidate feature is constant over its range.

    Args:
        best_split (dict): Result of find_best_split_for_node; empty if no candidate threshold exists.
        verbose (bool): Flag for detailed logging.
        node_id_for_logs: Identifier for the current node, for logging purposes.
        node_depth_for_logs (int): Depth of the node, for log indentation.

    Returns:
        str or None: A string describing the reason for stopping, or None if splitting should proceed.
    """
    indent = "  " * (node_depth_for_logs + 1)

    if not best_split:
        if verbose:
            print(f"{indent}  Split Check (Node {node_id_for_logs}): all features constant, no candidate threshold. Stopping.")
        return "no_valid_split"

    return None
