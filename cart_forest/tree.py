# cart_forest/tree.py
import time
from collections import deque

import numpy as np

from .exceptions import IncompleteModelError, InvalidInputError
from .utils import (
    determine_majority_label,
    split_features_and_labels,
    to_dataset,
    to_feature_vector,
)
from .stopping import check_pre_split_stopping_conditions, check_post_search_stopping_condition
from .splitting import find_best_split_for_node, partition_range

class Node:
    """
    One vertex of a DecisionTree, stored in the tree's node arena and referenced by
    integer id. A leaf carries a label; an internal node carries a split rule and
    the ids of its left and right children.
    """
    def __init__(self, node_id, depth, num_samples, parent_id=None):
        self.id = node_id
        self.depth = depth
        self.parent_id = parent_id
        self.children_ids = []
        self.num_samples = num_samples

        self.is_leaf = False
        self.leaf_reason = None
        self.label = None

        self.feature_index = None
        self.threshold = None
        self.gini_index = None

    def set_as_leaf(self, reason, label=None):
        self.is_leaf = True
        self.leaf_reason = reason
        self.label = label

    def set_split_rule(self, feature_index, threshold, gini_index):
        self.feature_index = feature_index
        self.threshold = threshold
        self.gini_index = gini_index
        self.is_leaf = False

    def __repr__(self):
        if self.is_leaf:
            return (f"Node(id={self.id}, Leaf, depth={self.depth}, samples={self.num_samples}, "
                    f"label={self.label}, reason='{self.leaf_reason}')")
        else:
            return (f"Node(id={self.id}, Split, depth={self.depth}, samples={self.num_samples}, "
                    f"rule='x[{self.feature_index}] < {self.threshold:.3f}', gini={self.gini_index:.4f})")

class DecisionTree:
    """
    Binary classification tree grown with Gini-minimizing splits until every leaf is pure.
    The tree is built once by train() and is read-only afterwards.
    """
    def __init__(self, verbose=False):
        self.verbose = verbose

        self.root_id = None
        self.nodes = []
        self.n_features_ = None
        self.feature_subset_ = None

    @property
    def is_trained(self):
        return self.root_id is not None

    def _new_node(self, depth, num_samples, parent_id=None):
        node = Node(node_id=len(self.nodes), depth=depth, num_samples=num_samples, parent_id=parent_id)
        self.nodes.append(node)
        return node

    def _resolve_feature_subset(self, feature_subset, n_features):
        if feature_subset is None:
            return list(range(n_features))
        feature_subset = list(feature_subset)
        if len(feature_subset) == 0:
            return list(range(n_features))

        resolved = set()
        for feature_index in feature_subset:
            if not isinstance(feature_index, (int, np.integer)) or not 0 <= feature_index < n_features:
                raise InvalidInputError(
                    f"Feature index {feature_index!r} is out of range for {n_features} feature column(s)."
                )
            resolved.add(int(feature_index))
        return sorted(resolved)

    def train(self, data, feature_subset=None):
        """
        Builds the tree from a labelled dataset.

        Args:
            data: Rows of numeric values whose last column is the integer class label.
                A list of rows, a 2-D numpy array or a Pandas DataFrame.
            feature_subset (iterable of int, optional): Feature column indices the
                split search may use. Defaults to every feature column.

        Raises:
            InvalidInputError: If the dataset or feature_subset is malformed.
        """
        if self.is_trained:
            raise RuntimeError("DecisionTree has already been trained.")

        dataset = to_dataset(data)
        features, labels = split_features_and_labels(dataset)
        n_samples, n_features = features.shape
        feature_subset = self._resolve_feature_subset(feature_subset, n_features)

        if self.verbose:
            fit_start_time = time.time()
            print(f"Training Decision Tree... {n_samples} rows, {len(feature_subset)} candidate feature(s).")

        self.nodes = []
        root_node = self._new_node(depth=0, num_samples=n_samples)

        queue = deque([(root_node.id, 0, n_samples)])
        while queue:
            current_node_id, start, end = queue.popleft()
            current_node = self.nodes[current_node_id]
            indent = "  " * (current_node.depth + 1)
            labels_node = labels[start:end]
            if self.verbose:
                print(f"{indent}Processing Node {current_node.id} (Depth {current_node.depth}): rows [{start}, {end}).")

            # 1. Empty or pure ranges become leaves
            stop_reason = check_pre_split_stopping_conditions(labels_node)
            if stop_reason:
                leaf_label = int(labels_node[0]) if labels_node.size else None
                current_node.set_as_leaf(stop_reason, leaf_label)
                if self.verbose: print(f"{indent}  Node {current_node.id} becomes LEAF. Reason: {stop_reason}")
                continue

            # 2. Find the best split across the candidate features
            best_split_found = find_best_split_for_node(
                features, labels, start, end, feature_subset,
                verbose=self.verbose, node_id_for_logs=current_node.id,
                node_depth_for_logs=current_node.depth
            )

            # 3. Constant features leave nothing to split on
            post_stop_reason = check_post_search_stopping_condition(
                best_split_found, verbose=self.verbose,
                node_id_for_logs=current_node.id, node_depth_for_logs=current_node.depth
            )
            if post_stop_reason:
                current_node.set_as_leaf(post_stop_reason, determine_majority_label(labels_node))
                if self.verbose: print(f"{indent}  Node {current_node.id} becomes LEAF. Reason: {post_stop_reason}")
                continue

            # 4. Split the range in place and queue both halves
            split_index = partition_range(
                features, labels, start, end,
                best_split_found['feature'], best_split_found['threshold']
            )
            current_node.set_split_rule(
                feature_index=best_split_found['feature'],
                threshold=best_split_found['threshold'],
                gini_index=best_split_found['gini']
            )
            if self.verbose:
                print(f"{indent}  Node {current_node.id} SPLIT on feature {current_node.feature_index} "
                      f"< {current_node.threshold:.3f} -> {split_index - start} left / {end - split_index} right.")

            left_child = self._new_node(current_node.depth + 1, split_index - start, parent_id=current_node.id)
            right_child = self._new_node(current_node.depth + 1, end - split_index, parent_id=current_node.id)
            current_node.children_ids = [left_child.id, right_child.id]
            queue.append((left_child.id, start, split_index))
            queue.append((right_child.id, split_index, end))

        self.root_id = root_node.id
        self.n_features_ = n_features
        self.feature_subset_ = feature_subset

        if self.verbose:
            fit_end_time = time.time()
            print(f"DecisionTree.train completed in {fit_end_time - fit_start_time:.4f}s. "
                  f"Total nodes: {len(self.nodes)}, leaves: {self.num_leaves}, depth: {self.max_depth_reached}")

    def predict(self, feature_vector, verbose=False):
        """
        Predicts the class label of one feature vector by walking from the root:
        left when feature_vector[feature_index] < threshold, right otherwise.

        Raises:
            IncompleteModelError: If the tree is untrained or the path ends in a leaf without a label.
            InvalidInputError: If the vector width differs from the training width.
        """
        if not self.is_trained:
            raise IncompleteModelError("DecisionTree has not been trained yet.")
        feature_vector = to_feature_vector(feature_vector, self.n_features_)

        node = self.nodes[self.root_id]
        if verbose: print("Starting at root")
        while not node.is_leaf:
            value = feature_vector[node.feature_index]
            if verbose:
                print(f"At Node {node.id}: Feature index = {node.feature_index}, "
                      f"Threshold = {node.threshold}, Current Feature Value = {value}")
            node = self.nodes[node.children_ids[0] if value < node.threshold else node.children_ids[1]]

        if node.label is None:
            raise IncompleteModelError(f"Traversal reached leaf {node.id} which carries no label ({node.leaf_reason}).")
        if verbose:
            print(f"Reach leaf: Predicted Label = {node.label}")
        return node.label

    @property
    def num_leaves(self):
        return sum(1 for node in self.nodes if node.is_leaf)

    @property
    def max_depth_reached(self):
        return max((node.depth for node in self.nodes), default=0)

    def get_params(self, deep=True):
        return {'verbose': self.verbose}

    def print_tree(self, node_id=None, indent=""):
        if node_id is None: node_id = self.root_id
        if node_id is None or node_id >= len(self.nodes): return
        node = self.nodes[node_id]

        if node.is_leaf:
            print(f"{indent}Leaf: label={node.label} | N={node.num_samples} (Reason: {node.leaf_reason})")
        else:
            print(f"{indent}Split: x[{node.feature_index}] < {node.threshold:.3f} "
                  f"(gini={node.gini_index:.4f}) | N={node.num_samples}")
            if node.children_ids:
                self.print_tree(node.children_ids[0], indent + "  |--L: ")
                self.print_tree(node.children_ids[1], indent + "  +--R: ")
