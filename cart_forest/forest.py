# cart_forest/forest.py
import time
import warnings

import numpy as np

from .exceptions import IncompleteModelError, InvalidInputError
from .tree import DecisionTree
from .utils import (
    bootstrap_indices,
    check_random_state,
    shuffled_indices,
    to_dataset,
)

DEFAULT_TEST_SIZE = 0.2


class AccuracyMetrics:
    """
    Confusion counts for binary {0, 1} labels, with label 1 as the positive class.
    accuracy is a percentage on a 0-100 scale.
    """
    def __init__(self):
        self.true_positives = 0
        self.true_negatives = 0
        self.false_positives = 0
        self.false_negatives = 0
        self.accuracy = 0.0

    @property
    def total(self):
        return self.true_positives + self.true_negatives + self.false_positives + self.false_negatives

    def calculate_accuracy(self):
        total = self.total
        self.accuracy = 0.0 if total == 0 else 100.0 * (self.true_positives + self.true_negatives) / total
        return self.accuracy

    def to_dict(self):
        return {
            'true_positives': self.true_positives,
            'true_negatives': self.true_negatives,
            'false_positives': self.false_positives,
            'false_negatives': self.false_negatives,
            'accuracy': self.accuracy,
        }

    def __repr__(self):
        return (f"AccuracyMetrics(TP={self.true_positives}, TN={self.true_negatives}, "
                f"FP={self.false_positives}, FN={self.false_negatives}, accuracy={self.accuracy:.2f}%)")


class RandomForest:
    """
    Bagged ensemble of DecisionTree classifiers with majority-vote prediction.

    Each tree is grown on a bootstrap resample of the training split using every
    feature; there is no per-split feature subsampling.

    Args:
        num_trees (int): Number of trees in the forest.
        test_size (float): Fraction of the data held out by train(). Defaults to 0.2.
        random_state (None, int or np.random.Generator): Source of randomness for
            the train/held-out split and the bootstrap draws.
        verbose (bool): Print training progress.
    """
    def __init__(self, num_trees, test_size=DEFAULT_TEST_SIZE, random_state=None, verbose=False):
        if not isinstance(num_trees, (int, np.integer)) or num_trees < 1:
            raise InvalidInputError(f"num_trees must be a positive integer, got {num_trees!r}.")
        if not 0.0 <= test_size < 1.0:
            raise InvalidInputError(f"test_size must be in [0, 1), got {test_size!r}.")

        self.num_trees = int(num_trees)
        self.test_size = test_size
        self.random_state = random_state
        self.verbose = verbose

        self.rng = check_random_state(random_state)
        self.trees = [DecisionTree(verbose=verbose) for _ in range(self.num_trees)]
        self.held_out_data = None
        self.bootstrap_sizes_ = []
        self.n_features_ = None

    @property
    def is_trained(self):
        return self.n_features_ is not None

    @staticmethod
    def training_size(n, test_size):
        """Number of rows split_data keeps for training out of n."""
        return int(n * (1 - test_size))

    @staticmethod
    def split_data(data, test_size, rng):
        """
        Shuffles the rows and splits them into a training part of
        int(n * (1 - test_size)) rows and a held-out part with the rest.
        No stratification.

        Returns:
            tuple: (train_data, test_data) as new arrays.
        """
        data = np.asarray(data, dtype=float)
        indices = shuffled_indices(len(data), rng)
        split_index = RandomForest.training_size(len(data), test_size)
        return data[indices[:split_index]], data[indices[split_index:]]

    def create_bootstrap_sample(self, data):
        """Draws len(data) rows from data uniformly with replacement."""
        return data[bootstrap_indices(len(data), self.rng)]

    def train(self, data):
        """
        Splits data into training and held-out parts, then trains every tree on
        its own bootstrap sample of the training part. The held-out part is kept
        in held_out_data and is not scored here.

        Raises:
            InvalidInputError: If the dataset is malformed or too small to leave any training rows.
        """
        if self.is_trained:
            raise RuntimeError("RandomForest has already been trained.")

        dataset = to_dataset(data)
        if self.verbose:
            fit_start_time = time.time()
            print("Starting training process...")

        train_data, test_data = self.split_data(dataset, self.test_size, self.rng)
        if len(train_data) == 0:
            raise InvalidInputError(
                f"Dataset of {len(dataset)} row(s) leaves no training rows with test_size={self.test_size}."
            )
        if self.verbose:
            print(f"Data split into {len(train_data)} training samples and {len(test_data)} test samples.")
            print(f"Training {self.num_trees} trees with bagging...")

        self.bootstrap_sizes_ = []
        for i, tree in enumerate(self.trees):
            bootstrap_sample = self.create_bootstrap_sample(train_data)
            self.bootstrap_sizes_.append(len(bootstrap_sample))
            if self.verbose:
                print(f"  Training Decision Tree {i + 1}/{self.num_trees} with all features "
                      f"on a bootstrap sample of {len(bootstrap_sample)} rows...")
            tree.train(bootstrap_sample)

        self.held_out_data = test_data
        self.n_features_ = dataset.shape[1] - 1

        if self.verbose:
            print(f"RandomForest.train completed in {time.time() - fit_start_time:.4f}s.")

    def predict(self, feature_vector):
        """
        Majority vote over every tree's prediction. Ties go to the lowest label.
        """
        if not self.is_trained:
            raise IncompleteModelError("RandomForest has not been trained yet.")

        vote_count = {}
        for tree in self.trees:
            prediction = tree.predict(feature_vector)
            vote_count[prediction] = vote_count.get(prediction, 0) + 1

        majority_vote, max_count = None, 0
        for label in sorted(vote_count):
            if vote_count[label] > max_count:
                majority_vote, max_count = label, vote_count[label]
        return majority_vote

    def _labelled_rows(self, data):
        dataset = to_dataset(data)
        if self.is_trained and dataset.shape[1] - 1 != self.n_features_:
            raise InvalidInputError(
                f"Dataset has {dataset.shape[1] - 1} feature column(s) but the forest was trained on {self.n_features_}."
            )
        return dataset[:, :-1], dataset[:, -1].astype(int)

    def evaluate(self, data):
        """
        Accuracy of the forest on labelled data, as a fraction in [0, 1].

        Raises:
            InvalidInputError: If data is empty or malformed.
        """
        features, labels = self._labelled_rows(data)
        correct_predictions = 0
        for feature_vector, true_label in zip(features, labels):
            if self.predict(feature_vector) == true_label:
                correct_predictions += 1
        return correct_predictions / len(labels)

    def evaluate_accuracy(self, data):
        """
        Confusion counts and accuracy on a 0-100 scale for binary {0, 1} labels.
        A prediction of 1 counts as positive, anything else as negative.
        Empty data gives all-zero metrics.
        """
        metrics = AccuracyMetrics()
        if len(data) == 0:
            return metrics

        features, labels = self._labelled_rows(data)
        unexpected = sorted(set(labels.tolist()) - {0, 1})
        if unexpected:
            warnings.warn(
                f"evaluate_accuracy assumes binary {{0, 1}} labels; found {unexpected}. They are counted as negatives.",
                UserWarning
            )

        for feature_vector, true_label in zip(features, labels):
            predicted_label = self.predict(feature_vector)
            if predicted_label == true_label:
                if predicted_label == 1: metrics.true_positives += 1
                else: metrics.true_negatives += 1
            else:
                if predicted_label == 1: metrics.false_positives += 1
                else: metrics.false_negatives += 1

        metrics.calculate_accuracy()
        return metrics

    def k_fold_cross_validation(self, data, k):
        """
        Runs k-fold cross-validation with forests of this forest's size, drawing
        randomness from this forest's generator.
        """
        from .cross_validation import KFoldCrossValidation
        return KFoldCrossValidation.perform(data, k, self.num_trees, random_state=self.rng, verbose=self.verbose)

    def get_params(self, deep=True):
        return {
            'num_trees': self.num_trees,
            'test_size': self.test_size,
            'random_state': self.random_state,
            'verbose': self.verbose
        }
