# cart_forest/cross_validation.py
import numpy as np

from .exceptions import InvalidInputError
from .forest import DEFAULT_TEST_SIZE, RandomForest
from .utils import check_random_state, shuffled_indices, to_dataset


class KFoldCrossValidation:
    """
    k-fold cross-validation of RandomForest accuracy. Stateless: every call
    shuffles its own index permutation and trains a fresh forest per fold.
    """

    @staticmethod
    def fold_partition(n, k, rng):
        """
        Shuffles 0..n-1 once and slices the permutation into k contiguous folds of
        n // k indices each; the last fold also takes the remainder.

        Returns:
            list of np.ndarray: The index array of each fold.
        """
        if k < 2:
            raise InvalidInputError(f"k must be at least 2, got {k}.")
        if n < k:
            raise InvalidInputError(f"Cannot split {n} row(s) into {k} folds.")

        indices = shuffled_indices(n, rng)
        fold_size = n // k
        folds = []
        for i in range(k):
            start = i * fold_size
            end = n if i == k - 1 else (i + 1) * fold_size
            folds.append(indices[start:end])
        return folds

    @staticmethod
    def fold_scores(data, k, num_trees, random_state=None, verbose=False):
        """
        Trains and evaluates one RandomForest per fold.

        Returns:
            list of float: Held-out accuracy of each fold, in fold order.
        """
        if not isinstance(k, (int, np.integer)):
            raise InvalidInputError(f"k must be an integer, got {k!r}.")

        dataset = to_dataset(data)
        rng = check_random_state(random_state)
        folds = KFoldCrossValidation.fold_partition(len(dataset), k, rng)

        # The last fold is the largest, so it leaves the smallest training set
        smallest_train_size = len(dataset) - len(folds[-1])
        if RandomForest.training_size(smallest_train_size, DEFAULT_TEST_SIZE) == 0:
            raise InvalidInputError(
                f"{k} folds over {len(dataset)} row(s) leave only {smallest_train_size} training row(s) per fold, "
                f"too few for the forest's {DEFAULT_TEST_SIZE:.0%} held-out split."
            )

        scores = []
        for i, test_indices in enumerate(folds):
            train_mask = np.ones(len(dataset), dtype=bool)
            train_mask[test_indices] = False
            train_set, test_set = dataset[train_mask], dataset[test_indices]

            model = RandomForest(num_trees, random_state=rng)
            model.train(train_set)
            score = model.evaluate(test_set)
            scores.append(score)

            if verbose:
                print(f"Fold {i + 1}/{k}: trained on {len(train_set)} rows, "
                      f"tested on {len(test_set)} rows, accuracy {score:.4f}")
        return scores

    @staticmethod
    def perform(data, k, num_trees, random_state=None, verbose=False):
        """
        Performs k-fold cross-validation of a RandomForest of num_trees trees.

        Args:
            data: Labelled dataset, last column is the label.
            k (int): Number of folds, at least 2 and at most the number of rows. Every
                fold's training rows must still leave at least one row after the
                forest's own held-out split, so k must leave at least 2 training rows.
            num_trees (int): Number of trees in each fold's forest.
            random_state (None, int or np.random.Generator): Source of randomness.
            verbose (bool): Print per-fold scores.

        Returns:
            float: Mean held-out accuracy across the k folds, in [0, 1].
        """
        scores = KFoldCrossValidation.fold_scores(data, k, num_trees, random_state=random_state, verbose=verbose)
        average_score = float(np.mean(scores))
        if verbose:
            print(f"Average accuracy over {k} folds: {average_score:.4f}")
        return average_score
