# tests/test_cross_validation.py
import numpy as np
import pytest

from cart_forest.cross_validation import KFoldCrossValidation
from cart_forest.exceptions import InvalidInputError
from cart_forest.forest import RandomForest
from tests.generated_datasets.dataset_generator_numerical import generate_numerical_step_label_data


@pytest.fixture
def hundred_rows():
    return generate_numerical_step_label_data(num_samples=100, num_features=2, thresholds=[40], seed=12)


@pytest.mark.parametrize("n,k", [(100, 5), (10, 3), (7, 7), (23, 4), (2, 2)])
def test_folds_cover_every_index_exactly_once(n, k):
    folds = KFoldCrossValidation.fold_partition(n, k, np.random.default_rng(0))

    assert len(folds) == k
    combined = np.concatenate(folds)
    assert sorted(combined.tolist()) == list(range(n))
    for fold in folds[:-1]:
        assert len(fold) == n // k
    assert len(folds[-1]) == n - (k - 1) * (n // k)
    assert len(folds[-1]) >= len(folds[0])


@pytest.mark.parametrize("n,k", [(10, 1), (10, 0), (3, 4)])
def test_fold_partition_rejects_bad_k(n, k):
    with pytest.raises(InvalidInputError):
        KFoldCrossValidation.fold_partition(n, k, np.random.default_rng(0))


def test_perform_on_hundred_rows(hundred_rows, monkeypatch):
    test_fold_sizes = []
    original_evaluate = RandomForest.evaluate

    def recording_evaluate(self, data):
        test_fold_sizes.append(len(data))
        return original_evaluate(self, data)

    monkeypatch.setattr(RandomForest, "evaluate", recording_evaluate)
    score = KFoldCrossValidation.perform(hundred_rows, k=5, num_trees=3, random_state=4)

    assert isinstance(score, float)
    assert 0.0 <= score <= 1.0
    assert test_fold_sizes == [20] * 5


def test_perform_is_mean_of_fold_scores(hundred_rows):
    scores = KFoldCrossValidation.fold_scores(hundred_rows, 4, 2, random_state=9)
    assert len(scores) == 4
    assert KFoldCrossValidation.perform(hundred_rows, 4, 2, random_state=9) == pytest.approx(np.mean(scores))


def test_perform_is_deterministic_with_seed(hundred_rows):
    first = KFoldCrossValidation.perform(hundred_rows, 5, 3, random_state=17)
    second = KFoldCrossValidation.perform(hundred_rows, 5, 3, random_state=17)
    assert first == second


def test_perform_on_separable_data_is_accurate(hundred_rows):
    assert KFoldCrossValidation.perform(hundred_rows, 5, 5, random_state=2) >= 0.85


def test_perform_rejects_bad_arguments(hundred_rows):
    with pytest.raises(InvalidInputError):
        KFoldCrossValidation.perform(hundred_rows, 1, 3)
    with pytest.raises(InvalidInputError):
        KFoldCrossValidation.perform(hundred_rows[:3], 4, 3)
    with pytest.raises(InvalidInputError):
        KFoldCrossValidation.perform(hundred_rows, 2.5, 3)
    with pytest.raises(InvalidInputError):
        KFoldCrossValidation.perform([], 2, 3)


@pytest.mark.parametrize("n,k", [(2, 2), (3, 2)])
def test_perform_rejects_folds_too_small_to_train(n, k):
    data = [[float(i), i % 2] for i in range(n)]
    with pytest.raises(InvalidInputError, match="training row"):
        KFoldCrossValidation.perform(data, k, 1, random_state=0)


def test_perform_on_smallest_trainable_folds():
    data = [[1.0, 0], [2.0, 1], [3.0, 0], [4.0, 1]]
    score = KFoldCrossValidation.perform(data, 2, 1, random_state=0)
    assert 0.0 <= score <= 1.0


def test_verbose_prints_fold_scores(hundred_rows, capsys):
    KFoldCrossValidation.perform(hundred_rows, 2, 1, random_state=0, verbose=True)
    out = capsys.readouterr().out
    assert "Fold 1/2: trained on 50 rows, tested on 50 rows" in out
    assert "Average accuracy over 2 folds" in out
