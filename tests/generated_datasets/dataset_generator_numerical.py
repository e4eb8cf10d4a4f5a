# tests/generated_datasets/dataset_generator_numerical.py
import random


def generate_numerical_step_label_data(
    num_samples=200,
    num_features=1,
    min_val=0.0,
    max_val=100.0,
    thresholds=None, # e.g., [25, 50, 75] applied to feature 0
    labels=None,     # e.g., [0, 1, 0, 1] - len must be len(thresholds)+1
    label_noise=0.0, # Probability of flipping to a random other label
    seed=None
):
    """
    Generates data where the label is a step function of feature 0.
    Features 1..num_features-1 are uniform noise.
    """
    if thresholds is None:
        thresholds = [50]
    if labels is None:
        labels = [0, 1] # label for val < t1; t1 <= val < t2; ...

    if len(labels) != len(thresholds) + 1:
        raise ValueError("Length of labels must be len(thresholds) + 1")

    rng = random.Random(seed)
    distinct_labels = sorted(set(labels))
    sorted_thresholds = sorted(thresholds)

    data = []
    for _ in range(num_samples):
        row = [rng.uniform(min_val, max_val) for _ in range(num_features)]

        label = labels[-1] # Default label for values above all thresholds
        for j, threshold in enumerate(sorted_thresholds):
            if row[0] < threshold:
                label = labels[j]
                break

        if label_noise > 0 and len(distinct_labels) > 1 and rng.random() < label_noise:
            label = rng.choice([l for l in distinct_labels if l != label])

        data.append(row + [label])
    return data


def generate_linear_boundary_data(
    num_samples=200,
    num_features=2,
    min_val=0.0,
    max_val=1.0,
    weights=None,    # label = 1 if sum(w_i * x_i) >= bias else 0
    bias=None,
    label_noise=0.0,
    seed=None
):
    """
    Generates binary-labelled data separated by a hyperplane.
    Axis-aligned trees need many splits to approximate it.
    """
    if weights is None:
        weights = [1.0] * num_features
    if len(weights) != num_features:
        raise ValueError("Length of weights must equal num_features")
    if bias is None:
        bias = sum(weights) * (min_val + max_val) / 2.0 # Hyperplane through the centre

    rng = random.Random(seed)
    data = []
    for _ in range(num_samples):
        row = [rng.uniform(min_val, max_val) for _ in range(num_features)]
        label = 1 if sum(w * x for w, x in zip(weights, row)) >= bias else 0
        if label_noise > 0 and rng.random() < label_noise:
            label = 1 - label
        data.append(row + [label])
    return data


def generate_gaussian_cluster_data(
    num_samples=300,
    centers=None,    # One center (list of coordinates) per class
    spread=1.0,
    seed=None
):
    """
    Generates gaussian blobs, one per class, with class i drawn around centers[i].
    Samples are spread evenly over the classes.
    """
    if centers is None:
        centers = [[0.0, 0.0], [5.0, 5.0], [0.0, 5.0]]
    num_features = len(centers[0])
    if any(len(c) != num_features for c in centers):
        raise ValueError("All centers must have the same dimension")

    rng = random.Random(seed)
    data = []
    for i in range(num_samples):
        label = i % len(centers)
        row = [rng.gauss(mu, spread) for mu in centers[label]]
        data.append(row + [label])
    rng.shuffle(data)
    return data


def get_dataset(config=None):
    """
    Generates a train and test dataset based on the config.
    Config example:
    {
        "type": "step", "linear" or "clusters",
        "num_samples_train": 200,
        "num_samples_test": 100,
        "params": {...generator specific keyword arguments...},
        "seed": 7
    }
    """
    if config is None:
        config = { # Default config
            "type": "step",
            "num_samples_train": 400,
            "num_samples_test": 200,
            "params": {"num_features": 2, "thresholds": [30, 70], "labels": [0, 1, 0]},
            "seed": 7
        }

    generators = {
        "step": generate_numerical_step_label_data,
        "linear": generate_linear_boundary_data,
        "clusters": generate_gaussian_cluster_data,
    }
    if config["type"] not in generators:
        raise ValueError(f"Unknown dataset type in config: {config['type']}")

    generator = generators[config["type"]]
    seed = config.get("seed")
    data_train = generator(num_samples=config["num_samples_train"], seed=seed, **config.get("params", {}))
    # Offset the seed so the test set is an independent draw
    data_test = generator(num_samples=config["num_samples_test"],
                          seed=None if seed is None else seed + 1,
                          **config.get("params", {}))
    return data_train, data_test


if __name__ == '__main__':
    print("Generating sample step dataset...")
    train_data_step, test_data_step = get_dataset()
    print(f"Generated {len(train_data_step)} training samples and {len(test_data_step)} test samples.")
    print("Sample training row:", random.choice(train_data_step) if train_data_step else "N/A")

    print("\nGenerating sample cluster dataset...")
    cluster_config = {"type": "clusters", "num_samples_train": 30, "num_samples_test": 15, "params": {"spread": 0.5}, "seed": 3}
    train_data_cl, test_data_cl = get_dataset(cluster_config)
    print(f"Generated {len(train_data_cl)} training samples and {len(test_data_cl)} test samples.")
    print("Sample testing row:", random.choice(test_data_cl) if test_data_cl else "N/A")
