import logging
import math
import numpy as np
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from minineuralnet.activations import Sigmoid
from minineuralnet.exceptions import (
    InvalidArgumentError,
    InvalidTopologyError,
    MissingActivationError,
    RowCountMismatchError,
    ShapeMismatchError,
)
from minineuralnet.layers import Activation, Dense, Input
from minineuralnet.losses import MSE
from minineuralnet.matrix import Matrix
from minineuralnet.network import Network
from minineuralnet.optimizer import StochasticGradientDescent
from minineuralnet.random_source import NumpyRandomSource, shuffled_indices

XOR_X = Matrix.from_rows([[0, 0], [0, 1], [1, 0], [1, 1]])
XOR_Y = Matrix.from_rows([[0], [1], [1], [0]])


class FixedSource:
    def __init__(self, values):
        self.values = list(values)
        self.i = 0

    def next_uniform(self):
        value = self.values[self.i % len(self.values)]
        self.i += 1
        return value


class UniformOnlySource:
    """Seeded RandomSource that offers nothing beyond next_uniform()."""

    def __init__(self, seed):
        self.rng = np.random.default_rng(seed)

    def next_uniform(self):
        return float(self.rng.random())


def snapshot(net):
    return [(layer.weights.copy(), layer.biases.copy()) for layer in net.dense_layers()]


def sigmoid(x):
    return 1 / (1 + math.exp(-x))


def test_mse():
    y_true = Matrix.from_rows([[1, 0]])
    y_pred = Matrix.from_rows([[0.5, 0.5]])
    assert MSE.loss(y_true, y_pred) == 0.25

    delta = MSE.delta(y_true, y_pred, Sigmoid)
    assert delta == Matrix.from_rows([[-0.5 * 0.25, 0.5 * 0.25]])

    with pytest.raises(ShapeMismatchError):
        MSE.loss(y_true, Matrix(1, 3))


def test_single_backprop_step_matches_hand_computation():
    """Input(1) -> Dense(1, Sigmoid) -> Dense(1, Sigmoid), weights 0.5 and -0.5."""
    lr = 0.3
    net = Network(
        [Input(1), Dense(1, Sigmoid), Dense(1, Sigmoid)],
        random_source=FixedSource([0.75, 0.25]),
        learning_rate=lr,
    )
    hidden, output = net.dense_layers()
    assert hidden.weights[0, 0] == 0.5
    assert output.weights[0, 0] == -0.5

    x = Matrix.from_rows([[1.0]])
    y = Matrix.from_rows([[1.0]])
    net.optimizer.backprop(y, net.feedforward(x))

    h = sigmoid(0.5)
    o = sigmoid(-0.5 * h)
    delta_o = (o - 1) * o * (1 - o)
    w2 = -0.5 - lr * h * delta_o
    # the hidden delta is propagated through the already updated output weights
    delta_h = delta_o * w2 * h * (1 - h)

    assert output.weights[0, 0] == pytest.approx(w2)
    assert output.biases[0, 0] == pytest.approx(-lr * delta_o)
    assert hidden.weights[0, 0] == pytest.approx(0.5 - lr * delta_h)
    # hidden biases take the raw (not averaged) delta
    assert hidden.biases[0, 0] == pytest.approx(-lr * delta_h)


def test_standalone_activation_trains_like_attached_activation():
    attached = Network(
        [Input(2), Dense(3, Sigmoid), Dense(1, Sigmoid)],
        random_source=NumpyRandomSource(5), seed=9,
    )
    standalone = Network(
        [Input(2), Dense(3), Activation(Sigmoid), Dense(1), Activation(Sigmoid)],
        random_source=NumpyRandomSource(5), seed=9,
    )

    attached.fit(XOR_X, XOR_Y, epochs=20, batch_size=3)
    standalone.fit(XOR_X, XOR_Y, epochs=20, batch_size=3)

    for a, b in zip(attached.dense_layers(), standalone.dense_layers()):
        assert a.weights.allclose(b.weights, tol=1e-12)
        assert a.biases.allclose(b.biases, tol=1e-12)


def test_output_layer_resolution():
    net = Network([Input(2), Dense(2), Activation(Sigmoid)])
    index, activation = net.optimizer.output_layer()
    assert index == 1
    assert activation is Sigmoid

    net = Network([Input(2), Dense(2, Sigmoid)])
    assert net.optimizer.output_layer() == (1, Sigmoid)


def test_missing_output_activation():
    net = Network([Input(2), Dense(1)])
    before = snapshot(net)
    with pytest.raises(MissingActivationError):
        net.fit(XOR_X, XOR_Y, epochs=1, batch_size=2)
    assert snapshot(net) == before


@pytest.mark.parametrize("layers", [
    [Input(2)],
    [Input(2), Activation(Sigmoid)],
])
def test_untrainable_topology(layers):
    net = Network(layers)
    with pytest.raises(InvalidTopologyError):
        net.optimizer.output_layer()


def test_batch_larger_than_dataset_leaves_parameters_untouched():
    net = Network([Input(2), Dense(2, Sigmoid), Dense(1, Sigmoid)], random_source=NumpyRandomSource(0))
    before = snapshot(net)
    with pytest.raises(InvalidArgumentError):
        net.fit(XOR_X, XOR_Y, epochs=10, batch_size=5)
    assert snapshot(net) == before


def test_fit_shape_checks():
    net = Network([Input(2), Dense(1, Sigmoid)])
    with pytest.raises(ShapeMismatchError):
        net.fit(XOR_X, XOR_Y.slice_rows([0, 1]), epochs=1, batch_size=1)
    with pytest.raises(ShapeMismatchError):
        net.fit(Matrix(4, 3), XOR_Y, epochs=1, batch_size=1)
    with pytest.raises(ShapeMismatchError):
        net.fit(XOR_X, Matrix(4, 2), epochs=1, batch_size=1)


def test_invalid_hyperparameters():
    net = Network([Input(2), Dense(1, Sigmoid)])
    with pytest.raises(InvalidArgumentError):
        StochasticGradientDescent(net, learning_rate=0)
    with pytest.raises(InvalidArgumentError):
        net.fit(XOR_X, XOR_Y, epochs=-1, batch_size=1)
    with pytest.raises(InvalidArgumentError):
        net.fit(XOR_X, XOR_Y, epochs=1, batch_size=0)


def test_history_has_one_entry_per_epoch_inclusive():
    net = Network([Input(2), Dense(2, Sigmoid), Dense(1, Sigmoid)], random_source=NumpyRandomSource(0))
    history = net.fit(XOR_X, XOR_Y, epochs=3, batch_size=2)
    assert len(history) == 4
    assert all(loss >= 0 for loss in history)


def test_seeded_training_is_reproducible():
    def train():
        net = Network(
            [Input(2), Dense(3, Sigmoid), Dense(1, Sigmoid)],
            random_source=NumpyRandomSource(123),
        )
        net.fit(XOR_X, XOR_Y, epochs=50, batch_size=2)
        return snapshot(net)

    assert train() == train()


def test_training_with_uniform_only_source_is_reproducible():
    def train():
        net = Network(
            [Input(2), Dense(3, Sigmoid), Dense(1, Sigmoid)],
            random_source=UniformOnlySource(1),
        )
        net.fit(XOR_X, XOR_Y, epochs=30, batch_size=2)
        return snapshot(net)

    assert train() == train()


def test_shuffled_indices_from_uniform_only_source():
    source = UniformOnlySource(4)
    for n in [1, 2, 5, 10]:
        order = shuffled_indices(source, n)
        assert sorted(order) == list(range(n))

    assert shuffled_indices(UniformOnlySource(8), 10) == shuffled_indices(UniformOnlySource(8), 10)


def test_row_count_mismatch_is_shape_and_argument_error():
    net = Network([Input(2), Dense(1, Sigmoid)])
    before = snapshot(net)
    short_y = XOR_Y.slice_rows([0, 1])

    with pytest.raises(RowCountMismatchError):
        net.fit(XOR_X, short_y, epochs=1, batch_size=1)
    with pytest.raises(ShapeMismatchError):
        net.fit(XOR_X, short_y, epochs=1, batch_size=1)
    with pytest.raises(InvalidArgumentError):
        net.fit(XOR_X, short_y, epochs=1, batch_size=1)
    assert snapshot(net) == before


def test_xor_end_to_end():
    """Online SGD learns XOR."""
    net = Network(
        [Input(2), Dense(4, Sigmoid), Dense(1, Sigmoid)],
        random_source=NumpyRandomSource(1),
        learning_rate=0.5,
    )
    initial_loss = net.loss(XOR_X, XOR_Y)

    history = net.fit(XOR_X, XOR_Y, epochs=8000, batch_size=4)

    final_loss = net.loss(XOR_X, XOR_Y)
    logging.info(f"XOR loss: {initial_loss:.4f} -> {final_loss:.4f}")

    assert sum(history[:100]) / 100 > sum(history[-100:]) / 100, "Loss should decrease during training"
    assert final_loss < initial_loss
    assert final_loss < 0.05, f"Final loss too high: {final_loss:.4f}"

    predict = lambda row: net.predict(Matrix.from_rows([row]))[0, 0]
    assert predict([0, 1]) > 0.5
    assert predict([1, 0]) > 0.5
    assert predict([0, 0]) < 0.5
    assert predict([1, 1]) < 0.5


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    print("Running optimizer tests...")
    test_single_backprop_step_matches_hand_computation()
    print("test_single_backprop_step_matches_hand_computation passed")

    test_xor_end_to_end()
    print("test_xor_end_to_end passed")

    print("\nAll tests passed!")
