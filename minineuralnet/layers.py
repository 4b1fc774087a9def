"""
Layers that make up a Network.

Every layer carries a `kind` tag from LayerKind. Only DENSE layers own
trainable parameters; the optimizer switches on the tag instead of
inspecting classes. All inputs and outputs are single-row matrices of
shape (1, nodes).
"""
from enum import Enum

from .activations import Identity
from .exceptions import InvalidArgumentError, InvalidTopologyError, ShapeMismatchError
from .matrix import Matrix


class LayerKind(Enum):
    INPUT = 'input'
    DENSE = 'dense'
    ACTIVATION = 'activation'


class Layer:
    kind = None

    @property
    def trainable(self):
        """True when the layer owns weights and biases."""
        return self.kind is LayerKind.DENSE

    @property
    def has_activation(self):
        return False

    def build(self, prev_output, random_source):
        """Allocate parameters for `prev_output` and return this layer's output."""
        return self.feedforward(prev_output)

    def feedforward(self, prev_output):
        raise NotImplementedError


class Input(Layer):
    """Entry point of a network; forwards its input unchanged."""

    kind = LayerKind.INPUT

    def __init__(self, input_size):
        if input_size <= 0:
            raise InvalidArgumentError(f"Input size must be positive, got {input_size}")
        self.input_size = input_size

    def placeholder(self):
        """Zero (1, input_size) matrix used for shape inference."""
        return Matrix.zeros(1, self.input_size)

    def build(self, prev_output=None, random_source=None):
        return self.placeholder()

    def feedforward(self, prev_output):
        return prev_output

    def __repr__(self):
        return f"Input({self.input_size})"


class Dense(Layer):
    """
    Fully connected layer: output = activation(prev_output dot weights + biases).

    weights has shape (previous layer size, nodes) and biases (1, nodes).
    Both are allocated by `build` and only ever changed through `update`.
    """

    kind = LayerKind.DENSE

    def __init__(self, nodes, activation=None):
        if nodes <= 0:
            raise InvalidArgumentError(f"Dense layer needs a positive node count, got {nodes}")
        self.nodes = nodes
        self.activation = activation
        self.weights = None
        self.biases = None

    @property
    def has_activation(self):
        return self.activation is not None

    @property
    def built(self):
        return self.weights is not None

    def build(self, prev_output, random_source):
        """
        Random weights in [-1, 1), zero biases, then a forward pass.
        ---
        Args:
            prev_output : Matrix
                Output of the previous layer, shape (1, n)
            random_source : RandomSource
                Supplies the uniform draws for the weights
        """
        if self.built:
            raise InvalidTopologyError(f"{self!r} is already built; use copy() to reuse it")
        self.weights = Matrix(prev_output.cols, self.nodes).randomize(random_source)
        self.biases = Matrix.zeros(1, self.nodes)
        return self.feedforward(prev_output)

    def feedforward(self, prev_output):
        output = prev_output.dot(self.weights) + self.biases
        if self.activation is not None:
            output = output.map(self.activation.f)
        return output

    def update(self, dw, db):
        """
        In-place `weights -= dw`, `biases -= db`.
        Callers scale dw and db by the learning rate beforehand.
        """
        if dw.shape != self.weights.shape or db.shape != self.biases.shape:
            raise ShapeMismatchError(
                f"Update shapes {dw.shape}/{db.shape} do not match "
                f"parameters {self.weights.shape}/{self.biases.shape}"
            )
        self.weights.subtract_(dw)
        self.biases.subtract_(db)

    def mutate(self, fn):
        """Replace every weight and bias w with fn(w), in place."""
        for params in (self.weights, self.biases):
            params.data = [float(fn(value)) for value in params.data]

    def copy(self):
        clone = Dense(self.nodes, self.activation)
        if self.built:
            clone.weights = self.weights.copy()
            clone.biases = self.biases.copy()
        return clone

    def __repr__(self):
        return f"Dense({self.nodes}, activation={self.activation!r})"


class Activation(Layer):
    """Standalone nonlinearity applied to the previous layer's output."""

    kind = LayerKind.ACTIVATION

    def __init__(self, activation):
        if activation is None:
            raise InvalidArgumentError("Activation layer needs an activation function")
        self.activation = activation

    @property
    def has_activation(self):
        return True

    def feedforward(self, prev_output):
        return prev_output.map(self.activation.f)

    def __repr__(self):
        return f"Activation({self.activation!r})"


def activation_of(layers, index):
    """
    Activation that applies to the Dense layer at `index`.

    That is the layer's own activation, else the activation of a standalone
    Activation layer directly after it, else Identity.
    """
    layer = layers[index]
    if layer.has_activation:
        return layer.activation

    if index + 1 < len(layers) and layers[index + 1].kind is LayerKind.ACTIVATION:
        return layers[index + 1].activation
    return Identity
