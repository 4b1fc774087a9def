from .exceptions import InvalidTopologyError, RowCountMismatchError, ShapeMismatchError
from .layers import LayerKind
from .logging_config import logger
from .losses import MSE
from .optimizer import StochasticGradientDescent
from .random_source import NumpyRandomSource


class Network:
    """
    Ordered stack of layers, starting with an Input layer.

    The network is built as soon as it is constructed: a zero placeholder
    is pushed through every layer so that each Dense layer allocates weights
    of the right shape. Shapes never change afterwards; only the values of
    weights and biases move during training.
    """

    def __init__(self, layers, random_source=None, learning_rate=0.3, seed=None):
        """
        Args:
            layers : sequence of Layer
                First element must be an Input layer
            random_source : RandomSource, optional
                Supplies uniform draws for weight initialisation
                (default: unseeded NumpyRandomSource)
            learning_rate : float, default=0.3
                Learning rate of the network's optimizer
            seed : int, optional
                Seed for the optimizer's batch sampling
        """
        layers = tuple(layers)
        if not layers or layers[0].kind is not LayerKind.INPUT:
            raise InvalidTopologyError("First layer must be Input layer")
        if any(layer.kind is LayerKind.INPUT for layer in layers[1:]):
            raise InvalidTopologyError("Only the first layer may be an Input layer")
        if len({id(layer) for layer in layers}) != len(layers):
            raise InvalidTopologyError("The same layer instance appears more than once")
        if any(layer.trainable and layer.built for layer in layers):
            raise InvalidTopologyError("A Dense layer already built by another network cannot be reused")

        self.layers = layers
        self.input_layer = layers[0]
        self.random_source = random_source if random_source is not None else NumpyRandomSource()
        self.output_size = None

        self._build()
        self.optimizer = StochasticGradientDescent(self, learning_rate=learning_rate, seed=seed)

    @property
    def n_layers(self):
        return len(self.layers)

    @property
    def input_size(self):
        return self.input_layer.input_size

    def _build(self):
        """Setup layer parameters by feeding forward a placeholder matrix of zeros."""
        output = self.input_layer.build()
        for layer in self.layers[1:]:
            output = layer.build(output, self.random_source)
        self.output_size = output.cols

    def feedforward(self, input):
        """
        Output of every layer for a single example.
        ---
        Args:
            input : Matrix
                Shape (1, input_size)
        ---
        Returns:
            layer_outputs : List[Matrix]
                One entry per layer; index 0 is the input itself and the
                last entry is the prediction
        """
        if input.shape != (1, self.input_size):
            raise ShapeMismatchError(
                f"Input matrix has shape {input.shape}, network expects (1, {self.input_size})"
            )

        layer_outputs = [self.input_layer.feedforward(input)]
        for layer in self.layers[1:]:
            layer_outputs.append(layer.feedforward(layer_outputs[-1]))
        return layer_outputs

    def predict(self, input):
        """
        The network makes a prediction for the given input row.
        ---
        Returns:
            Matrix of shape (1, output_size)
        """
        return self.feedforward(input)[-1]

    def fit(self, input, target, epochs, batch_size, log_every=None):
        """Train in place with the network's optimizer; returns the loss history."""
        return self.optimizer.fit(input, target, epochs, batch_size, log_every=log_every)

    def loss(self, input, target):
        """Mean squared error over every row of a dataset."""
        if input.rows != target.rows:
            raise RowCountMismatchError(
                f"Input rows ({input.rows}) do not match target rows ({target.rows})"
            )
        losses = [
            MSE.loss(target.slice_rows([r]), self.predict(input.slice_rows([r])))
            for r in range(input.rows)
        ]
        return sum(losses) / len(losses)

    def dense_layers(self):
        return [layer for layer in self.layers if layer.trainable]

    def copy(self):
        """
        Independent copy with the same parameters.
        Stateless layers are shared; Dense layers are deep-copied.
        """
        clone = Network.__new__(Network)
        clone.layers = tuple(layer.copy() if layer.trainable else layer for layer in self.layers)
        clone.input_layer = clone.layers[0]
        clone.random_source = self.random_source
        clone.output_size = self.output_size
        clone.optimizer = StochasticGradientDescent(clone, learning_rate=self.optimizer.learning_rate)
        return clone

    def mutate(self, fn):
        """Apply fn to every weight and bias of every Dense layer, in place."""
        for layer in self.dense_layers():
            layer.mutate(fn)

    def summary(self):
        """Log one line per layer with its output shape."""
        logger.info("========== Network ===========")
        output = self.input_layer.placeholder()
        for i, layer in enumerate(self.layers):
            output = layer.feedforward(output)
            logger.info(f"[{i}] {layer!r} -> {output.shape}")
        logger.info("==============================")
