from .exceptions import (
    InvalidArgumentError,
    InvalidTopologyError,
    MissingActivationError,
    RowCountMismatchError,
    ShapeMismatchError,
)
from .layers import LayerKind, activation_of
from .logging_config import logger
from .losses import MSE
from .matrix import mean
from .random_source import NumpyRandomSource, shuffled_indices


class StochasticGradientDescent:
    """
    Online stochastic gradient descent with backpropagation.

    Every epoch samples `batch_size` distinct rows of the training set and
    runs one full forward pass, backward pass and parameter update per row.
    Gradients are never accumulated across the batch; the batch only decides
    which examples are visited.
    """

    def __init__(self, network, learning_rate=0.3, seed=None):
        """
        Args:
            network : Network
                Network whose Dense layers are trained in place
            learning_rate : float, default=0.3
                Step size applied to every weight and bias delta
            seed : int, optional
                Seed for batch sampling. When omitted batches are drawn
                from the network's own random source.
        """
        if learning_rate <= 0:
            raise InvalidArgumentError(f"Learning rate must be positive, got {learning_rate}")

        self.network = network
        self.learning_rate = learning_rate

        if seed is None:
            self.sampler = network.random_source
        else:
            self.sampler = NumpyRandomSource(seed)

    def output_layer(self):
        """
        Index of the Dense layer that produces the prediction, and the
        activation applied to its output.
        """
        layers = self.network.layers
        last = layers[-1]

        if last.kind is LayerKind.ACTIVATION:
            index = len(layers) - 2
            if layers[index].kind is not LayerKind.DENSE:
                raise InvalidTopologyError(
                    f"Activation output layer must follow a Dense layer, found {layers[index]!r}"
                )
            return index, last.activation

        if last.kind is LayerKind.DENSE:
            if last.activation is None:
                raise MissingActivationError("No activation function found for the last layer")
            return len(layers) - 1, last.activation

        raise InvalidTopologyError(f"Invalid last layer type: {last!r}")

    def backprop(self, y_true, layer_outputs):
        """
        Propagate the error of one example backwards and update every Dense
        layer.
        ---
        Args:
            y_true : Matrix
                Target row, shape (1, output_size)
            layer_outputs : List[Matrix]
                Output of every layer from Network.feedforward
        """
        layers = self.network.layers
        lr = self.learning_rate
        index, activation = self.output_layer()

        # ===== Output layer =====
        delta = MSE.delta(y_true, layer_outputs[-1], activation)
        output_layer = layers[index]
        dw = layer_outputs[index - 1].transposed.dot(delta)
        output_layer.update(dw * lr, mean(delta, axis=0) * lr)

        # ===== Hidden layers, walking towards the input =====
        senior = output_layer
        for i in range(index - 1, 0, -1):
            layer = layers[i]
            if not layer.trainable:
                continue

            activation = activation_of(layers, i)
            # der is evaluated on the activated output, which sits one slot
            # further when a standalone Activation layer follows
            if not layer.has_activation and layers[i + 1].kind is LayerKind.ACTIVATION:
                activated = layer_outputs[i + 1]
            else:
                activated = layer_outputs[i]

            delta = delta.dot(senior.weights.transposed) * activated.map(activation.der)
            dw = layer_outputs[i - 1].transposed.dot(delta)
            # Hidden biases take the raw delta, only the output layer averages
            layer.update(dw * lr, delta * lr)
            senior = layer

    def fit(self, x, y, epochs, batch_size, log_every=None):
        """
        Train the network.
        ---
        Args:
            x : Matrix
                Inputs, one example per row, shape (N, input_size)
            y : Matrix
                Targets, shape (N, output_size)
            epochs : int
                Epochs run are 0..epochs inclusive
            batch_size : int
                Rows sampled without replacement per epoch, at most N
            log_every : int, optional
                Epoch interval for INFO progress lines
        ---
        Returns:
            history : List[float]
                Mean loss of the sampled examples, one entry per epoch
        ---
        Raises:
            RowCountMismatchError: x and y differ in rows; catchable as either
                ShapeMismatchError or InvalidArgumentError
            ShapeMismatchError: column counts do not fit the network
            InvalidArgumentError: batch_size outside 1..N or negative epochs
        """
        if x.rows != y.rows:
            raise RowCountMismatchError(
                f"Input rows ({x.rows}) do not match target rows ({y.rows})"
            )
        if x.cols != self.network.input_size:
            raise ShapeMismatchError(
                f"Inputs have {x.cols} columns, network expects {self.network.input_size}"
            )
        if y.cols != self.network.output_size:
            raise ShapeMismatchError(
                f"Targets have {y.cols} columns, network produces {self.network.output_size}"
            )
        if batch_size < 1 or batch_size > x.rows:
            raise InvalidArgumentError(
                f"Batch size must be between 1 and {x.rows}, got {batch_size}"
            )
        if epochs < 0:
            raise InvalidArgumentError(f"Epochs cannot be negative, got {epochs}")

        # Fail on an untrainable topology before any parameter moves
        self.output_layer()

        if log_every is None:
            log_every = max(1, (epochs + 1) // 10)

        logger.info(f"Beginning training: {epochs + 1} epochs, batch size {batch_size}, "
                    f"learning rate {self.learning_rate}")

        history = []
        for epoch in range(epochs + 1):
            sample = shuffled_indices(self.sampler, x.rows)[:batch_size]
            batch_x = x.slice_rows(sample)
            batch_y = y.slice_rows(sample)

            epoch_losses = []
            for i in range(batch_size):
                y_true = batch_y.slice_rows([i])
                layer_outputs = self.network.feedforward(batch_x.slice_rows([i]))
                epoch_losses.append(MSE.loss(y_true, layer_outputs[-1]))
                self.backprop(y_true, layer_outputs)

            avg_loss = sum(epoch_losses) / len(epoch_losses)
            history.append(avg_loss)

            logger.debug(f"Epoch {epoch}: rows {sample} | Train Loss: {avg_loss:.6f}")
            if epoch % log_every == 0 or epoch == epochs:
                logger.info(f"Epoch {epoch}/{epochs} completed. Train Loss: {avg_loss:.4f}")

        return history
