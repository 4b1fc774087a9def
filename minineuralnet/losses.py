class MSE:
    """
    Mean squared error.

    `loss` reports the scalar error of a prediction, `delta` gives the error
    signal of the output layer that starts backpropagation.
    """

    @staticmethod
    def loss(y_true, y_pred):
        """
        Mean of squared element-wise differences.
        ---
        Args:
            y_true : Matrix
            y_pred : Matrix
                Same shape as y_true
        ---
        Returns:
            loss : float
        """
        diff = y_pred - y_true
        squared = (diff * diff).flatten()
        return sum(squared) / len(squared)

    @staticmethod
    def delta(y_true, y_pred, activation):
        """
        (y_pred - y_true) * activation.der(y_pred), element-wise.
        y_pred must be the activated output of the network.
        """
        return (y_pred - y_true) * y_pred.map(activation.der)
