"""
Activation functions.

Each Activator pairs a forward nonlinearity `f(x)` with its derivative
`der(y)`. The derivative is expressed in terms of the activated OUTPUT y,
never the pre-activation sum, so callers must always pass it a layer's
activated output.
"""
import math

from .exceptions import InvalidArgumentError


class Activator:
    """Stateless pair of forward function and derivative-by-output."""

    name = 'activator'

    def f(self, x):
        raise NotImplementedError

    def der(self, y):
        raise NotImplementedError

    def __call__(self, x):
        return self.f(x)

    def __repr__(self):
        return f"{type(self).__name__}()"


class IdentityActivator(Activator):
    """
    f(x) = x.

    der(y) returns y itself rather than the constant 1. Do not rely on it
    for a meaningful gradient.
    """

    name = 'identity'

    def f(self, x):
        return float(x)

    def der(self, y):
        return float(y)


class SigmoidActivator(Activator):
    """
    Sigmoid activation function: sigma(x) = 1 / (1 + exp(-x))

    Squashes input values to range (0, 1).
    """

    name = 'sigmoid'

    def f(self, x):
        # Clip x to prevent overflow in exp
        x = min(max(x, -500.0), 500.0)
        return 1.0 / (1.0 + math.exp(-x))

    def der(self, y):
        return y * (1.0 - y)


class ReLUActivator(Activator):
    """ReLU activation: f(x) = max(0, x)"""

    name = 'relu'

    def f(self, x):
        return max(0.0, float(x))

    def der(self, y):
        return 1.0 if y > 0 else 0.0


Identity = IdentityActivator()
Sigmoid = SigmoidActivator()
ReLU = ReLUActivator()

ACTIVATIONS = {
    'identity': Identity,
    'none': Identity,
    'sigmoid': Sigmoid,
    'relu': ReLU,
}


def get_activation(name):
    """
    Resolve an activation name from a config file.
    ---
    Args:
        name : str or None
            'relu', 'sigmoid', 'identity'/'none', or None for no activation
    ---
    Returns:
        Activator or None
    """
    if name is None or isinstance(name, Activator):
        return name

    key = str(name).lower()
    if key not in ACTIVATIONS:
        raise InvalidArgumentError(f"Unidentified activation function '{name}'.")
    return ACTIVATIONS[key]
