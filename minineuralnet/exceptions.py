class NeuralNetError(ValueError):
    """Base class for every error raised by minineuralnet."""


class ShapeMismatchError(NeuralNetError):
    """Operand shapes are incompatible for the requested operation."""


class InvalidTopologyError(NeuralNetError):
    """The layer sequence cannot be built or trained as given."""


class MissingActivationError(NeuralNetError):
    """The terminal parametrized layer carries no activation."""


class InvalidArgumentError(NeuralNetError):
    """A scalar argument or configuration value is out of range."""


class RowCountMismatchError(ShapeMismatchError, InvalidArgumentError):
    """Inputs and targets hold a different number of examples."""
