from .activations import Identity, ReLU, Sigmoid, get_activation
from .data_pipeline import DataPipeline
from .exceptions import (
    InvalidArgumentError,
    InvalidTopologyError,
    MissingActivationError,
    NeuralNetError,
    RowCountMismatchError,
    ShapeMismatchError,
)
from .layers import Activation, Dense, Input, LayerKind
from .losses import MSE
from .matrix import Matrix, mean
from .model_pipeline import ModelPipeline
from .network import Network
from .optimizer import StochasticGradientDescent
from .printer import MatrixPrinter
from .random_source import NumpyRandomSource, RandomSource
