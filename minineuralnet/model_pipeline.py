import matplotlib.pyplot as plt
from typing import List, Optional

from .activations import get_activation
from .config import validate_config
from .data_pipeline import DataPipeline
from .layers import Dense, Input
from .logging_config import logger, setup_logging
from .network import Network
from .printer import MatrixPrinter
from .random_source import NumpyRandomSource


class ModelPipeline:
    """
    Config-driven training of a minineuralnet Network.

    Builds the network described by a configuration dictionary, trains it
    with stochastic gradient descent and reports the loss history through
    the logger and a matplotlib plot.
    """
    def __init__(self, config, model_name='minineuralnet', auto_setup=True) -> None:
        """
        Initialize pipeline with configuration
        ---
        Args:
            config (Dict[str, Any]): Configuration dictionary
            model_name (str): Name for the model
        """
        self.config = validate_config(config)
        self.model_name = model_name
        self.data_pipeline = DataPipeline(config)
        self.printer = MatrixPrinter()

        self.input_features = config['input_features']
        self.model = None

        if config.get('log_file'):
            setup_logging(config['log_file'])

        if auto_setup:
            self.configure_model()

    def configure_model(self) -> Network:
        """
        Builds Input -> Dense(activ_fn) ... -> Dense(activ_final) from
        config['layer_sizes']
        ---
        Returns:
            self.model (Network)
        """
        logger.info(f"======= {self.model_name} =======")

        layer_sizes = self.config['layer_sizes']
        logger.info(f"Layer size: {[self.input_features] + layer_sizes}")

        activ_fn = get_activation(self.config['activ_fn'])
        logger.info(f"Activation Function: {activ_fn!r}")

        activ_final = get_activation(self.config['activ_final'])
        if activ_final is None:
            logger.info("No final activation function layer")
        else:
            logger.info(f"Final Activation Function: {activ_final!r}")

        layers = [Input(self.input_features)]
        for curr_size in layer_sizes[:-1]:  # All except the last layer
            layers.append(Dense(curr_size, activ_fn))
        layers.append(Dense(layer_sizes[-1], activ_final))

        seed = self.config.get('random_state')
        self.model = Network(
            layers,
            random_source=NumpyRandomSource(seed),
            learning_rate=self.config['learning_rate'],
        )
        logger.info(f"Learning rate: {self.config['learning_rate']}")
        self.model.summary()
        return self.model

    def plot_graphs(self, train_loss, save_path=None) -> None:
        """
        Plot the training loss per epoch
        ---
        Args:
            - train_loss (List[float]):
                Loss history returned by Network.fit
            - save_path (str, optional):
                Write the figure to this file instead of showing it
        """
        fig, ax = plt.subplots(figsize=(10, 6))

        epochs = range(len(train_loss))
        ax.plot(epochs, train_loss, 'b-', label='Training Loss', linewidth=2)
        ax.set_xlabel('Epoch')
        ax.set_ylabel('MSE Loss')
        ax.set_title(f'{self.model_name} Training Loss')
        ax.legend()
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        if save_path is not None:
            fig.savefig(save_path)
            logger.info(f"Saved loss curve to {save_path}")
        else:
            plt.show()
        plt.close(fig)

    def train_and_evaluate(self, X=None, Y=None, epochs=None) -> List[float]:
        """
        Trains the model, then logs the dataset loss and every prediction
        ---
        Args:
            X, Y (Matrix, optional): Training data; loaded through
                DataPipeline when omitted
            epochs (int, optional): Overrides config['epochs']
        ---
        Returns:
            train_loss (List[float]): Loss history, one entry per epoch
        """
        if self.model is None:
            raise ValueError("Your model has not been created. Call configure_model() first")

        if X is None or Y is None:
            X, Y = self.data_pipeline.transform()

        if epochs is None:
            epochs = self.config['epochs']

        train_loss = self.model.fit(X, Y, epochs, self.config['batch_size'])

        final_loss = self.model.loss(X, Y)
        logger.info(f"Final loss over {X.rows} examples: {final_loss:.5f}")

        for r in range(X.rows):
            row = X.slice_rows([r])
            prediction = self.model.predict(row)
            logger.info(f"Input {row.flatten()} -> prediction {[round(v, 4) for v in prediction.flatten()]}")

        for i, layer in enumerate(self.model.dense_layers()):
            self.printer.render(layer.weights, title=f"Dense layer {i} weights")

        plot_path: Optional[str] = self.config.get('plot_path')
        if plot_path:
            self.plot_graphs(train_loss, save_path=plot_path)

        return train_loss
