import numpy as np
import pandas as pd

from .exceptions import InvalidArgumentError
from .logging_config import logger
from .matrix import Matrix


class DataPipeline():
    def __init__(self, config):
        self.config = config

    def transform(self) -> tuple[Matrix, Matrix]:
        """
        Reads the CSV at config['data_path'] and splits the target columns
        from the features
        ---
        Returns:
            X, Y (tuple): Matrices with one example per row
        """
        if not self.config.get('data_path'):
            raise InvalidArgumentError("Missing required config key 'data_path'")

        df = pd.read_csv(self.config['data_path'])

        targets = self.config.get('targets')
        if not targets:
            raise InvalidArgumentError("Missing required config key 'targets'")
        if isinstance(targets, str):
            targets = [targets]

        missing = [column for column in targets if column not in df.columns]
        if missing:
            raise InvalidArgumentError(f"Target columns {missing} not found in {self.config['data_path']}")

        X = df.drop(columns=targets)
        y = df[targets]

        X_array = X.values.astype(np.float64)
        y_array = y.values.astype(np.float64)

        logger.info(f"Loaded {X_array.shape[0]} rows, {X_array.shape[1]} features, "
                    f"{y_array.shape[1]} targets from {self.config['data_path']}")

        return Matrix.from_numpy(X_array), Matrix.from_numpy(y_array)
