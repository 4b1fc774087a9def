import pandas as pd

from .logging_config import logger


class MatrixPrinter:
    """
    Diagnostic renderer for matrices.

    Formats a Matrix as a pandas DataFrame rounded to `decimals` places and
    writes it through the library logger.
    """

    def __init__(self, decimals=2, log=None):
        self.decimals = decimals
        self.log = log if log is not None else logger

    def to_frame(self, matrix) -> pd.DataFrame:
        return pd.DataFrame(matrix.rows_as_lists()).round(self.decimals)

    def render(self, matrix, title=None):
        """
        Log the matrix and return it unchanged so calls can be chained.
        """
        if title is not None:
            self.log.info(f"==== {title} ====")
        self.log.info(f"\n{self.to_frame(matrix).to_string(index=False, header=False)}")
        return matrix
