import yaml

from .exceptions import InvalidArgumentError

REQUIRED_KEYS = (
    'input_features',
    'layer_sizes',
    'activ_fn',
    'activ_final',
    'learning_rate',
    'epochs',
    'batch_size',
)


def validate_config(config):
    """Raise InvalidArgumentError naming the first required key that is missing."""
    for key in REQUIRED_KEYS:
        if key not in config:
            raise InvalidArgumentError(f"Missing required config key '{key}'")
    if not config['layer_sizes']:
        raise InvalidArgumentError("Config key 'layer_sizes' must list at least one layer")
    return config


def load_config(path):
    """
    Load a training configuration from a YAML file.
    ---
    Args:
        path (str): Path to the YAML file
    Returns:
        config (Dict[str, Any]): Validated configuration dictionary
    """
    with open(path) as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise InvalidArgumentError(f"Config file {path} does not contain a mapping")
    return validate_config(config)
