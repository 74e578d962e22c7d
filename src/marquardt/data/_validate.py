from marquardt.error import ConfigurationError

__all__ = ["validate_network_to_data"]


def validate_network_to_data(network, training) -> None:
    """Check that a training set can be used with a network.

    Raises
    ------
    ConfigurationError
        If the input or ideal sizes of the training set do not match the
        network's input and output counts.
    """
    if training.input_size != network.input_count:
        raise ConfigurationError(
            f"Training data has {training.input_size} inputs but the network "
            f"expects {network.input_count}"
        )
    if training.ideal_size != network.output_count:
        raise ConfigurationError(
            f"Training data has {training.ideal_size} ideal values but the network "
            f"has {network.output_count} outputs"
        )
