import numpy as np
import pytest

from marquardt.data import DataPair, TrainingSet, validate_network_to_data
from marquardt.error import ConfigurationError
from marquardt.network import FeedForwardNetwork


class TestTrainingSet:
    def test_indexing(self):
        data = TrainingSet(
            [[0, 0], [0, 1], [1, 0], [1, 1]],
            [0, 1, 1, 0],
            significance=[1.0, 2.0, 3.0, 4.0],
        )
        assert len(data) == 4
        assert data.input_size == 2
        assert data.ideal_size == 1

        pair = data[2]
        assert isinstance(pair, DataPair)
        np.testing.assert_array_equal(pair.input, [1.0, 0.0])
        np.testing.assert_array_equal(pair.ideal, [1.0])
        assert pair.significance == 3.0

    def test_iteration(self):
        data = TrainingSet(np.eye(3), np.eye(3)[:, :2])
        pairs = list(data)
        assert len(pairs) == 3
        assert all(pair.significance == 1.0 for pair in pairs)

    def test_read_only(self):
        inputs = np.zeros((2, 2))
        data = TrainingSet(inputs, [1.0, 2.0])

        # The set holds its own copy
        inputs[0, 0] = 5.0
        assert data[0].input[0] == 0.0

        with pytest.raises(ValueError):
            data.inputs[0, 0] = 1.0
        with pytest.raises(ValueError):
            data[0].ideal[0] = 1.0

    def test_shape_errors(self):
        with pytest.raises(ValueError, match="rows"):
            TrainingSet(np.zeros((3, 2)), np.zeros(2))
        with pytest.raises(ValueError, match="significance"):
            TrainingSet(np.zeros((3, 2)), np.zeros(3), significance=[1.0, 1.0])
        with pytest.raises(ValueError):
            TrainingSet(np.zeros((2, 2, 2)), np.zeros(2))


class TestValidateNetworkToData:
    def test_matching(self):
        net = FeedForwardNetwork([2, 3, 1])
        validate_network_to_data(net, TrainingSet(np.zeros((4, 2)), np.zeros(4)))

    def test_input_mismatch(self):
        net = FeedForwardNetwork([3, 1])
        data = TrainingSet(np.zeros((4, 2)), np.zeros(4))
        with pytest.raises(ConfigurationError, match="inputs"):
            validate_network_to_data(net, data)

    def test_ideal_mismatch(self):
        net = FeedForwardNetwork([2, 2])
        data = TrainingSet(np.zeros((4, 2)), np.zeros(4))
        with pytest.raises(ConfigurationError, match="outputs"):
            validate_network_to_data(net, data)
