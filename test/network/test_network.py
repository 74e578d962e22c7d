import casadi as cs
import numpy as np
import pytest

from marquardt.network import (
    FeedForwardNetwork,
    Linear,
    ReLU,
    Sigmoid,
    Tanh,
    get_activation,
)


class TestFeedForwardNetwork:
    def test_sizes(self):
        net = FeedForwardNetwork([2, 3, 1])
        assert net.input_count == 2
        assert net.output_count == 1
        # (2*3 + 3) + (3*1 + 1)
        assert net.weight_count == 13

        net = FeedForwardNetwork([1, 1])
        assert net.weight_count == 2

    def test_invalid_layers(self):
        with pytest.raises(ValueError):
            FeedForwardNetwork([3])
        with pytest.raises(ValueError):
            FeedForwardNetwork([2, 0, 1])

    def test_activation_defaults(self):
        net = FeedForwardNetwork([2, 4, 4, 1])
        assert [f.name for f in net.activations] == ["tanh", "tanh", "linear"]

        net = FeedForwardNetwork([2, 1], output_activation="sigmoid")
        assert [f.name for f in net.activations] == ["sigmoid"]

    def test_array_round_trip_copies(self):
        net = FeedForwardNetwork([2, 2, 1])
        params = np.arange(net.weight_count, dtype=float)
        net.from_array(params)

        # Neither the input nor the output aliases internal storage
        params[0] = -100.0
        out = net.to_array()
        assert out[0] == 0.0
        out[1] = -100.0
        assert net.to_array()[1] == 1.0

    def test_from_array_shape(self):
        net = FeedForwardNetwork([2, 1])
        with pytest.raises(ValueError, match="shape"):
            net.from_array(np.zeros(net.weight_count + 1))

    def test_parameter_layout(self):
        """Weights are stored row-major per layer, followed by the bias."""
        net = FeedForwardNetwork([2, 1], output_activation="linear")
        net.from_array([1.0, 2.0, 0.5])  # W = [[1, 2]], b = [0.5]
        np.testing.assert_allclose(net.compute([3.0, 4.0]), [11.5])

        (W, b), = net.unpack(net.to_array())
        np.testing.assert_array_equal(W, [[1.0, 2.0]])
        np.testing.assert_array_equal(b, [0.5])

    def test_compute_single_and_batch(self):
        net = FeedForwardNetwork([3, 4, 2])
        net.randomize(seed=1)
        X = np.random.default_rng(0).normal(size=(5, 3))

        batch = net.compute(X)
        assert batch.shape == (5, 2)
        for i in range(5):
            y = net.compute(X[i])
            assert y.shape == (2,)
            np.testing.assert_allclose(y, batch[i])

    def test_compute_wrong_inputs(self):
        net = FeedForwardNetwork([3, 1])
        with pytest.raises(ValueError):
            net.compute(np.ones(2))

    def test_evaluate_does_not_change_params(self):
        net = FeedForwardNetwork([2, 3, 1])
        net.randomize(seed=2)
        before = net.to_array()
        net.evaluate(np.zeros(net.weight_count), np.ones(2))
        np.testing.assert_array_equal(net.to_array(), before)

    def test_randomize_seed(self):
        a = FeedForwardNetwork([2, 3, 1])
        b = FeedForwardNetwork([2, 3, 1])
        a.randomize(seed=42)
        b.randomize(seed=42)
        np.testing.assert_array_equal(a.to_array(), b.to_array())
        assert np.all(np.abs(a.to_array()) <= 1.0)

    def test_copy(self):
        net = FeedForwardNetwork([2, 3, 1], output_activation="sigmoid")
        net.randomize(seed=3)
        other = net.copy()
        np.testing.assert_array_equal(other.to_array(), net.to_array())

        other.from_array(np.zeros(other.weight_count))
        assert np.any(net.to_array() != 0.0)
        assert other.activations == net.activations

    @pytest.mark.parametrize("activation", ["tanh", "sigmoid", "relu", "linear"])
    def test_symbolic_matches_numeric(self, activation):
        net = FeedForwardNetwork([2, 3, 2], activation=activation)
        net.randomize(seed=4)

        x = cs.SX.sym("x", 2)
        w = cs.SX.sym("w", net.weight_count)
        f = cs.Function("net", [x, w], [net.symbolic(x, w)])

        inputs = np.array([0.3, -0.7])
        y_sym = f(inputs, net.to_array()).full().ravel()
        np.testing.assert_allclose(y_sym, net.compute(inputs), rtol=1e-12)


class TestActivations:
    def test_lookup(self):
        assert isinstance(get_activation("tanh"), Tanh)
        assert isinstance(get_activation("sigmoid"), Sigmoid)
        relu = ReLU()
        assert get_activation(relu) is relu

        with pytest.raises(ValueError, match="Unknown activation"):
            get_activation("softsign")

    @pytest.mark.parametrize("activation", [Linear(), Sigmoid(), Tanh(), ReLU()])
    def test_derivative(self, activation):
        """Analytic derivatives agree with central differences."""
        z = np.array([-1.5, -0.2, 0.4, 2.0])
        h = 1e-6
        expected = (activation(z + h) - activation(z - h)) / (2 * h)
        np.testing.assert_allclose(
            activation.derivative(z, activation(z)), expected, atol=1e-8
        )
