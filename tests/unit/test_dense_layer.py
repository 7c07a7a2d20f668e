import numpy as np
import pytest

from mlpnet.core.activations import ReLU, relu, relu_deriv
from mlpnet.core.dense import DenseLayer


def _zeroed(num_nodes, num_weights):
    layer = DenseLayer(num_nodes, num_weights, rng=np.random.default_rng(0))
    layer.weights[:] = 0.0
    layer.bias[:] = 0.0
    return layer


def test_relu_and_derivative():
    x = np.array([-2.0, -1e-9, 0.0, 1e-9, 3.5])
    out = relu(x)
    assert np.all(out >= 0.0)
    assert np.allclose(out[x > 0], x[x > 0])
    assert np.array_equal(relu_deriv(x), (x > 0).astype(np.float64))
    assert ReLU().derivative(np.array([0.0]))[0] == 0.0


def test_initial_state_and_shapes():
    layer = DenseLayer(3, 2, rng=np.random.default_rng(1))
    assert layer.weights.shape == (3, 2)
    assert layer.bias.shape == layer.output.shape == layer.error.shape == (3,)
    assert np.all((layer.weights >= 0.0) & (layer.weights < 1.0))
    assert np.all((layer.bias >= 0.0) & (layer.bias < 1.0))
    assert not layer.output.any()
    assert not layer.error.any()


def test_zero_parameters_give_zero_output():
    layer = _zeroed(4, 3)
    out = layer.feedforward([5.0, -2.0, 7.5])
    assert np.array_equal(out, np.zeros(4))


def test_feedforward_matches_weighted_sum_and_is_deterministic():
    layer = _zeroed(2, 2)
    layer.weights[:] = [[1.0, 2.0], [-1.0, -1.0]]
    layer.bias[:] = [0.5, 0.25]
    first = layer.feedforward([1.0, 1.0]).copy()
    assert np.allclose(first, [3.5, 0.0])
    second = layer.feedforward([1.0, 1.0])
    assert np.array_equal(first, second)


def test_feedforward_truncates_short_input():
    layer = _zeroed(1, 3)
    layer.weights[:] = [[1.0, 10.0, 100.0]]
    assert layer.feedforward([2.0])[0] == pytest.approx(2.0)


def test_output_error_uses_output_slope():
    layer = _zeroed(2, 1)
    layer.output[:] = [0.5, 0.0]
    layer.compute_output_error([1.0, 1.0])
    assert np.allclose(layer.error, [0.5, 0.0])


def test_output_error_ignores_extra_nodes():
    layer = _zeroed(3, 1)
    layer.output[:] = [1.0, 1.0, 1.0]
    layer.error[:] = 9.0
    layer.compute_output_error([0.0])
    assert np.allclose(layer.error, [-1.0, 9.0, 9.0])


def test_backpropagate_projects_through_next_weights():
    hidden = _zeroed(2, 1)
    hidden.output[:] = [1.0, 0.0]
    nxt = _zeroed(1, 2)
    nxt.weights[:] = [[0.5, 2.0]]
    nxt.error[:] = [0.2]
    hidden.backpropagate(nxt)
    assert np.allclose(hidden.error, [0.1, 0.0])


def test_backpropagate_rejects_mismatched_layers():
    with pytest.raises(ValueError):
        _zeroed(3, 1).backpropagate(_zeroed(1, 2))


def test_optimize_applies_delta_rule():
    layer = _zeroed(1, 2)
    layer.error[:] = [0.5]
    layer.optimize([2.0, -1.0], learning_rate=0.1)
    assert layer.bias[0] == pytest.approx(0.05)
    assert np.allclose(layer.weights, [[0.1, -0.05]])


def test_grow_preserves_existing_state():
    layer = DenseLayer(2, 2, rng=np.random.default_rng(3))
    layer.feedforward([1.0, 1.0])
    outputs = layer.output.copy()
    bias = layer.bias.copy()
    weights = layer.weights.copy()

    layer.resize(4, 3)

    assert layer.num_nodes == 4 and layer.num_weights == 3
    assert layer.weights.shape == (4, 3)
    assert np.array_equal(layer.output[:2], outputs)
    assert np.array_equal(layer.bias[:2], bias)
    assert np.array_equal(layer.weights[:2, :2], weights)
    assert np.array_equal(layer.output[2:], np.zeros(2))
    assert np.all((layer.weights[:, 2] >= 0.0) & (layer.weights[:, 2] < 1.0))


def test_shrink_truncates():
    layer = DenseLayer(3, 3, rng=np.random.default_rng(4))
    weights = layer.weights.copy()
    layer.resize(2, 1)
    assert layer.weights.shape == (2, 1)
    assert np.array_equal(layer.weights, weights[:2, :1])
    assert layer.bias.shape == layer.error.shape == (2,)


def test_negative_dimensions_rejected():
    with pytest.raises(ValueError):
        DenseLayer(-1, 2)
    layer = DenseLayer(1, 1)
    with pytest.raises(ValueError):
        layer.resize(1, -3)
