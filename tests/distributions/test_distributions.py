import pytest
import torch

from rlinalg.distributions import (
    L2NormConfig,
    LeverageScoreConfig,
    UniformConfig,
    complete_distribution,
    sample_distribution,
    update_distribution,
)
from rlinalg.utils.enums import Cardinality
from rlinalg.utils.errors import DimensionMismatchError


def get_available_devices():
    """Return a list of available devices to test."""
    devices = ["cpu"]
    if torch.cuda.is_available():
        devices.append("cuda:0")
    return devices


@pytest.fixture(params=get_available_devices())
def device(request):
    """Parameterized fixture for testing on different devices."""
    return torch.device(request.param)


@pytest.fixture(params=[torch.float32, torch.float64], ids=["float32", "float64"])
def precision(request):
    """Parameterized fixture for testing with different precision."""
    return request.param


@pytest.fixture
def test_matrix(device, precision):
    """Create a tall test matrix with rows of increasing norm."""
    A = torch.randn(30, 6, device=device, dtype=precision)
    scales = torch.arange(1, 31, device=device, dtype=precision).unsqueeze(-1)
    return A / torch.linalg.norm(A, dim=1, keepdim=True) * scales


class TestWeights:
    """Probabilities computed by every distribution."""

    def test_uniform(self, test_matrix):
        dist = complete_distribution(UniformConfig(cardinality="left"), test_matrix)
        assert dist.state_space == 30
        assert torch.allclose(
            dist.weights, torch.full_like(dist.weights, 1.0 / 30), atol=1e-12
        )

    def test_uniform_columns(self, test_matrix):
        dist = complete_distribution(UniformConfig(cardinality="right"), test_matrix)
        assert dist.state_space == 6
        assert dist.weights.shape == (6,)

    def test_l2_norm(self, test_matrix):
        dist = complete_distribution(L2NormConfig(cardinality="left"), test_matrix)
        squares = torch.arange(1, 31, dtype=torch.float64) ** 2
        expected = (squares / squares.sum()).to(dist.weights.device)
        assert torch.allclose(dist.weights, expected, rtol=1e-4, atol=1e-6)

    def test_leverage_scores_sum_to_one(self, test_matrix):
        dist = complete_distribution(
            LeverageScoreConfig(cardinality="left"), test_matrix
        )
        assert dist.weights.dtype == torch.float64
        assert abs(dist.weights.sum().item() - 1.0) < 1e-10
        assert torch.all(dist.weights >= 0)

    def test_leverage_scores_of_orthonormal_columns(self, device):
        Q, _ = torch.linalg.qr(torch.randn(20, 4, dtype=torch.float64, device=device))
        dist = complete_distribution(LeverageScoreConfig(cardinality="left"), Q)
        expected = Q.pow(2).sum(dim=1) / 4
        assert torch.allclose(dist.weights, expected, atol=1e-10)

    def test_zero_matrix_falls_back_to_uniform(self, device):
        A = torch.zeros(5, 3, device=device)
        dist = complete_distribution(L2NormConfig(cardinality="left"), A)
        assert torch.allclose(dist.weights, torch.full_like(dist.weights, 0.2))

    def test_update_with_new_matrix(self, test_matrix):
        dist = complete_distribution(L2NormConfig(cardinality="left"), test_matrix)
        B = torch.zeros_like(test_matrix)
        B[7, 0] = 2.0
        update_distribution(dist, None, B, None)
        assert dist.weights[7] == 1.0
        assert dist.weights.sum() == 1.0

    @pytest.mark.parametrize("cardinality", ["left", "right"])
    def test_update_rejects_resized_matrix(self, test_matrix, cardinality):
        dist = complete_distribution(L2NormConfig(cardinality=cardinality), test_matrix)
        weights = dist.weights.clone()
        B = torch.randn(31, 7, device=test_matrix.device, dtype=test_matrix.dtype)
        with pytest.raises(DimensionMismatchError):
            update_distribution(dist, None, B, None)
        assert torch.equal(dist.weights, weights)


class TestSampling:
    def test_sorted_without_replacement(self, test_matrix):
        dist = complete_distribution(UniformConfig(cardinality="left"), test_matrix)
        out = torch.empty(10, dtype=torch.long, device=test_matrix.device)
        sample_distribution(dist, out)
        assert torch.all(out[1:] > out[:-1])
        assert out.min() >= 0 and out.max() < 30

    def test_too_many_without_replacement(self, test_matrix):
        dist = complete_distribution(UniformConfig(cardinality="right"), test_matrix)
        out = torch.empty(7, dtype=torch.long, device=test_matrix.device)
        with pytest.raises(ValueError):
            sample_distribution(dist, out)

    def test_with_replacement(self, test_matrix):
        dist = complete_distribution(
            UniformConfig(cardinality="right", replace=True), test_matrix
        )
        out = torch.empty(50, dtype=torch.long, device=test_matrix.device)
        sample_distribution(dist, out)
        assert torch.all(out[1:] >= out[:-1])
        assert out.max() < 6

    def test_frequencies_follow_weights(self):
        A = torch.zeros(4, 2, dtype=torch.float64)
        A[0, 0] = 1.0
        A[1, 0] = 3.0**0.5
        dist = complete_distribution(L2NormConfig(cardinality="left"), A)
        out = torch.empty(4000, dtype=torch.long)
        sample_distribution(dist, out)
        frequency = (out == 1).double().mean().item()
        assert abs(frequency - 0.75) < 0.05
        assert torch.all(out <= 1)


class TestConfig:
    def test_cardinality_required(self, test_matrix):
        with pytest.raises(ValueError):
            complete_distribution(UniformConfig(), test_matrix)

    def test_cardinality_from_string(self):
        assert L2NormConfig(cardinality="left").cardinality == Cardinality.LEFT

    def test_replace_defaults(self):
        assert UniformConfig().replace is False
        assert L2NormConfig().replace is True
        assert LeverageScoreConfig().replace is True

    def test_replace_must_be_bool(self):
        with pytest.raises(TypeError):
            UniformConfig(replace=1)

    def test_to_dict(self):
        data = L2NormConfig(cardinality="right").to_dict()
        assert data == {"cardinality": "right", "replace": True}

    def test_wrong_arguments(self, test_matrix):
        with pytest.raises(TypeError):
            complete_distribution(UniformConfig(cardinality="left"))
