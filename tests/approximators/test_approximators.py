import pytest
import torch

from rlinalg.approximators import (
    ApproximatorAdjoint,
    RandSVD,
    RandSVDConfig,
    RangeFinder,
    RangeFinderConfig,
    complete_approximator,
    rapproximate,
)
from rlinalg.compressors import GaussianConfig, SparseSignConfig
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


@pytest.fixture
def low_rank_matrix(device):
    """Create a 40 x 30 matrix of rank 5 with known singular values."""
    torch.manual_seed(4)
    U, _ = torch.linalg.qr(torch.randn(40, 5, dtype=torch.float64, device=device))
    V, _ = torch.linalg.qr(torch.randn(30, 5, dtype=torch.float64, device=device))
    sigma = torch.tensor([10.0, 5.0, 3.0, 2.0, 1.0], dtype=torch.float64, device=device)
    return U @ torch.diag(sigma) @ V.mT, sigma


@pytest.fixture(params=["gaussian", "sparse_sign"])
def compressor_config(request):
    """Parameterized fixture for the right compressor of the approximators."""
    if request.param == "gaussian":
        return GaussianConfig(cardinality="right", compression_dim=8)
    return SparseSignConfig(cardinality="right", compression_dim=8)


class TestRangeFinder:
    """Range finder on an exactly low-rank matrix."""

    def test_captures_range(self, low_rank_matrix, compressor_config):
        A, _ = low_rank_matrix
        R = rapproximate(RangeFinderConfig(compressor_config=compressor_config), A)
        assert isinstance(R, RangeFinder)
        assert R.shape == (40, 8)

        Q = R.range
        eye = torch.eye(8, dtype=A.dtype, device=A.device)
        assert torch.allclose(Q.mT @ Q, eye, atol=1e-10)
        assert torch.allclose(R @ (R.T @ A), A, atol=1e-8)

    @pytest.mark.parametrize("orthogonalize", [False, True])
    def test_power_iterations(self, low_rank_matrix, orthogonalize):
        A, _ = low_rank_matrix
        config = RangeFinderConfig(
            compressor_config=GaussianConfig(cardinality="right", compression_dim=8),
            power_its=2,
            orthogonalize=orthogonalize,
        )
        R = rapproximate(config, A)
        assert torch.allclose(R @ (R.T @ A), A, atol=1e-8)

    def test_adjoint(self, low_rank_matrix):
        A, _ = low_rank_matrix
        R = rapproximate(
            RangeFinderConfig(
                compressor_config=GaussianConfig(cardinality="right", compression_dim=8)
            ),
            A,
        )
        assert isinstance(R.T, ApproximatorAdjoint)
        assert R.T.shape == (8, 40)
        assert R.T.T is R
        y = torch.randn(40, dtype=A.dtype, device=A.device)
        assert torch.allclose(R.T @ y, R.range.mT @ y)
        assert torch.allclose(y @ R, y @ R.range)


class TestRandSVD:
    def test_recovers_singular_values(self, low_rank_matrix, compressor_config):
        A, sigma = low_rank_matrix
        approx = rapproximate(RandSVDConfig(compressor_config=compressor_config), A)
        assert isinstance(approx, RandSVD)
        assert approx.shape == (40, 30)
        assert torch.allclose(approx.S[:5], sigma, rtol=1e-8)
        assert torch.all(approx.S[5:] < 1e-8)
        assert torch.all(approx.S[:-1] >= approx.S[1:])

    def test_behaves_as_matrix(self, low_rank_matrix):
        A, _ = low_rank_matrix
        approx = rapproximate(
            RandSVDConfig(
                compressor_config=GaussianConfig(cardinality="right", compression_dim=8)
            ),
            A,
        )
        X = torch.randn(30, 3, dtype=A.dtype, device=A.device)
        assert torch.allclose(approx @ X, A @ X, atol=1e-8)

        y = torch.randn(40, dtype=A.dtype, device=A.device)
        assert torch.allclose(y @ approx, y @ A, atol=1e-8)
        assert torch.allclose(approx.T @ y, A.mT @ y, atol=1e-8)

        Y = torch.randn(2, 40, dtype=A.dtype, device=A.device)
        assert torch.allclose(Y @ approx, Y @ A, atol=1e-8)

    def test_factors_are_orthonormal(self, low_rank_matrix):
        A, _ = low_rank_matrix
        approx = rapproximate(
            RandSVDConfig(
                compressor_config=GaussianConfig(cardinality="right", compression_dim=5)
            ),
            A,
        )
        eye = torch.eye(5, dtype=A.dtype, device=A.device)
        assert torch.allclose(approx.U.mT @ approx.U, eye, atol=1e-10)
        assert torch.allclose(approx.V.mT @ approx.V, eye, atol=1e-10)

    def test_dimension_mismatch(self, low_rank_matrix):
        A, _ = low_rank_matrix
        approx = rapproximate(
            RandSVDConfig(
                compressor_config=GaussianConfig(cardinality="right", compression_dim=8)
            ),
            A,
        )
        with pytest.raises(DimensionMismatchError):
            approx @ torch.randn(29, dtype=A.dtype, device=A.device)
        with pytest.raises(DimensionMismatchError):
            torch.randn(30, dtype=A.dtype, device=A.device) @ approx


class TestFactory:
    def test_complete_does_not_approximate(self, low_rank_matrix):
        A, _ = low_rank_matrix
        approx = complete_approximator(RandSVDConfig(), A)
        assert approx.S is None

    def test_recipe_is_recomputed(self, low_rank_matrix):
        A, sigma = low_rank_matrix
        approx = complete_approximator(
            RandSVDConfig(
                compressor_config=GaussianConfig(cardinality="right", compression_dim=8)
            ),
            A,
        )
        first = rapproximate(approx, A)
        assert first is approx
        U_first = approx.U.clone()

        second = rapproximate(approx, 2 * A)
        assert second is approx
        assert torch.allclose(approx.S[:5], 2 * sigma, rtol=1e-8)
        assert not torch.equal(U_first, approx.U)

    def test_left_compressor_warns(self, low_rank_matrix):
        A, sigma = low_rank_matrix
        config = RandSVDConfig(
            compressor_config=GaussianConfig(cardinality="left", compression_dim=8)
        )
        with pytest.warns(UserWarning, match="adjoint"):
            approx = rapproximate(config, A)
        assert approx.operator.shape == (30, 8)
        assert torch.allclose(approx.S[:5], sigma, rtol=1e-8)

    def test_invalid_config(self, low_rank_matrix):
        A, _ = low_rank_matrix
        with pytest.raises(TypeError):
            complete_approximator(GaussianConfig(), A)

    def test_config_validation(self):
        with pytest.raises(ValueError):
            RandSVDConfig(power_its=-1)
        with pytest.raises(TypeError):
            RangeFinderConfig(orthogonalize=1)
        assert RandSVDConfig().power_its == 1
        assert RangeFinderConfig().power_its == 0
