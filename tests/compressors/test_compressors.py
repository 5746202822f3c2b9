import pytest
import torch
from scipy.linalg import hadamard

from rlinalg.compressors import (
    Cardinality,
    CompressorAdjoint,
    CountSketch,
    CountSketchConfig,
    FJLT,
    FJLTConfig,
    Gaussian,
    GaussianConfig,
    Identity,
    IdentityConfig,
    Sampling,
    SamplingConfig,
    SparseSign,
    SparseSignConfig,
    SRHT,
    SRHTConfig,
    complete_compressor,
    fwht_,
    multiply,
    transpose,
    update_compressor,
)
from rlinalg.distributions import L2NormConfig
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


# Dictionary of tolerance values by precision
TOLERANCES = {
    torch.float32: {"rtol": 1e-4, "atol": 1e-5},
    torch.float64: {"rtol": 1e-10, "atol": 1e-10},
}


@pytest.fixture
def tol(precision):
    """Return appropriate tolerance values for the current precision."""
    return TOLERANCES[precision]


@pytest.fixture
def test_matrix(device, precision):
    """Create a tall test matrix."""
    return torch.randn(40, 12, device=device, dtype=precision)


CONFIGS = {
    "gaussian": lambda card: GaussianConfig(cardinality=card, compression_dim=6),
    "sparse_sign": lambda card: SparseSignConfig(
        cardinality=card, compression_dim=6, nnz=3
    ),
    "fjlt": lambda card: FJLTConfig(
        cardinality=card, compression_dim=6, block_size=4
    ),
    "srht": lambda card: SRHTConfig(
        cardinality=card, compression_dim=6, block_size=4
    ),
    "count_sketch": lambda card: CountSketchConfig(
        cardinality=card, compression_dim=6
    ),
    "sampling": lambda card: SamplingConfig(cardinality=card, compression_dim=6),
}


@pytest.fixture(params=list(CONFIGS.keys()))
def compressor_type(request):
    """Parameterized fixture for the compressors with a fixed shape."""
    return request.param


@pytest.fixture(params=["left", "right"])
def cardinality(request):
    return request.param


class TestCompressorBasics:
    """Shapes, dense equivalence and transposition of every compressor."""

    def test_shape(self, compressor_type, cardinality, test_matrix):
        S = complete_compressor(CONFIGS[compressor_type](cardinality), test_matrix)
        if cardinality == "left":
            assert S.shape == (6, 40)
            assert S.cardinality == Cardinality.LEFT
        else:
            assert S.shape == (12, 6)
            assert S.cardinality == Cardinality.RIGHT
        assert S.compression_dim == 6
        assert S.dtype == test_matrix.dtype
        assert S.device == test_matrix.device

    def test_matches_dense(self, compressor_type, cardinality, test_matrix, tol):
        S = complete_compressor(CONFIGS[compressor_type](cardinality), test_matrix)
        dense = S.to_dense()
        assert dense.shape == S.shape

        if cardinality == "left":
            expected = dense @ test_matrix
            assert torch.allclose(S @ test_matrix, expected, **tol)
            vec = test_matrix[:, 0]
            assert torch.allclose(S @ vec, dense @ vec, **tol)
        else:
            expected = test_matrix @ dense
            assert torch.allclose(test_matrix @ S, expected, **tol)
            vec = test_matrix[0]
            assert torch.allclose(vec @ S, vec @ dense, **tol)

    def test_adjoint_matches_dense_transpose(
        self, compressor_type, cardinality, test_matrix, tol
    ):
        S = complete_compressor(CONFIGS[compressor_type](cardinality), test_matrix)
        dense = S.to_dense()
        St = S.T

        assert isinstance(St, CompressorAdjoint)
        assert St.shape == (S.shape[1], S.shape[0])
        assert torch.allclose(St.to_dense(), dense.mT, **tol)

        # the adjoint sees a resample of its parent
        update_compressor(S)
        assert torch.allclose(St.to_dense(), S.to_dense().mT, **tol)

    def test_adjoint_round_trip(self, compressor_type, cardinality, test_matrix, tol):
        S = complete_compressor(CONFIGS[compressor_type](cardinality), test_matrix)
        B = torch.randn(
            S.shape[0], 3, dtype=test_matrix.dtype, device=test_matrix.device
        )
        assert torch.allclose(S.T @ B, (B.mT @ S).mT, **tol)

    def test_double_transpose_is_identity(self, compressor_type, test_matrix):
        S = complete_compressor(CONFIGS[compressor_type]("left"), test_matrix)
        assert S.T.T is S
        assert transpose(transpose(S)) is S

    def test_multiply_alpha_beta(self, compressor_type, test_matrix, tol):
        S = complete_compressor(CONFIGS[compressor_type]("left"), test_matrix)
        dense = S.to_dense()
        C0 = torch.randn(
            6, test_matrix.shape[1], dtype=test_matrix.dtype, device=test_matrix.device
        )
        C = C0.clone()
        multiply(C, S, test_matrix, alpha=2.0, beta=-0.5)
        assert torch.allclose(C, 2.0 * dense @ test_matrix - 0.5 * C0, **tol)

    def test_multiply_into_view(self, compressor_type, test_matrix, tol):
        S = complete_compressor(CONFIGS[compressor_type]("left"), test_matrix)
        buffer = torch.zeros(
            10, test_matrix.shape[1], dtype=test_matrix.dtype, device=test_matrix.device
        )
        multiply(buffer[:6], S, test_matrix)
        assert torch.allclose(buffer[:6], S.to_dense() @ test_matrix, **tol)
        assert torch.all(buffer[6:] == 0)

    def test_beta_zero_ignores_nan(self, compressor_type, test_matrix):
        S = complete_compressor(CONFIGS[compressor_type]("left"), test_matrix)
        C = torch.full(
            (6, test_matrix.shape[1]),
            float("nan"),
            dtype=test_matrix.dtype,
            device=test_matrix.device,
        )
        multiply(C, S, test_matrix)
        assert not torch.isnan(C).any()

    def test_resample_changes_realization(self, compressor_type, test_matrix):
        S = complete_compressor(CONFIGS[compressor_type]("left"), test_matrix)
        before = S.to_dense().clone()
        changed = False
        for _ in range(5):
            update_compressor(S)
            if not torch.equal(before, S.to_dense()):
                changed = True
                break
        assert changed


class TestMultiplyErrors:
    """Dimension and type checks of multiply."""

    def test_left_dimension_mismatch(self, test_matrix):
        S = complete_compressor(GaussianConfig(compression_dim=6), test_matrix)
        C = torch.zeros(6, 12, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(DimensionMismatchError):
            multiply(C, S, test_matrix[:30])

    def test_output_dimension_mismatch(self, test_matrix):
        S = complete_compressor(GaussianConfig(compression_dim=6), test_matrix)
        C = torch.zeros(5, 12, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(DimensionMismatchError):
            multiply(C, S, test_matrix)

    def test_right_dimension_mismatch(self, test_matrix):
        S = complete_compressor(
            GaussianConfig(cardinality="right", compression_dim=6), test_matrix
        )
        C = torch.zeros(40, 6, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(DimensionMismatchError):
            multiply(C, test_matrix[:, :10], S)

    def test_vector_mismatch(self, test_matrix):
        S = complete_compressor(GaussianConfig(compression_dim=6), test_matrix)
        z = torch.zeros(6, dtype=test_matrix.dtype, device=test_matrix.device)
        y = torch.zeros(39, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(DimensionMismatchError):
            multiply(z, S, y)

    def test_mismatch_leaves_output_untouched(self, test_matrix):
        S = complete_compressor(GaussianConfig(compression_dim=6), test_matrix)
        C = torch.ones(5, 12, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(DimensionMismatchError):
            multiply(C, S, test_matrix)
        assert torch.all(C == 1)

    def test_two_tensors_raise_type_error(self, test_matrix):
        C = torch.zeros(40, 40, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(TypeError):
            multiply(C, test_matrix, test_matrix.mT)

    def test_two_compressors_raise_type_error(self, test_matrix):
        S = complete_compressor(GaussianConfig(compression_dim=6), test_matrix)
        C = torch.zeros(6, 6, dtype=test_matrix.dtype, device=test_matrix.device)
        with pytest.raises(TypeError):
            multiply(C, S, S.T)


class TestFactory:
    def test_recipe_types(self, test_matrix):
        expected = {
            "gaussian": Gaussian,
            "sparse_sign": SparseSign,
            "fjlt": FJLT,
            "srht": SRHT,
            "count_sketch": CountSketch,
            "sampling": Sampling,
        }
        for name, config in CONFIGS.items():
            S = complete_compressor(config("left"), test_matrix)
            assert isinstance(S, expected[name])

    def test_three_arguments(self, test_matrix):
        x = torch.zeros(12, dtype=test_matrix.dtype, device=test_matrix.device)
        b = torch.zeros(40, dtype=test_matrix.dtype, device=test_matrix.device)
        S = complete_compressor(GaussianConfig(compression_dim=6), x, test_matrix, b)
        assert S.shape == (6, 40)

    def test_wrong_number_of_arguments(self, test_matrix):
        with pytest.raises(TypeError):
            complete_compressor(GaussianConfig(), test_matrix, test_matrix)

    def test_update_requires_compressor(self):
        with pytest.raises(TypeError):
            update_compressor(torch.zeros(3, 3))

    def test_vector_target(self, device, precision):
        b = torch.randn(40, device=device, dtype=precision)
        S = complete_compressor(GaussianConfig(compression_dim=6), b)
        assert S.shape == (6, 40)
        assert (S @ b).shape == (6,)


class TestConfigValidation:
    def test_invalid_cardinality(self):
        with pytest.raises(ValueError):
            GaussianConfig(cardinality="up")

    def test_cardinality_from_string(self):
        assert GaussianConfig(cardinality="Right").cardinality == Cardinality.RIGHT

    def test_nonpositive_compression_dim(self):
        with pytest.raises(ValueError):
            GaussianConfig(compression_dim=0)

    def test_non_int_compression_dim(self):
        with pytest.raises(TypeError):
            SparseSignConfig(compression_dim=2.0)

    def test_nnz_exceeds_compression_dim(self):
        with pytest.raises(ValueError):
            SparseSignConfig(compression_dim=2, nnz=3)

    def test_nnz_default(self):
        assert SparseSignConfig(compression_dim=3).nnz == 3
        assert SparseSignConfig(compression_dim=20).nnz == 8

    def test_fjlt_sparsity_out_of_range(self):
        with pytest.raises(ValueError):
            FJLTConfig(sparsity=1.5)

    def test_to_dict(self):
        data = SamplingConfig(
            cardinality="right", distribution_config=L2NormConfig()
        ).to_dict()
        assert data["cardinality"] == "right"
        assert data["distribution_config"]["replace"] is True


class TestSparseSign:
    def test_nnz_per_column(self, device, precision):
        A = torch.randn(30, 4, device=device, dtype=precision)
        S = complete_compressor(SparseSignConfig(compression_dim=8, nnz=3), A)
        dense = S.to_dense()
        assert torch.all((dense != 0).sum(dim=0) == 3)
        magnitude = 1.0 / 3**0.5
        nonzeros = dense[dense != 0].abs()
        assert torch.allclose(nonzeros, torch.full_like(nonzeros, magnitude))

    def test_right_nnz_per_row(self, device, precision):
        A = torch.randn(4, 30, device=device, dtype=precision)
        S = complete_compressor(
            SparseSignConfig(cardinality="right", compression_dim=8, nnz=2), A
        )
        assert torch.all((S.to_dense() != 0).sum(dim=1) == 2)

    def test_update_reuses_storage(self, device, precision):
        A = torch.randn(30, 4, device=device, dtype=precision)
        S = complete_compressor(SparseSignConfig(compression_dim=8, nnz=3), A)
        op = S.op
        index_ptr = op._indices().data_ptr()
        value_ptr = op._values().data_ptr()
        before = S.to_dense()

        update_compressor(S)
        assert S.op is op
        assert op._indices().data_ptr() == index_ptr
        assert op._values().data_ptr() == value_ptr
        after = S.to_dense()
        assert not torch.equal(before, after)
        assert torch.all((after != 0).sum(dim=0) == 3)

    def test_full_columns(self, device):
        A = torch.randn(12, 3, device=device)
        S = complete_compressor(SparseSignConfig(compression_dim=5, nnz=5), A)
        assert torch.all(S.to_dense() != 0)

    def test_rows_are_uniform(self, device):
        torch.manual_seed(0)
        A = torch.randn(4000, 2, device=device)
        S = complete_compressor(SparseSignConfig(compression_dim=10, nnz=3), A)
        rows = S.op._indices()[0]
        counts = torch.bincount(rows, minlength=10).to(torch.float64)
        # every row is hit by a column with probability 3 / 10
        assert torch.all((counts - 1200.0).abs() < 150.0)


class TestCountSketch:
    def test_single_nonzero_per_column(self, device, precision):
        A = torch.randn(30, 4, device=device, dtype=precision)
        S = complete_compressor(CountSketchConfig(compression_dim=5), A)
        dense = S.to_dense()
        assert torch.all((dense != 0).sum(dim=0) == 1)
        assert torch.all(dense[dense != 0].abs() == 1)


class TestHadamard:
    @pytest.mark.parametrize("n", [1, 2, 8, 64])
    def test_fwht_matches_scipy(self, n, device):
        x = torch.randn(n, 3, device=device, dtype=torch.float64)
        H = torch.as_tensor(hadamard(n), device=device, dtype=torch.float64)
        expected = H @ x
        fwht_(x)
        assert torch.allclose(x, expected, rtol=1e-10, atol=1e-10)

    def test_fwht_signs_and_scale(self, device):
        n = 16
        x = torch.randn(n, device=device, dtype=torch.float64)
        signs = torch.randint(0, 2, (n,), device=device).to(torch.float64) * 2 - 1
        H = torch.as_tensor(hadamard(n), device=device, dtype=torch.float64)
        expected = 0.5 * H @ (signs * x)
        fwht_(x, signs, 0.5)
        assert torch.allclose(x, expected, rtol=1e-10, atol=1e-10)

    def test_fwht_rejects_non_power_of_two(self):
        with pytest.raises(DimensionMismatchError):
            fwht_(torch.randn(6))

    def test_padded_size(self, test_matrix):
        S = complete_compressor(SRHTConfig(compression_dim=6), test_matrix)
        assert S.padded_size == 64

    def test_srht_compression_dim_too_large(self, device):
        A = torch.randn(5, 3, device=device)
        with pytest.raises(DimensionMismatchError):
            complete_compressor(SRHTConfig(compression_dim=9), A)

    def test_srht_rows_are_orthonormal(self, device):
        # the kept rows of H D / sqrt(p) are orthonormal, rescaled by sqrt(p / s)
        A = torch.randn(16, 2, device=device, dtype=torch.float64)
        S = complete_compressor(SRHTConfig(compression_dim=4), A)
        dense = S.to_dense()
        expected = torch.eye(4, device=device, dtype=torch.float64) * 16 / 4
        assert torch.allclose(dense @ dense.mT, expected, atol=1e-10)

    def test_fjlt_default_sparsity(self, test_matrix):
        S = complete_compressor(FJLTConfig(compression_dim=6), test_matrix)
        assert 0.0 < S.sparsity <= 1.0


class TestIdentity:
    def test_resizes_to_operand(self, device, precision):
        A = torch.randn(10, 4, device=device, dtype=precision)
        S = complete_compressor(IdentityConfig(), A)
        assert S.shape == (10, 10)
        assert torch.equal(S @ A, A)

        B = torch.randn(7, 3, device=device, dtype=precision)
        assert torch.equal(S @ B, B)
        assert S.shape == (7, 7)

        C = torch.randn(2, 5, device=device, dtype=precision)
        assert torch.equal(C @ S, C)
        assert S.shape == (5, 5)

    def test_adjoint_resizes(self, device, precision):
        A = torch.randn(10, 4, device=device, dtype=precision)
        S = complete_compressor(IdentityConfig(), A)
        B = torch.randn(6, 2, device=device, dtype=precision)
        assert torch.equal(S.T @ B, B)


class TestSampling:
    def test_selects_rows(self, device, precision):
        A = torch.randn(20, 5, device=device, dtype=precision)
        S = complete_compressor(SamplingConfig(compression_dim=4), A)
        idx = S.indices
        assert idx.shape == (4,)
        assert torch.all(idx[1:] > idx[:-1])
        assert torch.equal(S @ A, A[idx])

    def test_selects_columns(self, device, precision):
        A = torch.randn(5, 20, device=device, dtype=precision)
        S = complete_compressor(
            SamplingConfig(cardinality="right", compression_dim=4), A
        )
        assert torch.equal(A @ S, A[:, S.indices])

    def test_distribution_follows_cardinality(self, device):
        A = torch.randn(5, 20, device=device)
        S = complete_compressor(
            SamplingConfig(cardinality="right", compression_dim=4), A
        )
        assert S.distribution.cardinality == Cardinality.RIGHT
        assert S.distribution.state_space == 20

    def test_update_with_new_matrix(self, device):
        A = torch.randn(20, 5, device=device, dtype=torch.float64)
        S = complete_compressor(
            SamplingConfig(compression_dim=2, distribution_config=L2NormConfig()), A
        )
        B = torch.zeros_like(A)
        B[3] = 1.0
        update_compressor(S, A=B)
        assert torch.all(S.indices == 3)


class TestJohnsonLindenstrauss:
    """Compressed norms concentrate around the true norm."""

    @pytest.mark.parametrize(
        "config",
        [
            GaussianConfig(compression_dim=200),
            SparseSignConfig(compression_dim=200),
            SRHTConfig(compression_dim=200, block_size=1),
            FJLTConfig(compression_dim=200, block_size=1),
            CountSketchConfig(compression_dim=200),
        ],
        ids=["gaussian", "sparse_sign", "srht", "fjlt", "count_sketch"],
    )
    def test_norm_preserved_on_average(self, config):
        torch.manual_seed(0)
        v = torch.randn(512, dtype=torch.float64)
        S = complete_compressor(config, v)
        ratios = []
        for _ in range(20):
            update_compressor(S)
            ratios.append((torch.linalg.norm(S @ v) / torch.linalg.norm(v)).item())
        mean_ratio = sum(ratios) / len(ratios)
        assert 0.8 < mean_ratio < 1.2
