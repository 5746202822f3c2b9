from types import SimpleNamespace

import pytest
import torch

from rlinalg.solver_errors import (
    CompressedResidual,
    CompressedResidualConfig,
    FullResidual,
    FullResidualConfig,
    LSGradient,
    LSGradientConfig,
    complete_error,
    compute_error,
)
from rlinalg.solvers import KaczmarzConfig


@pytest.fixture
def system():
    """Create a small inconsistent least squares system."""
    A = torch.randn(15, 4, dtype=torch.float64)
    b = torch.randn(15, dtype=torch.float64)
    x = torch.randn(4, dtype=torch.float64)
    return x, A, b


@pytest.fixture
def solver_config():
    return KaczmarzConfig()


class TestFullResidual:
    def test_value(self, system, solver_config):
        x, A, b = system
        error = complete_error(FullResidualConfig(), solver_config, A, b)
        assert isinstance(error, FullResidual)

        solver = SimpleNamespace(solution_vec=x)
        value = compute_error(error, solver, A, b)
        expected = torch.linalg.norm(b - A @ x).item()
        assert value == pytest.approx(expected, rel=1e-12)
        assert error.error == value
        assert torch.allclose(error.residual, b - A @ x)

    def test_zero_at_solution(self, solver_config):
        A = torch.randn(6, 6, dtype=torch.float64)
        A += 6 * torch.eye(6, dtype=torch.float64)
        x = torch.randn(6, dtype=torch.float64)
        b = A @ x
        error = complete_error(FullResidualConfig(), solver_config, A, b)
        value = compute_error(error, SimpleNamespace(solution_vec=x), A, b)
        assert value < 1e-12


class TestCompressedResidual:
    def test_value(self, system, solver_config):
        x, A, b = system
        S = torch.randn(3, 15, dtype=torch.float64)
        solver = SimpleNamespace(solution_vec=x, mat_view=S @ A, vec_view=S @ b)
        error = complete_error(CompressedResidualConfig(), solver_config, A, b)
        assert isinstance(error, CompressedResidual)
        assert error.required_views == ("compressed_system",)

        value = compute_error(error, solver, A, b)
        expected = torch.linalg.norm(S @ b - S @ A @ x).item()
        assert value == pytest.approx(expected, rel=1e-10)
        assert error.residual.shape == (3,)

    def test_resizes_to_view(self, system, solver_config):
        x, A, b = system
        error = complete_error(CompressedResidualConfig(), solver_config, A, b)
        for rows in (5, 2, 7):
            S = torch.randn(rows, 15, dtype=torch.float64)
            solver = SimpleNamespace(solution_vec=x, mat_view=S @ A, vec_view=S @ b)
            value = compute_error(error, solver, A, b)
            assert error.residual.shape == (rows,)
            assert value == pytest.approx(
                torch.linalg.norm(S @ b - S @ A @ x).item(), rel=1e-10
            )


class TestLSGradient:
    def test_value(self, system, solver_config):
        x, A, b = system
        solver = SimpleNamespace(solution_vec=x, residual_vec=A @ x - b)
        error = complete_error(LSGradientConfig(), solver_config, A, b)
        assert isinstance(error, LSGradient)
        assert error.required_views == ("residual_vec",)

        value = compute_error(error, solver, A, b)
        expected = torch.linalg.norm(A.mT @ (A @ x - b)).item()
        assert value == pytest.approx(expected, rel=1e-10)

    def test_zero_at_least_squares_solution(self, system, solver_config):
        _, A, b = system
        x = torch.linalg.lstsq(A, b.unsqueeze(-1)).solution.squeeze(-1)
        solver = SimpleNamespace(solution_vec=x, residual_vec=A @ x - b)
        error = complete_error(LSGradientConfig(), solver_config, A, b)
        assert compute_error(error, solver, A, b) < 1e-10


class TestFactory:
    def test_invalid_config(self, system, solver_config):
        _, A, b = system
        with pytest.raises(TypeError):
            complete_error("residual", solver_config, A, b)

    def test_every_error_provides_residual(self, system, solver_config):
        _, A, b = system
        for config in (
            FullResidualConfig(),
            CompressedResidualConfig(),
            LSGradientConfig(),
        ):
            assert complete_error(config, solver_config, A, b).provides_residual
