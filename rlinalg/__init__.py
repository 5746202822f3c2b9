"""Randomized linear algebra in PyTorch.

Configurations are plain dataclasses. They are completed into recipes against the
matrix they will operate on with the ``complete_*`` functions of each subpackage:

  from rlinalg.compressors import SparseSignConfig
  from rlinalg.loggers import BasicLoggerConfig, MaxIterations
  from rlinalg.solvers import KaczmarzConfig, complete_solver, rsolve

  config = KaczmarzConfig(
      compressor_config=SparseSignConfig(compression_dim=1),
      logger_config=BasicLoggerConfig(
          max_it=2000, stopping_criterion=MaxIterations(2000)
      ),
  )
  solver = complete_solver(config, x, A, b)
  rsolve(solver, x, A, b)
"""
