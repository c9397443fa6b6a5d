"""Pipeline step implementations.

Provides concrete step executors for the different execution modes:

- ShellStep: Run commands via ``subprocess.run(shell=True)``
- EnvStep: Export variables, expanded against the current environment
- SourceStep: Reload the environment from a generated setup script
- CallableStep: Import and call Python functions directly
"""

from gsbuild.pipeline.steps.callable import CallableStep
from gsbuild.pipeline.steps.env import EnvStep
from gsbuild.pipeline.steps.shell import ShellStep
from gsbuild.pipeline.steps.source import SourceStep

__all__ = [
    "CallableStep",
    "EnvStep",
    "ShellStep",
    "SourceStep",
]
