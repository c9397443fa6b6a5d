"""Basic shell pipeline example.

Runs three shell steps in a scratch build directory and prints the result.

Usage:
    python examples/pipeline/01_basic_shell.py
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from gsbuild.pipeline import PipelineConfig, PipelineRunner, StepConfig


def main() -> None:
    """Run a basic shell pipeline."""
    build_dir = Path(tempfile.mkdtemp(prefix="gsbuild-demo-"))
    steps = [
        StepConfig(name="greet", commands=("echo Hello from pipeline!",)),
        StepConfig(name="make-tree", commands=("mkdir -p tools-make", "touch tools-make/configure"), working_dir="."),
        StepConfig(name="list", commands=("ls -1",), working_dir="tools-make"),
    ]

    runner = PipelineRunner(steps, PipelineConfig(name="basic-shell", build_dir=build_dir))
    result = runner.run()

    print(f"\nPipeline '{result.name}' {result.state.value} in {result.duration:.3f}s")
    print()
    for step in result.results:
        print(f"  [{step.status.value.upper():>7}] {step.name} ({step.duration:.3f}s)")
        if step.stdout.strip():
            for line in step.stdout.strip().splitlines():
                print(f"           {line}")


if __name__ == "__main__":
    main()
