"""Environment threading and stop-on-failure.

An env step exports a variable, a source step loads a generated script,
and a failing command stops the run before the last step.

Usage:
    python examples/pipeline/02_env_and_failure.py
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from gsbuild.pipeline import (
    PipelineConfig,
    PipelineRunner,
    StepConfig,
    StepFailedError,
    StepType,
)


def main() -> None:
    """Run a pipeline whose third step fails."""
    build_dir = Path(tempfile.mkdtemp(prefix="gsbuild-demo-"))
    script = build_dir / "Demo.sh"
    script.write_text('export DEMO_MAKEFILES="/opt/demo/Makefiles"\n')

    steps = [
        StepConfig(name="export", type=StepType.ENV, env={"DEMO_PATH": "/opt/demo/bin:${PATH}"}),
        StepConfig(name="load", type=StepType.SOURCE, script=str(script)),
        StepConfig(name="check", commands=('echo "$DEMO_MAKEFILES"', "test -d /opt/demo/bin")),
        StepConfig(name="never", commands=("echo unreachable",)),
    ]

    runner = PipelineRunner(steps, PipelineConfig(name="env-demo", build_dir=build_dir))
    try:
        runner.run()
    except StepFailedError as exc:
        print(f"Stopped: {exc}")
        print(f"Exit code: {exc.exit_code}")
        if exc.result is not None:
            print(f"Recorded steps: {exc.result.step_names}")
            print(f"DEMO_MAKEFILES={exc.result.env.get('DEMO_MAKEFILES')}")


if __name__ == "__main__":
    main()
