# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for executing tracker commands from JSON.

Usage:
    python -m timekeeper.runner < command.json > result.json

Exports:
    Executor: Runs one command against a tracker
    RunnerInput: Input schema
    RunnerOutput: Output schema
"""

from .executor import ExecutionError, Executor
from .schema import RunnerInput, RunnerOutput

__all__ = [
    "ExecutionError",
    "Executor",
    "RunnerInput",
    "RunnerOutput",
]
