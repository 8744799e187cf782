# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Entry point for the timekeeper runner.

Usage:
    python -m timekeeper.runner < command.json > result.json

The runner reads one JSON command from stdin, runs it against the
configured store, and writes JSON output to stdout.  Logs go to stderr.

Exit codes:
    0: Success
    1: Failure (error details in JSON output)
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from .executor import Executor
from .schema import RunnerInput, RunnerOutput


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    logging.basicConfig(
        level=os.getenv("TIMEKEEPER_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )
    try:
        # Read input from stdin
        input_json = sys.stdin.read()

        # Validate input against schema
        input_data = RunnerInput.model_validate_json(input_json)

        output = asyncio.run(Executor().execute(input_data))

        print(output.model_dump_json())

        return 0 if output.success else 1

    except Exception as e:
        # Ensure we always output valid JSON, even on unexpected errors
        error_output = RunnerOutput(
            success=False,
            error=str(e),
            error_type=type(e).__name__,
        )
        print(error_output.model_dump_json())
        return 1


if __name__ == "__main__":
    sys.exit(main())
