"""Evaluation session: one global environment shared by successive inputs."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from .env import Environment
from .objects import Value, is_error
from .parse import parse
from .runtime import evaluate

logger = logging.getLogger(__name__)

# Each Monkey call level costs about ten Python frames in `evaluate`.
RECURSION_LIMIT = 20_000


@dataclass
class RunResult:
    """Outcome of one input: parse errors, or the value it evaluated to."""

    value: Value | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and not is_error(self.value)


class Session:
    """Owns the top-level environment so `let` bindings persist across inputs.

    Each input is parsed on its own and only evaluated when it parsed
    cleanly; a failed parse leaves the environment untouched.
    """

    def __init__(self, env: Environment | None = None) -> None:
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self.env: Environment = env if env is not None else Environment()

    def run(self, source: str) -> RunResult:
        program, errors = parse(source)
        if errors:
            logger.debug("input rejected with %d parse error(s)", len(errors))
            return RunResult(errors=errors)
        logger.debug("evaluating %d statement(s)", len(program.statements))
        value = evaluate(program, self.env)
        if is_error(value):
            logger.debug("evaluation failed: %s", value.to_string())
        return RunResult(value=value)
