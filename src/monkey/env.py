"""Lexical environments: chained name -> value frames."""

from __future__ import annotations

from .objects import Value


class Environment:
    """One scope frame with an optional enclosing frame.

    Function values hold a reference to the frame they were defined in, so
    frames may form cycles through closures stored in their own bindings.
    """

    def __init__(self, outer: Environment | None = None) -> None:
        self.store: dict[str, Value] = {}
        self.outer: Environment | None = outer

    @classmethod
    def enclosed(cls, outer: Environment) -> Environment:
        return cls(outer)

    def get(self, name: str) -> Value | None:
        """Look name up here, then outward. None when unbound everywhere."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Value) -> Value:
        """Bind name in this frame (never an outer one)."""
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.store))
        if self.outer is None:
            return "Environment(" + names + ")"
        return "Environment(" + names + " -> " + repr(self.outer) + ")"
