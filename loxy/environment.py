from typing import Any, Dict, Optional
from loxy.errors import UndefinedVariable
from loxy.lexer import Token


class Environment:
    """One scope frame: name -> value bindings plus a link to the enclosing frame.

    Frames are shared by reference. A block frame is held by the executing
    block, and any closure declared inside it keeps it alive afterwards.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<Environment {sorted(self.values)} depth={self.depth()}>"

    def depth(self) -> int:
        """Number of enclosing links between this frame and the global frame."""
        n = 0
        env = self.enclosing
        while env is not None:
            n += 1
            env = env.enclosing
        return n

    def define(self, name: str, value: Any):
        # Redefinition in the same frame overwrites.
        self.values[name] = value

    def get(self, name: Token) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise UndefinedVariable(name.lexeme)

    def assign(self, name: Token, value: Any):
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise UndefinedVariable(name.lexeme)

    def ancestor(self, distance: int) -> Optional['Environment']:
        """The frame ``distance`` links outward, or None if the chain is shorter."""
        env: Optional[Environment] = self
        for _ in range(distance):
            if env is None:
                break
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: Token) -> Any:
        """Look ``name`` up in exactly the frame ``distance`` links outward."""
        env = self.ancestor(distance)
        if env is None or name.lexeme not in env.values:
            raise UndefinedVariable(name.lexeme)
        return env.values[name.lexeme]
