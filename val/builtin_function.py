from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class BuiltinFunction:
    """A natively implemented function.

    `fn` is called as `fn(args, span, env)` with the evaluated arguments,
    the span of the call expression and the calling environment. `arity`
    is checked before the call; `None` means the function validates its
    own argument count.
    """
    name: str
    arity: Optional[int]
    fn: Any

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
