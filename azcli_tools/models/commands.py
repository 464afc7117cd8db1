"""Command-related data structures."""

from __future__ import annotations

from pydantic import BaseModel

ERROR_MARKER = "Error: "


class CommandResult(BaseModel):
    """Tagged outcome of an Azure CLI invocation.

    Services pass this around internally; only the tool boundary flattens it
    into marker-prefixed text with :meth:`to_text`.
    """

    output: str
    ok: bool = True

    @classmethod
    def success(cls, output: str) -> CommandResult:
        return cls(output=output, ok=True)

    @classmethod
    def error(cls, output: str) -> CommandResult:
        return cls(output=output, ok=False)

    def to_text(self) -> str:
        if self.ok:
            return self.output
        return ERROR_MARKER + self.output
