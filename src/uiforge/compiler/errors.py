"""Compiler exceptions."""


class CompileError(Exception):
    """Generated source failed structural validation or compilation."""

    def __init__(self, message: str, type_id: str | None = None):
        super().__init__(message)
        self.type_id = type_id


class ParseError(CompileError):
    """Source text outside the supported grammar."""

    def __init__(self, message: str, offset: int, source: str = ""):
        self.offset = offset
        self.line = source.count("\n", 0, offset) + 1
        self.column = offset - (source.rfind("\n", 0, offset) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")
