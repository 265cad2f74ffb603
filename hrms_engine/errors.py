from __future__ import annotations


class EngineError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_payload(self) -> dict[str, dict[str, str]]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class InvalidSnapshotError(EngineError):
    def __init__(self, message: str):
        super().__init__("INVALID_SNAPSHOT", message)


class BondValidationError(EngineError):
    def __init__(self, message: str, *, index: int | None = None):
        super().__init__("INVALID_BOND", message)
        self.index = index
