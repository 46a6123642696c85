"""
Errors raised while applying scoring commands. Every error carries the reason
code sent back to clients in a reject message, the previous match snapshot is
left untouched whenever one is raised.
"""
import enum


class RejectReason(enum.Enum):
    # malformed payload, unknown ids or values out of range
    BAD_COMMAND = "bc"
    # a stored or loaded match whose aggregates disagree with each other
    INCONSISTENT_STATE = "is"
    # a well formed command the match cannot accept in its current state
    ILLEGAL_OPERATION = "io"


class AbstractStumpsError(Exception):
    def __init__(self, msg: str, reason: RejectReason):
        super().__init__(msg)
        self.msg = msg
        self.reason = reason

    def compile(self) -> dict:
        return {
            "reject_reason": self.reason.value,
            "message": self.msg,
        }


class EngineError(AbstractStumpsError):
    """a command was rejected by the reducer or the engine"""
