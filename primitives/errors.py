"""Error kinds raised by the sum-check primitives and protocol.

Every exception here signals misuse by the caller (a malformed table, a point
of the wrong arity, a dishonest claim handed to the honest prover, or a call
made in the wrong protocol state). A verifier rejecting a prover is NOT an
exception: it is reported through ``protocol.verifier.VerificationResult``.
"""


class SumcheckError(Exception):
    """Base class for all sum-check errors."""


class InvalidLengthError(SumcheckError, ValueError):
    """Evaluation table length is not a power of two (zero included)."""


class DimensionMismatchError(SumcheckError, ValueError):
    """Point or operand arity does not match the polynomial's variable count."""


class InvalidClaimError(SumcheckError, ValueError):
    """Prover was started with a sum that its polynomial does not have."""


class FieldMismatchError(SumcheckError, TypeError):
    """Operands belong to different prime fields."""


class ProtocolStateError(SumcheckError, RuntimeError):
    """Operation is not valid in the current prover/verifier state."""
