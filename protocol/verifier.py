"""Sum-check verification.

The verifier reduces the claim "P sums to S over {0,1}^n" one variable at a
time:

1. Round check - each prover message g_i must satisfy g_i(0) + g_i(1) = claim
   (round 1 compares against S, later rounds against g_{i-1}(r_{i-1}))
2. Challenge - r_i is drawn from the injected ChallengeSource and the claim
   becomes g_i(r_i) = (1 - r_i) g_i(0) + r_i g_i(1)
3. Final check - after round n the claim must equal P(r_1, ..., r_n), obtained
   from an oracle that owns the definition of P

A cheating prover passes a round check for at most a 1/|F| fraction of
challenges (g_i has degree <= 1), so the soundness error is at most n/|F|.

Rejection is an expected outcome, reported through VerificationResult and
never raised. A rejected (or accepted) verifier refuses further input: a new
run needs a new verifier and fresh randomness.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from primitives.errors import FieldMismatchError, ProtocolStateError
from primitives.field import Field, FieldElement, FieldLike, field_of, modulus_of, to_field_element
from primitives.transcript import Transcript
from protocol.challenges import ChallengeSource, FiatShamirChallenger, ReplayChallenger, challenger_from_snapshot
from protocol.proof import RoundMessage, SumcheckProof, SumcheckTranscript

logger = logging.getLogger(__name__)

# --- Type Aliases ---

Oracle = Callable[[Sequence[FieldElement]], FieldLike]  # P(r_1, ..., r_n)


# --- Outcome Types ---

class VerifierState(Enum):
    AWAITING_START = "awaiting_start"
    RUNNING_ROUND = "running_round"
    AWAITING_FINAL_CHECK = "awaiting_final_check"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


TERMINAL_STATES = (VerifierState.ACCEPTED, VerifierState.REJECTED)


class RejectionKind(Enum):
    SUM_CHECK_FAILED = "SumCheckFailed"        # g_i(0) + g_i(1) != claim
    FINAL_CHECK_FAILED = "FinalCheckFailed"    # claim != P(r_1, ..., r_n)
    ROUND_COUNT_MISMATCH = "RoundCountMismatch"  # proof has the wrong number of rounds


@dataclass(frozen=True)
class Rejection:
    """Why and where a run was rejected.

    `round` is the 1-based round of a failed round check, None for checks made
    after the last round.
    """
    kind: RejectionKind
    round: Optional[int]
    expected: int
    actual: int

    def __str__(self) -> str:
        where = f"round {self.round}" if self.round is not None else "final check"
        return f"{self.kind.value} at {where}: expected {self.expected}, got {self.actual}"


@dataclass
class VerificationResult:
    """Outcome of a sum-check run.

    Attributes:
        accepted: True iff every round check and the final check passed
        challenges: Challenges r_1..r_k issued before the run ended
        final_claim: Verifier's claim when the run ended
        rejection: Reason for rejection, None when accepted
        transcript: Messages and challenges of the run, for audit/replay
    """
    accepted: bool
    challenges: List[FieldElement] = field(default_factory=list)
    final_claim: Optional[FieldElement] = None
    rejection: Optional[Rejection] = None
    transcript: SumcheckTranscript = field(default_factory=SumcheckTranscript)

    def __bool__(self) -> bool:
        return self.accepted


# --- Verifier State Machine ---

class SumcheckVerifier:
    """Round-by-round sum-check verifier.

    Args:
        challenger: Source of the per-round challenges. Its field is the field
            of the whole run.
    """

    def __init__(self, challenger: ChallengeSource):
        self.challenger = challenger
        self.field = challenger.field
        self.state = VerifierState.AWAITING_START
        self.num_vars = 0
        self.round = 0
        self.claim: Optional[FieldElement] = None
        self.transcript = SumcheckTranscript()
        self.rejection: Optional[Rejection] = None

    @property
    def challenges(self) -> List[FieldElement]:
        """Challenges issued so far (copy)."""
        return list(self.transcript.challenges)

    @property
    def result(self) -> VerificationResult:
        """Outcome; only available once the run has ended."""
        if self.state not in TERMINAL_STATES:
            raise ProtocolStateError(f"no result yet, verifier is {self.state.name}")
        return VerificationResult(
            accepted=self.state is VerifierState.ACCEPTED,
            challenges=self.challenges,
            final_claim=self.claim,
            rejection=self.rejection,
            transcript=self.transcript,
        )

    # --- Protocol Steps ---

    def start(self, num_vars: int, claimed_sum: FieldLike) -> None:
        """Begin a run on the claim "an n-variable polynomial sums to S"."""
        self._require(VerifierState.AWAITING_START, "start")
        if num_vars < 0:
            raise ValueError(f"num_vars must be non-negative, got {num_vars}")
        self.num_vars = num_vars
        self.claim = to_field_element(claimed_sum, self.field)
        self.round = 1
        self.challenger.bind_claim(num_vars, self.claim)
        self.state = VerifierState.RUNNING_ROUND if num_vars > 0 else VerifierState.AWAITING_FINAL_CHECK
        logger.info("Verifying sum-check over GF(%d): %d rounds, claimed sum %d",
                    modulus_of(self.field), num_vars, int(self.claim))

    def receive_round(self, message: RoundMessage) -> Optional[FieldElement]:
        """Check round message g_i and issue challenge r_i.

        Returns:
            The challenge r_i to forward to the prover, or None if the round
            check failed and the run is now rejected.
        """
        self._require(VerifierState.RUNNING_ROUND, "receive_round")
        g0 = to_field_element(message.eval_0, self.field)
        g1 = to_field_element(message.eval_1, self.field)

        round_sum = g0 + g1
        if round_sum != self.claim:
            self._reject(RejectionKind.SUM_CHECK_FAILED, self.round, self.claim, round_sum)
            return None

        challenge = to_field_element(self.challenger.next_challenge(RoundMessage(g0, g1)), self.field)
        self.claim = g0 + challenge * (g1 - g0)
        self.transcript.record(RoundMessage(g0, g1), challenge)
        logger.debug("Round %d ok: r=%d, new claim %d", self.round, int(challenge), int(self.claim))

        self.round += 1
        if self.round > self.num_vars:
            self.state = VerifierState.AWAITING_FINAL_CHECK
        return challenge

    def finish(self, oracle_evaluation: FieldLike) -> VerificationResult:
        """Compare the final claim with P(r_1, ..., r_n) from the oracle."""
        self._require(VerifierState.AWAITING_FINAL_CHECK, "finish")
        expected = to_field_element(oracle_evaluation, self.field)
        if self.claim != expected:
            self._reject(RejectionKind.FINAL_CHECK_FAILED, None, expected, self.claim)
        else:
            self.state = VerifierState.ACCEPTED
            logger.info("Sum-check accepted after %d rounds", self.num_vars)
        return self.result

    def finish_with_oracle(self, oracle: Oracle) -> VerificationResult:
        """Query the oracle once at the challenge vector, then finish()."""
        self._require(VerifierState.AWAITING_FINAL_CHECK, "finish_with_oracle")
        return self.finish(oracle(self.challenges))

    def abort(self, kind: RejectionKind, expected: FieldLike, actual: FieldLike) -> VerificationResult:
        """Reject from outside the round loop, e.g. a malformed proof."""
        if self.state in TERMINAL_STATES:
            raise ProtocolStateError(f"abort() on a verifier that is already {self.state.name}")
        self._reject(kind, None, expected, actual)
        return self.result

    # --- Suspend / Resume ---

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable state; round boundaries can cross a pause or network hop.

        The challenge source's own state (transcript, generator or replay
        cursor) is included, so restore() continues the same challenge stream.
        """
        return {
            "modulus": modulus_of(self.field),
            "state": self.state.value,
            "num_vars": self.num_vars,
            "round": self.round,
            "claim": None if self.claim is None else int(self.claim),
            "messages": [m.to_ints() for m in self.transcript.messages],
            "challenges": [int(c) for c in self.transcript.challenges],
            "rejection": None if self.rejection is None else {
                "kind": self.rejection.kind.value,
                "round": self.rejection.round,
                "expected": self.rejection.expected,
                "actual": self.rejection.actual,
            },
            "challenger": self.challenger.snapshot(),
        }

    @classmethod
    def restore(cls, snap: dict[str, Any], challenger: Optional[ChallengeSource] = None) -> "SumcheckVerifier":
        """Rebuild a verifier from snapshot() output.

        Args:
            snap: Output of snapshot()
            challenger: Challenge source to continue with; rebuilt from the
                snapshot when None

        Raises:
            FieldMismatchError: If the challenger's field is not the snapshot's.
        """
        if challenger is None:
            challenger = challenger_from_snapshot(snap["challenger"])
        verifier = cls(challenger)
        if modulus_of(verifier.field) != int(snap["modulus"]):
            raise FieldMismatchError(
                f"snapshot over GF({snap['modulus']}) restored with a GF({modulus_of(verifier.field)}) challenger"
            )
        f = verifier.field
        verifier.state = VerifierState(snap["state"])
        verifier.num_vars = int(snap["num_vars"])
        verifier.round = int(snap["round"])
        verifier.claim = None if snap["claim"] is None else to_field_element(int(snap["claim"]), f)
        verifier.transcript = SumcheckTranscript(
            messages=[RoundMessage.of(e0, e1, f) for e0, e1 in snap["messages"]],
            challenges=[to_field_element(int(c), f) for c in snap["challenges"]],
        )
        rej = snap.get("rejection")
        if rej is not None:
            verifier.rejection = Rejection(RejectionKind(rej["kind"]), rej["round"], rej["expected"], rej["actual"])
        return verifier

    # --- Internals ---

    def _reject(self, kind: RejectionKind, round_: Optional[int], expected: FieldLike, actual: FieldLike) -> None:
        self.rejection = Rejection(kind, round_, int(expected), int(actual))
        self.state = VerifierState.REJECTED
        logger.warning("ERROR: sum-check rejected: %s", self.rejection)

    def _require(self, state: VerifierState, operation: str) -> None:
        if self.state is state:
            return
        if self.state in TERMINAL_STATES:
            raise ProtocolStateError(f"{operation}() refused: run already ended ({self.state.name})")
        raise ProtocolStateError(f"{operation}() requires verifier state {state.name}, current is {self.state.name}")


# --- Non-interactive Verification ---

def verify(
    proof: SumcheckProof,
    oracle: Oracle,
    transcript: Transcript,
    num_vars: int,
) -> VerificationResult:
    """Verify a Fiat-Shamir sum-check proof.

    Args:
        proof: Proof produced by protocol.prover.prove()
        oracle: Evaluates the original polynomial at the challenge point
        transcript: Transcript in the same state the prover started from
        num_vars: Number of variables of the polynomial behind `oracle`. The
            proof's own num_vars is only compared against it, never trusted.

    Returns:
        VerificationResult (falsy when rejected). A proof of the wrong arity
        or round count is rejected with ROUND_COUNT_MISMATCH before any round
        is processed.

    Raises:
        ValueError: If num_vars is negative.
        FieldMismatchError: If proof and transcript use different fields.
    """
    if num_vars < 0:
        raise ValueError(f"num_vars must be non-negative, got {num_vars}")
    if proof.field is not transcript.field:
        raise FieldMismatchError(
            f"proof over GF({modulus_of(proof.field)}) checked with a GF({modulus_of(transcript.field)}) transcript"
        )
    verifier = SumcheckVerifier(FiatShamirChallenger(transcript))
    if proof.num_vars != num_vars:
        return verifier.abort(RejectionKind.ROUND_COUNT_MISMATCH, num_vars, proof.num_vars)
    if len(proof.round_messages) != num_vars:
        return verifier.abort(RejectionKind.ROUND_COUNT_MISMATCH, num_vars, len(proof.round_messages))

    verifier.start(num_vars, proof.claimed_sum)
    return _run_rounds(verifier, proof.round_messages, oracle, proof.final_evaluation)


def replay(
    record: SumcheckTranscript,
    num_vars: int,
    claimed_sum: FieldLike,
    oracle: Oracle,
    field: Optional[Field] = None,
) -> VerificationResult:
    """Re-run verification of a recorded interactive run with its own challenges.

    Args:
        record: Messages and challenges of the recorded run
        num_vars: Number of variables of the summed polynomial
        claimed_sum: Claim the run started from
        oracle: Evaluates the original polynomial at the challenge point
        field: Field of the run; defaults to the field of claimed_sum (FF for ints)
    """
    if field is None:
        field = field_of(claimed_sum)
    verifier = SumcheckVerifier(ReplayChallenger(record.challenges, field=field))
    if record.num_rounds != num_vars or len(record.challenges) != num_vars:
        return verifier.abort(RejectionKind.ROUND_COUNT_MISMATCH, num_vars, record.num_rounds)
    verifier.start(num_vars, claimed_sum)
    return _run_rounds(verifier, record.messages, oracle)


def _run_rounds(
    verifier: SumcheckVerifier,
    messages: Sequence[RoundMessage],
    oracle: Oracle,
    prover_final: Optional[FieldLike] = None,
) -> VerificationResult:
    """Feed every message, then run the final checks."""
    for message in messages:
        if verifier.receive_round(message) is None:
            return verifier.result

    if prover_final is not None:
        prover_final = to_field_element(prover_final, verifier.field)
        if prover_final != verifier.claim:
            return verifier.abort(RejectionKind.FINAL_CHECK_FAILED, verifier.claim, prover_final)

    return verifier.finish_with_oracle(oracle)
