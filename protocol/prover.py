"""Sum-check prover.

The prover holds one live polynomial. Each round it sends
g_i(X) = sum over the remaining hypercube of P(r_1, ..., r_{i-1}, X, ...)
as the pair (g_i(0), g_i(1)), then binds X to the verifier's challenge r_i.

    AWAITING_START --start--> RUNNING_ROUND(1) --...--> RUNNING_ROUND(n) --> FINISHED

Round i costs O(2^(n-i+1)) field operations, O(2^(n+1)) over the whole run.
"""

import logging
from enum import Enum
from typing import Any, Optional

from primitives.errors import FieldMismatchError, InvalidClaimError, ProtocolStateError
from primitives.field import FieldElement, FieldLike, field_for_modulus, modulus_of, to_field_element
from primitives.multilinear import MultilinearPolynomial
from primitives.transcript import Transcript
from protocol.challenges import FiatShamirChallenger
from protocol.proof import RoundMessage, SumcheckProof

logger = logging.getLogger(__name__)


class ProverState(Enum):
    AWAITING_START = "awaiting_start"
    RUNNING_ROUND = "running_round"
    FINISHED = "finished"


class SumcheckProver:
    """Honest sum-check prover for a multilinear polynomial.

    Attributes:
        state: Current ProverState
        round: 1-based index of the round in progress (0 before start,
            num_vars + 1 once finished)
        num_vars: Number of variables of the original polynomial
    """

    def __init__(self) -> None:
        self.state = ProverState.AWAITING_START
        self.round = 0
        self.num_vars = 0
        self._polynomial: Optional[MultilinearPolynomial] = None
        self._pending: Optional[RoundMessage] = None

    # --- Protocol Steps ---

    def start(self, polynomial: MultilinearPolynomial, claimed_sum: FieldLike) -> None:
        """Load the polynomial and the sum it is claimed to have.

        Raises:
            InvalidClaimError: If the polynomial does not sum to claimed_sum.
                An honest prover is only ever started on a true claim.
        """
        self._require(ProverState.AWAITING_START, "start")
        claimed = to_field_element(claimed_sum, polynomial.field)
        actual = polynomial.sum_over_hypercube()
        if actual != claimed:
            raise InvalidClaimError(f"polynomial sums to {int(actual)}, not the claimed {int(claimed)}")

        self._polynomial = polynomial
        self.num_vars = polynomial.num_vars
        self.round = 1
        self.state = ProverState.RUNNING_ROUND if polynomial.num_vars > 0 else ProverState.FINISHED
        logger.debug("Prover started: %d variables, claimed sum %d", self.num_vars, int(claimed))

    def produce_round(self) -> RoundMessage:
        """Message g_i for the current round.

        g_i(b) is the hypercube sum of the current table with its first
        variable fixed to b; for b in {0, 1} that is just the sum of the low or
        high half. Calling again before the challenge arrives returns the same
        message.
        """
        self._require(ProverState.RUNNING_ROUND, "produce_round")
        if self._pending is None:
            low, high = self._polynomial.halves()
            self._pending = RoundMessage(low.sum_over_hypercube(), high.sum_over_hypercube())
            logger.debug("Prover round %d: g(0)=%d g(1)=%d", self.round,
                         int(self._pending.eval_0), int(self._pending.eval_1))
        return self._pending

    def receive_challenge(self, challenge: FieldLike) -> None:
        """Bind the current first variable to `challenge` and advance."""
        self._require(ProverState.RUNNING_ROUND, "receive_challenge")
        if self._pending is None:
            raise ProtocolStateError(f"challenge for round {self.round} received before its message was produced")
        self._polynomial = self._polynomial.fix_first_variable(challenge)
        self._pending = None
        self.round += 1
        if self.round > self.num_vars:
            self.state = ProverState.FINISHED

    def final_evaluation(self) -> FieldElement:
        """P(r_1, ..., r_n): the sole value left after all variables are bound."""
        self._require(ProverState.FINISHED, "final_evaluation")
        return self._polynomial[0]

    @property
    def polynomial(self) -> Optional[MultilinearPolynomial]:
        """Current (partially bound) polynomial."""
        return self._polynomial

    # --- Suspend / Resume ---

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable state; round boundaries can cross a pause or network hop."""
        snap: dict[str, Any] = {"state": self.state.value, "round": self.round, "num_vars": self.num_vars}
        if self._polynomial is not None:
            snap["modulus"] = modulus_of(self._polynomial.field)
            snap["evaluations"] = self._polynomial.to_ints()
        if self._pending is not None:
            snap["pending"] = self._pending.to_ints()
        return snap

    @classmethod
    def restore(cls, snap: dict[str, Any]) -> "SumcheckProver":
        """Rebuild a prover from snapshot() output."""
        prover = cls()
        prover.state = ProverState(snap["state"])
        prover.round = int(snap["round"])
        prover.num_vars = int(snap["num_vars"])
        if "evaluations" in snap:
            f = field_for_modulus(int(snap["modulus"]))
            prover._polynomial = MultilinearPolynomial(snap["evaluations"], field=f)
            if "pending" in snap:
                prover._pending = RoundMessage.of(*snap["pending"], field=f)
        return prover

    def _require(self, state: ProverState, operation: str) -> None:
        if self.state is not state:
            raise ProtocolStateError(f"{operation}() requires prover state {state.name}, current is {self.state.name}")


# --- Non-interactive Prover ---

def prove(
    polynomial: MultilinearPolynomial,
    transcript: Transcript,
    claimed_sum: Optional[FieldLike] = None,
) -> SumcheckProof:
    """Generate a Fiat-Shamir sum-check proof.

    Args:
        polynomial: Polynomial whose hypercube sum is proven
        transcript: Transcript in the same state the verifier will start from
            (callers bind any commitment to the polynomial beforehand)
        claimed_sum: Sum to prove; computed from the polynomial when None

    Returns:
        SumcheckProof with one round message per variable.
    """
    if transcript.field is not polynomial.field:
        raise FieldMismatchError(
            f"transcript over GF({modulus_of(transcript.field)}) cannot prove a GF({modulus_of(polynomial.field)}) sum"
        )
    if claimed_sum is None:
        claimed_sum = polynomial.sum_over_hypercube()
    claimed_sum = to_field_element(claimed_sum, polynomial.field)

    prover = SumcheckProver()
    prover.start(polynomial, claimed_sum)

    challenger = FiatShamirChallenger(transcript)
    challenger.bind_claim(polynomial.num_vars, claimed_sum)

    round_messages = []
    while prover.state is ProverState.RUNNING_ROUND:
        message = prover.produce_round()
        round_messages.append(message)
        prover.receive_challenge(challenger.next_challenge(message))

    return SumcheckProof(
        num_vars=polynomial.num_vars,
        claimed_sum=claimed_sum,
        round_messages=round_messages,
        final_evaluation=prover.final_evaluation(),
    )
