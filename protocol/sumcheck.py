"""Sum-check protocol driver.

Glues an (honest or not) prover, a verifier, a challenge source and an oracle
into complete runs, interactive or Fiat-Shamir.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from primitives.errors import FieldMismatchError
from primitives.field import (GOLDILOCKS_PRIME, Field, FieldElement, FieldLike, element_byte_width,
                              field_for_modulus, modulus_of)
from primitives.multilinear import MultilinearPolynomial
from primitives.transcript import DEFAULT_LABEL, Transcript
from protocol.challenges import ChallengeSource, RandomChallenger
from protocol.proof import RoundMessage, SumcheckProof
from protocol.prover import SumcheckProver, prove
from protocol.verifier import Oracle, SumcheckVerifier, VerificationResult, VerifierState, verify


# --- Configuration ---

@dataclass
class SumcheckConfig:
    """Sum-check parameters."""
    modulus: int = GOLDILOCKS_PRIME
    transcript_label: bytes = DEFAULT_LABEL

    @property
    def field(self) -> Field:
        return field_for_modulus(self.modulus)

    @property
    def element_size(self) -> int:
        """Bytes per serialized field element."""
        return element_byte_width(self.field)


# --- Prover Interface ---

class RoundProver(Protocol):
    """What the driver needs from a prover; SumcheckProver is the honest one."""

    def produce_round(self) -> RoundMessage: ...

    def receive_challenge(self, challenge: FieldElement) -> None: ...


# --- Drivers ---

def run_sumcheck_with_prover(
    prover: RoundProver,
    num_vars: int,
    claimed_sum: FieldLike,
    challenger: ChallengeSource,
    oracle: Oracle,
) -> VerificationResult:
    """Run the round loop between an already started prover and a fresh verifier.

    The loop stops at the first rejected round; the oracle is queried once,
    only if every round passed.
    """
    verifier = SumcheckVerifier(challenger)
    verifier.start(num_vars, claimed_sum)

    while verifier.state is VerifierState.RUNNING_ROUND:
        message = prover.produce_round()
        challenge = verifier.receive_round(message)
        if challenge is None:
            return verifier.result
        prover.receive_challenge(challenge)

    return verifier.finish_with_oracle(oracle)


def run_sumcheck(
    polynomial: MultilinearPolynomial,
    claimed_sum: FieldLike,
    challenger: ChallengeSource,
    oracle: Optional[Oracle] = None,
) -> VerificationResult:
    """Run an honest prover against a verifier on `polynomial`.

    Args:
        polynomial: Polynomial the prover holds
        claimed_sum: Claim handed to both sides
        challenger: Verifier's challenge source
        oracle: Ground-truth evaluation of the polynomial; defaults to the
            polynomial's own multilinear extension

    Raises:
        InvalidClaimError: If claimed_sum is not the polynomial's sum (the
            honest prover refuses to start).
    """
    prover = SumcheckProver()
    prover.start(polynomial, claimed_sum)
    if oracle is None:
        oracle = polynomial.evaluate
    return run_sumcheck_with_prover(prover, polynomial.num_vars, claimed_sum, challenger, oracle)


# --- Protocol Object ---

class Sumcheck:
    """Sum-check protocol instance for one configuration."""

    def __init__(self, config: Optional[SumcheckConfig] = None):
        self.config = config or SumcheckConfig()
        self.field = self.config.field

    def new_transcript(self) -> Transcript:
        """Fresh Fiat-Shamir transcript seeded with the configured label."""
        return Transcript(self.field, label=self.config.transcript_label)

    def polynomial(self, evaluations) -> MultilinearPolynomial:
        """Multilinear polynomial over the configured field."""
        return MultilinearPolynomial(evaluations, field=self.field)

    def prove(self, polynomial: MultilinearPolynomial, claimed_sum: Optional[FieldLike] = None,
              transcript: Optional[Transcript] = None) -> SumcheckProof:
        """Non-interactive proof; a fresh transcript is used unless one is given."""
        return prove(polynomial, transcript or self.new_transcript(), claimed_sum)

    def verify(self, proof: SumcheckProof, oracle: Oracle, num_vars: int,
               transcript: Optional[Transcript] = None) -> VerificationResult:
        """Check a non-interactive proof against `oracle`, an n-variable polynomial."""
        return verify(proof, oracle, transcript or self.new_transcript(), num_vars)

    def run_interactive(
        self,
        polynomial: MultilinearPolynomial,
        claimed_sum: Optional[FieldLike] = None,
        oracle: Optional[Oracle] = None,
        seed: Optional[int | np.random.Generator] = None,
    ) -> VerificationResult:
        """Interactive run with uniformly random challenges."""
        if polynomial.field is not self.field:
            raise FieldMismatchError(
                f"polynomial over GF({modulus_of(polynomial.field)}), protocol configured for GF({self.config.modulus})"
            )
        if claimed_sum is None:
            claimed_sum = polynomial.sum_over_hypercube()
        return run_sumcheck(polynomial, claimed_sum, RandomChallenger(self.field, seed=seed), oracle)
