"""Sum-check protocol messages, transcripts and proofs, with JSON serialization."""

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from primitives.field import (FF, Field, FieldElement, FieldLike, elements_to_ints, field_for_modulus,
                              modulus_of, to_field_element)

# --- Type Aliases ---
Challenge = FieldElement


# --- Round Message ---

@dataclass(frozen=True)
class RoundMessage:
    """Prover's message for one round: g(X) of degree <= 1 as (g(0), g(1)).

    Two evaluations determine a linear polynomial; the verifier only ever needs
    g(0) + g(1) and g(r) for its challenge r.
    """
    eval_0: FieldElement
    eval_1: FieldElement

    @classmethod
    def of(cls, eval_0: FieldLike, eval_1: FieldLike, field: Field = FF) -> "RoundMessage":
        return cls(to_field_element(eval_0, field), to_field_element(eval_1, field))

    @property
    def field(self) -> Field:
        return type(self.eval_0)

    def sum(self) -> FieldElement:
        """g(0) + g(1): what the previous claim must equal."""
        return self.eval_0 + self.eval_1

    def evaluate(self, r: FieldLike) -> FieldElement:
        """g(r) = (1 - r) * g(0) + r * g(1)."""
        r = to_field_element(r, self.field)
        return self.eval_0 + r * (self.eval_1 - self.eval_0)

    def coefficients(self) -> List[FieldElement]:
        """Ascending coefficients [c0, c1] of g(X) = c0 + c1 * X."""
        return [self.eval_0, self.eval_1 - self.eval_0]

    def to_ints(self) -> List[int]:
        return [int(self.eval_0), int(self.eval_1)]


# --- Transcript / Proof ---

@dataclass
class SumcheckTranscript:
    """Record of one protocol run: every round message and every challenge.

    Sufficient for an independent auditor to replay verification with
    protocol.verifier.replay().
    """
    messages: List[RoundMessage] = field(default_factory=list)
    challenges: List[Challenge] = field(default_factory=list)

    @property
    def num_rounds(self) -> int:
        return len(self.messages)

    def record(self, message: RoundMessage, challenge: Challenge) -> None:
        self.messages.append(message)
        self.challenges.append(challenge)


@dataclass
class SumcheckProof:
    """Non-interactive sum-check proof.

    Attributes:
        num_vars: Number of variables of the summed polynomial (= rounds).
        claimed_sum: Claimed sum S over the hypercube.
        round_messages: One RoundMessage per variable, in round order.
        final_evaluation: Prover's value for P(r_1, ..., r_n); checked against
            the running claim and against the verifier's oracle.
    """
    num_vars: int
    claimed_sum: FieldElement
    round_messages: List[RoundMessage] = field(default_factory=list)
    final_evaluation: Optional[FieldElement] = None

    @property
    def field(self) -> Field:
        return type(self.claimed_sum)


# --- JSON Serialization ---

def proof_to_json(proof: SumcheckProof) -> dict[str, Any]:
    """Convert a sum-check proof to a JSON-serializable dictionary.

    Field elements are written as decimal integers next to the modulus.
    """
    return {
        "modulus": modulus_of(proof.field),
        "num_vars": proof.num_vars,
        "claimed_sum": int(proof.claimed_sum),
        "round_messages": [m.to_ints() for m in proof.round_messages],
        "final_evaluation": int(proof.final_evaluation),
    }


def proof_from_json(j: dict[str, Any]) -> SumcheckProof:
    """Rebuild a proof from proof_to_json() output."""
    f = field_for_modulus(int(j["modulus"]))
    return SumcheckProof(
        num_vars=int(j["num_vars"]),
        claimed_sum=to_field_element(int(j["claimed_sum"]), f),
        round_messages=[RoundMessage.of(e0, e1, f) for e0, e1 in j["round_messages"]],
        final_evaluation=to_field_element(int(j["final_evaluation"]), f),
    )


def transcript_to_json(transcript: SumcheckTranscript, field: Field) -> dict[str, Any]:
    """Convert an interactive run's transcript to a JSON-serializable dictionary."""
    return {
        "modulus": modulus_of(field),
        "messages": [m.to_ints() for m in transcript.messages],
        "challenges": elements_to_ints(transcript.challenges),
    }


def transcript_from_json(j: dict[str, Any]) -> SumcheckTranscript:
    """Rebuild a transcript from transcript_to_json() output."""
    f = field_for_modulus(int(j["modulus"]))
    return SumcheckTranscript(
        messages=[RoundMessage.of(e0, e1, f) for e0, e1 in j["messages"]],
        challenges=[to_field_element(int(c), f) for c in j["challenges"]],
    )


def dumps_proof(proof: SumcheckProof) -> str:
    return json.dumps(proof_to_json(proof))


def loads_proof(s: str) -> SumcheckProof:
    return proof_from_json(json.loads(s))
