"""Challenge sources for the sum-check verifier.

The verifier's round loop is identical whether challenges are drawn at random
(interactive protocol), derived by hashing the prover's messages (Fiat-Shamir),
or read back from a recorded run (audit replay). Each source is injected into
the verifier; none of them is global state.

Every source can snapshot() its own state to JSON and be rebuilt with
challenger_from_snapshot(), so a paused verifier resumes with the exact
challenge stream it would have produced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

import numpy as np

from primitives.errors import FieldMismatchError, ProtocolStateError
from primitives.field import FF, Field, FieldElement, FieldLike, field_for_modulus, modulus_of, to_field_element
from primitives.transcript import Transcript
from protocol.proof import RoundMessage


class ChallengeSource(ABC):
    """Produces the challenge r_i after the verifier has accepted round i."""

    field: Field

    def bind_claim(self, num_vars: int, claimed_sum: FieldElement) -> None:  # noqa: B027
        """Called once when a run starts, before any round."""

    @abstractmethod
    def next_challenge(self, message: RoundMessage) -> FieldElement:
        """Challenge for the round whose prover message is `message`."""

    @abstractmethod
    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable state, tagged with a "kind" key."""


class RandomChallenger(ChallengeSource):
    """Uniform challenges for a live interactive verifier.

    Args:
        field: Field to sample from.
        seed: Seed or numpy Generator; None draws fresh OS entropy.
    """

    kind = "random"

    def __init__(self, field: Field = FF, seed: Optional[int | np.random.Generator] = None):
        self.field = field
        self._rng = np.random.default_rng(seed)

    def next_challenge(self, message: RoundMessage) -> FieldElement:  # noqa: ARG002
        return self.field.Random(seed=self._rng)

    def snapshot(self) -> dict[str, Any]:
        return {"kind": self.kind, "modulus": modulus_of(self.field), "rng": self._rng.bit_generator.state}

    @classmethod
    def restore(cls, snap: dict[str, Any], field: Optional[Field] = None) -> RandomChallenger:
        challenger = cls(_snapshot_field(snap["modulus"], field))
        challenger._rng.bit_generator.state = snap["rng"]
        return challenger


class FiatShamirChallenger(ChallengeSource):
    """Challenges derived from a Fiat-Shamir transcript.

    The run is bound to (num_vars, claimed_sum) first; each round absorbs
    g(0), g(1) and squeezes the challenge. A prover and a verifier wrapping
    transcripts in the same state derive identical challenges.
    """

    kind = "fiat_shamir"

    def __init__(self, transcript: Transcript):
        self.transcript = transcript
        self.field = transcript.field

    def bind_claim(self, num_vars: int, claimed_sum: FieldElement) -> None:
        self.transcript.put([num_vars, claimed_sum])

    def next_challenge(self, message: RoundMessage) -> FieldElement:
        self.transcript.put([message.eval_0, message.eval_1])
        return self.transcript.get_challenge()

    def snapshot(self) -> dict[str, Any]:
        return {"kind": self.kind, "transcript": self.transcript.snapshot()}

    @classmethod
    def restore(cls, snap: dict[str, Any], field: Optional[Field] = None) -> FiatShamirChallenger:
        return cls(Transcript.restore(snap["transcript"], field))


class ReplayChallenger(ChallengeSource):
    """Replays the challenges recorded in an earlier run, in order."""

    kind = "replay"

    def __init__(self, challenges: Iterable[FieldLike], field: Field = FF):
        self.field = field
        self._challenges: List[FieldElement] = [to_field_element(c, field) for c in challenges]
        self._cursor = 0

    @property
    def remaining(self) -> int:
        return len(self._challenges) - self._cursor

    def next_challenge(self, message: RoundMessage) -> FieldElement:  # noqa: ARG002
        if self._cursor >= len(self._challenges):
            raise ProtocolStateError(f"replay ran out of challenges after {self._cursor} rounds")
        challenge = self._challenges[self._cursor]
        self._cursor += 1
        return challenge

    def snapshot(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "modulus": modulus_of(self.field),
            "challenges": [int(c) for c in self._challenges],
            "cursor": self._cursor,
        }

    @classmethod
    def restore(cls, snap: dict[str, Any], field: Optional[Field] = None) -> ReplayChallenger:
        challenger = cls(snap["challenges"], field=_snapshot_field(snap["modulus"], field))
        challenger._cursor = int(snap["cursor"])
        return challenger


# --- Restore Dispatch ---

_SOURCES = {source.kind: source for source in (RandomChallenger, FiatShamirChallenger, ReplayChallenger)}


def challenger_from_snapshot(snap: dict[str, Any], field: Optional[Field] = None) -> ChallengeSource:
    """Rebuild any built-in challenge source from its snapshot().

    Raises:
        ValueError: If the snapshot's kind is unknown.
    """
    source = _SOURCES.get(snap.get("kind"))
    if source is None:
        raise ValueError(f"unknown challenge source kind {snap.get('kind')!r}")
    return source.restore(snap, field)


def _snapshot_field(modulus: int, field: Optional[Field]) -> Field:
    if field is None:
        return field_for_modulus(int(modulus))
    if modulus_of(field) != int(modulus):
        raise FieldMismatchError(f"challenger snapshot over GF({modulus}) restored into GF({modulus_of(field)})")
    return field
