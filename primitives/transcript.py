"""
Fiat-Shamir transcript over a SHA3-256 hash chain.

The transcript absorbs field elements and produces challenges in a
deterministic, pseudorandom manner. Prover and verifier that absorb the same
data in the same order derive the same challenges.

Construction:
    seed_0     = label
    put(x)     : pending += encode(x)           fixed-width big-endian elements
    challenge  : d = H(seed || pending)
                 seed = d, pending = b""        (re-seed with the digest)
                 return int(d) mod p

The whole state is (seed, pending, n_challenges), all plain bytes and ints,
so it survives snapshot() / restore() through JSON.
"""

import hashlib
from typing import Any, Iterable, List, Optional

from primitives.errors import FieldMismatchError
from primitives.field import (FF, Field, FieldElement, FieldLike, element_byte_width, element_to_bytes,
                              field_for_modulus, from_bytes_mod_order, modulus_of)

# Default domain-separation label
DEFAULT_LABEL = b"sumcheck"

# Digest size of the hash (bytes)
HASH_SIZE = 32


class Transcript:
    """
    Fiat-Shamir transcript using a SHA3-256 hash chain.

    Attributes:
        field: Prime field challenges are reduced into
        label: Domain-separation label absorbed first
        n_challenges: Number of challenges squeezed so far
    """

    def __init__(self, field: Field = FF, label: bytes = DEFAULT_LABEL):
        if modulus_of(field).bit_length() > 8 * HASH_SIZE:
            raise ValueError(
                f"field modulus has {modulus_of(field).bit_length()} bits, "
                f"challenges only carry {8 * HASH_SIZE}"
            )
        self.field = field
        self.label = label
        self.n_challenges = 0
        self._seed = bytes(label)
        self._pending = bytearray()

    def put(self, elements: Iterable[FieldLike]) -> None:
        """Absorb field elements (ints are reduced into the field first)."""
        for elem in elements:
            self._pending += element_to_bytes(elem, self.field)

    def put_bytes(self, data: bytes) -> None:
        """Absorb raw bytes, e.g. a commitment to the summed polynomial."""
        self._pending += data

    def get_state(self) -> bytes:
        """Current digest, without advancing the transcript."""
        return hashlib.sha3_256(self._seed + self._pending).digest()

    def get_challenge(self) -> FieldElement:
        """Squeeze one field element and re-seed the hash chain with it."""
        digest = self.get_state()
        self._seed = digest
        self._pending = bytearray()
        self.n_challenges += 1
        return from_bytes_mod_order(digest, self.field)

    def get_challenges(self, n: int) -> List[FieldElement]:
        """Squeeze `n` field elements."""
        return [self.get_challenge() for _ in range(n)]

    def fork(self) -> "Transcript":
        """Independent copy that continues from the same state."""
        return Transcript.restore(self.snapshot(), self.field)

    @property
    def element_size(self) -> int:
        """Bytes absorbed per field element."""
        return element_byte_width(self.field)

    # --- Suspend / Resume ---

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable state (bytes as hex)."""
        return {
            "modulus": modulus_of(self.field),
            "label": self.label.hex(),
            "seed": self._seed.hex(),
            "pending": bytes(self._pending).hex(),
            "n_challenges": self.n_challenges,
        }

    @classmethod
    def restore(cls, snap: dict[str, Any], field: Optional[Field] = None) -> "Transcript":
        """Rebuild a transcript from snapshot() output.

        Args:
            snap: Output of snapshot()
            field: Field class to reuse; defaults to GF(snap["modulus"])

        Raises:
            FieldMismatchError: If `field` has a different modulus than the
                snapshot.
        """
        if field is None:
            field = field_for_modulus(int(snap["modulus"]))
        elif modulus_of(field) != int(snap["modulus"]):
            raise FieldMismatchError(
                f"transcript snapshot over GF({snap['modulus']}) restored into GF({modulus_of(field)})"
            )
        transcript = cls(field, label=bytes.fromhex(snap["label"]))
        transcript._seed = bytes.fromhex(snap["seed"])
        transcript._pending = bytearray.fromhex(snap["pending"])
        transcript.n_challenges = int(snap["n_challenges"])
        return transcript
