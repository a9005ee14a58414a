"""Tests for the Fiat-Shamir transcript."""

import hashlib
import json

import pytest

from primitives.errors import FieldMismatchError
from primitives.field import FF, field_for_modulus, from_bytes_mod_order
from primitives.transcript import DEFAULT_LABEL, HASH_SIZE, Transcript


class TestTranscript:
    """Tests for Transcript absorb/squeeze behaviour."""

    def test_same_inputs_same_challenges(self) -> None:
        """Identical absorption yields identical challenges."""
        a, b = Transcript(), Transcript()
        a.put([1, 2, 3])
        b.put([1, 2, 3])
        assert a.get_challenges(3) == b.get_challenges(3)

    def test_different_inputs_different_challenges(self) -> None:
        """Changing one absorbed element changes the challenge."""
        a, b = Transcript(), Transcript()
        a.put([1, 2, 3])
        b.put([1, 2, 4])
        assert a.get_challenge() != b.get_challenge()

    def test_order_matters(self) -> None:
        """Absorption order is part of the state."""
        a, b = Transcript(), Transcript()
        a.put([1, 2])
        b.put([2, 1])
        assert a.get_challenge() != b.get_challenge()

    def test_label_separates_domains(self) -> None:
        """Different labels give different challenge streams."""
        a, b = Transcript(label=b"protocol-a"), Transcript(label=b"protocol-b")
        assert a.get_challenge() != b.get_challenge()

    def test_first_challenge_is_hash_of_label(self) -> None:
        """With nothing absorbed the first challenge is H(label) mod p."""
        expected = from_bytes_mod_order(hashlib.sha3_256(DEFAULT_LABEL).digest(), FF)
        assert Transcript().get_challenge() == expected

    def test_challenge_chain(self) -> None:
        """The second challenge is H(H(label) || data) mod p."""
        t = Transcript(label=b"x")
        t.get_challenge()
        t.put_bytes(b"data")
        d1 = hashlib.sha3_256(b"x").digest()
        expected = from_bytes_mod_order(hashlib.sha3_256(d1 + b"data").digest(), FF)
        assert t.get_challenge() == expected

    def test_successive_challenges_differ(self) -> None:
        """Squeezing twice without absorbing still advances the chain."""
        t = Transcript()
        c = t.get_challenges(4)
        assert len({int(x) for x in c}) == 4
        assert t.n_challenges == 4

    def test_challenge_depends_on_earlier_squeeze(self) -> None:
        """Squeezing re-seeds the chain, so squeeze-then-put differs from put alone."""
        a, b = Transcript(), Transcript()
        a.get_challenge()
        a.put([7])
        b.put([7])
        assert a.get_challenge() != b.get_challenge()

    def test_ints_and_elements_absorb_identically(self) -> None:
        """An int and the element it reduces to encode the same bytes."""
        a, b = Transcript(), Transcript()
        a.put([5, -1])
        b.put([FF(5), FF(-1 % FF.characteristic)])
        assert a.get_state() == b.get_state()

    def test_put_bytes(self) -> None:
        """Raw bytes are absorbed into the state."""
        a, b = Transcript(), Transcript()
        a.put_bytes(b"commitment")
        assert a.get_state() != b.get_state()
        b.put_bytes(b"commitment")
        assert a.get_state() == b.get_state()

    def test_get_state_does_not_advance(self) -> None:
        """get_state() is a read-only peek."""
        t = Transcript()
        state = t.get_state()
        assert len(state) == HASH_SIZE
        assert t.get_state() == state
        assert t.n_challenges == 0

    def test_fork_is_independent(self) -> None:
        """A fork continues from the same state but diverges on its own input."""
        t = Transcript()
        t.put([1])
        clone = t.fork()
        assert clone.get_challenge() == t.get_challenge()
        clone.put([2])
        t.put([3])
        assert clone.get_challenge() != t.get_challenge()

    def test_small_field_challenges_in_range(self, gf17) -> None:
        """Challenges are reduced into the transcript's field."""
        t = Transcript(gf17)
        for c in t.get_challenges(20):
            assert type(c) is gf17
            assert 0 <= int(c) < 17

    @pytest.mark.parametrize("modulus,size", [(17, 1), (FF.characteristic, 8)])
    def test_element_size(self, modulus: int, size: int) -> None:
        """Elements are absorbed at the field's byte width."""
        assert Transcript(field_for_modulus(int(modulus))).element_size == size

    def test_oversized_field_refused(self) -> None:
        """Moduli wider than one digest are refused."""
        # only the characteristic is consulted before refusing
        wide = type("WideField", (), {"characteristic": 2**300})
        with pytest.raises(ValueError):
            Transcript(wide)


class TestTranscriptSnapshot:
    """Tests for suspend / resume of a transcript through JSON."""

    def test_resume_with_pending_input(self, gf17) -> None:
        """A restored transcript squeezes what the original would have."""
        t = Transcript(gf17, label=b"resume")
        t.put([1, 2])
        t.get_challenge()
        t.put([3])

        restored = Transcript.restore(json.loads(json.dumps(t.snapshot())))
        assert restored.field is gf17
        assert restored.label == b"resume"
        assert restored.n_challenges == 1
        assert restored.get_state() == t.get_state()
        assert restored.get_challenges(3) == t.get_challenges(3)

    def test_restore_into_given_field(self, gf17) -> None:
        """An explicit field with the snapshot's modulus is reused."""
        snap = Transcript(gf17).snapshot()
        assert Transcript.restore(snap, gf17).field is gf17

    def test_restore_into_other_field_refused(self, gf17, gf97) -> None:
        """An explicit field with another modulus is refused."""
        with pytest.raises(FieldMismatchError):
            Transcript.restore(Transcript(gf17).snapshot(), gf97)
