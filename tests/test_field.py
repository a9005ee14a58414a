"""Tests for prime field construction, coercion and element encoding."""

import numpy as np
import pytest

from primitives.errors import FieldMismatchError
from primitives.field import (FF, GOLDILOCKS_PRIME, element_byte_width, element_to_bytes, field_for_modulus,
                              field_of, from_bytes_mod_order, modulus_of, to_field_array, to_field_element)


class TestFieldConstruction:
    """Tests for field_for_modulus()."""

    def test_default_field_is_goldilocks(self) -> None:
        """FF is GF(2^64 - 2^32 + 1) and is returned for that modulus."""
        assert modulus_of(FF) == GOLDILOCKS_PRIME
        assert field_for_modulus(GOLDILOCKS_PRIME) is FF

    def test_same_modulus_same_class(self) -> None:
        """Fields are cached per modulus."""
        assert field_for_modulus(17) is field_for_modulus(17)

    def test_composite_modulus_rejected(self) -> None:
        """A non-prime modulus is refused by galois."""
        with pytest.raises(ValueError):
            field_for_modulus(15)

    def test_field_axioms_small_prime(self, gf17) -> None:
        """Closure, inverses and identities in GF(17)."""
        a, b = gf17(9), gf17(12)
        assert int(a + b) == 4
        assert int(a - b) == 14
        assert int(a * b) == 6
        assert int(-a) == 8
        assert int(a * a ** -1) == 1
        assert int(a + gf17(0)) == 9
        assert int(a * gf17(1)) == 9


class TestCoercion:
    """Tests for to_field_element() / to_field_array()."""

    def test_int_reduced_mod_p(self, gf17) -> None:
        """Plain integers, negative ones included, are reduced mod p."""
        assert int(to_field_element(20, gf17)) == 3
        assert int(to_field_element(-1, gf17)) == 16

    def test_numpy_integer_accepted(self, gf17) -> None:
        """numpy integer scalars are integral values too."""
        assert int(to_field_element(np.uint64(35), gf17)) == 1

    @pytest.mark.parametrize("value", [2.5, 2.0, "3", None])
    def test_non_integral_refused(self, gf17, value) -> None:
        """Floats and other non-integers raise TypeError instead of truncating."""
        with pytest.raises(TypeError):
            to_field_element(value, gf17)

    def test_float_in_sequence_refused(self, gf17) -> None:
        """Array coercion applies the same rule to every entry."""
        with pytest.raises(TypeError):
            to_field_array([1, 2.5], gf17)

    def test_element_passthrough(self, gf17) -> None:
        """An element of the right field is returned as is."""
        x = gf17(5)
        assert to_field_element(x, gf17) is x

    def test_element_of_other_field_refused(self, gf17, gf97) -> None:
        """Elements are never reinterpreted across fields."""
        with pytest.raises(FieldMismatchError):
            to_field_element(gf97(5), gf17)

    def test_array_refused_as_scalar(self, gf17) -> None:
        """A 1-d array is not a scalar element."""
        with pytest.raises(ValueError):
            to_field_element(gf17([1, 2]), gf17)

    def test_array_from_mixed_sequence(self, gf17) -> None:
        """Ints and elements can be mixed in one sequence."""
        arr = to_field_array([1, gf17(2), 35, -2], gf17)
        assert type(arr) is gf17
        assert [int(v) for v in arr] == [1, 2, 1, 15]

    def test_array_copy_is_independent(self, gf17) -> None:
        """Coercing a galois array copies it."""
        src = gf17([1, 2, 3, 4])
        arr = to_field_array(src, gf17)
        arr[0] = gf17(9)
        assert int(src[0]) == 1

    def test_field_of(self, gf17) -> None:
        """field_of() reads the class of an element, defaulting for ints."""
        assert field_of(gf17(3)) is gf17
        assert field_of(3) is FF
        assert field_of(3, default=gf17) is gf17


class TestEncoding:
    """Tests for fixed-width big-endian element encoding."""

    @pytest.mark.parametrize("modulus,width", [(17, 1), (257, 2), (GOLDILOCKS_PRIME, 8)])
    def test_byte_width(self, modulus: int, width: int) -> None:
        """Width is the byte length of the modulus."""
        assert element_byte_width(field_for_modulus(modulus)) == width

    def test_to_bytes_big_endian(self) -> None:
        """Most significant byte first, zero padded."""
        assert element_to_bytes(0x0102, FF) == bytes([0, 0, 0, 0, 0, 0, 1, 2])

    def test_from_bytes_reduces(self, gf17) -> None:
        """Decoding reduces the integer mod p."""
        assert int(from_bytes_mod_order(bytes([1, 0]), gf17)) == 256 % 17

    def test_encode_decode(self) -> None:
        """Decoding an encoded element gives it back."""
        x = FF(GOLDILOCKS_PRIME - 5)
        assert from_bytes_mod_order(element_to_bytes(x, FF), FF) == x
