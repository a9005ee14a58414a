"""Prime fields GF(p) for the sum-check protocol.

Uses galois library for all field arithmetic. A field is a galois FieldArray
subclass; a field element is a 0-d array of that class. FF is the default
field (Goldilocks), any other prime can be obtained from field_for_modulus().

Elements are serialized as fixed-width big-endian integers, the width being
the byte length of the modulus.
"""

import numbers
from functools import lru_cache
from typing import Iterable, List, Type, Union

import galois
import numpy as np

from primitives.errors import FieldMismatchError

# --- Type Aliases ---

Field = Type[galois.FieldArray]
FieldElement = galois.FieldArray  # 0-d array
FieldLike = Union[galois.FieldArray, int, np.integer]

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Default field GF(p) - Goldilocks prime field."""


@lru_cache(maxsize=None)
def field_for_modulus(modulus: int) -> Field:
    """Return the prime field GF(modulus).

    Raises:
        ValueError: If modulus is not prime (raised by galois).
    """
    if modulus == GOLDILOCKS_PRIME:
        return FF
    return galois.GF(modulus)


def modulus_of(field: Field) -> int:
    """Characteristic p of a prime field."""
    return int(field.characteristic)


# --- Element Conversion ---

def to_field_element(value: FieldLike, field: Field) -> FieldElement:
    """Coerce an int or element into a 0-d element of `field`.

    Plain integers (negative ones included) are reduced mod p. Elements of a
    different field are refused rather than silently reinterpreted, and so
    are non-integral values such as floats (TypeError).
    """
    if isinstance(value, galois.FieldArray):
        if type(value) is not field:
            raise FieldMismatchError(
                f"element of GF({modulus_of(type(value))}) used where GF({modulus_of(field)}) is expected"
            )
        if value.ndim != 0:
            raise ValueError(f"expected a scalar field element, got shape {value.shape}")
        return value
    if not isinstance(value, numbers.Integral):
        raise TypeError(f"cannot coerce {type(value).__name__} {value!r} into GF({modulus_of(field)})")
    return field(int(value) % modulus_of(field))


def to_field_array(values: Union[galois.FieldArray, Iterable[FieldLike]], field: Field) -> galois.FieldArray:
    """Coerce a sequence of ints/elements into a 1-d array of `field`."""
    if isinstance(values, galois.FieldArray):
        if type(values) is not field:
            raise FieldMismatchError(
                f"array over GF({modulus_of(type(values))}) used where GF({modulus_of(field)}) is expected"
            )
        return values.copy()
    return field([int(to_field_element(v, field)) for v in values])


def field_of(value: FieldLike, default: Field = FF) -> Field:
    """Field an element belongs to; plain integers map to `default`."""
    if isinstance(value, galois.FieldArray):
        return type(value)
    return default


# --- Serialization ---

def element_byte_width(field: Field) -> int:
    """Number of bytes in the fixed-width encoding of one element."""
    return (modulus_of(field).bit_length() + 7) // 8


def element_to_bytes(value: FieldLike, field: Field) -> bytes:
    """Big-endian fixed-width encoding of a field element."""
    return int(to_field_element(value, field)).to_bytes(element_byte_width(field), "big")


def from_bytes_mod_order(data: bytes, field: Field) -> FieldElement:
    """Interpret big-endian bytes as an integer and reduce it into `field`."""
    return field(int.from_bytes(data, "big") % modulus_of(field))


def elements_to_ints(values: Iterable[FieldLike]) -> List[int]:
    """Convert field elements to plain ints (JSON boundary)."""
    return [int(v) for v in values]
