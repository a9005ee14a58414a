"""Primitives - Field arithmetic, multilinear polynomials and the Fiat-Shamir transcript."""

from primitives.errors import (
    DimensionMismatchError,
    FieldMismatchError,
    InvalidClaimError,
    InvalidLengthError,
    ProtocolStateError,
    SumcheckError,
)
from primitives.field import (
    FF,
    GOLDILOCKS_PRIME,
    Field,
    FieldElement,
    element_byte_width,
    element_to_bytes,
    field_for_modulus,
    from_bytes_mod_order,
    to_field_element,
)
from primitives.multilinear import (
    MultilinearPolynomial,
    eq_evaluations,
    hypercube_point,
)
from primitives.transcript import Transcript

__all__ = [
    # Errors
    "SumcheckError",
    "InvalidLengthError",
    "DimensionMismatchError",
    "InvalidClaimError",
    "FieldMismatchError",
    "ProtocolStateError",
    # Field
    "FF",
    "GOLDILOCKS_PRIME",
    "Field",
    "FieldElement",
    "field_for_modulus",
    "to_field_element",
    "element_byte_width",
    "element_to_bytes",
    "from_bytes_mod_order",
    # Multilinear polynomials
    "MultilinearPolynomial",
    "eq_evaluations",
    "hypercube_point",
    # Transcript
    "Transcript",
]
