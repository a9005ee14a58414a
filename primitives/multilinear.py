"""Multilinear polynomials in evaluation form over the Boolean hypercube.

A multilinear polynomial in n variables is fully determined by its 2^n values
on {0,1}^n. We store exactly that table and never the coefficients.

Bit-order convention: the first variable x_1 is the MOST significant bit of
the table index. Index i holds P(b_1, ..., b_n) with i = sum_k b_k * 2^(n-k),
so for n = 2 the table reads [P(0,0), P(0,1), P(1,0), P(1,1)]. Every
operation here, and any oracle evaluating the same polynomial, must agree on
this order or the final sum-check comparison silently fails.

Polynomials are immutable: binding a variable returns a new polynomial with
half the table. The underlying arrays are marked read-only so halves and
prefixes can be shared without copying.
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

import galois
import numpy as np

from primitives.errors import DimensionMismatchError, FieldMismatchError, InvalidLengthError
from primitives.field import FF, Field, FieldElement, FieldLike, modulus_of, to_field_array, to_field_element

# --- Type Aliases ---

EvalTable = galois.FieldArray  # 1-d, length 2^n
Point = Sequence[FieldLike]


# --- Hypercube Helpers ---

def is_power_of_two(n: int) -> bool:
    """True for 1, 2, 4, ...; False for zero."""
    return n > 0 and (n & (n - 1)) == 0


def hypercube_point(index: int, num_vars: int) -> List[int]:
    """Boolean point of table index `index`, first variable first (MSB)."""
    if not 0 <= index < (1 << num_vars):
        raise IndexError(f"index {index} outside hypercube of {num_vars} variables")
    return [(index >> (num_vars - 1 - k)) & 1 for k in range(num_vars)]


def eq_evaluations(point: Point, field: Field = FF) -> EvalTable:
    """Table of eq(b, r) = prod_k (b_k r_k + (1 - b_k)(1 - r_k)) for all b.

    Uses the same bit order as MultilinearPolynomial, so
    sum_i table[i] * eq[i] is the multilinear extension evaluated at r.
    Built by doubling: each new variable becomes the least significant bit.
    """
    one = field(1)
    table = field([1])
    for r in point:
        r = to_field_element(r, field)
        doubled = field.Zeros(2 * len(table))
        doubled[0::2] = table * (one - r)
        doubled[1::2] = table * r
        table = doubled
    return table


def _fold_first(table: EvalTable, value: FieldElement) -> EvalTable:
    """Bind the most significant variable: lo + v * (hi - lo)."""
    half = len(table) // 2
    lo = table[:half]
    hi = table[half:]
    return lo + value * (hi - lo)


def _freeze(table: EvalTable) -> EvalTable:
    table.flags.writeable = False
    return table


# --- Multilinear Polynomial ---

class MultilinearPolynomial:
    """Multilinear polynomial given by its evaluations on {0,1}^n.

    Args:
        evaluations: 2^n values, as a galois array or a sequence of ints /
            field elements (ints are reduced mod p).
        field: Field of the values. Defaults to the field of `evaluations`
            when it is a galois array, otherwise to FF.

    Raises:
        InvalidLengthError: If the number of evaluations is not a power of two.
    """

    __slots__ = ("_evaluations", "_field", "_num_vars")

    def __init__(self, evaluations: Union[EvalTable, Iterable[FieldLike]], field: Optional[Field] = None):
        if isinstance(evaluations, galois.FieldArray):
            field = field or type(evaluations)
            if evaluations.ndim != 1:
                raise InvalidLengthError(f"evaluation table must be 1-d, got shape {evaluations.shape}")
        else:
            field = field or FF
            evaluations = list(evaluations)

        n = len(evaluations)
        if not is_power_of_two(n):
            raise InvalidLengthError(f"evaluation table length must be a power of two, got {n}")

        self._field = field
        self._evaluations = _freeze(to_field_array(evaluations, field))
        self._num_vars = n.bit_length() - 1

    @classmethod
    def _wrap(cls, table: EvalTable, field: Field) -> "MultilinearPolynomial":
        """Build from a freshly computed table without copying it."""
        poly = cls.__new__(cls)
        poly._field = field
        poly._evaluations = _freeze(table)
        poly._num_vars = len(table).bit_length() - 1
        return poly

    @classmethod
    def constant(cls, value: FieldLike, num_vars: int = 0, field: Field = FF) -> "MultilinearPolynomial":
        """Polynomial equal to `value` everywhere on an n-variable hypercube."""
        v = to_field_element(value, field)
        table = field.Zeros(1 << num_vars) + v
        return cls._wrap(table, field)

    @classmethod
    def random(cls, num_vars: int, field: Field = FF, seed=None) -> "MultilinearPolynomial":
        """Uniformly random table over `field`."""
        return cls._wrap(field.Random(1 << num_vars, seed=seed), field)

    # --- Accessors ---

    @property
    def field(self) -> Field:
        return self._field

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def evaluations(self) -> EvalTable:
        """Read-only view of the evaluation table."""
        return self._evaluations

    def __len__(self) -> int:
        return len(self._evaluations)

    def __getitem__(self, index: int) -> FieldElement:
        return self._evaluations[index]

    def to_ints(self) -> List[int]:
        return [int(v) for v in self._evaluations]

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultilinearPolynomial):
            return NotImplemented
        return self._field is other._field and np.array_equal(self._evaluations, other._evaluations)

    __hash__ = None

    def __repr__(self) -> str:
        return f"MultilinearPolynomial(num_vars={self._num_vars}, p={modulus_of(self._field)}, evals={self.to_ints()})"

    # --- Variable Binding ---

    def halves(self) -> Tuple["MultilinearPolynomial", "MultilinearPolynomial"]:
        """Restrictions to x_1 = 0 and x_1 = 1 (views, no copy)."""
        self._require_vars(1)
        half = len(self._evaluations) // 2
        return (
            MultilinearPolynomial._wrap(self._evaluations[:half], self._field),
            MultilinearPolynomial._wrap(self._evaluations[half:], self._field),
        )

    def fix_first_variable(self, value: FieldLike) -> "MultilinearPolynomial":
        """Bind x_1 to `value`, returning a polynomial in x_2..x_n.

        result[i] = (1 - v) * evals[i] + v * evals[i + half]. Because the
        polynomial has degree at most 1 in x_1, this is exact for any field
        value, not just 0 and 1.
        """
        self._require_vars(1)
        v = to_field_element(value, self._field)
        return MultilinearPolynomial._wrap(_fold_first(self._evaluations, v), self._field)

    def fix_variable(self, index: int, value: FieldLike) -> "MultilinearPolynomial":
        """Bind variable `index` (0-based, x_1 is index 0) to `value`."""
        self._require_vars(1)
        if not 0 <= index < self._num_vars:
            raise DimensionMismatchError(f"variable index {index} out of range for {self._num_vars} variables")
        v = to_field_element(value, self._field)
        # (prefix, bit, suffix) view of the table; `bit` is the bound variable
        block = 1 << (self._num_vars - 1 - index)
        table = self._evaluations.reshape(-1, 2, block)
        lo = table[:, 0, :]
        hi = table[:, 1, :]
        return MultilinearPolynomial._wrap((lo + v * (hi - lo)).reshape(-1), self._field)

    def partial_evaluate(self, values: Point) -> "MultilinearPolynomial":
        """Bind x_1..x_k to `values` in order."""
        if len(values) > self._num_vars:
            raise DimensionMismatchError(
                f"cannot bind {len(values)} variables of a {self._num_vars}-variable polynomial"
            )
        table = self._evaluations
        for value in values:
            table = _fold_first(table, to_field_element(value, self._field))
        return MultilinearPolynomial._wrap(table, self._field)

    # --- Evaluation ---

    def sum_over_hypercube(self) -> FieldElement:
        """Sum of the polynomial over all remaining Boolean assignments."""
        return np.sum(self._evaluations)

    def evaluate(self, point: Point) -> FieldElement:
        """Evaluate the multilinear extension at an arbitrary point.

        Raises:
            DimensionMismatchError: If len(point) != num_vars.
        """
        self._check_point(point)
        table = self._evaluations
        for value in point:
            table = _fold_first(table, to_field_element(value, self._field))
        return table[0]

    def evaluate_lagrange(self, point: Point) -> FieldElement:
        """Closed-form evaluation: sum_b P(b) * eq(b, point)."""
        self._check_point(point)
        return np.sum(self._evaluations * eq_evaluations(point, self._field))

    def __call__(self, point: Point) -> FieldElement:
        return self.evaluate(point)

    # --- Arithmetic ---

    def __add__(self, other: "MultilinearPolynomial") -> "MultilinearPolynomial":
        self._check_compatible(other)
        return MultilinearPolynomial._wrap(self._evaluations + other._evaluations, self._field)

    def __sub__(self, other: "MultilinearPolynomial") -> "MultilinearPolynomial":
        self._check_compatible(other)
        return MultilinearPolynomial._wrap(self._evaluations - other._evaluations, self._field)

    def __mul__(self, other: "MultilinearPolynomial") -> "MultilinearPolynomial":
        """Pointwise product on the hypercube.

        The result is the multilinear polynomial agreeing with P*Q on {0,1}^n,
        not the (higher degree) product polynomial itself.
        """
        self._check_compatible(other)
        return MultilinearPolynomial._wrap(self._evaluations * other._evaluations, self._field)

    def __neg__(self) -> "MultilinearPolynomial":
        return MultilinearPolynomial._wrap(-self._evaluations, self._field)

    def scale(self, scalar: FieldLike) -> "MultilinearPolynomial":
        s = to_field_element(scalar, self._field)
        return MultilinearPolynomial._wrap(self._evaluations * s, self._field)

    # --- Variable Extension ---

    def extend_left(self, extra_vars: int) -> "MultilinearPolynomial":
        """Prepend `extra_vars` variables the polynomial does not depend on.

        The new variables become x_1..x_k (most significant); the table is
        tiled 2^k times.
        """
        raw = np.tile(np.asarray(self._evaluations), 1 << extra_vars)
        return MultilinearPolynomial._wrap(self._field(raw), self._field)

    def extend_right(self, extra_vars: int) -> "MultilinearPolynomial":
        """Append `extra_vars` variables the polynomial does not depend on.

        The new variables become the least significant ones; each entry is
        repeated 2^k times.
        """
        raw = np.repeat(np.asarray(self._evaluations), 1 << extra_vars)
        return MultilinearPolynomial._wrap(self._field(raw), self._field)

    # --- Checks ---

    def _require_vars(self, count: int) -> None:
        if self._num_vars < count:
            raise DimensionMismatchError(f"polynomial has {self._num_vars} variables, needs at least {count}")

    def _check_point(self, point: Point) -> None:
        if len(point) != self._num_vars:
            raise DimensionMismatchError(
                f"point has {len(point)} coordinates, polynomial has {self._num_vars} variables"
            )

    def _check_compatible(self, other: "MultilinearPolynomial") -> None:
        if self._field is not other._field:
            raise FieldMismatchError(
                f"GF({modulus_of(self._field)}) polynomial combined with GF({modulus_of(other._field)})"
            )
        if self._num_vars != other._num_vars:
            raise DimensionMismatchError(
                f"polynomials have {self._num_vars} and {other._num_vars} variables"
            )
