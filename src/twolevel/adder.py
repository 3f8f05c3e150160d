"""Software ripple-carry adder."""

from .bits import BitString


def full_adder(a, b, carry_in):
    """Single-bit full adder cell.

    Returns
    -------
    tuple(bool, bool)
        ``(sum, carry_out)``.
    """
    s = (a ^ b) ^ carry_in
    carry_out = (a and b) or ((a ^ b) and carry_in)
    return s, carry_out


class RippleCarryAdder:
    """Add two :class:`~twolevel.bits.BitString` by rippling a carry.

    The sum is as wide as the wider operand; a carry out of the most
    significant position is kept in :attr:`carry_out` instead of widening
    the sum. No overflow error is ever raised; use :meth:`extended_sum` when
    the carry must be kept.

    Parameters
    ----------
    augend : BitString
    addend : BitString
    carry_in : bool, optional
        Carry into the least significant position.

    Attributes
    ----------
    length : int
        Width of :attr:`sum`, ``max(len(augend), len(addend))``.
    carry_out : bool
        Carry out of the most significant position after :meth:`add`.
    sum : BitString or None
        Result of the last :meth:`add`, or ``None`` before the first one.
    """

    def __init__(self, augend=BitString("0"), addend=BitString("0"),
                 carry_in=False):
        self.augend = augend
        self.addend = addend
        self.carry_in = carry_in
        self.length = max(augend.length, addend.length)
        self.carry_out = carry_in
        self.sum = None

    def add(self):
        # Process least significant digit first.
        a = self.augend.pad_to(self.length).to_bool_view().reversed()
        b = self.addend.pad_to(self.length).to_bool_view().reversed()
        result = BitString.zeroes(self.length).to_bool_view()

        carry = self.carry_in
        for i in range(self.length):
            result[i], carry = full_adder(a[i], b[i], carry)

        self.carry_out = carry
        self.sum = result.reversed().to_bit_string()
        return self.sum

    def extended_sum(self):
        """Return the sum with the carry out as an extra leading digit."""
        if self.sum is None:
            self.add()

        result = self.sum.pad_with(1)
        if self.carry_out:
            result = result.replace(0, "1")
        return result
