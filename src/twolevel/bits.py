"""Bit strings and boolean views used by the software reference model."""


class BitString:
    """Explicitly-sized sequence of binary digits, most significant first.

    A :class:`BitString` is a value: resizing operations return a new
    instance instead of modifying this one, so a :class:`BitString` can be
    shared freely without aliasing.

    Parameters
    ----------
    digits : str
        Digits of the bit string, most significant first. Only ``"0"`` and
        ``"1"`` are accepted.

    Attributes
    ----------
    digits : str
        The digits, most significant first.
    length : int
        Number of digits; always equal to ``len(digits)``.

    Raises
    ------
    TypeError
        If ``digits`` is not a :class:`str`.
    ValueError
        If ``digits`` contains anything other than ``"0"`` and ``"1"``.
    """

    __slots__ = ("_digits",)

    def __init__(self, digits=""):
        if not isinstance(digits, str):
            raise TypeError(f"expected a str of binary digits, got "
                            f"{type(digits).__name__}")
        for d in digits:
            if d not in "01":
                raise ValueError(f"{digits!r} is not a string of binary "
                                 "digits")
        self._digits = digits

    @classmethod
    def zeroes(cls, length):
        """Create a :class:`BitString` of ``length`` zero digits."""
        return cls("0" * length)

    @classmethod
    def from_bool_view(cls, view):
        """Convert a :class:`BooleanView` back into a :class:`BitString`."""
        return cls("".join("1" if b else "0" for b in view))

    @property
    def digits(self):
        return self._digits

    @property
    def length(self):
        return len(self._digits)

    def __len__(self):
        return len(self._digits)

    def __str__(self):
        return self._digits

    def __repr__(self):
        return f"BitString({self._digits!r})"

    def __eq__(self, other):
        if not isinstance(other, BitString):
            return NotImplemented
        return self._digits == other._digits

    def __hash__(self):
        return hash(self._digits)

    def __getitem__(self, index):
        # Slices stay BitStrings; a single index yields the digit.
        if isinstance(index, slice):
            return BitString(self._digits[index])
        return self._digits[index]

    def __iter__(self):
        return iter(self._digits)

    def replace(self, index, digit):
        """Return a copy with the digit at ``index`` set to ``digit``.

        Raises
        ------
        IndexError
            If ``index`` is out of range.
        ValueError
            If ``digit`` is not ``"0"`` or ``"1"``.
        """
        if digit not in ("0", "1"):
            raise ValueError(f"{digit!r} is not a single binary digit")
        digits = list(self._digits)
        digits[index] = digit
        return BitString("".join(digits))

    def truncate(self, new_length):
        """Keep only the ``new_length`` least-significant digits.

        ``new_length`` outside ``[0, length)`` leaves the value unchanged.
        """
        if 0 <= new_length < self.length:
            return BitString(self._digits[self.length - new_length:])
        return self

    def pad_to(self, new_length):
        """Prepend zeroes until the value is ``new_length`` digits long.

        ``new_length <= length`` leaves the value unchanged.
        """
        if new_length > self.length:
            return BitString("0" * (new_length - self.length) + self._digits)
        return self

    def pad_with(self, bits):
        return self.pad_to(self.length + bits)

    def concatenate(self, other):
        return BitString(self._digits + other._digits)

    def prepend(self, prefix):
        return prefix.concatenate(self)

    def split_sign(self):
        """Split off the most significant digit as a sign digit.

        Returns
        -------
        tuple(BitString, BitString)
            The one-digit sign and the remaining magnitude.

        Raises
        ------
        ValueError
            If this :class:`BitString` is empty.
        """
        if not self._digits:
            raise ValueError("cannot split a sign digit off an empty "
                             "bit string")
        return BitString(self._digits[0]), BitString(self._digits[1:])

    def count_set_bits(self):
        return self._digits.count("1")

    def to_int(self):
        """Unsigned value; the digit ``i`` places from the right weighs 2^i."""
        value = 0
        for d in self._digits:
            value = (value << 1) | (d == "1")
        return value

    def to_bool_view(self):
        return BooleanView(d == "1" for d in self._digits)


class BooleanView:
    """Boolean projection of a :class:`BitString` snapshot.

    The view copies the digits when it is created and never observes its
    source again. Element 0 is the most significant digit unless the view
    has been :meth:`reversed`.

    Parameters
    ----------
    bits : iterable of bool
        Initial contents of the view.
    """

    def __init__(self, bits=()):
        self._bits = [bool(b) for b in bits]

    def __len__(self):
        return len(self._bits)

    def __getitem__(self, index):
        return self._bits[index]

    def __setitem__(self, index, value):
        self._bits[index] = bool(value)

    def __iter__(self):
        return iter(self._bits)

    def __eq__(self, other):
        if not isinstance(other, BooleanView):
            return NotImplemented
        return self._bits == other._bits

    def __repr__(self):
        return "[ " + "".join(f"{str(b).lower()} " for b in self._bits) + "]"

    def to_bit_string(self):
        return BitString.from_bool_view(self)

    def reversed(self):
        return BooleanView(reversed(self._bits))

    def all_zero(self):
        """Bitwise NOR across every element."""
        for b in self._bits:
            if b:
                return False
        return True

    def _padded(self, other):
        # Pad, never truncate, so no set bit is lost.
        length = max(len(self), len(other))
        return (self.to_bit_string().pad_to(length).to_bool_view(),
                other.to_bit_string().pad_to(length).to_bool_view())

    def xor(self, other):
        """Element-wise XOR after zero-padding the shorter operand."""
        a, b = self._padded(other)
        return BooleanView(x != y for x, y in zip(a, b))

    def and_(self, other):
        """Element-wise AND after zero-padding the shorter operand."""
        a, b = self._padded(other)
        return BooleanView(x and y for x, y in zip(a, b))

    __xor__ = xor
    __and__ = and_
