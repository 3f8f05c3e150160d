"""Software reference model of the two-level multiplier.

The two-level multiplier is a shift-add multiplier whose control is a
priority encoder rather than a bit counter. Each iteration:

1. The priority encoder finds the most significant set bit of the multiplier
   register; its position is the shift amount.
2. The shifter shifts the multiplicand left by that amount, producing a
   partial product.
3. A ripple-carry adder accumulates the partial product into the product.
4. The decoder turns the shift amount back into a mask with only that bit
   set, which is XORed out of the multiplier register.

The loop stops once the register is all zero, so a multiply takes as many
iterations as the multiplier has set bits, regardless of its width.

Because the encoder always picks the *highest* remaining set bit, every bit
above it has already been cleared and the XOR clears exactly the encoded
bit. Changing the encoder to pick any other bit breaks that equivalence.
"""

from dataclasses import dataclass, field
import logging

from .adder import RippleCarryAdder
from .bits import BitString


logger = logging.getLogger(__name__)


def encode(register):
    """Software priority encoder.

    Parameters
    ----------
    register : BooleanView
        Multiplier register, most significant bit first.

    Returns
    -------
    int
        Position, counted from the least significant bit, of the most
        significant set bit, or ``-1`` if no bit is set.
    """
    for i, b in enumerate(register):
        if b:
            return len(register) - i - 1
    return -1


def decode(shamt):
    """Software decoder: a ``1`` followed by ``shamt`` zeroes.

    Raises
    ------
    ValueError
        If ``shamt`` is negative.
    """
    if shamt < 0:
        raise ValueError(f"cannot decode a negative shift amount ({shamt})")
    return BitString("1" + "0" * shamt)


def shift(value, shamt):
    """Shift ``value`` left by ``shamt`` bits, widening it.

    Raises
    ------
    ValueError
        If ``shamt`` is negative.
    """
    if shamt < 0:
        raise ValueError(f"cannot shift by a negative amount ({shamt})")
    return value.concatenate(BitString.zeroes(shamt))


def product_sign(multiplier_sign, multiplicand_sign):
    """Signed-magnitude sign rule: negative iff exactly one sign is set."""
    negative = (multiplier_sign[0] == "1") != (multiplicand_sign[0] == "1")
    return BitString("1" if negative else "0")


@dataclass(frozen=True)
class Iteration:
    """Datapath state for one iteration of the multiply loop.

    Attributes
    ----------
    number : int
        1-based iteration number.
    register : BitString
        Multiplier register at the start of the iteration.
    shamt : int
        Shift amount produced by the priority encoder.
    partial_product : BitString
        Shifted multiplicand, padded to the product width.
    product : BitString
        Running product after the addition.
    consumed : BitString
        Decoded mask that was XORed out of the register.
    done : bool
        Whether the register was all zero after the XOR.
    """

    number: int
    register: BitString
    shamt: int
    partial_product: BitString
    product: BitString
    consumed: BitString
    done: bool


@dataclass
class Trace:
    """Result of :meth:`TwoLevelMultiplier.multiply`, with its history."""

    multiplier_sign: BitString
    multiplier: BitString
    multiplicand_sign: BitString
    multiplicand: BitString
    product: BitString
    sign: BitString
    iterations: list = field(default_factory=list)

    @property
    def iteration_count(self):
        return len(self.iterations)

    @property
    def set_bits(self):
        """Number of set bits in the original multiplier."""
        return self.multiplier.count_set_bits()


class TwoLevelMultiplier:
    """Two-level multiplier for signed-magnitude or unsigned operands.

    Parameters
    ----------
    multiplier : BitString
        Magnitude of the multiplier.
    multiplicand : BitString
        Magnitude of the multiplicand.
    multiplier_sign : BitString, optional
        One-digit sign of the multiplier. Defaults to ``"0"`` (positive).
    multiplicand_sign : BitString, optional
        One-digit sign of the multiplicand. Defaults to ``"0"`` (positive).

    Attributes
    ----------
    product_length : int
        Width of the product, ``len(multiplier) + len(multiplicand)``. This
        is always wide enough to hold the full product.
    """

    def __init__(self, multiplier, multiplicand, *, multiplier_sign=None,
                 multiplicand_sign=None):
        self.multiplier = multiplier
        self.multiplicand = multiplicand
        if multiplier_sign is None:
            multiplier_sign = BitString("0")
        if multiplicand_sign is None:
            multiplicand_sign = BitString("0")

        self.multiplier_sign = multiplier_sign
        self.multiplicand_sign = multiplicand_sign
        self.product_length = multiplier.length + multiplicand.length

    @classmethod
    def signed(cls, multiplier, multiplicand):
        """Treat the first digit of each operand as its sign digit."""
        mr_sign, mr = multiplier.split_sign()
        md_sign, md = multiplicand.split_sign()
        return cls(mr, md, multiplier_sign=mr_sign, multiplicand_sign=md_sign)

    def sign(self):
        return product_sign(self.multiplier_sign, self.multiplicand_sign)

    def multiply(self):
        """Multiply the magnitudes, recording every iteration.

        Returns
        -------
        Trace
            The product (``product_length`` digits), its sign and the
            per-iteration datapath state.
        """
        register = self.multiplier.to_bool_view()
        product = BitString.zeroes(self.product_length)
        iterations = []

        while not register.all_zero():
            shamt = encode(register)
            partial_product = shift(self.multiplicand, shamt) \
                .pad_to(self.product_length)

            # Any carry out of the product width is dropped; the product
            # width always holds the full result.
            product = RippleCarryAdder(product, partial_product).add() \
                .truncate(self.product_length)

            consumed = decode(shamt)
            start = register.to_bit_string()
            register = register.xor(consumed.to_bool_view())

            iterations.append(Iteration(
                number=len(iterations) + 1,
                register=start,
                shamt=shamt,
                partial_product=partial_product,
                product=product,
                consumed=consumed,
                done=register.all_zero()
            ))
            logger.debug("iteration %d: register=%s shamt=%d product=%s",
                         len(iterations), start, shamt, product)

        logger.info("%s * %s = %s after %d iterations (%d set bits)",
                    self.multiplier, self.multiplicand, product,
                    len(iterations), self.multiplier.count_set_bits())

        return Trace(
            multiplier_sign=self.multiplier_sign,
            multiplier=self.multiplier,
            multiplicand_sign=self.multiplicand_sign,
            multiplicand=self.multiplicand,
            product=product,
            sign=self.sign(),
            iterations=iterations
        )
