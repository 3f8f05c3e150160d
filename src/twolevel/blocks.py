"""Datapath building blocks of the two-level multiplier."""

from amaranth import Module, Mux, Signal
from amaranth.lib.wiring import In, Out, Component


def _check_width(width):
    if width < 1:
        raise ValueError(f"width must be at least 1, got {width}")


class PriorityEncoder(Component):  # noqa: DOC602,DOC603
    """Priority encoder; the most significant set bit wins.

    Parameters
    ----------
    width : int
        Width in bits of the input.

    Attributes
    ----------
    inp : In(width)
        Input vector.
    outp : Out(range(width))
        Index of the most significant set bit of ``inp``. Zero when no bit
        is set.
    valid : Out(1)
        Asserted when any bit of ``inp`` is set; the complement of the
        "done" NOR of the multiply loop.
    """

    def __init__(self, width):
        _check_width(width)
        self.width = width
        super().__init__({
            "inp": In(width),
            "outp": Out(range(width)),
            "valid": Out(1)
        })

    def elaborate(self, platform):  # noqa: D102
        m = Module()

        m.d.comb += self.valid.eq(self.inp.any())

        # Later statements take priority, so the last (highest) set bit
        # determines the output.
        for i in range(self.width):
            with m.If(self.inp[i]):
                m.d.comb += self.outp.eq(i)

        return m


class Decoder(Component):  # noqa: DOC602,DOC603
    """Binary to one-hot decoder.

    Parameters
    ----------
    width : int
        Width in bits of the one-hot output.

    Attributes
    ----------
    inp : In(range(width))
        Index of the bit to set.
    outp : Out(width)
        ``1 << inp``.
    """

    def __init__(self, width):
        _check_width(width)
        self.width = width
        super().__init__({
            "inp": In(range(width)),
            "outp": Out(width)
        })

    def elaborate(self, platform):  # noqa: D102
        m = Module()

        for i in range(self.width):
            m.d.comb += self.outp[i].eq(self.inp == i)

        return m


class BarrelShifter(Component):  # noqa: DOC602,DOC603
    r"""Logarithmic left shifter.

    Stage :math:`k` shifts by :math:`2^k` when bit :math:`k` of ``shamt``
    is set, so a shift by any amount takes :math:`\lceil log_2(n) \rceil`
    stages of 2:1 muxes.

    Parameters
    ----------
    width : int
        Width in bits of the input.
    shamt_width : int
        Number of distinct shift amounts; legal shift amounts are
        ``0 .. shamt_width - 1``.

    Attributes
    ----------
    inp : In(width)
        Value to shift.
    shamt : In(range(shamt_width))
        Shift amount.
    outp : Out(width + shamt_width - 1)
        ``inp << shamt``; wide enough that no bit is shifted out for a
        legal shift amount.
    """

    def __init__(self, width, shamt_width):
        _check_width(width)
        _check_width(shamt_width)
        self.width = width
        self.shamt_width = shamt_width
        super().__init__({
            "inp": In(width),
            "shamt": In(range(shamt_width)),
            "outp": Out(width + shamt_width - 1)
        })

    def elaborate(self, platform):  # noqa: D102
        m = Module()

        stage = self.inp
        for k in range(len(self.shamt)):
            shifted = Signal(len(self.outp), name=f"stage_{k}")
            m.d.comb += shifted.eq(Mux(self.shamt[k], stage << (1 << k),
                                       stage))
            stage = shifted

        m.d.comb += self.outp.eq(stage)

        return m


class RippleAdder(Component):  # noqa: DOC602,DOC603
    """Ripple-carry adder built from explicit full-adder cells.

    Parameters
    ----------
    width : int
        Width in bits of both addends and the sum.

    Attributes
    ----------
    a : In(width)
    b : In(width)
    carry_in : In(1)
    sum : Out(width)
        ``(a + b + carry_in) % 2**width``.
    carry_out : Out(1)
        Carry out of the most significant full adder.
    """

    def __init__(self, width):
        _check_width(width)
        self.width = width
        super().__init__({
            "a": In(width),
            "b": In(width),
            "carry_in": In(1),
            "sum": Out(width),
            "carry_out": Out(1)
        })

    def elaborate(self, platform):  # noqa: D102
        m = Module()

        carries = [Signal(name=f"carry_{i}") for i in range(self.width + 1)]
        m.d.comb += carries[0].eq(self.carry_in)

        for i in range(self.width):
            a = self.a[i]
            b = self.b[i]
            c = carries[i]

            m.d.comb += [
                self.sum[i].eq(a ^ b ^ c),
                carries[i + 1].eq((a & b) | ((a ^ b) & c))
            ]

        m.d.comb += self.carry_out.eq(carries[self.width])

        return m
