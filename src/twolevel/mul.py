"""Two-level multiplier soft-core."""

from amaranth import Module, Signal, unsigned
from amaranth.lib.data import StructLayout
from amaranth.lib.wiring import In, Out, Component
from amaranth.lib import stream

from amaranth.lib.enum import IntEnum, auto

from .blocks import BarrelShifter, Decoder, PriorityEncoder, RippleAdder


class Sign(IntEnum):  # noqa: DOC602,DOC603
    """Indicate the type of multiply to be performed.

    Attributes
    ----------
    UNSIGNED : int
        Both inputs ``mr`` and ``md`` are unsigned magnitudes.

        The output sign bit ``s`` is always 0.

    SIGNED: int
        Both inputs ``mr`` and ``md`` are in signed-magnitude form: the most
        significant bit is a sign bit and the remaining bits are the
        magnitude.

        The output ``o`` is the product of the magnitudes and ``s`` is the
        XOR of the two sign bits.
    """

    UNSIGNED = auto()
    SIGNED = auto()


class Inputs(StructLayout):  # noqa: DOC602,DOC603
    """Multiplier inputs, tagged with their signedness.

    Parameters
    ----------
    width : int
        Width in bits of the multiplier ``mr``. For signed multiplies,
        this includes the sign bit.
    md_width : int
        Width in bits of the multiplicand ``md``. For signed multiplies,
        this includes the sign bit.

    Attributes
    ----------
    sign: Sign
        Controls the interpretation of the bit patterns of ``mr`` and ``md``
        during multiplication.
    mr: Signal(width)
        The multiplier, which drives the priority encoder.
    md: Signal(md_width)
        The multiplicand, which is shifted and accumulated.
    """

    def __init__(self, width, md_width):
        super().__init__({
            "sign": Sign,
            "mr": unsigned(width),
            "md": unsigned(md_width),
        })


class Outputs(StructLayout):  # noqa: DOC602,DOC603
    """Multiplier outputs in signed-magnitude form.

    Parameters
    ----------
    width : int
        Width in bits of the multiplier input.
    md_width : int
        Width in bits of the multiplicand input.

    Attributes
    ----------
    sign: Sign
        Indicates whether the multiply that produced this product was signed
        or unsigned.
    s: Signal(1)
        Sign of the product; 1 means negative.
    o: Signal(width + md_width)
        Magnitude of the product.
    iterations: Signal(range(width + 1))
        Number of loop iterations taken, equal to the number of set bits in
        the multiplier magnitude.
    """

    def __init__(self, width, md_width):
        super().__init__({
            "sign": Sign,
            "s": unsigned(1),
            "o": unsigned(width + md_width),
            "iterations": range(width + 1),
        })


def multiplier_input_signature(width, md_width=None):
    """Create a parametric multiplier input port.

    A multiply starts on the current cycle when both ``valid`` and ``ready``
    are asserted.

    Parameters
    ----------
    width : int
        Width in bits of the multiplier ``mr``.
    md_width : int, optional
        Width in bits of the multiplicand ``md``. Defaults to ``width``.

    Returns
    -------
    :class:`amaranth:amaranth.lib.stream.Signature`
        :py:`Signature(Inputs)`
    """
    if md_width is None:
        md_width = width
    return stream.Signature(Inputs(width, md_width))


def multiplier_output_signature(width, md_width=None):
    """Create a parametric multiplier output port.

    .. note:: For a core responding **to** a multiplier, use this Signature
              with the :data:`~amaranth:amaranth.lib.wiring.In` flow:

              .. doctest::

                  >>> from twolevel.mul import multiplier_output_signature
                  >>> from amaranth.lib.wiring import Signature, In
                  >>> my_receiver_sig = Signature({
                  ...     "inp": In(multiplier_output_signature(width=8))
                  ... })

    Parameters
    ----------
    width : int
        Width in bits of the multiplier input.
    md_width : int, optional
        Width in bits of the multiplicand input. Defaults to ``width``.

    Returns
    -------
    :class:`amaranth:amaranth.lib.stream.Signature`
        :py:`Signature(Outputs)`
    """
    if md_width is None:
        md_width = width
    return stream.Signature(Outputs(width, md_width))


class TwoLevelMul(Component):  # noqa: DOC602,DOC603
    r"""Multicycle two-level multiplier soft-core.

    Rather than stepping through the multiplier one bit per cycle, a
    priority encoder jumps to the most significant set bit of the
    multiplier register every cycle:

    * The encoder output ``shamt`` shifts the multiplicand through a barrel
      shifter, and a ripple-carry adder accumulates the result into the
      product.
    * A decoder turns ``shamt`` back into a one-hot mask, which is XORed out
      of the multiplier register.
    * When the register is zero, the product is presented on ``outp``.

    * A multiply starts on the current cycle when both ``inp.valid`` and
      ``inp.ready`` are asserted.
    * A multiply result is available when ``outp.valid`` is asserted. The
      result is read/overwritten once a downstream core asserts ``outp.ready``.

    * Latency: :math:`max(h, 1)` clock cycles after the inputs are accepted,
      where :math:`h` is the number of set bits in the multiplier magnitude.

    Parameters
    ----------
    width : int
        Width in bits of the multiplier ``mr``. For signed multiplies,
        this includes the sign bit.
    md_width : int, optional
        Width in bits of the multiplicand ``md``. Defaults to ``width``.

    Attributes
    ----------
    width : int
        Bit width of the multiplier input.
    md_width : int
        Bit width of the multiplicand input. Output ``o`` width will be
        :math:`width + md\_width`.
    inp : In(multiplier_input_signature(width, md_width))
        Input interface to the multiplier.
    outp : Out(multiplier_output_signature(width, md_width))
        Output interface of the multiplier.
    register : Signal(width)
        Multiplier register; loses one set bit per cycle.
    product : Signal(width + md_width)
        Running product.
    shamt : Signal(range(width))
        Priority encoder output for the current register.
    busy : Signal(1)
        Asserted while a multiply is in progress.

    Notes
    -----
    * Signed multiplies use signed-magnitude, not twos-complement, inputs.
      The sign bits are stripped before multiplying, so the magnitudes are
      one bit narrower than the inputs.

    * The XOR with the decoded mask only clears the encoded bit because the
      encoder picks the *most* significant set bit; every higher bit has
      already been cleared.
    """

    def __init__(self, width=8, md_width=None):
        if md_width is None:
            md_width = width
        if width < 1 or md_width < 1:
            raise ValueError("TwoLevelMul needs inputs at least 1 bit wide")

        self.width = width
        self.md_width = md_width
        super().__init__({
            "inp": In(multiplier_input_signature(width, md_width)),
            "outp": Out(multiplier_output_signature(width, md_width))
        })

        self.register = Signal(width)
        self.product = Signal(width + md_width)
        self.shamt = Signal(range(width))
        self.busy = Signal()

    def elaborate(self, platform):  # noqa: D102
        m = Module()

        m.submodules.encoder = encoder = PriorityEncoder(self.width)
        m.submodules.decoder = decoder = Decoder(self.width)
        m.submodules.shifter = shifter = BarrelShifter(self.md_width,
                                                       self.width)
        m.submodules.adder = adder = RippleAdder(self.width + self.md_width)

        md = Signal(self.md_width)
        s_copy = Signal(Sign)
        s_prod = Signal()
        iterations = Signal(range(self.width + 1))
        next_register = Signal(self.width)

        m.d.comb += [
            encoder.inp.eq(self.register),
            self.shamt.eq(encoder.outp),
            shifter.inp.eq(md),
            shifter.shamt.eq(encoder.outp),
            adder.a.eq(self.product),
            adder.b.eq(shifter.outp),
            adder.carry_in.eq(0),
            decoder.inp.eq(encoder.outp),
            next_register.eq(self.register ^ decoder.outp),
        ]

        m.d.comb += self.inp.ready.eq(~self.busy &
                                      (~self.outp.valid | self.outp.ready))

        with m.If(self.outp.valid & self.outp.ready):
            m.d.sync += self.outp.valid.eq(0)

        with m.If(self.inp.ready & self.inp.valid):
            m.d.sync += [
                s_copy.eq(self.inp.payload.sign),
                self.product.eq(0),
                iterations.eq(0),
                self.busy.eq(1)
            ]

            with m.If(self.inp.payload.sign == Sign.SIGNED):
                # Strip the sign bits; the magnitudes are zero-extended
                # back to full width.
                m.d.sync += [
                    self.register.eq(self.inp.payload.mr[:-1]),
                    md.eq(self.inp.payload.md[:-1]),
                    s_prod.eq(self.inp.payload.mr[-1] ^
                              self.inp.payload.md[-1])
                ]
            with m.Else():
                m.d.sync += [
                    self.register.eq(self.inp.payload.mr),
                    md.eq(self.inp.payload.md),
                    s_prod.eq(0)
                ]

        with m.If(self.busy):
            with m.If(encoder.valid):
                m.d.sync += [
                    self.product.eq(adder.sum),
                    self.register.eq(next_register),
                    iterations.eq(iterations + 1)
                ]

                with m.If(next_register == 0):
                    m.d.sync += [
                        self.busy.eq(0),
                        self.outp.valid.eq(1)
                    ]
            # Multiplier was zero to begin with; nothing to accumulate.
            with m.Else():
                m.d.sync += [
                    self.busy.eq(0),
                    self.outp.valid.eq(1)
                ]

        m.d.comb += [
            self.outp.payload.sign.eq(s_copy),
            self.outp.payload.s.eq(s_prod),
            self.outp.payload.o.eq(self.product),
            self.outp.payload.iterations.eq(iterations),
        ]

        return m
