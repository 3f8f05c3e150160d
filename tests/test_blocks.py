# amaranth: UnusedElaboratable=no

import pytest
import random

from twolevel.blocks import BarrelShifter, Decoder, PriorityEncoder, \
    RippleAdder
from twolevel.bits import BitString
from twolevel.model import encode


@pytest.fixture
def encoder_tb(mod):
    m = mod

    async def testbench(ctx):
        for i in range(2**m.width):
            ctx.set(m.inp, i)

            bits = BitString(format(i, f"0{m.width}b")).to_bool_view()
            if i == 0:
                assert ctx.get(m.valid) == 0
            else:
                assert ctx.get(m.valid) == 1
                assert ctx.get(m.outp) == encode(bits)

    return testbench


@pytest.fixture
def decoder_tb(mod):
    m = mod

    async def testbench(ctx):
        for i in range(m.width):
            ctx.set(m.inp, i)
            assert ctx.get(m.outp) == 1 << i

    return testbench


@pytest.fixture
def shifter_tb(mod):
    m = mod

    async def testbench(ctx):
        for v in range(2**m.width):
            ctx.set(m.inp, v)
            for s in range(m.shamt_width):
                ctx.set(m.shamt, s)
                assert ctx.get(m.outp) == v << s

    return testbench


@pytest.fixture
def adder_tb(mod):
    m = mod

    async def testbench(ctx):
        random.seed(0)
        cases = [(0, 0, 0), (2**m.width - 1, 1, 0), (2**m.width - 1, 0, 1),
                 (2**m.width - 1, 2**m.width - 1, 1)]
        for _ in range(100):
            cases.append((random.getrandbits(m.width),
                          random.getrandbits(m.width),
                          random.randint(0, 1)))

        for a, b, cin in cases:
            ctx.set(m.a, a)
            ctx.set(m.b, b)
            ctx.set(m.carry_in, cin)

            total = a + b + cin
            assert ctx.get(m.sum) == total % 2**m.width
            assert ctx.get(m.carry_out) == total >> m.width

    return testbench


@pytest.mark.parametrize("mod", [PriorityEncoder(i) for i in (1, 5, 8)],
                         ids=["1", "5", "8"])
def test_priority_encoder(sim, encoder_tb):
    sim.run(testbenches=[encoder_tb])


@pytest.mark.parametrize("mod", [Decoder(i) for i in (1, 5, 8)],
                         ids=["1", "5", "8"])
def test_decoder(sim, decoder_tb):
    sim.run(testbenches=[decoder_tb])


@pytest.mark.parametrize("mod", [BarrelShifter(4, 8), BarrelShifter(5, 5),
                                 BarrelShifter(3, 1)],
                         ids=["4x8", "5x5", "3x1"])
def test_barrel_shifter(sim, shifter_tb):
    sim.run(testbenches=[shifter_tb])


@pytest.mark.parametrize("mod", [RippleAdder(1), RippleAdder(16)],
                         ids=["1", "16"])
def test_ripple_adder(sim, adder_tb):
    sim.run(testbenches=[adder_tb])


@pytest.mark.parametrize("cls", [PriorityEncoder, Decoder, RippleAdder])
def test_zero_width(cls):
    with pytest.raises(ValueError):
        cls(0)
