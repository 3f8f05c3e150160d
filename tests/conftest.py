import pytest

from amaranth.sim import Simulator


def pytest_addoption(parser):
    parser.addoption(
        "--vcds",
        action="store_true",
        help="generate Value Change Dump (vcds) from simulations",
    )
    parser.addini(
        "long_vcd_filenames",
        type="bool",
        default=False,
        help="if set, vcd files get longer, but less ambiguous, filenames"
    )


class SimulatorFixture:
    def __init__(self, mod, clks, req, cfg):
        if cfg.getini("long_vcd_filenames"):
            self.name = req.node.name + "-" + req.module.__name__
        else:
            self.name = req.node.name

        self.sim = Simulator(mod)
        self.vcds = cfg.getoption("vcds")

        # Purely combinational designs have no clock domain to drive.
        if clks is not None:
            self.sim.add_clock(clks)

    def run(self, testbenches=[], processes=[]):
        for t in testbenches:
            self.sim.add_testbench(t)

        for p in processes:
            self.sim.add_process(p)

        if self.vcds:
            with self.sim.write_vcd(self.name + ".vcd", self.name + ".gtkw"):
                self.sim.run()
        else:
            self.sim.run()


# Overridden by @pytest.mark.parametrize("clks", ...) on clocked designs.
@pytest.fixture
def clks():
    return None


@pytest.fixture
def sim(mod, clks, request, pytestconfig):
    return SimulatorFixture(mod, clks, request, pytestconfig)
