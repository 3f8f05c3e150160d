import logging
import pytest

from twolevel.bits import BitString
from twolevel.cli import main, resolve_operands
from twolevel.trace import report


def test_resolve_defaults():
    assert resolve_operands() == (BitString("10001011"),
                                  BitString("01011011"))
    assert resolve_operands("", "") == (BitString("10001011"),
                                        BitString("01011011"))
    assert resolve_operands("11", None) == (BitString("11"),
                                            BitString("01011011"))
    assert resolve_operands(None, "11") == (BitString("10001011"),
                                            BitString("11"))


def test_resolve_rejects_non_binary():
    with pytest.raises(ValueError):
        resolve_operands("102", "1")


def test_main_defaults(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out == report(BitString("10001011"), BitString("01011011"))
    assert "Base 10: 139 * 91 = 12649\n" in out
    assert "Base 10: -11 * +91 = -1001\n" in out


def test_main_operands(capsys):
    assert main(["1101", "0110"]) == 0
    out = capsys.readouterr().out
    assert "Base 10: 13 * 6 = 78\n" in out
    assert "Base 10: -5 * +6 = -30\n" in out


def test_main_empty_multiplier_uses_default(capsys):
    assert main(["", "0110"]) == 0
    out = capsys.readouterr().out
    assert "Base 2: 10001011 * 0110 = 001101000010\n" in out


def test_main_bad_operand(capsys):
    with pytest.raises(SystemExit) as e:
        main(["12", "01"])
    assert e.value.code == 2
    assert "not a string of binary digits" in capsys.readouterr().err


def test_verbose_logs_iterations(caplog):
    with caplog.at_level(logging.DEBUG, logger="twolevel.model"):
        main(["-v", "101", "11"])
    messages = [r.getMessage() for r in caplog.records]
    assert "iteration 1: register=101 shamt=2 product=01100" in messages
    assert "iteration 2: register=001 shamt=0 product=01111" in messages
