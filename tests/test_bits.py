import pytest
from itertools import product

from twolevel.bits import BitString, BooleanView


def all_bit_strings(max_len):
    for n in range(max_len + 1):
        for digits in product("01", repeat=n):
            yield BitString("".join(digits))


def test_construct():
    bs = BitString("0101")
    assert bs.digits == "0101"
    assert bs.length == len(bs) == 4
    assert str(bs) == "0101"
    assert BitString.zeroes(3) == BitString("000")
    assert BitString().length == 0


@pytest.mark.parametrize("digits", ["012", "1 0", "abc", "-1"])
def test_construct_rejects_non_binary(digits):
    with pytest.raises(ValueError):
        BitString(digits)


@pytest.mark.parametrize("digits", [101, None, ["1", "0"]])
def test_construct_requires_str(digits):
    with pytest.raises(TypeError):
        BitString(digits)


def test_value_semantics():
    a = BitString("1010")
    b = BitString("1010")
    assert a == b
    assert hash(a) == hash(b)
    assert a != BitString("0101")

    padded = a.pad_to(6)
    assert padded == BitString("001010")
    assert a == BitString("1010")  # Unchanged.


@pytest.mark.parametrize("n,expected", [(0, ""), (1, "1"), (3, "011"),
                                        (4, "1011")])
def test_truncate_keeps_lsbs(n, expected):
    assert BitString("11011").truncate(n) == BitString(expected)


@pytest.mark.parametrize("n", [-1, 5, 6, 100])
def test_truncate_out_of_range_is_noop(n):
    bs = BitString("11011")
    assert bs.truncate(n) == bs


def test_pad():
    bs = BitString("101")
    assert bs.pad_to(6) == BitString("000101")
    assert bs.pad_with(2) == BitString("00101")
    assert bs.pad_with(0) == bs
    for n in range(-1, 4):
        assert bs.pad_to(n) == bs


def test_getitem():
    bs = BitString("100")
    assert bs[0] == "1"
    assert bs[2] == "0"
    assert bs[-3] == "1"
    with pytest.raises(IndexError):
        bs[3]
    with pytest.raises(IndexError):
        BitString()[0]


def test_slice_is_bit_string():
    bs = BitString("10110")
    assert bs[1:] == BitString("0110")
    assert bs[:2] == BitString("10")
    assert bs[5:] == BitString()
    assert isinstance(bs[::-1], BitString)


def test_replace():
    bs = BitString("000")
    assert bs.replace(0, "1") == BitString("100")
    assert bs == BitString("000")
    with pytest.raises(IndexError):
        bs.replace(3, "1")
    with pytest.raises(ValueError):
        bs.replace(1, "2")


@pytest.mark.parametrize("digit", ["11", "", "01", 1, True])
def test_replace_single_digit_only(digit):
    bs = BitString("000")
    with pytest.raises(ValueError):
        bs.replace(1, digit)
    assert len(bs) == 3


def test_concatenate_prepend():
    a = BitString("11")
    b = BitString("00")
    assert a.concatenate(b) == BitString("1100")
    assert a.prepend(b) == BitString("0011")


def test_split_sign():
    sign, mag = BitString("10001011").split_sign()
    assert sign == BitString("1")
    assert mag == BitString("0001011")

    sign, mag = BitString("0").split_sign()
    assert sign == BitString("0")
    assert mag == BitString("")

    with pytest.raises(ValueError):
        BitString().split_sign()


def test_count_and_int():
    assert BitString("10001011").count_set_bits() == 4
    assert BitString("10001011").to_int() == 139
    assert BitString("01011011").to_int() == 91
    assert BitString().to_int() == 0
    for bs in all_bit_strings(6):
        assert bs.to_int() == (int(bs.digits, 2) if bs.digits else 0)


def test_bool_view_round_trip():
    for bs in all_bit_strings(5):
        view = bs.to_bool_view()
        assert len(view) == len(bs)
        assert BitString.from_bool_view(view) == bs
        assert view.to_bit_string() == bs


def test_bool_view_is_a_snapshot():
    bs = BitString("10")
    view = bs.to_bool_view()
    view[1] = True
    assert bs == BitString("10")
    assert view.to_bit_string() == BitString("11")


def test_bool_view_reversed():
    view = BitString("1100").to_bool_view()
    assert view.reversed().to_bit_string() == BitString("0011")
    assert view.to_bit_string() == BitString("1100")


def test_all_zero():
    assert BitString("0000").to_bool_view().all_zero()
    assert BooleanView().all_zero()
    assert not BitString("0010").to_bool_view().all_zero()


def test_xor_pads_shorter_operand():
    a = BitString("10110").to_bool_view()
    b = BitString("11").to_bool_view()
    assert a.xor(b).to_bit_string() == BitString("10101")
    assert (b ^ a).to_bit_string() == BitString("10101")


def test_and_pads_shorter_operand():
    a = BitString("10110").to_bool_view()
    b = BitString("110").to_bool_view()
    assert (a & b).to_bit_string() == BitString("00110")


def test_bool_view_repr():
    assert repr(BitString("10").to_bool_view()) == "[ true false ]"
