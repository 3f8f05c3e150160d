"""Text rendering of multiplier traces.

Hardware test benches compare against this text, so field names, spacing
and ordering are fixed.
"""

from .model import TwoLevelMultiplier


BANNER = "=" * 53


def _bool(b):
    return "true" if b else "false"


def _neg(sign):
    return "-" if sign[0] == "1" else "+"


def format_trace(trace):
    """Render the header, iterations and summary of a trace.

    Parameters
    ----------
    trace : Trace
        Result of :meth:`~twolevel.model.TwoLevelMultiplier.multiply`.

    Returns
    -------
    list(str)
        Lines of the trace, without trailing newlines.
    """
    header = (f"{trace.multiplier_sign}_{trace.multiplier} * "
              f"{trace.multiplicand_sign}_{trace.multiplicand}")
    lines = [header, "-" * len(header)]

    for it in trace.iterations:
        lines += [
            f"Iteration {it.number}:",
            f"Mr_i:   {it.register}",
            f"Sh_i:   {it.shamt} bits",
            f"Pp_i:   {it.partial_product}",
            f"Prod_i: {it.product}",
            f"C_i:    {it.consumed}",
            f"Done:   {_bool(it.done)}",
            ""
        ]

    lines += [
        f"Total Iterations: {trace.iteration_count}",
        f"Number of high bits in multiplier (h): {trace.set_bits}",
        ""
    ]
    return lines


def format_result(trace, signed=False):
    """Render the decimal and binary forms of ``multiplier * multiplicand``."""
    mr, md, prod = trace.multiplier, trace.multiplicand, trace.product

    if signed:
        s_mr, s_md, s_prod = (trace.multiplier_sign, trace.multiplicand_sign,
                              trace.sign)
        return [
            f"Base 10: {_neg(s_mr)}{mr.to_int()} * {_neg(s_md)}{md.to_int()} "
            f"= {_neg(s_prod)}{prod.to_int()}",
            f"Base 2: {s_mr}_{mr} * {s_md}_{md} = {s_prod}_{prod}"
        ]

    return [
        f"Base 10: {mr.to_int()} * {md.to_int()} = {prod.to_int()}",
        f"Base 2: {mr} * {md} = {prod}"
    ]


def report(multiplier, multiplicand):
    """Run the unsigned and signed passes and render both.

    The unsigned pass multiplies the operands as given. The signed pass
    treats the first digit of each operand as a sign digit and multiplies
    the remaining magnitudes.

    Parameters
    ----------
    multiplier : BitString
    multiplicand : BitString
        Both must have at least one digit for the signed pass.

    Returns
    -------
    str
        The full report, newline-terminated.
    """
    unsigned = TwoLevelMultiplier(multiplier, multiplicand).multiply()
    signed = TwoLevelMultiplier.signed(multiplier, multiplicand).multiply()

    lines = ["Multiplying as Unsigned Integers:"]
    lines += format_trace(unsigned)
    lines += format_result(unsigned)
    lines += ["", BANNER, "", "Multiplying as Signed Integers"]
    lines += format_trace(signed)
    lines += format_result(signed, signed=True)
    return "\n".join(lines) + "\n"
