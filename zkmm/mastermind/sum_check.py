"""SumValidator: Σ solution[i] == solution_sum (선형 제약)."""

from zkmm.errors import SUM
from zkmm.gadgets import sum_of


def declare_sum_check(circuit, solution, solution_sum):
    with circuit.group(SUM):
        total = sum_of(circuit, solution)
        circuit.assert_equal(total, solution_sum)
    return total
