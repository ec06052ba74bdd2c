"""
BlowCounter: 색은 맞고 자리는 틀린 개수
=========================================

히트 자리를 뺀 나머지에서 색(자리 값) c 마다:

  g_c = Σᵢ (1 - eqᵢ) · [guess[i] == c]
  s_c = Σᵢ (1 - eqᵢ) · [solution[i] == c]
  blow = Σ_c min(g_c, s_c)

예시 (n=4):
  guess    = [1, 2, 3, 4]
  solution = [1, 3, 2, 2]
  히트: 0번 자리 → 나머지 guess {2, 3, 4}, solution {3, 2, 2}
  blow = min(1, 2)[c=2] + min(1, 1)[c=3] = 2

g_c, s_c 는 0..n 이므로 minimum 의 비교는 bit_length(n) 비트로 충분하다.
추가로 num_hit + num_blow <= n 을 같은 그룹에서 단언한다.
"""

from zkmm.circuit import ONE_VARIABLE, MINUS_ONE
from zkmm.errors import BLOW
from zkmm.gadgets import (
    is_equal_constant,
    less_than_constant,
    minimum,
    num2bits,
    sum_of,
)


def _count_color(circuit, digits, misses, color):
    terms = []
    for digit, miss in zip(digits, misses):
        same_color = is_equal_constant(circuit, digit, color)
        terms.append(circuit.add_multiplication_gate(miss, same_color))
    return sum_of(circuit, terms)


def declare_blow_counter(circuit, guess, solution, matches, num_hit, num_blow, base, count_bits):
    """블로 제약을 선언한다. matches 는 HitCounter 의 eqᵢ 변수들.

    count_bits 는 0..n 을 담는 비트 수 (GameConfig.count_bits).
    """
    length = len(guess)

    with circuit.group(BLOW):
        # missᵢ = 1 - eqᵢ
        misses = [
            circuit.add_output_gate(m, ONE_VARIABLE, q_l=MINUS_ONE, q_c=1)
            for m in matches
        ]

        per_color = []
        for color in range(base):
            guess_count = _count_color(circuit, guess, misses, color)
            solution_count = _count_color(circuit, solution, misses, color)
            per_color.append(minimum(circuit, guess_count, solution_count, count_bits))

        circuit.assert_equal(sum_of(circuit, per_color), num_blow)

        # num_hit + num_blow <= n
        score = circuit.add_addition_gate(num_hit, num_blow)
        score_bits = (length + 1).bit_length()
        num2bits(circuit, score, score_bits)
        within = less_than_constant(circuit, score, length + 1, score_bits)
        circuit.assert_constant(within, 1)
