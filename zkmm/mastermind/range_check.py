"""
DigitRangeValidator: 자리 값 범위 검사
=========================================

각 자리 d 에 대해 0 <= d < B 를 증명한다.

  1. num2bits(d, k), k = bit_length(B - 1)   →  d < 2^k
  2. B 가 2의 거듭제곱이 아니면 less_than(d, B) == 1

d = 55, B = 10 이면 4비트 재구성 제약 (Σ 2ⁱ·bᵢ = d) 이 먼저 깨진다.
"""

from zkmm.gadgets import num2bits, less_than_constant


def declare_range_check(circuit, digits, base, nbits, group):
    """digits 의 모든 자리에 [0, base-1] 범위 제약을 group 태그로 선언한다.

    nbits 는 base - 1 을 담는 비트 수 (GameConfig.digit_bits).
    """
    with circuit.group(group):
        for digit in digits:
            num2bits(circuit, digit, nbits)
            if base != 1 << nbits:
                in_range = less_than_constant(circuit, digit, base, nbits)
                circuit.assert_constant(in_range, 1)
