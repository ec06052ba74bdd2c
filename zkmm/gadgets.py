"""
재사용 가젯 (Gadgets)
======================

FR 에는 순서가 없으므로 "같은가", "작은가", "최솟값" 같은 연산은
곱셈/덧셈 게이트와 advice 변수(add_hint)로 직접 만들어야 한다.

**가젯 목록**:
  | 가젯              | 출력            | 게이트 구성                                  |
  |-------------------|-----------------|----------------------------------------------|
  | linear_combination| Σ kᵢ·xᵢ + k₀    | 덧셈 게이트 체인                             |
  | is_zero           | x == 0 ? 1 : 0  | inv advice, out = 1 - x·inv, x·out = 0       |
  | is_equal          | a == b ? 1 : 0  | is_zero(a - b)                               |
  | num2bits          | [b₀, ..., bₙ₋₁] | bᵢ·bᵢ = bᵢ, Σ 2ⁱ·bᵢ = x                      |
  | less_than         | a < b ? 1 : 0   | num2bits(a + 2ⁿ - b, n+1) 의 최상위 비트 반전 |
  | minimum           | min(a, b)       | lt·(a - b) + b                               |

less_than / minimum 은 입력이 모두 2ⁿ 미만일 때만 올바르다.
호출하는 쪽이 num2bits 로 먼저 범위를 묶어야 한다.

사용 예시:
    >>> eq = is_equal(circuit, guess[0], solution[0])
    >>> bits = num2bits(circuit, digit, 4)
    >>> lt = less_than_constant(circuit, digit, 10, 4)
"""

from zkmm.field import FR, fr_to_int
from zkmm.circuit import ONE_VARIABLE, MINUS_ONE


def linear_combination(circuit, terms, constant=0):
    """Σ coef·var + constant 값을 갖는 변수를 만든다.

    Args:
        circuit: Circuit
        terms: (계수, 변수 인덱스) 리스트
        constant: 상수 항

    Returns:
        int: 결과 변수 인덱스
    """
    terms = list(terms)
    if not terms:
        return circuit.constant(constant)
    if len(terms) == 1:
        coef, var = terms[0]
        return circuit.add_output_gate(var, ONE_VARIABLE, q_l=coef, q_c=constant)

    acc_coef, acc = terms[0]
    last = len(terms) - 1
    for i, (coef, var) in enumerate(terms[1:], start=1):
        acc = circuit.add_output_gate(
            acc, var, q_l=acc_coef, q_r=coef, q_c=constant if i == last else 0
        )
        acc_coef = 1
    return acc


def sum_of(circuit, variables):
    """변수들의 합."""
    return linear_combination(circuit, [(1, v) for v in variables])


def is_zero(circuit, x):
    """x == 0 이면 1, 아니면 0 인 변수를 만든다.

    inv 는 advice 변수: x ≠ 0 이면 1/x, x = 0 이면 0.
      out = 1 - x·inv
      x·out = 0
    x ≠ 0 이면 두 번째 제약 때문에 out = 0 이어야 하고, 그러면 inv = 1/x 로 강제된다.
    x = 0 이면 첫 번째 제약에서 out = 1 이 된다.
    """
    def inverse(values):
        value = values[x]
        if value == FR(0):
            return FR(0)
        return FR(1) / value

    inv = circuit.add_hint(inverse, name=f"inv({circuit.variable_names[x]})")
    out = circuit.add_output_gate(x, inv, q_m=MINUS_ONE, q_c=1)
    circuit.assert_zero_gate(x, out, q_m=1)
    return out


def is_equal(circuit, a, b):
    """a == b 이면 1."""
    return is_zero(circuit, circuit.add_subtraction_gate(a, b))


def is_equal_constant(circuit, a, constant):
    """a == constant 이면 1."""
    return is_zero(circuit, circuit.add_constant_gate(a, -FR(constant)))


def num2bits(circuit, x, nbits):
    """x 를 nbits 개의 비트로 분해한다 (리틀 엔디언).

    x ≥ 2^nbits 이면 재구성 제약 Σ 2ⁱ·bᵢ = x 가 깨진다.

    Returns:
        list[int]: 비트 변수 인덱스
    """
    bits = []
    for i in range(nbits):
        def bit(values, shift=i):
            return FR((fr_to_int(values[x]) >> shift) & 1)

        b = circuit.add_hint(bit, name=f"bit{i}({circuit.variable_names[x]})")
        circuit.assert_boolean(b)
        bits.append(b)

    total = linear_combination(circuit, [(1 << i, b) for i, b in enumerate(bits)])
    circuit.assert_equal(total, x)
    return bits


def _less_than_shifted(circuit, shifted, nbits):
    # shifted = a + 2^n - b, 최상위 비트(2^n 자리)가 0 이면 a < b
    bits = num2bits(circuit, shifted, nbits + 1)
    return circuit.add_output_gate(bits[nbits], ONE_VARIABLE, q_l=MINUS_ONE, q_c=1)


def less_than(circuit, a, b, nbits):
    """a < b 이면 1. a, b < 2^nbits 여야 한다."""
    shifted = circuit.add_output_gate(a, b, q_l=1, q_r=MINUS_ONE, q_c=1 << nbits)
    return _less_than_shifted(circuit, shifted, nbits)


def less_than_constant(circuit, a, bound, nbits):
    """a < bound (상수) 이면 1. a, bound < 2^nbits 여야 한다."""
    shifted = circuit.add_constant_gate(a, (1 << nbits) - bound)
    return _less_than_shifted(circuit, shifted, nbits)


def minimum(circuit, a, b, nbits):
    """min(a, b) = lt·(a - b) + b, 여기서 lt = (a < b)."""
    lt = less_than(circuit, a, b, nbits)
    diff = circuit.add_subtraction_gate(a, b)
    picked = circuit.add_multiplication_gate(lt, diff)
    return circuit.add_addition_gate(picked, b)


def pow5(circuit, x):
    """x⁵ (Poseidon S-box): x² → x⁴ → x⁵, 곱셈 게이트 3개."""
    x2 = circuit.add_multiplication_gate(x, x)
    x4 = circuit.add_multiplication_gate(x2, x2)
    return circuit.add_multiplication_gate(x4, x)
