"""
유한체(Finite Field) FR
========================

Mastermind 회로 전체에서 사용되는 기본 산술 단위를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드 (scalar field). circom/snarkjs와 같은 필드이므로
  이 회로의 위트니스는 외부 Groth16/PLONK 파이프라인에 그대로 넘길 수 있다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)
  - 모든 연산은 mod p 로 감긴다(wrap). 음수 -1 은 p - 1 이 된다.

**순서(ordering)가 없다**:
  FR 에는 "작다/크다" 비교가 없다. 범위 검사나 최솟값은 모두
  비트 분해 가젯(zkmm.gadgets)으로 만든다. 여기서 제공하는 int 변환은
  위트니스 힌트 계산(회로 밖)에서만 쓴다.

사용 예시:
    >>> from zkmm.field import FR, to_fr
    >>> FR(3) * FR(7)          # FR(21)
    >>> to_fr("0x10")          # FR(16)
    >>> to_fr(-1) == FR(CURVE_ORDER - 1)
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order


def to_fr(value):
    """정수, 문자열, FR 원소를 FR 로 변환한다.

    문자열은 10진수 또는 0x 로 시작하는 16진수를 받는다.
    bool 은 숫자가 아니므로 거부한다.

    Args:
        value: int, str, FR

    Returns:
        FR

    Raises:
        TypeError: 지원하지 않는 타입
        ValueError: 숫자로 해석할 수 없는 문자열
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool):
        raise TypeError("bool 은 필드 원소가 아닙니다")
    if isinstance(value, FQ):
        return FR(int(value))
    if isinstance(value, int):
        return FR(value % CURVE_ORDER)
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith(("0x", "-0x")):
            return FR(int(text, 16) % CURVE_ORDER)
        return FR(int(text, 10) % CURVE_ORDER)
    raise TypeError(f"FR 로 변환할 수 없는 타입: {type(value).__name__}")


def fr_to_int(value):
    """FR → 0 <= x < p 정수 (회로 밖 힌트 계산 전용)."""
    return int(value) % CURVE_ORDER
