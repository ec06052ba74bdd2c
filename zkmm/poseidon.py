"""
Poseidon 해시 (회로 밖 / 회로 안)
==================================

솔루션 커밋먼트에 쓰는 필드 네이티브 해시. 비트 단위 해시(SHA-256 등)와 달리
FR 위의 덧셈/곱셈만으로 정의되므로 제약 회로 안에서 값싸게 다시 계산할 수 있다.

**순열(permutation) 구조**: 상태 폭 t = 입력 수 + 1
  state = [0, x₁, ..., x_k]
  라운드 r = 0 .. R_F + R_P - 1 마다:
    1. ARK : stateᵢ += C[r·t + i]
    2. S-box: x ↦ x⁵
         - full 라운드 (처음 R_F/2, 마지막 R_F/2): 모든 원소
         - partial 라운드 (가운데 R_P): state[0] 만
    3. MIX : state ← M · state   (MDS 행렬)
  출력 = state[0]

**파라미터 (bn128, x⁵, 128-bit 보안)**:
  R_F = 8, R_P 는 t 에 따라 PARTIAL_ROUNDS 표를 따른다 (t = 2..17).
  라운드 상수와 MDS 행렬은 Poseidon 논문의 Grain LFSR 절차로 결정론적으로 생성한다:
    - 80비트 초기 상태 = field(2) | sbox(4) | n(12) | t(12) | R_F(10) | R_P(10) | 1×30
    - 160번 클럭을 버린 뒤, 비트 쌍 (b₁, b₂) 에서 b₁ = 1 일 때만 b₂ 를 출력 (self-shrinking)
    - 라운드 상수: 254비트 정수, p 이상이면 다시 뽑는다
    - MDS: 다음 2t 개 샘플 x, y 로 만든 Cauchy 행렬 M[i][j] = 1 / (xᵢ + yⱼ)

사용 예시:
    >>> from zkmm.poseidon import poseidon_hash
    >>> poseidon_hash([352352, 1, 5, 1, 7])
"""

import functools
import logging
from collections import deque

from zkmm.field import FR, CURVE_ORDER, to_fr
from zkmm.gadgets import linear_combination, pow5

logger = logging.getLogger(__name__)

FULL_ROUNDS = 8

# t = 2 .. 17
PARTIAL_ROUNDS = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]

MIN_WIDTH = 2
MAX_WIDTH = MIN_WIDTH + len(PARTIAL_ROUNDS) - 1

# circomlib 테스트 벡터와 같은 값을 내는 것이 확인된 상태 폭.
# 보안 검사로 Cauchy 행렬을 다시 뽑는 절차는 구현하지 않았으므로 다른 폭은 circomlib 과 다를 수 있다.
VERIFIED_WIDTHS = (3, 6)

FIELD_SIZE = CURVE_ORDER.bit_length()  # 254


class GrainLFSR:
    """Poseidon 파라미터 생성용 80비트 Grain LFSR (self-shrinking 모드)."""

    def __init__(self, field, sbox, field_size, width, full_rounds, partial_rounds):
        seed = (
            _to_bits(field, 2)
            + _to_bits(sbox, 4)
            + _to_bits(field_size, 12)
            + _to_bits(width, 12)
            + _to_bits(full_rounds, 10)
            + _to_bits(partial_rounds, 10)
            + [1] * 30
        )
        self.state = deque(seed)
        for _ in range(160):
            self._clock()

    def _clock(self):
        s = self.state
        new_bit = s[62] ^ s[51] ^ s[38] ^ s[23] ^ s[13] ^ s[0]
        s.popleft()
        s.append(new_bit)
        return new_bit

    def next_bit(self):
        while True:
            first = self._clock()
            second = self._clock()
            if first == 1:
                return second

    def next_int(self, nbits):
        """nbits 개 비트를 MSB 먼저 읽어 정수로 만든다."""
        value = 0
        for _ in range(nbits):
            value = (value << 1) | self.next_bit()
        return value

    def next_field_element(self, nbits):
        """p 미만이 나올 때까지 다시 뽑는다 (라운드 상수용)."""
        value = self.next_int(nbits)
        while value >= CURVE_ORDER:
            value = self.next_int(nbits)
        return FR(value)


def _to_bits(value, width):
    return [int(ch) for ch in bin(value)[2:].zfill(width)]


class PoseidonParams:
    """상태 폭 t 에 대한 Poseidon 파라미터.

    속성:
        width: 상태 폭 t
        full_rounds: R_F
        partial_rounds: R_P
        round_constants: (R_F + R_P)·t 개의 FR
        mds: t×t FR 행렬
    """

    def __init__(self, width, full_rounds, partial_rounds, round_constants, mds):
        self.width = width
        self.full_rounds = full_rounds
        self.partial_rounds = partial_rounds
        self.round_constants = round_constants
        self.mds = mds

    @property
    def rounds(self):
        return self.full_rounds + self.partial_rounds

    def is_full_round(self, r):
        half = self.full_rounds // 2
        return r < half or r >= half + self.partial_rounds

    def constants_for(self, r):
        return self.round_constants[r * self.width:(r + 1) * self.width]


def _cauchy_mds(grain, width):
    while True:
        samples = [FR(grain.next_int(FIELD_SIZE) % CURVE_ORDER) for _ in range(2 * width)]
        if len({int(s) for s in samples}) != len(samples):
            continue
        xs, ys = samples[:width], samples[width:]
        if any(x + y == FR(0) for x in xs for y in ys):
            continue
        return [[FR(1) / (x + y) for y in ys] for x in xs]


@functools.lru_cache(maxsize=None)
def poseidon_params(width):
    """상태 폭 t 의 파라미터를 생성한다 (프로세스 전역 캐시).

    Raises:
        ValueError: t 가 2..17 범위를 벗어날 때
    """
    if not MIN_WIDTH <= width <= MAX_WIDTH:
        raise ValueError(f"Poseidon 상태 폭은 {MIN_WIDTH}..{MAX_WIDTH} 이어야 합니다: {width}")
    partial_rounds = PARTIAL_ROUNDS[width - MIN_WIDTH]
    grain = GrainLFSR(1, 0, FIELD_SIZE, width, FULL_ROUNDS, partial_rounds)

    num_constants = (FULL_ROUNDS + partial_rounds) * width
    round_constants = [grain.next_field_element(FIELD_SIZE) for _ in range(num_constants)]
    mds = _cauchy_mds(grain, width)

    logger.debug(
        "Poseidon parameters derived: t=%d R_F=%d R_P=%d constants=%d",
        width, FULL_ROUNDS, partial_rounds, num_constants,
    )
    return PoseidonParams(width, FULL_ROUNDS, partial_rounds, round_constants, mds)


def _mix(mds, state):
    out = []
    for row in mds:
        acc = FR(0)
        for m, s in zip(row, state):
            acc = acc + m * s
        out.append(acc)
    return out


def poseidon_permutation(state, params):
    """Poseidon 순열을 적용한 상태를 돌려준다 (회로 밖)."""
    state = [to_fr(s) for s in state]
    if len(state) != params.width:
        raise ValueError(f"상태 길이 {len(state)} != t={params.width}")
    for r in range(params.rounds):
        state = [s + c for s, c in zip(state, params.constants_for(r))]
        if params.is_full_round(r):
            state = [s ** 5 for s in state]
        else:
            state[0] = state[0] ** 5
        state = _mix(params.mds, state)
    return state


def poseidon_hash(inputs):
    """Poseidon(x₁, ..., x_k) (회로 밖).

    Args:
        inputs: 1..16 개의 FR/정수

    Returns:
        FR
    """
    inputs = [to_fr(x) for x in inputs]
    params = poseidon_params(len(inputs) + 1)
    return poseidon_permutation([FR(0)] + inputs, params)[0]


def poseidon_gadget(circuit, inputs):
    """Poseidon(x₁, ..., x_k) 를 회로 안에서 계산한 변수를 돌려준다.

    다음 라운드의 ARK 상수는 이번 라운드 MIX 의 선형결합 상수항에 합쳐진다.
    마지막 라운드는 출력인 state[0] 만 계산한다.
    """
    inputs = list(inputs)
    params = poseidon_params(len(inputs) + 1)
    width = params.width

    first = params.constants_for(0)
    state = [circuit.constant(first[0])]
    state += [circuit.add_constant_gate(x, c) for x, c in zip(inputs, first[1:])]

    for r in range(params.rounds):
        if params.is_full_round(r):
            state = [pow5(circuit, s) for s in state]
        else:
            state[0] = pow5(circuit, state[0])

        if r == params.rounds - 1:
            return linear_combination(circuit, zip(params.mds[0], state))

        upcoming = params.constants_for(r + 1)
        state = [
            linear_combination(circuit, zip(params.mds[i], state), constant=upcoming[i])
            for i in range(width)
        ]
