"""
제약 회로 표현 (Constraint Circuit)
=====================================

Mastermind 회로가 선언되는 제약 시스템. 모든 제약은 PLONK 산술 게이트 하나로 표현된다:

    q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C = 0

**배선(wire) = 변수 인덱스**:
  각 게이트의 a, b, c 배선은 회로 전체가 공유하는 변수(variable)를 가리킨다.
  같은 변수를 여러 게이트가 읽으면 그 자체로 copy constraint 가 된다.
  변수 0 은 상수 1 ("one") 이고 자기 자신을 고정하는 게이트를 가진다.

**게이트 유형별 셀렉터 설정**:
  | 유형     | q_L | q_R | q_O | q_M | q_C | 의미              |
  |----------|-----|-----|-----|-----|-----|-------------------|
  | 곱셈     |  0  |  0  | -1  |  1  |  0  | a·b = c           |
  | 덧셈     |  x  |  y  | -1  |  0  |  0  | x·a + y·b = c     |
  | 상수덧셈 |  1  |  0  | -1  |  0  |  k  | a + k = c         |
  | 단언     |  *  |  *  |  0  |  *  |  *  | (c 없음) = 0      |

**위트니스 힌트(hint)**:
  출력 게이트(q_O = -1)는 새 변수 c 를 만들고, 게이트 방정식을 c 에 대해 풀어
  값을 계산하는 힌트를 등록한다 (circom 의 `<==`).
  add_hint 는 제약 없이 값만 계산하는 advice 변수를 만든다 (circom 의 `<--`).
  advice 변수의 건전성은 그 뒤에 선언되는 게이트들만이 보장한다.

**제약 그룹(group)**:
  `with circuit.group("sum"):` 블록 안에서 선언된 게이트는 같은 태그를 가진다.
  check_witness 는 모든 게이트를 평가(조기 종료 없음)하고 위반된 게이트를 모두 돌려준다.

사용 예시:
    >>> circuit = Circuit()
    >>> x = circuit.add_private_input("x")
    >>> with circuit.group("cube"):
    ...     x2 = circuit.add_multiplication_gate(x, x)
    ...     x3 = circuit.add_multiplication_gate(x2, x)
    ...     circuit.assert_constant(x3, 27)
    >>> values = circuit.compute_witness({"x": 3})
    >>> circuit.check_witness(values)   # []
"""

import logging
from contextlib import contextmanager

from zkmm.field import FR, CURVE_ORDER, to_fr

logger = logging.getLogger(__name__)

# 변수 0: 상수 1
ONE_VARIABLE = 0

# 상수 게이트 태그 (그룹 밖에서 선언된 게이트)
CIRCUIT_GROUP = "circuit"

MINUS_ONE = FR(CURVE_ORDER - 1)


class Gate:
    """PLONK 산술 게이트.

    게이트 방정식: q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C = 0

    속성:
        q_l, q_r, q_o, q_m, q_c: 셀렉터 (FR)
        wires: (a, b, c) 변수 인덱스
        group: 제약 그룹 태그 (진단용)
    """

    def __init__(self, q_l, q_r, q_o, q_m, q_c, wires=(ONE_VARIABLE, ONE_VARIABLE, ONE_VARIABLE), group=CIRCUIT_GROUP):
        self.q_l = to_fr(q_l)
        self.q_r = to_fr(q_r)
        self.q_o = to_fr(q_o)
        self.q_m = to_fr(q_m)
        self.q_c = to_fr(q_c)
        self.wires = tuple(wires)
        self.group = group

    def check(self, a, b, c):
        """게이트 제약이 만족되는지 확인한다.

        q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C == 0 ?

        Args:
            a, b, c: 배선 값 (FR 원소 또는 정수)

        Returns:
            bool: 제약 만족 여부
        """
        a, b, c = to_fr(a), to_fr(b), to_fr(c)
        result = (
            self.q_l * a
            + self.q_r * b
            + self.q_o * c
            + self.q_m * (a * b)
            + self.q_c
        )
        return result == FR(0)

    def evaluate(self, values):
        """위트니스 values 에서 배선 값을 읽어 check 한다."""
        a, b, c = self.wires
        return self.check(values[a], values[b], values[c])

    def solve_output(self, values):
        """출력 게이트의 c 값을 계산한다: c = -(q_L·a + q_R·b + q_M·a·b + q_C) / q_O."""
        a = values[self.wires[0]]
        b = values[self.wires[1]]
        partial = self.q_l * a + self.q_r * b + self.q_m * (a * b) + self.q_c
        return -partial / self.q_o

    def __repr__(self):
        return (
            f"Gate(q_l={int(self.q_l)}, q_r={int(self.q_r)}, q_o={int(self.q_o)}, "
            f"q_m={int(self.q_m)}, q_c={int(self.q_c)}, wires={self.wires}, group={self.group!r})"
        )


class Violation:
    """check_witness 가 돌려주는 위반 게이트 정보."""

    def __init__(self, gate_index, group):
        self.gate_index = gate_index
        self.group = group

    def __eq__(self, other):
        return (
            isinstance(other, Violation)
            and self.gate_index == other.gate_index
            and self.group == other.group
        )

    def __repr__(self):
        return f"Violation(gate={self.gate_index}, group={self.group!r})"


class Circuit:
    """변수 공유 방식의 PLONK 산술 회로.

    속성:
        gates: Gate 리스트 (선언 순서)
        variable_names: 변수 이름 리스트 (인덱스 = 변수 id)
        public_inputs: 공개 입력 변수 인덱스 (선언 순서)
        inputs: 입력 이름 → 변수 인덱스 리스트
        hints: (변수 인덱스, 계산 함수) 리스트 (선언 순서로 실행)
    """

    def __init__(self):
        self.gates = []
        self.variable_names = []
        self.public_inputs = []
        self.inputs = {}
        self.input_visibility = {}
        self.hints = []
        self._group = CIRCUIT_GROUP

        one = self._new_variable("one")
        self.hints.append((one, lambda values: FR(1)))
        # one - 1 = 0
        self.gates.append(Gate(1, 0, 0, 0, MINUS_ONE, (one, one, one), CIRCUIT_GROUP))

    @property
    def n(self):
        """게이트 수."""
        return len(self.gates)

    @property
    def num_variables(self):
        return len(self.variable_names)

    @property
    def num_public_inputs(self):
        return len(self.public_inputs)

    @contextmanager
    def group(self, tag):
        """블록 안에서 선언되는 게이트에 그룹 태그를 붙인다."""
        previous = self._group
        self._group = tag
        try:
            yield self
        finally:
            self._group = previous

    def _new_variable(self, name):
        self.variable_names.append(name)
        return len(self.variable_names) - 1

    # ─── 입력 선언 ───

    def _add_input(self, name, length, public):
        if name in self.inputs:
            raise ValueError(f"이미 선언된 입력: {name}")
        if length is None:
            indices = [self._new_variable(name)]
        else:
            indices = [self._new_variable(f"{name}[{i}]") for i in range(length)]
        self.inputs[name] = indices
        self.input_visibility[name] = "public" if public else "private"
        if public:
            self.public_inputs.extend(indices)
        return indices[0] if length is None else indices

    def add_public_input(self, name, length=None):
        """공개 입력 변수를 선언한다. length 를 주면 배열을 선언한다."""
        return self._add_input(name, length, public=True)

    def add_private_input(self, name, length=None):
        """비공개 입력 변수를 선언한다. length 를 주면 배열을 선언한다."""
        return self._add_input(name, length, public=False)

    # ─── 출력 게이트 (새 변수 c 를 만든다) ───

    def add_output_gate(self, a, b, q_l=0, q_r=0, q_m=0, q_c=0, name=None):
        """c = q_L·a + q_R·b + q_M·a·b + q_C 를 만족하는 새 변수 c 를 만든다.

        셀렉터: q_O = -1 로 고정.

        Returns:
            int: c 변수 인덱스
        """
        c = self._new_variable(name or f"v{len(self.variable_names)}")
        gate = Gate(q_l, q_r, MINUS_ONE, q_m, q_c, (a, b, c), self._group)
        self.gates.append(gate)
        self.hints.append((c, gate.solve_output))
        return c

    def add_multiplication_gate(self, a, b, name=None):
        """곱셈 게이트: a · b = c."""
        return self.add_output_gate(a, b, q_m=1, name=name)

    def add_addition_gate(self, a, b, q_l=1, q_r=1, name=None):
        """덧셈 게이트: q_L·a + q_R·b = c (기본은 a + b)."""
        return self.add_output_gate(a, b, q_l=q_l, q_r=q_r, name=name)

    def add_subtraction_gate(self, a, b, name=None):
        """뺄셈 게이트: a - b = c."""
        return self.add_output_gate(a, b, q_l=1, q_r=MINUS_ONE, name=name)

    def add_constant_gate(self, a, constant, name=None):
        """상수 덧셈 게이트: a + constant = c."""
        return self.add_output_gate(a, ONE_VARIABLE, q_l=1, q_c=constant, name=name)

    def constant(self, value, name=None):
        """상수 변수: c = value."""
        return self.add_output_gate(ONE_VARIABLE, ONE_VARIABLE, q_c=value, name=name)

    def add_hint(self, compute, name=None):
        """제약 없는 advice 변수를 만든다.

        compute(values) 는 지금까지 계산된 위트니스 값 리스트를 받아 FR 을 돌려준다.
        값이 올바른지는 이후에 선언되는 게이트가 검사해야 한다.
        """
        v = self._new_variable(name or f"hint{len(self.variable_names)}")
        self.hints.append((v, compute))
        return v

    # ─── 단언 게이트 (q_O = 0) ───

    def assert_zero_gate(self, a, b, q_l=0, q_r=0, q_m=0, q_c=0):
        """q_L·a + q_R·b + q_M·a·b + q_C = 0 을 단언한다."""
        self.gates.append(Gate(q_l, q_r, 0, q_m, q_c, (a, b, ONE_VARIABLE), self._group))
        return len(self.gates) - 1

    def assert_equal(self, a, b):
        """a - b = 0."""
        return self.assert_zero_gate(a, b, q_l=1, q_r=MINUS_ONE)

    def assert_constant(self, a, constant):
        """a - constant = 0."""
        return self.assert_zero_gate(a, ONE_VARIABLE, q_l=1, q_c=-to_fr(constant))

    def assert_boolean(self, x):
        """x·x - x = 0  →  x ∈ {0, 1}."""
        return self.assert_zero_gate(x, x, q_l=MINUS_ONE, q_m=1)

    # ─── 위트니스 ───

    def compute_witness(self, assignments):
        """입력 할당에서 모든 변수 값을 계산한다.

        Args:
            assignments: 입력 이름 → 값 (배열 입력이면 길이가 맞는 시퀀스)

        Returns:
            list[FR]: 변수 인덱스 순서의 위트니스

        Raises:
            KeyError: 선언된 입력이 빠졌을 때
            ValueError: 배열 길이가 다를 때
        """
        values = [None] * self.num_variables
        for name, indices in self.inputs.items():
            if name not in assignments:
                raise KeyError(f"입력이 없습니다: {name}")
            raw = assignments[name]
            if len(indices) == 1 and self.variable_names[indices[0]] == name:
                values[indices[0]] = to_fr(raw)
                continue
            raw = list(raw)
            if len(raw) != len(indices):
                raise ValueError(f"{name}: 길이 {len(indices)} 가 필요하지만 {len(raw)} 개를 받았습니다")
            for index, item in zip(indices, raw):
                values[index] = to_fr(item)

        for index, compute in self.hints:
            values[index] = to_fr(compute(values))
        return values

    def check_witness(self, values):
        """모든 게이트를 평가하고 위반 목록을 돌려준다 (조기 종료 없음)."""
        violations = []
        for i, gate in enumerate(self.gates):
            if not gate.evaluate(values):
                violations.append(Violation(i, gate.group))
        if violations:
            logger.debug("%d of %d gates violated", len(violations), self.n)
        return violations

    def violated_groups(self, values):
        """위반된 그룹 태그를 게이트 선언 순서대로 중복 없이 돌려준다."""
        groups = []
        for violation in self.check_witness(values):
            if violation.group not in groups:
                groups.append(violation.group)
        return groups

    def public_values(self, values):
        """공개 입력 값을 선언 순서대로 돌려준다."""
        return [values[i] for i in self.public_inputs]

    def group_sizes(self):
        """그룹 태그 → 게이트 수 (디버그 로그용)."""
        sizes = {}
        for gate in self.gates:
            sizes[gate.group] = sizes.get(gate.group, 0) + 1
        return sizes
