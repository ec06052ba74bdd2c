"""
Mastermind 회로: 제약 조립기 (CircuitAssembler)
==================================================

하나의 위트니스 위에 다섯 개의 검사기를 선언해 하나의 회로로 묶는다.
제약은 실행 순서가 없는 논리곱(AND)이다. 아래 순서는 진단 보고용 정규 순서일 뿐이다.

  ┌──────────────────────────────────────────────────────────────┐
  │ 공개 입력: guess[n], num_hit, num_blow,                     │
  │            solution_sum, solution_commitment                │
  │ 비공개 입력: solution[n], salt                              │
  ├──────────────────────────────────────────────────────────────┤
  │ range.guess     : 0 <= guess[i] < B                         │
  │ range.solution  : 0 <= solution[i] < B                      │
  │ sum             : Σ solution == solution_sum                │
  │ commitment      : Poseidon(salt, solution) == commitment    │
  │ hit             : Σ [guess[i] == solution[i]] == num_hit    │
  │ blow            : Σ_c min(g_c, s_c) == num_blow,            │
  │                   num_hit + num_blow <= n                    │
  └──────────────────────────────────────────────────────────────┘

결과는 두 가지뿐이다: 모든 제약 만족 (증명 생성 가능) 또는 실패 (부분 증명 없음).

사용 예시:
    >>> mm = MastermindCircuit.for_config(GameConfig(base=10, length=4))
    >>> verdict = mm.evaluate({
    ...     "guess": [1, 0, 0, 0], "num_hit": 1, "num_blow": 0,
    ...     "solution_sum": 14, "solution_commitment": commit(352352, [1, 5, 1, 7]),
    ...     "solution": [1, 5, 1, 7], "salt": 352352,
    ... })
    >>> verdict.satisfied   # True
"""

import functools
import logging

from zkmm.circuit import Circuit
from zkmm.config import GameConfig
from zkmm.errors import (
    RANGE_GUESS,
    RANGE_SOLUTION,
    InputError,
    error_for_groups,
    order_groups,
)
from zkmm.field import to_fr
from zkmm.mastermind.range_check import declare_range_check
from zkmm.mastermind.sum_check import declare_sum_check
from zkmm.mastermind.commitment import declare_commitment_check
from zkmm.mastermind.hit import declare_hit_counter
from zkmm.mastermind.blow import declare_blow_counter

logger = logging.getLogger(__name__)

PUBLIC_INPUTS = ("guess", "num_hit", "num_blow", "solution_sum", "solution_commitment")
PRIVATE_INPUTS = ("solution", "salt")
ARRAY_INPUTS = ("guess", "solution")

# circom 회로의 신호 이름 → 정규 이름
INPUT_ALIASES = {
    "pubGuess": "guess",
    "pubNumHit": "num_hit",
    "pubNumBlow": "num_blow",
    "pubSolnSum": "solution_sum",
    "pubSolnHash": "solution_commitment",
    "privSoln": "solution",
    "privSalt": "salt",
}


class Verdict:
    """한 라운드 평가 결과.

    속성:
        violations: 위반된 그룹 태그 (정규 순서). 비어 있으면 만족.
        witness: 계산된 위트니스 (변수 인덱스 순서)
        public_signals: 공개 입력 값 (선언 순서)
    """

    def __init__(self, violations, witness, public_signals):
        self.violations = list(violations)
        self.witness = witness
        self.public_signals = public_signals

    @property
    def satisfied(self):
        return not self.violations

    def raise_for_violations(self):
        """위반이 있으면 첫 번째 그룹의 예외를 던진다."""
        if self.violations:
            raise error_for_groups(self.violations)

    def __bool__(self):
        return self.satisfied

    def __repr__(self):
        return f"Verdict(satisfied={self.satisfied}, violations={self.violations})"


class MastermindCircuit:
    """Mastermind 히트/블로 회로.

    한 번 만들면 변하지 않는다. evaluate / calculate_witness 는 순수 함수이므로
    여러 스레드에서 같은 인스턴스를 동시에 써도 된다.

    속성:
        config: GameConfig
        circuit: Circuit (게이트, 변수, 힌트)
        guess, solution: 자리 변수 인덱스 리스트
        num_hit, num_blow, solution_sum, solution_commitment, salt: 변수 인덱스
        matches: 자리별 일치 지시 변수 eqᵢ (hit / blow 공유)
    """

    def __init__(self, config=None):
        self.config = config or GameConfig()
        base = self.config.base
        length = self.config.length

        circuit = Circuit()
        self.guess = circuit.add_public_input("guess", length)
        self.num_hit = circuit.add_public_input("num_hit")
        self.num_blow = circuit.add_public_input("num_blow")
        self.solution_sum = circuit.add_public_input("solution_sum")
        self.solution_commitment = circuit.add_public_input("solution_commitment")
        self.solution = circuit.add_private_input("solution", length)
        self.salt = circuit.add_private_input("salt")

        digit_bits = self.config.digit_bits
        declare_range_check(circuit, self.guess, base, digit_bits, RANGE_GUESS)
        declare_range_check(circuit, self.solution, base, digit_bits, RANGE_SOLUTION)
        declare_sum_check(circuit, self.solution, self.solution_sum)
        declare_commitment_check(circuit, self.salt, self.solution, self.solution_commitment)
        self.matches = declare_hit_counter(circuit, self.guess, self.solution, self.num_hit)
        declare_blow_counter(
            circuit, self.guess, self.solution, self.matches,
            self.num_hit, self.num_blow, base, self.config.count_bits,
        )
        self.circuit = circuit

        logger.debug(
            "Mastermind circuit built: base=%d length=%d gates=%d variables=%d groups=%s",
            base, length, circuit.n, circuit.num_variables, circuit.group_sizes(),
        )

    @classmethod
    def for_config(cls, config=None):
        """(base, length) 별로 한 번만 만드는 프로세스 전역 인스턴스."""
        config = config or GameConfig()
        return _cached_circuit(config.base, config.length)

    def load_inputs(self, inputs):
        """하네스 입력을 정규 이름과 FR 값으로 바꾼다.

        circom 별칭(pubGuess, privSoln, ...)도 받는다.

        Raises:
            InputError: 빠진 키, 모르는 키, 중복 키, 길이 불일치, 숫자가 아닌 값
        """
        if not hasattr(inputs, "items"):
            raise InputError("입력은 이름 → 값 매핑이어야 합니다")

        loaded = {}
        for key, value in inputs.items():
            name = INPUT_ALIASES.get(key, key)
            if name not in PUBLIC_INPUTS and name not in PRIVATE_INPUTS:
                raise InputError(f"알 수 없는 입력: {key}")
            if name in loaded:
                raise InputError(f"입력이 중복되었습니다: {key}")
            loaded[name] = self._load_value(name, value)

        missing = [name for name in PUBLIC_INPUTS + PRIVATE_INPUTS if name not in loaded]
        if missing:
            raise InputError(f"입력이 없습니다: {', '.join(missing)}")
        return loaded

    def _load_value(self, name, value):
        try:
            if name in ARRAY_INPUTS:
                if isinstance(value, (str, bytes)) or not hasattr(value, "__len__"):
                    raise InputError(f"{name}: 길이 {self.config.length} 의 배열이어야 합니다")
                if len(value) != self.config.length:
                    raise InputError(
                        f"{name}: 길이 {self.config.length} 가 필요하지만 {len(value)} 개를 받았습니다"
                    )
                return [to_fr(v) for v in value]
            return to_fr(value)
        except (TypeError, ValueError) as e:
            if isinstance(e, InputError):
                raise
            raise InputError(f"{name}: {e}") from e

    def compute_witness(self, inputs):
        """모든 변수 값을 계산한다 (제약 검사 없이)."""
        return self.circuit.compute_witness(self.load_inputs(inputs))

    def violations(self, witness):
        """위트니스가 위반한 그룹 태그 (정규 순서)."""
        return order_groups(self.circuit.violated_groups(witness))

    def public_signals(self, witness):
        return self.circuit.public_values(witness)

    def evaluate(self, inputs):
        """한 라운드를 평가해 Verdict 를 돌려준다. 모든 게이트를 평가한다."""
        witness = self.compute_witness(inputs)
        return Verdict(self.violations(witness), witness, self.public_signals(witness))

    def calculate_witness(self, inputs, sanity_check=True):
        """위트니스를 계산하고, sanity_check 이면 제약을 검사한다.

        Returns:
            list[FR]: 위트니스

        Raises:
            InputError: 입력 형식 오류
            WitnessGenerationError: 제약 위반 (첫 번째 위반 그룹의 하위 클래스)
        """
        witness = self.compute_witness(inputs)
        if sanity_check:
            groups = self.violations(witness)
            if groups:
                logger.warning("Witness rejected: %s", ", ".join(groups))
                raise error_for_groups(groups)
        return witness


@functools.lru_cache(maxsize=None)
def _cached_circuit(base, length):
    return MastermindCircuit(GameConfig(base=base, length=length))
