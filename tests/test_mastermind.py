"""
Mastermind 회로 통합 테스트
=============================

기준 예시: S=[1,5,1,7], salt=352352, G=[1,0,0,0] → hit=1, blow=0, sum=14

테스트 범위:
  - 완전성: 올바른 입력은 위트니스 생성 성공
  - 건전성: 범위 / 합 / 히트 / 블로 / 커밋먼트 위반은 각각 해당 그룹으로 실패
  - 멱등성: 같은 입력을 두 번 평가하면 같은 판정
  - 입력 형식 오류는 제약 위반과 구분
  - 다른 (B, n) 설정
  - 여러 라운드 병렬 평가
"""

import pytest

from zkmm.config import GameConfig
from zkmm.errors import (
    RANGE_GUESS,
    RANGE_SOLUTION,
    SUM,
    COMMITMENT,
    HIT,
    BLOW,
    InputError,
    WitnessGenerationError,
    RangeViolation,
    SumMismatch,
    CommitmentMismatch,
    HitCountMismatch,
    BlowCountMismatch,
)
from zkmm.field import FR, CURVE_ORDER
from zkmm.mastermind import MastermindCircuit, Verdict
from zkmm.mastermind.batch import evaluate_rounds
from zkmm.scoring import commit, digit_sum, round_inputs, score


SOL = [1, 5, 1, 7]
SALT = 352352


def _expect_failure(mastermind, inputs, error_cls):
    with pytest.raises(error_cls) as excinfo:
        mastermind.calculate_witness(inputs, True)
    return excinfo.value


# ─────────────────────────────────────────────────────────────────────
# 완전성
# ─────────────────────────────────────────────────────────────────────

class TestCompleteness:
    def test_correct_input_runs_without_errors(self, mastermind, honest_input):
        witness = mastermind.calculate_witness(honest_input, True)
        assert len(witness) == mastermind.circuit.num_variables

    def test_verdict_satisfied(self, mastermind, honest_input):
        verdict = mastermind.evaluate(honest_input)
        assert verdict.satisfied
        assert verdict.violations == []
        assert bool(verdict) is True
        verdict.raise_for_violations()

    def test_public_signals(self, mastermind, honest_input, sol_hash):
        verdict = mastermind.evaluate(honest_input)
        assert verdict.public_signals == [
            FR(1), FR(0), FR(0), FR(0),  # guess
            FR(1),                        # num_hit
            FR(0),                        # num_blow
            FR(14),                       # solution_sum
            FR(sol_hash),                 # solution_commitment
        ]

    def test_hit_indicators_shared_with_blow(self, mastermind, honest_input):
        witness = mastermind.compute_witness(honest_input)
        assert [witness[m] for m in mastermind.matches] == [FR(1), FR(0), FR(0), FR(0)]

    def test_without_sanity_check_returns_witness(self, mastermind, honest_input):
        honest_input["pubSolnSum"] = 4
        witness = mastermind.calculate_witness(honest_input, False)
        assert len(witness) == mastermind.circuit.num_variables

    @pytest.mark.parametrize("guess", [
        [1, 0, 0, 0],
        [7, 1, 5, 1],
        [1, 5, 1, 7],
        [1, 1, 1, 1],
        [9, 9, 9, 9],
        [5, 7, 1, 1],
    ])
    def test_honest_rounds(self, mastermind, guess):
        verdict = mastermind.evaluate(round_inputs(SOL, SALT, guess))
        assert verdict.satisfied, verdict.violations

    def test_repeated_colors(self, mastermind):
        """guess=[2,2,1,1], solution=[1,1,2,2] → hit 0, blow 4."""
        solution = [1, 1, 2, 2]
        inputs = round_inputs(solution, 7, [2, 2, 1, 1])
        assert (inputs["num_hit"], inputs["num_blow"]) == (0, 4)
        assert mastermind.evaluate(inputs).satisfied

    def test_canonical_names(self, mastermind):
        inputs = round_inputs(SOL, SALT, [1, 0, 0, 0])
        assert set(inputs) == {
            "guess", "num_hit", "num_blow", "solution_sum",
            "solution_commitment", "solution", "salt",
        }
        assert mastermind.evaluate(inputs).satisfied


# ─────────────────────────────────────────────────────────────────────
# 건전성
# ─────────────────────────────────────────────────────────────────────

class TestSoundness:
    def test_solution_not_n_digit_numbers(self, mastermind):
        """S=[0,55,6,7]: 나머지 값이 S 와 일관되어도 범위 위반."""
        wrong_sol = [0, 55, 6, 7]
        guess = [1, 0, 0, 5]
        hit, blow = score(guess, wrong_sol)
        inputs = {
            "pubGuess": guess,
            "pubNumHit": hit,
            "pubNumBlow": blow,
            "pubSolnSum": sum(wrong_sol),
            "pubSolnHash": int(commit(SALT, wrong_sol)),
            "privSoln": wrong_sol,
            "privSalt": SALT,
        }
        assert mastermind.evaluate(inputs).violations == [RANGE_SOLUTION]
        err = _expect_failure(mastermind, inputs, RangeViolation)
        assert err.target == "solution"
        assert err.group == RANGE_SOLUTION

    def test_guess_not_n_digit_numbers(self, mastermind, honest_input):
        honest_input["pubGuess"] = [57, 0, 0, 5]
        honest_input["pubNumHit"], honest_input["pubNumBlow"] = score([57, 0, 0, 5], SOL)
        assert mastermind.evaluate(honest_input).violations == [RANGE_GUESS]
        err = _expect_failure(mastermind, honest_input, RangeViolation)
        assert err.target == "guess"

    def test_guess_range_reported_first(self, mastermind, honest_input):
        """범위와 블로가 함께 틀리면 모든 그룹을 보고하고 범위 오류를 먼저 던진다."""
        honest_input["pubGuess"] = [57, 0, 0, 5]
        honest_input["pubNumHit"] = 0
        honest_input["pubNumBlow"] = 2
        err = _expect_failure(mastermind, honest_input, RangeViolation)
        assert err.violations == [RANGE_GUESS, BLOW]

    def test_negative_digit(self, mastermind):
        inputs = round_inputs(SOL, SALT, [1, 0, 0, 0])
        inputs["guess"] = [-1, 0, 0, 0]
        inputs["num_hit"] = 0
        assert RANGE_GUESS in mastermind.evaluate(inputs).violations

    def test_incorrect_solution_sum(self, mastermind, honest_input):
        honest_input["pubSolnSum"] = 4
        assert mastermind.evaluate(honest_input).violations == [SUM]
        _expect_failure(mastermind, honest_input, SumMismatch)

    def test_incorrect_num_hit(self, mastermind, honest_input):
        honest_input["pubNumHit"] = 2
        assert mastermind.evaluate(honest_input).violations == [HIT]
        _expect_failure(mastermind, honest_input, HitCountMismatch)

    def test_incorrect_num_blow(self, mastermind, honest_input):
        honest_input["pubNumBlow"] = 5
        assert mastermind.evaluate(honest_input).violations == [BLOW]
        _expect_failure(mastermind, honest_input, BlowCountMismatch)

    def test_off_by_one_blow(self, mastermind):
        inputs = round_inputs(SOL, SALT, [5, 7, 1, 1])
        inputs["num_blow"] += 1
        assert mastermind.evaluate(inputs).violations == [BLOW]

    def test_num_blow_minus_one(self, mastermind, honest_input):
        honest_input["pubNumBlow"] = CURVE_ORDER - 1
        assert BLOW in mastermind.evaluate(honest_input).violations

    def test_solution_hash_differs_from_published(self, mastermind, honest_input):
        honest_input["pubSolnHash"] = int(commit(SALT, [1, 6, 4]))
        assert mastermind.evaluate(honest_input).violations == [COMMITMENT]
        _expect_failure(mastermind, honest_input, CommitmentMismatch)

    def test_wrong_salt(self, mastermind, honest_input):
        honest_input["privSalt"] = SALT + 1
        assert mastermind.evaluate(honest_input).violations == [COMMITMENT]

    def test_solution_swapped_after_commit(self, mastermind, sol_hash):
        """커밋 후 솔루션을 바꾸면 (합까지 맞춰도) 커밋먼트가 깨진다."""
        swapped = [7, 1, 5, 1]
        inputs = round_inputs(swapped, SALT, [1, 0, 0, 0])
        inputs["solution_commitment"] = sol_hash
        assert mastermind.evaluate(inputs).violations == [COMMITMENT]

    def test_failures_share_base_class(self, mastermind, honest_input):
        honest_input["pubNumHit"] = 3
        honest_input["pubSolnSum"] = 0
        err = _expect_failure(mastermind, honest_input, WitnessGenerationError)
        assert isinstance(err, SumMismatch)
        assert err.violations == [SUM, HIT]


# ─────────────────────────────────────────────────────────────────────
# 멱등성
# ─────────────────────────────────────────────────────────────────────

class TestIdempotence:
    def test_same_verdict_twice(self, mastermind, honest_input):
        first = mastermind.evaluate(honest_input)
        second = mastermind.evaluate(honest_input)
        assert first.violations == second.violations
        assert first.witness == second.witness

    def test_failed_verdict_twice(self, mastermind, honest_input):
        honest_input["pubNumHit"] = 2
        assert mastermind.evaluate(honest_input).violations == mastermind.evaluate(honest_input).violations

    def test_for_config_cached(self, mastermind):
        assert MastermindCircuit.for_config(GameConfig(base=10, length=4)) is mastermind


# ─────────────────────────────────────────────────────────────────────
# 입력 형식
# ─────────────────────────────────────────────────────────────────────

class TestInputs:
    def test_missing_input(self, mastermind, honest_input):
        del honest_input["privSalt"]
        with pytest.raises(InputError, match="salt"):
            mastermind.evaluate(honest_input)

    def test_unknown_input(self, mastermind, honest_input):
        honest_input["pubExtra"] = 1
        with pytest.raises(InputError):
            mastermind.evaluate(honest_input)

    def test_alias_and_canonical_duplicate(self, mastermind, honest_input):
        honest_input["salt"] = SALT
        with pytest.raises(InputError):
            mastermind.evaluate(honest_input)

    def test_wrong_length(self, mastermind, honest_input):
        honest_input["privSoln"] = [1, 5, 1]
        with pytest.raises(InputError):
            mastermind.evaluate(honest_input)

    def test_scalar_for_array(self, mastermind, honest_input):
        honest_input["pubGuess"] = 1000
        with pytest.raises(InputError):
            mastermind.evaluate(honest_input)

    def test_non_numeric_value(self, mastermind, honest_input):
        honest_input["pubNumHit"] = "one"
        with pytest.raises(InputError):
            mastermind.evaluate(honest_input)

    def test_not_a_mapping(self, mastermind):
        with pytest.raises(InputError):
            mastermind.evaluate([1, 2, 3])

    def test_input_error_is_value_error(self):
        assert issubclass(InputError, ValueError)

    def test_string_values(self, mastermind, honest_input):
        honest_input["pubSolnHash"] = str(honest_input["pubSolnHash"])
        honest_input["privSoln"] = ["1", "5", "1", "7"]
        assert mastermind.evaluate(honest_input).satisfied


# ─────────────────────────────────────────────────────────────────────
# 다른 (B, n)
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def base6():
    """B=6, n=4: 2의 거듭제곱이 아닌 진법."""
    return MastermindCircuit(GameConfig(base=6, length=4))


@pytest.fixture(scope="module")
def base8():
    """B=8, n=4: 2의 거듭제곱 진법 (less-than 검사 없음)."""
    return MastermindCircuit(GameConfig(base=8, length=4))


class TestOtherConfigs:
    def test_base6_honest(self, base6):
        solution = [5, 0, 3, 3]
        for guess in ([5, 0, 3, 3], [3, 3, 5, 0], [1, 1, 1, 1], [3, 5, 0, 2]):
            assert base6.evaluate(round_inputs(solution, 99, guess)).satisfied

    def test_base6_digit_equal_to_base_rejected(self, base6):
        inputs = round_inputs([5, 0, 3, 3], 99, [6, 0, 3, 3])
        assert base6.evaluate(inputs).violations == [RANGE_GUESS]

    def test_base8_honest_and_range(self, base8):
        assert base8.evaluate(round_inputs([7, 0, 7, 1], 1, [0, 7, 7, 2])).satisfied
        assert base8.evaluate(round_inputs([7, 0, 7, 1], 1, [8, 7, 7, 2])).violations == [RANGE_GUESS]

    def test_range_bits_follow_config(self, base6, base8):
        """자리마다: 비트 3개 booleanity + 재구성 2 + 단언 1 = 6 게이트.
        B=6 은 less-than (상수 덧셈 1 + 4비트 분해 8 + 반전 1 + 단언 1) 이 더해진다."""
        assert base8.config.digit_bits == base6.config.digit_bits == 3
        assert base8.circuit.group_sizes()[RANGE_GUESS] == 4 * 6
        assert base6.circuit.group_sizes()[RANGE_SOLUTION] == 4 * (6 + 11)


# ─────────────────────────────────────────────────────────────────────
# 여러 라운드
# ─────────────────────────────────────────────────────────────────────

class TestBatch:
    def test_order_preserved(self, mastermind):
        good = round_inputs(SOL, SALT, [1, 0, 0, 0])
        bad = dict(good, num_hit=2)
        verdicts = evaluate_rounds(mastermind, [good, bad, good, bad], max_workers=3)
        assert [v.satisfied for v in verdicts] == [True, False, True, False]
        assert all(isinstance(v, Verdict) for v in verdicts)
        assert verdicts[1].violations == [HIT]

    def test_empty(self, mastermind):
        assert evaluate_rounds(mastermind, []) == []

    def test_input_error_propagates(self, mastermind):
        with pytest.raises(InputError):
            evaluate_rounds(mastermind, [{"guess": [1, 0, 0, 0]}])
