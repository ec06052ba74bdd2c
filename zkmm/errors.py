"""
오류 분류 (Error Taxonomy)
===========================

위트니스가 제약을 만족하지 못하면 결과는 언제나 같다: 증명을 만들 수 없다.
진단을 위해 위반된 제약 그룹에 따라 예외 클래스를 나눈다.

  | 그룹            | 예외                |
  |-----------------|---------------------|
  | range.guess     | RangeViolation      |
  | range.solution  | RangeViolation      |
  | sum             | SumMismatch         |
  | commitment      | CommitmentMismatch  |
  | hit             | HitCountMismatch    |
  | blow            | BlowCountMismatch   |

모든 게이트를 평가한 뒤 첫 번째(정규 순서) 위반 그룹의 예외를 던지고,
위반된 그룹 전체는 violations 속성에 담는다.
"""

RANGE_GUESS = "range.guess"
RANGE_SOLUTION = "range.solution"
SUM = "sum"
COMMITMENT = "commitment"
HIT = "hit"
BLOW = "blow"

# 진단 보고용 정규 순서
GROUP_ORDER = (RANGE_GUESS, RANGE_SOLUTION, SUM, COMMITMENT, HIT, BLOW)


class InputError(ValueError):
    """하네스 입력이 빠졌거나 형식이 잘못됨 (제약 위반과는 다르다)."""


class WitnessGenerationError(Exception):
    """위트니스가 하나 이상의 제약 그룹을 위반함."""

    group = None

    def __init__(self, violations, message=None):
        self.violations = list(violations)
        super().__init__(message or f"unsatisfied constraint groups: {', '.join(self.violations)}")


class RangeViolation(WitnessGenerationError):
    """자리 값이 [0, B-1] 밖에 있음."""

    def __init__(self, violations, target, message=None):
        self.target = target
        self.group = f"range.{target}"
        super().__init__(violations, message)


class SumMismatch(WitnessGenerationError):
    group = SUM


class CommitmentMismatch(WitnessGenerationError):
    group = COMMITMENT


class HitCountMismatch(WitnessGenerationError):
    group = HIT


class BlowCountMismatch(WitnessGenerationError):
    group = BLOW


_ERRORS = {
    SUM: SumMismatch,
    COMMITMENT: CommitmentMismatch,
    HIT: HitCountMismatch,
    BLOW: BlowCountMismatch,
}


def order_groups(groups):
    """그룹 태그를 정규 순서로 정렬한다 (알 수 없는 태그는 뒤로)."""
    known = [g for g in GROUP_ORDER if g in groups]
    return known + [g for g in groups if g not in GROUP_ORDER]


def error_for_groups(groups):
    """위반 그룹 목록에서 첫 번째 그룹에 해당하는 예외를 만든다."""
    groups = order_groups(groups)
    if not groups:
        raise ValueError("위반 그룹이 없습니다")
    first = groups[0]
    if first == RANGE_GUESS:
        return RangeViolation(groups, "guess")
    if first == RANGE_SOLUTION:
        return RangeViolation(groups, "solution")
    return _ERRORS.get(first, WitnessGenerationError)(groups)
