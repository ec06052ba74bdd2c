"""
회로 밖 채점 (Off-circuit scoring)
===================================

정직한 코드메이커가 라운드마다 공개할 값을 계산하는 헬퍼.
회로는 이 값들이 맞는지만 검사하고, 계산 자체는 여기서 한다.

  | 함수          | 결과                                         |
  |---------------|----------------------------------------------|
  | score         | (hit, blow)                                  |
  | digit_sum     | Σ solution                                   |
  | commit        | Poseidon(salt, solution)                     |
  | random_salt   | [0, p) 균등 난수                             |
  | round_inputs  | 회로에 그대로 넣을 수 있는 입력 dict         |

예시:
    >>> score([1, 0, 0, 0], [1, 5, 1, 7])
    (1, 0)
    >>> score([1, 2, 3, 4], [1, 3, 2, 2])
    (1, 2)
"""

import secrets
from collections import Counter

from zkmm.field import CURVE_ORDER, to_fr
from zkmm.poseidon import poseidon_hash


def score(guess, solution):
    """표준 Mastermind 채점: (자리까지 맞은 수, 색만 맞은 수)."""
    guess = [int(g) for g in guess]
    solution = [int(s) for s in solution]
    if len(guess) != len(solution):
        raise ValueError(f"길이가 다릅니다: guess={len(guess)}, solution={len(solution)}")

    hit = 0
    guess_rest = Counter()
    solution_rest = Counter()
    for g, s in zip(guess, solution):
        if g == s:
            hit += 1
        else:
            guess_rest[g] += 1
            solution_rest[s] += 1

    blow = sum(min(count, solution_rest[color]) for color, count in guess_rest.items())
    return hit, blow


def digit_sum(solution):
    return sum(int(s) for s in solution)


def commit(salt, solution):
    """솔루션 커밋먼트 Poseidon(salt, solution[0], ..., solution[n-1])."""
    return poseidon_hash([salt] + list(solution))


def random_salt():
    return secrets.randbelow(CURVE_ORDER)


def round_inputs(solution, salt, guess):
    """정직하게 계산한 한 라운드 입력 (정규 이름)."""
    hit, blow = score(guess, solution)
    return {
        "guess": list(guess),
        "num_hit": hit,
        "num_blow": blow,
        "solution_sum": digit_sum(solution),
        "solution_commitment": int(commit(salt, solution)),
        "solution": list(solution),
        "salt": int(to_fr(salt)),
    }
