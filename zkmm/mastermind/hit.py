"""
HitCounter: 자리까지 맞춘 개수
================================

  eqᵢ = is_equal(guess[i], solution[i])      (is-zero 가젯)
  Σ eqᵢ == num_hit

eqᵢ 변수들은 BlowCounter 가 그대로 다시 읽는다 (같은 위트니스 값, 게이트 중복 없음).
"""

from zkmm.errors import HIT
from zkmm.gadgets import is_equal, sum_of


def declare_hit_counter(circuit, guess, solution, num_hit):
    """히트 제약을 선언하고 자리별 일치 지시 변수 eqᵢ 리스트를 돌려준다."""
    with circuit.group(HIT):
        matches = [is_equal(circuit, g, s) for g, s in zip(guess, solution)]
        circuit.assert_equal(sum_of(circuit, matches), num_hit)
    return matches
