"""
게임 설정 (Game Configuration)
===============================

회로의 모양을 결정하는 공개 파라미터. 프로세스 시작 시 한 번 정하고 바꾸지 않는다.

  | 파라미터 | 기본값 | 의미                          | 환경 변수     |
  |----------|--------|-------------------------------|---------------|
  | base     | 10     | 자리 값의 진법 B (0..B-1)     | ZKMM_BASE     |
  | length   | 4      | 솔루션/추측 자리 수 n         | ZKMM_LENGTH   |

커밋먼트 해시의 입력은 salt + n 자리이므로 Poseidon 상태 폭은 n + 2 이다.
커밋먼트는 circomlib Poseidon 과 같아야 하므로 n + 2 가 VERIFIED_WIDTHS 에 있는
n (현재 1 과 4) 만 받는다.
"""

import os

from zkmm.poseidon import VERIFIED_WIDTHS

DEFAULT_BASE = 10
DEFAULT_LENGTH = 4

ENV_BASE = "ZKMM_BASE"
ENV_LENGTH = "ZKMM_LENGTH"


class GameConfig:
    """불변 게임 설정 (B, n).

    Raises:
        ValueError: base < 2, length < 1, 또는 n + 2 가 확인된 해시 폭이 아닐 때
    """

    __slots__ = ("_base", "_length")

    def __init__(self, base=DEFAULT_BASE, length=DEFAULT_LENGTH):
        base = int(base)
        length = int(length)
        if base < 2:
            raise ValueError(f"base 는 2 이상이어야 합니다: {base}")
        if length < 1:
            raise ValueError(f"length 는 1 이상이어야 합니다: {length}")
        if length + 2 not in VERIFIED_WIDTHS:
            supported = ", ".join(str(w - 2) for w in VERIFIED_WIDTHS)
            raise ValueError(f"length 는 {supported} 중 하나여야 합니다: {length}")
        object.__setattr__(self, "_base", base)
        object.__setattr__(self, "_length", length)

    def __setattr__(self, name, value):
        raise AttributeError("GameConfig 는 변경할 수 없습니다")

    @classmethod
    def from_env(cls, environ=None):
        """ZKMM_BASE / ZKMM_LENGTH 환경 변수에서 읽는다 (없으면 기본값)."""
        environ = os.environ if environ is None else environ
        return cls(
            base=environ.get(ENV_BASE, DEFAULT_BASE),
            length=environ.get(ENV_LENGTH, DEFAULT_LENGTH),
        )

    @property
    def base(self):
        return self._base

    @property
    def length(self):
        return self._length

    @property
    def digit_bits(self):
        """자리 값 0..B-1 을 담는 비트 수."""
        return max(1, (self._base - 1).bit_length())

    @property
    def count_bits(self):
        """개수 0..n 을 담는 비트 수."""
        return self._length.bit_length()

    @property
    def hash_arity(self):
        return self._length + 1

    def key(self):
        return (self._base, self._length)

    def __eq__(self, other):
        return isinstance(other, GameConfig) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return f"GameConfig(base={self._base}, length={self._length})"
