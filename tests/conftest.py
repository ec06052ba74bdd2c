import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkmm.config import GameConfig
from zkmm.mastermind import MastermindCircuit
from zkmm.scoring import commit, digit_sum


# ── 테스트 상수 ──
SOL = [1, 5, 1, 7]
SALT = 352352
GUESS = [1, 0, 0, 0]


@pytest.fixture(scope="session")
def mastermind():
    """기본 설정 (B=10, n=4) 회로. 만드는 비용이 크므로 세션 전체에서 공유한다."""
    return MastermindCircuit.for_config(GameConfig(base=10, length=4))


@pytest.fixture(scope="session")
def sol_hash():
    """Poseidon(SALT, SOL)."""
    return int(commit(SALT, SOL))


@pytest.fixture
def honest_input(sol_hash):
    """S=[1,5,1,7], salt=352352, G=[1,0,0,0] 의 올바른 입력 (circom 신호 이름)."""
    return {
        "pubGuess": list(GUESS),
        "pubNumHit": 1,
        "pubNumBlow": 0,
        "pubSolnSum": digit_sum(SOL),
        "pubSolnHash": sol_hash,
        "privSoln": list(SOL),
        "privSalt": SALT,
    }
