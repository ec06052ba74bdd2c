"""
여러 라운드 병렬 평가
======================

라운드끼리는 공유 상태가 없다 (같은 MastermindCircuit 을 읽기만 한다).
스레드 풀에 제출하고 결과는 제출 순서대로 돌려준다.
입력 형식 오류(InputError)는 해당 라운드의 future 에서 그대로 전파된다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

logger = logging.getLogger(__name__)


def evaluate_rounds(mastermind, rounds, max_workers=None):
    """rounds 의 각 입력을 mastermind.evaluate 로 평가한다.

    Args:
        mastermind: MastermindCircuit
        rounds: 입력 매핑 리스트
        max_workers: 스레드 수 (None 이면 ThreadPoolExecutor 기본값)

    Returns:
        list[Verdict]: rounds 와 같은 순서
    """
    rounds = list(rounds)
    if not rounds:
        return []

    verdicts = [None] * len(rounds)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(mastermind.evaluate, inputs): i
            for i, inputs in enumerate(rounds)
        }
        for future in as_completed(future_to_index):
            verdicts[future_to_index[future]] = future.result()

    rejected = sum(1 for v in verdicts if not v.satisfied)
    logger.debug("Evaluated %d rounds, %d rejected", len(verdicts), rejected)
    return verdicts
