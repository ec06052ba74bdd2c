"""
CommitmentValidator: 솔루션 커밋먼트 검사
============================================

Poseidon(salt, solution[0], ..., solution[n-1]) 를 회로 안에서 다시 계산하고
공개된 커밋먼트와 같음을 단언한다. 커밋먼트는 첫 추측 전에 공개되므로
코드메이커는 라운드 사이에 솔루션을 바꿀 수 없다.
"""

from zkmm.errors import COMMITMENT
from zkmm.poseidon import poseidon_gadget


def declare_commitment_check(circuit, salt, solution, commitment):
    with circuit.group(COMMITMENT):
        digest = poseidon_gadget(circuit, [salt] + list(solution))
        circuit.assert_equal(digest, commitment)
    return digest
