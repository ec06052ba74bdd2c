"""
Mastermind 데이터 직렬화/역직렬화 헬퍼
========================================

하네스 JSON 응답에 담을 수 있는 형태로 회로 객체를 변환한다.
FR 은 10진 문자열로 주고받는다 (JSON 숫자는 2^53 을 넘으면 정밀도를 잃는다).
"""

from zkmm.field import FR, CURVE_ORDER
from zkmm.errors import error_for_groups


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


# ─── FR list ───

def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [str(int(v)) for v in lst]


def deserialize_fr_list(data):
    """list[str] → list[FR]"""
    return [FR(int(s)) for s in data]


# ─── Gate ───

def serialize_gate(index, gate):
    """Gate → dict (셀렉터는 str, 배선은 변수 인덱스)"""
    return {
        "index": index,
        "group": gate.group,
        "q_L": str(int(gate.q_l)),
        "q_R": str(int(gate.q_r)),
        "q_O": str(int(gate.q_o)),
        "q_M": str(int(gate.q_m)),
        "q_C": str(int(gate.q_c)),
        "wires": list(gate.wires),
    }


# ─── MastermindCircuit ───

def serialize_params(mastermind):
    """MastermindCircuit → 공개 파라미터 dict"""
    circuit = mastermind.circuit
    return {
        "base": mastermind.config.base,
        "length": mastermind.config.length,
        "hash_arity": mastermind.config.hash_arity,
        "field_modulus": str(CURVE_ORDER),
        "num_gates": circuit.n,
        "num_variables": circuit.num_variables,
        "num_public_inputs": circuit.num_public_inputs,
        "groups": circuit.group_sizes(),
    }


# ─── Verdict ───

def serialize_verdict(verdict):
    """Verdict → dict. 만족하면 공개 신호를, 아니면 위반 그룹과 예외 이름을 담는다."""
    if verdict.satisfied:
        return {
            "satisfied": True,
            "violations": [],
            "public_signals": serialize_fr_list(verdict.public_signals),
        }
    error = error_for_groups(verdict.violations)
    return {
        "satisfied": False,
        "violations": list(verdict.violations),
        "error": type(error).__name__,
        "message": str(error),
    }
