"""
Mastermind Flask Blueprint: 하네스 엔드포인트
================================================

"입력을 제출하고 판정을 받는다" 외의 기능은 없다.

  | 메서드 | 경로      | 본문                  | 응답                                  |
  |--------|-----------|-----------------------|---------------------------------------|
  | GET    | /params   | -                     | base, length, 게이트/변수 수          |
  | GET    | /gates    | ?group=sum            | 게이트 테이블 (셀렉터, 배선)          |
  | POST   | /commit   | {solution, salt}      | {solution_commitment, solution_sum}   |
  | POST   | /witness  | 라운드 입력 (7개 필드) | 200 만족 / 422 위반 / 400 형식 오류   |
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from zkmm.config import GameConfig
from zkmm.errors import InputError
from zkmm.field import to_fr
from zkmm.mastermind import MastermindCircuit
from zkmm.scoring import commit, digit_sum

from serializers import serialize_fr, serialize_gate, serialize_params, serialize_verdict

logger = logging.getLogger(__name__)

mastermind_bp = Blueprint('mastermind', __name__)


def get_circuit():
    """앱 설정의 GameConfig 에 해당하는 회로 (프로세스 전역 캐시)."""
    config = current_app.config.get("GAME_CONFIG") or GameConfig.from_env()
    return MastermindCircuit.for_config(config)


def bad_request(message):
    return jsonify({"error": "InputError", "message": message}), 400


def read_json_object():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InputError("JSON 객체 본문이 필요합니다")
    return body


# ──────────────────────────────────────────────────────────────
# 공개 파라미터
# ──────────────────────────────────────────────────────────────

@mastermind_bp.route("/params")
def params():
    """회로 공개 파라미터."""
    return jsonify(serialize_params(get_circuit()))


@mastermind_bp.route("/gates")
def gates():
    """게이트 테이블. group 쿼리로 한 그룹만 볼 수 있다."""
    group = request.args.get("group")
    circuit = get_circuit().circuit
    table = [
        serialize_gate(i, gate)
        for i, gate in enumerate(circuit.gates)
        if group is None or gate.group == group
    ]
    return jsonify({"group": group, "gates": table})


# ──────────────────────────────────────────────────────────────
# 코드메이커 헬퍼
# ──────────────────────────────────────────────────────────────

@mastermind_bp.route("/commit", methods=["POST"])
def commit_solution():
    """솔루션 커밋먼트와 자리 합을 계산한다 (게임 시작 전 한 번)."""
    try:
        body = read_json_object()
        if "solution" not in body or "salt" not in body:
            raise InputError("solution 과 salt 가 필요합니다")
        length = get_circuit().config.length
        solution = body["solution"]
        if not isinstance(solution, list) or len(solution) != length:
            raise InputError(f"solution: 길이 {length} 의 배열이어야 합니다")
        solution = [int(to_fr(v)) for v in solution]
        salt = to_fr(body["salt"])
    except (TypeError, ValueError) as e:
        # InputError 포함
        return bad_request(str(e))

    return jsonify({
        "solution_commitment": serialize_fr(commit(salt, solution)),
        "solution_sum": str(digit_sum(solution)),
    })


# ──────────────────────────────────────────────────────────────
# 위트니스 판정
# ──────────────────────────────────────────────────────────────

@mastermind_bp.route("/witness", methods=["POST"])
def witness():
    """한 라운드 입력으로 위트니스를 계산하고 제약 만족 여부를 판정한다."""
    try:
        verdict = get_circuit().evaluate(read_json_object())
    except InputError as e:
        return bad_request(str(e))

    if verdict.satisfied:
        logger.info("Witness accepted")
        return jsonify(serialize_verdict(verdict)), 200

    logger.warning("Witness rejected: %s", ", ".join(verdict.violations))
    return jsonify(serialize_verdict(verdict)), 422
