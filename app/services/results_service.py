# app/services/results_service.py
from typing import Dict, Iterable, List, Tuple

from app.schemas.game import Ballot, GameResults, ResultEntry

TOP_N = 2  # 1위 + 2위

def tally(ballots: Iterable[Ballot]) -> Tuple[Dict[str, int], Dict[str, int]]:
    """
    카테고리별 득표 집계
    - 앞뒤 공백만 제거, 대소문자는 구분
    - dict는 처음 등장한 순서를 유지
    """
    mr_counts: Dict[str, int] = {}
    mrs_counts: Dict[str, int] = {}

    for ballot in ballots:
        mr = ballot.mr_name.strip()
        mrs = ballot.mrs_name.strip()
        mr_counts[mr] = mr_counts.get(mr, 0) + 1
        mrs_counts[mrs] = mrs_counts.get(mrs, 0) + 1

    return mr_counts, mrs_counts

def rank(counts: Dict[str, int], limit: int = TOP_N) -> List[ResultEntry]:
    """득표 내림차순 정렬 (동률이면 먼저 등장한 후보 우선, sorted는 stable)"""
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [ResultEntry(name=name, count=count) for name, count in ordered[:limit]]

def aggregate(ballots: Iterable[Ballot]) -> GameResults:
    """최종 결과 계산"""
    ballots = list(ballots)
    mr_counts, mrs_counts = tally(ballots)

    return GameResults(
        mr=rank(mr_counts),
        mrs=rank(mrs_counts),
        total_votes=len(ballots)
    )
