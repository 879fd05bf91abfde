# app/services/vote_ledger.py
from typing import Dict, Iterable, Iterator, List, Optional

from app.core.errors import DuplicateVoter
from app.schemas.game import Ballot

class VoteLedger:
    """
    투표 장부
    - 추가만 가능 (수정/삭제 없음, 리셋 시 통째로 교체)
    - 투표자 ID로 중복 체크 (dict 조회)
    - 리스트 순서 = 투표 순서
    """

    def __init__(self, ballots: Iterable[Ballot] = ()):
        self._ballots: List[Ballot] = []
        self._by_voter: Dict[str, Ballot] = {}
        for ballot in ballots:
            self.append(ballot)

    def has_voted(self, voter_id: Optional[str]) -> bool:
        if not voter_id:
            return False
        return voter_id in self._by_voter

    def get(self, voter_id: str) -> Optional[Ballot]:
        return self._by_voter.get(voter_id)

    def append(self, ballot: Ballot) -> None:
        """투표 추가 (같은 투표자면 DuplicateVoter)"""
        if ballot.voter_id in self._by_voter:
            raise DuplicateVoter()
        self._ballots.append(ballot)
        self._by_voter[ballot.voter_id] = ballot

    def ballots(self) -> List[Ballot]:
        return list(self._ballots)

    def __len__(self) -> int:
        return len(self._ballots)

    def __iter__(self) -> Iterator[Ballot]:
        return iter(list(self._ballots))
