"""결과 집계 테스트"""
from app.schemas.game import Ballot, ResultEntry
from app.services import results_service


def ballots(*pairs):
    return [
        Ballot(voter_id=f"voter-{i}", mr_name=mr, mrs_name=mrs, timestamp=i)
        for i, (mr, mrs) in enumerate(pairs)
    ]


class TestTally:
    def test_counts_per_category(self) -> None:
        mr, mrs = results_service.tally(ballots(("X", "A"), ("Y", "A"), ("X", "B")))
        assert mr == {"X": 2, "Y": 1}
        assert mrs == {"A": 2, "B": 1}

    def test_names_trimmed_but_case_kept(self) -> None:
        mr, _ = results_service.tally(ballots(("  John ", "A"), ("John", "A"), ("john", "A")))
        assert mr == {"John": 2, "john": 1}

    def test_first_appearance_order_kept(self) -> None:
        mr, _ = results_service.tally(ballots(("C", "A"), ("A", "A"), ("B", "A")))
        assert list(mr) == ["C", "A", "B"]


class TestRank:
    def test_descending_by_count(self) -> None:
        # A, B, C, A 순서로 투표, 한 명만 Y
        data = ballots(("X", "M"), ("X", "M"), ("Y", "M"), ("X", "M"))
        result = results_service.aggregate(data)
        assert result.mr == [ResultEntry(name="X", count=3), ResultEntry(name="Y", count=1)]

    def test_ties_broken_by_first_appearance(self) -> None:
        ranked = results_service.rank({"Late": 1, "Early": 2, "Other": 2})
        assert [e.name for e in ranked] == ["Early", "Other"]

        ranked = results_service.rank({"B": 1, "A": 1, "C": 1})
        assert [e.name for e in ranked] == ["B", "A"]

    def test_only_top_two(self) -> None:
        ranked = results_service.rank({"A": 5, "B": 4, "C": 3})
        assert len(ranked) == 2

    def test_single_candidate(self) -> None:
        assert results_service.rank({"Solo": 1}) == [ResultEntry(name="Solo", count=1)]


class TestAggregate:
    def test_no_votes(self) -> None:
        result = results_service.aggregate([])
        assert result.mr == []
        assert result.mrs == []
        assert result.total_votes == 0

    def test_total_votes(self) -> None:
        result = results_service.aggregate(ballots(("X", "A"), ("Y", "B"), ("X", "B")))
        assert result.total_votes == 3
        assert result.mrs[0] == ResultEntry(name="B", count=2)
