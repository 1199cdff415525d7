"""Tests for team leader management scoring."""

from datetime import datetime, timedelta, timezone

import pytest

from workforce_analytics.engine.team_leader import (
    compute_team_leader_performance,
    efficiency_rating,
    is_eligible,
    leader_grade,
    response_time_score,
    score_team_leader,
)
from workforce_analytics.models.enums import AssignmentStatus, ReadinessLevel, TrendDirection
from workforce_analytics.models.records import AssignmentRecord

from tests.conftest import BASE, make_assignment, make_leader, make_submission, make_worker

NOW = BASE + timedelta(hours=48)


class TestEligibility:
    def test_completed_is_eligible_before_deadline(self):
        record = make_assignment()
        assert is_eligible(record, BASE + timedelta(hours=2))

    def test_pending_within_grace_window_is_not_eligible(self):
        record = make_assignment(status=AssignmentStatus.PENDING)
        assert not is_eligible(record, BASE + timedelta(hours=23))

    def test_pending_past_deadline_is_eligible(self):
        record = make_assignment(status=AssignmentStatus.PENDING)
        assert is_eligible(record, BASE + timedelta(hours=24))

    def test_missing_due_time_uses_assigned_plus_24h(self):
        record = make_assignment(status=AssignmentStatus.PENDING, due_time=None)
        assert not is_eligible(record, BASE + timedelta(hours=23))
        assert is_eligible(record, BASE + timedelta(hours=25))

    def test_cancelled_never_eligible(self):
        record = make_assignment(status=AssignmentStatus.CANCELLED)
        assert not is_eligible(record, NOW)


class TestSubScores:
    def test_efficiency_overdue_penalty(self):
        # 9 completed, 1 overdue of 10: 90 - 1 * 10 * 1.5
        assert efficiency_rating(9, 1, 10) == pytest.approx(75.0)

    def test_efficiency_floored_at_zero(self):
        assert efficiency_rating(1, 3, 4) == 0.0

    def test_efficiency_without_eligible_work(self):
        assert efficiency_rating(0, 0, 0) == 0.0

    @pytest.mark.parametrize(
        "hours, score",
        [(0, 0.0), (1, 100.0), (24, 100.0), (24.5, 85.0), (48, 85.0), (72, 70.0), (96, 55.0), (97, 40.0)],
    )
    def test_response_time_steps(self, hours, score):
        assert response_time_score(hours) == score

    def test_grade_bands(self):
        assert leader_grade(90, True) == "A"
        assert leader_grade(80, True) == "B"
        assert leader_grade(70, True) == "C"
        assert leader_grade(60, True) == "D"
        assert leader_grade(59.9, True) == "F"
        assert leader_grade(95, False) == "N/A"


class TestScoreTeamLeader:
    def test_efficiency_scenario(self):
        leader = make_leader()
        roster = [make_worker("w1")]
        records = [make_assignment(worker_id="w1") for _ in range(9)] + [
            make_assignment(worker_id="w1", status=AssignmentStatus.OVERDUE)
        ]
        perf = score_team_leader(leader, records, [], roster, NOW)
        assert perf.eligible_assignments == 10
        assert perf.completed_assignments == 9
        assert perf.overdue_assignments == 1
        assert perf.efficiency_rating == pytest.approx(75.0)

    def test_fully_healthy_team(self):
        leader = make_leader(name="Ana Reyes", team_name="Alpha")
        roster = [make_worker(f"w{i}") for i in range(5)]
        records = [make_assignment(worker_id=w.id) for w in roster]
        readiness = [make_submission(worker_id=w.id) for w in roster]

        perf = score_team_leader(leader, records, readiness, roster, NOW)

        assert perf.leader_name == "Ana Reyes"
        assert perf.team_name == "Alpha"
        assert perf.team_size == 5
        assert perf.efficiency_rating == pytest.approx(100.0)
        assert perf.response_time_score == 100.0
        assert perf.quality_score == pytest.approx(100.0)
        assert perf.management_score == pytest.approx(100.0)
        assert perf.worker_satisfaction == pytest.approx(92.0)
        assert perf.overall_grade == "A"
        assert perf.trend_direction is TrendDirection.UP
        assert perf.strengths == [
            "Excellent completion rate",
            "Fast response time",
            "High quality outcomes",
            "Outstanding worker health",
        ]
        assert perf.improvement_areas == []

    def test_management_score_components(self):
        leader = make_leader()
        roster = [make_worker("w1"), make_worker("w2"), make_worker("w3")]
        records = [
            make_assignment(worker_id="w1", completed_at=BASE + timedelta(hours=30)),
            make_assignment(worker_id="w1", status=AssignmentStatus.OVERDUE),
        ]
        readiness = [
            make_submission("w1", ReadinessLevel.FIT),
            make_submission("w2", ReadinessLevel.NOT_FIT),
        ]
        perf = score_team_leader(leader, records, readiness, roster, NOW)

        # efficiency: 50 - 1 * 50 * 1.5 -> floored at 0
        assert perf.efficiency_rating == 0.0
        # 30h turnaround
        assert perf.response_time_score == 85.0
        # readiness quality 50*0.8 + 20 = 60; coverage 1/3
        expected_quality = 60 * 0.7 + (100 / 3) * 0.3
        assert perf.quality_score == pytest.approx(expected_quality)
        expected = 0 * 0.45 + 85 * 0.30 + expected_quality * 0.15 + 10
        assert perf.management_score == pytest.approx(expected)
        assert perf.overall_grade == "F"
        assert perf.trend_direction is TrendDirection.DOWN
        assert "Assignment completion rate" in perf.improvement_areas
        assert "Team size optimization" in perf.improvement_areas
        assert "Fast response time" in perf.strengths

    def test_pending_work_in_grace_window_does_not_penalize(self):
        leader = make_leader()
        roster = [make_worker("w1")]
        records = [
            make_assignment(worker_id="w1"),
            make_assignment(
                worker_id="w1",
                status=AssignmentStatus.PENDING,
                assigned_date=NOW - timedelta(hours=1),
            ),
        ]
        perf = score_team_leader(leader, records, [], roster, NOW)
        assert perf.eligible_assignments == 1
        assert perf.efficiency_rating == pytest.approx(100.0)

    def test_cancelled_excluded_from_coverage(self):
        leader = make_leader()
        roster = [make_worker("w1"), make_worker("w2")]
        records = [
            make_assignment(worker_id="w1"),
            make_assignment(worker_id="w2", status=AssignmentStatus.CANCELLED),
        ]
        perf = score_team_leader(leader, records, [], roster, NOW)
        assert perf.eligible_assignments == 1
        # no readiness submissions: quality is coverage only (1 of 2)
        assert perf.quality_score == pytest.approx(50.0 * 0.3)

    def test_inactive_leader(self):
        leader = make_leader()
        perf = score_team_leader(leader, [], [], [make_worker("w1")], NOW)
        assert perf.management_score == 0.0
        assert perf.worker_satisfaction == 0.0
        assert perf.overall_grade == "N/A"
        assert perf.strengths == []
        assert perf.improvement_areas == [
            "Start assigning work readiness assessments",
            "Begin team management activities",
        ]

    def test_high_risk_management_flag(self):
        leader = make_leader()
        roster = [make_worker(f"w{i}") for i in range(4)]
        readiness = [make_submission(f"w{i}", ReadinessLevel.NOT_FIT) for i in range(4)]
        perf = score_team_leader(leader, [make_assignment(worker_id="w0")], readiness, roster, NOW)
        assert "High-risk worker management" in perf.improvement_areas

    def test_large_team_strength(self):
        leader = make_leader()
        roster = [make_worker(f"w{i}") for i in range(8)]
        perf = score_team_leader(leader, [make_assignment(worker_id="w0")], [], roster, NOW)
        assert "Large team management" in perf.strengths
        assert "Team size optimization" not in perf.improvement_areas

    def test_other_teams_records_ignored(self):
        leader = make_leader("tl1")
        roster = [make_worker("w1", "tl1"), make_worker("x1", "tl2")]
        records = [make_assignment(worker_id="x1", status=AssignmentStatus.OVERDUE)]
        perf = score_team_leader(leader, records, [], roster, NOW)
        assert perf.team_size == 1
        assert perf.eligible_assignments == 0


class TestComputeTeamLeaderPerformance:
    def test_one_result_per_leader(self, two_team_roster):
        leaders, workers = two_team_roster
        records = [make_assignment(worker_id="a0"), make_assignment(worker_id="b0")]
        result = compute_team_leader_performance(records, [], workers, NOW, leaders)
        assert [p.leader_id for p in result] == ["tl1", "tl2"]
        assert all(p.eligible_assignments == 1 for p in result)

    def test_leaders_derived_from_roster(self, two_team_roster):
        _, workers = two_team_roster
        result = compute_team_leader_performance([], [], workers, NOW)
        assert [p.leader_id for p in result] == ["tl1", "tl2"]
        assert all(p.team_size == 3 for p in result)

    def test_empty_input(self):
        assert compute_team_leader_performance([], [], [], NOW) == []

    def test_idempotent(self, two_team_roster):
        leaders, workers = two_team_roster
        records = [make_assignment(worker_id="a0"), make_assignment(worker_id="b1")]
        first = compute_team_leader_performance(records, [], workers, NOW, leaders)
        second = compute_team_leader_performance(records, [], workers, NOW, leaders)
        assert first == second


class TestMixedTimezones:
    def test_naive_records_scored_against_aware_now(self):
        record = AssignmentRecord(
            id="a1",
            worker_id="w1",
            status=AssignmentStatus.PENDING,
            assigned_date=datetime(2024, 3, 4, 8),
            due_time=datetime(2024, 3, 5, 8),
        )
        (perf,) = compute_team_leader_performance(
            [record], [], [make_worker("w1", "tl1")], datetime(2024, 3, 6, tzinfo=timezone.utc)
        )
        assert perf.eligible_assignments == 1
        assert perf.overdue_assignments == 1

    def test_naive_now(self):
        record = make_assignment(status=AssignmentStatus.PENDING)
        assert is_eligible(record, (BASE + timedelta(hours=30)).replace(tzinfo=None))
