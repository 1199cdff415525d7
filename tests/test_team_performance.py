"""Tests for per-team snapshots and the cross-team rollup."""

from datetime import timedelta

import pytest

from workforce_analytics.models.enums import (
    AssignmentStatus,
    CaseStatus,
    ReadinessLevel,
    TrendDirection,
)
from workforce_analytics.orchestrator.team_performance import (
    compute_multi_team_metrics,
    compute_team_performance,
    score_team,
)

from tests.conftest import (
    BASE,
    make_assignment,
    make_case,
    make_leader,
    make_submission,
    make_worker,
)

DAY = (BASE.date(), BASE.date())


@pytest.fixture
def alpha():
    leader = make_leader("tl1", name="Ana Reyes", team_name="Alpha")
    workers = [make_worker("w1"), make_worker("w2"), make_worker("w3"), make_worker("w4")]
    return leader, workers


class TestScoreTeam:
    def test_excludes_cancelled_and_unselected(self, alpha):
        leader, workers = alpha
        assignments = [
            make_assignment(worker_id="w1"),
            make_assignment(worker_id="w1", status=AssignmentStatus.CANCELLED),
            make_assignment(worker_id="w2", status=AssignmentStatus.PENDING),
            make_assignment(worker_id="w3"),
        ]
        cases = [make_case(worker_id="w3", notes="flu")]

        team = score_team(leader, workers, assignments, [], cases, DAY)

        assert team.team_name == "Alpha"
        assert team.team_leader == "Ana Reyes"
        assert team.total_assignments == 2
        assert team.completed_assignments == 1
        assert team.compliance_rate == pytest.approx(50.0)
        assert team.assigned_workers == 2
        # w4 is neither assigned nor unselected
        assert team.unassigned_workers == 1
        assert [(u.worker_id, u.reason, u.notes) for u in team.unselected_workers] == [
            ("w3", "sick", "flu")
        ]
        assert team.active_cases == 1
        assert team.trend is TrendDirection.DOWN

    def test_closed_case_does_not_unselect(self, alpha):
        leader, workers = alpha
        assignments = [make_assignment(worker_id="w3")]
        cases = [make_case(worker_id="w3", status=CaseStatus.CLOSED)]
        team = score_team(leader, workers, assignments, [], cases, DAY)
        assert team.total_assignments == 1
        assert team.unselected_workers == []
        assert team.active_cases == 0

    def test_only_window_assignments_count_toward_compliance(self, alpha):
        leader, workers = alpha
        assignments = [
            make_assignment(worker_id="w1"),
            make_assignment(
                worker_id="w2",
                assigned_date=BASE - timedelta(days=3),
                completed_at=BASE - timedelta(days=3) + timedelta(hours=5),
            ),
        ]
        team = score_team(leader, workers, assignments, [], [], DAY)
        assert team.total_assignments == 1
        assert team.activity_count == 1
        # response time uses every supplied assignment: (1h + 5h) / 2
        assert team.average_response_time == pytest.approx(3.0)

    def test_health_and_high_risk_from_readiness(self, alpha):
        leader, workers = alpha
        readiness = [
            make_submission("w1", ReadinessLevel.FIT),
            make_submission("w2", ReadinessLevel.MINOR),
            make_submission("w3", ReadinessLevel.NOT_FIT),
        ]
        team = score_team(leader, workers, [make_assignment(worker_id="w1")], readiness, [], DAY)
        assert team.health_score == pytest.approx((100 + 75 + 25) / 3)
        assert team.high_risk_reports == 1
        assert team.activity_count == 4
        assert team.compliance_rate == pytest.approx(100.0)
        assert team.trend is TrendDirection.UP

    def test_inactive_team_is_zeroed(self, alpha):
        leader, workers = alpha
        readiness = [make_submission("w1", ReadinessLevel.FIT, submitted_at=BASE - timedelta(days=2))]
        history = [make_assignment(worker_id="w1", assigned_date=BASE - timedelta(days=2))]
        team = score_team(leader, workers, history, readiness, [], DAY)
        assert team.activity_count == 0
        assert team.compliance_rate == 0.0
        assert team.health_score == 0.0
        assert team.average_response_time == 0.0
        assert team.trend is TrendDirection.STABLE
        assert team.unassigned_workers == 4

    def test_worker_count_is_active_workers(self, alpha):
        leader, workers = alpha
        workers = workers + [make_worker("w5", is_active=False)]
        team = score_team(leader, workers, [], [], [], DAY)
        assert team.worker_count == 4
        assert team.active_workers == 4


class TestComputeTeamPerformance:
    def test_one_snapshot_per_leader(self, two_team_roster):
        leaders, workers = two_team_roster
        assignments = [make_assignment(worker_id="a0"), make_assignment(worker_id="b0")]
        teams = compute_team_performance(leaders, workers, assignments, [], [], DAY)
        assert [t.team_name for t in teams] == ["Alpha", "Bravo"]
        assert [t.total_assignments for t in teams] == [1, 1]

    def test_empty_input(self):
        assert compute_team_performance([], [], [], [], [], DAY) == []


class TestMultiTeamMetrics:
    def test_rollup(self, two_team_roster):
        leaders, workers = two_team_roster
        assignments = [
            make_assignment(worker_id="a0"),
            make_assignment(worker_id="a1"),
            make_assignment(worker_id="b0"),
            make_assignment(worker_id="b1", status=AssignmentStatus.PENDING),
        ]
        teams = compute_team_performance(leaders, workers, assignments, [], [], DAY)
        metrics = compute_multi_team_metrics(teams)

        assert metrics.total_teams == 2
        assert metrics.total_team_leaders == 2
        assert metrics.total_workers == 6
        assert metrics.total_assignments == 4
        assert metrics.total_completed_assignments == 3
        assert metrics.overall_compliance_rate == pytest.approx(75.0)
        assert metrics.top_performing_team == "Alpha"
        assert metrics.needs_attention_team == "Bravo"

    def test_ties_go_to_first_team(self, two_team_roster):
        leaders, workers = two_team_roster
        teams = compute_team_performance(leaders, workers, [], [], [], DAY)
        metrics = compute_multi_team_metrics(teams)
        assert metrics.top_performing_team == "Alpha"
        assert metrics.needs_attention_team == "Alpha"

    def test_no_teams(self):
        metrics = compute_multi_team_metrics([])
        assert metrics.total_teams == 0
        assert metrics.overall_compliance_rate == 0.0
        assert metrics.top_performing_team == "N/A"
        assert metrics.needs_attention_team == "N/A"
