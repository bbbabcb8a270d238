# -*- coding: utf-8 -*-
"""
Tests for the stage cascade: convergence, conservation, stage cap and
failure reporting.
"""
import logging
import pytest
import numpy as np
from numpy.testing import assert_allclose

from llextraction.core.validation import (
    ConvergenceError, ConvergenceFailure, DegenerateLine, DegenerateMassBalance,
    GeometryError, IllDefinedFit, InputError,
)
from llextraction.separations.extraction.cascade import (
    CascadeResult, CascadeSpec, FeedStream, StageCascade, ll_stages,
)
from llextraction.separations.extraction.equilibrium import LLEquilibriumData
from llextraction.separations.extraction.reference_data import (
    EXTRACT_FEED, RAFFINATE_FEED, XD_EQ, XS_EQ, YD_EQ, YS_EQ, reference_spec,
)
from llextraction.separations.extraction.stage import BoundedBrentMinimizer


def test_reference_case_converges(reference_result):
    result = reference_result
    assert isinstance(result, CascadeResult)
    assert result.converged
    assert 1 < result.N < 20
    assert result.R[-1, 0] <= 0.06
    assert result.R[-2, 0] > 0.06


def test_array_lengths(reference_result):
    n = reference_result.N + 1
    for arr in (reference_result.R, reference_result.E, reference_result.M):
        assert arr.shape == (n, 2)
    assert reference_result.R_flow.shape == (n,)
    assert reference_result.E_flow.shape == (n,)
    assert len(reference_result.objective_history) == n - 1


def test_initial_state(reference_result):
    first = reference_result.records[0]
    assert first.stage == 0
    assert first.R == (0.45, 0.0)
    assert first.E == (0.0, 1.0)
    assert first.M == pytest.approx((0.36, 0.20))
    assert first.R_flow == 800.0
    assert first.E_flow == 200.0
    assert first.objective is None


def test_raffinate_solute_strictly_decreasing(reference_result):
    assert np.all(np.diff(reference_result.R[:, 0]) < 0)


def test_extract_solute_decreasing_after_first_stage(reference_result):
    assert np.all(np.diff(reference_result.E[1:, 0]) <= 0)


def test_mass_conservation(reference_result):
    Rf, Ef = reference_result.R_flow, reference_result.E_flow
    E0 = EXTRACT_FEED.flow
    assert_allclose(Rf[:-1] + E0, Rf[1:] + Ef[1:], rtol=1e-12)
    assert_allclose(reference_result.mass_balance_errors(), 0.0, atol=1e-9)


def test_solute_conservation(reference_result):
    assert_allclose(reference_result.solute_balance_errors(), 0.0, atol=1e-9)


def test_mixing_points_follow_lever_rule(reference_result):
    E0 = EXTRACT_FEED.flow
    for rec in reference_result.records[1:]:
        total = rec.R_flow + E0
        assert rec.M.solute == pytest.approx((rec.R_flow * rec.R.solute + E0 * EXTRACT_FEED.solute) / total)
        assert rec.M.solvent == pytest.approx((rec.R_flow * rec.R.solvent + E0 * EXTRACT_FEED.solvent) / total)


def test_stage_compositions_follow_correlations(reference_result):
    model = reference_result.model
    for rec in reference_result.records[1:]:
        assert rec.E.solvent == pytest.approx(model.extract(rec.E.solute))
        assert rec.R.solute == pytest.approx(model.tie_line(rec.E.solute))
        assert rec.R.solvent == pytest.approx(model.raffinate(rec.R.solute))


def test_deterministic(reference_result):
    again = StageCascade(reference_spec()).run()
    assert again.N == reference_result.N
    assert np.array_equal(again.R, reference_result.R)
    assert np.array_equal(again.E_flow, reference_result.E_flow)


def test_stage_cap_raises_convergence_failure():
    with pytest.raises(ConvergenceFailure) as info:
        StageCascade(reference_spec(max_stages=2)).run()
    exc = info.value
    assert isinstance(exc, ConvergenceError)
    assert exc.stage == 2
    assert exc.result is not None
    assert not exc.result.converged
    assert exc.result.N == 2
    assert exc.result.R[-1, 0] > 0.06


def test_stage_cap_without_raising(caplog):
    with caplog.at_level(logging.WARNING, logger="llextraction"):
        result = StageCascade(reference_spec(max_stages=2, raise_on_failure=False)).run()
    assert not result.converged
    assert result.N == 2
    assert "not reached" in caplog.text


def test_unreachable_target_stops_at_default_cap():
    # raffinate solute levels off at the tie-line end for a solute-free extract
    spec = reference_spec(xS_target=0.0)
    assert spec.max_stages == 130
    with pytest.raises(ConvergenceFailure) as info:
        StageCascade(spec).run()
    exc = info.value
    assert exc.stage == 130
    result = exc.result
    assert not result.converged
    assert result.N == 130
    tail = result.R[-3:, 0]
    assert np.ptp(tail) < 1e-6
    assert_allclose(tail, result.model.tie_line(0.0), atol=1e-3)
    assert np.all(tail > 0.0)


def test_cap_equal_to_required_stages(reference_result):
    result = StageCascade(reference_spec(max_stages=reference_result.N)).run()
    assert result.converged
    assert result.N == reference_result.N


def test_looser_target_needs_fewer_stages(reference_result):
    result = StageCascade(reference_spec(xS_target=0.2)).run()
    assert result.converged
    assert result.N < reference_result.N
    assert_allclose(result.R[: result.N + 1], reference_result.R[: result.N + 1])


class RecordingMinimizer(BoundedBrentMinimizer):
    def __init__(self):
        super().__init__()
        self.calls = []

    def minimize(self, f, lower, upper):
        self.calls.append((lower, upper))
        return super().minimize(f, lower, upper)


def test_search_interval_policy():
    minimizer = RecordingMinimizer()
    result = StageCascade(reference_spec(minimizer=minimizer)).run()
    assert len(minimizer.calls) == result.N
    assert minimizer.calls[0] == (0.0, 1.0)
    for n, (lower, upper) in enumerate(minimizer.calls[1:], start=1):
        assert lower == 0.0
        assert upper == result.E[n, 0]


def test_degenerate_mass_balance_reports_stage():
    # identical phase solute fractions: every tie line is vertical
    spec = CascadeSpec(
        equilibrium=LLEquilibriumData(
            [0.1, 0.2, 0.3], [0.01, 0.02, 0.03],
            [0.1, 0.2, 0.3], [0.8, 0.7, 0.6],
        ),
        raffinate_feed=RAFFINATE_FEED,
        extract_feed=EXTRACT_FEED,
        xS_target=0.06,
        degree=1,
    )
    with pytest.raises(DegenerateMassBalance) as info:
        StageCascade(spec).run()
    assert info.value.stage == 1
    assert "stage 1" in str(info.value)


def test_geometry_failure_reports_stage():
    # identical phase tables: the trial raffinate and extract points coincide
    table = [0.1, 0.2, 0.3]
    spec = CascadeSpec(
        equilibrium=LLEquilibriumData(table, table, table, table),
        raffinate_feed=RAFFINATE_FEED,
        extract_feed=EXTRACT_FEED,
        xS_target=0.06,
        degree=1,
    )
    with pytest.raises(GeometryError) as info:
        StageCascade(spec).run()
    assert isinstance(info.value, DegenerateLine)
    assert info.value.stage == 1
    assert "stage 1" in str(info.value)


def test_ill_defined_fit_fails_before_stages():
    spec = CascadeSpec(
        equilibrium=LLEquilibriumData(
            [0.2, 0.2, 0.2], [0.01, 0.02, 0.03],
            [0.3, 0.4, 0.5], [0.6, 0.5, 0.4],
        ),
        raffinate_feed=RAFFINATE_FEED,
        extract_feed=EXTRACT_FEED,
        xS_target=0.06,
        degree=2,
    )
    with pytest.raises(IllDefinedFit) as info:
        StageCascade(spec)
    assert info.value.stage is None


@pytest.mark.parametrize("overrides", [
    dict(xS_target=0.45),
    dict(xS_target=0.6),
    dict(xS_target=-0.01),
    dict(degree=12),
    dict(degree=0),
    dict(max_stages=0),
    dict(max_stages=2.5),
    dict(max_stages=float("inf")),
    dict(tol=float("inf")),
    dict(tol=0.0),
])
def test_invalid_specification(overrides):
    with pytest.raises(InputError):
        StageCascade(reference_spec(**overrides))


def test_feed_validation():
    with pytest.raises(InputError):
        FeedStream(flow=0.0, solute=0.45, solvent=0.0)
    with pytest.raises(InputError):
        FeedStream(flow=100.0, solute=0.7, solvent=0.5)
    with pytest.raises(InputError):
        FeedStream(flow=100.0, solute=-0.1, solvent=0.5)
    with pytest.raises(InputError):
        FeedStream(flow=float("inf"), solute=0.3, solvent=0.1)
    feed = FeedStream(flow=100.0, solute=0.3, solvent=0.1)
    assert feed.point == (0.3, 0.1)
    assert feed.point.diluent == pytest.approx(0.6)
    assert feed.to_dict() == {"flow": 100.0, "solute": 0.3, "solvent": 0.1}


def test_solve_returns_summary(reference_result):
    summary = StageCascade(reference_spec()).solve()
    assert summary["converged"] is True
    assert summary["N_stages"] == reference_result.N
    assert len(summary["stages"]) == reference_result.N + 1
    assert len(summary["flows"]["R"]) == reference_result.N + 1
    assert summary["verification"]["max_mass_balance_error"] < 1e-9
    perf = summary["performance"]
    assert perf["final_raffinate_solute"] <= 0.06
    assert 0.0 < perf["extraction_efficiency"] < 1.0
    assert perf["total_solvent"] == pytest.approx(200.0 * reference_result.N)


def test_ll_stages_flat_arguments(reference_result):
    result = ll_stages(
        XS_EQ, XD_EQ, YS_EQ, YD_EQ, 0.06,
        800.0, 0.45, 0.00,
        200.0, 0.00, 1.00,
    )
    assert result.N == reference_result.N
    assert_allclose(result.R, reference_result.R)


def test_ll_stages_options():
    with pytest.raises(ConvergenceFailure):
        ll_stages(XS_EQ, XD_EQ, YS_EQ, YD_EQ, 0.06,
                  800.0, 0.45, 0.00, 200.0, 0.00, 1.00, max_stages=1)
