# -*- coding: utf-8 -*-
"""
Tests for the stage construction plot.
"""
import matplotlib.pyplot as plt
import pytest

from llextraction.separations.extraction.diagram import DiagramRenderer


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_render_draws_every_element(reference_result):
    N = reference_result.N
    ax = DiagramRenderer.from_result(reference_result).render()
    # 2 curves, N tie lines, N operating lines, N+1 R and E points,
    # N mixing points and the target marker
    assert len(ax.lines) == 2 + N + N + 2 * (N + 1) + N + 1
    labels = {t.get_text() for t in ax.texts}
    assert {"R0", f"R{N}", "E0", f"E{N}", "M1", f"M{N}"} <= labels
    assert f"M{N + 1}" not in labels
    assert "R$_0$ = 800.0" in ax.get_title()


def test_render_on_existing_axes(reference_result):
    fig, ax = plt.subplots()
    assert DiagramRenderer.from_result(reference_result).render(ax) is ax


def test_renderer_uses_feed_data(reference_result):
    renderer = DiagramRenderer.from_result(reference_result)
    assert renderer.R0 == 800.0
    assert renderer.E0 == 200.0
    assert renderer.xS_target == 0.06
    assert renderer.raffinate is reference_result.model.raffinate


def test_save(reference_result, tmp_path):
    path = tmp_path / "stages.png"
    DiagramRenderer.from_result(reference_result).save(str(path))
    assert path.exists() and path.stat().st_size > 0


def test_legend_lists_curves_and_target(reference_result):
    ax = DiagramRenderer.from_result(reference_result).render()
    legend = ax.get_legend()
    assert legend is not None
    entries = [t.get_text() for t in legend.get_texts()]
    assert entries == ["Extract curve", "Raffinate curve", "Target"]
