# -*- coding: utf-8 -*-
"""
Shared fixtures for the liquid-liquid extraction tests.
"""
import matplotlib
matplotlib.use("Agg")

import pytest

from llextraction.separations.extraction.cascade import StageCascade
from llextraction.separations.extraction.reference_data import (
    reference_equilibrium, reference_spec,
)


@pytest.fixture
def equilibrium():
    return reference_equilibrium()


@pytest.fixture
def spec():
    return reference_spec()


@pytest.fixture(scope="module")
def reference_result():
    return StageCascade(reference_spec()).run()
