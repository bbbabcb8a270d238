"""Reference equilibrium tables and feeds (mass fractions, kg/h)"""

from .cascade import CascadeSpec, FeedStream
from .equilibrium import LLEquilibriumData

# Raffinate phase: solute x_S, solvent x_D
XS_EQ = (0.0596, 0.1397, 0.1905, 0.2300, 0.2692, 0.2763,
         0.3088, 0.3573, 0.4090, 0.4605, 0.5178, 0.5800)
XD_EQ = (0.0052, 0.0068, 0.0079, 0.0100, 0.0102, 0.0104,
         0.0117, 0.0160, 0.0210, 0.0375, 0.0652, 0.1460)

# Extract phase: solute y_S, solvent y_D
YS_EQ = (0.0875, 0.2078, 0.2766, 0.3706, 0.3852, 0.3939,
         0.4297, 0.4821, 0.5395, 0.5740, 0.6034, 0.5800)
YD_EQ = (0.9093, 0.7832, 0.7101, 0.6085, 0.5921, 0.5821,
         0.5392, 0.4757, 0.4000, 0.3370, 0.2626, 0.1460)

RAFFINATE_FEED = FeedStream(flow=800.0, solute=0.45, solvent=0.00)
EXTRACT_FEED = FeedStream(flow=200.0, solute=0.00, solvent=1.00)
XS_TARGET = 0.06


def reference_equilibrium() -> LLEquilibriumData:
    return LLEquilibriumData(XS_EQ, XD_EQ, YS_EQ, YD_EQ)


def reference_spec(**overrides) -> CascadeSpec:
    """CascadeSpec for the reference case, with any field overridden"""
    fields = dict(
        equilibrium=reference_equilibrium(),
        raffinate_feed=RAFFINATE_FEED,
        extract_feed=EXTRACT_FEED,
        xS_target=XS_TARGET,
    )
    fields.update(overrides)
    return CascadeSpec(**fields)
