"""Graphical representation of the stage construction"""

from typing import Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt

from .cascade import CascadeResult
from .correlation import EquilibriumCorrelation


class DiagramRenderer:
    """
    Plot of the stage construction on x_S-x_D coordinates.

    Draws both equilibrium curves, the tie line of every stage (E[i]-R[i]),
    the operating lines from each raffinate to the fresh extract feed,
    labelled R/E/M points and the target raffinate composition.
    """

    # Label offsets (dx, dy)
    offset_E: Tuple[float, float] = (0.0, 0.045)
    offset_R: Tuple[float, float] = (0.005, -0.030)
    offset_M: Tuple[float, float] = (0.005, 0.010)

    tie_line_color = (0.8500, 0.3250, 0.0980)
    operating_line_color = (0.0, 0.4470, 0.7410)
    marker_size = 7

    def __init__(
        self,
        R: np.ndarray,
        E: np.ndarray,
        M: np.ndarray,
        R0: float,
        E0: float,
        xS0: float,
        yS0: float,
        yD0: float,
        raffinate: EquilibriumCorrelation,
        extract: EquilibriumCorrelation,
        xS_target: float,
    ):
        self.R = np.asarray(R, dtype=float)
        self.E = np.asarray(E, dtype=float)
        self.M = np.asarray(M, dtype=float)
        self.R0 = R0
        self.E0 = E0
        self.xS0 = xS0
        self.yS0 = yS0
        self.yD0 = yD0
        self.raffinate = raffinate
        self.extract = extract
        self.xS_target = xS_target

    @classmethod
    def from_result(cls, result: CascadeResult) -> "DiagramRenderer":
        spec = result.spec
        return cls(
            R=result.R,
            E=result.E,
            M=result.M,
            R0=spec.raffinate_feed.flow,
            E0=spec.extract_feed.flow,
            xS0=spec.raffinate_feed.solute,
            yS0=spec.extract_feed.solute,
            yD0=spec.extract_feed.solvent,
            raffinate=result.model.raffinate,
            extract=result.model.extract,
            xS_target=spec.xS_target,
        )

    def _point(self, ax, x: float, y: float, label: str, offset: Tuple[float, float]) -> None:
        ax.plot(x, y, 'o', markersize=self.marker_size,
                markerfacecolor='g', markeredgecolor='k')
        ax.text(x + offset[0], y + offset[1], label)

    def render(self, ax=None):
        """Draw the diagram and return the Axes"""
        if ax is None:
            _, ax = plt.subplots(figsize=(10, 8))

        # Equilibrium curves
        interval = np.linspace(0.0, self.xS0 + 0.1, 80)
        ax.plot(interval, self.extract(interval), 'k', label='Extract curve')
        ax.plot(interval, self.raffinate(interval), 'k', label='Raffinate curve')

        n_points = self.E.shape[0]

        # Tie lines of each stage
        for i in range(1, n_points):
            ax.plot([self.E[i, 0], self.R[i, 0]], [self.E[i, 1], self.R[i, 1]],
                    color=self.tie_line_color)

        # Operating lines: raffinate entering stage i+1 mixed with fresh extract
        for i in range(n_points - 1):
            ax.plot([self.R[i, 0], self.yS0], [self.R[i, 1], self.yD0],
                    color=self.operating_line_color)

        for i in range(n_points):
            self._point(ax, self.R[i, 0], self.R[i, 1], f'R{i}', self.offset_R)
            self._point(ax, self.E[i, 0], self.E[i, 1], f'E{i}', self.offset_E)

        # M[i] is the mixture fed to stage i+1
        for i in range(self.M.shape[0] - 1):
            self._point(ax, self.M[i, 0], self.M[i, 1], f'M{i + 1}', self.offset_M)

        ax.plot(self.xS_target, self.raffinate(self.xS_target), '^', markersize=5,
                markerfacecolor='r', markeredgecolor='k', label='Target')

        ax.set_title(
            f'Graphical representation of stage calculation '
            f'(R$_0$ = {self.R0:.1f}, E$_0$ = {self.E0:.1f} kg/h)'
        )
        ax.set_xlabel('x$_S$ , y$_S$')
        ax.set_ylabel('x$_D$ , y$_D$')
        ax.legend(loc='best')
        ax.grid(True, alpha=0.3)
        return ax

    def save(self, path: str, ax=None, dpi: Optional[int] = 150) -> None:
        """Render to a file and close the figure"""
        ax = self.render(ax)
        fig = ax.get_figure()
        fig.tight_layout()
        fig.savefig(path, dpi=dpi)
        plt.close(fig)

    def show(self) -> None:
        self.render()
        plt.tight_layout()
        plt.show()
