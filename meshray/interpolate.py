"""Piecewise-linear lookup tables."""

from __future__ import annotations

from bisect import bisect_left
from typing import Sequence


class Interpolator1D:
    """Linear interpolation over sorted sample points, clamped at both ends."""

    def __init__(self, x: Sequence[float], y: Sequence[float]) -> None:
        xs = [float(v) for v in x]
        ys = [float(v) for v in y]
        if len(xs) != len(ys):
            raise ValueError(f"x and y differ in length: {len(xs)} != {len(ys)}")
        if not xs:
            raise ValueError("an interpolator needs at least one sample")
        self.x = xs
        self.y = ys

    def __repr__(self) -> str:
        return f"Interpolator1D(x={self.x!r}, y={self.y!r})"

    def interpolate(self, x: float) -> float:
        if x <= self.x[0]:
            return self.y[0]
        if x > self.x[-1]:
            return self.y[-1]

        i = bisect_left(self.x, x) - 1
        x0, x1 = self.x[i], self.x[i + 1]
        y0, y1 = self.y[i], self.y[i + 1]
        slope = (y1 - y0) / (x1 - x0)
        return y0 + slope * (x - x0)