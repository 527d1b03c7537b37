"""Affine matrices that map image pixels to network input pixels and back."""

from __future__ import annotations

from dataclasses import dataclass

Size = tuple[int, int]
Matrix = tuple[float, float, float, float, float, float]


def _invert(i2d: Matrix) -> Matrix:
    """Invert a 2x3 affine matrix; a singular matrix gives all zeros."""
    a, b, c, d, e, f = i2d
    det = a * e - b * d
    det = 1.0 / det if det != 0.0 else 0.0
    a11 = e * det
    a22 = a * det
    a12 = -b * det
    a21 = -d * det
    b1 = -a11 * c - a12 * f
    b2 = -a21 * c - a22 * f
    return (a11, a12, b1, a21, a22, b2)


def _scales(source: Size, target: Size) -> tuple[float, float]:
    src_w, src_h = source
    dst_w, dst_h = target
    if src_w == 0 or src_h == 0:
        raise ValueError(f"source size must be non-zero, got {source!r}")
    return dst_w / src_w, dst_h / src_h


@dataclass(frozen=True)
class AffineMatrix:
    """A forward (image to network) matrix together with its inverse."""

    i2d: Matrix
    d2i: Matrix

    @classmethod
    def from_forward(cls, i2d: Matrix) -> "AffineMatrix":
        forward = tuple(float(v) for v in i2d)
        if len(forward) != 6:
            raise ValueError("an affine matrix needs exactly 6 values")
        return cls(forward, _invert(forward))  # type: ignore[arg-type]

    @staticmethod
    def _apply(m: Matrix, x: float, y: float) -> tuple[float, float]:
        return (m[0] * x + m[1] * y + m[2], m[3] * x + m[4] * y + m[5])

    def to_network(self, x: float, y: float) -> tuple[float, float]:
        """Map an image point into network coordinates."""
        return self._apply(self.i2d, x, y)

    def to_image(self, x: float, y: float) -> tuple[float, float]:
        """Map a network point back into image coordinates."""
        return self._apply(self.d2i, x, y)


def crop_resize_matrix(source: Size, target: Size, start: Size) -> AffineMatrix:
    """Crop a region beginning at ``start`` and stretch it to ``target``."""
    scale_x, scale_y = _scales(source, target)
    start_x, start_y = start
    return AffineMatrix.from_forward(
        (scale_x, 0.0, -scale_x * start_x, 0.0, scale_y, -scale_y * start_y)
    )


def resize_matrix(source: Size, target: Size) -> AffineMatrix:
    """Stretch the whole image to ``target`` without keeping the aspect ratio."""
    scale_x, scale_y = _scales(source, target)
    return AffineMatrix.from_forward((scale_x, 0.0, 0.0, 0.0, scale_y, 0.0))


def letterbox_matrix(source: Size, target: Size) -> AffineMatrix:
    """Scale uniformly to fit ``target`` and centre the result."""
    scale_x, scale_y = _scales(source, target)
    scale = min(scale_x, scale_y)
    src_w, src_h = source
    dst_w, dst_h = target
    tx = -scale * src_w * 0.5 + dst_w * 0.5 + scale * 0.5 - 0.5
    ty = -scale * src_h * 0.5 + dst_h * 0.5 + scale * 0.5 - 0.5
    return AffineMatrix.from_forward((scale, 0.0, tx, 0.0, scale, ty))