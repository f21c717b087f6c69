"""
Tests for paste() and blend().
"""

import numpy as np
import pytest

from graymap import ContractViolation, PixelBuffer, blend, paste


@pytest.fixture
def canvas():
    img = PixelBuffer.create(6, 4, 100)
    img.pixels[...] = 40
    return img


@pytest.fixture
def patch(make_image):
    return make_image([[0, 50], [100, 80]], maxval=100)


class TestPaste:
    """Tests for paste()."""

    def test_overwrites_region_only(self, canvas, patch):
        paste(canvas, 3, 1, patch)
        assert canvas.pixels[1:3, 3:5].tolist() == [[0, 50], [100, 80]]
        mask = np.ones_like(canvas.pixels, dtype=bool)
        mask[1:3, 3:5] = False
        assert np.all(canvas.pixels[mask] == 40)

    def test_source_untouched(self, canvas, patch):
        before = patch.copy()
        paste(canvas, 0, 0, patch)
        assert patch == before

    def test_no_rescaling_between_maxvals(self, canvas, make_image):
        src = make_image([[200]], maxval=255)
        paste(canvas, 0, 0, src)
        assert canvas.get_pixel(0, 0) == 200
        assert canvas.maxval == 100

    def test_bottom_right_corner_fits(self, canvas, patch):
        paste(canvas, 4, 2, patch)
        assert canvas.get_pixel(5, 3) == 80

    @pytest.mark.parametrize("x,y", [(5, 0), (0, 3), (-1, 0)])
    def test_not_fitting_raises_without_mutation(self, canvas, patch, x, y):
        before = canvas.copy()
        with pytest.raises(ContractViolation, match="does not fit"):
            paste(canvas, x, y, patch)
        assert canvas == before


class TestBlend:
    """Tests for blend()."""

    def test_alpha_zero_keeps_destination(self, canvas, patch):
        before = canvas.copy()
        blend(canvas, 1, 1, patch, 0.0)
        assert canvas == before

    def test_alpha_one_replaces_with_source(self, canvas, patch):
        blend(canvas, 1, 1, patch, 1.0)
        assert canvas.pixels[1:3, 1:3].tolist() == [[0, 50], [100, 80]]

    def test_alpha_one_clamps_to_destination_maxval(self, make_image):
        dst = make_image([[10, 10]], maxval=60)
        src = make_image([[30, 200]], maxval=255)
        blend(dst, 0, 0, src, 1.0)
        assert dst.pixels.tolist() == [[30, 60]]

    def test_half_blend_rounds_to_nearest(self, make_image):
        dst = make_image([[10, 0, 100]], maxval=255)
        src = make_image([[21, 1, 100]], maxval=255)
        blend(dst, 0, 0, src, 0.5)
        # 15.5 -> 16, 0.5 -> 1, 100 -> 100
        assert dst.pixels.tolist() == [[16, 1, 100]]

    def test_extrapolation_saturates(self, make_image):
        dst = make_image([[50, 50]], maxval=100)
        src = make_image([[100, 0]], maxval=100)
        blend(dst, 0, 0, src, 2.0)
        # -50 + 200 = 150 -> 100 ; -50 + 0 = -50 -> 0
        assert dst.pixels.tolist() == [[100, 0]]

    def test_not_fitting_raises(self, canvas, patch):
        with pytest.raises(ContractViolation):
            blend(canvas, 5, 3, patch, 0.5)

    def test_non_finite_alpha_raises(self, canvas, patch):
        with pytest.raises(ContractViolation, match="finite"):
            blend(canvas, 0, 0, patch, float("nan"))
