"""
Unit tests for PixelBuffer: creation, pixel access, stats and predicates.
"""

import numpy as np
import pytest

from graymap import ContractViolation, ImageMemoryError, InstrumentationCounters, PixelBuffer


class TestCreate:
    """Tests for PixelBuffer.create."""

    def test_new_image_is_black(self):
        img = PixelBuffer.create(4, 3, 200)
        assert (img.width, img.height, img.maxval) == (4, 3, 200)
        assert img.pixels.shape == (3, 4)
        assert img.pixels.dtype == np.uint8
        assert not img.pixels.any()

    def test_default_maxval_is_255(self):
        assert PixelBuffer.create(1, 1).maxval == 255

    @pytest.mark.parametrize("width,height", [(0, 0), (0, 5), (5, 0)])
    def test_zero_sized_images_are_valid(self, width, height):
        img = PixelBuffer.create(width, height)
        assert img.size == 0
        assert img.shape == (width, height)

    @pytest.mark.parametrize("width,height", [(-1, 3), (3, -1)])
    def test_negative_dimension_raises(self, width, height):
        with pytest.raises(ContractViolation, match="non-negative"):
            PixelBuffer.create(width, height)

    @pytest.mark.parametrize("maxval", [0, 256, -3])
    def test_maxval_out_of_range_raises(self, maxval):
        with pytest.raises(ContractViolation, match="maxval"):
            PixelBuffer.create(2, 2, maxval)

    def test_float_dimension_raises(self):
        with pytest.raises(ContractViolation):
            PixelBuffer.create(2.5, 2)

    def test_allocation_failure_is_image_memory_error(self, monkeypatch):
        def fail(*args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(np, "zeros", fail)
        with pytest.raises(ImageMemoryError, match="Cannot allocate") as excinfo:
            PixelBuffer.create(10, 10)
        assert isinstance(excinfo.value, MemoryError)

    def test_unaddressable_size_raises_memory_error(self):
        with pytest.raises(ImageMemoryError, match="Cannot allocate"):
            PixelBuffer.create(10**12, 10**12)

    def test_contract_violation_is_not_recoverable_error(self):
        from graymap import ImageError
        assert not issubclass(ContractViolation, ImageError)


class TestFromArray:
    """Tests for PixelBuffer.from_array."""

    def test_copies_input(self):
        arr = np.array([[1, 2, 3], [4, 5, 6]])
        img = PixelBuffer.from_array(arr, maxval=10)
        arr[0, 0] = 9
        assert img.get_pixel(0, 0) == 1
        assert (img.width, img.height) == (3, 2)

    def test_values_above_maxval_raise(self):
        with pytest.raises(ContractViolation, match=r"\[0, 5\]"):
            PixelBuffer.from_array(np.array([[6]]), maxval=5)

    def test_non_2d_raises(self):
        with pytest.raises(ContractViolation, match="2D"):
            PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_float_array_raises(self):
        with pytest.raises(ContractViolation, match="integer dtype"):
            PixelBuffer.from_array(np.zeros((2, 2)))


class TestPixelAccess:
    """Tests for get_pixel / set_pixel."""

    def test_row_major_zero_based_layout(self, gradient):
        assert gradient.get_pixel(0, 0) == 0
        assert gradient.get_pixel(6, 0) == 6
        assert gradient.get_pixel(0, 1) == 10
        assert gradient.get_pixel(3, 4) == 43
        assert gradient.pixels.ravel()[1 * 7 + 3] == gradient.get_pixel(3, 1)

    def test_set_then_get(self):
        img = PixelBuffer.create(3, 2)
        img.set_pixel(2, 1, 77)
        assert img.get_pixel(2, 1) == 77
        assert img.pixels[1, 2] == 77
        assert img.pixels.sum() == 77

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (7, 0), (0, 5)])
    def test_out_of_bounds_get_raises(self, gradient, x, y):
        with pytest.raises(ContractViolation, match="outside"):
            gradient.get_pixel(x, y)

    def test_out_of_bounds_set_raises_without_mutation(self, gradient):
        before = gradient.pixels.copy()
        with pytest.raises(ContractViolation):
            gradient.set_pixel(7, 0, 1)
        assert np.array_equal(gradient.pixels, before)

    def test_level_out_of_range_raises(self):
        img = PixelBuffer.create(1, 1)
        with pytest.raises(ContractViolation, match="Gray level"):
            img.set_pixel(0, 0, 256)

    def test_accesses_are_counted(self):
        counters = InstrumentationCounters()
        img = PixelBuffer.create(2, 2, counters=counters)
        img.set_pixel(0, 0, 1)
        img.get_pixel(0, 0)
        img.get_pixel(1, 1)
        assert counters["pixmem"] == 3


class TestStats:
    """Tests for PixelBuffer.stats."""

    def test_min_max(self, gradient):
        assert gradient.stats() == (0, 46)

    def test_uniform_image(self):
        img = PixelBuffer.create(3, 3)
        img.pixels[...] = 9
        assert img.stats() == (9, 9)

    def test_empty_image_returns_sentinel(self):
        img = PixelBuffer.create(0, 4, maxval=80)
        low, high = img.stats()
        assert (low, high) == (80, 0)
        assert low > high


class TestPredicates:
    """Tests for valid_position / valid_rect."""

    def test_valid_position(self, gradient):
        assert gradient.valid_position(0, 0)
        assert gradient.valid_position(6, 4)
        assert not gradient.valid_position(7, 4)
        assert not gradient.valid_position(-1, 2)

    def test_valid_rect(self, gradient):
        assert gradient.valid_rect(0, 0, 7, 5)
        assert gradient.valid_rect(2, 1, 5, 4)
        assert gradient.valid_rect(7, 5, 0, 0)
        assert not gradient.valid_rect(2, 1, 6, 4)
        assert not gradient.valid_rect(-1, 0, 2, 2)
        assert not gradient.valid_rect(0, 0, -1, 2)

    def test_empty_image_has_no_positions(self):
        img = PixelBuffer.create(0, 0)
        assert not img.valid_position(0, 0)
        assert img.valid_rect(0, 0, 0, 0)


class TestLifecycle:
    """Tests for copy, release and equality."""

    def test_copy_is_independent(self, gradient):
        duplicate = gradient.copy()
        assert duplicate == gradient
        duplicate.set_pixel(0, 0, 99)
        assert gradient.get_pixel(0, 0) == 0
        assert duplicate.pixels is not gradient.pixels

    def test_release_is_idempotent(self, gradient):
        gradient.release()
        gradient.release()
        assert gradient.released

    def test_released_image_cannot_be_used(self, gradient):
        gradient.release()
        with pytest.raises(ContractViolation, match="released"):
            gradient.get_pixel(0, 0)

    def test_equality_considers_maxval(self):
        a = PixelBuffer.create(2, 2, 100)
        b = PixelBuffer.create(2, 2, 200)
        assert a != b
        assert a.same_pixels(b)

    def test_equality_considers_dimensions(self):
        assert PixelBuffer.create(2, 3) != PixelBuffer.create(3, 2)
