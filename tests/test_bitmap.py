import pytest

from yfsdisk.bitmap import Bitmap


def test_new_bitmap_is_all_free():
    bitmap = Bitmap(20)
    assert all(bitmap.is_free(n) for n in range(20))
    assert bitmap.find_free() == 0


def test_set_used_marks_only_that_slot():
    bitmap = Bitmap(16)
    bitmap.set_used(5)
    assert bitmap.is_free(5) is False
    assert [n for n in range(16) if not bitmap.is_free(n)] == [5]


def test_find_free_skips_used_slots():
    bitmap = Bitmap(16)
    for n in (0, 1, 2):
        bitmap.set_used(n)
    assert bitmap.find_free() == 3


def test_set_free_restores_slot():
    bitmap = Bitmap(10)
    bitmap.set_used(7)
    bitmap.set_free(7)
    assert bitmap.is_free(7) is True


def test_neighbouring_bits_are_independent():
    bitmap = Bitmap(16)
    bitmap.set_used(8)
    bitmap.set_used(9)
    bitmap.set_free(8)
    assert bitmap.is_free(8) is True
    assert bitmap.is_free(9) is False


def test_full_bitmap_has_no_free_slot():
    bitmap = Bitmap(11)
    for n in range(11):
        bitmap.set_used(n)
    assert bitmap.find_free() is None


def test_find_free_ignores_padding_bits():
    bitmap = Bitmap(3)
    for n in range(3):
        bitmap.set_used(n)
    assert bitmap.find_free() is None


def test_out_of_range_set_is_ignored():
    bitmap = Bitmap(4)
    bitmap.set_used(4)
    bitmap.set_used(-1)
    assert all(bitmap.is_free(n) for n in range(4))
    assert bitmap.find_free() == 0


def test_is_free_out_of_range_raises():
    bitmap = Bitmap(4)
    with pytest.raises(IndexError):
        bitmap.is_free(4)
    with pytest.raises(IndexError):
        bitmap.is_free(-1)


def test_empty_bitmap_has_no_free_slot():
    assert Bitmap(0).find_free() is None


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        Bitmap(-1)