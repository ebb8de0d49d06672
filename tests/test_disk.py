import io

import pytest

from yfsdisk.disk import NUM_SECTORS, SECTOR_SIZE, Disk, DiskError


def _sector(fill: int) -> bytes:
    return bytes([fill]) * SECTOR_SIZE


def test_default_geometry_matches_hardware():
    disk = Disk(io.BytesIO())
    assert SECTOR_SIZE == 512
    assert NUM_SECTORS == 1426
    assert len(disk.read_sector(1425)) == 512
    with pytest.raises(DiskError):
        disk.read_sector(1426)


def test_default_sector_count():
    disk = Disk(io.BytesIO())
    assert disk.num_sectors == NUM_SECTORS


def test_write_then_read_round_trip():
    disk = Disk(io.BytesIO(), 8)
    disk.write_sector(3, _sector(0xAB))
    assert disk.read_sector(3) == _sector(0xAB)


def test_unwritten_sector_reads_zeros():
    disk = Disk(io.BytesIO(), 8)
    disk.write_sector(5, _sector(1))
    assert disk.read_sector(2) == bytes(SECTOR_SIZE)
    assert disk.read_sector(7) == bytes(SECTOR_SIZE)


def test_writes_do_not_touch_neighbours():
    disk = Disk(io.BytesIO(), 4)
    disk.write_sector(0, _sector(7))
    disk.write_sector(1, _sector(9))
    disk.write_sector(0, _sector(3))
    assert disk.read_sector(0) == _sector(3)
    assert disk.read_sector(1) == _sector(9)


def test_backing_layout_is_sector_aligned():
    buf = io.BytesIO()
    disk = Disk(buf, 4)
    disk.write_sector(2, _sector(0x5A))
    raw = buf.getvalue()
    assert raw[2 * SECTOR_SIZE:3 * SECTOR_SIZE] == _sector(0x5A)
    assert raw[:2 * SECTOR_SIZE] == bytes(2 * SECTOR_SIZE)


@pytest.mark.parametrize("num", [-1, 4, 100])
def test_out_of_range_sector_rejected(num):
    disk = Disk(io.BytesIO(), 4)
    with pytest.raises(DiskError):
        disk.read_sector(num)
    with pytest.raises(DiskError):
        disk.write_sector(num, _sector(0))


@pytest.mark.parametrize("length", [0, SECTOR_SIZE - 1, SECTOR_SIZE + 1])
def test_wrong_length_write_rejected(length):
    disk = Disk(io.BytesIO(), 4)
    with pytest.raises(DiskError):
        disk.write_sector(0, bytes(length))
    assert disk.read_sector(0) == bytes(SECTOR_SIZE)


def test_zero_sectors_rejected():
    with pytest.raises(DiskError):
        Disk(io.BytesIO(), 0)


def test_stats_count_operations():
    disk = Disk(io.BytesIO(), 4)
    disk.write_sector(0, _sector(1))
    disk.write_sector(1, _sector(2))
    disk.read_sector(0)
    assert disk.stats.writes == 2
    assert disk.stats.reads == 1


def test_accepts_bytearray_and_memoryview():
    disk = Disk(io.BytesIO(), 2)
    disk.write_sector(0, bytearray(_sector(4)))
    disk.write_sector(1, memoryview(_sector(6)))
    assert disk.read_sector(0) == _sector(4)
    assert disk.read_sector(1) == _sector(6)


def test_open_creates_and_persists(tmp_path):
    path = tmp_path / "DISK"
    with Disk.open(path, 10) as disk:
        disk.write_sector(9, _sector(0x11))
    assert path.exists()
    with Disk.open(path, 10) as disk:
        assert disk.read_sector(9) == _sector(0x11)
        assert disk.read_sector(0) == bytes(SECTOR_SIZE)


def test_context_manager_closes():
    with Disk(io.BytesIO(), 2) as disk:
        disk.write_sector(0, _sector(1))
    assert disk.closed is True
    with pytest.raises(DiskError):
        disk.read_sector(0)


def test_close_is_idempotent():
    disk = Disk(io.BytesIO(), 2)
    disk.close()
    disk.close()
    with pytest.raises(DiskError):
        disk.write_sector(0, _sector(0))


def test_open_directory_fails(tmp_path):
    with pytest.raises(DiskError):
        Disk.open(tmp_path, 2)