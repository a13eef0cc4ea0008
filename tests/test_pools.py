import pytest

from lotocover.errors import InvalidInput
from lotocover.pools import load_pool_file


def test_load_pool_with_header_and_bonus(tmp_path):
    p = tmp_path / "pool.csv"
    p.write_text("numbers\n7,3,12,25,31\n40,44\nbonus,2,7\n", encoding="utf-8")
    pool, bonus = load_pool_file(p)
    assert pool == (7, 3, 12, 25, 31, 40, 44)
    assert bonus == (2, 7)


def test_load_pool_space_separated(tmp_path):
    p = tmp_path / "pool.txt"
    p.write_text("1 2 3 4 5 6\n\nChance 4\n", encoding="utf-8")
    assert load_pool_file(p) == ((1, 2, 3, 4, 5, 6), (4,))


def test_load_pool_rejects_bad_files(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_text("numbers\n", encoding="utf-8")
    with pytest.raises(InvalidInput):
        load_pool_file(empty)

    dup = tmp_path / "dup.csv"
    dup.write_text("1,2,3,4,5,5\n", encoding="utf-8")
    with pytest.raises(InvalidInput):
        load_pool_file(dup)
