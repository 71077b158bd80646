import pytest

from twamm_sim.persistence.summary_logger import SummaryLogger, content_hash


def test_header_written_once(tmp_path):
    path = tmp_path / "nested" / "summary.csv"
    logger = SummaryLogger(str(path))
    logger.append({"a": "1", "b": "2"})
    logger.append({"a": "3", "b": "4"})
    lines = path.read_text().splitlines()
    assert lines[0] == "a,b,dataId"
    assert len(lines) == 3
    rows = logger.load()
    assert [r["a"] for r in rows] == ["1", "3"]


def test_data_id_is_content_hash(tmp_path):
    logger = SummaryLogger(str(tmp_path / "s.csv"))
    row = logger.append({"a": "1"})
    assert row["dataId"] == content_hash({"a": "1"})
    assert len(row["dataId"]) == 32
    assert content_hash({"a": "1"}) != content_hash({"a": "2"})
    # field order is part of the identity
    assert content_hash({"a": "1", "b": "2"}) != content_hash({"b": "2", "a": "1"})


def test_skip_duplicates(tmp_path):
    logger = SummaryLogger(str(tmp_path / "s.csv"), skip_duplicates=True)
    assert logger.append({"a": "1"}) is not None
    assert logger.append({"a": "1"}) is None
    assert len(logger.load()) == 1


def test_duplicates_appended_by_default(tmp_path):
    logger = SummaryLogger(str(tmp_path / "s.csv"))
    logger.append({"a": "1"})
    logger.append({"a": "1"})
    assert len(logger.load()) == 2


def test_load_missing_file(tmp_path):
    logger = SummaryLogger(str(tmp_path / "missing.csv"))
    assert logger.load() == []


def test_unwritable_destination_raises(tmp_path):
    target = tmp_path / "dir.csv"
    target.mkdir()
    logger = SummaryLogger(str(target))
    with pytest.raises(OSError):
        logger.append({"a": "1"})
