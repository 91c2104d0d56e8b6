from tablelog.config import Config
from tablelog.example import SampleSchemaV1, main


def test_main_creates_log(tmp_path):
    assert main([str(tmp_path)]) == 0
    assert (tmp_path / "SampleSchemaV1.db").exists()
    with SampleSchemaV1(Config.in_folder(tmp_path)) as db:
        assert dict(db.names.get()) == {}
        assert db.is_good.get() is None


def test_main_clears_names_only(tmp_path):
    with SampleSchemaV1(Config.in_folder(tmp_path)) as db:
        db.names.insert("alice", "Alice")
        db.names.insert("bob", "Bob")
        db.is_good.insert(True)

    assert main([str(tmp_path)]) == 0

    with SampleSchemaV1(Config.in_folder(tmp_path)) as db:
        assert dict(db.names.get()) == {}
        assert db.is_good.get() is True


def test_main_creates_missing_folder(tmp_path):
    folder = tmp_path / "nested" / "dir"
    assert main([str(folder)]) == 0
    assert (folder / "SampleSchemaV1.db").read_bytes()[:2] == b"\x01\x00"