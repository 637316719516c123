from color_sandbox.streaks import StreakStore


def test_missing_file_is_empty(tmp_path):
    assert StreakStore(tmp_path / "none.json").load() == {}


def test_corrupt_file_is_empty(tmp_path):
    path = tmp_path / "streaks.json"
    path.write_text("{not json", encoding="utf-8")
    assert StreakStore(path).load() == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert StreakStore(path).load() == {}


def test_bad_entries_dropped(tmp_path):
    path = tmp_path / "streaks.json"
    path.write_text('{"a": 3, "b": "x", "c": -1, "d": true}', encoding="utf-8")
    assert StreakStore(path).load() == {"a": 3}


def test_save_then_load(tmp_path):
    store = StreakStore(tmp_path / "sub" / "streaks.json")
    store.save({"channel-isolation": 7})
    assert store.load() == {"channel-isolation": 7}
