import json

from sweep_inspector import persistence


def test_missing_state_file_gives_empty_state(tmp_path) -> None:
    assert persistence.load_state(str(tmp_path / "missing.json")) == {}


def test_corrupt_state_file_is_tolerated(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    assert persistence.load_state(str(path)) == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert persistence.load_state(str(path)) == {}


def test_save_then_load(tmp_path) -> None:
    path = str(tmp_path / "state.json")
    persistence.save_state({"recent_files": ["a.json"]}, path)
    with open(path, "r", encoding="utf-8") as handle:
        assert json.load(handle) == {"recent_files": ["a.json"]}
    assert persistence.load_state(path) == {"recent_files": ["a.json"]}


def test_state_keeps_only_known_keys_of_the_right_type(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps(
            {
                "recent_files": ["a.json", 3, None, "  ", "b.csv"],
                "last_open_dir": 42,
                "last_export_dir": "/tmp",
                "window_geometry": [0, 0, 10, 10],
            }
        ),
        encoding="utf-8",
    )
    assert persistence.load_state(str(path)) == {
        "recent_files": ["a.json", "b.csv"],
        "last_export_dir": "/tmp",
    }
    path.write_text(json.dumps({"recent_files": "a.json"}), encoding="utf-8")
    assert persistence.load_state(str(path)) == {}


def test_undecodable_state_file_is_tolerated(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_bytes(b'{"recent_files": ["\xff\xfe"]}')
    assert persistence.load_state(str(path)) == {}


def test_save_drops_unknown_keys(tmp_path) -> None:
    path = str(tmp_path / "state.json")
    recent = [f"sweeps-{idx}.json" for idx in range(8)]
    persistence.save_state({"recent_files": recent, "scratch": object()}, path)
    with open(path, "r", encoding="utf-8") as handle:
        saved = json.load(handle)
    assert saved == {"recent_files": recent[: persistence.RECENT_FILE_LIMIT]}


def test_recent_files_most_recent_first_and_capped() -> None:
    recent: list[str] = []
    for idx in range(7):
        recent = persistence.update_recent_files(recent, f"sweeps-{idx}.json")
    assert recent[0] == "sweeps-6.json"
    assert len(recent) == persistence.RECENT_FILE_LIMIT

    recent = persistence.update_recent_files(recent, "sweeps-4.json")
    assert recent[0] == "sweeps-4.json"
    assert recent.count("sweeps-4.json") == 1
    assert persistence.update_recent_files(recent, "   ") == recent
