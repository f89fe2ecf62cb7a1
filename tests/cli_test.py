import pytest

from bheap import cli


def test_sort(capsys):
    assert cli.main(["sort", "1", "7", "2", "5", "10", "9"]) == 0
    assert capsys.readouterr().out == "10 9 7 5 2 1\n"


def test_drain(capsys):
    assert cli.main(["drain", "build=3", "test=5", "deploy=1"]) == 0
    assert capsys.readouterr().out == "1. test 5\n2. build 3\n3. deploy 1\n"


def test_reprioritize(capsys):
    argv = ["reprioritize", "build=3", "test=5", "deploy=1", "--set", "deploy=9", "--set", "test=0.5"]
    assert cli.main(argv) == 0
    assert capsys.readouterr().out == "1. deploy 9\n2. build 3\n3. test 0.5\n"


def test_reprioritize_unknown_item(capsys):
    assert cli.main(["reprioritize", "a=1", "--set", "b=2"]) == 1
    assert "Unknown item: b" in capsys.readouterr().err


def test_malformed_token_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["drain", "oops"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        cli.main(["drain", "a=high"])
    assert exc.value.code == 2


def test_duplicate_names_are_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["drain", "a=1", "a=2"])
    assert exc.value.code == 2


def test_named_priority():
    assert cli.named_priority("job=2.5") == ("job", 2.5)


def test_sort_repeated_values_keep_index_consistent(capsys, monkeypatch):
    seen = []
    original_pop = cli.IndexedMaxHeap.pop

    def checked_pop(self):
        seen.append(self.is_index_consistent())
        return original_pop(self)

    monkeypatch.setattr(cli.IndexedMaxHeap, "pop", checked_pop)
    assert cli.main(["sort", "3", "3", "1"]) == 0
    assert capsys.readouterr().out == "3 3 1\n"
    assert seen == [True, True, True]


def test_sort_negative_values(capsys):
    assert cli.main(["sort", "2", "-4", "0", "-4"]) == 0
    assert capsys.readouterr().out == "2 0 -4 -4\n"


def test_nan_priority_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["drain", "a=nan"])
    assert exc.value.code == 2
