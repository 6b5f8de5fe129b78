import pytest

from niltx import env


def test_test_mode() -> None:
    assert env.TEST is True


@pytest.mark.parametrize(
    'value, expected',
    (
        ('1', True),
        ('yes', True),
        ('TRUE', True),
        ('on', True),
        ('0', False),
        ('', False),
        ('nope', False),
    ),
)
def test_get_bool(value: str, expected: bool, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('NILTX_SOMETHING', value)
    assert env.get_bool('NILTX_SOMETHING') is expected


def test_get_bool_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('NILTX_SOMETHING', raising=False)
    assert env.get_bool('NILTX_SOMETHING') is False


def test_dump(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('NILTX_JSON_LOG', 'true')
    dump = env.dump()
    assert dump['JSON_LOG'] == 'true'
    assert set(dump) == {'DEBUG', 'JSON_LOG', 'TEST'}
