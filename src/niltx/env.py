from os import getenv


def dump() -> dict[str, str]:
    result: dict[str, str] = {}
    for key in globals().keys():
        if key.isupper():
            result[key] = getenv(f'NILTX_{key}') or ''
    return result


def get_bool(key: str) -> bool:
    return (getenv(key) or '').lower() in ('1', 'y', 'yes', 't', 'true', 'on')


def set_test() -> None:
    global TEST
    TEST = True


DEBUG: bool = get_bool('NILTX_DEBUG')
JSON_LOG: bool = get_bool('NILTX_JSON_LOG')
TEST: bool = get_bool('NILTX_TEST')
