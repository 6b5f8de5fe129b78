from pathlib import Path
from typing import Any

import orjson

from niltx import env

env.set_test()


RESPONSES_PATH = Path(__file__).parent / 'responses'


def load_response(name: str) -> Any:
    return orjson.loads((RESPONSES_PATH / name).read_bytes())
