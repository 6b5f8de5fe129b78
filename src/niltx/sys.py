import logging
import sys

import orjson
from pydantic_core import to_jsonable_python

from niltx import env


def set_up_logging() -> None:
    if env.DEBUG:
        logging.getLogger('niltx').setLevel(logging.DEBUG)

    root = logging.getLogger()
    # NOTE: Already configured by the application or test runner
    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stderr)
    formatter: logging.Formatter

    if env.JSON_LOG:
        from pythonjsonlogger import jsonlogger

        formatter = jsonlogger.JsonFormatter(  # type: ignore[no-untyped-call]
            json_default=orjson.dumps,
            json_serializer=lambda *a, **kw: orjson.dumps(*a, default=to_jsonable_python).decode(),  # type: ignore[misc]
            reserved_attrs=set(jsonlogger.RESERVED_ATTRS) - {'message', 'name', 'levelname', 'created'} | {'taskName'},
        )
    else:
        formatter = logging.Formatter('%(levelname)-8s %(name)-20s %(message)s')

    handler.setFormatter(formatter)
    root.addHandler(handler)
