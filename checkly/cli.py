import sys
from pathlib import Path

import fncli

from . import db
from .core.errors import CheckError


def main():
    db.init()
    fncli.autodiscover(Path(__file__).parent, "checkly")

    user_args = sys.argv[1:]
    if not user_args:
        from .dash import dashboard

        dashboard()
        return
    argv = ["checkly", *user_args]
    try:
        code = fncli.dispatch(argv)
    except CheckError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
