import logging
import os
import sys

from calculator.session import Session

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("CALCULATOR_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        Session(sys.stdin, output=sys.stdout, errors=sys.stderr).run()
    except Exception as e:
        logger.debug("Session aborted", exc_info=True)
        if str(e):
            print(e, file=sys.stderr)
            return 1
        print("exception", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
