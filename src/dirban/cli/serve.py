"""Handler for 'dirban serve'."""

import logging
import sys

from dirban.cli._common import error
from dirban.config import read_config
from dirban.errors import DirbanError
from dirban.services import build_services
from dirban.web import create_app

logger = logging.getLogger(__name__)


def serve(args) -> int:
    """Run the HTTP API until interrupted."""
    try:
        settings = read_config(args.config, root=args.root, host=args.host, port=args.port, debug=args.debug or None)
    except (DirbanError, OSError) as e:
        error(str(e), args.json)

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level, logging.INFO),
    )

    app = create_app(services=build_services(settings))
    logger.info("boards: %s", settings.boards_root)
    logger.info("uploads: %s", settings.uploads_root)
    print(f"serving {settings.root} at http://{settings.host}:{settings.port}")
    app.run(host=settings.host, port=settings.port, debug=settings.debug)
    logger.info("stopped")
    return 0
