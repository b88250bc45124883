"""
ApiServer class for CLI control of the FastAPI application.
"""
import logging
import os
from typing import Optional

import uvicorn

from settings import PORT, LOG_LEVEL, BIND_ADDRESS
from .app import build_context, create_app

logger = logging.getLogger(__name__)

DEBUG_LOG_FILE = "flipside_debug.log"


class ApiServer:
    """API server wrapper for CLI control"""

    def __init__(
        self,
        debug: bool = False,
        bind_address: Optional[str] = None,
        port: Optional[int] = None,
        use_mock: Optional[bool] = None,
    ):
        self.server = None
        self.config = None
        self.debug = debug
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT
        self.use_mock = use_mock

        # Configure debug logging if enabled
        if debug:
            self._setup_debug_logging()
        else:
            logging.basicConfig(
                level=LOG_LEVEL.upper(),
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )

    def _setup_debug_logging(self):
        """Send DEBUG records to the console and an appended log file"""
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)

        # Clear existing handlers to avoid duplicates
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        log_file = os.path.abspath(DEBUG_LOG_FILE)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        logger.info(f"Debug logging enabled - appending to {log_file}")

    def build_app(self):
        if self.use_mock is None:
            return create_app()
        return create_app(build_context(use_mock=self.use_mock))

    def run(self):
        """Run the API server (blocking)"""
        logger.info(f"Starting FlipSide Player API on http://{self.bind_address}:{self.port}")
        logger.info("Available endpoints: /api/auth/*, /api/me, /api/spotify/*, /api/favorites, /api/health")
        self.config = uvicorn.Config(
            self.build_app(),
            host=self.bind_address,
            port=self.port,
            log_level=LOG_LEVEL,
            access_log=False  # Request middleware already logs /api calls
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the API server"""
        if self.server:
            self.server.should_exit = True
