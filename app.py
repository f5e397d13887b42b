#!/usr/bin/env python3
"""
Run script for the cleaning checklist
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

import argparse
import os
import sys

from checklist import create_app
from checklist.build import build_database
from checklist.logger import get_logger

# Note: admin credentials are configured via environment variables.
# Run 'python generate_env.py' to create a .env file with secure values.

app = create_app()
logger = get_logger("checklist.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Cleaning Checklist')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and the admin account, then exit without starting the server')
    parser.add_argument('--enable-debug-data', action='store_true', default=True,
                        help='Insert demo equipment and stock (default: enabled if flag not present)')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable demo data insertion')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting Cleaning Checklist...")

    # The admin account is ALWAYS checked regardless of flags
    build_database(
        enable_debug_data=args.enable_debug_data if not args.build_only else False,
        app=app,
    )

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
