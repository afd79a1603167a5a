#!/usr/bin/env python
"""
Test runner script for the workshop dashboard
"""

import os
import sys
import subprocess
import argparse


def main():
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(description='Run workshop dashboard tests')
    parser.add_argument(
        '--api', action='store_true', help='Run only page/route tests'
    )
    parser.add_argument(
        '--unit', action='store_true', help='Run only unit tests'
    )
    parser.add_argument(
        '--cov', action='store_true', help='Run with coverage report'
    )
    parser.add_argument(
        '--api-url', help='Workshop API base URL to use for the run (WORKSHOP_API_URL)'
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true', help='Verbose output'
    )
    parser.add_argument(
        'pytest_args', nargs='*', help='Additional pytest arguments'
    )

    args = parser.parse_args()

    # Build command
    cmd = ['pytest']

    if args.api:
        cmd.append('tests/dashboard/api')
    elif args.unit:
        cmd.extend(['tests/dashboard', '--ignore=tests/dashboard/api'])

    if args.verbose:
        cmd.append('-v')

    if args.cov:
        cmd.append('--cov=src')
        cmd.append('--cov-report=term')

    # Add any additional pytest args
    cmd.extend(args.pytest_args)

    # Set environment variables
    env = os.environ.copy()
    if args.api_url:
        env['WORKSHOP_API_URL'] = args.api_url

    # Run the command
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env)
    return result.returncode


if __name__ == '__main__':
    sys.exit(main())
