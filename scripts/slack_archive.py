#!/usr/bin/env python3
"""Archive old Slack files into a local directory tree."""
from slackfiles.archive.cli import run_main

if __name__ == "__main__":
    run_main()
