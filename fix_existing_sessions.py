#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Wrapper to run the session repair pass from the repository root"""

import sys

from session_repair.fix_sessions import main

if __name__ == "__main__":
    sys.exit(main())
