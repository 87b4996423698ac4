#!/usr/bin/env python3
# encoding: utf-8
import sys

from . import main


sys.exit(main())
