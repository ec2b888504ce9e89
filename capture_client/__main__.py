# -*- coding: utf-8 -*-
import sys

from capture_client.cli import main

sys.exit(main())
