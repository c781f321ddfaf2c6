'''
Run the test suite.
'''

from __future__ import annotations


import sys

import pytest

sys.exit(pytest.main(['-v', 'tests/']))
