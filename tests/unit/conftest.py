"""Unit test configuration.

Unit tests are fast and isolated: Redis, the classifier service and the
clock are all replaced with doubles.
"""

import pytest


# Mark all tests in this directory as unit tests
pytestmark = pytest.mark.unit
