import pytest

from cross_hinge.core.mechanism import MechanismState


@pytest.fixture
def reference():
    return MechanismState((250, 500), (500, 450), (300, 450), (550, 500))
